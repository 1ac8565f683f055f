"""
Tests for risk bands.
"""

import pytest

from loanrisk.fuzzy.labels import (
    HIGH_RISK_THRESHOLD,
    LOW_RISK_THRESHOLD,
    RiskBand,
    risk_band,
    risk_label,
)


@pytest.mark.parametrize(
    "score, expected",
    [
        (0.0, "Low"),
        (39.999, "Low"),
        (40.0, "Medium"),
        (69.999, "Medium"),
        (70.0, "High"),
        (100.0, "High"),
    ],
)
def test_risk_label(score, expected):
    assert risk_label(score) == expected


def test_thresholds():
    assert LOW_RISK_THRESHOLD == 40.0
    assert HIGH_RISK_THRESHOLD == 70.0


def test_risk_band_enum():
    assert risk_band(10) is RiskBand.LOW
    assert risk_band(55) is RiskBand.MEDIUM
    assert risk_band(90) is RiskBand.HIGH
    assert RiskBand.MEDIUM == "Medium"


def test_custom_thresholds():
    assert risk_band(30, low_threshold=25, high_threshold=50) is RiskBand.MEDIUM
    assert risk_band(50, low_threshold=25, high_threshold=50) is RiskBand.HIGH
