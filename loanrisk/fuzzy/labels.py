"""
Risk bands derived from a defuzzified score.

The band depends on the score alone, so any consumer holding only the
score can reproduce it.
"""

from enum import Enum

LOW_RISK_THRESHOLD = 40.0
HIGH_RISK_THRESHOLD = 70.0


class RiskBand(str, Enum):
    """Coarse risk category shown next to a score."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


def risk_band(
    score: float,
    low_threshold: float = LOW_RISK_THRESHOLD,
    high_threshold: float = HIGH_RISK_THRESHOLD,
) -> RiskBand:
    """
    Map a score to its band: below ``low_threshold`` is Low, below
    ``high_threshold`` is Medium, anything else is High.
    """
    if score < low_threshold:
        return RiskBand.LOW
    if score < high_threshold:
        return RiskBand.MEDIUM
    return RiskBand.HIGH


def risk_label(score: float) -> str:
    """Band name (``"Low"``, ``"Medium"`` or ``"High"``) for a score."""
    return risk_band(score).value
