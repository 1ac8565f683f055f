"""
Global test fixtures for the LoanRisk project.

The minimal fuzzy system used throughout the tests has one input ``v`` on
[0, 10] with sets Lo=(0, 0, 4, 6) and Hi=(4, 6, 10, 10), and the output
``risk`` on [0, 100] with sets Low=(0, 0, 40, 60) and High=(40, 60, 100, 100).
Two rules map Lo to Low and Hi to High.
"""

import copy
import logging
import logging.handlers

import pytest

from loanrisk.fuzzy.config import FuzzyConfigLoader
from loanrisk.fuzzy.engine import FuzzyInferenceEngine
from loanrisk.logging import set_debug_mode

MINIMAL_CONFIG = {
    "output": "risk",
    "variables": {
        "v": {
            "min": 0,
            "max": 10,
            "sets": {
                "Lo": {"type": "trapezoidal", "parameters": [0, 0, 4, 6]},
                "Hi": {"type": "trapezoidal", "parameters": [4, 6, 10, 10]},
            },
        },
        "risk": {
            "min": 0,
            "max": 100,
            "sets": {
                "Low": {"type": "trapezoidal", "parameters": [0, 0, 40, 60]},
                "High": {"type": "trapezoidal", "parameters": [40, 60, 100, 100]},
            },
        },
    },
    "rules": [
        {"when": [["v", "Lo"]], "then": ["risk", "Low"], "description": "low v"},
        {"when": [["v", "Hi"]], "then": ["risk", "High"], "description": "high v"},
    ],
}


@pytest.fixture
def minimal_config_dict():
    """A fresh copy of the minimal configuration document."""
    return copy.deepcopy(MINIMAL_CONFIG)


@pytest.fixture
def minimal_config(minimal_config_dict):
    return FuzzyConfigLoader.load_from_dict(minimal_config_dict)


@pytest.fixture
def minimal_system(minimal_config):
    """``(registry, rule_base)`` built from the minimal configuration."""
    return minimal_config.build()


@pytest.fixture
def minimal_engine(minimal_config):
    return FuzzyInferenceEngine.from_config(minimal_config)


@pytest.fixture
def default_engine():
    """Engine for the packaged loan risk configuration."""
    return FuzzyInferenceEngine.from_config(FuzzyConfigLoader().load_default())


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by configure_logging (CLI runs, logging tests)."""
    root = logging.getLogger()
    level = root.level
    set_debug_mode(False)
    yield
    for handler in root.handlers[:]:
        if type(handler) in (logging.StreamHandler, logging.handlers.RotatingFileHandler):
            handler.close()
            root.removeHandler(handler)
    root.setLevel(level)
    set_debug_mode(False)
    logging.getLogger("loanrisk").setLevel(logging.NOTSET)
