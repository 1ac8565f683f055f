"""
Runtime settings and packaged configuration data for LoanRisk.
"""

from importlib.resources import files
from pathlib import Path

from loanrisk.config.settings import EngineSettings, get_engine_settings

DEFAULT_CONFIG_FILE = "loan_risk.yaml"


def default_config_path() -> Path:
    """Path of the packaged loan risk configuration."""
    return Path(str(files("loanrisk.config").joinpath(DEFAULT_CONFIG_FILE)))


__all__ = [
    "DEFAULT_CONFIG_FILE",
    "EngineSettings",
    "default_config_path",
    "get_engine_settings",
]
