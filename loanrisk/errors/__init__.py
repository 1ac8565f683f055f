"""
Error handling framework for LoanRisk.
"""

from loanrisk.errors.exceptions import (
    ConfigurationError,
    ConfigurationFileError,
    InvalidConfigurationError,
    LoanRiskError,
    ProcessingError,
)

__all__ = [
    "LoanRiskError",
    "ConfigurationError",
    "InvalidConfigurationError",
    "ConfigurationFileError",
    "ProcessingError",
]
