"""
Logging system for LoanRisk.

Centralized logging configuration with console and rotating file output
plus helper decorators for common logging patterns.
"""

from loanrisk.logging.config import (
    configure_logging,
    get_logger,
    is_debug_mode,
    set_debug_mode,
)
from loanrisk.logging.helpers import log_performance

__all__ = [
    "configure_logging",
    "get_logger",
    "set_debug_mode",
    "is_debug_mode",
    "log_performance",
]
