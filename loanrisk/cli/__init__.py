"""
Command line interface for LoanRisk.
"""

from loanrisk.cli.app import app

__all__ = ["app"]
