"""
Exception hierarchy for LoanRisk.

Configuration errors are raised while a registry or rule base is being
loaded; processing errors are raised when a caller hands the engine an
input record that breaks its contract. Numeric edge cases (out-of-domain
values, rules that never fire) are not errors.
"""

from typing import Any, Optional


class LoanRiskError(Exception):
    """
    Base exception class for all LoanRisk errors.

    Attributes:
        message: Human-readable error message
        error_code: Optional error code for reference and documentation
        details: Optional dictionary with additional error details
        suggestion: Optional suggestion text for how to fix the error
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.suggestion = suggestion
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize error to a dictionary (used by the CLI's JSON output).

        Returns:
            Dictionary with all error information
        """
        return {
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
            "suggestion": self.suggestion,
        }

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


# --- Configuration Errors ---


class ConfigurationError(LoanRiskError):
    """
    Raised when a fuzzy variable, fuzzy set or rule configuration is malformed.

    The fix requires **editing the configuration**, never changing the
    crisp inputs. ``context`` says where the problem is (variable, set,
    rule index); ``details`` carries the offending values.

    Examples:
        >>> raise ConfigurationError(
        ...     message="Rule 3 references undeclared fuzzy set 'Huge'",
        ...     error_code="RULES-UnknownSet",
        ...     context={"rule_index": 3, "variable": "loan_amount"},
        ...     details={"set_name": "Huge", "available_sets": ["Small", "Large"]},
        ... )
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[dict[str, Any]] = None,
        details: Optional[dict[str, Any]] = None,
        suggestion: str = "",
    ) -> None:
        super().__init__(message, error_code, details)
        self.context = context or {}
        self.suggestion = suggestion

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "details": self.details,
            "suggestion": self.suggestion,
        }

    def format_user_message(self) -> str:
        """
        Format a user-friendly error message with all context.

        Returns:
            Formatted error message string
        """
        parts = [f"Error: {self.message}"]

        if self.error_code:
            parts.append(f"Code: {self.error_code}")

        if self.context:
            location = ", ".join(f"{key}: {value}" for key, value in self.context.items())
            parts.append(f"Location: {location}")

        if self.suggestion:
            parts.append(f"\nSuggestion: {self.suggestion}")

        return "\n".join(parts)


class InvalidConfigurationError(ConfigurationError):
    """Exception raised when a configuration document fails validation."""

    pass


class ConfigurationFileError(ConfigurationError):
    """Exception raised when there's an issue with a configuration file."""

    pass


# --- Processing Errors ---


class ProcessingError(LoanRiskError):
    """
    Raised when an evaluation request violates the engine's input contract.

    This covers missing or undeclared input variables and NaN crisp values.
    """

    pass
