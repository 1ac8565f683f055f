"""CLI state management.

Holds CLI-wide flags set by the root Typer callback and passed to commands
through the Typer context.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CLIState:
    """Immutable state object for CLI-wide configuration.

    Attributes:
        verbose: If True, debug logging is enabled and errors include tracebacks.
    """

    verbose: bool = False
