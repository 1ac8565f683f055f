"""CLI output helpers.

Human output uses Rich formatting; errors go to stderr so that JSON written
to stdout stays parseable.
"""

import json
from typing import Any

from rich.console import Console
from rich.markup import escape

from loanrisk.errors import ConfigurationError

# Console instances for stdout and stderr
console = Console()
error_console = Console(stderr=True)


def print_json(data: Any) -> None:
    """Print ``data`` as indented JSON on stdout."""
    print(json.dumps(data, indent=2))


def print_error(message: str, error: Exception | None = None) -> None:
    """Print an error message with the error code, context and suggestion if known.

    Args:
        message: The error message to display.
        error: Optional exception carrying ``error_code`` / ``suggestion``.
    """
    error_prefix = "[red bold]Error:[/red bold]"
    error_code = getattr(error, "error_code", None)
    if error_code:
        error_console.print(
            f"{error_prefix} {escape(f'[{error_code}]')} {escape(message)}",
            soft_wrap=True,
        )
    else:
        error_console.print(f"{error_prefix} {escape(message)}", soft_wrap=True)

    if isinstance(error, ConfigurationError) and error.context:
        context = ", ".join(f"{key}={value}" for key, value in error.context.items())
        error_console.print(f"  [yellow]Context:[/yellow] {escape(context)}")

    suggestion = getattr(error, "suggestion", None)
    if suggestion:
        error_console.print(f"\n[cyan]Suggestion:[/cyan] {escape(suggestion)}")
