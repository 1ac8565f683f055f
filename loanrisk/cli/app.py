"""CLI app entry point.

Provides the main Typer app with the global ``--verbose`` flag. Logging is
configured here, once per invocation, from :class:`EngineSettings`.
"""

import logging

import typer

from loanrisk.cli.commands import rules, score, validate, variables
from loanrisk.cli.state import CLIState
from loanrisk.config import get_engine_settings
from loanrisk.logging import configure_logging

app = typer.Typer(
    name="loanrisk",
    help="LoanRisk - fuzzy logic loan risk assessment.",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug output",
    ),
) -> None:
    """LoanRisk CLI - score loan applicants with a Mamdani fuzzy system."""
    settings = get_engine_settings()
    debug = verbose or settings.debug
    console_level = (
        logging.DEBUG
        if debug
        else getattr(logging, settings.log_level.upper(), logging.WARNING)
    )
    configure_logging(
        log_dir=settings.log_dir,
        console_level=console_level,
        config={"debug_mode": debug},
    )

    ctx.obj = CLIState(verbose=verbose)


app.command()(score)
app.command()(rules)
app.command()(variables)
app.command()(validate)
