"""
Loan risk commands for the LoanRisk CLI.

- score: Evaluate one applicant and show the score, band and active rules
- rules: List every rule with its firing strength for one applicant
- variables: Show the declared variables, domains and fuzzy sets
- validate: Check a fuzzy system configuration file
"""

from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.table import Table

from loanrisk.cli.output import console, print_error, print_json
from loanrisk.cli.state import CLIState
from loanrisk.errors import LoanRiskError
from loanrisk.fuzzy.config import FuzzyConfigLoader
from loanrisk.fuzzy.engine import FuzzyInferenceEngine
from loanrisk.fuzzy.labels import RiskBand
from loanrisk.logging import get_logger

logger = get_logger(__name__)

_BAND_STYLES = {
    RiskBand.LOW.value: "green",
    RiskBand.MEDIUM.value: "yellow",
    RiskBand.HIGH.value: "red",
}

ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    help="Fuzzy system YAML file (defaults to LOANRISK_CONFIG_PATH or the packaged configuration)",
)
SetOption = typer.Option(
    None,
    "--set",
    "-s",
    help="Input value as name=value; repeat for several inputs",
)


def _fail(state: CLIState, error: Exception) -> NoReturn:
    """Report an error and exit with status 1."""
    print_error(getattr(error, "message", str(error)), error)
    if state.verbose:
        logger.error(f"Command failed: {error}", exc_info=True)
    raise typer.Exit(1)


def _load_engine(config_path: Optional[Path]) -> FuzzyInferenceEngine:
    loader = FuzzyConfigLoader()
    config = loader.load_from_yaml(config_path) if config_path else loader.load_default()
    return FuzzyInferenceEngine.from_config(config)


def parse_assignments(assignments: Optional[list[str]]) -> dict[str, float]:
    """Parse ``name=value`` pairs given on the command line.

    Raises:
        typer.BadParameter: If a pair is malformed or the value is not a number
    """
    values: dict[str, float] = {}
    for assignment in assignments or []:
        name, separator, raw_value = assignment.partition("=")
        name = name.strip()
        if not separator or not name:
            raise typer.BadParameter(
                f"Expected name=value, got '{assignment}'", param_hint="--set"
            )
        try:
            values[name] = float(raw_value)
        except ValueError:
            raise typer.BadParameter(
                f"Value for '{name}' is not a number: '{raw_value}'",
                param_hint="--set",
            ) from None
    return values


def _resolve_inputs(
    engine: FuzzyInferenceEngine, assignments: Optional[list[str]]
) -> dict[str, float]:
    inputs = engine.default_inputs()
    inputs.update(parse_assignments(assignments))
    return inputs


def _inputs_table(engine: FuzzyInferenceEngine, inputs: dict[str, float]) -> Table:
    table = Table(title="Inputs")
    table.add_column("Variable", style="cyan")
    table.add_column("Value", justify="right")
    table.add_column("Unit", style="dim")
    for variable in engine.input_variables:
        table.add_row(
            variable.label or variable.name,
            f"{inputs[variable.name]:g}",
            variable.unit or "",
        )
    return table


def score(
    ctx: typer.Context,
    config_path: Optional[Path] = ConfigOption,
    assignments: Optional[list[str]] = SetOption,
    json_output: bool = typer.Option(
        False, "--json", help="Print the full evaluation result as JSON"
    ),
) -> None:
    """
    Score one loan applicant.

    Inputs not given with --set take the default declared for their variable.

    Examples:
        loanrisk score
        loanrisk score --set income=2000 --set loan_amount=90000
        loanrisk score --set dependents=4 --json
    """
    state: CLIState = ctx.obj or CLIState()

    try:
        engine = _load_engine(config_path)
        inputs = _resolve_inputs(engine, assignments)
        result = engine.evaluate(inputs)
    except LoanRiskError as e:
        _fail(state, e)

    if json_output:
        print_json({"inputs": inputs, **result.to_dict()})
        return

    console.print(_inputs_table(engine, inputs))

    style = _BAND_STYLES[result.label]
    console.print(
        f"\n[bold]Risk score:[/bold] {result.score:.2f} "
        f"[{style}]({result.label} Risk)[/{style}]"
    )
    console.print(
        f"Active rules: {len(result.active_rules)} of {len(engine.rule_base)}"
    )

    if not result.has_activity:
        console.print("[yellow]No rule fired for these inputs.[/yellow]")
        return

    table = Table(title="Active rules")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Conditions")
    table.add_column("Risk", style="magenta")
    table.add_column("Strength", justify="right", style="green")
    table.add_column("Description", style="dim")
    for activation in sorted(
        result.active_rules, key=lambda a: a.strength, reverse=True
    ):
        conditions = " AND ".join(
            f"{a.variable} is {a.set_name} ({a.degree:.2f})"
            for a in activation.antecedents
        )
        table.add_row(
            str(activation.index + 1),
            conditions,
            activation.consequent_set,
            f"{activation.strength:.3f}",
            activation.description,
        )
    console.print(table)


def rules(
    ctx: typer.Context,
    config_path: Optional[Path] = ConfigOption,
    assignments: Optional[list[str]] = SetOption,
) -> None:
    """
    List every rule with its firing strength for one applicant.

    Examples:
        loanrisk rules
        loanrisk rules --set age=70 --set loan_amount=120000
    """
    state: CLIState = ctx.obj or CLIState()

    try:
        engine = _load_engine(config_path)
        result = engine.evaluate(_resolve_inputs(engine, assignments))
    except LoanRiskError as e:
        _fail(state, e)

    table = Table(title=f"Rule base ({len(engine.rule_base)} rules)")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Rule")
    table.add_column("Strength", justify="right")
    for index, (rule, strength) in enumerate(
        zip(engine.rule_base, result.rule_strengths)
    ):
        strength_text = (
            f"[green]{strength:.3f}[/green]" if strength > 0 else f"[dim]{strength:.3f}[/dim]"
        )
        table.add_row(str(index + 1), str(rule), strength_text)
    console.print(table)
    console.print(
        f"Active rules: {len(result.active_rules)} of {len(engine.rule_base)}"
    )


def variables(
    ctx: typer.Context,
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """
    Show the declared variables with their domains and fuzzy sets.
    """
    state: CLIState = ctx.obj or CLIState()

    try:
        engine = _load_engine(config_path)
    except LoanRiskError as e:
        _fail(state, e)

    table = Table(title="Variables")
    table.add_column("Name", style="cyan")
    table.add_column("Label")
    table.add_column("Domain", justify="right")
    table.add_column("Default", justify="right")
    table.add_column("Sets")
    for variable in engine.registry.variables:
        name = variable.name
        if variable.name == engine.registry.output_name:
            name = f"{name} (output)"
        domain = f"[{variable.min:g}, {variable.max:g}]"
        if variable.unit:
            domain = f"{domain} {variable.unit}"
        sets = "\n".join(
            f"{fuzzy_set.name}: [{', '.join(f'{p:g}' for p in fuzzy_set.parameters)}]"
            for fuzzy_set in variable.sets
        )
        table.add_row(
            name,
            variable.label or "",
            domain,
            "" if variable.default is None else f"{variable.default:g}",
            sets,
        )
    console.print(table)


def validate(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Fuzzy system YAML file to validate"),
) -> None:
    """
    Validate a fuzzy system configuration file.

    Exits with status 1 and the configuration error when the file is invalid.
    """
    state: CLIState = ctx.obj or CLIState()

    try:
        config = FuzzyConfigLoader().load_from_yaml(path)
    except LoanRiskError as e:
        console.print(f"[red]✗ {path} is invalid[/red]", soft_wrap=True)
        _fail(state, e)

    console.print(
        f"[green]✓ {path} is valid[/green] "
        f"({len(config.variables)} variables, {len(config.rules)} rules)",
        soft_wrap=True,
    )
