"""Command-line interface for cronbits.

Commands:
    cronbits parse EXPR      Show the values each field permits
    cronbits next EXPR       Show upcoming run times
    cronbits validate EXPR   Exit with 1 if the expression is invalid
    cronbits presets         List predefined schedules
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from cronbits.config import ConfigError, CronConfig, get_config
from cronbits.errors import CronParseError, ScheduleExhaustedError
from cronbits.fields import FIELD_CONSTRAINTS, FIELD_ORDER
from cronbits.logging import LogConfig, configure_logging
from cronbits.parser import parse, parse_with_hash
from cronbits.presets import PRESETS
from cronbits.resolver import parse_int
from cronbits.schedule import Schedule

app = typer.Typer(
    name="cronbits",
    help="Parse cron expressions and compute their next run times",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


# =============================================================================
# Type Aliases
# =============================================================================

ExprArg = Annotated[str, typer.Argument(help="Cron expression or @name, quoted")]

HashOpt = Annotated[
    Optional[bool],
    typer.Option("--hash/--no-hash", help="Allow the H symbol (default: CRONBITS_HASHED)"),
]

SeedOpt = Annotated[
    Optional[str],
    typer.Option("--seed", "-s", help="Seed for H; digits are read as an integer"),
]


# =============================================================================
# Helpers
# =============================================================================


def _load_config() -> CronConfig:
    try:
        return get_config()
    except ConfigError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(2)


def _seed_value(seed: str) -> int | str:
    n = parse_int(seed)
    return n if n is not None else seed


def _parse(expression: str, hashed: bool | None, seed: str | None) -> Schedule:
    config = _load_config()
    if hashed is None:
        hashed = config.hashed
    seed = seed if seed is not None else config.seed

    try:
        if hashed:
            if seed is None:
                typer.echo("Error: --seed (or CRONBITS_SEED) is required with --hash", err=True)
                raise typer.Exit(1)
            return parse_with_hash(expression, _seed_value(seed))
        return parse(expression)
    except CronParseError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def _reference_time(after: str | None, config: CronConfig) -> datetime:
    if after is None:
        return datetime.now(config.tzinfo)
    try:
        dt = datetime.fromisoformat(after)
    except ValueError:
        typer.echo(f"Error: --after must be an ISO 8601 time, got {after!r}", err=True)
        raise typer.Exit(1)
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=config.tzinfo)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug output to stderr"),
    ] = False,
) -> None:
    """Parse cron expressions and compute their next run times."""
    configure_logging(LogConfig.development() if verbose else LogConfig.from_environment())


# =============================================================================
# Commands
# =============================================================================


@app.command(name="parse")
def parse_cmd(
    expression: ExprArg,
    hashed: HashOpt = None,
    seed: SeedOpt = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print fields as JSON"),
    ] = False,
) -> None:
    """Show the values each field of EXPRESSION permits."""
    schedule = _parse(expression, hashed, seed)

    if as_json:
        data = {
            field_type.name.lower(): list(schedule.values(field_type))
            for field_type in FIELD_ORDER
        }
        typer.echo(json.dumps({"expression": expression, "fields": data}))
        return

    table = Table(title=expression, show_header=True, header_style="bold")
    table.add_column("Field", style="cyan")
    table.add_column("Values", style="white")
    for field_type, rendered in zip(FIELD_ORDER, schedule.describe().values()):
        table.add_row(FIELD_CONSTRAINTS[field_type].label, rendered)
    console.print(table)


@app.command(name="next")
def next_cmd(
    expression: ExprArg,
    after: Annotated[
        Optional[str],
        typer.Option("--after", "-a", help="Reference time, ISO 8601 (default: now)"),
    ] = None,
    count: Annotated[
        Optional[int],
        typer.Option("--count", "-n", min=1, help="Number of runs (default: CRONBITS_COUNT)"),
    ] = None,
    hashed: HashOpt = None,
    seed: SeedOpt = None,
) -> None:
    """Print the next run times of EXPRESSION, one per line."""
    config = _load_config()
    schedule = _parse(expression, hashed, seed)
    reference = _reference_time(after, config)

    runs = schedule.next_n(count or config.count, reference)
    if not runs:
        typer.echo(f"Warning: {expression!r} never fires", err=True)
        raise typer.Exit(1)
    for run in runs:
        typer.echo(run.isoformat(timespec="minutes"))


@app.command(name="validate")
def validate_cmd(
    expression: ExprArg,
    hashed: HashOpt = None,
) -> None:
    """Check EXPRESSION and report whether it can ever fire."""
    config = _load_config()
    if hashed is None:
        hashed = config.hashed

    try:
        schedule = parse_with_hash(expression, 0) if hashed else parse(expression)
        schedule.next(datetime(2000, 1, 1))
    except CronParseError as e:
        typer.echo(f"✗ {e}", err=True)
        raise typer.Exit(1)
    except ScheduleExhaustedError:
        typer.echo(f"✗ {expression!r} is valid but never fires", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ {expression}")


@app.command(name="presets")
def presets_cmd() -> None:
    """List predefined schedules."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Name", style="cyan")
    table.add_column("Schedule", style="white")
    for name, schedule in PRESETS.items():
        table.add_row(name, str(schedule))
    console.print(table)


if __name__ == "__main__":
    app()
