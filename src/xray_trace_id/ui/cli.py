"""CLI for generating and inspecting trace IDs.

This module provides a Typer-based command-line interface, installed as the
``trace-id`` console script.
"""

import json
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from xray_trace_id.config import load_env_files
from xray_trace_id.random_source import RandomSource, SeededRandomSource
from xray_trace_id.telemetry import configure_logging
from xray_trace_id.trace_id import TRIMMED_CHARACTERS, TraceID

app = typer.Typer(help="Generate, parse and inspect trace IDs")
console = Console()


def _describe(trace_id: TraceID) -> dict[str, Any]:
    return {
        "trace_id": trace_id.format(),
        "epoch_seconds": trace_id.epoch_seconds,
        "start_time": trace_id.start_datetime.isoformat(),
        "random_value": f"{trace_id.random_value:024x}",
        "valid": trace_id.is_valid(),
    }


@app.command(name="new")
def new_command(
    count: int = typer.Option(1, "--count", "-n", min=1, help="Number of trace IDs to generate"),
    seed: Optional[int] = typer.Option(
        None, "--seed", min=0, help="Seed for reproducible output (never use for real traces)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as a JSON array"),
) -> None:
    """Generate new trace IDs.

    Examples:
        trace-id new
        trace-id new --count 5 --json
        trace-id new --seed 42
    """
    source: Optional[RandomSource] = SeededRandomSource(seed) if seed is not None else None
    trace_ids = [TraceID.create(random_source=source).format() for _ in range(count)]

    if json_output:
        typer.echo(json.dumps(trace_ids, indent=2))
        return

    for trace_id in trace_ids:
        typer.echo(trace_id)


@app.command(name="parse")
def parse_command(
    text: str = typer.Argument(..., help="Trace ID text, e.g. from a propagation header"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON instead of a table"),
) -> None:
    """Parse a trace ID and show its fields.

    Malformed input is replaced by a new trace ID, exactly as tracing
    middleware would do; the output says which happened.

    Examples:
        trace-id parse 1-5759e988-bd862e3fe1be46a994272793
        trace-id parse garbage --json
    """
    trace_id = TraceID.parse(text)
    accepted = trace_id.format() == text.strip(TRIMMED_CHARACTERS).lower()
    details = {"input": text, "accepted": accepted, **_describe(trace_id)}

    if json_output:
        typer.echo(json.dumps(details, indent=2))
        return

    table = Table(title="Trace ID")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white", overflow="fold")
    for key, value in details.items():
        table.add_row(key, str(value))
    console.print(table)

    if not accepted:
        console.print("[yellow]Input is not a valid trace ID; a new trace was started.[/yellow]")


@app.command(name="invalid")
def invalid_command() -> None:
    """Print the "no trace" sentinel ID."""
    typer.echo(TraceID.invalid().format())


def main() -> None:
    """Console script entry point.

    Only the CLI reads .env files and installs a log handler; importing the
    library leaves the host's logging untouched.
    """
    load_env_files(Path.cwd())
    configure_logging()
    app()


if __name__ == "__main__":
    main()
