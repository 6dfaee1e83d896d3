"""CLI for the LLM log inspector."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import pydantic
import structlog
import typer
from rich.console import Console
from rich.json import JSON
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from llm_log_inspector import __version__
from llm_log_inspector.core.config import InspectorConfig, load_config
from llm_log_inspector.core.errors import (
    AcquisitionError,
    ConfigurationError,
    InvalidInputError,
)
from llm_log_inspector.models import LogRecord, PromptEntry, PromptMarker, Turn
from llm_log_inspector.pipeline import Inspection, InspectionSession
from llm_log_inspector.services.acquisition import read_input
from llm_log_inspector.services.reporting import format_number, generate_markdown_report
from llm_log_inspector.services.storage import SummaryStore

# Configure structlog
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

app = typer.Typer(
    name="llm-log-inspector",
    help="LLM Log Inspector - cost, duration and bottlenecks of pasted LLM interaction logs",
    add_completion=False,
)
console = Console()

SourceArg = Annotated[
    str, typer.Argument(help="Log file path, '-' for stdin, or 'clipboard'")
]
ConfigOpt = Annotated[
    Path | None, typer.Option("--config", "-c", help="Path to config YAML file")
]
VerboseOpt = Annotated[bool, typer.Option("--verbose", "-V", help="Verbose output")]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"llm-log-inspector v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """LLM Log Inspector CLI."""


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load_config(config_path: Path | None) -> InspectorConfig:
    if config_path is None:
        return InspectorConfig()
    return load_config(config_path)


def _load_session(source: str, config: InspectorConfig) -> InspectionSession:
    text = asyncio.run(read_input(source))
    session = InspectionSession(config)
    session.load_text(text)
    return session


def _print_totals(inspection: Inspection, config: InspectorConfig) -> None:
    summary = inspection.summary
    inr = round(summary.total_cost_usd * config.usd_to_inr_rate)
    console.print(
        f"[bold]Total Cost:[/bold] ${summary.total_cost_usd:.3f} / INR {inr}    "
        f"[bold]Total Duration:[/bold] {summary.total_duration_s:g} seconds"
    )
    invalid = summary.invalid_numeric_ids()
    if invalid:
        console.print(
            f"[yellow]{len(invalid)} record(s) have undecodable numeric fields "
            "and are left out of the totals[/yellow]"
        )


def _print_events(inspection: Inspection) -> None:
    table = Table(title="Events")
    table.add_column("#", justify="right")
    table.add_column("Event")
    table.add_column("Start")
    table.add_column("Model")
    table.add_column("Duration (ms)", justify="right")
    table.add_column("Bottleneck")

    for index, record in enumerate(inspection.summary.sorted_records()):
        marker = "[red]yes[/red]" if inspection.is_bottleneck(record.id) else ""
        table.add_row(
            str(index),
            escape(record.associated_event_name),
            record.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            escape(record.model),
            format_number(record.duration_ms),
            marker,
        )
    console.print(table)


def _render_text(text: str, is_json: bool, title: str, style: str) -> None:
    body = JSON(text) if is_json else Text(text)
    console.print(Panel(body, title=title, border_style=style))


def _print_entry(entry: PromptEntry, title: str) -> None:
    if isinstance(entry, Turn):
        style = "blue" if entry.role == "user" else "green"
        _render_text(entry.content, entry.is_json, f"{title} - {escape(entry.role)}", style)
    elif entry is PromptMarker.SIZE_LIMITED:
        console.print(f"[red]{title}: Turn was reduced due to size limit.[/red]")


def _print_record(record: LogRecord, all_turns: bool) -> None:
    badges = [
        record.model,
        f"{format_number(record.duration_ms)} ms",
        f"{format_number(record.prompt_tokens)} prompt tokens",
        f"{format_number(record.completion_tokens)} completion tokens",
    ]
    console.print(f"[bold]{escape(record.associated_event_name)}[/bold]  ({record.id})")
    console.print("  ".join(f"[reverse] {escape(badge)} [/reverse]" for badge in badges))
    if record.has_error:
        console.print(f"[bold red]Error: {escape(record.error)}[/bold red]")

    if all_turns:
        for idx, entry in enumerate(record.prompt):
            _print_entry(entry, f"Turn {idx + 1}")
    elif record.last_turn is not None:
        _print_entry(record.last_turn, "Last User Turn")

    _render_text(record.response, record.response_is_json, "Response", "yellow")


@app.command()
def inspect(
    source: SourceArg,
    config_path: ConfigOpt = None,
    save: Annotated[
        Path | None, typer.Option("--save", help="Write the summary snapshot to this path")
    ] = None,
    report: Annotated[
        Path | None, typer.Option("--report", help="Write a markdown report to this path")
    ] = None,
    verbose: VerboseOpt = False,
) -> None:
    """Parse a log batch and show totals, events and bottlenecks."""
    _configure_logging(verbose)
    try:
        config = _load_config(config_path)
        session = _load_session(source, config)
        inspection = session.inspection

        _print_totals(inspection, config)
        _print_events(inspection)

        snapshot_path = save or config.get_snapshot_path()
        if snapshot_path is not None:
            asyncio.run(SummaryStore(snapshot_path).save(inspection.summary))
            console.print(f"Summary saved to: {snapshot_path}")
        if report is not None:
            report.parent.mkdir(parents=True, exist_ok=True)
            report.write_text(
                generate_markdown_report(inspection, config.usd_to_inr_rate), encoding="utf-8"
            )
            console.print(f"Report saved to: {report}")

    except AcquisitionError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1) from e
    except InvalidInputError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1) from e
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e
    except (ConfigurationError, pydantic.ValidationError) as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1) from e


@app.command()
def show(
    source: SourceArg,
    record_id: Annotated[str | None, typer.Option("--id", help="Record id")] = None,
    index: Annotated[
        int | None, typer.Option("--index", "-i", help="Position in the event list")
    ] = None,
    all_turns: Annotated[
        bool, typer.Option("--all-turns/--last-turn", help="Show every prompt turn")
    ] = False,
    config_path: ConfigOpt = None,
    verbose: VerboseOpt = False,
) -> None:
    """Show one record in detail (defaults to the first event)."""
    _configure_logging(verbose)
    try:
        session = _load_session(source, _load_config(config_path))
        if record_id is not None:
            session.select(record_id)
        elif index is not None:
            ordered = session.summary.sorted_records()
            if not 0 <= index < len(ordered):
                console.print(f"[red]Index out of range:[/red] {index}")
                raise typer.Exit(1)
            session.select(ordered[index].id)

        record = session.selected
        if record is None:
            console.print("Select an event to view details.")
            raise typer.Exit(1)
        _print_record(record, all_turns)

    except KeyError as e:
        console.print(f"[red]Unknown record id:[/red] {e.args[0]}")
        raise typer.Exit(1) from e
    except (AcquisitionError, InvalidInputError) as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1) from e
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e
    except (ConfigurationError, pydantic.ValidationError) as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1) from e


@app.command()
def load(
    snapshot: Annotated[Path, typer.Argument(help="Path to a saved summary snapshot")],
    config_path: ConfigOpt = None,
) -> None:
    """Show totals and events from a saved summary snapshot."""
    try:
        config = _load_config(config_path)
        summary = asyncio.run(SummaryStore(snapshot).load())
        if summary is None:
            console.print(f"[red]Error:[/red] No snapshot at {snapshot}")
            raise typer.Exit(1)
        session = InspectionSession(config)
        inspection = session.load_summary(summary)
        _print_totals(inspection, config)
        _print_events(inspection)
    except InvalidInputError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1) from e
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e
    except (ConfigurationError, pydantic.ValidationError) as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1) from e


@app.command()
def validate(
    config_path: Annotated[Path, typer.Argument(help="Path to config YAML file")],
) -> None:
    """Validate a configuration file.

    Args:
        config_path: Path to YAML configuration file.
    """
    try:
        config = load_config(config_path)
        console.print("[green]Configuration is valid![/green]")
        console.print(f"  Pricing rules: {', '.join(r.pattern for r in config.pricing)}")
        console.print(f"  Duration mode: {config.duration_mode}")
        console.print(f"  Bottleneck threshold: {config.bottleneck_threshold}")
        console.print(f"  Event name prefixes: {escape(str(config.event_name_prefixes))}")

    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e
    except (ConfigurationError, pydantic.ValidationError) as e:
        console.print(f"[red]Validation error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e


@app.command()
def info() -> None:
    """Show tool information and example commands."""
    console.print("[bold]LLM Log Inspector[/bold]")
    console.print(f"Version: {__version__}\n")

    console.print("[bold]Example Commands:[/bold]")
    console.print("  # Inspect logs copied to the clipboard")
    console.print("  uv run llm-log-inspector inspect clipboard\n")

    console.print("  # Inspect a file and keep a snapshot")
    console.print("  uv run llm-log-inspector inspect logs.tsv --save runs/summary.json\n")

    console.print("  # Show the third event with every prompt turn")
    console.print("  uv run llm-log-inspector show logs.tsv --index 2 --all-turns\n")

    console.print("  # Re-open a snapshot")
    console.print("  uv run llm-log-inspector load runs/summary.json\n")

    console.print("  # Validate config")
    console.print("  uv run llm-log-inspector validate config.yaml")


if __name__ == "__main__":
    app()
