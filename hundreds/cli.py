"""Command-line interface for Hundreds.

Works directly against the configured history database, using the same
engine the HTTP API serves.
"""

from datetime import date
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from hundreds.bootstrap import build_tracker
from hundreds.calendar.aggregator import CompletionStatus, day_detail, load_month, month_title, weekday_headers
from hundreds.config.settings import settings
from hundreds.core.logger import setup_logger
from hundreds.errors import InvalidImportFormatError, StorageUnavailableError
from hundreds.exercises.catalog import ALL_KINDS, format_target, format_value, parse_kind, spec_of
from hundreds.progress.day_record import DayRecord, motivational_message
from hundreds.progress.engine import DayRecordEngine
from hundreds.transfer.service import import_file, write_export
from hundreds.utils.calendar import DAYS_IN_WEEK
from hundreds.utils.timezone import parse_date_key

console = Console()

app = typer.Typer(
    name="hundreds",
    help="Hundreds - daily pushups, situps, squats and running tracker",
    add_completion=False,
)

STATUS_STYLE = {
    CompletionStatus.NONE: "dim",
    CompletionStatus.PARTIAL: "bold yellow",
    CompletionStatus.COMPLETE: "bold green",
}


@app.callback()
def main(ctx: typer.Context, verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs")):
    """Load today's record before running a command."""
    setup_logger(level="DEBUG" if verbose else settings.log_level, log_file=settings.log_file)
    if ctx.obj is None:
        ctx.obj = build_tracker(settings)


def _tracker(ctx: typer.Context) -> DayRecordEngine:
    return ctx.obj


def _render_record(record: DayRecord, title: str | None = None) -> None:
    table = Table(title=title or f"Today ({record.date_key})")
    table.add_column("Exercise")
    table.add_column("Progress", justify="right")
    table.add_column("%", justify="right")
    for kind in ALL_KINDS:
        value = record.value_of(kind)
        table.add_row(
            spec_of(kind).display_name,
            f"{format_value(kind, value)}/{format_target(kind)}",
            f"{record.completion_percentage(kind):.0f}",
        )
    console.print(table)
    console.print(f"Total: {record.total_completion_percentage:.1f}%  {motivational_message(record.total_completion_percentage)}")


def _report_errors(tracker: DayRecordEngine) -> None:
    for error in tracker.drain_errors():
        console.print(f"[yellow]Warning:[/yellow] {error}")


def _resolve_exercise(name: str):
    try:
        return parse_kind(name)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


@app.command()
def today(ctx: typer.Context):
    """Show today's progress."""
    tracker = _tracker(ctx)
    tracker.check_rollover()
    _render_record(tracker.current)
    _report_errors(tracker)


@app.command("set")
def set_value(ctx: typer.Context, exercise: str, value: float):
    """Set an exercise to an exact value."""
    tracker = _tracker(ctx)
    tracker.check_rollover()
    _render_record(tracker.set_value(_resolve_exercise(exercise), value))
    _report_errors(tracker)


@app.command()
def add(
    ctx: typer.Context,
    exercise: str,
    times: int = typer.Option(1, "--times", "-n", min=1, help="How many increments to apply"),
):
    """Increment an exercise by its step (1 rep, or 0.1 mi for running)."""
    tracker = _tracker(ctx)
    tracker.check_rollover()
    kind = _resolve_exercise(exercise)
    record = tracker.current
    for _ in range(times):
        record = tracker.increment(kind)
    _render_record(record)
    _report_errors(tracker)


@app.command()
def remove(
    ctx: typer.Context,
    exercise: str,
    times: int = typer.Option(1, "--times", "-n", min=1, help="How many decrements to apply"),
):
    """Decrement an exercise by its step, never below zero."""
    tracker = _tracker(ctx)
    tracker.check_rollover()
    kind = _resolve_exercise(exercise)
    record = tracker.current
    for _ in range(times):
        record = tracker.decrement(kind)
    _render_record(record)
    _report_errors(tracker)


@app.command()
def reset(ctx: typer.Context, yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation")):
    """Reset today's progress to zero."""
    if not yes:
        typer.confirm("Reset all of today's progress?", abort=True)
    tracker = _tracker(ctx)
    _render_record(tracker.reset_today())
    _report_errors(tracker)


@app.command()
def calendar(
    ctx: typer.Context,
    year: int = typer.Option(None, help="Year to show (default: this year)"),
    month: int = typer.Option(None, min=1, max=12, help="Month to show (default: this month)"),
):
    """Show a month of history with per-day completion status."""
    tracker = _tracker(ctx)
    current: date = tracker.today
    year = year or current.year
    month = month or current.month
    first_weekday = settings.first_weekday_index

    try:
        cells = load_month(tracker.store, year, month, tracker.current, first_weekday)
    except StorageUnavailableError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    table = Table(title=month_title(year, month))
    for header in weekday_headers(first_weekday):
        table.add_column(header, justify="center")

    for start in range(0, len(cells), DAYS_IN_WEEK):
        row = []
        for cell in cells[start : start + DAYS_IN_WEEK]:
            label = cell.day_number
            if cell.is_today:
                label = f"[{label}]"
            row.append(f"[{STATUS_STYLE[cell.completion_status]}]{label}[/]" if label else "")
        row.extend([""] * (DAYS_IN_WEEK - len(row)))
        table.add_row(*row)

    console.print(table)
    _report_errors(tracker)


@app.command()
def day(ctx: typer.Context, date_key: str = typer.Argument(..., metavar="YYYY-MM-DD", help="Date to show")):
    """Show one day's values and completion."""
    try:
        selected = parse_date_key(date_key)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="YYYY-MM-DD") from e

    tracker = _tracker(ctx)
    try:
        detail = day_detail(tracker.store, selected, tracker.current)
    except StorageUnavailableError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    console.print(f"[bold]{detail.display_date}[/bold]  {detail.headline}")
    _render_record(detail.record, title=detail.record.date_key)
    _report_errors(tracker)


@app.command("export")
def export_command(
    ctx: typer.Context,
    destination: Path = typer.Argument(Path("."), help="File or directory to write the backup to"),
):
    """Export today's record and all history to a JSON backup."""
    tracker = _tracker(ctx)
    try:
        path = write_export(tracker, destination, settings.export_version)
    except StorageUnavailableError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    console.print(f"[green]Data exported successfully![/green] {path}")


@app.command("import")
def import_command(
    ctx: typer.Context,
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Backup file to import"),
):
    """Import a JSON backup. Days in the file overwrite stored days."""
    tracker = _tracker(ctx)
    try:
        report = import_file(tracker, source)
    except InvalidImportFormatError as e:
        console.print(f"[red]Error importing data.[/red] {e}")
        raise typer.Exit(1) from e

    console.print(f"[green]Imported {report.imported} day(s)[/green], skipped {report.skipped}")
    for error in report.errors:
        console.print(f"  [yellow]-[/yellow] {error}")


if __name__ == "__main__":
    app()
