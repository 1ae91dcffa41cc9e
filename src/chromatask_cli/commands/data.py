"""Data management commands (export, import)."""

from pathlib import Path

import typer
from rich.table import Table

from chromatask_cli.utils.typer_helpers import SuggestingGroup
from chromatask_cli.utils.ui.console import get_console
from chromatask_cli.utils.ui.formatters import format_success, format_warning

from .decorators import command_wrapper
from .session import open_session

app = typer.Typer(cls=SuggestingGroup, help="Data management (export, import)")
console = get_console()


@app.command("export")
@command_wrapper
async def export_data(
    output: Path | None = typer.Option(None, "--output", "-o", help="Output file path"),
    compress: bool = typer.Option(False, "--compress", "-z", help="Gzip the export"),
) -> None:
    """Export all of your tasks to a JSON file."""
    async with open_session() as session:
        path = session.data.export_tasks(output, compress=compress)
        format_success(f"Exported {len(session.collection.tasks)} tasks to {path}")


@app.command("import")
@command_wrapper
async def import_data(
    input_file: Path = typer.Argument(..., help="JSON or gzipped JSON export"),
) -> None:
    """Import tasks from an export file (always creates new tasks)."""
    async with open_session() as session:
        result = await session.data.import_tasks(input_file)

    table = Table(title="Import Summary", show_header=True)
    table.add_column("Result", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("Created", str(result.created))
    table.add_row("Skipped", str(result.skipped))
    console.print(table)

    for error in result.errors:
        format_warning(error)
    if result.created:
        format_success(f"Imported {result.created} tasks")
