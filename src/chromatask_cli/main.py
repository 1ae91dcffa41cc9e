"""Main entry point for Chromatask CLI."""

import typer

from chromatask_cli import __version__
from chromatask_cli.commands import (
    attachments,
    auth,
    config,
    data,
    prefs,
    subtasks,
    tags,
    tasks,
)
from chromatask_cli.utils.typer_helpers import SuggestingGroup
from chromatask_cli.utils.ui.console import get_console

app = typer.Typer(
    name="chromatask",
    cls=SuggestingGroup,
    help="Colorful personal task manager: tasks, subtasks, tags and attachments",
    no_args_is_help=True,
)

console = get_console()


app.add_typer(auth.app, name="auth", help="Authentication commands")
app.add_typer(tasks.app, name="tasks", help="Task management commands")
app.add_typer(subtasks.app, name="subtasks", help="Subtask commands")
app.add_typer(tags.app, name="tags", help="Tag management commands")
app.add_typer(attachments.app, name="attachments", help="Attachment commands")
app.add_typer(prefs.app, name="prefs", help="Saved filters and sort order")
app.add_typer(data.app, name="data", help="Data management (export, import)")
app.add_typer(config.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]Chromatask CLI[/bold] version [cyan]{__version__}[/cyan]")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
