"""View preference commands.

Preferences hold the saved list filters and sort order of the signed-in
user. They are stored locally and never synced.
"""

import typer

from chromatask_cli.models.exceptions import ValidationError
from chromatask_cli.utils.typer_helpers import SuggestingGroup
from chromatask_cli.utils.ui.formatters import format_output, format_success

from .decorators import command_wrapper
from .session import open_session, resolve_output
from .tasks import build_filters

app = typer.Typer(cls=SuggestingGroup, help="View preference commands")


@app.command("show")
@command_wrapper
async def show_prefs(
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Show the saved filters and sort order."""
    output = resolve_output(output)
    async with open_session(load_tasks=False) as session:
        prefs = session.load_preferences()
        format_output(prefs.to_document(), output)


@app.command("set")
@command_wrapper
async def set_prefs(
    status: str | None = typer.Option(None, "--status", help="all, open or done"),
    search: str | None = typer.Option(None, "--search", "-s", help="Title search term"),
    tag: str | None = typer.Option(None, "--tag", "-t", help="Tag filter"),
    date_from: str | None = typer.Option(None, "--from", help="Date range start (YYYY-MM-DD)"),
    date_to: str | None = typer.Option(None, "--to", help="Date range end (YYYY-MM-DD)"),
    sort: str | None = typer.Option(None, "--sort", help="Sort key"),
    descending: bool | None = typer.Option(None, "--desc/--asc", help="Sort direction"),
) -> None:
    """Change individual saved preferences."""
    options = (status, search, tag, date_from, date_to, sort, descending)
    if all(value is None for value in options):
        raise ValidationError("No preferences specified")

    async with open_session(load_tasks=False) as session:
        filters = build_filters(
            session.saved_filters(),
            status=status,
            search=search,
            tag=tag,
            date_from=date_from,
            date_to=date_to,
            sort=sort,
            descending=descending,
        )
        session.save_filters(filters)
        format_success("Preferences saved")


@app.command("reset")
@command_wrapper
async def reset_prefs() -> None:
    """Restore the default preferences."""
    async with open_session(load_tasks=False) as session:
        session.preferences.reset(session.collection.require_user().uid)
        format_success("Preferences reset")
