"""Attachment commands."""

from pathlib import Path

import typer

from chromatask_cli.utils.typer_helpers import SuggestingGroup
from chromatask_cli.utils.ui.formatters import format_output, format_success

from .decorators import command_wrapper
from .session import open_session, resolve_output

app = typer.Typer(cls=SuggestingGroup, help="Attachment commands")


@app.command("add")
@command_wrapper
async def add_attachment(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    file_path: Path = typer.Argument(..., help="File to attach"),
    name: str | None = typer.Option(None, "--name", help="Display name (default: file name)"),
) -> None:
    """Upload a file and attach it to a task."""
    async with open_session() as session:
        resolved = session.collection.resolve_task_id(task_id)
        task = await session.attachments.upload(resolved, file_path, name)
        attachment = task.attachments[-1]
        format_success(f"Attached {attachment.name}: {attachment.url}")


@app.command("remove")
@command_wrapper
async def remove_attachment(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    name: str = typer.Argument(..., help="Attachment name"),
) -> None:
    """Delete an attachment from a task and from storage."""
    async with open_session() as session:
        resolved = session.collection.resolve_task_id(task_id)
        await session.attachments.remove(resolved, name)
        format_success(f"Removed attachment {name}")


@app.command("list")
@command_wrapper
async def list_attachments(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """List the attachments of a task."""
    output = resolve_output(output)
    async with open_session() as session:
        task = session.collection.get_task(session.collection.resolve_task_id(task_id))
        items = [attachment.to_document() for attachment in task.attachments]
        # Attachments have no dedicated pretty view
        format_output(items, "table" if output == "pretty" else output)
