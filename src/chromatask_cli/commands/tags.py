"""Tag management commands."""

import typer

from chromatask_cli.models.core import DEFAULT_TAG_BG_COLOR, DEFAULT_TAG_TEXT_COLOR
from chromatask_cli.models.exceptions import ValidationError
from chromatask_cli.utils.typer_helpers import SuggestingGroup
from chromatask_cli.utils.ui.formatters import format_info, format_output, format_success

from .decorators import command_wrapper
from .session import open_session, resolve_output, task_view

app = typer.Typer(cls=SuggestingGroup, help="Tag management commands")


@app.command("list")
@command_wrapper
async def list_tags(
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """List your global tags."""
    output = resolve_output(output)
    async with open_session(load_tasks=False, load_tags=True) as session:
        format_output({"tags": [tag.to_document() for tag in session.tags.tags]}, output)


@app.command("create")
@command_wrapper
async def create_tag(
    name: str = typer.Argument(..., help="Tag name"),
    bg_color: str = typer.Option(DEFAULT_TAG_BG_COLOR, "--bg", help="Background color"),
    text_color: str = typer.Option(DEFAULT_TAG_TEXT_COLOR, "--fg", help="Text color"),
) -> None:
    """Create a global tag."""
    async with open_session(load_tasks=False, load_tags=True) as session:
        tag = await session.tags.create_tag(name, bg_color, text_color)
        format_success(f"Tag created: {tag.name}")


@app.command("edit")
@command_wrapper
async def edit_tag(
    tag: str = typer.Argument(..., help="Tag name or ID prefix"),
    name: str | None = typer.Option(None, "--name", help="New name"),
    bg_color: str | None = typer.Option(None, "--bg", help="New background color"),
    text_color: str | None = typer.Option(None, "--fg", help="New text color"),
) -> None:
    """Rename or recolor a tag on every task that carries it."""
    if name is None and bg_color is None and text_color is None:
        raise ValidationError("No updates specified")
    async with open_session(load_tags=True) as session:
        updated = await session.tags.edit_tag(
            tag, name=name, bg_color=bg_color, text_color=text_color
        )
        format_success(f"Tag updated: {updated.name}")


@app.command("delete")
@command_wrapper
async def delete_tag(
    tag: str = typer.Argument(..., help="Tag name or ID prefix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a tag and remove it from every task."""
    async with open_session(load_tags=True) as session:
        target = session.tags.resolve_tag(tag)
        if not yes and not typer.confirm(f"Delete tag '{target.name}' from all tasks?"):
            format_info("Cancelled")
            raise typer.Exit(0)
        await session.tags.delete_tag(target.id)
        format_success(f"Tag deleted: {target.name}")


@app.command("attach")
@command_wrapper
async def attach_tag(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    name: str = typer.Argument(..., help="Tag name (created if new)"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Attach a tag to a task, creating the tag when it does not exist."""
    output = resolve_output(output)
    async with open_session(load_tags=True) as session:
        resolved = session.collection.resolve_task_id(task_id)
        task = await session.tags.attach_tag(resolved, name)
        format_output({"tasks": [task_view(task)]}, output)


@app.command("select")
@command_wrapper
async def select_tag(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    name: str = typer.Argument(..., help="Existing tag name"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Attach an existing tag; unknown names are ignored."""
    output = resolve_output(output)
    async with open_session(load_tags=True) as session:
        resolved = session.collection.resolve_task_id(task_id)
        if session.tags.find_tag(name) is None:
            format_info(f"No tag named '{name}'")
        task = await session.tags.select_tag(resolved, name)
        format_output({"tasks": [task_view(task)]}, output)


@app.command("detach")
@command_wrapper
async def detach_tag(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    name: str = typer.Argument(..., help="Tag name"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Remove a tag from one task (the tag itself is kept)."""
    output = resolve_output(output)
    async with open_session() as session:
        resolved = session.collection.resolve_task_id(task_id)
        task = await session.tags.detach_tag(resolved, name)
        format_output({"tasks": [task_view(task)]}, output)
