"""Subtask (checklist) commands."""

import typer

from chromatask_cli.utils.typer_helpers import SuggestingGroup
from chromatask_cli.utils.ui.formatters import format_output, format_success

from .decorators import command_wrapper
from .session import open_session, resolve_output, task_view

app = typer.Typer(cls=SuggestingGroup, help="Subtask commands")


def _report(task, message: str, output: str) -> None:
    format_success(message)
    format_output({"tasks": [task_view(task)]}, output)


@app.command("add")
@command_wrapper
async def add_subtask(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    title: str = typer.Argument(..., help="Subtask title"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Append a subtask to a task."""
    output = resolve_output(output)
    async with open_session() as session:
        resolved = session.collection.resolve_task_id(task_id)
        task = await session.collection.add_subtask(resolved, title)
        _report(task, f"Subtask added: {task.subtasks[-1].id}", output)


@app.command("toggle")
@command_wrapper
async def toggle_subtask(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    subtask_id: str = typer.Argument(..., help="Subtask ID or prefix"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Flip a subtask; the task completes when all subtasks are done."""
    output = resolve_output(output)
    async with open_session() as session:
        resolved = session.collection.resolve_task_id(task_id)
        task = await session.collection.toggle_subtask(resolved, subtask_id)
        _report(task, "Subtask toggled", output)


@app.command("rename")
@command_wrapper
async def rename_subtask(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    subtask_id: str = typer.Argument(..., help="Subtask ID or prefix"),
    title: str = typer.Argument(..., help="New title"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Rename a subtask."""
    output = resolve_output(output)
    async with open_session() as session:
        resolved = session.collection.resolve_task_id(task_id)
        task = await session.collection.rename_subtask(resolved, subtask_id, title)
        _report(task, "Subtask renamed", output)


@app.command("remove")
@command_wrapper
async def remove_subtask(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    subtask_id: str = typer.Argument(..., help="Subtask ID or prefix"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Remove a subtask."""
    output = resolve_output(output)
    async with open_session() as session:
        resolved = session.collection.resolve_task_id(task_id)
        task = await session.collection.remove_subtask(resolved, subtask_id)
        _report(task, "Subtask removed", output)


@app.command("complete-all")
@command_wrapper
async def complete_all(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Mark every subtask done."""
    output = resolve_output(output)
    async with open_session() as session:
        resolved = session.collection.resolve_task_id(task_id)
        task = await session.collection.complete_all_subtasks(resolved)
        _report(task, "All subtasks completed", output)


@app.command("reopen-all")
@command_wrapper
async def reopen_all(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Mark every subtask open."""
    output = resolve_output(output)
    async with open_session() as session:
        resolved = session.collection.resolve_task_id(task_id)
        task = await session.collection.reopen_all_subtasks(resolved)
        _report(task, "All subtasks reopened", output)


@app.command("clear-done")
@command_wrapper
async def clear_done(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Drop the completed subtasks."""
    output = resolve_output(output)
    async with open_session() as session:
        resolved = session.collection.resolve_task_id(task_id)
        task = await session.collection.clear_completed_subtasks(resolved)
        _report(task, "Completed subtasks cleared", output)
