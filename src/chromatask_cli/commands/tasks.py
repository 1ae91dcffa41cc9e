"""Task management commands."""

import typer

from chromatask_cli.models import EditingTaskDraft, NewTaskDraft, TaskFilters
from chromatask_cli.models.core import PREDEFINED_FONTS, SortKey, StatusFilter
from chromatask_cli.models.exceptions import ValidationError
from chromatask_cli.utils.timestamps import parse_iso_date
from chromatask_cli.utils.typer_helpers import SuggestingGroup, split_csv
from chromatask_cli.utils.ui.console import get_console
from chromatask_cli.utils.ui.formatters import (
    format_info,
    format_output,
    format_success,
    format_task_detail,
)

from .decorators import command_wrapper
from .session import open_session, resolve_output, task_view

app = typer.Typer(cls=SuggestingGroup, help="Task management commands")
console = get_console()

STATUSES: tuple[StatusFilter, ...] = ("all", "open", "done")
SORT_KEYS: tuple[SortKey, ...] = ("priority", "createdAt", "updatedAt", "progress", "title")
PRIORITY_LABELS = ("low", "medium", "high", "urgent")


def _check_choice(value: str | None, choices: tuple[str, ...], option: str) -> None:
    if value is not None and value not in choices:
        raise ValidationError(f"Invalid {option} '{value}' (choose from {', '.join(choices)})")


def _check_date(value: str | None, option: str) -> str | None:
    if value is None or value == "":
        return None
    parsed = parse_iso_date(value)
    if parsed is None:
        raise ValidationError(f"Invalid {option} '{value}' (use YYYY-MM-DD)")
    return parsed


def _check_priority(value: int | None) -> None:
    if value is not None and not 0 <= value <= 5:
        raise ValidationError("Priority must be between 1 and 5 (0 clears it)")


def build_filters(
    base: TaskFilters,
    *,
    status: str | None = None,
    search: str | None = None,
    tag: str | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
    sort: str | None = None,
    descending: bool | None = None,
) -> TaskFilters:
    """Override saved filters with the options given on the command line."""
    _check_choice(status, STATUSES, "status")
    _check_choice(sort, SORT_KEYS, "sort key")
    updates = {
        "status": status,
        "search": search,
        "tag": tag,
        "sort_key": sort,
    }
    updates = {key: value for key, value in updates.items() if value is not None}
    # An empty date clears the bound
    if date_from is not None:
        updates["date_from"] = _check_date(date_from, "--from")
    if date_to is not None:
        updates["date_to"] = _check_date(date_to, "--to")
    if descending is not None:
        updates["sort_dir"] = "desc" if descending else "asc"
    return base.model_copy(update=updates)


@app.command("list")
@command_wrapper
async def list_tasks(
    status: str | None = typer.Option(None, "--status", help="all, open or done"),
    search: str | None = typer.Option(None, "--search", "-s", help="Search in titles"),
    tag: str | None = typer.Option(None, "--tag", "-t", help="Only tasks with this tag"),
    date_from: str | None = typer.Option(None, "--from", help="Start or due date on/after (YYYY-MM-DD)"),
    date_to: str | None = typer.Option(None, "--to", help="Start or due date on/before (YYYY-MM-DD)"),
    sort: str | None = typer.Option(
        None, "--sort", help="priority, createdAt, updatedAt, progress or title"
    ),
    descending: bool | None = typer.Option(None, "--desc/--asc", help="Sort direction"),
    save: bool = typer.Option(False, "--save", help="Remember these filters"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """List tasks using the saved filters, overridden by any options given."""
    output = resolve_output(output)
    async with open_session() as session:
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
        if save:
            session.save_filters(filters)
            format_info("Filters saved")

        tasks = session.collection.visible_tasks(filters)
        format_output({"tasks": [task_view(task) for task in tasks]}, output)


@app.command("show")
@command_wrapper
async def show_task(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Show one task with its description, subtasks and attachments."""
    output = resolve_output(output)
    async with open_session() as session:
        task = session.collection.get_task(session.collection.resolve_task_id(task_id))
        if output == "pretty":
            format_task_detail(task_view(task))
        else:
            format_output(task_view(task), output)


@app.command("add")
@command_wrapper
async def add_task(
    title: str = typer.Argument(..., help="Task title"),
    description: str = typer.Option("", "--description", "-d", help="Description (HTML allowed)"),
    priority: int | None = typer.Option(None, "--priority", "-p", help="Priority 1 (highest) to 5"),
    label: str | None = typer.Option(None, "--label", help="low, medium, high or urgent"),
    start: str | None = typer.Option(None, "--start", help="Start date (YYYY-MM-DD)"),
    due: str | None = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)"),
    tags: list[str] = typer.Option([], "--tag", "-t", help="Tag names (repeatable or comma-separated)"),
    title_color: str | None = typer.Option(None, "--title-color", help="Title text color"),
    title_font: str | None = typer.Option(None, "--title-font", help="Title font"),
    description_color: str | None = typer.Option(None, "--description-color", help="Description color"),
    description_font: str | None = typer.Option(None, "--description-font", help="Description font"),
    font_size: str | None = typer.Option(None, "--font-size", help="Description font size"),
    area_color: str | None = typer.Option(None, "--area-color", help="Background color"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Create a new task."""
    output = resolve_output(output)
    _check_priority(priority)
    _check_choice(label, PRIORITY_LABELS, "priority label")

    values = {
        "title": title,
        "description": description,
        "priority": priority or None,
        "priority_label": label,
        "start_date": _check_date(start, "--start"),
        "due_date": _check_date(due, "--due"),
        "title_text_color": title_color,
        "title_font": title_font,
        "description_color": description_color,
        "description_font": description_font,
        "description_font_size": font_size,
        "area_color": area_color,
    }
    draft = NewTaskDraft(**{key: value for key, value in values.items() if value is not None})

    names = [name for value in tags for name in split_csv(value)]
    async with open_session(load_tags=bool(names)) as session:
        task = await session.collection.create_task(draft)
        for name in names:
            task = await session.tags.attach_tag(task.id, name)
        format_success(f"Task created: {task.id}")
        format_output({"tasks": [task_view(task)]}, output)


@app.command("edit")
@command_wrapper
async def edit_task(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    title: str | None = typer.Option(None, "--title", help="New title"),
    description: str | None = typer.Option(None, "--description", "-d", help="New description"),
    priority: int | None = typer.Option(None, "--priority", "-p", help="Priority 1-5, 0 clears"),
    label: str | None = typer.Option(None, "--label", help="low, medium, high, urgent or none"),
    start: str | None = typer.Option(None, "--start", help="Start date, empty clears"),
    due: str | None = typer.Option(None, "--due", help="Due date, empty clears"),
    title_color: str | None = typer.Option(None, "--title-color", help="Title text color"),
    title_font: str | None = typer.Option(None, "--title-font", help="Title font"),
    description_color: str | None = typer.Option(None, "--description-color", help="Description color"),
    description_font: str | None = typer.Option(None, "--description-font", help="Description font"),
    font_size: str | None = typer.Option(None, "--font-size", help="Description font size"),
    area_color: str | None = typer.Option(None, "--area-color", help="Background color"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Edit a task; only the given options change."""
    output = resolve_output(output)
    _check_priority(priority)
    if label not in (None, "none"):
        _check_choice(label, PRIORITY_LABELS, "priority label")

    updates = {
        "title": title,
        "description": description,
        "title_text_color": title_color,
        "title_font": title_font,
        "description_color": description_color,
        "description_font": description_font,
        "description_font_size": font_size,
        "area_color": area_color,
    }
    updates = {key: value for key, value in updates.items() if value is not None}
    if priority is not None:
        updates["priority"] = priority or None
    if label is not None:
        updates["priority_label"] = None if label == "none" else label
    if start is not None:
        updates["start_date"] = _check_date(start, "--start")
    if due is not None:
        updates["due_date"] = _check_date(due, "--due")
    if not updates:
        raise ValidationError("No updates specified")

    async with open_session() as session:
        task = session.collection.get_task(session.collection.resolve_task_id(task_id))
        draft = EditingTaskDraft.from_task(task).model_copy(update=updates)
        task = await session.collection.save_edits(draft)
        format_success(f"Task updated: {task.id}")
        format_output({"tasks": [task_view(task)]}, output)


@app.command("delete")
@command_wrapper
async def delete_task(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a task and its attachments."""
    async with open_session() as session:
        task = session.collection.get_task(session.collection.resolve_task_id(task_id))
        if not yes and not typer.confirm(f"Delete task '{task.title}'?"):
            format_info("Cancelled")
            raise typer.Exit(0)
        await session.collection.delete_task(task.id)
        format_success(f"Task deleted: {task.id}")


@app.command("toggle")
@command_wrapper
async def toggle_task(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Flip a task between open and done (subtasks follow)."""
    output = resolve_output(output)
    async with open_session() as session:
        task = await session.collection.toggle_task(session.collection.resolve_task_id(task_id))
        state = "done" if task.completed else "open"
        format_success(f"Task {task.id} is now {state}")
        format_output({"tasks": [task_view(task)]}, output)


@app.command("align")
@command_wrapper
async def align_task(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    target: str = typer.Argument("title", help="title or description"),
) -> None:
    """Cycle the title or description alignment (left, center, right)."""
    _check_choice(target, ("title", "description"), "alignment target")
    async with open_session() as session:
        resolved = session.collection.resolve_task_id(task_id)
        if target == "title":
            task = await session.collection.cycle_title_alignment(resolved)
            alignment = task.text_align_title
        else:
            task = await session.collection.cycle_description_alignment(resolved)
            alignment = task.text_align_description
        format_success(f"{target.capitalize()} alignment: {alignment}")


@app.command("fonts")
def list_fonts() -> None:
    """List the predefined fonts (any font name is accepted)."""
    for font in PREDEFINED_FONTS:
        console.print(font)
