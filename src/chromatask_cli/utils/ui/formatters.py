"""Output formatters for different formats."""

import json
from typing import Any

import yaml
from rich.errors import StyleSyntaxError
from rich.markup import escape
from rich.style import Style
from rich.table import Table
from rich.text import Text

from chromatask_cli.utils.sanitize import strip_html
from chromatask_cli.utils.timestamps import ms_to_datetime
from chromatask_cli.utils.ui.console import get_console
from chromatask_cli.utils.uuid_utils import shorten_id

console = get_console()

OUTPUT_FORMATS = ("pretty", "table", "json", "yaml")

DUE_STYLES = {
    "overdue": "bold red",
    "today": "bold yellow",
    "soon": "yellow",
    "upcoming": "green",
    "done": "dim",
}


def format_output(data: Any, output_format: str = "pretty") -> None:
    """Format and display output based on format."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str, ensure_ascii=False))
    elif output_format == "yaml":
        print(yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True))
    elif output_format == "table":
        format_table(data)
    else:
        format_pretty(data)


def format_table(data: Any) -> None:
    """Format data as a table."""
    if not data:
        console.print("[yellow]No data to display[/yellow]")
        return

    if isinstance(data, list):
        if isinstance(data[0], dict):
            format_dict_table(data)
        else:
            for item in data:
                console.print(item)
    elif isinstance(data, dict):
        if "tasks" in data or "tags" in data:
            format_dict_table(data.get("tasks") or data.get("tags") or [])
        else:
            format_single_item(data)
    else:
        console.print(data)


def _timestamp(value: Any) -> str:
    moment = ms_to_datetime(value) if isinstance(value, int) else None
    return moment.strftime("%Y-%m-%d %H:%M UTC") if moment else "-"


def _cell(value: Any) -> str:
    if isinstance(value, bool):
        return "✓" if value else "✗"
    if isinstance(value, list):
        return ", ".join(
            str(v.get("name") or v.get("title") or v) if isinstance(v, dict) else str(v)
            for v in value
        )
    if value is None:
        return "-"
    return str(value)


def format_dict_table(items: list[dict]) -> None:
    """Format a list of dictionaries as a table."""
    if not items:
        console.print("[yellow]No items found[/yellow]")
        return

    columns = list(items[0].keys())
    table = Table(show_header=True, header_style="bold magenta")
    for col in columns:
        table.add_column(col)
    for item in items:
        table.add_row(*(_cell(item.get(col)) for col in columns))

    console.print(table)


def format_single_item(item: dict) -> None:
    """Format a single item as key-value pairs."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    for key, value in item.items():
        table.add_row(key, _cell(value))

    console.print(table)


def format_pretty(data: Any) -> None:
    """Human-oriented rendering of tasks and tags."""
    if isinstance(data, dict) and "tasks" in data:
        format_tasks_pretty(data["tasks"])
    elif isinstance(data, dict) and "tags" in data:
        format_tags_pretty(data["tags"])
    elif isinstance(data, dict):
        format_single_item(data)
    else:
        format_table(data)


def _safe_style(value: str, fallback: str = "") -> str:
    """Return *value* when Rich can parse it as a style, else *fallback*."""
    try:
        Style.parse(value)
    except StyleSyntaxError:
        return fallback
    return value


def _tag_text(tag: dict) -> Text:
    return Text(
        f" {tag.get('name', '')} ",
        style=_safe_style(f"{tag.get('textColor', '#000000')} on {tag.get('bgColor', '#cccccc')}"),
    )


def format_tasks_pretty(tasks: list[dict]) -> None:
    """Render one line per task with completion, priority, tags and progress.

    Each entry is a task document (camelCase keys) optionally carrying the
    derived ``progress``, ``priorityColor`` and ``dueStatus`` values.
    """
    if not tasks:
        console.print("[yellow]No tasks found[/yellow]")
        return

    for task in tasks:
        line = Text()
        line.append("[x] " if task.get("completed") else "[ ] ", style="bold")
        line.append(shorten_id(str(task.get("id", ""))), style="dim")
        line.append("  ")

        priority = task.get("priority")
        if priority:
            line.append(f"P{priority} ", style=_safe_style(task.get("priorityColor", "white")))
        if task.get("priorityLabel"):
            line.append(f"({task['priorityLabel']}) ", style="italic")

        title_style = _safe_style(task.get("titleTextColor", "white"), "white")
        if task.get("completed"):
            title_style += " strike"
        line.append(task.get("title", ""), style=title_style)

        for tag in task.get("tags") or []:
            line.append(" ")
            line.append_text(_tag_text(tag))

        subtasks = task.get("subtasks") or []
        if subtasks:
            done = sum(1 for item in subtasks if item.get("completed"))
            line.append(f"  {done}/{len(subtasks)} ({task.get('progress', 0):.0f}%)", style="cyan")

        due_status = task.get("dueStatus")
        if task.get("dueDate") and due_status:
            line.append(f"  due {task['dueDate']}", style=DUE_STYLES.get(due_status, ""))

        console.print(line)


def format_task_detail(task: dict) -> None:
    """Render a single task with its description, subtasks and attachments."""
    format_tasks_pretty([task])

    description = strip_html(task.get("description"))
    if description:
        console.print()
        console.print(
            Text(description, style=_safe_style(task.get("descriptionColor", "white"))),
            justify=task.get("textAlignDescription", "left"),
        )

    details = Table(show_header=False, box=None)
    details.add_column("Key", style="cyan")
    details.add_column("Value")
    for label, key in (
        ("Start", "startDate"),
        ("Due", "dueDate"),
        ("Title font", "titleFont"),
        ("Description font", "descriptionFont"),
        ("Font size", "descriptionFontSize"),
        ("Area color", "areaColor"),
        ("Alignment", "textAlignTitle"),
    ):
        details.add_row(label, _cell(task.get(key)))
    details.add_row("Created", _timestamp(task.get("createdAt")))
    details.add_row("Updated", _timestamp(task.get("updatedAt")))
    console.print()
    console.print(details)

    subtasks = task.get("subtasks") or []
    if subtasks:
        console.print()
        console.print("[bold]Subtasks[/bold]")
        for item in subtasks:
            mark = escape("[x]" if item.get("completed") else "[ ]")
            console.print(f"  {mark} [dim]{shorten_id(str(item.get('id', '')))}[/dim] {escape(item.get('title', ''))}")

    attachments = task.get("attachments") or []
    if attachments:
        console.print()
        console.print("[bold]Attachments[/bold]")
        for item in attachments:
            console.print(f"  {escape(str(item.get('name')))}  [dim]{escape(str(item.get('url')))}[/dim]")


def format_tags_pretty(tags: list[dict]) -> None:
    """Render tags as colored chips."""
    if not tags:
        console.print("[yellow]No tags found[/yellow]")
        return

    for tag in tags:
        line = Text()
        line.append(shorten_id(str(tag.get("id", ""))), style="dim")
        line.append("  ")
        line.append_text(_tag_text(tag))
        line.append(f"  {tag.get('bgColor')} / {tag.get('textColor')}", style="dim")
        console.print(line)


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {escape(message)}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {escape(message)}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[bold blue]Info:[/bold blue] {escape(message)}")
