"""Task helper utilities.

Pure functions over task models: load-time normalization, the filtered
and sorted display view, and derived display values.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import date
from typing import Any

from chromatask_cli.models import Task, TaskFilters
from chromatask_cli.models.core import ALIGNMENTS, DEFAULT_ALIGNMENT
from chromatask_cli.utils.sanitize import strip_html
from chromatask_cli.utils.timestamps import now_ms

PRIORITY_COLORS = {
    1: "#ff0000",
    2: "#ff7f00",
    3: "#ffff00",
    4: "#00ff00",
    5: "#0000ff",
}
NO_PRIORITY_COLOR = "#ffffff"
SOON_DAYS = 3


def effective_priority(task: Task) -> float:
    """Sort key for priority: the number when >= 1, otherwise infinity."""
    if task.priority is None or task.priority < 1:
        return math.inf
    return task.priority


def sort_by_priority(tasks: Iterable[Task]) -> list[Task]:
    """Stable ascending sort by effective priority."""
    return sorted(tasks, key=effective_priority)


def normalize_task_record(record: dict[str, Any]) -> Task:
    """Build a Task from a raw store record.

    The title loses its markup, missing subtask ids are generated by the
    Subtask model, and missing timestamps become the current time.
    """
    data = dict(record)
    data["title"] = strip_html(data.get("title"))
    data["description"] = data.get("description") or ""
    now = now_ms()
    for key in ("createdAt", "updatedAt"):
        if data.get(key) is None:
            data[key] = now
    subtasks = data.get("subtasks") or []
    data["subtasks"] = [item for item in subtasks if isinstance(item, dict)]
    return Task.model_validate(data)


def progress_percent(task: Task) -> float:
    """Share of completed subtasks, 0 when the task has none."""
    total = len(task.subtasks)
    if total == 0:
        return 0
    done = sum(1 for subtask in task.subtasks if subtask.completed)
    return done / total * 100


def derive_completed(task: Task) -> bool:
    """Completed state implied by the subtasks (False when there are none)."""
    return bool(task.subtasks) and all(subtask.completed for subtask in task.subtasks)


def _in_date_range(task: Task, date_from: str | None, date_to: str | None) -> bool:
    """Each set bound must be met by the start date or the due date."""
    days = [value[:10] for value in (task.start_date, task.due_date) if value]
    if date_from and not any(day >= date_from[:10] for day in days):
        return False
    if date_to and not any(day <= date_to[:10] for day in days):
        return False
    return True


_SORT_KEYS = {
    "priority": effective_priority,
    "createdAt": lambda task: task.created_at,
    "updatedAt": lambda task: task.updated_at,
    "progress": progress_percent,
    "title": lambda task: task.title,
}


def filter_and_sort_tasks(tasks: Iterable[Task], filters: TaskFilters) -> list[Task]:
    """Apply the display pipeline to *tasks* without mutating them.

    Order: status, title search, tag, date range, then a stable sort on the
    selected key.

    Args:
        tasks: Tasks in their current (priority) order
        filters: Status, search, tag, date bounds and sort selection

    Returns:
        A new list holding the visible tasks
    """
    result = list(tasks)

    if filters.status == "done":
        result = [task for task in result if task.completed]
    elif filters.status == "open":
        result = [task for task in result if not task.completed]

    if filters.search:
        needle = filters.search.lower()
        result = [task for task in result if needle in task.title.lower()]

    if filters.tag:
        result = [task for task in result if task.has_tag(filters.tag)]

    if filters.date_from or filters.date_to:
        result = [
            task for task in result if _in_date_range(task, filters.date_from, filters.date_to)
        ]

    key = _SORT_KEYS[filters.sort_key]
    return sorted(result, key=key, reverse=filters.sort_dir == "desc")


def priority_color(priority: int | None) -> str:
    """Display color for a numeric priority."""
    return PRIORITY_COLORS.get(priority, NO_PRIORITY_COLOR)


def cycle_alignment(current: str | None) -> str:
    """Next alignment in the left -> center -> right cycle."""
    if current not in ALIGNMENTS:
        current = DEFAULT_ALIGNMENT
    index = ALIGNMENTS.index(current)
    return ALIGNMENTS[(index + 1) % len(ALIGNMENTS)]


def due_status(task: Task, today: date | None = None) -> str:
    """Classify the due date: none, done, overdue, today, soon or upcoming."""
    if not task.due_date:
        return "none"
    if task.completed:
        return "done"
    today = today or date.today()
    due = date.fromisoformat(task.due_date)
    days_left = (due - today).days
    if days_left < 0:
        return "overdue"
    if days_left == 0:
        return "today"
    if days_left <= SOON_DAYS:
        return "soon"
    return "upcoming"
