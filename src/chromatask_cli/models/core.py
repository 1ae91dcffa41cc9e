"""Task, tag and preference data models.

Python attributes are snake_case; the document store and the export format
use the camelCase aliases generated from them (``title_text_color`` ->
``titleTextColor``).
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic.alias_generators import to_camel

from chromatask_cli.utils.timestamps import now_ms, parse_iso_date
from chromatask_cli.utils.uuid_utils import generate_id

Alignment = Literal["left", "center", "right"]
PriorityLabel = Literal["low", "medium", "high", "urgent"]
StatusFilter = Literal["all", "open", "done"]
SortKey = Literal["priority", "createdAt", "updatedAt", "progress", "title"]
SortDir = Literal["asc", "desc"]

ALIGNMENTS: tuple[str, ...] = ("left", "center", "right")
PRIORITY_LABELS: tuple[str, ...] = ("low", "medium", "high", "urgent")

DEFAULT_TITLE_TEXT_COLOR = "#ffffff"
DEFAULT_DESCRIPTION_COLOR = "#000000"
DEFAULT_FONT = "Arial"
DEFAULT_FONT_SIZE = "14"
DEFAULT_AREA_COLOR = "#808080"
DEFAULT_ALIGNMENT = "center"
DEFAULT_TAG_BG_COLOR = "#cccccc"
DEFAULT_TAG_TEXT_COLOR = "#000000"

PREDEFINED_FONTS = [
    "Arial",
    "Helvetica",
    "Times New Roman",
    "Courier New",
    "Verdana",
    "Sans",
    "Calibri",
    "Futura",
    "Roboto",
    "Open Sans",
    "Garamond",
]


def _coerce_priority(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _coerce_alignment(value: Any) -> str:
    return value if value in ALIGNMENTS else DEFAULT_ALIGNMENT


def _coerce_priority_label(value: Any) -> str | None:
    if isinstance(value, str) and value.lower() in PRIORITY_LABELS:
        return value.lower()
    return None


def _legacy_tag_color(data: Any) -> Any:
    # Early tag records stored the background under "color".
    if isinstance(data, dict) and "bgColor" not in data and "bg_color" not in data and data.get("color"):
        data = {**data, "bgColor": data["color"]}
    return data


class CamelModel(BaseModel):
    """Base model serialising to camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self, **kwargs: Any) -> dict[str, Any]:
        """Dump using the wire field names."""
        return self.model_dump(by_alias=True, **kwargs)


class TaskTag(CamelModel):
    """A tag as stored inside a task (a copy of the global tag's colors).

    Attributes:
        name: Tag name, unique per task (case-insensitive)
        bg_color: Background color
        text_color: Text color
    """

    name: str
    bg_color: str = DEFAULT_TAG_BG_COLOR
    text_color: str = DEFAULT_TAG_TEXT_COLOR

    @model_validator(mode="before")
    @classmethod
    def _legacy_color(cls, data: Any) -> Any:
        return _legacy_tag_color(data)


class Tag(CamelModel):
    """Global tag defined once per user.

    Attributes:
        id: Store-assigned identifier
        name: Tag name (unique per user, case-insensitive)
        bg_color: Background color
        text_color: Text color
        user_id: Owner identifier
        created_at: Creation time (epoch ms)
    """

    id: str
    name: str
    bg_color: str = DEFAULT_TAG_BG_COLOR
    text_color: str = DEFAULT_TAG_TEXT_COLOR
    user_id: str
    created_at: int = Field(default_factory=now_ms)

    @model_validator(mode="before")
    @classmethod
    def _legacy_color(cls, data: Any) -> Any:
        return _legacy_tag_color(data)

    def as_task_tag(self) -> TaskTag:
        return TaskTag(name=self.name, bg_color=self.bg_color, text_color=self.text_color)


class Subtask(CamelModel):
    """Checklist item owned by exactly one task."""

    id: str = Field(default_factory=generate_id)
    title: str
    completed: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def _default_id(cls, value: Any) -> str:
        return str(value) if value else generate_id()


class Attachment(CamelModel):
    """File stored in object storage and linked from a task."""

    name: str
    url: str
    path: str | None = None


class TaskStyle(CamelModel):
    """Display attributes shared by tasks and task drafts."""

    title_text_color: str = DEFAULT_TITLE_TEXT_COLOR
    title_font: str = DEFAULT_FONT
    description_color: str = DEFAULT_DESCRIPTION_COLOR
    description_font: str = DEFAULT_FONT
    description_font_size: str = DEFAULT_FONT_SIZE
    area_color: str = DEFAULT_AREA_COLOR

    @field_validator("description_font_size", mode="before")
    @classmethod
    def _font_size_as_text(cls, value: Any) -> str:
        if value is None or value == "":
            return DEFAULT_FONT_SIZE
        return str(value)

    @field_validator(
        "title_text_color",
        "title_font",
        "description_color",
        "description_font",
        "area_color",
        mode="before",
    )
    @classmethod
    def _blank_style_uses_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.model_fields[info.field_name].default
        return value


class Task(TaskStyle):
    """Task model representing a complete task record.

    Attributes:
        id: Store-assigned identifier
        user_id: Owner identifier
        title: Plain-text title
        description: Sanitized HTML fragment
        text_align_title: Title alignment
        text_align_description: Description alignment
        priority: Optional numeric priority (1 highest .. 5 lowest)
        priority_label: Optional label, independent of the number
        completed: Completion status
        start_date: Optional ISO date
        due_date: Optional ISO date
        tags: Tags held by value
        subtasks: Ordered checklist
        attachments: Linked files
        created_at: Creation time (epoch ms)
        updated_at: Last update time (epoch ms)
    """

    id: str
    user_id: str
    title: str
    description: str = ""
    text_align_title: Alignment = DEFAULT_ALIGNMENT
    text_align_description: Alignment = DEFAULT_ALIGNMENT
    priority: int | None = None
    priority_label: PriorityLabel | None = None
    completed: bool = False
    start_date: str | None = None
    due_date: str | None = None
    tags: list[TaskTag] = Field(default_factory=list)
    subtasks: list[Subtask] = Field(default_factory=list)
    attachments: list[Attachment] = Field(default_factory=list)
    created_at: int = Field(default_factory=now_ms)
    updated_at: int = Field(default_factory=now_ms)

    @field_validator("priority", mode="before")
    @classmethod
    def _priority_as_int(cls, value: Any) -> int | None:
        return _coerce_priority(value)

    @field_validator("priority_label", mode="before")
    @classmethod
    def _known_priority_label(cls, value: Any) -> str | None:
        return _coerce_priority_label(value)

    @field_validator("text_align_title", "text_align_description", mode="before")
    @classmethod
    def _known_alignment(cls, value: Any) -> str:
        return _coerce_alignment(value)

    @field_validator("start_date", "due_date", mode="before")
    @classmethod
    def _iso_dates(cls, value: Any) -> str | None:
        return parse_iso_date(value)

    @field_validator("subtasks", "attachments", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _unique_tags(cls, value: Any) -> Any:
        if value is None:
            return []
        seen: set[str] = set()
        tags = []
        for item in value:
            if isinstance(item, str):
                item = {"name": item}
            name = item.name if isinstance(item, TaskTag) else str(item.get("name", ""))
            if not name.strip() or name.lower() in seen:
                continue
            seen.add(name.lower())
            tags.append(item)
        return tags

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _missing_timestamp_is_now(cls, value: Any) -> Any:
        return now_ms() if value is None else value

    def has_tag(self, name: str) -> bool:
        """Check for a tag by case-insensitive name."""
        wanted = name.lower()
        return any(tag.name.lower() == wanted for tag in self.tags)


class NewTaskDraft(TaskStyle):
    """Values of the "new task" form."""

    title: str = ""
    description: str = ""
    priority: int | None = None
    priority_label: PriorityLabel | None = None
    start_date: str | None = None
    due_date: str | None = None
    tags: list[TaskTag] = Field(default_factory=list)
    attachments: list[Attachment] = Field(default_factory=list)

    @field_validator("priority", mode="before")
    @classmethod
    def _priority_in_range(cls, value: Any) -> int | None:
        priority = _coerce_priority(value)
        return priority if priority is not None and 1 <= priority <= 5 else None

    @field_validator("priority_label", mode="before")
    @classmethod
    def _known_priority_label(cls, value: Any) -> str | None:
        return _coerce_priority_label(value)

    @field_validator("start_date", "due_date", mode="before")
    @classmethod
    def _iso_dates(cls, value: Any) -> str | None:
        return parse_iso_date(value)


EDITABLE_FIELDS = (
    "title",
    "title_text_color",
    "title_font",
    "description",
    "description_color",
    "description_font",
    "description_font_size",
    "tags",
    "area_color",
    "start_date",
    "due_date",
    "attachments",
    "priority",
    "priority_label",
)


class EditingTaskDraft(NewTaskDraft):
    """Values of the "edit task" form, bound to one task."""

    task_id: str | None = None

    @classmethod
    def from_task(cls, task: Task) -> EditingTaskDraft:
        """Start editing: copy the editable fields of *task*."""
        values = {name: getattr(task, name) for name in EDITABLE_FIELDS}
        values["tags"] = [tag.model_copy() for tag in task.tags]
        values["attachments"] = [item.model_copy() for item in task.attachments]
        return cls(task_id=task.id, **values)

    def changed_fields(self) -> dict[str, Any]:
        """Editable fields keyed by wire name, ready for a partial update."""
        return self.to_document(include=set(EDITABLE_FIELDS))


class Preferences(CamelModel):
    """Per-user view preferences kept in local key-value storage."""

    search_term: str = ""
    status_filter: StatusFilter = "all"
    tag_filter: str = ""
    sort_key: SortKey = "priority"
    sort_dir: SortDir = "asc"
    date_from: str | None = None
    date_to: str | None = None


class TaskFilters(BaseModel):
    """Filters and ordering for the task view.

    Attributes:
        status: "all", "open" or "done"
        search: Case-insensitive substring of the title
        tag: Tag name (case-insensitive)
        date_from: Inclusive lower bound (ISO date)
        date_to: Inclusive upper bound (ISO date)
        sort_key: priority, createdAt, updatedAt, progress or title
        sort_dir: asc or desc
    """

    status: StatusFilter = "all"
    search: str = ""
    tag: str = ""
    date_from: str | None = None
    date_to: str | None = None
    sort_key: SortKey = "priority"
    sort_dir: SortDir = "asc"

    @classmethod
    def from_preferences(cls, prefs: Preferences) -> TaskFilters:
        return cls(
            status=prefs.status_filter,
            search=prefs.search_term,
            tag=prefs.tag_filter,
            date_from=prefs.date_from,
            date_to=prefs.date_to,
            sort_key=prefs.sort_key,
            sort_dir=prefs.sort_dir,
        )


class User(CamelModel):
    """Signed-in identity delivered by the auth provider."""

    uid: str
    email: str | None = None
    display_name: str | None = None


class ImportResult(BaseModel):
    """Summary of a completed import."""

    created: int = 0
    skipped: int = 0
    errors: list[str] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)
