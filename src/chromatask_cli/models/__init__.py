"""Chromatask domain models.

This package contains Pydantic models that represent the core domain entities
of the application: tasks, their subtasks, tags and attachments, view
preferences, and the form drafts used while creating or editing a task.
"""

from .config_models import AppConfig, Context
from .core import (
    PREDEFINED_FONTS,
    Attachment,
    EditingTaskDraft,
    ImportResult,
    NewTaskDraft,
    Preferences,
    Subtask,
    Tag,
    Task,
    TaskFilters,
    TaskTag,
    User,
)

__all__ = [
    # Task models
    "Task",
    "TaskTag",
    "Subtask",
    "Attachment",
    "TaskFilters",
    "NewTaskDraft",
    "EditingTaskDraft",
    "PREDEFINED_FONTS",
    # Tag model
    "Tag",
    # User and preferences
    "User",
    "Preferences",
    "ImportResult",
    # Config models
    "AppConfig",
    "Context",
]
