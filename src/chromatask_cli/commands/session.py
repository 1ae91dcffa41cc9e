"""Per-command wiring of the active context's adapters and services."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date

from chromatask_cli.models import Preferences, Task, TaskFilters, User
from chromatask_cli.models.exceptions import ValidationError
from chromatask_cli.models.storage_strategy import StorageStrategyContext
from chromatask_cli.services import (
    AttachmentService,
    AuthService,
    DataService,
    PreferenceService,
    TagService,
    TaskCollection,
)
from chromatask_cli.services.config_service import get_config_service, get_storage_strategy_context
from chromatask_cli.utils.task_helpers import due_status, priority_color, progress_percent
from chromatask_cli.utils.ui.formatters import OUTPUT_FORMATS


class Session:
    """Services bound to the signed-in user of the active context."""

    def __init__(self, storage: StorageStrategyContext):
        self.storage = storage
        self.auth = AuthService(storage.auth_provider)
        self.user: User | None = self.auth.current_user()
        self.collection = TaskCollection(storage.document_store, self.user, storage.object_storage)
        self.tags = TagService(self.collection)
        self.data = DataService(self.collection)
        self.attachments = AttachmentService(self.collection, storage.object_storage)
        self.preferences = PreferenceService(storage.key_value_store)

    def load_preferences(self) -> Preferences:
        return self.preferences.load(self.collection.require_user().uid)

    def saved_filters(self) -> TaskFilters:
        return TaskFilters.from_preferences(self.load_preferences())

    def save_filters(self, filters: TaskFilters) -> Preferences:
        """Persist *filters* as the user's view preferences."""
        prefs = self.load_preferences().model_copy(
            update={
                "search_term": filters.search,
                "status_filter": filters.status,
                "tag_filter": filters.tag,
                "sort_key": filters.sort_key,
                "sort_dir": filters.sort_dir,
                "date_from": filters.date_from,
                "date_to": filters.date_to,
            }
        )
        self.preferences.save(self.collection.require_user().uid, prefs)
        return prefs


@asynccontextmanager
async def open_session(*, load_tasks: bool = True, load_tags: bool = False) -> AsyncIterator[Session]:
    """Open a session, load the requested collections and close clients afterwards."""
    storage = get_storage_strategy_context()
    session = Session(storage)
    try:
        if load_tasks:
            await session.collection.load()
        if load_tags:
            await session.tags.load()
        yield session
    finally:
        await storage.close()


def resolve_output(output: str | None) -> str:
    """Use the configured output format unless one was given."""
    output = output or get_config_service().config.output.format
    if output not in OUTPUT_FORMATS:
        raise ValidationError(f"Unknown output format '{output}' (use {', '.join(OUTPUT_FORMATS)})")
    return output


def task_view(task: Task, today: date | None = None) -> dict:
    """Task document plus the derived display values."""
    return {
        **task.to_document(),
        "progress": progress_percent(task),
        "priorityColor": priority_color(task.priority),
        "dueStatus": due_status(task, today),
    }
