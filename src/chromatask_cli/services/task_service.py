"""Task service - the in-memory task collection of the signed-in user.

The collection holds the authoritative copy for the session and mirrors
every mutation to the document store. Local state changes only after the
store call has succeeded.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from chromatask_cli.models import (
    Attachment,
    EditingTaskDraft,
    NewTaskDraft,
    Subtask,
    Task,
    TaskFilters,
    TaskTag,
    User,
)
from chromatask_cli.models.core import DEFAULT_ALIGNMENT
from chromatask_cli.models.exceptions import NotFoundError, StoreError, ValidationError
from chromatask_cli.repositories import TASKS_COLLECTION, DocumentStore, ObjectStorage
from chromatask_cli.utils.logger import get_logger
from chromatask_cli.utils.sanitize import sanitize_description, strip_html
from chromatask_cli.utils.task_helpers import (
    cycle_alignment,
    derive_completed,
    filter_and_sort_tasks,
    normalize_task_record,
    sort_by_priority,
)
from chromatask_cli.utils.timestamps import now_ms
from chromatask_cli.utils.uuid_utils import resolve_id_prefix

logger = get_logger("tasks")


class TaskCollection:
    """Service for task business logic.

    Args:
        store: DocumentStore holding the ``tasks`` collection
        user: Signed-in user, or None when nobody is signed in
        object_storage: Optional storage used to clean up attachments on delete
    """

    def __init__(
        self,
        store: DocumentStore,
        user: User | None,
        object_storage: ObjectStorage | None = None,
    ):
        self.store = store
        self.user = user
        self.object_storage = object_storage
        self.tasks: list[Task] = []

    def require_user(self) -> User:
        """Return the signed-in user.

        Raises:
            ValidationError: If nobody is signed in
        """
        if self.user is None:
            raise ValidationError("You must be signed in to manage tasks")
        return self.user

    async def load(self) -> list[Task]:
        """Fetch the user's tasks, normalize them and sort by priority."""
        user = self.require_user()
        records = await self.store.query(TASKS_COLLECTION, {"userId": user.uid})
        self.tasks = sort_by_priority(normalize_task_record(record) for record in records)
        logger.debug("loaded %d tasks for %s", len(self.tasks), user.uid)
        return self.tasks

    def get_task(self, task_id: str) -> Task:
        """Get a loaded task by exact id.

        Raises:
            NotFoundError: If the task is not in the collection
        """
        for task in self.tasks:
            if task.id == task_id:
                return task
        raise NotFoundError(f"Task not found: {task_id}")

    def resolve_task_id(self, prefix: str) -> str:
        """Expand a short id prefix to a loaded task id."""
        return resolve_id_prefix(prefix, (task.id for task in self.tasks), kind="task")

    def visible_tasks(self, filters: TaskFilters) -> list[Task]:
        """Filtered and sorted view of the collection."""
        return filter_and_sort_tasks(self.tasks, filters)

    def _replace(self, updated: Task) -> None:
        self.tasks = [updated if task.id == updated.id else task for task in self.tasks]

    def _insert_sorted(self, task: Task) -> None:
        self.tasks = sort_by_priority([*self.tasks, task])

    async def _save(self, task: Task, fields: Iterable[str]) -> Task:
        """Persist *fields* of *task* plus a fresh updatedAt, then adopt it locally."""
        task.updated_at = now_ms()
        changes = task.to_document(include={*fields, "updated_at"})
        await self.store.update(TASKS_COLLECTION, task.id, changes)
        self._replace(task)
        return task

    async def _mutate(self, task_id: str, fields: Iterable[str], change: Callable[[Task], None]) -> Task:
        """Apply *change* to a copy of the task and persist the listed fields."""
        task = self.get_task(task_id).model_copy(deep=True)
        change(task)
        return await self._save(task, fields)

    # ------------------------------------------------------------------
    # Task CRUD
    # ------------------------------------------------------------------

    async def create_task(self, draft: NewTaskDraft) -> Task:
        """Create a task from the "new task" form.

        Args:
            draft: Form values; the title is required

        Returns:
            The created task, already placed in priority order

        Raises:
            ValidationError: If the title is blank or nobody is signed in
        """
        title = strip_html(draft.title)
        if not title:
            raise ValidationError("Task title cannot be empty")
        user = self.require_user()

        now = now_ms()
        payload = draft.to_document()
        payload.update(
            {
                "userId": user.uid,
                "title": title,
                "description": sanitize_description(draft.description),
                "completed": False,
                "subtasks": [],
                "textAlignTitle": DEFAULT_ALIGNMENT,
                "textAlignDescription": DEFAULT_ALIGNMENT,
                "createdAt": now,
                "updatedAt": now,
            }
        )

        task_id = await self.store.create(TASKS_COLLECTION, payload)
        task = Task.model_validate({**payload, "id": task_id})
        self._insert_sorted(task)
        logger.info("created task %s", task_id)
        return task

    async def save_edits(self, draft: EditingTaskDraft) -> Task:
        """Persist the "edit task" form onto its task.

        Only the editable fields and updatedAt are written.

        Raises:
            ValidationError: If the title is blank or the draft has no target
            NotFoundError: If the target task is not loaded
        """
        if not draft.task_id:
            raise ValidationError("No task is being edited")
        title = strip_html(draft.title)
        if not title:
            raise ValidationError("Task title cannot be empty")

        current = self.get_task(draft.task_id)
        changes = draft.changed_fields()
        changes["title"] = title
        changes["description"] = sanitize_description(draft.description)
        changes["updatedAt"] = now_ms()

        await self.store.update(TASKS_COLLECTION, current.id, changes)
        updated = Task.model_validate({**current.to_document(), **changes})
        self._replace(updated)
        self.tasks = sort_by_priority(self.tasks)
        logger.info("saved edits to task %s", current.id)
        return updated

    async def delete_task(self, task_id: str) -> None:
        """Delete a task, then remove its attachments from object storage.

        Attachment cleanup is best-effort; failures are logged only.
        """
        task = self.get_task(task_id)
        await self.store.delete(TASKS_COLLECTION, task_id)
        self.tasks = [item for item in self.tasks if item.id != task_id]
        logger.info("deleted task %s", task_id)

        if self.object_storage is None:
            return
        for attachment in task.attachments:
            if not attachment.path:
                continue
            try:
                await self.object_storage.delete(attachment.path)
            except StoreError as e:
                logger.warning("could not delete attachment %s: %s", attachment.path, e)

    async def toggle_task(self, task_id: str) -> Task:
        """Flip completion and mirror the new value onto every subtask."""

        def change(task: Task) -> None:
            task.completed = not task.completed
            for subtask in task.subtasks:
                subtask.completed = task.completed

        return await self._mutate(task_id, ("completed", "subtasks"), change)

    async def cycle_title_alignment(self, task_id: str) -> Task:
        def change(task: Task) -> None:
            task.text_align_title = cycle_alignment(task.text_align_title)

        return await self._mutate(task_id, ("text_align_title",), change)

    async def cycle_description_alignment(self, task_id: str) -> Task:
        def change(task: Task) -> None:
            task.text_align_description = cycle_alignment(task.text_align_description)

        return await self._mutate(task_id, ("text_align_description",), change)

    async def set_tags(self, task_id: str, tags: Iterable[TaskTag]) -> Task:
        """Replace the tag list of a task."""

        def change(task: Task) -> None:
            task.tags = list(tags)

        return await self._mutate(task_id, ("tags",), change)

    async def set_attachments(self, task_id: str, attachments: Iterable[Attachment]) -> Task:
        """Replace the attachment list of a task."""

        def change(task: Task) -> None:
            task.attachments = list(attachments)

        return await self._mutate(task_id, ("attachments",), change)

    # ------------------------------------------------------------------
    # Subtasks
    # ------------------------------------------------------------------

    def _subtask_index(self, task: Task, subtask_id: str) -> int:
        subtask_id = resolve_id_prefix(
            subtask_id, (item.id for item in task.subtasks), kind="subtask"
        )
        return next(i for i, item in enumerate(task.subtasks) if item.id == subtask_id)

    async def _mutate_subtasks(self, task_id: str, change: Callable[[Task], None]) -> Task:
        def apply(task: Task) -> None:
            change(task)
            task.completed = derive_completed(task)

        return await self._mutate(task_id, ("subtasks", "completed"), apply)

    async def add_subtask(self, task_id: str, title: str) -> Task:
        """Append an open subtask. The task's completed flag is left as is.

        Raises:
            ValidationError: If the title is blank
        """
        clean = strip_html(title)
        if not clean:
            raise ValidationError("Subtask title cannot be empty")

        def change(task: Task) -> None:
            task.subtasks.append(Subtask(title=clean))

        return await self._mutate(task_id, ("subtasks",), change)

    async def toggle_subtask(self, task_id: str, subtask_id: str) -> Task:
        def change(task: Task) -> None:
            subtask = task.subtasks[self._subtask_index(task, subtask_id)]
            subtask.completed = not subtask.completed

        return await self._mutate_subtasks(task_id, change)

    async def rename_subtask(self, task_id: str, subtask_id: str, title: str) -> Task:
        """Change a subtask's title.

        Raises:
            ValidationError: If the title is blank
        """
        clean = strip_html(title)
        if not clean:
            raise ValidationError("Subtask title cannot be empty")

        def change(task: Task) -> None:
            task.subtasks[self._subtask_index(task, subtask_id)].title = clean

        return await self._mutate(task_id, ("subtasks",), change)

    async def remove_subtask(self, task_id: str, subtask_id: str) -> Task:
        """Remove a subtask; removing the last one reopens the task."""

        def change(task: Task) -> None:
            del task.subtasks[self._subtask_index(task, subtask_id)]

        return await self._mutate_subtasks(task_id, change)

    async def complete_all_subtasks(self, task_id: str) -> Task:
        def change(task: Task) -> None:
            for subtask in task.subtasks:
                subtask.completed = True

        return await self._mutate_subtasks(task_id, change)

    async def reopen_all_subtasks(self, task_id: str) -> Task:
        def change(task: Task) -> None:
            for subtask in task.subtasks:
                subtask.completed = False

        return await self._mutate_subtasks(task_id, change)

    async def clear_completed_subtasks(self, task_id: str) -> Task:
        def change(task: Task) -> None:
            task.subtasks = [item for item in task.subtasks if not item.completed]

        return await self._mutate_subtasks(task_id, change)

