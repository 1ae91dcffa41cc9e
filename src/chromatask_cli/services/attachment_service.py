"""Attachment service - files uploaded to object storage and linked from tasks."""

from __future__ import annotations

from pathlib import Path

from chromatask_cli.models import Attachment, Task
from chromatask_cli.models.exceptions import NotFoundError, StoreError, ValidationError
from chromatask_cli.repositories import ObjectStorage
from chromatask_cli.services.task_service import TaskCollection
from chromatask_cli.utils.logger import get_logger
from chromatask_cli.utils.uuid_utils import generate_id

logger = get_logger("attachments")


def attachment_path(uid: str, task_id: str, filename: str) -> str:
    """Object-storage path: ``attachments/{uid}/{task_id}/{uuid}_{name}``."""
    return f"attachments/{uid}/{task_id}/{generate_id()}_{filename}"


class AttachmentService:
    """Service for uploading and removing task attachments.

    Args:
        collection: Loaded task collection
        storage: ObjectStorage adapter for the current context
    """

    def __init__(self, collection: TaskCollection, storage: ObjectStorage):
        self.collection = collection
        self.storage = storage

    async def upload(self, task_id: str, file_path: str | Path, name: str | None = None) -> Task:
        """Upload a local file and append it to the task's attachments.

        Args:
            task_id: Target task
            file_path: Local file to upload
            name: Display name (default: the file name)

        Raises:
            ValidationError: If the file does not exist
            StoreError: If the upload or the task update fails
        """
        user = self.collection.require_user()
        task = self.collection.get_task(task_id)
        source = Path(file_path)
        if not source.is_file():
            raise ValidationError(f"File not found: {source}")

        name = name or source.name
        path = attachment_path(user.uid, task.id, name)
        try:
            data = source.read_bytes()
        except OSError as e:
            raise StoreError(f"Failed to read {source}: {e}") from e

        await self.storage.upload(path, data)
        url = await self.storage.get_url(path)
        logger.info("uploaded %s (%d bytes) to %s", name, len(data), path)

        attachment = Attachment(name=name, url=url, path=path)
        return await self.collection.set_attachments(task.id, [*task.attachments, attachment])

    async def remove(self, task_id: str, name: str) -> Task:
        """Delete an attachment by name from storage and from the task.

        Raises:
            NotFoundError: If the task has no attachment with that name
        """
        task = self.collection.get_task(task_id)
        matches = [item for item in task.attachments if item.name == name]
        if not matches:
            raise NotFoundError(f"Attachment not found: {name}")

        attachment = matches[0]
        if attachment.path:
            await self.storage.delete(attachment.path)
        remaining = [item for item in task.attachments if item is not attachment]
        logger.info("removed attachment %s from task %s", name, task.id)
        return await self.collection.set_attachments(task.id, remaining)
