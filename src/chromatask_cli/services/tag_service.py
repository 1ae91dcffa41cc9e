"""Tag service - the user's global tags and their copies inside tasks.

Tasks hold tags by value, so renaming, recoloring or deleting a global
tag rewrites every task that carries a tag of the same name.
"""

from __future__ import annotations

from chromatask_cli.models import Tag, Task, TaskTag
from chromatask_cli.models.core import DEFAULT_TAG_BG_COLOR, DEFAULT_TAG_TEXT_COLOR
from chromatask_cli.models.exceptions import ValidationError
from chromatask_cli.repositories import TAGS_COLLECTION
from chromatask_cli.services.task_service import TaskCollection
from chromatask_cli.utils.logger import get_logger
from chromatask_cli.utils.timestamps import now_ms
from chromatask_cli.utils.uuid_utils import resolve_id_prefix

logger = get_logger("tags")


def _clean_name(name: str | None) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Tag name cannot be empty")
    return name


class TagService:
    """Service for global tag business logic.

    Args:
        collection: Loaded task collection; its store and user are reused
    """

    def __init__(self, collection: TaskCollection):
        self.collection = collection
        self.store = collection.store
        self.tags: list[Tag] = []

    async def load(self) -> list[Tag]:
        """Fetch the user's global tags in creation order."""
        user = self.collection.require_user()
        records = await self.store.query(TAGS_COLLECTION, {"userId": user.uid})
        self.tags = sorted(
            (Tag.model_validate(record) for record in records),
            key=lambda tag: tag.created_at,
        )
        return self.tags

    def find_tag(self, name: str) -> Tag | None:
        """Look up a global tag by case-insensitive name."""
        wanted = name.strip().lower()
        for tag in self.tags:
            if tag.name.lower() == wanted:
                return tag
        return None

    def resolve_tag(self, name_or_id: str) -> Tag:
        """Find a global tag by name, falling back to an id prefix.

        Raises:
            NotFoundError: If neither matches
        """
        tag = self.find_tag(name_or_id)
        if tag is not None:
            return tag
        tag_id = resolve_id_prefix(name_or_id, (tag.id for tag in self.tags), kind="tag")
        return next(tag for tag in self.tags if tag.id == tag_id)

    async def create_tag(
        self,
        name: str,
        bg_color: str = DEFAULT_TAG_BG_COLOR,
        text_color: str = DEFAULT_TAG_TEXT_COLOR,
    ) -> Tag:
        """Create a global tag.

        Raises:
            ValidationError: If the name is blank or already used (case-insensitive)
        """
        name = _clean_name(name)
        if self.find_tag(name) is not None:
            raise ValidationError(f"Tag '{name}' already exists")
        user = self.collection.require_user()

        payload = {
            "name": name,
            "bgColor": bg_color,
            "textColor": text_color,
            "userId": user.uid,
            "createdAt": now_ms(),
        }
        tag_id = await self.store.create(TAGS_COLLECTION, payload)
        tag = Tag.model_validate({**payload, "id": tag_id})
        self.tags.append(tag)
        logger.info("created tag %s (%s)", name, tag_id)
        return tag

    async def attach_tag(self, task_id: str, name: str) -> Task:
        """Attach a tag typed by name, creating the global tag when unknown.

        A task that already holds the name (case-insensitive) is returned unchanged.
        """
        name = _clean_name(name)
        task = self.collection.get_task(task_id)
        if task.has_tag(name):
            return task

        tag = self.find_tag(name) or await self.create_tag(name)
        return await self.collection.set_tags(task_id, [*task.tags, tag.as_task_tag()])

    async def select_tag(self, task_id: str, name: str) -> Task:
        """Attach an existing global tag; unknown names leave the task as is."""
        task = self.collection.get_task(task_id)
        tag = self.find_tag(name)
        if tag is None or task.has_tag(tag.name):
            return task
        return await self.collection.set_tags(task_id, [*task.tags, tag.as_task_tag()])

    async def detach_tag(self, task_id: str, name: str) -> Task:
        """Remove a tag from one task; the global tag is kept."""
        task = self.collection.get_task(task_id)
        if not task.has_tag(name):
            return task
        wanted = name.strip().lower()
        return await self.collection.set_tags(
            task_id, [tag for tag in task.tags if tag.name.lower() != wanted]
        )

    async def edit_tag(
        self,
        name_or_id: str,
        *,
        name: str | None = None,
        bg_color: str | None = None,
        text_color: str | None = None,
    ) -> Tag:
        """Rename and/or recolor a global tag and propagate it to every task.

        Raises:
            ValidationError: If the new name is blank or taken by another tag
            NotFoundError: If the tag does not exist
        """
        tag = self.resolve_tag(name_or_id)
        new_name = tag.name if name is None else _clean_name(name)
        clash = self.find_tag(new_name)
        if clash is not None and clash.id != tag.id:
            raise ValidationError(f"Tag '{new_name}' already exists")

        updated = tag.model_copy(
            update={
                "name": new_name,
                "bg_color": bg_color or tag.bg_color,
                "text_color": text_color or tag.text_color,
            }
        )
        await self.store.update(
            TAGS_COLLECTION,
            tag.id,
            updated.to_document(include={"name", "bg_color", "text_color"}),
        )
        self.tags = [updated if item.id == tag.id else item for item in self.tags]
        logger.info("edited tag %s -> %s", tag.name, new_name)

        old_name = tag.name.lower()
        replacement = updated.as_task_tag()
        for task in list(self.collection.tasks):
            if not task.has_tag(old_name):
                continue
            new_tags = [
                replacement if item.name.lower() == old_name else item for item in task.tags
            ]
            await self.collection.set_tags(task.id, _dedupe(new_tags))
        return updated

    async def delete_tag(self, name_or_id: str) -> Tag:
        """Delete a global tag and strip it from every task holding it."""
        tag = self.resolve_tag(name_or_id)
        await self.store.delete(TAGS_COLLECTION, tag.id)
        self.tags = [item for item in self.tags if item.id != tag.id]
        logger.info("deleted tag %s", tag.name)

        old_name = tag.name.lower()
        for task in list(self.collection.tasks):
            if task.has_tag(old_name):
                await self.collection.set_tags(
                    task.id, [item for item in task.tags if item.name.lower() != old_name]
                )
        return tag


def _dedupe(tags: list[TaskTag]) -> list[TaskTag]:
    seen: set[str] = set()
    result = []
    for tag in tags:
        if tag.name.lower() not in seen:
            seen.add(tag.name.lower())
            result.append(tag)
    return result

