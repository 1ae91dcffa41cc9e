"""Unit tests for TagService: global tags and their copies inside tasks."""

from __future__ import annotations

import pytest

from chromatask_cli.models import NewTaskDraft
from chromatask_cli.models.exceptions import NotFoundError, ValidationError
from chromatask_cli.repositories import TAGS_COLLECTION, TASKS_COLLECTION
from chromatask_cli.services.tag_service import TagService


@pytest.fixture()
def tags(collection) -> TagService:
    return TagService(collection)


@pytest.mark.asyncio
async def test_load_orders_by_creation(tags, store):
    store.seed(TAGS_COLLECTION, {"id": "t2", "name": "Late", "userId": "user-1", "createdAt": 20})
    store.seed(TAGS_COLLECTION, {"id": "t1", "name": "Early", "userId": "user-1", "createdAt": 10})
    store.seed(TAGS_COLLECTION, {"id": "t3", "name": "Other", "userId": "user-2", "createdAt": 5})

    loaded = await tags.load()

    assert [t.name for t in loaded] == ["Early", "Late"]


@pytest.mark.asyncio
async def test_legacy_color_field(tags, store):
    store.seed(TAGS_COLLECTION, {"id": "t1", "name": "Old", "userId": "user-1", "color": "#123456"})
    loaded = await tags.load()
    assert loaded[0].bg_color == "#123456"


@pytest.mark.asyncio
async def test_create_tag_rejects_duplicates_and_blank(tags):
    await tags.create_tag("Work", "#ff0000", "#ffffff")

    with pytest.raises(ValidationError):
        await tags.create_tag("work")
    with pytest.raises(ValidationError):
        await tags.create_tag("   ")
    assert [t.name for t in tags.tags] == ["Work"]


@pytest.mark.asyncio
async def test_attach_creates_missing_tag(tags, collection, store):
    task = await collection.create_task(NewTaskDraft(title="T"))

    task = await tags.attach_tag(task.id, "Urgent")

    assert [t.name for t in task.tags] == ["Urgent"]
    assert [t.name for t in tags.tags] == ["Urgent"]
    assert len(store.records(TAGS_COLLECTION)) == 1


@pytest.mark.asyncio
async def test_attach_is_idempotent_by_name(tags, collection):
    task = await collection.create_task(NewTaskDraft(title="T"))
    await tags.attach_tag(task.id, "Home")
    task = await tags.attach_tag(task.id, "HOME")
    assert [t.name for t in task.tags] == ["Home"]


@pytest.mark.asyncio
async def test_select_ignores_unknown(tags, collection, store):
    task = await collection.create_task(NewTaskDraft(title="T"))
    await tags.create_tag("Known", "#00ff00")

    task = await tags.select_tag(task.id, "Unknown")
    assert task.tags == []

    task = await tags.select_tag(task.id, "known")
    assert task.tags[0].name == "Known"
    assert task.tags[0].bg_color == "#00ff00"


@pytest.mark.asyncio
async def test_detach_keeps_global_tag(tags, collection):
    task = await collection.create_task(NewTaskDraft(title="T"))
    await tags.attach_tag(task.id, "Home")

    task = await tags.detach_tag(task.id, "home")

    assert task.tags == []
    assert [t.name for t in tags.tags] == ["Home"]


@pytest.mark.asyncio
async def test_rename_propagates_to_tasks(tags, collection, store):
    first = await collection.create_task(NewTaskDraft(title="A"))
    second = await collection.create_task(NewTaskDraft(title="B"))
    untagged = await collection.create_task(NewTaskDraft(title="C"))
    await tags.attach_tag(first.id, "Work")
    await tags.attach_tag(second.id, "Work")

    updated = await tags.edit_tag("Work", name="Office", bg_color="#abcdef")

    assert updated.name == "Office"
    for task_id in (first.id, second.id):
        task = collection.get_task(task_id)
        assert [t.name for t in task.tags] == ["Office"]
        assert task.tags[0].bg_color == "#abcdef"
        assert store.records(TASKS_COLLECTION)[task_id]["tags"][0]["name"] == "Office"
    assert collection.get_task(untagged.id).tags == []


@pytest.mark.asyncio
async def test_rename_merges_with_existing_task_tag(tags, collection):
    task = await collection.create_task(
        NewTaskDraft(title="A", tags=[{"name": "Work"}, {"name": "Office"}])
    )
    await tags.create_tag("Work", "#111111")

    await tags.edit_tag("Work", name="Office")

    merged = collection.get_task(task.id).tags
    assert [t.name for t in merged] == ["Office"]
    assert merged[0].bg_color == "#111111"


@pytest.mark.asyncio
async def test_rename_rejects_clash(tags):
    await tags.create_tag("Work")
    await tags.create_tag("Home")

    with pytest.raises(ValidationError):
        await tags.edit_tag("Work", name="home")


@pytest.mark.asyncio
async def test_delete_strips_tag_everywhere(tags, collection, store):
    task = await collection.create_task(NewTaskDraft(title="A"))
    await tags.attach_tag(task.id, "Temp")

    deleted = await tags.delete_tag("Temp")

    assert deleted.name == "Temp"
    assert tags.tags == []
    assert collection.get_task(task.id).tags == []
    assert store.records(TAGS_COLLECTION) == {}


@pytest.mark.asyncio
async def test_resolve_by_id_prefix(tags):
    tag = await tags.create_tag("Work")
    assert tags.resolve_tag(tag.id[:5]).id == tag.id
    with pytest.raises(NotFoundError):
        tags.resolve_tag("missing")
