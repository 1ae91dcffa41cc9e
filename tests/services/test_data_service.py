"""Unit tests for DataService export/import."""

from __future__ import annotations

import gzip
import json
from datetime import datetime
from unittest.mock import patch

import pytest

from chromatask_cli.models import NewTaskDraft
from chromatask_cli.models.exceptions import ImportDataError, StoreError
from chromatask_cli.repositories import TASKS_COLLECTION
from chromatask_cli.services.data_service import (
    DataService,
    build_import_payload,
    default_export_filename,
    read_import_document,
)


@pytest.fixture()
def data(collection) -> DataService:
    return DataService(collection)


def test_default_export_filename():
    now = datetime(2024, 2, 3, 4, 5, 6)
    assert default_export_filename(now=now) == "chromatask-export-20240203-040506.json"
    assert default_export_filename(True, now) == "chromatask-export-20240203-040506.json.gz"


class TestReadImportDocument:
    def test_plain_json(self, tmp_path):
        path = tmp_path / "in.json"
        path.write_text('[{"title": "x"}]')
        assert read_import_document(path) == [{"title": "x"}]

    def test_gzip_detected_by_magic_bytes(self, tmp_path):
        path = tmp_path / "in.bin"
        path.write_bytes(gzip.compress(b'[{"title": "zipped"}]'))
        assert read_import_document(path) == [{"title": "zipped"}]

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ImportDataError):
            read_import_document(path)

    def test_not_an_array(self, tmp_path):
        path = tmp_path / "obj.json"
        path.write_text('{"title": "x"}')
        with pytest.raises(ImportDataError, match="array"):
            read_import_document(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ImportDataError):
            read_import_document(tmp_path / "nope.json")


class TestBuildImportPayload:
    def test_replaces_identity_and_sanitizes(self):
        payload = build_import_payload(
            {
                "id": "old-id",
                "userId": "old-owner",
                "title": "<b>Imported</b>",
                "description": "<p>ok</p><script>x()</script>",
                "priority": "2",
                "tags": ["Home", {"name": "Work", "bgColor": "#123456"}, {"noname": 1}],
                "textAlignTitle": "sideways",
                "createdAt": 1234,
            },
            "me",
        )

        assert "id" not in payload
        assert payload["userId"] == "me"
        assert payload["title"] == "Imported"
        assert payload["description"] == "<p>ok</p>"
        assert payload["priority"] == 2
        assert [t["name"] for t in payload["tags"]] == ["Home", "Work"]
        assert payload["tags"][1]["bgColor"] == "#123456"
        assert payload["textAlignTitle"] == "center"
        assert payload["createdAt"] != 1234
        assert payload["titleFont"] == "Arial"

    @pytest.mark.parametrize("created_at", [1234, True, "2024-01-01", None])
    def test_timestamps_set_at_import(self, created_at):
        with patch("chromatask_cli.services.data_service.now_ms", return_value=5000):
            payload = build_import_payload(
                {"title": "x", "createdAt": created_at, "updatedAt": 99}, "me"
            )

        assert payload["createdAt"] == 5000
        assert payload["updatedAt"] == 5000

    def test_subtasks_normalized_and_complete_the_task(self):
        payload = build_import_payload(
            {
                "title": "T",
                "subtasks": ["plain", {"title": "done", "completed": True}, {"title": " "}, 5],
            },
            "me",
        )
        titles = [s["title"] for s in payload["subtasks"]]
        assert titles == ["plain", "done"]
        assert all(s["id"] for s in payload["subtasks"])
        assert payload["completed"] is False

        payload = build_import_payload(
            {"title": "T", "subtasks": [{"title": "a", "completed": True}]}, "me"
        )
        assert payload["completed"] is True

    def test_blank_title_rejected(self):
        with pytest.raises(ValueError):
            build_import_payload({"title": "<br>"}, "me")
        with pytest.raises(ValueError):
            build_import_payload({"title": 42}, "me")


# ---------------------------------------------------------------------------
# Export / import through the collection
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_export_then_import_creates_copies(data, collection, tmp_path):
    task = await collection.create_task(NewTaskDraft(title="Original", priority=1))
    await collection.add_subtask(task.id, "step")
    path = data.export_tasks(tmp_path / "out.json")

    exported = json.loads(path.read_text())
    assert exported[0]["title"] == "Original"
    assert exported[0]["subtasks"][0]["title"] == "step"

    result = await data.import_tasks(path)

    assert result.created == 1
    assert result.skipped == 0
    assert len(collection.tasks) == 2
    assert {t.title for t in collection.tasks} == {"Original"}
    assert len({t.id for t in collection.tasks}) == 2


@pytest.mark.asyncio
async def test_compressed_export(data, collection, tmp_path):
    await collection.create_task(NewTaskDraft(title="Zip me"))
    path = data.export_tasks(tmp_path / "out.json.gz", compress=True)

    assert path.read_bytes()[:2] == b"\x1f\x8b"
    assert json.loads(gzip.decompress(path.read_bytes()))[0]["title"] == "Zip me"


@pytest.mark.asyncio
async def test_import_skips_bad_entries(data, collection, tmp_path):
    path = tmp_path / "mixed.json"
    path.write_text(json.dumps([{"title": "Good"}, "junk", {"title": ""}, {"title": "Also good"}]))

    result = await data.import_tasks(path)

    assert result.created == 2
    assert result.skipped == 2
    assert len(result.errors) == 2
    assert result.has_errors
    assert sorted(t.title for t in collection.tasks) == ["Also good", "Good"]


@pytest.mark.asyncio
async def test_malformed_import_creates_nothing(data, collection, store, tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("[{broken")

    with pytest.raises(ImportDataError):
        await data.import_tasks(path)

    assert collection.tasks == []
    assert store.records(TASKS_COLLECTION) == {}


@pytest.mark.asyncio
async def test_store_failure_propagates(data, store, tmp_path):
    path = tmp_path / "in.json"
    path.write_text('[{"title": "a"}]')
    store.fail_on.add("create")

    with pytest.raises(StoreError):
        await data.import_tasks(path)
