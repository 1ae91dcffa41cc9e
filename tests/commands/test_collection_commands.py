"""Tests for subtask, tag, attachment and preference commands."""

from __future__ import annotations

import json

from typer.testing import CliRunner

from chromatask_cli.main import app
from chromatask_cli.repositories import TAGS_COLLECTION, TASKS_COLLECTION

runner = CliRunner()


def _new_task(storage, title: str = "Parent", *args) -> str:
    result = runner.invoke(app, ["tasks", "add", title, *args])
    assert result.exit_code == 0, result.output
    return next(reversed(storage.document_store.records(TASKS_COLLECTION)))


def _record(storage, task_id: str) -> dict:
    return storage.document_store.records(TASKS_COLLECTION)[task_id]


class TestSubtaskCommands:
    def test_add_toggle_complete_parent(self, storage):
        task_id = _new_task(storage)
        runner.invoke(app, ["subtasks", "add", task_id, "only step"])
        subtask_id = _record(storage, task_id)["subtasks"][0]["id"]

        result = runner.invoke(app, ["subtasks", "toggle", task_id, subtask_id[:8]])

        assert result.exit_code == 0, result.output
        record = _record(storage, task_id)
        assert record["subtasks"][0]["completed"] is True
        assert record["completed"] is True

    def test_rename_and_remove(self, storage):
        task_id = _new_task(storage)
        runner.invoke(app, ["subtasks", "add", task_id, "draft"])
        subtask_id = _record(storage, task_id)["subtasks"][0]["id"]

        runner.invoke(app, ["subtasks", "rename", task_id, subtask_id, "final"])
        assert _record(storage, task_id)["subtasks"][0]["title"] == "final"

        result = runner.invoke(app, ["subtasks", "remove", task_id, subtask_id])
        assert result.exit_code == 0
        assert _record(storage, task_id)["subtasks"] == []

    def test_bulk_commands(self, storage):
        task_id = _new_task(storage)
        for title in ("a", "b"):
            runner.invoke(app, ["subtasks", "add", task_id, title])

        runner.invoke(app, ["subtasks", "complete-all", task_id])
        assert _record(storage, task_id)["completed"] is True

        runner.invoke(app, ["subtasks", "reopen-all", task_id])
        assert _record(storage, task_id)["completed"] is False

        runner.invoke(app, ["subtasks", "complete-all", task_id])
        runner.invoke(app, ["subtasks", "clear-done", task_id])
        record = _record(storage, task_id)
        assert record["subtasks"] == []
        assert record["completed"] is False

    def test_blank_subtask_rejected(self, storage):
        task_id = _new_task(storage)
        result = runner.invoke(app, ["subtasks", "add", task_id, " "])
        assert result.exit_code == 2


class TestTagCommands:
    def test_create_and_list(self, storage):
        runner.invoke(app, ["tags", "create", "Work", "--bg", "#ff0000"])

        result = runner.invoke(app, ["tags", "list", "-o", "json"])

        tags = json.loads(result.output)["tags"]
        assert [t["name"] for t in tags] == ["Work"]
        assert tags[0]["bgColor"] == "#ff0000"

    def test_duplicate_tag(self, storage):
        runner.invoke(app, ["tags", "create", "Work"])
        result = runner.invoke(app, ["tags", "create", "work"])
        assert result.exit_code == 2

    def test_rename_updates_tasks(self, storage):
        task_id = _new_task(storage, "Tagged", "--tag", "Work")

        result = runner.invoke(app, ["tags", "edit", "Work", "--name", "Office"])

        assert result.exit_code == 0, result.output
        assert [t["name"] for t in _record(storage, task_id)["tags"]] == ["Office"]

    def test_delete_removes_from_tasks(self, storage):
        task_id = _new_task(storage, "Tagged", "--tag", "Work")

        result = runner.invoke(app, ["tags", "delete", "Work", "--yes"])

        assert result.exit_code == 0
        assert _record(storage, task_id)["tags"] == []
        assert storage.document_store.records(TAGS_COLLECTION) == {}

    def test_attach_select_detach(self, storage):
        task_id = _new_task(storage)
        runner.invoke(app, ["tags", "create", "Home"])

        runner.invoke(app, ["tags", "select", task_id, "Missing"])
        assert _record(storage, task_id)["tags"] == []

        runner.invoke(app, ["tags", "select", task_id, "home"])
        assert [t["name"] for t in _record(storage, task_id)["tags"]] == ["Home"]

        runner.invoke(app, ["tags", "attach", task_id, "Errands"])
        assert len(_record(storage, task_id)["tags"]) == 2

        runner.invoke(app, ["tags", "detach", task_id, "home"])
        assert [t["name"] for t in _record(storage, task_id)["tags"]] == ["Errands"]

    def test_edit_without_options(self, storage):
        result = runner.invoke(app, ["tags", "edit", "Work"])
        assert result.exit_code == 2


class TestAttachmentCommands:
    def test_add_list_remove(self, storage, tmp_path):
        task_id = _new_task(storage)
        source = tmp_path / "notes.txt"
        source.write_text("hello")

        result = runner.invoke(app, ["attachments", "add", task_id, str(source)])
        assert result.exit_code == 0, result.output
        assert _record(storage, task_id)["attachments"][0]["name"] == "notes.txt"

        result = runner.invoke(app, ["attachments", "list", task_id, "-o", "json"])
        assert json.loads(result.output)[0]["name"] == "notes.txt"

        result = runner.invoke(app, ["attachments", "remove", task_id, "notes.txt"])
        assert result.exit_code == 0
        assert _record(storage, task_id)["attachments"] == []
        assert storage.object_storage.objects == {}

    def test_missing_file(self, storage, tmp_path):
        task_id = _new_task(storage)
        result = runner.invoke(app, ["attachments", "add", task_id, str(tmp_path / "nope")])
        assert result.exit_code == 2


class TestPrefCommands:
    def test_set_show_reset(self, storage):
        result = runner.invoke(app, ["prefs", "set", "--status", "open", "--sort", "title", "--desc"])
        assert result.exit_code == 0, result.output

        shown = json.loads(runner.invoke(app, ["prefs", "show", "-o", "json"]).output)
        assert shown["statusFilter"] == "open"
        assert shown["sortKey"] == "title"
        assert shown["sortDir"] == "desc"

        runner.invoke(app, ["prefs", "reset"])
        shown = json.loads(runner.invoke(app, ["prefs", "show", "-o", "json"]).output)
        assert shown["statusFilter"] == "all"

    def test_set_nothing(self, storage):
        result = runner.invoke(app, ["prefs", "set"])
        assert result.exit_code == 2

    def test_clear_date_bound(self, storage):
        runner.invoke(app, ["prefs", "set", "--from", "2024-01-01"])
        runner.invoke(app, ["prefs", "set", "--from", ""])
        shown = json.loads(runner.invoke(app, ["prefs", "show", "-o", "json"]).output)
        assert shown["dateFrom"] is None


def test_delete_tag_declined(storage, mocker):
    task_id = _new_task(storage, "Tagged", "--tag", "Work")
    mocker.patch("chromatask_cli.commands.tags.typer.confirm", return_value=False)

    result = runner.invoke(app, ["tags", "delete", "Work"])

    assert result.exit_code == 0
    assert "Cancelled" in result.output
    assert [t["name"] for t in _record(storage, task_id)["tags"]] == ["Work"]
