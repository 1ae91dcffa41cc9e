"""Import and export of the task collection as JSON documents.

The document is a JSON array of task objects using the camelCase field
names of the store. Exports may be gzip-compressed; imports accept both.
"""

from __future__ import annotations

import gzip
import json
from datetime import datetime
from pathlib import Path
from typing import Any

from chromatask_cli.models import ImportResult, NewTaskDraft, Subtask
from chromatask_cli.models.core import ALIGNMENTS, DEFAULT_ALIGNMENT
from chromatask_cli.models.exceptions import ImportDataError
from chromatask_cli.repositories import TASKS_COLLECTION
from chromatask_cli.services.task_service import TaskCollection
from chromatask_cli.utils.logger import get_logger
from chromatask_cli.utils.sanitize import sanitize_description, strip_html
from chromatask_cli.utils.timestamps import now_ms

logger = get_logger("data")

GZIP_MAGIC = b"\x1f\x8b"


def default_export_filename(compress: bool = False, now: datetime | None = None) -> str:
    """``chromatask-export-YYYYMMDD-HHMMSS.json`` (``.json.gz`` when compressed)."""
    timestamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
    extension = ".json.gz" if compress else ".json"
    return f"chromatask-export-{timestamp}{extension}"


def read_import_document(path: str | Path) -> list[Any]:
    """Read and parse an import file.

    Raises:
        ImportDataError: If the file cannot be read, is not valid JSON,
            or does not hold a JSON array
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
        if raw.startswith(GZIP_MAGIC):
            raw = gzip.decompress(raw)
        data = json.loads(raw.decode("utf-8"))
    except OSError as e:
        raise ImportDataError(f"Failed to read {path}: {e}") from e
    except (EOFError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ImportDataError(f"Invalid JSON file {path}: {e}") from e

    if not isinstance(data, list):
        raise ImportDataError("Import file must contain a JSON array of tasks")
    return data


def _normalize_subtasks(value: Any) -> list[Subtask]:
    subtasks = []
    for item in value if isinstance(value, list) else []:
        if isinstance(item, str):
            item = {"title": item}
        if not isinstance(item, dict):
            continue
        title = strip_html(item.get("title") if isinstance(item.get("title"), str) else "")
        if title:
            subtasks.append(
                Subtask(id=item.get("id"), title=title, completed=bool(item.get("completed")))
            )
    return subtasks


def _alignment(value: Any) -> str:
    return value if value in ALIGNMENTS else DEFAULT_ALIGNMENT


def build_import_payload(entry: dict[str, Any], user_id: str) -> dict[str, Any]:
    """Rebuild one imported entry as a fresh task payload.

    Identifiers, ownership and timestamps are replaced, title and description are
    sanitized, subtasks normalized and missing style and date fields defaulted.

    Raises:
        ValueError: If the entry has no usable title or a field has an
            unusable type (pydantic.ValidationError)
    """
    title = entry.get("title")
    title = strip_html(title) if isinstance(title, str) else ""
    if not title:
        raise ValueError("missing title")

    fields = {key: value for key, value in entry.items() if key not in ("id", "userId", "subtasks")}
    fields["title"] = title
    tags = fields.get("tags")
    fields["tags"] = [
        {"name": tag} if isinstance(tag, str) else tag
        for tag in (tags if isinstance(tags, list) else [])
        if isinstance(tag, str) or (isinstance(tag, dict) and tag.get("name"))
    ]
    attachments = fields.get("attachments")
    fields["attachments"] = [
        item for item in (attachments if isinstance(attachments, list) else []) if isinstance(item, dict)
    ]
    draft = NewTaskDraft.model_validate(fields)

    subtasks = _normalize_subtasks(entry.get("subtasks"))
    now = now_ms()
    payload = draft.to_document()
    payload.update(
        {
            "userId": user_id,
            "description": sanitize_description(draft.description),
            "textAlignTitle": _alignment(entry.get("textAlignTitle")),
            "textAlignDescription": _alignment(entry.get("textAlignDescription")),
            "subtasks": [item.to_document() for item in subtasks],
            "createdAt": now,
            "updatedAt": now,
        }
    )
    completed = bool(entry.get("completed"))
    if subtasks:
        completed = completed or all(item.completed for item in subtasks)
    payload["completed"] = completed
    return payload


class DataService:
    """Service for exporting and importing the task collection."""

    def __init__(self, collection: TaskCollection):
        self.collection = collection

    def export_tasks(self, output: str | Path | None = None, compress: bool = False) -> Path:
        """Write the loaded tasks to a JSON document.

        Args:
            output: Target path (default: a timestamped file in the working directory)
            compress: Gzip the document

        Returns:
            Path of the written file
        """
        path = Path(output) if output else Path(default_export_filename(compress))
        document = [task.to_document() for task in self.collection.tasks]
        text = json.dumps(document, indent=2, ensure_ascii=False)
        if compress:
            path.write_bytes(gzip.compress(text.encode("utf-8")))
        else:
            path.write_text(text, encoding="utf-8")
        logger.info("exported %d tasks to %s", len(document), path)
        return path

    async def import_tasks(self, path: str | Path) -> ImportResult:
        """Create a new task for every entry of an import file.

        The file is parsed completely before the first record is created.
        Records are created one at a time; a store failure propagates and
        leaves earlier records in place. The collection is reloaded afterwards.

        Raises:
            ImportDataError: If the file is unreadable or malformed
            ValidationError: If nobody is signed in
        """
        entries = read_import_document(path)
        user = self.collection.require_user()
        result = ImportResult()

        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                result.skipped += 1
                result.errors.append(f"Entry {index}: not a task object")
                continue
            try:
                payload = build_import_payload(entry, user.uid)
            except ValueError as e:
                result.skipped += 1
                result.errors.append(f"Entry {index}: {e}")
                continue

            await self.collection.store.create(TASKS_COLLECTION, payload)
            result.created += 1

        logger.info(
            "imported %d tasks from %s (%d skipped)", result.created, path, result.skipped
        )
        await self.collection.load()
        return result

