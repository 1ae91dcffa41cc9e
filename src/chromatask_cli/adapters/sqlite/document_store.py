"""SQLite implementation of DocumentStore."""

from __future__ import annotations

import json
import sqlite3
from typing import Any

from chromatask_cli.adapters.sqlite.connection import DatabaseConnection, get_connection
from chromatask_cli.models.exceptions import NotFoundError, StoreError
from chromatask_cli.repositories import DocumentStore
from chromatask_cli.utils.logger import get_logger
from chromatask_cli.utils.timestamps import now_ms
from chromatask_cli.utils.uuid_utils import generate_id


class SqliteDocumentStore(DocumentStore):
    """Document store kept in the local SQLite vault."""

    def __init__(self, db_path: str | None = None):
        """Initialize SQLite document store.

        Args:
            db_path: Optional database file path. If None, uses default location.
        """
        self.db_path = db_path
        self._connection: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._connection is None:
            self._connection = get_connection(self.db_path)
        return self._connection

    def close(self) -> None:
        """Close the vault connection; the next call reopens it."""
        if self._connection is None:
            return
        if str(self.db_path) == ":memory:":
            self._connection.close()
        else:
            DatabaseConnection.close_connection()
        self._connection = None

    async def query(self, collection: str, filters: dict[str, Any]) -> list[dict[str, Any]]:
        sql = "SELECT id, data FROM documents WHERE collection = ?"
        params: list[Any] = [collection]
        for field, value in filters.items():
            sql += " AND json_extract(data, ?) = ?"
            params.extend([f"$.{field}", value])
        sql += " ORDER BY created_at, rowid"

        try:
            rows = self.connection.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read {collection}: {e}") from e

        return [{**json.loads(row["data"]), "id": row["id"]} for row in rows]

    async def create(self, collection: str, data: dict[str, Any]) -> str:
        record_id = generate_id()
        now = now_ms()
        payload = {key: value for key, value in data.items() if key != "id"}

        try:
            self.connection.execute(
                """INSERT INTO documents (collection, id, data, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?)""",
                (collection, record_id, json.dumps(payload), now, now),
            )
            self.connection.commit()
        except sqlite3.Error as e:
            self.connection.rollback()
            raise StoreError(f"Failed to create {collection} record: {e}") from e

        get_logger().debug("created %s/%s", collection, record_id)
        return record_id

    async def update(self, collection: str, record_id: str, data: dict[str, Any]) -> None:
        try:
            row = self.connection.execute(
                "SELECT data FROM documents WHERE collection = ? AND id = ?",
                (collection, record_id),
            ).fetchone()
            if row is None:
                raise NotFoundError(f"{collection} record not found: {record_id}")

            merged = {**json.loads(row["data"]), **{k: v for k, v in data.items() if k != "id"}}
            self.connection.execute(
                "UPDATE documents SET data = ?, updated_at = ? WHERE collection = ? AND id = ?",
                (json.dumps(merged), now_ms(), collection, record_id),
            )
            self.connection.commit()
        except sqlite3.Error as e:
            self.connection.rollback()
            raise StoreError(f"Failed to update {collection}/{record_id}: {e}") from e

        get_logger().debug("updated %s/%s fields=%s", collection, record_id, sorted(data))

    async def delete(self, collection: str, record_id: str) -> None:
        try:
            self.connection.execute(
                "DELETE FROM documents WHERE collection = ? AND id = ?",
                (collection, record_id),
            )
            self.connection.commit()
        except sqlite3.Error as e:
            self.connection.rollback()
            raise StoreError(f"Failed to delete {collection}/{record_id}: {e}") from e

        get_logger().debug("deleted %s/%s", collection, record_id)
