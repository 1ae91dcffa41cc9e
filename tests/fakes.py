"""In-memory port implementations for tests."""

from __future__ import annotations

import copy
from typing import Any

from chromatask_cli.models import User
from chromatask_cli.models.exceptions import NotFoundError, StoreError
from chromatask_cli.repositories import AuthProvider, DocumentStore, KeyValueStore, ObjectStorage


class InMemoryDocumentStore(DocumentStore):
    """Dictionary-backed document store.

    Set ``fail_on`` to an operation name ("create", "update", ...) to make
    that operation raise StoreError.
    """

    def __init__(self):
        self.collections: dict[str, dict[str, dict[str, Any]]] = {}
        self.calls: list[tuple] = []
        self.fail_on: set[str] = set()
        self._counter = 0

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise StoreError(f"{operation} failed")

    def records(self, collection: str) -> dict[str, dict[str, Any]]:
        return self.collections.setdefault(collection, {})

    def seed(self, collection: str, record: dict[str, Any]) -> str:
        self._counter += 1
        record_id = record.get("id") or f"{collection[:3]}{self._counter:04d}"
        self.records(collection)[record_id] = {k: v for k, v in record.items() if k != "id"}
        return record_id

    async def query(self, collection: str, filters: dict[str, Any]) -> list[dict[str, Any]]:
        self.calls.append(("query", collection, filters))
        self._check("query")
        return [
            {**copy.deepcopy(data), "id": record_id}
            for record_id, data in self.records(collection).items()
            if all(data.get(key) == value for key, value in filters.items())
        ]

    async def create(self, collection: str, data: dict[str, Any]) -> str:
        self.calls.append(("create", collection, data))
        self._check("create")
        return self.seed(collection, copy.deepcopy(data))

    async def update(self, collection: str, record_id: str, data: dict[str, Any]) -> None:
        self.calls.append(("update", collection, record_id, data))
        self._check("update")
        records = self.records(collection)
        if record_id not in records:
            raise NotFoundError(f"{collection} record not found: {record_id}")
        records[record_id].update(copy.deepcopy(data))

    async def delete(self, collection: str, record_id: str) -> None:
        self.calls.append(("delete", collection, record_id))
        self._check("delete")
        self.records(collection).pop(record_id, None)


class InMemoryObjectStorage(ObjectStorage):
    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.fail_delete = False

    async def upload(self, path: str, data: bytes) -> None:
        self.objects[path] = data

    async def get_url(self, path: str) -> str:
        if path not in self.objects:
            raise NotFoundError(path)
        return f"memory://{path}"

    async def delete(self, path: str) -> None:
        if self.fail_delete:
            raise StoreError(f"cannot delete {path}")
        self.objects.pop(path, None)


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self):
        self.values: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


class FakeAuthProvider(AuthProvider):
    """Auth provider returning a fixed user, or raising a preset error."""

    def __init__(self, user: User | None = None, error: Exception | None = None):
        self.next_user = user
        self.error = error
        self.user: User | None = None
        self.sign_in_calls = 0

    def current_user(self) -> User | None:
        return self.user

    async def sign_in(self) -> User | None:
        self.sign_in_calls += 1
        if self.error is not None:
            raise self.error
        self.user = self.next_user
        return self.user

    async def sign_out(self) -> None:
        self.user = None


class FakeStorageContext:
    """Stands in for StorageStrategyContext in command tests."""

    storage_type = "memory"

    def __init__(self, user: User | None = None):
        self.document_store = InMemoryDocumentStore()
        self.object_storage = InMemoryObjectStorage()
        self.key_value_store = InMemoryKeyValueStore()
        self.auth_provider = FakeAuthProvider(user)
        self.auth_provider.user = user
        self.closed = 0

    async def close(self) -> None:
        self.closed += 1
