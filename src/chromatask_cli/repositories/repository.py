"""Port definitions for Chromatask.

This module defines the abstract base classes (interfaces) for every external
collaborator of the task collection, following the hexagonal architecture
(Ports & Adapters) pattern.

The collection never talks to SQLite, HTTP or the filesystem directly; it
goes through these ports, so local and remote backends are interchangeable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from chromatask_cli.models import User

TASKS_COLLECTION = "tasks"
TAGS_COLLECTION = "tags"


class DocumentStore(ABC):
    """Abstract base class for document persistence operations.

    Records are JSON-compatible dictionaries grouped into named collections.
    Every record returned by ``query`` carries its identifier under ``id``.
    """

    @abstractmethod
    async def query(self, collection: str, filters: dict[str, Any]) -> list[dict[str, Any]]:
        """List records whose fields equal every value in *filters*.

        Args:
            collection: Collection name (e.g. "tasks")
            filters: Field name to required value

        Returns:
            Matching records, each including its ``id``

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            StoreError: If the backend cannot be read
        """
        raise NotImplementedError("DocumentStore.query() must be implemented by adapter")

    @abstractmethod
    async def create(self, collection: str, data: dict[str, Any]) -> str:
        """Create a record and return the identifier assigned by the store.

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            StoreError: If the write fails
        """
        raise NotImplementedError("DocumentStore.create() must be implemented by adapter")

    @abstractmethod
    async def update(self, collection: str, record_id: str, data: dict[str, Any]) -> None:
        """Merge *data* into an existing record.

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            NotFoundError: If the record does not exist
            StoreError: If the write fails
        """
        raise NotImplementedError("DocumentStore.update() must be implemented by adapter")

    @abstractmethod
    async def delete(self, collection: str, record_id: str) -> None:
        """Delete a record.

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            StoreError: If the write fails
        """
        raise NotImplementedError("DocumentStore.delete() must be implemented by adapter")


class ObjectStorage(ABC):
    """Abstract base class for attachment storage."""

    @abstractmethod
    async def upload(self, path: str, data: bytes) -> None:
        """Store *data* under *path*, replacing any existing object."""
        raise NotImplementedError("ObjectStorage.upload() must be implemented by adapter")

    @abstractmethod
    async def get_url(self, path: str) -> str:
        """Return a URL from which the object at *path* can be downloaded."""
        raise NotImplementedError("ObjectStorage.get_url() must be implemented by adapter")

    @abstractmethod
    async def delete(self, path: str) -> None:
        """Remove the object at *path*."""
        raise NotImplementedError("ObjectStorage.delete() must be implemented by adapter")


class KeyValueStore(ABC):
    """Abstract base class for small local string settings."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value or None."""
        raise NotImplementedError("KeyValueStore.get() must be implemented by adapter")

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store *value* under *key*."""
        raise NotImplementedError("KeyValueStore.set() must be implemented by adapter")


class AuthProvider(ABC):
    """Abstract base class for the identity provider."""

    @abstractmethod
    async def sign_in(self) -> User | None:
        """Run the interactive sign-in flow.

        Returns:
            The signed-in user, or None when the user cancelled

        Raises:
            AuthError: If sign-in fails
        """
        raise NotImplementedError("AuthProvider.sign_in() must be implemented by adapter")

    @abstractmethod
    async def sign_out(self) -> None:
        """End the current session."""
        raise NotImplementedError("AuthProvider.sign_out() must be implemented by adapter")

    @abstractmethod
    def current_user(self) -> User | None:
        """Return the user of the persisted session, if any."""
        raise NotImplementedError("AuthProvider.current_user() must be implemented by adapter")
