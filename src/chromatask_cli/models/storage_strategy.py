"""
Strategy Pattern: Storage Strategy Container

The StorageStrategyContext holds the strategy chosen at startup from the
active context and hands its adapters to services. Services never know
which backend they are talking to.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from chromatask_cli.models.config_models import APIConfig
from chromatask_cli.repositories import (
    AuthProvider,
    DocumentStore,
    KeyValueStore,
    ObjectStorage,
)


class StorageStrategy(ABC):
    """
    Abstract base class for storage strategies.

    A strategy bundles every adapter for one backend (local vault or
    remote API). Preferences always live in a local settings file.
    """

    def __init__(self, settings_path: str | Path):
        from chromatask_cli.adapters.local import JsonFileKeyValueStore

        self._key_value_store = JsonFileKeyValueStore(settings_path)

    @abstractmethod
    def get_document_store(self) -> DocumentStore:
        """Get the document store for this strategy."""

    @abstractmethod
    def get_object_storage(self) -> ObjectStorage:
        """Get the attachment storage for this strategy."""

    @abstractmethod
    def get_auth_provider(self) -> AuthProvider:
        """Get the identity provider for this strategy."""

    def get_key_value_store(self) -> KeyValueStore:
        return self._key_value_store

    @property
    @abstractmethod
    def storage_type(self) -> str:
        """Get storage type identifier (for logging/debugging)."""

    async def close(self) -> None:
        """Release network clients or other open resources."""


class LocalStorageStrategy(StorageStrategy):
    """
    Local storage strategy: SQLite vault, files under the data directory,
    and a local identity.
    """

    def __init__(
        self,
        db_path: str,
        objects_dir: str | Path,
        credentials_path: str | Path,
        settings_path: str | Path,
    ):
        """
        Args:
            db_path: Path to SQLite database file
            objects_dir: Root directory for attachments
            credentials_path: Session file of the context
            settings_path: Local settings file (preferences)
        """
        super().__init__(settings_path)
        self.db_path = db_path

        # Import here to avoid circular dependencies
        from chromatask_cli.adapters.local import FilesystemObjectStorage, LocalAuthProvider
        from chromatask_cli.adapters.sqlite import SqliteDocumentStore

        self._document_store = SqliteDocumentStore(db_path=db_path)
        self._object_storage = FilesystemObjectStorage(objects_dir)
        self._auth_provider = LocalAuthProvider(credentials_path)

    def get_document_store(self) -> DocumentStore:
        return self._document_store

    def get_object_storage(self) -> ObjectStorage:
        return self._object_storage

    def get_auth_provider(self) -> AuthProvider:
        return self._auth_provider

    @property
    def storage_type(self) -> str:
        return "local"

    async def close(self) -> None:
        self._document_store.close()


class RemoteStorageStrategy(StorageStrategy):
    """
    Remote API storage strategy.

    Every adapter shares one API client bound to the context's source URL.
    """

    def __init__(
        self,
        base_url: str,
        credentials_path: str | Path,
        settings_path: str | Path,
        api_config: APIConfig | None = None,
    ):
        super().__init__(settings_path)

        from chromatask_cli.adapters.rest_api import (
            RestAuthProvider,
            RestDocumentStore,
            RestObjectStorage,
        )
        from chromatask_cli.services.api.client import APIClient

        self.client = APIClient(base_url, api_config, credentials_path)
        self._document_store = RestDocumentStore(self.client)
        self._object_storage = RestObjectStorage(self.client)
        self._auth_provider = RestAuthProvider(self.client, credentials_path)

    def get_document_store(self) -> DocumentStore:
        return self._document_store

    def get_object_storage(self) -> ObjectStorage:
        return self._object_storage

    def get_auth_provider(self) -> AuthProvider:
        return self._auth_provider

    @property
    def storage_type(self) -> str:
        return "remote"

    async def close(self) -> None:
        await self.client.close()


class StorageStrategyContext:
    """
    Strategy context that provides access to all adapters.

    Usage:
        strategy = LocalStorageStrategy(db_path, objects_dir, credentials, settings)
        context = StorageStrategyContext(strategy)
        store = context.document_store
    """

    def __init__(self, strategy: StorageStrategy):
        self._strategy = strategy

    @property
    def document_store(self) -> DocumentStore:
        return self._strategy.get_document_store()

    @property
    def object_storage(self) -> ObjectStorage:
        return self._strategy.get_object_storage()

    @property
    def auth_provider(self) -> AuthProvider:
        return self._strategy.get_auth_provider()

    @property
    def key_value_store(self) -> KeyValueStore:
        return self._strategy.get_key_value_store()

    @property
    def storage_type(self) -> str:
        """Get storage type (for logging/debugging only)."""
        return self._strategy.storage_type

    @property
    def strategy(self) -> StorageStrategy:
        return self._strategy

    async def close(self) -> None:
        await self._strategy.close()
