"""Configuration service for managing Chromatask CLI configuration.

This module provides the ConfigService class, the single source of truth
for configuration. It handles:

- Loading and saving config.json
- Context management (list, add, remove, switch)
- Per-context credential files
- Building the storage strategy for the active context
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

from chromatask_cli.models.config_models import AppConfig, Context
from chromatask_cli.models.storage_strategy import (
    LocalStorageStrategy,
    RemoteStorageStrategy,
    StorageStrategy,
    StorageStrategyContext,
)
from chromatask_cli.utils.logger import get_logger

APP_NAME = "chromatask_cli"
DEFAULT_REMOTE_URL = "http://localhost:8080/api"

logger = get_logger("config")


class ConfigService:
    """Service for managing application configuration.

    Provides methods to load, save and change the configuration, and
    builds the storage adapters for the active context.
    """

    def __init__(self):
        self.config_dir = Path(user_config_dir(APP_NAME))
        self.config_path = self.config_dir / "config.json"
        self.credentials_dir = self.config_dir / "credentials"
        self.settings_path = self.config_dir / "settings.json"
        self.data_dir = Path(user_data_dir(APP_NAME))
        self.objects_dir = self.data_dir / "objects"

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.credentials_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None
        self._storage_strategy_context: StorageStrategyContext | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    @property
    def storage_strategy_context(self) -> StorageStrategyContext:
        """StorageStrategyContext for the active context, built on first use."""
        if self._storage_strategy_context is None:
            strategy = self.build_strategy(self.get_current_context())
            self._storage_strategy_context = StorageStrategyContext(strategy)
            logger.debug("storage strategy: %s", strategy.storage_type)
        return self._storage_strategy_context

    def load_config(self) -> AppConfig:
        """Load configuration from storage, creating the default on first run.

        Raises:
            RuntimeError: If the file exists but cannot be parsed
        """
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            self._config = self.create_default_config()
        except Exception as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self):
        """Save the current configuration to storage."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self.config.model_dump_json(indent=4))
            self.config_path.chmod(0o600)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def create_default_config(self) -> AppConfig:
        """Create the default configuration: a local vault plus a remote template."""
        local_context = Context(
            name="local",
            type="local",
            source=str(self.data_dir / "vault.db"),
            description="Local SQLite vault",
        )
        remote_context = Context(
            name="remote",
            type="remote",
            source=DEFAULT_REMOTE_URL,
            description="Self-hosted document API (requires login)",
        )
        self._config = AppConfig(
            current_context_name=local_context.name,
            contexts=[local_context, remote_context],
        )
        self.save_config()
        return self._config

    def credentials_path(self, context_name: str) -> Path:
        """Session file of a context."""
        return self.credentials_dir / f"{context_name}.json"

    def build_strategy(self, context: Context) -> StorageStrategy:
        """Create the storage strategy for *context*."""
        credentials_path = self.credentials_path(context.name)
        if context.type == "remote":
            return RemoteStorageStrategy(
                base_url=context.source,
                credentials_path=credentials_path,
                settings_path=self.settings_path,
                api_config=self.config.api,
            )
        return LocalStorageStrategy(
            db_path=context.source,
            objects_dir=self.objects_dir,
            credentials_path=credentials_path,
            settings_path=self.settings_path,
        )

    def list_contexts(self) -> list[Context]:
        """List all available contexts."""
        return self.config.contexts

    def get_current_context(self) -> Context:
        """Get the currently active context.

        Raises:
            ValueError: If the current context is not configured
        """
        return self.config.get_current_context()

    def use_context(self, name: str) -> Context:
        """Set the current context by name."""
        context = self.config.get_context(name)
        self.config.current_context_name = context.name
        self.save_config()
        self._storage_strategy_context = None
        return context

    def add_context(self, context: Context):
        """Add a new context to the configuration."""
        self.config.add_context(context)
        self.save_config()

    def remove_context(self, name: str):
        """Remove a context and its credentials."""
        self.config.remove_context(name)
        self.save_config()
        self.credentials_path(name).unlink(missing_ok=True)


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service


def get_storage_strategy_context() -> StorageStrategyContext:
    """Get a StorageStrategyContext based on the current configuration."""
    return get_config_service().storage_strategy_context
