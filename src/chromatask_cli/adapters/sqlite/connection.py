"""Database connection management for the SQLite local vault.

A process-wide connection per vault path with WAL mode, owner-only file
permissions and migrations applied on open.
"""

from __future__ import annotations

import atexit
import os
import sqlite3
from pathlib import Path

from platformdirs import user_data_dir

from chromatask_cli.adapters.sqlite.migrations import ALL_MIGRATIONS, MigrationRunner
from chromatask_cli.utils.logger import get_logger


class DatabaseConnection:
    """Singleton connection manager for the local vault."""

    _instance: DatabaseConnection | None = None
    _connection: sqlite3.Connection | None = None
    _db_path: Path | None = None

    def __new__(cls) -> DatabaseConnection:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def get_connection(cls, db_path: str | Path | None = None) -> sqlite3.Connection:
        """Get or create the vault connection.

        Args:
            db_path: Path to database file. If None, uses default location.
                ``":memory:"`` opens a private in-memory vault.

        Returns:
            Configured sqlite3.Connection
        """
        if str(db_path) == ":memory:":
            return open_connection(":memory:")

        instance = cls()

        if db_path is None:
            db_path = Path(user_data_dir("chromatask_cli")) / "vault.db"
        else:
            db_path = Path(db_path)

        if instance._connection is not None and instance._db_path == db_path:
            return instance._connection

        if instance._connection is not None:
            instance._connection.close()

        db_path.parent.mkdir(parents=True, exist_ok=True)
        is_new_database = not db_path.exists()

        connection = open_connection(str(db_path))
        connection.execute("PRAGMA journal_mode = WAL")
        if is_new_database:
            os.chmod(db_path, 0o600)
            get_logger().info("created local vault at %s", db_path)

        instance._connection = connection
        instance._db_path = db_path
        atexit.register(cls.close_connection)
        return connection

    @classmethod
    def close_connection(cls) -> None:
        """Close database connection gracefully."""
        instance = cls()
        if instance._connection is None:
            return
        try:
            instance._connection.commit()
            instance._connection.close()
        except sqlite3.Error as e:
            get_logger().warning("error while closing vault: %s", e)
        finally:
            instance._connection = None
            instance._db_path = None


def open_connection(target: str) -> sqlite3.Connection:
    """Open a configured connection and bring its schema up to date."""
    connection = sqlite3.connect(target, check_same_thread=False, timeout=30.0)
    connection.row_factory = sqlite3.Row
    MigrationRunner(connection).run_migrations(ALL_MIGRATIONS)
    return connection


def get_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    """Helper function to get database connection."""
    return DatabaseConnection.get_connection(db_path)
