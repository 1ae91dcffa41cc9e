"""SQLite adapter module - Local document store implementation."""

from chromatask_cli.adapters.sqlite.document_store import SqliteDocumentStore

__all__ = [
    "SqliteDocumentStore",
]
