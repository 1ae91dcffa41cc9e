"""Initial vault schema: the shared documents table and its indexes."""

import sqlite3

from chromatask_cli.adapters.sqlite import schema

from .runner import Migration


class InitialSchemaMigration(Migration):
    """Migration 001: Create the documents table."""

    @property
    def version(self) -> int:
        return 1

    @property
    def description(self) -> str:
        return "Initial document store schema"

    def up(self, connection: sqlite3.Connection) -> None:
        connection.execute(schema.CREATE_DOCUMENTS_TABLE)
        for index_sql in schema.ALL_INDEXES:
            connection.execute(index_sql)


initial_migration = InitialSchemaMigration()
