"""Database schema definitions for the local SQLite vault.

The vault is a document store: every collection shares one table and each
record keeps its fields as a JSON object, mirroring the remote backend.
"""

from __future__ import annotations

SCHEMA_VERSION = 1

CREATE_DOCUMENTS_TABLE = """
CREATE TABLE IF NOT EXISTS documents (
    collection TEXT NOT NULL,
    id TEXT NOT NULL,
    data TEXT NOT NULL,
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL,
    PRIMARY KEY (collection, id)
)
"""

CREATE_DOCUMENTS_OWNER_INDEX = """
CREATE INDEX IF NOT EXISTS idx_documents_owner
ON documents (collection, json_extract(data, '$.userId'))
"""

ALL_INDEXES = [
    CREATE_DOCUMENTS_OWNER_INDEX,
]
