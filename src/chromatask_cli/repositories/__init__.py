"""Port interfaces for Chromatask.

This package contains abstract base classes (ABCs) that define the contracts
for persistence, storage and identity. These are the "Ports" in the
Hexagonal Architecture.

Implementations (Adapters) are in:
- chromatask_cli.adapters.sqlite (local document store)
- chromatask_cli.adapters.local (filesystem storage, local sign-in, settings file)
- chromatask_cli.adapters.rest_api (remote API)
"""

from .repository import (
    TAGS_COLLECTION,
    TASKS_COLLECTION,
    AuthProvider,
    DocumentStore,
    KeyValueStore,
    ObjectStorage,
)

__all__ = [
    "DocumentStore",
    "ObjectStorage",
    "KeyValueStore",
    "AuthProvider",
    "TASKS_COLLECTION",
    "TAGS_COLLECTION",
]
