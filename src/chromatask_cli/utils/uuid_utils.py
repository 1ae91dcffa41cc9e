"""Identifier helpers for Chromatask.

Provides id generation, short id display, and prefix resolution.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable


def generate_id() -> str:
    """Generate a new client-side identifier (uuid4 hex, 32 characters)."""
    return uuid.uuid4().hex


def shorten_id(value: str, length: int = 8) -> str:
    """Get shortened version of an id for display in lists."""
    return value[:length]


def resolve_id_prefix(prefix: str, candidates: Iterable[str], kind: str = "task") -> str:
    """Resolve a short id prefix against a collection of full ids.

    Args:
        prefix: Full id or a unique prefix of one
        candidates: Known full ids
        kind: Resource name used in error messages

    Returns:
        The matching full id

    Raises:
        ValidationError: If the prefix is blank or ambiguous
        NotFoundError: If nothing matches
    """
    # Imported here to avoid a cycle with the models package
    from chromatask_cli.models.exceptions import NotFoundError, ValidationError

    prefix = prefix.strip()
    if not prefix:
        raise ValidationError(f"A {kind} id is required")

    ids = list(candidates)
    if prefix in ids:
        return prefix

    matches = [candidate for candidate in ids if candidate.startswith(prefix)]
    if not matches:
        raise NotFoundError(f"No {kind} found matching '{prefix}'")
    if len(matches) > 1:
        raise ValidationError(
            f"Ambiguous {kind} id '{prefix}' matches {len(matches)} items; use more characters"
        )
    return matches[0]
