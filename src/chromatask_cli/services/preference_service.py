"""Per-user view preferences kept in local key-value storage."""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError

from chromatask_cli.models import Preferences
from chromatask_cli.repositories import KeyValueStore
from chromatask_cli.utils.logger import get_logger

logger = get_logger("prefs")


def preferences_key(uid: str) -> str:
    """Storage key of a user's preferences."""
    return f"chromatask:prefs:{uid}"


class PreferenceService:
    """Service for loading and saving view preferences.

    Preferences are never synced to the document store.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    def load(self, uid: str) -> Preferences:
        """Load a user's preferences, falling back to defaults.

        A missing or unreadable entry yields the default preferences.
        """
        raw = self.store.get(preferences_key(uid))
        if not raw:
            return Preferences()
        try:
            return Preferences.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.warning("ignoring unreadable preferences for %s: %s", uid, e)
            return Preferences()

    def save(self, uid: str, prefs: Preferences) -> None:
        self.store.set(preferences_key(uid), prefs.model_dump_json(by_alias=True))
        logger.debug("saved preferences for %s", uid)

    def reset(self, uid: str) -> Preferences:
        """Store and return the default preferences."""
        prefs = Preferences()
        self.save(uid, prefs)
        return prefs
