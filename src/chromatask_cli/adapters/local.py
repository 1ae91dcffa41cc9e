"""Local adapters - filesystem object storage, settings file and local sign-in.

Used by the ``local`` context together with the SQLite document store.
"""

from __future__ import annotations

import json
import sys
import uuid
from json import JSONDecodeError
from pathlib import Path
from typing import Any

from rich.prompt import Prompt

from chromatask_cli.models import User
from chromatask_cli.models.exceptions import AuthError, NotFoundError, StoreError
from chromatask_cli.repositories import AuthProvider, KeyValueStore, ObjectStorage
from chromatask_cli.utils.logger import get_logger

logger = get_logger("adapters.local")


def read_json_file(path: Path) -> dict[str, Any] | None:
    """Read a JSON object from *path*; None when missing or unreadable."""
    if not path.exists():
        return None
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, JSONDecodeError) as e:
        logger.warning("could not read %s: %s", path, e)
        return None
    return data if isinstance(data, dict) else None


def write_private_json(path: Path, data: dict[str, Any]) -> None:
    """Write a JSON object readable by the owner only."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    path.chmod(0o600)


class FilesystemObjectStorage(ObjectStorage):
    """Object storage in a local directory, addressed by ``file://`` URLs."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if not target.is_relative_to(self.root.resolve()):
            raise StoreError(f"Invalid object path: {path}")
        return target

    async def upload(self, path: str, data: bytes) -> None:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise StoreError(f"Failed to store {path}: {e}") from e

    async def get_url(self, path: str) -> str:
        target = self._resolve(path)
        if not target.exists():
            raise NotFoundError(f"Object not found: {path}")
        return target.as_uri()

    async def delete(self, path: str) -> None:
        target = self._resolve(path)
        try:
            target.unlink(missing_ok=True)
        except OSError as e:
            raise StoreError(f"Failed to delete {path}: {e}") from e


class JsonFileKeyValueStore(KeyValueStore):
    """String settings kept in one JSON object on disk."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def get(self, key: str) -> str | None:
        value = (read_json_file(self.path) or {}).get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = read_json_file(self.path) or {}
        data[key] = value
        try:
            write_private_json(self.path, data)
        except OSError as e:
            raise StoreError(f"Failed to write settings: {e}") from e


def local_uid(email: str) -> str:
    """Stable user id for a local identity."""
    return uuid.uuid5(uuid.NAMESPACE_URL, f"chromatask:{email.strip().lower()}").hex


class LocalAuthProvider(AuthProvider):
    """Sign-in for the local vault: the identity is just an email address.

    The session is persisted in the context's credentials file.
    """

    def __init__(self, credentials_path: str | Path, interactive: bool | None = None):
        self.credentials_path = Path(credentials_path)
        self.interactive = sys.stdin.isatty() if interactive is None else interactive

    def current_user(self) -> User | None:
        data = read_json_file(self.credentials_path)
        if not data or not data.get("user"):
            return None
        return User.model_validate(data["user"])

    async def sign_in(self) -> User | None:
        if not self.interactive:
            raise AuthError("popup_blocked")
        try:
            email = Prompt.ask("Email").strip()
            if not email:
                return None
            display_name = Prompt.ask("Display name", default=email.split("@")[0]).strip()
        except (KeyboardInterrupt, EOFError):
            return None

        user = User(uid=local_uid(email), email=email, display_name=display_name or None)
        write_private_json(self.credentials_path, {"user": user.to_document()})
        return user

    async def sign_out(self) -> None:
        self.credentials_path.unlink(missing_ok=True)
