"""REST API adapters - port implementations over a remote document API.

Endpoints (relative to the context source URL):

- ``GET    /collections/{collection}?field=value`` -> list of records
- ``POST   /collections/{collection}`` -> ``{"id": ...}``
- ``PATCH  /collections/{collection}/{id}``
- ``DELETE /collections/{collection}/{id}``
- ``PUT    /objects/{path}``, ``GET /objects/{path}/url``, ``DELETE /objects/{path}``
- ``POST   /auth/login``, ``POST /auth/logout``
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import httpx
from rich.prompt import Prompt

from chromatask_cli.adapters.local import read_json_file, write_private_json
from chromatask_cli.models import User
from chromatask_cli.models.exceptions import AuthError, NotFoundError, StoreError
from chromatask_cli.repositories import AuthProvider, DocumentStore, ObjectStorage
from chromatask_cli.services.api.client import APIClient
from chromatask_cli.utils.logger import get_logger

logger = get_logger("adapters.rest")


def _store_error(action: str, error: httpx.HTTPError) -> StoreError:
    if isinstance(error, httpx.HTTPStatusError):
        if error.response.status_code == 404:
            return NotFoundError(f"{action}: not found")
        return StoreError(f"{action}: server returned {error.response.status_code}")
    return StoreError(f"{action}: {error}")


def _query_params(filters: dict[str, Any]) -> dict[str, Any]:
    params = {}
    for key, value in filters.items():
        if isinstance(value, bool):
            value = "true" if value else "false"
        params[key] = value
    return params


class RestDocumentStore(DocumentStore):
    """Document store backed by the remote collections API."""

    def __init__(self, client: APIClient):
        self.client = client

    async def query(self, collection: str, filters: dict[str, Any]) -> list[dict[str, Any]]:
        try:
            response = await self.client.get(
                f"/collections/{collection}", params=_query_params(filters)
            )
            data = response.json()
        except httpx.HTTPError as e:
            raise _store_error(f"Failed to read {collection}", e) from e
        except ValueError as e:
            raise StoreError(f"Failed to read {collection}: invalid response") from e

        # Accept both a bare list and {"items": [...]}
        if isinstance(data, dict):
            data = data.get("items", [])
        return [record for record in data if isinstance(record, dict) and record.get("id")]

    async def create(self, collection: str, data: dict[str, Any]) -> str:
        payload = {key: value for key, value in data.items() if key != "id"}
        try:
            response = await self.client.post(f"/collections/{collection}", json=payload)
            record_id = response.json().get("id")
        except httpx.HTTPError as e:
            raise _store_error(f"Failed to create {collection} record", e) from e
        except (ValueError, AttributeError) as e:
            raise StoreError(f"Failed to create {collection} record: invalid response") from e

        if not record_id:
            raise StoreError(f"Failed to create {collection} record: no id returned")
        logger.debug("created %s/%s", collection, record_id)
        return str(record_id)

    async def update(self, collection: str, record_id: str, data: dict[str, Any]) -> None:
        try:
            await self.client.patch(f"/collections/{collection}/{record_id}", json=data)
        except httpx.HTTPError as e:
            raise _store_error(f"Failed to update {collection}/{record_id}", e) from e
        logger.debug("updated %s/%s fields=%s", collection, record_id, sorted(data))

    async def delete(self, collection: str, record_id: str) -> None:
        try:
            await self.client.delete(f"/collections/{collection}/{record_id}")
        except httpx.HTTPError as e:
            raise _store_error(f"Failed to delete {collection}/{record_id}", e) from e
        logger.debug("deleted %s/%s", collection, record_id)


class RestObjectStorage(ObjectStorage):
    """Attachment storage behind the remote objects API."""

    def __init__(self, client: APIClient):
        self.client = client

    async def upload(self, path: str, data: bytes) -> None:
        try:
            await self.client.put(f"/objects/{path}", content=data)
        except httpx.HTTPError as e:
            raise _store_error(f"Failed to upload {path}", e) from e

    async def get_url(self, path: str) -> str:
        try:
            response = await self.client.get(f"/objects/{path}/url")
            return response.json()["url"]
        except httpx.HTTPError as e:
            raise _store_error(f"Failed to resolve {path}", e) from e
        except (ValueError, KeyError, TypeError) as e:
            raise StoreError(f"Failed to resolve {path}: invalid response") from e

    async def delete(self, path: str) -> None:
        try:
            await self.client.delete(f"/objects/{path}")
        except httpx.HTTPError as e:
            raise _store_error(f"Failed to delete {path}", e) from e


def auth_error_from_http(error: httpx.HTTPError) -> AuthError:
    """Categorize a failed sign-in request."""
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        if status in (400, 401):
            return AuthError("invalid_credentials")
        if status == 403:
            return AuthError("unauthorized_domain")
        return AuthError("unknown", f"Sign-in failed: server returned {status}")
    if isinstance(error, httpx.RequestError):
        return AuthError("network")
    return AuthError("unknown")


class RestAuthProvider(AuthProvider):
    """Email/password sign-in against the remote API.

    The returned token pair and user are persisted in the context's
    credentials file, which the API client reads for bearer auth.
    """

    def __init__(
        self,
        client: APIClient,
        credentials_path: str | Path,
        interactive: bool | None = None,
    ):
        self.client = client
        self.credentials_path = Path(credentials_path)
        self.interactive = sys.stdin.isatty() if interactive is None else interactive

    def current_user(self) -> User | None:
        data = read_json_file(self.credentials_path)
        if not data or not data.get("token") or not data.get("user"):
            return None
        return User.model_validate(data["user"])

    async def sign_in(self) -> User | None:
        if not self.interactive:
            raise AuthError("popup_blocked")
        try:
            email = Prompt.ask("Email").strip()
            if not email:
                return None
            password = Prompt.ask("Password", password=True)
        except (KeyboardInterrupt, EOFError):
            return None
        if not password:
            return None

        try:
            response = await self.client.post(
                "/auth/login", json={"email": email, "password": password}, skip_auth=True
            )
            data = response.json()
        except httpx.HTTPError as e:
            raise auth_error_from_http(e) from e
        except ValueError as e:
            raise AuthError("unknown", "Sign-in failed: invalid server response") from e

        if not data.get("token") or not data.get("user"):
            raise AuthError("unknown", "Sign-in failed: invalid server response")

        user = User.model_validate(data["user"])
        write_private_json(
            self.credentials_path,
            {
                "token": data["token"],
                "refreshToken": data.get("refreshToken"),
                "user": user.to_document(),
            },
        )
        return user

    async def sign_out(self) -> None:
        try:
            await self.client.request("POST", "/auth/logout", retry=0)
        except httpx.HTTPError as e:
            logger.warning("remote logout failed: %s", e)
        self.credentials_path.unlink(missing_ok=True)
