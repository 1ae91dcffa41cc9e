"""HTTP client for a remote Chromatask document API."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import httpx

from chromatask_cli.adapters.local import read_json_file, write_private_json
from chromatask_cli.models.config_models import APIConfig
from chromatask_cli.utils.logger import get_logger

logger = get_logger("api")


class APIClient:
    """HTTP client with bearer auth, token refresh and retry on 5xx/network errors.

    Args:
        base_url: API root (the remote context's source)
        api_config: Timeout and retry settings
        credentials_path: Session file holding ``token`` and ``refreshToken``
    """

    def __init__(
        self,
        base_url: str,
        api_config: APIConfig | None = None,
        credentials_path: str | Path | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_config = api_config or APIConfig()
        self.timeout = self.api_config.timeout
        self.credentials_path = Path(credentials_path) if credentials_path else None
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> APIClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def load_credentials(self) -> dict | None:
        if self.credentials_path is None:
            return None
        return read_json_file(self.credentials_path)

    def save_credentials(self, data: dict) -> None:
        if self.credentials_path is not None:
            write_private_json(self.credentials_path, data)

    def _get_headers(self, skip_auth: bool = False) -> dict[str, str]:
        """Get HTTP headers with authentication."""
        headers = {"Accept": "application/json"}
        if not skip_auth:
            credentials = self.load_credentials()
            if credentials and credentials.get("token"):
                headers["Authorization"] = f"Bearer {credentials['token']}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _try_refresh_token(self) -> bool:
        """Exchange the refresh token for a new access token.

        Returns True when the stored session was updated.
        """
        credentials = self.load_credentials()
        if not credentials or not credentials.get("refreshToken"):
            return False

        client = await self._get_client()
        try:
            response = await client.post(
                "/auth/refresh",
                json={"refreshToken": credentials["refreshToken"]},
                headers=self._get_headers(skip_auth=True),
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("token refresh failed: %s", e)
            return False

        if not data.get("token"):
            return False
        credentials["token"] = data["token"]
        if data.get("refreshToken"):
            credentials["refreshToken"] = data["refreshToken"]
        self.save_credentials(credentials)
        logger.info("access token refreshed")
        return True

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        content: bytes | None = None,
        retry: int | None = None,
        skip_auth: bool = False,
    ) -> httpx.Response:
        """Make an HTTP request to the API.

        4xx responses are raised immediately (after one refresh attempt on 401);
        5xx responses and network errors are retried with exponential backoff.

        Raises:
            httpx.HTTPStatusError: On an error response
            httpx.RequestError: When the server cannot be reached
        """
        if retry is None:
            retry = self.api_config.retry

        client = await self._get_client()
        url = path if path.startswith("/") else f"/{path}"
        headers = self._get_headers(skip_auth=skip_auth)
        if content is not None:
            headers["Content-Type"] = "application/octet-stream"

        refreshed = False
        last_exception: Exception | None = None
        attempt = 0
        while attempt <= retry:
            try:
                response = await client.request(
                    method, url, json=json, params=params, content=content, headers=headers
                )
                response.raise_for_status()
                return response
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status == 401 and not skip_auth and not refreshed:
                    refreshed = True
                    if await self._try_refresh_token():
                        headers = self._get_headers()
                        if content is not None:
                            headers["Content-Type"] = "application/octet-stream"
                        continue
                if 400 <= status < 500:
                    raise
                last_exception = e
            except httpx.RequestError as e:
                last_exception = e

            logger.warning("%s %s failed (attempt %d): %s", method, url, attempt + 1, last_exception)
            if attempt < retry:
                await asyncio.sleep(2**attempt)
            attempt += 1

        if last_exception:
            raise last_exception
        raise RuntimeError("Request failed after all retries")

    async def get(self, path: str, *, params: dict[str, Any] | None = None) -> httpx.Response:
        """Make a GET request."""
        return await self.request("GET", path, params=params)

    async def post(
        self, path: str, *, json: dict[str, Any] | None = None, skip_auth: bool = False
    ) -> httpx.Response:
        """Make a POST request."""
        return await self.request("POST", path, json=json, skip_auth=skip_auth)

    async def put(self, path: str, *, content: bytes) -> httpx.Response:
        """Make a PUT request with a raw body."""
        return await self.request("PUT", path, content=content)

    async def patch(self, path: str, *, json: dict[str, Any] | None = None) -> httpx.Response:
        """Make a PATCH request."""
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> httpx.Response:
        """Make a DELETE request."""
        return await self.request("DELETE", path)
