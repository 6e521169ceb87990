"""FirebaseStore — Firebase Realtime Database over its REST API."""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from settings_provider.exceptions import ProviderConfigError, StoreError
from settings_provider.stores.base import DocumentStore, split_path

logger = logging.getLogger(__name__)


class FirebaseStore(DocumentStore):
    """Talks to a Realtime Database through ``{url}/{path}.json`` endpoints.

    ``fetch`` is a ``GET``, ``update`` a ``PATCH`` (which merges children)
    and ``remove`` a ``DELETE``.

    Parameters:
        url:        Database URL, e.g. ``https://my-app.firebaseio.com``.
                    Falls back to the ``FIREBASE_DATABASE_URL`` env var.
        auth_token: Database secret or ID token, sent as the ``auth`` query
                    parameter.  Falls back to ``FIREBASE_AUTH_TOKEN``.
        timeout:    HTTP request timeout in seconds.  Defaults to 30.
        client:     Optional pre-built ``httpx.AsyncClient`` (tests inject
                    one wired to ``httpx.MockTransport``).

    Raises:
        StoreError: On any transport failure or non-2xx response.
    """

    def __init__(
        self,
        url: str | None = None,
        *,
        auth_token: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        resolved_url = url or os.getenv("FIREBASE_DATABASE_URL", "")
        if not resolved_url:
            raise ProviderConfigError(
                "Database URL not configured (set url or FIREBASE_DATABASE_URL env var)"
            )
        self._url = resolved_url.rstrip("/")
        self._auth_token = auth_token or os.getenv("FIREBASE_AUTH_TOKEN", "")
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _endpoint(self, path: str) -> str:
        return f"{self._url}/{'/'.join(split_path(path))}.json"

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        json: Any = None,
    ) -> httpx.Response:
        params = {"auth": self._auth_token} if self._auth_token else None
        try:
            response = await self._get_client().request(
                method,
                self._endpoint(path),
                params=params,
                json=json,
            )
        except httpx.TimeoutException as exc:
            raise StoreError(operation, path, f"timed out after {self._timeout} seconds") from exc
        except httpx.HTTPError as exc:
            raise StoreError(operation, path, str(exc)) from exc

        if response.is_error:
            raise StoreError(operation, path, f"HTTP {response.status_code}")
        return response

    # ── DocumentStore protocol ───────────────────────────────

    async def fetch(self, path: str) -> Any | None:
        response = await self._request("fetch", "GET", path)
        value = response.json()
        # Children keyed "0", "1", ... come back as a JSON array with holes
        if isinstance(value, list):
            value = {str(i): child for i, child in enumerate(value) if child is not None}
        return value

    async def update(self, path: str, fields: dict[str, Any]) -> None:
        await self._request("update", "PATCH", path, json=fields)
        logger.debug("Updated %d field(s) at %s", len(fields), path)

    async def remove(self, path: str) -> None:
        await self._request("remove", "DELETE", path)
        logger.debug("Removed %s", path)
