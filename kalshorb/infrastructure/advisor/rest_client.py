"""
Thin async client for the hosted PostgREST datastore.

Every request authenticates with the service-role key, both as a
bearer token and as the ``apikey`` header. Transport failures,
non-2xx responses and undecodable payloads are all raised as
PersistenceError so callers have a single failure type to handle.
"""

import logging
from typing import Any, Optional

import httpx

from kalshorb.domain.advisor.errors import PersistenceError

logger = logging.getLogger(__name__)

REST_PREFIX = "/rest/v1"


class RestDatastoreClient:
    """Async client for ``{base_url}/rest/v1/<table>`` endpoints.

    A new ``httpx.AsyncClient`` is opened per call; no connection state
    is shared between requests.
    """

    def __init__(
        self,
        base_url: str,
        service_key: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/") + REST_PREFIX
        self._service_key = service_key
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "Authorization": f"Bearer {self._service_key}",
                "apikey": self._service_key,
            },
            timeout=self._timeout,
            transport=self._transport,
        )

    async def select(self, table: str, params: dict[str, Any]) -> Any:
        """GET rows from a table using PostgREST query parameters."""
        return await self._request("GET", table, params=params, decode=True)

    async def insert(self, table: str, row: dict[str, Any]) -> None:
        """POST a single row, asking for a minimal response."""
        await self._request(
            "POST", table, json=row, headers={"Prefer": "return=minimal"}
        )

    async def update(
        self, table: str, filters: dict[str, Any], values: dict[str, Any]
    ) -> None:
        """PATCH the rows matching ``filters``."""
        await self._request(
            "PATCH",
            table,
            params=filters,
            json=values,
            headers={"Prefer": "return=minimal"},
        )

    async def _request(
        self,
        method: str,
        table: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        decode: bool = False,
    ) -> Any:
        try:
            async with self._client() as client:
                response = await client.request(
                    method, f"/{table}", params=params, json=json, headers=headers
                )
        except httpx.HTTPError as exc:
            raise PersistenceError(table, f"{type(exc).__name__}: {exc}") from exc

        if response.is_error:
            logger.error(
                "Datastore %s %s returned HTTP %d", method, table, response.status_code
            )
            raise PersistenceError(table, f"HTTP {response.status_code}")

        if not decode:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise PersistenceError(table, "invalid JSON payload") from exc
