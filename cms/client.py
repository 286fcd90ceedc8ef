"""Async HTTP client for the record API.

    async with CmsClient("https://cms.example.com/api/v1", token=token) as cms:
        posts = cms.collection("posts")
        created = await posts.create({"title": "Hello"})
        async for record in posts.iter_records():
            ...

Records are returned as the JSON objects the API serves
(id, collection, data, version, createdAt, updatedAt).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import httpx


class CmsClientError(Exception):
    """Raised for any non-2xx response; carries the status and the API's error message."""

    def __init__(self, status_code: int, message: str, code: str | None = None) -> None:
        self.status_code = status_code
        self.message = message
        self.code = code
        super().__init__(f"{status_code}: {message}")


def _raise_for_error(response: httpx.Response) -> None:
    if response.is_success:
        return
    message = response.reason_phrase or "Request failed"
    code = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = str(body.get("error") or body.get("detail") or message)
        code = body.get("code")
    raise CmsClientError(response.status_code, message, code)


class CmsClient:
    """Entry point bound to one API base URL and an optional bearer token."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._token = token
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=30.0)
        self._owns_http = http_client is None

    async def __aenter__(self) -> CmsClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    def collection(self, slug: str) -> CollectionClient:
        return CollectionClient(self, slug)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {self._token}"} if self._token else {}
        response = await self._http.request(
            method,
            f"{self.base_url}{path}",
            json=json,
            params={k: v for k, v in (params or {}).items() if v is not None},
            headers=headers,
        )
        _raise_for_error(response)
        return response.json()


class CollectionClient:
    """Record operations on one collection."""

    def __init__(self, client: CmsClient, slug: str) -> None:
        self._client = client
        self.slug = slug

    def _path(self, record_id: str | None = None) -> str:
        path = f"/data/{self.slug}"
        return f"{path}/{record_id}" if record_id is not None else path

    async def get(self, record_id: str) -> dict[str, Any]:
        body = await self._client.request("GET", self._path(record_id))
        return body["record"]

    async def list(
        self, cursor: str | None = None, limit: int | None = None
    ) -> tuple[list[dict[str, Any]], str | None]:
        """Return one page of records and the cursor for the next page (None at the end)."""
        body = await self._client.request(
            "GET", self._path(), params={"cursor": cursor, "limit": limit}
        )
        return body["records"], body.get("cursor")

    async def iter_records(self, limit: int | None = None) -> AsyncIterator[dict[str, Any]]:
        """Yield every live record, following cursors until the listing is exhausted."""
        cursor: str | None = None
        while True:
            records, cursor = await self.list(cursor=cursor, limit=limit)
            for record in records:
                yield record
            if not cursor:
                return

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        body = await self._client.request("POST", self._path(), json={"data": data})
        return body["record"]

    async def update(self, record_id: str, data: dict[str, Any]) -> dict[str, Any]:
        body = await self._client.request(
            "PUT", self._path(record_id), json={"data": data}
        )
        return body["record"]

    async def delete(self, record_id: str) -> None:
        await self._client.request("DELETE", self._path(record_id))
