"""Thin async adapter over the Notion REST API."""

from typing import Any, Self, TypeAlias

import httpx


NOTION_API_URL = "https://api.notion.com/v1/"
NOTION_VERSION = "2022-06-28"
TIMEOUT = 60


Block: TypeAlias = dict[str, Any]
Page: TypeAlias = dict[str, Any]


class NotionAPIError(Exception):
    """Non-2xx response from Notion."""

    def __init__(self, status: int, code: str, message: str) -> None:
        super().__init__(f"{status} {code}: {message}")
        self.status = status
        self.code = code
        self.message = message

    @classmethod
    def from_response(cls, resp: httpx.Response) -> Self:
        try:
            body = resp.json()
        except ValueError:
            body = {}
        return cls(
            status=resp.status_code,
            code=body.get("code", "unknown"),
            message=body.get("message", resp.text),
        )


def notion_client_factory(
    token: str,
    *,
    version: str = NOTION_VERSION,
    timeout: float = TIMEOUT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=NOTION_API_URL,
        headers={
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Notion-Version": version,
        },
        timeout=timeout,
        transport=transport,
    )


class NotionClient:
    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self.http_client = http_client

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        resp = await self.http_client.request(method, path, json=json, params=params)
        if resp.is_error:
            raise NotionAPIError.from_response(resp)
        return resp.json()

    async def retrieve_block(self, block_id: str) -> Block:
        return await self._request("GET", f"blocks/{block_id}")

    async def update_block(self, block_id: str, patch: dict[str, Any]) -> Block:
        return await self._request("PATCH", f"blocks/{block_id}", json=patch)

    async def query_database(
        self,
        database_id: str,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        body = {} if cursor is None else {"start_cursor": cursor}
        return await self._request("POST", f"databases/{database_id}/query", json=body)

    async def retrieve_database(self, database_id: str) -> dict[str, Any]:
        return await self._request("GET", f"databases/{database_id}")

    async def list_children(
        self,
        block_id: str,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        params = None if cursor is None else {"start_cursor": cursor}
        return await self._request("GET", f"blocks/{block_id}/children", params=params)

    async def append_children(self, block_id: str, children: list[Block]) -> None:
        await self._request(
            "PATCH", f"blocks/{block_id}/children", json={"children": children}
        )

    async def aclose(self) -> None:
        await self.http_client.aclose()
