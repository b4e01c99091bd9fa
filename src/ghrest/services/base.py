"""Shared plumbing for service classes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar
from urllib.parse import quote

from pydantic import BaseModel

from ..pagination import Page, encode_options

if TYPE_CHECKING:
    from ..client import GitHubClient
    from ..response import Response

M = TypeVar("M", bound=BaseModel)


def escape(segment: str) -> str:
    """Percent-escape a free-text path segment (slashes included)."""
    return quote(segment, safe="")


class Service:
    """Base class giving services access to the owning client."""

    def __init__(self, client: GitHubClient) -> None:
        self._client = client

    async def _request(
        self,
        method: str,
        url: str,
        *,
        body: BaseModel | dict[str, Any] | list[Any] | None = None,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Response:
        request = self._client.new_request(method, url, body=body, params=params, headers=headers)
        return await self._client.do(request)

    async def _get(self, url: str, model: type[M], opts: BaseModel | None = None) -> M:
        response = await self._request("GET", url, params=encode_options(opts))
        return model.model_validate(response.json())

    async def _list(
        self,
        url: str,
        model: type[M],
        opts: BaseModel | None = None,
        *,
        key: str | None = None,
    ) -> Page[M]:
        """GET a list endpoint; *key* names the array inside a wrapped response."""
        response = await self._request("GET", url, params=encode_options(opts))
        data = response.json()
        total_count: int | None = None
        if key is not None:
            total_count = data.get("total_count")
            data = data.get(key) or []
        return Page([model.model_validate(item) for item in data], response, total_count)

    async def _send(
        self,
        method: str,
        url: str,
        model: type[M],
        body: BaseModel | dict[str, Any] | list[Any] | None = None,
    ) -> M:
        response = await self._request(method, url, body=body)
        return model.model_validate(response.json())

    async def _delete(self, url: str, body: BaseModel | dict[str, Any] | None = None) -> Response:
        return await self._request("DELETE", url, body=body)

    async def _check(self, url: str) -> bool:
        return await self._client.check(self._client.new_request("GET", url))
