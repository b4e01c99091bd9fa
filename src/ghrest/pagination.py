"""List options, Link-header pagination and page iteration helpers."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

import httpx
from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from .response import Response

T = TypeVar("T")
O = TypeVar("O", bound=BaseModel)


# ---------------------------------------------------------------------------
# Query options
# ---------------------------------------------------------------------------


class QueryOptions(BaseModel):
    """Base for query-string option models."""

    model_config = ConfigDict(populate_by_name=True)


class ListOptions(QueryOptions):
    """Offset pagination parameters accepted by most list endpoints."""

    page: int | None = None
    per_page: int | None = Field(default=None, le=100)


class ListCursorOptions(QueryOptions):
    """Cursor pagination parameters.

    ``page`` is a string here because some endpoints hand out opaque page
    tokens instead of numbers.
    """

    page: str | None = None
    per_page: int | None = Field(default=None, le=100)
    first: int | None = None
    last: int | None = None
    after: str | None = None
    before: str | None = None
    cursor: str | None = None


class PageOptions(QueryOptions):
    """Open-ended options used when iteration starts without any.

    Whatever the ``Link`` header advances (``page``, ``after``, ``since``) is
    kept as an extra field and sent back as a query parameter.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")


def encode_options(opts: BaseModel | None) -> dict[str, str]:
    """Encode an options model into query parameters.

    ``None`` fields are omitted, booleans become ``true``/``false``, lists are
    comma-joined and datetimes are rendered as ISO-8601.
    """
    if opts is None:
        return {}
    params: dict[str, str] = {}
    for key, value in opts.model_dump(mode="json", by_alias=True, exclude_none=True).items():
        if isinstance(value, bool):
            params[key] = "true" if value else "false"
        elif isinstance(value, list):
            if value:
                params[key] = ",".join(str(v) for v in value)
        else:
            params[key] = str(value)
    return params


# ---------------------------------------------------------------------------
# Link header
# ---------------------------------------------------------------------------


@dataclass
class PageLinks:
    """Pagination state extracted from a ``Link`` header."""

    first_page: int = 0
    prev_page: int = 0
    next_page: int = 0
    last_page: int = 0
    next_page_token: str = ""
    cursor: str = ""
    before: str = ""
    after: str = ""
    since: str = ""


def _to_int(value: str | None) -> int:
    try:
        return int(value) if value else 0
    except ValueError:
        return 0


def parse_link_header(value: str | None) -> PageLinks:
    """Parse an RFC 5988 ``Link`` header; malformed entries are ignored."""
    links = PageLinks()
    if not value:
        return links

    for link in value.split(","):
        segments = [s.strip() for s in link.strip().split(";")]
        if len(segments) < 2:
            continue
        target = segments[0]
        if not (target.startswith("<") and target.endswith(">")):
            continue
        try:
            url = httpx.URL(target[1:-1])
        except httpx.InvalidURL:
            continue
        params = url.params
        page = params.get("page")

        for segment in segments[1:]:
            rel = segment.replace(" ", "")
            if rel == 'rel="first"':
                links.first_page = _to_int(page)
            elif rel == 'rel="prev"':
                links.prev_page = _to_int(page)
            elif rel == 'rel="last"':
                links.last_page = _to_int(page)
            elif rel == 'rel="next"':
                links.next_page = _to_int(page)
                if page and links.next_page == 0:
                    links.next_page_token = page
                links.next_page_token = params.get("page_token", links.next_page_token)
                links.cursor = params.get("cursor", "")
                links.before = params.get("before", "")
                links.after = params.get("after", "")
                links.since = params.get("since", "")
    return links


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------


@dataclass
class Page(Generic[T]):
    """One page of a list endpoint together with its HTTP response.

    ``total_count`` is set for endpoints that wrap their list in an object
    (e.g. ``{"total_count": 3, "workflow_runs": [...]}``).
    """

    items: list[T]
    response: Response
    total_count: int | None = None

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> T:
        return self.items[index]

    @property
    def next_page(self) -> int:
        return self.response.next_page

    @property
    def last_page(self) -> int:
        return self.response.last_page

    @property
    def next_page_token(self) -> str:
        return self.response.next_page_token

    @property
    def after(self) -> str:
        return self.response.after

    @property
    def since(self) -> str:
        return self.response.since


def _accepts(opts: BaseModel, name: str) -> bool:
    return name in type(opts).model_fields or opts.model_config.get("extra") == "allow"


def _next_options(page: Page[Any], opts: O) -> O | None:
    if page.next_page and _accepts(opts, "page"):
        value: Any = page.next_page
        if isinstance(opts, ListCursorOptions):
            value = str(value)
        return opts.model_copy(update={"page": value})
    if page.next_page_token and _accepts(opts, "page"):
        return opts.model_copy(update={"page": page.next_page_token})
    if page.after and _accepts(opts, "after"):
        return opts.model_copy(update={"after": page.after})
    if page.since and _accepts(opts, "since"):
        since: Any = int(page.since) if page.since.isdigit() else page.since
        return opts.model_copy(update={"since": since})
    return None


async def scan(
    fetch: Callable[[O], Awaitable[Page[T]]], opts: O | None = None
) -> AsyncIterator[T]:
    """Yield every item across all pages of a list call.

    *fetch* is called with the options for each page; the options are
    advanced from the response ``Link`` header (``page`` for offset
    pagination, ``after`` for cursor pagination) until no next page is
    advertised. Errors propagate immediately.
    """
    current: Any = opts if opts is not None else PageOptions()
    while True:
        page = await fetch(current)
        for item in page.items:
            yield item
        nxt = _next_options(page, current)
        if nxt is None:
            return
        current = nxt


async def collect(
    fetch: Callable[[O], Awaitable[Page[T]]], opts: O | None = None
) -> list[T]:
    """Gather every item across all pages into a list."""
    return [item async for item in scan(fetch, opts)]
