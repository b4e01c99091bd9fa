"""Wrapper around ``httpx.Response`` exposing pagination and rate limit details."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import httpx

from .pagination import parse_link_header
from .rate_limit import Rate, parse_rate

HEADER_TOKEN_EXPIRATION = "GitHub-Authentication-Token-Expiration"


def _parse_token_expiration(value: str | None) -> datetime | None:
    if not value:
        return None
    value = value.strip()
    if value.endswith(" UTC"):
        try:
            parsed = datetime.strptime(value[:-4], "%Y-%m-%d %H:%M:%S")
        except ValueError:
            return None
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return datetime.strptime(value, "%Y-%m-%d %H:%M:%S %z")
    except ValueError:
        return None


class Response:
    """An API response with pagination and rate limit details decoded."""

    def __init__(self, http_response: httpx.Response) -> None:
        self.http_response = http_response
        links = parse_link_header(http_response.headers.get("Link"))
        self.first_page = links.first_page
        self.prev_page = links.prev_page
        self.next_page = links.next_page
        self.last_page = links.last_page
        self.next_page_token = links.next_page_token
        self.cursor = links.cursor
        self.before = links.before
        self.after = links.after
        self.since = links.since
        self.rate: Rate | None = parse_rate(http_response.headers)
        # Expiry of fine-grained or OAuth tokens, when GitHub reports one.
        self.token_expiration = _parse_token_expiration(
            http_response.headers.get(HEADER_TOKEN_EXPIRATION)
        )

    @property
    def status_code(self) -> int:
        return self.http_response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self.http_response.headers

    def json(self) -> Any:
        return self.http_response.json()

    def __repr__(self) -> str:
        return f"<Response [{self.status_code}]>"
