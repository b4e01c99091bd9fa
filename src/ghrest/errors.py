"""Exceptions raised by the client and the mapping from HTTP responses to them."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, model_validator

from .rate_limit import HEADER_RATE_REMAINING, HEADER_RETRY_AFTER, Rate, parse_rate

HEADER_OTP = "X-GitHub-OTP"


class ErrorDetail(BaseModel):
    """One entry of the ``errors`` array in an API error body.

    Validation codes include ``missing``, ``missing_field``, ``invalid``,
    ``already_exists`` and ``custom``.
    """

    model_config = ConfigDict(extra="allow")

    resource: str | None = None
    field: str | None = None
    code: str | None = None
    message: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _accept_plain_strings(cls, data: Any) -> Any:
        # Some endpoints return a bare list of strings.
        if isinstance(data, str):
            return {"message": data}
        return data

    def __str__(self) -> str:
        if self.code is None and self.message:
            return self.message
        return f"{self.code} error caused by {self.field} field on {self.resource} resource"


class ErrorBlock(BaseModel):
    """Reason a resource was blocked (HTTP 451)."""

    model_config = ConfigDict(extra="allow")

    reason: str | None = None
    created_at: datetime | None = None
    html_url: str | None = None


class GitHubError(Exception):
    """Base class for all errors raised by ghrest."""


class ErrorResponse(GitHubError):
    """The API answered with an error status."""

    def __init__(
        self,
        response: httpx.Response | None,
        message: str = "",
        errors: list[ErrorDetail] | None = None,
        documentation_url: str | None = None,
        block: ErrorBlock | None = None,
    ) -> None:
        self.response = response
        self.message = message
        self.errors = errors or []
        self.documentation_url = documentation_url
        self.block = block
        super().__init__(str(self))

    @property
    def status_code(self) -> int | None:
        return self.response.status_code if self.response is not None else None

    def __str__(self) -> str:
        if self.response is None:
            return self.message
        text = f"{self.response.status_code} {self.message}"
        try:
            request = self.response.request
        except RuntimeError:
            # Response built without a request (e.g. in tests).
            request = None
        if request is not None:
            text = f"{request.method} {sanitize_url(request.url)}: {text}"
        if self.errors:
            text += " [" + ", ".join(str(e) for e in self.errors) + "]"
        return text


class RateLimitError(ErrorResponse):
    """The primary rate limit for a category is exhausted."""

    def __init__(self, rate: Rate, response: httpx.Response | None = None, **kwargs: Any) -> None:
        self.rate = rate
        super().__init__(response, **kwargs)

    def __str__(self) -> str:
        reset = self.rate.reset.isoformat() if self.rate.reset else "unknown"
        return f"{super().__str__()} [rate reset at {reset}]"


class AbuseRateLimitError(ErrorResponse):
    """A secondary (abuse) rate limit was hit.

    ``retry_after`` is how long GitHub asked the caller to wait, when known.
    """

    def __init__(
        self,
        response: httpx.Response | None = None,
        retry_after: timedelta | None = None,
        **kwargs: Any,
    ) -> None:
        self.retry_after = retry_after
        super().__init__(response, **kwargs)


class TwoFactorAuthError(ErrorResponse):
    """The request needs a two-factor one-time password."""


class RedirectionError(ErrorResponse):
    """A permanent redirect was returned and not followed."""

    def __init__(self, response: httpx.Response, location: str | None, **kwargs: Any) -> None:
        self.location = location
        super().__init__(response, **kwargs)


class AcceptedError(GitHubError):
    """GitHub accepted the request and scheduled the work (HTTP 202).

    The result is not ready yet; retry later. ``raw`` holds the response
    body, which for some endpoints already describes the scheduled job.
    """

    def __init__(self, raw: bytes = b"") -> None:
        self.raw = raw
        super().__init__("job scheduled on GitHub side; try again later")

    def json(self) -> Any:
        return json.loads(self.raw) if self.raw else None


def sanitize_url(url: httpx.URL) -> str:
    """Return *url* as a string with any ``client_secret`` value redacted."""
    if "client_secret" not in url.params:
        return str(url)
    return str(url.copy_set_param("client_secret", "REDACTED"))


def _is_secondary_limit(status: int, message: str, documentation_url: str | None) -> bool:
    if status not in (403, 429):
        return False
    if documentation_url and (
        documentation_url.endswith("secondary-rate-limits")
        or "#abuse-rate-limits" in documentation_url
    ):
        return True
    return "secondary rate limit" in message.lower()


def _retry_after(response: httpx.Response) -> timedelta | None:
    header = response.headers.get(HEADER_RETRY_AFTER)
    if header:
        try:
            return timedelta(seconds=int(header))
        except ValueError:
            return None
    if response.headers.get(HEADER_RATE_REMAINING) == "0":
        rate = parse_rate(response.headers)
        if rate is not None and rate.reset is not None:
            return max(rate.reset - datetime.now(timezone.utc), timedelta(0))
    return None


def check_response(response: httpx.Response) -> None:
    """Raise the matching exception when *response* is not a success.

    A 2xx status is a success, except 202 which raises :class:`AcceptedError`.
    Error bodies are expected to be empty or JSON; anything else leaves the
    message empty.
    """
    status = response.status_code
    if status == 202:
        raise AcceptedError(response.content)
    if 200 <= status <= 299:
        return

    fields: dict[str, Any] = {}
    try:
        data = response.json() if response.content else None
    except ValueError:
        data = None
    if isinstance(data, dict):
        fields["message"] = str(data.get("message") or "")
        fields["errors"] = [ErrorDetail.model_validate(e) for e in data.get("errors") or []]
        fields["documentation_url"] = data.get("documentation_url")
        if data.get("block"):
            fields["block"] = ErrorBlock.model_validate(data["block"])
    message = fields.get("message", "")

    if status == 401 and response.headers.get(HEADER_OTP, "").startswith("required"):
        raise TwoFactorAuthError(response, **fields)

    if status in (403, 429) and response.headers.get(HEADER_RATE_REMAINING) == "0":
        rate = parse_rate(response.headers) or Rate()
        raise RateLimitError(rate, response, **fields)

    if _is_secondary_limit(status, message, fields.get("documentation_url")):
        raise AbuseRateLimitError(response, retry_after=_retry_after(response), **fields)

    raise ErrorResponse(response, **fields)
