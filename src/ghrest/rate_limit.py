"""Rate limit types, header parsing and request categorisation."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from enum import Enum

import httpx

from .models import GitHubModel

HEADER_RATE_LIMIT = "X-RateLimit-Limit"
HEADER_RATE_REMAINING = "X-RateLimit-Remaining"
HEADER_RATE_USED = "X-RateLimit-Used"
HEADER_RATE_RESET = "X-RateLimit-Reset"
HEADER_RATE_RESOURCE = "X-RateLimit-Resource"
HEADER_RETRY_AFTER = "Retry-After"


class RateLimitCategory(str, Enum):
    """Buckets GitHub tracks separately, keyed as in ``GET /rate_limit``."""

    CORE = "core"
    SEARCH = "search"
    GRAPHQL = "graphql"
    INTEGRATION_MANIFEST = "integration_manifest"
    SOURCE_IMPORT = "source_import"
    CODE_SCANNING_UPLOAD = "code_scanning_upload"
    ACTIONS_RUNNER_REGISTRATION = "actions_runner_registration"
    SCIM = "scim"
    DEPENDENCY_SNAPSHOTS = "dependency_snapshots"
    CODE_SEARCH = "code_search"
    AUDIT_LOG = "audit_log"


class Rate(GitHubModel):
    """Rate limit for one category.

    Unauthenticated core requests are limited to 60 per hour, authenticated
    ones to 5,000 per hour.
    """

    limit: int = 0
    remaining: int = 0
    used: int = 0
    reset: datetime | None = None
    resource: str | None = None

    def exhausted(self, now: datetime | None = None) -> bool:
        """True while no requests remain and the reset lies in the future."""
        if self.remaining > 0 or self.reset is None:
            return False
        now = now or datetime.now(timezone.utc)
        return now < self.reset


class RateLimits(GitHubModel):
    """Rate limits for every category, as returned by ``GET /rate_limit``."""

    core: Rate | None = None
    search: Rate | None = None
    graphql: Rate | None = None
    integration_manifest: Rate | None = None
    source_import: Rate | None = None
    code_scanning_upload: Rate | None = None
    actions_runner_registration: Rate | None = None
    scim: Rate | None = None
    dependency_snapshots: Rate | None = None
    code_search: Rate | None = None
    audit_log: Rate | None = None

    def by_category(self) -> dict[RateLimitCategory, Rate]:
        result: dict[RateLimitCategory, Rate] = {}
        for category in RateLimitCategory:
            rate = getattr(self, category.value)
            if rate is not None:
                result[category] = rate
        return result


def parse_rate(headers: httpx.Headers) -> Rate | None:
    """Build a :class:`Rate` from ``X-RateLimit-*`` headers, if present."""
    limit = headers.get(HEADER_RATE_LIMIT)
    if limit is None:
        return None

    def _int(name: str) -> int:
        try:
            return int(headers.get(name, "0"))
        except ValueError:
            return 0

    reset: datetime | None = None
    raw_reset = headers.get(HEADER_RATE_RESET)
    if raw_reset:
        try:
            reset = datetime.fromtimestamp(int(raw_reset), tz=timezone.utc)
        except ValueError:
            reset = None

    return Rate(
        limit=_int(HEADER_RATE_LIMIT),
        remaining=_int(HEADER_RATE_REMAINING),
        used=_int(HEADER_RATE_USED),
        reset=reset,
        resource=headers.get(HEADER_RATE_RESOURCE),
    )


_MANIFEST_CONVERSION = re.compile(r"^app-manifests/[^/]+/conversions$")
_SOURCE_IMPORT = re.compile(r"^repos/[^/]+/[^/]+/import(/|$)")
_SARIF_UPLOAD = re.compile(r"^repos/[^/]+/[^/]+/code-scanning/sarifs$")
_RUNNER_REGISTRATION = re.compile(
    r"^(orgs/[^/]+|repos/[^/]+/[^/]+|enterprises/[^/]+)/actions/runners/registration-token$"
)
_DEPENDENCY_SNAPSHOTS = re.compile(r"^repos/[^/]+/[^/]+/dependency-graph/snapshots$")
_AUDIT_LOG = re.compile(r"^(orgs|enterprises)/[^/]+/audit-log$")


def category_for(method: str, path: str) -> RateLimitCategory:
    """Return the rate limit category a request is counted against.

    *path* is the request path relative to the API root; a leading slash
    and any Enterprise ``api/v3`` prefix are ignored.
    """
    path = path.lstrip("/")
    if path.startswith("api/v3/"):
        path = path[len("api/v3/") :]
    method = method.upper()

    if path.startswith("search/code"):
        return RateLimitCategory.CODE_SEARCH
    if path.startswith("search/"):
        return RateLimitCategory.SEARCH
    if path == "graphql" or path.startswith("graphql/"):
        return RateLimitCategory.GRAPHQL
    if path.startswith("scim/"):
        return RateLimitCategory.SCIM
    if _SOURCE_IMPORT.match(path):
        return RateLimitCategory.SOURCE_IMPORT
    if _AUDIT_LOG.match(path):
        return RateLimitCategory.AUDIT_LOG
    if method == "POST":
        if _MANIFEST_CONVERSION.match(path):
            return RateLimitCategory.INTEGRATION_MANIFEST
        if _SARIF_UPLOAD.match(path):
            return RateLimitCategory.CODE_SCANNING_UPLOAD
        if _RUNNER_REGISTRATION.match(path):
            return RateLimitCategory.ACTIONS_RUNNER_REGISTRATION
        if _DEPENDENCY_SNAPSHOTS.match(path):
            return RateLimitCategory.DEPENDENCY_SNAPSHOTS
    return RateLimitCategory.CORE
