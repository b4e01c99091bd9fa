"""Async client for the GitHub REST API.

Every service method funnels through :meth:`GitHubClient.new_request` and
:meth:`GitHubClient.do`: build the request, send it, record the rate limit,
classify errors and hand back a :class:`Response` for decoding.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

import httpx
from pydantic import BaseModel

from . import __version__
from .config import DEFAULT_API_VERSION, DEFAULT_BASE_URL, Settings
from .errors import (
    AbuseRateLimitError,
    ErrorResponse,
    RateLimitError,
    RedirectionError,
    check_response,
)
from .models import RequestBody
from .rate_limit import Rate, RateLimitCategory, category_for
from .response import Response
from .services.actions import ActionsService
from .services.activity import ActivityService
from .services.code_scanning import CodeScanningService
from .services.deployments import DeploymentsService
from .services.environments import EnvironmentsService
from .services.issues import IssuesService
from .services.orgs import OrganizationsService
from .services.rate_limit import RateLimitService
from .services.reactions import ReactionsService
from .services.repos import RepositoriesService
from .services.teams import TeamsService
from .services.users import UsersService

logger = logging.getLogger(__name__)

USER_AGENT = f"ghrest/{__version__}"
HEADER_API_VERSION = "X-GitHub-Api-Version"
MEDIA_TYPE_V3 = "application/vnd.github+json"


class GitHubClient:
    """Entry point to the GitHub REST API.

    Example::

        async with GitHubClient(token) as gh:
            repo = await gh.repositories.get("octocat", "Hello-World")

    Authenticated clients send their token with every request, so they
    should not be shared between users.
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        user_agent: str | None = None,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float = 30.0,
        sleep_on_rate_limit: bool = False,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.token = token
        self.base_url = base_url
        self.user_agent = user_agent or USER_AGENT
        self.api_version = api_version
        self.timeout = timeout
        self.sleep_on_rate_limit = sleep_on_rate_limit
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

        self.rate_limits: dict[RateLimitCategory, Rate] = {}
        self._secondary_reset: datetime | None = None

        # Services used for talking to different parts of the API
        self.actions = ActionsService(self)
        self.activity = ActivityService(self)
        self.code_scanning = CodeScanningService(self)
        self.deployments = DeploymentsService(self)
        self.environments = EnvironmentsService(self)
        self.issues = IssuesService(self)
        self.organizations = OrganizationsService(self)
        self.rate_limit = RateLimitService(self)
        self.reactions = ReactionsService(self)
        self.repositories = RepositoriesService(self)
        self.teams = TeamsService(self)
        self.users = UsersService(self)

    @classmethod
    def from_settings(cls, settings: Settings) -> GitHubClient:
        """Build a client from :class:`~ghrest.config.Settings`."""
        return cls(
            settings.token,
            base_url=settings.base_url,
            user_agent=settings.user_agent,
            api_version=settings.api_version,
            timeout=settings.timeout,
            sleep_on_rate_limit=settings.sleep_on_rate_limit,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    def _copy(self, **changes: Any) -> GitHubClient:
        options: dict[str, Any] = {
            "token": self.token,
            "base_url": self.base_url,
            "user_agent": self.user_agent,
            "api_version": self.api_version,
            "timeout": self.timeout,
            "sleep_on_rate_limit": self.sleep_on_rate_limit,
        }
        options.update(changes)
        token = options.pop("token")
        clone = GitHubClient(token, http_client=self._http, **options)
        clone.rate_limits = dict(self.rate_limits)
        return clone

    def with_auth_token(self, token: str) -> GitHubClient:
        """Return a copy of this client that authenticates with *token*.

        The copy shares the underlying connection pool.
        """
        return self._copy(token=token)

    def with_enterprise_urls(self, base_url: str) -> GitHubClient:
        """Return a copy targeting a GitHub Enterprise Server host.

        ``api/v3/`` is appended unless the URL already ends with it.
        """
        if not base_url.endswith("/"):
            base_url += "/"
        host = httpx.URL(base_url).host
        if not (base_url.endswith("/api/v3/") or host.startswith("api.") or ".api." in host):
            base_url += "api/v3/"
        return self._copy(base_url=base_url)

    # ------------------------------------------------------------------
    # Request construction
    # ------------------------------------------------------------------

    def new_request(
        self,
        method: str,
        url: str,
        body: BaseModel | dict[str, Any] | list[Any] | None = None,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Request:
        """Create an API request.

        *url* is resolved relative to the base URL and must not start with a
        slash. A pydantic *body* is serialised with aliases and without
        ``None`` fields.
        """
        if not self.base_url.endswith("/"):
            raise ValueError(f"base URL must have a trailing slash, but {self.base_url!r} does not")
        target = httpx.URL(self.base_url).join(url)

        request_headers = {
            "Accept": MEDIA_TYPE_V3,
            "User-Agent": self.user_agent,
            HEADER_API_VERSION: self.api_version,
        }
        if self.token:
            request_headers["Authorization"] = f"Bearer {self.token}"

        payload: Any = None
        if body is not None:
            if isinstance(body, RequestBody):
                payload = body.to_payload()
            elif isinstance(body, BaseModel):
                payload = body.model_dump(mode="json", by_alias=True, exclude_none=True)
            else:
                payload = body

        if headers:
            request_headers.update(headers)

        return self._http.build_request(
            method, target, params=params, headers=request_headers, json=payload
        )

    def _relative_path(self, url: httpx.URL) -> str:
        base_path = httpx.URL(self.base_url).path
        path = url.path
        if path.startswith(base_path):
            path = path[len(base_path) :]
        return path.lstrip("/")

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------

    async def _check_rate_limit(self, category: RateLimitCategory) -> None:
        now = datetime.now(timezone.utc)
        if self._secondary_reset is not None and now < self._secondary_reset:
            raise AbuseRateLimitError(
                None,
                retry_after=self._secondary_reset - now,
                message=(
                    f"API secondary rate limit exceeded until "
                    f"{self._secondary_reset.isoformat()}, not making remote request."
                ),
            )

        rate = self.rate_limits.get(category)
        if rate is None or rate.reset is None or not rate.exhausted(now):
            return

        if self.sleep_on_rate_limit:
            delay = (rate.reset - now).total_seconds()
            logger.warning(
                "Rate limit for %s exhausted; sleeping %.0fs until reset", category.value, delay
            )
            await asyncio.sleep(delay)
            return

        raise RateLimitError(
            rate,
            None,
            message=(
                f"API rate limit of {rate.limit} still exceeded until "
                f"{rate.reset.isoformat()}, not making remote request."
            ),
        )

    async def _send(self, request: httpx.Request, follow_redirects: bool) -> Response:
        path = self._relative_path(request.url)
        category = category_for(request.method, path)
        if not (request.method == "GET" and path == "rate_limit"):
            await self._check_rate_limit(category)

        http_response = await self._http.send(request, follow_redirects=follow_redirects)
        logger.debug("%s %s -> %s", request.method, request.url, http_response.status_code)

        response = Response(http_response)
        if response.rate is not None:
            self.rate_limits[category] = response.rate
        return response

    async def do(self, request: httpx.Request, *, follow_redirects: bool = True) -> Response:
        """Send *request* and return the response, raising on API errors.

        Raises:
            RateLimitError: The primary rate limit is exhausted (locally
                known or reported by the server).
            AbuseRateLimitError: A secondary rate limit was hit.
            AcceptedError: The server scheduled the work (HTTP 202).
            ErrorResponse: Any other non-2xx status.
        """
        response = await self._send(request, follow_redirects)
        try:
            check_response(response.http_response)
        except AbuseRateLimitError as exc:
            if exc.retry_after is not None:
                self._secondary_reset = datetime.now(timezone.utc) + exc.retry_after
            logger.warning("Secondary rate limit hit for %s %s", request.method, request.url)
            raise
        except RateLimitError:
            logger.warning("Primary rate limit hit for %s %s", request.method, request.url)
            raise
        return response

    async def check(self, request: httpx.Request) -> bool:
        """Send a request whose answer is encoded in the status code.

        204 means ``True`` and 404 means ``False``; other errors propagate.
        """
        try:
            await self.do(request)
        except ErrorResponse as exc:
            if exc.status_code == 404:
                return False
            raise
        return True

    async def get_redirect_url(self, url: str, max_redirects: int = 1) -> str:
        """Return the ``Location`` of an endpoint that answers ``302 Found``.

        A ``301 Moved Permanently`` is followed up to *max_redirects* times.
        """
        request = self.new_request("GET", url)
        for remaining in range(max_redirects, -1, -1):
            response = await self._send(request, follow_redirects=False)
            status = response.status_code
            location = response.headers.get("Location")
            if status == 302 and location:
                return location
            if status == 301:
                if remaining == 0 or not location:
                    raise RedirectionError(
                        response.http_response, location, message="too many redirects"
                    )
                logger.warning("%s moved permanently to %s", request.url, location)
                request = self.new_request("GET", location)
                continue
            check_response(response.http_response)
            break
        raise ErrorResponse(
            response.http_response, message=f"unexpected status code: {response.status_code}"
        )
