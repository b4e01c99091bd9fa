"""Activity API: events and starring.

https://docs.github.com/en/rest/activity
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from ..events import MODELS_BY_NAME, EventModel
from ..models import GitHubModel, Organization, Repository, User
from ..pagination import ListOptions, Page, encode_options
from ..response import Response
from .base import Service, escape

MEDIA_TYPE_STARRING = "application/vnd.github.star+json"


class Event(GitHubModel):
    """An entry of an Events API timeline."""

    id: str | None = None
    event_type: str | None = Field(default=None, alias="type")
    public: bool | None = None
    payload: dict[str, Any] | None = None
    repo: Repository | None = None
    actor: User | None = None
    org: Organization | None = None
    created_at: datetime | None = None

    def parse_payload(self) -> EventModel | dict[str, Any] | None:
        """Decode ``payload`` into the model for this event's type.

        Unknown types come back as the raw dict.
        """
        model = MODELS_BY_NAME.get(self.event_type or "")
        if model is None:
            return self.payload
        return model.model_validate(self.payload or {})


class Stargazer(GitHubModel):
    starred_at: datetime | None = None
    user: User | None = None


class StarredRepository(GitHubModel):
    starred_at: datetime | None = None
    repository: Repository | None = Field(default=None, alias="repo")


class ActivityListStarredOptions(ListOptions):
    sort: str | None = None  # created, updated
    direction: str | None = None


class ActivityService(Service):
    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    async def list_events(self, opts: ListOptions | None = None) -> Page[Event]:
        """List public events across GitHub."""
        return await self._list("events", Event, opts)

    async def list_repository_events(
        self, owner: str, repo: str, opts: ListOptions | None = None
    ) -> Page[Event]:
        """List public events for a repository."""
        return await self._list(f"repos/{escape(owner)}/{escape(repo)}/events", Event, opts)

    async def list_events_for_repo_network(
        self, owner: str, repo: str, opts: ListOptions | None = None
    ) -> Page[Event]:
        """List public events for a network of repositories."""
        return await self._list(f"networks/{escape(owner)}/{escape(repo)}/events", Event, opts)

    async def list_events_for_organization(
        self, org: str, opts: ListOptions | None = None
    ) -> Page[Event]:
        """List public events for an organization."""
        return await self._list(f"orgs/{escape(org)}/events", Event, opts)

    async def list_events_performed_by_user(
        self, user: str, public_only: bool = False, opts: ListOptions | None = None
    ) -> Page[Event]:
        """List events performed by *user*; private ones too when authenticated as them."""
        url = f"users/{escape(user)}/events"
        if public_only:
            url += "/public"
        return await self._list(url, Event, opts)

    async def list_events_received_by_user(
        self, user: str, public_only: bool = False, opts: ListOptions | None = None
    ) -> Page[Event]:
        """List events *user* received through watching and following."""
        url = f"users/{escape(user)}/received_events"
        if public_only:
            url += "/public"
        return await self._list(url, Event, opts)

    # ------------------------------------------------------------------
    # Starring
    # ------------------------------------------------------------------

    async def list_stargazers(
        self, owner: str, repo: str, opts: ListOptions | None = None
    ) -> Page[Stargazer]:
        """List stargazers with the time each starred the repository."""
        response = await self._request(
            "GET",
            f"repos/{escape(owner)}/{escape(repo)}/stargazers",
            params=encode_options(opts),
            headers={"Accept": MEDIA_TYPE_STARRING},
        )
        return Page([Stargazer.model_validate(item) for item in response.json()], response)

    async def list_starred(
        self, user: str = "", opts: ActivityListStarredOptions | None = None
    ) -> Page[StarredRepository]:
        """List repositories starred by *user*, or by the authenticated user."""
        url = f"users/{escape(user)}/starred" if user else "user/starred"
        response = await self._request(
            "GET", url, params=encode_options(opts), headers={"Accept": MEDIA_TYPE_STARRING}
        )
        return Page([StarredRepository.model_validate(item) for item in response.json()], response)

    async def is_starred(self, owner: str, repo: str) -> bool:
        """Report whether the authenticated user starred the repository."""
        return await self._check(f"user/starred/{escape(owner)}/{escape(repo)}")

    async def star(self, owner: str, repo: str) -> Response:
        """Star a repository as the authenticated user."""
        return await self._request("PUT", f"user/starred/{escape(owner)}/{escape(repo)}")

    async def unstar(self, owner: str, repo: str) -> Response:
        """Remove the authenticated user's star from a repository."""
        return await self._delete(f"user/starred/{escape(owner)}/{escape(repo)}")
