"""Organizations API: https://docs.github.com/en/rest/orgs"""

from __future__ import annotations

from ..models import Organization, RequestBody, User
from ..pagination import ListOptions, Page, QueryOptions
from ..response import Response
from .base import Service, escape


class OrganizationUpdate(RequestBody):
    name: str | None = None
    billing_email: str | None = None
    company: str | None = None
    email: str | None = None
    twitter_username: str | None = None
    location: str | None = None
    description: str | None = None
    blog: str | None = None
    has_organization_projects: bool | None = None
    has_repository_projects: bool | None = None
    default_repository_permission: str | None = None
    members_can_create_repositories: bool | None = None


class OrganizationsListOptions(QueryOptions):
    """Options for listing every organization (``since`` = last org ID seen)."""

    since: int | None = None
    per_page: int | None = None


class ListMembersOptions(ListOptions):
    filter: str | None = None  # "2fa_disabled" or "all"
    role: str | None = None  # "all", "admin" or "member"


class OrganizationsService(Service):
    async def list(self, user: str = "", opts: ListOptions | None = None) -> Page[Organization]:
        """List organizations for *user*, or for the authenticated user when empty."""
        url = f"users/{escape(user)}/orgs" if user else "user/orgs"
        return await self._list(url, Organization, opts)

    async def list_all(self, opts: OrganizationsListOptions | None = None) -> Page[Organization]:
        """List every organization, in creation order."""
        return await self._list("organizations", Organization, opts)

    async def get(self, org: str) -> Organization:
        """Fetch an organization by login."""
        return await self._get(f"orgs/{escape(org)}", Organization)

    async def get_by_id(self, org_id: int) -> Organization:
        """Fetch an organization by numeric id."""
        return await self._get(f"organizations/{org_id}", Organization)

    async def edit(self, org: str, update: OrganizationUpdate) -> Organization:
        """Update organization settings."""
        return await self._send("PATCH", f"orgs/{escape(org)}", Organization, update)

    async def list_members(
        self, org: str, opts: ListMembersOptions | None = None, public_only: bool = False
    ) -> Page[User]:
        """List members; concealed ones only for fellow members."""
        kind = "public_members" if public_only else "members"
        return await self._list(f"orgs/{escape(org)}/{kind}", User, opts)

    async def is_member(self, org: str, user: str) -> bool:
        """Report whether *user* is a member of the organization."""
        return await self._check(f"orgs/{escape(org)}/members/{escape(user)}")

    async def remove_member(self, org: str, user: str) -> Response:
        """Remove a user from the organization and all of its teams."""
        return await self._delete(f"orgs/{escape(org)}/members/{escape(user)}")
