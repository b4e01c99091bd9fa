"""Teams API: https://docs.github.com/en/rest/teams"""

from __future__ import annotations

from datetime import datetime

from ..errors import ErrorResponse
from ..models import GitHubModel, Organization, RequestBody, Repository, Team, User
from ..pagination import ListOptions, Page
from ..response import Response
from .base import Service, escape

# Preview media type that makes "is team repo" return the repository.
MEDIA_TYPE_REPOSITORY = "application/vnd.github.v3.repository+json"


class NewTeam(RequestBody):
    """Body for creating or editing a team."""

    name: str
    description: str | None = None
    maintainers: list[str] | None = None
    repo_names: list[str] | None = None
    parent_team_id: int | None = None
    notification_setting: str | None = None
    permission: str | None = None  # deprecated: pull, push
    privacy: str | None = None  # secret, closed
    ldap_dn: str | None = None


class TeamListTeamMembersOptions(ListOptions):
    role: str | None = None  # member, maintainer, all


class TeamAddTeamRepoOptions(RequestBody):
    permission: str | None = None  # pull, triage, push, maintain, admin


class Membership(GitHubModel):
    """A user's membership in a team or organization."""

    url: str | None = None
    state: str | None = None  # active, pending
    role: str | None = None  # member, maintainer (teams); admin, member (orgs)
    organization_url: str | None = None
    organization: Organization | None = None
    user: User | None = None


class Invitation(GitHubModel):
    id: int | None = None
    node_id: str | None = None
    login: str | None = None
    email: str | None = None
    role: str | None = None
    created_at: datetime | None = None
    inviter: User | None = None
    team_count: int | None = None
    invitation_teams_url: str | None = None
    failed_at: datetime | None = None
    failed_reason: str | None = None


class TeamsService(Service):
    def _team(self, org: str, slug: str) -> str:
        return f"orgs/{escape(org)}/teams/{escape(slug)}"

    # ------------------------------------------------------------------
    # Teams
    # ------------------------------------------------------------------

    async def list_teams(self, org: str, opts: ListOptions | None = None) -> Page[Team]:
        """List teams in an organization visible to the caller."""
        return await self._list(f"orgs/{escape(org)}/teams", Team, opts)

    async def get_team_by_id(self, org_id: int, team_id: int) -> Team:
        """Fetch a team by organization id and team id."""
        return await self._get(f"organizations/{org_id}/team/{team_id}", Team)

    async def get_team_by_slug(self, org: str, slug: str) -> Team:
        """Fetch a team by slug."""
        return await self._get(self._team(org, slug), Team)

    async def create_team(self, org: str, team: NewTeam) -> Team:
        """Create a team in an organization."""
        return await self._send("POST", f"orgs/{escape(org)}/teams", Team, team)

    async def edit_team_by_slug(
        self, org: str, slug: str, team: NewTeam, remove_parent: bool = False
    ) -> Team:
        """Edit a team; *remove_parent* sends an explicit null parent."""
        body = team.to_payload()
        if remove_parent:
            body["parent_team_id"] = None
        return await self._send("PATCH", self._team(org, slug), Team, body)

    async def delete_team_by_slug(self, org: str, slug: str) -> Response:
        """Delete a team and all of its child teams."""
        return await self._delete(self._team(org, slug))

    async def list_child_teams_by_slug(
        self, org: str, slug: str, opts: ListOptions | None = None
    ) -> Page[Team]:
        """List the team's child teams."""
        return await self._list(f"{self._team(org, slug)}/teams", Team, opts)

    async def list_user_teams(self, opts: ListOptions | None = None) -> Page[Team]:
        """List teams the authenticated user belongs to, across organizations."""
        return await self._list("user/teams", Team, opts)

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    async def list_team_repos_by_slug(
        self, org: str, slug: str, opts: ListOptions | None = None
    ) -> Page[Repository]:
        """List repositories the team has access to."""
        return await self._list(f"{self._team(org, slug)}/repos", Repository, opts)

    async def is_team_repo_by_slug(
        self, org: str, slug: str, owner: str, repo: str
    ) -> Repository | None:
        """Return the repository with the team's permissions, or None if unmanaged."""
        request = self._client.new_request(
            "GET",
            f"{self._team(org, slug)}/repos/{escape(owner)}/{escape(repo)}",
            headers={"Accept": MEDIA_TYPE_REPOSITORY},
        )
        try:
            response = await self._client.do(request)
        except ErrorResponse as exc:
            if exc.status_code == 404:
                return None
            raise
        if response.status_code == 204 or not response.http_response.content:
            return Repository()
        return Repository.model_validate(response.json())

    async def add_team_repo_by_slug(
        self,
        org: str,
        slug: str,
        owner: str,
        repo: str,
        opts: TeamAddTeamRepoOptions | None = None,
    ) -> Response:
        """Grant the team access to a repository, or change its permission."""
        return await self._request(
            "PUT",
            f"{self._team(org, slug)}/repos/{escape(owner)}/{escape(repo)}",
            body=opts or TeamAddTeamRepoOptions(),
        )

    async def remove_team_repo_by_slug(
        self, org: str, slug: str, owner: str, repo: str
    ) -> Response:
        """Revoke the team's access to a repository."""
        return await self._delete(f"{self._team(org, slug)}/repos/{escape(owner)}/{escape(repo)}")

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    async def list_team_members_by_slug(
        self, org: str, slug: str, opts: TeamListTeamMembersOptions | None = None
    ) -> Page[User]:
        """List members of the team, including child team members."""
        return await self._list(f"{self._team(org, slug)}/members", User, opts)

    async def get_team_membership_by_slug(self, org: str, slug: str, user: str) -> Membership:
        """Fetch a user's membership state and role in the team."""
        return await self._get(f"{self._team(org, slug)}/memberships/{escape(user)}", Membership)

    async def add_team_membership_by_slug(
        self, org: str, slug: str, user: str, role: str | None = None
    ) -> Membership:
        """Add or update a membership; non-members are invited (state ``pending``)."""
        body = {"role": role} if role else {}
        return await self._send(
            "PUT", f"{self._team(org, slug)}/memberships/{escape(user)}", Membership, body
        )

    async def remove_team_membership_by_slug(self, org: str, slug: str, user: str) -> Response:
        """Remove a user from the team."""
        return await self._delete(f"{self._team(org, slug)}/memberships/{escape(user)}")

    async def list_pending_team_invitations_by_slug(
        self, org: str, slug: str, opts: ListOptions | None = None
    ) -> Page[Invitation]:
        """List open invitations to the team."""
        return await self._list(f"{self._team(org, slug)}/invitations", Invitation, opts)
