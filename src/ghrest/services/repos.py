"""Repositories API: https://docs.github.com/en/rest/repos"""

from __future__ import annotations

from datetime import datetime

from ..errors import AcceptedError
from ..models import GitHubModel, RequestBody, Repository, Team, User
from ..pagination import ListOptions, Page, QueryOptions
from ..response import Response
from .base import Service, escape


# ---------------------------------------------------------------------------
# Request / option models
# ---------------------------------------------------------------------------


class RepositoryCreate(RequestBody):
    """Body for creating a repository (user or organization)."""

    name: str
    description: str | None = None
    homepage: str | None = None
    private: bool | None = None
    visibility: str | None = None
    has_issues: bool | None = None
    has_projects: bool | None = None
    has_wiki: bool | None = None
    has_discussions: bool | None = None
    is_template: bool | None = None
    team_id: int | None = None
    auto_init: bool | None = None
    gitignore_template: str | None = None
    license_template: str | None = None
    allow_squash_merge: bool | None = None
    allow_merge_commit: bool | None = None
    allow_rebase_merge: bool | None = None
    allow_auto_merge: bool | None = None
    delete_branch_on_merge: bool | None = None


class RepositoryUpdate(RequestBody):
    name: str | None = None
    description: str | None = None
    homepage: str | None = None
    private: bool | None = None
    visibility: str | None = None
    default_branch: str | None = None
    has_issues: bool | None = None
    has_projects: bool | None = None
    has_wiki: bool | None = None
    has_discussions: bool | None = None
    is_template: bool | None = None
    archived: bool | None = None
    allow_squash_merge: bool | None = None
    allow_merge_commit: bool | None = None
    allow_rebase_merge: bool | None = None
    allow_auto_merge: bool | None = None
    delete_branch_on_merge: bool | None = None


class RepositoryListOptions(ListOptions):
    """Options for listing the authenticated user's repositories."""

    visibility: str | None = None  # all, public, private
    affiliation: str | None = None  # comma-separated owner,collaborator,organization_member
    type: str | None = None  # all, owner, public, private, member
    sort: str | None = None  # created, updated, pushed, full_name
    direction: str | None = None
    since: datetime | None = None
    before: datetime | None = None


class RepositoryListByUserOptions(ListOptions):
    type: str | None = None  # all, owner, member
    sort: str | None = None
    direction: str | None = None


class RepositoryListByOrgOptions(ListOptions):
    type: str | None = None  # all, public, private, forks, sources, member
    sort: str | None = None
    direction: str | None = None


class RepositoryListAllOptions(QueryOptions):
    since: int | None = None  # ID of the last repository seen


class ListContributorsOptions(ListOptions):
    anon: str | None = None  # "1" or "true" to include anonymous contributors


class RepositoryListForksOptions(ListOptions):
    sort: str | None = None  # newest, oldest, stargazers, watchers


class RepositoryCreateFork(RequestBody):
    organization: str | None = None
    name: str | None = None
    default_branch_only: bool | None = None


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class Contributor(User):
    """User with a commit count; anonymous contributors carry only name/email."""

    contributions: int | None = None


class CommitRef(GitHubModel):
    sha: str | None = None
    url: str | None = None


class RepositoryTag(GitHubModel):
    name: str | None = None
    commit: CommitRef | None = None
    zipball_url: str | None = None
    tarball_url: str | None = None
    node_id: str | None = None


class RepositoriesService(Service):
    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    async def list_by_authenticated_user(
        self, opts: RepositoryListOptions | None = None
    ) -> Page[Repository]:
        """List repositories the authenticated user can access."""
        return await self._list("user/repos", Repository, opts)

    async def list_by_user(
        self, user: str, opts: RepositoryListByUserOptions | None = None
    ) -> Page[Repository]:
        """List public repositories owned by *user*."""
        return await self._list(f"users/{escape(user)}/repos", Repository, opts)

    async def list_by_org(
        self, org: str, opts: RepositoryListByOrgOptions | None = None
    ) -> Page[Repository]:
        """List repositories of an organization."""
        return await self._list(f"orgs/{escape(org)}/repos", Repository, opts)

    async def list_all(self, opts: RepositoryListAllOptions | None = None) -> Page[Repository]:
        """List every public repository in creation order; paginate with ``since``."""
        return await self._list("repositories", Repository, opts)

    # ------------------------------------------------------------------
    # Single repository
    # ------------------------------------------------------------------

    async def create(self, repo: RepositoryCreate, org: str = "") -> Repository:
        """Create a repository for the authenticated user, or in *org*."""
        url = f"orgs/{escape(org)}/repos" if org else "user/repos"
        return await self._send("POST", url, Repository, repo)

    async def get(self, owner: str, repo: str) -> Repository:
        """Fetch a repository."""
        return await self._get(f"repos/{escape(owner)}/{escape(repo)}", Repository)

    async def get_by_id(self, repo_id: int) -> Repository:
        """Fetch a repository by numeric id."""
        return await self._get(f"repositories/{repo_id}", Repository)

    async def edit(self, owner: str, repo: str, update: RepositoryUpdate) -> Repository:
        """Update repository settings."""
        return await self._send("PATCH", f"repos/{escape(owner)}/{escape(repo)}", Repository, update)

    async def delete(self, owner: str, repo: str) -> Response:
        """Delete a repository; requires admin access."""
        return await self._delete(f"repos/{escape(owner)}/{escape(repo)}")

    # ------------------------------------------------------------------
    # Details
    # ------------------------------------------------------------------

    async def list_contributors(
        self, owner: str, repo: str, opts: ListContributorsOptions | None = None
    ) -> Page[Contributor]:
        """List contributors, sorted by number of commits."""
        return await self._list(
            f"repos/{escape(owner)}/{escape(repo)}/contributors", Contributor, opts
        )

    async def list_languages(self, owner: str, repo: str) -> dict[str, int]:
        """Return bytes of code per language."""
        response = await self._request("GET", f"repos/{escape(owner)}/{escape(repo)}/languages")
        return {name: int(size) for name, size in response.json().items()}

    async def list_teams(
        self, owner: str, repo: str, opts: ListOptions | None = None
    ) -> Page[Team]:
        """List teams with access to the repository."""
        return await self._list(f"repos/{escape(owner)}/{escape(repo)}/teams", Team, opts)

    async def list_tags(
        self, owner: str, repo: str, opts: ListOptions | None = None
    ) -> Page[RepositoryTag]:
        """List the repository's tags."""
        return await self._list(f"repos/{escape(owner)}/{escape(repo)}/tags", RepositoryTag, opts)

    async def list_topics(self, owner: str, repo: str) -> list[str]:
        """Return the repository's topic names."""
        response = await self._request("GET", f"repos/{escape(owner)}/{escape(repo)}/topics")
        return list(response.json().get("names") or [])

    async def replace_topics(self, owner: str, repo: str, topics: list[str]) -> list[str]:
        """Replace all topics; an empty list clears them."""
        response = await self._request(
            "PUT", f"repos/{escape(owner)}/{escape(repo)}/topics", body={"names": topics}
        )
        return list(response.json().get("names") or [])

    # ------------------------------------------------------------------
    # Forks
    # ------------------------------------------------------------------

    async def list_forks(
        self, owner: str, repo: str, opts: RepositoryListForksOptions | None = None
    ) -> Page[Repository]:
        """List forks of the repository."""
        return await self._list(f"repos/{escape(owner)}/{escape(repo)}/forks", Repository, opts)

    async def create_fork(
        self, owner: str, repo: str, fork: RepositoryCreateFork | None = None
    ) -> Repository:
        """Fork a repository.

        Forking happens asynchronously; GitHub answers 202 with the future
        fork, which is returned here. The git objects may not be available
        immediately.
        """
        url = f"repos/{escape(owner)}/{escape(repo)}/forks"
        try:
            return await self._send("POST", url, Repository, fork or RepositoryCreateFork())
        except AcceptedError as exc:
            return Repository.model_validate(exc.json() or {})
