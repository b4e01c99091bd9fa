"""Pydantic models mirroring the GitHub REST API shapes shared across services."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Base classes
# ---------------------------------------------------------------------------


class GitHubModel(BaseModel):
    """Base for every response shape.

    Unknown fields are retained so that newer API responses still decode.
    Optional fields are ``None`` when the server omitted them.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class RequestBody(BaseModel):
    """Base for request payloads.

    ``None`` fields are dropped on the wire; explicit ``False``/``0``/``""``
    values are sent.
    """

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Users and organizations
# ---------------------------------------------------------------------------


class Plan(GitHubModel):
    name: str | None = None
    space: int | None = None
    collaborators: int | None = None
    private_repos: int | None = None
    filled_seats: int | None = None
    seats: int | None = None


class User(GitHubModel):
    """GitHub user or bot account."""

    login: str | None = None
    id: int | None = None
    node_id: str | None = None
    avatar_url: str | None = None
    html_url: str | None = None
    gravatar_id: str | None = None
    name: str | None = None
    company: str | None = None
    blog: str | None = None
    location: str | None = None
    email: str | None = None
    hireable: bool | None = None
    bio: str | None = None
    twitter_username: str | None = None
    public_repos: int | None = None
    public_gists: int | None = None
    followers: int | None = None
    following: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    suspended_at: datetime | None = None
    user_type: str | None = Field(default=None, alias="type")
    site_admin: bool | None = None
    total_private_repos: int | None = None
    owned_private_repos: int | None = None
    private_gists: int | None = None
    disk_usage: int | None = None
    collaborators: int | None = None
    two_factor_authentication: bool | None = None
    plan: Plan | None = None
    url: str | None = None
    repos_url: str | None = None
    # Present on team member / collaborator listings.
    role_name: str | None = None


class Organization(GitHubModel):
    """Organization account."""

    login: str | None = None
    id: int | None = None
    node_id: str | None = None
    avatar_url: str | None = None
    html_url: str | None = None
    name: str | None = None
    company: str | None = None
    blog: str | None = None
    location: str | None = None
    email: str | None = None
    twitter_username: str | None = None
    description: str | None = None
    public_repos: int | None = None
    public_gists: int | None = None
    followers: int | None = None
    following: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    total_private_repos: int | None = None
    owned_private_repos: int | None = None
    private_gists: int | None = None
    disk_usage: int | None = None
    collaborators: int | None = None
    billing_email: str | None = None
    org_type: str | None = Field(default=None, alias="type")
    plan: Plan | None = None
    two_factor_requirement_enabled: bool | None = None
    is_verified: bool | None = None
    has_organization_projects: bool | None = None
    has_repository_projects: bool | None = None
    default_repository_permission: str | None = None
    members_can_create_repositories: bool | None = None
    url: str | None = None
    repos_url: str | None = None
    events_url: str | None = None
    members_url: str | None = None


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------


class License(GitHubModel):
    key: str | None = None
    name: str | None = None
    spdx_id: str | None = None
    url: str | None = None


class RepositoryPermissions(GitHubModel):
    admin: bool | None = None
    maintain: bool | None = None
    push: bool | None = None
    triage: bool | None = None
    pull: bool | None = None


class Repository(GitHubModel):
    """Repository as returned by get / list endpoints."""

    id: int | None = None
    node_id: str | None = None
    owner: User | None = None
    name: str | None = None
    full_name: str | None = None
    description: str | None = None
    homepage: str | None = None
    default_branch: str | None = None
    created_at: datetime | None = None
    pushed_at: datetime | None = None
    updated_at: datetime | None = None
    html_url: str | None = None
    clone_url: str | None = None
    git_url: str | None = None
    ssh_url: str | None = None
    url: str | None = None
    language: str | None = None
    fork: bool | None = None
    forks_count: int | None = None
    network_count: int | None = None
    open_issues_count: int | None = None
    stargazers_count: int | None = None
    subscribers_count: int | None = None
    watchers_count: int | None = None
    size: int | None = None
    topics: list[str] | None = None
    visibility: str | None = None
    private: bool | None = None
    archived: bool | None = None
    disabled: bool | None = None
    is_template: bool | None = None
    has_issues: bool | None = None
    has_wiki: bool | None = None
    has_pages: bool | None = None
    has_projects: bool | None = None
    has_downloads: bool | None = None
    has_discussions: bool | None = None
    allow_rebase_merge: bool | None = None
    allow_squash_merge: bool | None = None
    allow_merge_commit: bool | None = None
    allow_auto_merge: bool | None = None
    delete_branch_on_merge: bool | None = None
    license: License | None = None
    organization: Organization | None = None
    parent: Repository | None = None
    source: Repository | None = None
    permissions: RepositoryPermissions | None = None
    role_name: str | None = None


# ---------------------------------------------------------------------------
# Teams
# ---------------------------------------------------------------------------


class Team(GitHubModel):
    """Organization team."""

    id: int | None = None
    node_id: str | None = None
    name: str | None = None
    slug: str | None = None
    description: str | None = None
    privacy: str | None = None
    notification_setting: str | None = None
    permission: str | None = None
    permissions: dict[str, bool] | None = None
    members_count: int | None = None
    repos_count: int | None = None
    url: str | None = None
    html_url: str | None = None
    members_url: str | None = None
    repositories_url: str | None = None
    organization: Organization | None = None
    parent: Team | None = None
    ldap_dn: str | None = None


# ---------------------------------------------------------------------------
# Issues
# ---------------------------------------------------------------------------


class Reactions(GitHubModel):
    """Reaction counts summary embedded in issues and comments."""

    total_count: int | None = None
    plus_one: int | None = Field(default=None, alias="+1")
    minus_one: int | None = Field(default=None, alias="-1")
    laugh: int | None = None
    confused: int | None = None
    heart: int | None = None
    hooray: int | None = None
    rocket: int | None = None
    eyes: int | None = None
    url: str | None = None


class Label(GitHubModel):
    """Issue label with colour coding."""

    id: int | None = None
    node_id: str | None = None
    url: str | None = None
    name: str | None = None
    color: str | None = None
    description: str | None = None
    is_default: bool | None = Field(default=None, alias="default")


class Milestone(GitHubModel):
    """Repository milestone."""

    url: str | None = None
    html_url: str | None = None
    labels_url: str | None = None
    id: int | None = None
    node_id: str | None = None
    number: int | None = None
    state: str | None = None
    title: str | None = None
    description: str | None = None
    creator: User | None = None
    open_issues: int | None = None
    closed_issues: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    closed_at: datetime | None = None
    due_on: datetime | None = None


class PullRequestLinks(GitHubModel):
    url: str | None = None
    html_url: str | None = None
    diff_url: str | None = None
    patch_url: str | None = None
    merged_at: datetime | None = None


class Issue(GitHubModel):
    """Issue (or pull request, when ``pull_request`` is set)."""

    id: int | None = None
    node_id: str | None = None
    number: int | None = None
    state: str | None = None
    state_reason: str | None = None
    locked: bool | None = None
    active_lock_reason: str | None = None
    title: str | None = None
    body: str | None = None
    author_association: str | None = None
    user: User | None = None
    labels: list[Label] | None = None
    assignee: User | None = None
    assignees: list[User] | None = None
    comments: int | None = None
    closed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    closed_by: User | None = None
    url: str | None = None
    html_url: str | None = None
    comments_url: str | None = None
    events_url: str | None = None
    labels_url: str | None = None
    repository_url: str | None = None
    milestone: Milestone | None = None
    pull_request: PullRequestLinks | None = None
    repository: Repository | None = None
    reactions: Reactions | None = None

    @property
    def is_pull_request(self) -> bool:
        return self.pull_request is not None


class IssueComment(GitHubModel):
    """Single comment on an issue."""

    id: int | None = None
    node_id: str | None = None
    body: str | None = None
    user: User | None = None
    reactions: Reactions | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    author_association: str | None = None
    url: str | None = None
    html_url: str | None = None
    issue_url: str | None = None


Repository.model_rebuild()
Team.model_rebuild()
