"""Typed event payloads shared by the Events API and webhooks.

Every model is named after the ``type`` GitHub reports in the Events API
(``PushEvent``); webhooks identify the same payloads by their
``X-GitHub-Event`` name (``push``). :data:`EVENT_TYPES` maps the latter to
the model.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from .models import (
    GitHubModel,
    Issue,
    IssueComment,
    Label,
    Milestone,
    Organization,
    Repository,
    Team,
    User,
)
from .services.actions import Workflow, WorkflowJob, WorkflowRun
from .services.code_scanning import Alert
from .services.deployments import Deployment, DeploymentStatus
from .services.teams import Membership


class EventModel(GitHubModel):
    """Fields common to most webhook payloads."""

    action: str | None = None
    repo: Repository | None = Field(default=None, alias="repository")
    sender: User | None = None
    org: Organization | None = Field(default=None, alias="organization")
    installation: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# Repository content
# ---------------------------------------------------------------------------


class Hook(GitHubModel):
    id: int | None = None
    hook_type: str | None = Field(default=None, alias="type")
    name: str | None = None
    active: bool | None = None
    events: list[str] | None = None
    config: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PingEvent(EventModel):
    zen: str | None = None
    hook_id: int | None = None
    hook: Hook | None = None


class CommitAuthor(GitHubModel):
    name: str | None = None
    email: str | None = None
    username: str | None = None
    date: datetime | None = None


class HeadCommit(GitHubModel):
    id: str | None = None
    tree_id: str | None = None
    distinct: bool | None = None
    message: str | None = None
    timestamp: datetime | None = None
    url: str | None = None
    author: CommitAuthor | None = None
    committer: CommitAuthor | None = None
    added: list[str] | None = None
    removed: list[str] | None = None
    modified: list[str] | None = None


class PushEvent(EventModel):
    """A push to a branch or tag.

    In the Events API the commits list is capped at 20 entries; ``size``
    still reports the full count.
    """

    push_id: int | None = None
    head: str | None = None
    ref: str | None = None
    size: int | None = None
    before: str | None = None
    after: str | None = None
    created: bool | None = None
    deleted: bool | None = None
    forced: bool | None = None
    base_ref: str | None = None
    compare: str | None = None
    distinct_size: int | None = None
    commits: list[HeadCommit] | None = None
    head_commit: HeadCommit | None = None
    pusher: CommitAuthor | None = None


class CreateEvent(EventModel):
    ref: str | None = None
    ref_type: str | None = None  # repository, branch, tag
    master_branch: str | None = None
    description: str | None = None
    pusher_type: str | None = None


class DeleteEvent(EventModel):
    ref: str | None = None
    ref_type: str | None = None
    pusher_type: str | None = None


class ForkEvent(EventModel):
    forkee: Repository | None = None


class PublicEvent(EventModel):
    pass


class RepositoryEvent(EventModel):
    changes: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# Issues
# ---------------------------------------------------------------------------


class IssuesEvent(EventModel):
    issue: Issue | None = None
    assignee: User | None = None
    label: Label | None = None
    milestone: Milestone | None = None
    changes: dict[str, Any] | None = None


class IssueCommentEvent(EventModel):
    issue: Issue | None = None
    comment: IssueComment | None = None
    changes: dict[str, Any] | None = None


class LabelEvent(EventModel):
    label: Label | None = None
    changes: dict[str, Any] | None = None


class MilestoneEvent(EventModel):
    milestone: Milestone | None = None
    changes: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# Deployments and Actions
# ---------------------------------------------------------------------------


class DeploymentEvent(EventModel):
    deployment: Deployment | None = None
    workflow: Workflow | None = None
    workflow_run: WorkflowRun | None = None


class DeploymentStatusEvent(EventModel):
    deployment: Deployment | None = None
    deployment_status: DeploymentStatus | None = None


class WorkflowRunEvent(EventModel):
    workflow: Workflow | None = None
    workflow_run: WorkflowRun | None = None


class WorkflowJobEvent(EventModel):
    workflow_job: WorkflowJob | None = None


class WorkflowDispatchEvent(EventModel):
    inputs: dict[str, Any] | None = None
    ref: str | None = None
    workflow: str | None = None


class CodeScanningAlertEvent(EventModel):
    alert: Alert | None = None
    ref: str | None = None
    commit_oid: str | None = None


# ---------------------------------------------------------------------------
# Organizations and teams
# ---------------------------------------------------------------------------


class TeamEvent(EventModel):
    team: Team | None = None
    changes: dict[str, Any] | None = None


class TeamAddEvent(EventModel):
    team: Team | None = None


class MembershipEvent(EventModel):
    scope: str | None = None  # always "team"
    member: User | None = None
    team: Team | None = None


class MemberEvent(EventModel):
    member: User | None = None
    changes: dict[str, Any] | None = None


class OrganizationEvent(EventModel):
    invitation: dict[str, Any] | None = None
    membership: Membership | None = None


# ---------------------------------------------------------------------------
# Stars
# ---------------------------------------------------------------------------


class StarEvent(EventModel):
    starred_at: datetime | None = None


class WatchEvent(EventModel):
    pass


EVENT_TYPES: dict[str, type[EventModel]] = {
    "code_scanning_alert": CodeScanningAlertEvent,
    "create": CreateEvent,
    "delete": DeleteEvent,
    "deployment": DeploymentEvent,
    "deployment_status": DeploymentStatusEvent,
    "fork": ForkEvent,
    "issue_comment": IssueCommentEvent,
    "issues": IssuesEvent,
    "label": LabelEvent,
    "member": MemberEvent,
    "membership": MembershipEvent,
    "milestone": MilestoneEvent,
    "organization": OrganizationEvent,
    "ping": PingEvent,
    "public": PublicEvent,
    "push": PushEvent,
    "repository": RepositoryEvent,
    "star": StarEvent,
    "team": TeamEvent,
    "team_add": TeamAddEvent,
    "watch": WatchEvent,
    "workflow_dispatch": WorkflowDispatchEvent,
    "workflow_job": WorkflowJobEvent,
    "workflow_run": WorkflowRunEvent,
}

MODELS_BY_NAME: dict[str, type[EventModel]] = {
    model.__name__: model for model in EVENT_TYPES.values()
}
