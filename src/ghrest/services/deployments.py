"""Deployments API: https://docs.github.com/en/rest/deployments/deployments"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from ..models import GitHubModel, RequestBody, User
from ..pagination import ListOptions, Page
from ..response import Response
from .base import Service, escape


class Deployment(GitHubModel):
    url: str | None = None
    id: int | None = None
    node_id: str | None = None
    sha: str | None = None
    ref: str | None = None
    task: str | None = None
    payload: Any = None
    original_environment: str | None = None
    environment: str | None = None
    description: str | None = None
    creator: User | None = None
    transient_environment: bool | None = None
    production_environment: bool | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    statuses_url: str | None = None
    repository_url: str | None = None


class DeploymentStatus(GitHubModel):
    id: int | None = None
    node_id: str | None = None
    state: str | None = None  # error, failure, inactive, in_progress, queued, pending, success
    creator: User | None = None
    description: str | None = None
    environment: str | None = None
    environment_url: str | None = None
    log_url: str | None = None
    target_url: str | None = None
    url: str | None = None
    deployment_url: str | None = None
    repository_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DeploymentRequest(RequestBody):
    """Body for creating a deployment.

    ``required_contexts`` set to an empty list skips commit status checks,
    which is different from leaving it unset.
    """

    ref: str
    task: str | None = None
    auto_merge: bool | None = None
    required_contexts: list[str] | None = None
    payload: Any = None
    environment: str | None = None
    description: str | None = None
    transient_environment: bool | None = None
    production_environment: bool | None = None


class DeploymentsListOptions(ListOptions):
    sha: str | None = None
    ref: str | None = None
    task: str | None = None
    environment: str | None = None


class DeploymentStatusRequest(RequestBody):
    state: str
    log_url: str | None = None
    description: str | None = None
    environment: str | None = None
    environment_url: str | None = None
    auto_inactive: bool | None = None


class DeploymentsService(Service):
    def _base(self, owner: str, repo: str) -> str:
        return f"repos/{escape(owner)}/{escape(repo)}/deployments"

    async def list(
        self, owner: str, repo: str, opts: DeploymentsListOptions | None = None
    ) -> Page[Deployment]:
        """List deployments, newest first."""
        return await self._list(self._base(owner, repo), Deployment, opts)

    async def get(self, owner: str, repo: str, deployment_id: int) -> Deployment:
        """Fetch a single deployment."""
        return await self._get(f"{self._base(owner, repo)}/{deployment_id}", Deployment)

    async def create(self, owner: str, repo: str, request: DeploymentRequest) -> Deployment:
        """Create a deployment.

        GitHub answers 202 while an auto-merge of the default branch is in
        progress; that surfaces as :class:`~ghrest.errors.AcceptedError`.
        """
        return await self._send("POST", self._base(owner, repo), Deployment, request)

    async def delete(self, owner: str, repo: str, deployment_id: int) -> Response:
        """Delete an inactive deployment."""
        return await self._delete(f"{self._base(owner, repo)}/{deployment_id}")

    async def list_statuses(
        self, owner: str, repo: str, deployment_id: int, opts: ListOptions | None = None
    ) -> Page[DeploymentStatus]:
        """List the statuses of a deployment."""
        return await self._list(
            f"{self._base(owner, repo)}/{deployment_id}/statuses", DeploymentStatus, opts
        )

    async def get_status(
        self, owner: str, repo: str, deployment_id: int, status_id: int
    ) -> DeploymentStatus:
        """Fetch a single deployment status."""
        return await self._get(
            f"{self._base(owner, repo)}/{deployment_id}/statuses/{status_id}", DeploymentStatus
        )

    async def create_status(
        self, owner: str, repo: str, deployment_id: int, request: DeploymentStatusRequest
    ) -> DeploymentStatus:
        """Report a new status for a deployment."""
        return await self._send(
            "POST",
            f"{self._base(owner, repo)}/{deployment_id}/statuses",
            DeploymentStatus,
            request,
        )
