"""Deployment environments and their branch policies.

https://docs.github.com/en/rest/deployments/environments
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, ValidationInfo, field_validator

from ..models import GitHubModel, RequestBody, Team, User
from ..pagination import ListOptions, Page
from ..response import Response
from .base import Service, escape


class RequiredReviewer(GitHubModel):
    """A protection-rule reviewer; ``reviewer`` is decoded by ``type``."""

    reviewer_type: str | None = Field(default=None, alias="type")  # User, Team
    reviewer: User | Team | dict[str, Any] | None = None

    @field_validator("reviewer", mode="before")
    @classmethod
    def _decode_reviewer(cls, value: Any, info: ValidationInfo) -> Any:
        if not isinstance(value, dict):
            return value
        kind = info.data.get("reviewer_type")
        if kind == "User":
            return User.model_validate(value)
        if kind == "Team":
            return Team.model_validate(value)
        return value


class ProtectionRule(GitHubModel):
    id: int | None = None
    node_id: str | None = None
    rule_type: str | None = Field(default=None, alias="type")
    wait_timer: int | None = None
    reviewers: list[RequiredReviewer] | None = None


class BranchPolicy(GitHubModel):
    protected_branches: bool | None = None
    custom_branch_policies: bool | None = None


class EnvReviewers(GitHubModel):
    reviewer_type: str | None = Field(default=None, alias="type")
    id: int | None = None


class Environment(GitHubModel):
    id: int | None = None
    node_id: str | None = None
    name: str | None = None
    url: str | None = None
    html_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    protection_rules: list[ProtectionRule] | None = None
    deployment_branch_policy: BranchPolicy | None = None


class CreateUpdateEnvironment(RequestBody):
    """Body for creating or updating an environment.

    ``deployment_branch_policy`` is always sent; ``None`` means any branch
    may deploy.
    """

    wait_timer: int | None = None
    reviewers: list[EnvReviewers] | None = None
    deployment_branch_policy: BranchPolicy | None = None

    def to_payload(self) -> dict[str, Any]:
        """Serialise the body, keeping an explicit null branch policy."""
        payload = super().to_payload()
        payload.setdefault("deployment_branch_policy", None)
        return payload


class DeploymentBranchPolicy(GitHubModel):
    id: int | None = None
    node_id: str | None = None
    name: str | None = None


class DeploymentBranchPolicyRequest(RequestBody):
    name: str


class EnvironmentListOptions(ListOptions):
    pass


class EnvironmentsService(Service):
    def _env(self, owner: str, repo: str, name: str) -> str:
        return f"repos/{escape(owner)}/{escape(repo)}/environments/{escape(name)}"

    # ------------------------------------------------------------------
    # Environments
    # ------------------------------------------------------------------

    async def list(
        self, owner: str, repo: str, opts: EnvironmentListOptions | None = None
    ) -> Page[Environment]:
        """List the repository's environments."""
        return await self._list(
            f"repos/{escape(owner)}/{escape(repo)}/environments",
            Environment,
            opts,
            key="environments",
        )

    async def get(self, owner: str, repo: str, name: str) -> Environment:
        """Fetch an environment by name."""
        return await self._get(self._env(owner, repo, name), Environment)

    async def create_update(
        self,
        owner: str,
        repo: str,
        name: str,
        environment: CreateUpdateEnvironment | None = None,
    ) -> Environment:
        """Create an environment or update an existing one.

        ``deployment_branch_policy`` is always sent, so leaving it unset
        resets an existing policy to "all branches may deploy" on every
        update. Pass the current policy to keep it.
        """
        return await self._send(
            "PUT",
            self._env(owner, repo, name),
            Environment,
            (environment or CreateUpdateEnvironment()).to_payload(),
        )

    async def delete(self, owner: str, repo: str, name: str) -> Response:
        """Delete an environment."""
        return await self._delete(self._env(owner, repo, name))

    # ------------------------------------------------------------------
    # Branch policies
    # ------------------------------------------------------------------

    async def list_branch_policies(
        self, owner: str, repo: str, environment: str, opts: ListOptions | None = None
    ) -> Page[DeploymentBranchPolicy]:
        """List the environment's deployment branch policies."""
        return await self._list(
            f"{self._env(owner, repo, environment)}/deployment-branch-policies",
            DeploymentBranchPolicy,
            opts,
            key="branch_policies",
        )

    async def get_branch_policy(
        self, owner: str, repo: str, environment: str, policy_id: int
    ) -> DeploymentBranchPolicy:
        """Fetch a deployment branch policy."""
        return await self._get(
            f"{self._env(owner, repo, environment)}/deployment-branch-policies/{policy_id}",
            DeploymentBranchPolicy,
        )

    async def create_branch_policy(
        self, owner: str, repo: str, environment: str, name: str
    ) -> DeploymentBranchPolicy:
        """Add a branch name pattern allowed to deploy to the environment."""
        return await self._send(
            "POST",
            f"{self._env(owner, repo, environment)}/deployment-branch-policies",
            DeploymentBranchPolicy,
            DeploymentBranchPolicyRequest(name=name),
        )

    async def update_branch_policy(
        self, owner: str, repo: str, environment: str, policy_id: int, name: str
    ) -> DeploymentBranchPolicy:
        """Change the name pattern of a deployment branch policy."""
        return await self._send(
            "PUT",
            f"{self._env(owner, repo, environment)}/deployment-branch-policies/{policy_id}",
            DeploymentBranchPolicy,
            DeploymentBranchPolicyRequest(name=name),
        )

    async def delete_branch_policy(
        self, owner: str, repo: str, environment: str, policy_id: int
    ) -> Response:
        """Delete a deployment branch policy."""
        return await self._delete(
            f"{self._env(owner, repo, environment)}/deployment-branch-policies/{policy_id}"
        )
