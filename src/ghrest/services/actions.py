"""Actions API: workflows, workflow runs, jobs and artifacts.

https://docs.github.com/en/rest/actions

Log and artifact downloads are served through short-lived redirect URLs;
the helpers here return that URL instead of the archive bytes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from ..models import GitHubModel, RequestBody, Repository, User
from ..pagination import ListOptions, Page
from ..response import Response
from .base import Service, escape


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class Workflow(GitHubModel):
    id: int | None = None
    node_id: str | None = None
    name: str | None = None
    path: str | None = None
    state: str | None = None  # active, disabled_manually, ...
    created_at: datetime | None = None
    updated_at: datetime | None = None
    url: str | None = None
    html_url: str | None = None
    badge_url: str | None = None


class HeadCommit(GitHubModel):
    id: str | None = None
    tree_id: str | None = None
    message: str | None = None
    timestamp: datetime | None = None
    author: dict[str, Any] | None = None
    committer: dict[str, Any] | None = None


class WorkflowRun(GitHubModel):
    id: int | None = None
    name: str | None = None
    node_id: str | None = None
    head_branch: str | None = None
    head_sha: str | None = None
    run_number: int | None = None
    run_attempt: int | None = None
    event: str | None = None
    display_title: str | None = None
    status: str | None = None
    conclusion: str | None = None
    workflow_id: int | None = None
    check_suite_id: int | None = None
    url: str | None = None
    html_url: str | None = None
    jobs_url: str | None = None
    logs_url: str | None = None
    artifacts_url: str | None = None
    cancel_url: str | None = None
    rerun_url: str | None = None
    workflow_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    run_started_at: datetime | None = None
    head_commit: HeadCommit | None = None
    repository: Repository | None = None
    head_repository: Repository | None = None
    actor: User | None = None
    triggering_actor: User | None = None


class TaskStep(GitHubModel):
    name: str | None = None
    status: str | None = None
    conclusion: str | None = None
    number: int | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None


class WorkflowJob(GitHubModel):
    id: int | None = None
    run_id: int | None = None
    run_url: str | None = None
    node_id: str | None = None
    head_branch: str | None = None
    head_sha: str | None = None
    url: str | None = None
    html_url: str | None = None
    status: str | None = None
    conclusion: str | None = None
    created_at: datetime | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    name: str | None = None
    steps: list[TaskStep] | None = None
    check_run_url: str | None = None
    labels: list[str] | None = None
    runner_id: int | None = None
    runner_name: str | None = None
    runner_group_id: int | None = None
    runner_group_name: str | None = None
    run_attempt: int | None = None
    workflow_name: str | None = None


class ArtifactWorkflowRun(GitHubModel):
    id: int | None = None
    repository_id: int | None = None
    head_repository_id: int | None = None
    head_branch: str | None = None
    head_sha: str | None = None


class Artifact(GitHubModel):
    id: int | None = None
    node_id: str | None = None
    name: str | None = None
    size_in_bytes: int | None = None
    url: str | None = None
    archive_download_url: str | None = None
    expired: bool | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    expires_at: datetime | None = None
    workflow_run: ArtifactWorkflowRun | None = None


# ---------------------------------------------------------------------------
# Options / requests
# ---------------------------------------------------------------------------


class ListWorkflowRunsOptions(ListOptions):
    actor: str | None = None
    branch: str | None = None
    event: str | None = None
    status: str | None = None
    created: str | None = None  # date range, e.g. ">=2023-01-01"
    head_sha: str | None = None
    exclude_pull_requests: bool | None = None
    check_suite_id: int | None = None


class ListWorkflowJobsOptions(ListOptions):
    filter: str | None = None  # latest, all


class ListArtifactsOptions(ListOptions):
    name: str | None = None


class CreateWorkflowDispatchEventRequest(RequestBody):
    """Body for a ``workflow_dispatch`` trigger.

    ``ref`` is the branch or tag to run the workflow on.
    """

    ref: str
    inputs: dict[str, Any] | None = None


class ActionsService(Service):
    def _repo(self, owner: str, repo: str) -> str:
        return f"repos/{escape(owner)}/{escape(repo)}/actions"

    # ------------------------------------------------------------------
    # Workflows
    # ------------------------------------------------------------------

    async def list_workflows(
        self, owner: str, repo: str, opts: ListOptions | None = None
    ) -> Page[Workflow]:
        """List the repository's workflows."""
        return await self._list(
            f"{self._repo(owner, repo)}/workflows", Workflow, opts, key="workflows"
        )

    async def get_workflow_by_id(self, owner: str, repo: str, workflow_id: int) -> Workflow:
        """Fetch a workflow by id."""
        return await self._get(f"{self._repo(owner, repo)}/workflows/{workflow_id}", Workflow)

    async def get_workflow_by_file_name(
        self, owner: str, repo: str, file_name: str
    ) -> Workflow:
        """Fetch a workflow by its file name, e.g. ``main.yml``."""
        return await self._get(
            f"{self._repo(owner, repo)}/workflows/{escape(file_name)}", Workflow
        )

    async def _dispatch(
        self, url: str, event: CreateWorkflowDispatchEventRequest
    ) -> Response:
        return await self._request("POST", f"{url}/dispatches", body=event)

    async def create_workflow_dispatch_event_by_id(
        self, owner: str, repo: str, workflow_id: int, event: CreateWorkflowDispatchEventRequest
    ) -> Response:
        """Trigger a ``workflow_dispatch`` run of a workflow given by id."""
        return await self._dispatch(f"{self._repo(owner, repo)}/workflows/{workflow_id}", event)

    async def create_workflow_dispatch_event_by_file_name(
        self, owner: str, repo: str, file_name: str, event: CreateWorkflowDispatchEventRequest
    ) -> Response:
        """Trigger a ``workflow_dispatch`` run of a workflow given by file name."""
        return await self._dispatch(
            f"{self._repo(owner, repo)}/workflows/{escape(file_name)}", event
        )

    async def enable_workflow_by_id(self, owner: str, repo: str, workflow_id: int) -> Response:
        """Enable a disabled workflow."""
        return await self._request(
            "PUT", f"{self._repo(owner, repo)}/workflows/{workflow_id}/enable"
        )

    async def disable_workflow_by_id(self, owner: str, repo: str, workflow_id: int) -> Response:
        """Disable a workflow."""
        return await self._request(
            "PUT", f"{self._repo(owner, repo)}/workflows/{workflow_id}/disable"
        )

    # ------------------------------------------------------------------
    # Workflow runs
    # ------------------------------------------------------------------

    async def list_repository_workflow_runs(
        self, owner: str, repo: str, opts: ListWorkflowRunsOptions | None = None
    ) -> Page[WorkflowRun]:
        """List workflow runs across the repository."""
        return await self._list(
            f"{self._repo(owner, repo)}/runs", WorkflowRun, opts, key="workflow_runs"
        )

    async def list_workflow_runs_by_id(
        self,
        owner: str,
        repo: str,
        workflow_id: int,
        opts: ListWorkflowRunsOptions | None = None,
    ) -> Page[WorkflowRun]:
        """List runs of a workflow given by id."""
        return await self._list(
            f"{self._repo(owner, repo)}/workflows/{workflow_id}/runs",
            WorkflowRun,
            opts,
            key="workflow_runs",
        )

    async def list_workflow_runs_by_file_name(
        self,
        owner: str,
        repo: str,
        file_name: str,
        opts: ListWorkflowRunsOptions | None = None,
    ) -> Page[WorkflowRun]:
        """List runs of a workflow given by file name."""
        return await self._list(
            f"{self._repo(owner, repo)}/workflows/{escape(file_name)}/runs",
            WorkflowRun,
            opts,
            key="workflow_runs",
        )

    async def get_workflow_run_by_id(self, owner: str, repo: str, run_id: int) -> WorkflowRun:
        """Fetch a workflow run."""
        return await self._get(f"{self._repo(owner, repo)}/runs/{run_id}", WorkflowRun)

    async def rerun_workflow_by_id(self, owner: str, repo: str, run_id: int) -> Response:
        """Re-run every job of a workflow run."""
        return await self._request("POST", f"{self._repo(owner, repo)}/runs/{run_id}/rerun")

    async def rerun_failed_jobs_by_id(self, owner: str, repo: str, run_id: int) -> Response:
        """Re-run the failed jobs of a workflow run and their dependents."""
        return await self._request(
            "POST", f"{self._repo(owner, repo)}/runs/{run_id}/rerun-failed-jobs"
        )

    async def cancel_workflow_run_by_id(self, owner: str, repo: str, run_id: int) -> Response:
        """Cancel a run; GitHub answers 202 so this raises ``AcceptedError`` on success."""
        return await self._request("POST", f"{self._repo(owner, repo)}/runs/{run_id}/cancel")

    async def delete_workflow_run(self, owner: str, repo: str, run_id: int) -> Response:
        """Delete a completed workflow run."""
        return await self._delete(f"{self._repo(owner, repo)}/runs/{run_id}")

    async def get_workflow_run_logs(
        self, owner: str, repo: str, run_id: int, max_redirects: int = 1
    ) -> str:
        """Return the URL of the run's log archive."""
        return await self._client.get_redirect_url(
            f"{self._repo(owner, repo)}/runs/{run_id}/logs", max_redirects
        )

    async def delete_workflow_run_logs(self, owner: str, repo: str, run_id: int) -> Response:
        """Delete the logs of a workflow run."""
        return await self._delete(f"{self._repo(owner, repo)}/runs/{run_id}/logs")

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------

    async def list_workflow_jobs(
        self, owner: str, repo: str, run_id: int, opts: ListWorkflowJobsOptions | None = None
    ) -> Page[WorkflowJob]:
        """List the jobs of a workflow run."""
        return await self._list(
            f"{self._repo(owner, repo)}/runs/{run_id}/jobs", WorkflowJob, opts, key="jobs"
        )

    async def get_workflow_job_by_id(self, owner: str, repo: str, job_id: int) -> WorkflowJob:
        """Fetch a workflow job."""
        return await self._get(f"{self._repo(owner, repo)}/jobs/{job_id}", WorkflowJob)

    async def get_workflow_job_logs(
        self, owner: str, repo: str, job_id: int, max_redirects: int = 1
    ) -> str:
        """Return the URL of the job's plain-text log."""
        return await self._client.get_redirect_url(
            f"{self._repo(owner, repo)}/jobs/{job_id}/logs", max_redirects
        )

    # ------------------------------------------------------------------
    # Artifacts
    # ------------------------------------------------------------------

    async def list_artifacts(
        self, owner: str, repo: str, opts: ListArtifactsOptions | None = None
    ) -> Page[Artifact]:
        """List artifacts across the repository."""
        return await self._list(
            f"{self._repo(owner, repo)}/artifacts", Artifact, opts, key="artifacts"
        )

    async def list_workflow_run_artifacts(
        self, owner: str, repo: str, run_id: int, opts: ListArtifactsOptions | None = None
    ) -> Page[Artifact]:
        """List artifacts produced by a workflow run."""
        return await self._list(
            f"{self._repo(owner, repo)}/runs/{run_id}/artifacts", Artifact, opts, key="artifacts"
        )

    async def get_artifact(self, owner: str, repo: str, artifact_id: int) -> Artifact:
        """Fetch an artifact."""
        return await self._get(f"{self._repo(owner, repo)}/artifacts/{artifact_id}", Artifact)

    async def download_artifact(
        self, owner: str, repo: str, artifact_id: int, max_redirects: int = 1
    ) -> str:
        """Return the URL of the artifact's zip archive."""
        return await self._client.get_redirect_url(
            f"{self._repo(owner, repo)}/artifacts/{artifact_id}/zip", max_redirects
        )

    async def delete_artifact(self, owner: str, repo: str, artifact_id: int) -> Response:
        """Delete an artifact."""
        return await self._delete(f"{self._repo(owner, repo)}/artifacts/{artifact_id}")
