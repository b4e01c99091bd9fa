"""Code scanning API: https://docs.github.com/en/rest/code-scanning"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from ..errors import AcceptedError
from ..models import GitHubModel, RequestBody, Repository, User
from ..pagination import ListCursorOptions, ListOptions, Page
from .base import Service, escape


class Rule(GitHubModel):
    id: str | None = None
    severity: str | None = None
    description: str | None = None
    name: str | None = None
    security_severity_level: str | None = None
    full_description: str | None = None
    tags: list[str] | None = None
    help: str | None = None


class Tool(GitHubModel):
    name: str | None = None
    guid: str | None = None
    version: str | None = None


class Location(GitHubModel):
    path: str | None = None
    start_line: int | None = None
    end_line: int | None = None
    start_column: int | None = None
    end_column: int | None = None


class Message(GitHubModel):
    text: str | None = None


class MostRecentInstance(GitHubModel):
    ref: str | None = None
    analysis_key: str | None = None
    category: str | None = None
    environment: str | None = None
    state: str | None = None
    commit_sha: str | None = None
    message: Message | None = None
    location: Location | None = None
    html_url: str | None = None
    classifications: list[str] | None = None


class Alert(GitHubModel):
    number: int | None = None
    repository: Repository | None = None
    rule: Rule | None = None
    tool: Tool | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    fixed_at: datetime | None = None
    state: str | None = None  # open, dismissed, fixed
    dismissed_by: User | None = None
    dismissed_at: datetime | None = None
    dismissed_reason: str | None = None
    dismissed_comment: str | None = None
    most_recent_instance: MostRecentInstance | None = None
    instances_url: str | None = None
    url: str | None = None
    html_url: str | None = None


class ScanningAnalysis(GitHubModel):
    id: int | None = None
    ref: str | None = None
    commit_sha: str | None = None
    analysis_key: str | None = None
    environment: str | None = None
    error: str | None = None
    category: str | None = None
    created_at: datetime | None = None
    results_count: int | None = None
    rules_count: int | None = None
    url: str | None = None
    sarif_id: str | None = None
    tool: Tool | None = None
    deletable: bool | None = None
    warning: str | None = None


class SarifID(GitHubModel):
    """Handle of an uploaded SARIF file, returned while processing is pending."""

    id: str | None = None
    url: str | None = None


class SarifAnalysis(RequestBody):
    """Body for uploading a SARIF file.

    ``sarif`` is the gzip-compressed, base64-encoded SARIF document.
    """

    commit_sha: str
    ref: str
    sarif: str
    checkout_uri: str | None = None
    started_at: datetime | None = None
    tool_name: str | None = None


class SarifUpload(GitHubModel):
    processing_status: str | None = None  # pending, complete, failed
    analyses_url: str | None = None
    errors: list[str] | None = None


class AlertListOptions(ListCursorOptions):
    state: str | None = None
    ref: str | None = None
    severity: str | None = None
    tool_name: str | None = None
    sort: str | None = None
    direction: str | None = None


class AlertInstancesListOptions(ListOptions):
    ref: str | None = None


class AnalysesListOptions(ListOptions):
    sarif_id: str | None = None
    ref: str | None = None
    tool_name: str | None = None


class CodeScanningAlertState(RequestBody):
    """Body for updating an alert; dismissing requires ``dismissed_reason``."""

    state: str  # open, dismissed
    dismissed_reason: str | None = None  # "false positive", "won't fix", "used in tests"
    dismissed_comment: str | None = None


class CodeScanningService(Service):
    def _repo(self, owner: str, repo: str) -> str:
        return f"repos/{escape(owner)}/{escape(repo)}/code-scanning"

    # ------------------------------------------------------------------
    # Alerts
    # ------------------------------------------------------------------

    async def list_alerts_for_repo(
        self, owner: str, repo: str, opts: AlertListOptions | None = None
    ) -> Page[Alert]:
        """List code scanning alerts for a repository."""
        return await self._list(f"{self._repo(owner, repo)}/alerts", Alert, opts)

    async def list_alerts_for_org(
        self, org: str, opts: AlertListOptions | None = None
    ) -> Page[Alert]:
        """List code scanning alerts across an organization; cursor paginated."""
        return await self._list(f"orgs/{escape(org)}/code-scanning/alerts", Alert, opts)

    async def get_alert(self, owner: str, repo: str, number: int) -> Alert:
        """Fetch a single code scanning alert."""
        return await self._get(f"{self._repo(owner, repo)}/alerts/{number}", Alert)

    async def update_alert(
        self, owner: str, repo: str, number: int, state: CodeScanningAlertState
    ) -> Alert:
        """Open or dismiss an alert."""
        if state.state == "dismissed" and not state.dismissed_reason:
            raise ValueError("dismissed_reason is required when dismissing an alert")
        return await self._send("PATCH", f"{self._repo(owner, repo)}/alerts/{number}", Alert, state)

    async def list_alert_instances(
        self, owner: str, repo: str, number: int, opts: AlertInstancesListOptions | None = None
    ) -> Page[MostRecentInstance]:
        """List every instance of an alert across refs."""
        return await self._list(
            f"{self._repo(owner, repo)}/alerts/{number}/instances", MostRecentInstance, opts
        )

    # ------------------------------------------------------------------
    # Analyses and SARIF uploads
    # ------------------------------------------------------------------

    async def list_analyses(
        self, owner: str, repo: str, opts: AnalysesListOptions | None = None
    ) -> Page[ScanningAnalysis]:
        """List code scanning analyses, newest first."""
        return await self._list(f"{self._repo(owner, repo)}/analyses", ScanningAnalysis, opts)

    async def get_analysis(self, owner: str, repo: str, analysis_id: int) -> ScanningAnalysis:
        """Fetch a single analysis."""
        return await self._get(f"{self._repo(owner, repo)}/analyses/{analysis_id}", ScanningAnalysis)

    async def upload_sarif(self, owner: str, repo: str, sarif: SarifAnalysis) -> SarifID:
        """Upload a SARIF file.

        Processing is asynchronous: GitHub normally answers 202 and the
        returned id can be polled with :meth:`get_sarif`.
        """
        try:
            return await self._send("POST", f"{self._repo(owner, repo)}/sarifs", SarifID, sarif)
        except AcceptedError as exc:
            try:
                data: Any = exc.json()
            except json.JSONDecodeError:
                data = None
            return SarifID.model_validate(data or {})

    async def get_sarif(self, owner: str, repo: str, sarif_id: str) -> SarifUpload:
        """Fetch the processing status of an uploaded SARIF file."""
        return await self._get(f"{self._repo(owner, repo)}/sarifs/{escape(sarif_id)}", SarifUpload)
