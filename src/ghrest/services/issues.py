"""Issues API: issues, comments, labels, milestones and assignees.

https://docs.github.com/en/rest/issues
"""

from __future__ import annotations

from datetime import datetime

from ..models import Issue, IssueComment, Label, Milestone, RequestBody, User
from ..pagination import ListOptions, Page
from ..response import Response
from .base import Service, escape


# ---------------------------------------------------------------------------
# Query / request models
# ---------------------------------------------------------------------------


class IssueListOptions(ListOptions):
    """Options for listing issues across repositories."""

    filter: str | None = None  # assigned, created, mentioned, subscribed, repos, all
    state: str | None = None  # open, closed, all
    labels: list[str] | None = None
    sort: str | None = None  # created, updated, comments
    direction: str | None = None  # asc, desc
    since: datetime | None = None


class IssueListByRepoOptions(ListOptions):
    milestone: str | None = None  # number, "*" or "none"
    state: str | None = None
    assignee: str | None = None  # login, "*" or "none"
    creator: str | None = None
    mentioned: str | None = None
    labels: list[str] | None = None
    sort: str | None = None
    direction: str | None = None
    since: datetime | None = None


class IssueRequest(RequestBody):
    """Body for creating or editing an issue.

    Only set fields are sent, so an edit touches nothing else.
    """

    title: str | None = None
    body: str | None = None
    labels: list[str] | None = None
    assignee: str | None = None
    assignees: list[str] | None = None
    state: str | None = None
    state_reason: str | None = None
    milestone: int | None = None


class LockIssueOptions(RequestBody):
    lock_reason: str | None = None  # off-topic, too heated, resolved, spam


class IssueListCommentsOptions(ListOptions):
    sort: str | None = None  # created, updated
    direction: str | None = None
    since: datetime | None = None


class LabelRequest(RequestBody):
    """Body for creating or editing a label (``new_name`` renames on edit)."""

    name: str | None = None
    new_name: str | None = None
    color: str | None = None
    description: str | None = None


class MilestoneListOptions(ListOptions):
    state: str | None = None
    sort: str | None = None  # due_on, completeness
    direction: str | None = None


class MilestoneRequest(RequestBody):
    title: str | None = None
    state: str | None = None
    description: str | None = None
    due_on: datetime | None = None


class IssuesService(Service):
    # ------------------------------------------------------------------
    # Issues
    # ------------------------------------------------------------------

    async def list(self, all: bool = False, opts: IssueListOptions | None = None) -> Page[Issue]:
        """List issues for the authenticated user.

        With *all*, issues across owned, member and organization
        repositories are included; otherwise only owned and member
        repositories.
        """
        return await self._list("issues" if all else "user/issues", Issue, opts)

    async def list_by_org(self, org: str, opts: IssueListOptions | None = None) -> Page[Issue]:
        """List issues assigned to the authenticated user in an organization."""
        return await self._list(f"orgs/{escape(org)}/issues", Issue, opts)

    async def list_by_repo(
        self, owner: str, repo: str, opts: IssueListByRepoOptions | None = None
    ) -> Page[Issue]:
        """List issues and pull requests of a repository."""
        return await self._list(f"repos/{escape(owner)}/{escape(repo)}/issues", Issue, opts)

    async def get(self, owner: str, repo: str, number: int) -> Issue:
        """Fetch an issue or pull request by number."""
        return await self._get(f"repos/{escape(owner)}/{escape(repo)}/issues/{number}", Issue)

    async def create(self, owner: str, repo: str, issue: IssueRequest) -> Issue:
        """Open an issue."""
        return await self._send("POST", f"repos/{escape(owner)}/{escape(repo)}/issues", Issue, issue)

    async def edit(self, owner: str, repo: str, number: int, issue: IssueRequest) -> Issue:
        """Update an issue; assignees and labels given are replaced wholesale."""
        return await self._send(
            "PATCH", f"repos/{escape(owner)}/{escape(repo)}/issues/{number}", Issue, issue
        )

    async def lock(
        self, owner: str, repo: str, number: int, opts: LockIssueOptions | None = None
    ) -> Response:
        """Lock the conversation on an issue."""
        return await self._request(
            "PUT",
            f"repos/{escape(owner)}/{escape(repo)}/issues/{number}/lock",
            body=opts or LockIssueOptions(),
        )

    async def unlock(self, owner: str, repo: str, number: int) -> Response:
        """Unlock the conversation on an issue."""
        return await self._delete(f"repos/{escape(owner)}/{escape(repo)}/issues/{number}/lock")

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    async def list_comments(
        self,
        owner: str,
        repo: str,
        number: int = 0,
        opts: IssueListCommentsOptions | None = None,
    ) -> Page[IssueComment]:
        """List comments on one issue, or on every issue when *number* is 0."""
        base = f"repos/{escape(owner)}/{escape(repo)}/issues"
        url = f"{base}/{number}/comments" if number else f"{base}/comments"
        return await self._list(url, IssueComment, opts)

    async def get_comment(self, owner: str, repo: str, comment_id: int) -> IssueComment:
        """Fetch an issue comment."""
        return await self._get(
            f"repos/{escape(owner)}/{escape(repo)}/issues/comments/{comment_id}", IssueComment
        )

    async def create_comment(self, owner: str, repo: str, number: int, body: str) -> IssueComment:
        """Comment on an issue."""
        return await self._send(
            "POST",
            f"repos/{escape(owner)}/{escape(repo)}/issues/{number}/comments",
            IssueComment,
            {"body": body},
        )

    async def edit_comment(self, owner: str, repo: str, comment_id: int, body: str) -> IssueComment:
        """Replace the body of an issue comment."""
        return await self._send(
            "PATCH",
            f"repos/{escape(owner)}/{escape(repo)}/issues/comments/{comment_id}",
            IssueComment,
            {"body": body},
        )

    async def delete_comment(self, owner: str, repo: str, comment_id: int) -> Response:
        """Delete an issue comment."""
        return await self._delete(
            f"repos/{escape(owner)}/{escape(repo)}/issues/comments/{comment_id}"
        )

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------

    async def list_labels(
        self, owner: str, repo: str, opts: ListOptions | None = None
    ) -> Page[Label]:
        """List the repository's labels."""
        return await self._list(f"repos/{escape(owner)}/{escape(repo)}/labels", Label, opts)

    async def get_label(self, owner: str, repo: str, name: str) -> Label:
        """Fetch a label by name."""
        return await self._get(f"repos/{escape(owner)}/{escape(repo)}/labels/{escape(name)}", Label)

    async def create_label(self, owner: str, repo: str, label: LabelRequest) -> Label:
        """Create a label."""
        return await self._send("POST", f"repos/{escape(owner)}/{escape(repo)}/labels", Label, label)

    async def edit_label(self, owner: str, repo: str, name: str, label: LabelRequest) -> Label:
        """Rename or recolour a label."""
        return await self._send(
            "PATCH", f"repos/{escape(owner)}/{escape(repo)}/labels/{escape(name)}", Label, label
        )

    async def delete_label(self, owner: str, repo: str, name: str) -> Response:
        """Delete a label."""
        return await self._delete(f"repos/{escape(owner)}/{escape(repo)}/labels/{escape(name)}")

    async def list_labels_by_issue(
        self, owner: str, repo: str, number: int, opts: ListOptions | None = None
    ) -> Page[Label]:
        """List labels on an issue."""
        return await self._list(
            f"repos/{escape(owner)}/{escape(repo)}/issues/{number}/labels", Label, opts
        )

    async def _labels_for_issue(
        self, method: str, owner: str, repo: str, number: int, labels: list[str]
    ) -> list[Label]:
        response = await self._request(
            method,
            f"repos/{escape(owner)}/{escape(repo)}/issues/{number}/labels",
            body={"labels": labels},
        )
        return [Label.model_validate(item) for item in response.json()]

    async def add_labels_to_issue(
        self, owner: str, repo: str, number: int, labels: list[str]
    ) -> list[Label]:
        """Add labels to an issue, keeping existing ones."""
        return await self._labels_for_issue("POST", owner, repo, number, labels)

    async def replace_labels_for_issue(
        self, owner: str, repo: str, number: int, labels: list[str]
    ) -> list[Label]:
        """Replace all labels on an issue."""
        return await self._labels_for_issue("PUT", owner, repo, number, labels)

    async def remove_label_for_issue(
        self, owner: str, repo: str, number: int, name: str
    ) -> Response:
        """Remove one label from an issue."""
        return await self._delete(
            f"repos/{escape(owner)}/{escape(repo)}/issues/{number}/labels/{escape(name)}"
        )

    # ------------------------------------------------------------------
    # Milestones
    # ------------------------------------------------------------------

    async def list_milestones(
        self, owner: str, repo: str, opts: MilestoneListOptions | None = None
    ) -> Page[Milestone]:
        """List the repository's milestones."""
        return await self._list(
            f"repos/{escape(owner)}/{escape(repo)}/milestones", Milestone, opts
        )

    async def get_milestone(self, owner: str, repo: str, number: int) -> Milestone:
        """Fetch a milestone by number."""
        return await self._get(
            f"repos/{escape(owner)}/{escape(repo)}/milestones/{number}", Milestone
        )

    async def create_milestone(
        self, owner: str, repo: str, milestone: MilestoneRequest
    ) -> Milestone:
        """Create a milestone."""
        return await self._send(
            "POST", f"repos/{escape(owner)}/{escape(repo)}/milestones", Milestone, milestone
        )

    async def edit_milestone(
        self, owner: str, repo: str, number: int, milestone: MilestoneRequest
    ) -> Milestone:
        """Update a milestone."""
        return await self._send(
            "PATCH",
            f"repos/{escape(owner)}/{escape(repo)}/milestones/{number}",
            Milestone,
            milestone,
        )

    async def delete_milestone(self, owner: str, repo: str, number: int) -> Response:
        """Delete a milestone."""
        return await self._delete(f"repos/{escape(owner)}/{escape(repo)}/milestones/{number}")

    # ------------------------------------------------------------------
    # Assignees
    # ------------------------------------------------------------------

    async def list_assignees(
        self, owner: str, repo: str, opts: ListOptions | None = None
    ) -> Page[User]:
        """List users that issues in the repository can be assigned to."""
        return await self._list(f"repos/{escape(owner)}/{escape(repo)}/assignees", User, opts)

    async def is_assignee(self, owner: str, repo: str, user: str) -> bool:
        """Report whether *user* can be assigned issues in the repository."""
        return await self._check(f"repos/{escape(owner)}/{escape(repo)}/assignees/{escape(user)}")

    async def add_assignees(
        self, owner: str, repo: str, number: int, assignees: list[str]
    ) -> Issue:
        """Add assignees to an issue."""
        return await self._send(
            "POST",
            f"repos/{escape(owner)}/{escape(repo)}/issues/{number}/assignees",
            Issue,
            {"assignees": assignees},
        )

    async def remove_assignees(
        self, owner: str, repo: str, number: int, assignees: list[str]
    ) -> Issue:
        """Remove assignees from an issue."""
        return await self._send(
            "DELETE",
            f"repos/{escape(owner)}/{escape(repo)}/issues/{number}/assignees",
            Issue,
            {"assignees": assignees},
        )
