"""Reactions API: https://docs.github.com/en/rest/reactions"""

from __future__ import annotations

from datetime import datetime

from ..models import GitHubModel, User
from ..pagination import ListOptions, Page
from ..response import Response
from .base import Service, escape

REACTION_CONTENTS = frozenset(
    {"+1", "-1", "laugh", "confused", "heart", "hooray", "rocket", "eyes"}
)


class Reaction(GitHubModel):
    """A single emoji reaction."""

    id: int | None = None
    node_id: str | None = None
    user: User | None = None
    content: str | None = None
    created_at: datetime | None = None


class ListReactionOptions(ListOptions):
    content: str | None = None  # filter by reaction content


def _validate_content(content: str) -> None:
    if content not in REACTION_CONTENTS:
        raise ValueError(
            f"invalid reaction content {content!r}; "
            f"expected one of {', '.join(sorted(REACTION_CONTENTS))}"
        )


class ReactionsService(Service):
    async def _list_reactions(self, url: str, opts: ListReactionOptions | None) -> Page[Reaction]:
        if opts is not None and opts.content is not None:
            _validate_content(opts.content)
        return await self._list(url, Reaction, opts)

    async def _create_reaction(self, url: str, content: str) -> Reaction:
        _validate_content(content)
        return await self._send("POST", url, Reaction, {"content": content})

    # ------------------------------------------------------------------
    # Commit comments
    # ------------------------------------------------------------------

    async def list_comment_reactions(
        self, owner: str, repo: str, comment_id: int, opts: ListReactionOptions | None = None
    ) -> Page[Reaction]:
        """List reactions to a commit comment."""
        return await self._list_reactions(
            f"repos/{escape(owner)}/{escape(repo)}/comments/{comment_id}/reactions", opts
        )

    async def create_comment_reaction(
        self, owner: str, repo: str, comment_id: int, content: str
    ) -> Reaction:
        """React to a commit comment."""
        return await self._create_reaction(
            f"repos/{escape(owner)}/{escape(repo)}/comments/{comment_id}/reactions", content
        )

    async def delete_comment_reaction(
        self, owner: str, repo: str, comment_id: int, reaction_id: int
    ) -> Response:
        """Delete a reaction to a commit comment."""
        return await self._delete(
            f"repos/{escape(owner)}/{escape(repo)}/comments/{comment_id}/reactions/{reaction_id}"
        )

    async def delete_comment_reaction_by_id(
        self, repo_id: int, comment_id: int, reaction_id: int
    ) -> Response:
        """Delete a reaction to a commit comment, addressing the repository by id."""
        return await self._delete(
            f"repositories/{repo_id}/comments/{comment_id}/reactions/{reaction_id}"
        )

    # ------------------------------------------------------------------
    # Issues
    # ------------------------------------------------------------------

    async def list_issue_reactions(
        self, owner: str, repo: str, number: int, opts: ListReactionOptions | None = None
    ) -> Page[Reaction]:
        """List reactions to an issue."""
        return await self._list_reactions(
            f"repos/{escape(owner)}/{escape(repo)}/issues/{number}/reactions", opts
        )

    async def create_issue_reaction(
        self, owner: str, repo: str, number: int, content: str
    ) -> Reaction:
        """React to an issue."""
        return await self._create_reaction(
            f"repos/{escape(owner)}/{escape(repo)}/issues/{number}/reactions", content
        )

    async def delete_issue_reaction(
        self, owner: str, repo: str, number: int, reaction_id: int
    ) -> Response:
        """Delete a reaction to an issue."""
        return await self._delete(
            f"repos/{escape(owner)}/{escape(repo)}/issues/{number}/reactions/{reaction_id}"
        )

    async def delete_issue_reaction_by_id(
        self, repo_id: int, number: int, reaction_id: int
    ) -> Response:
        """Delete a reaction to an issue, addressing the repository by id."""
        return await self._delete(f"repositories/{repo_id}/issues/{number}/reactions/{reaction_id}")

    # ------------------------------------------------------------------
    # Issue comments
    # ------------------------------------------------------------------

    async def list_issue_comment_reactions(
        self, owner: str, repo: str, comment_id: int, opts: ListReactionOptions | None = None
    ) -> Page[Reaction]:
        """List reactions to an issue comment."""
        return await self._list_reactions(
            f"repos/{escape(owner)}/{escape(repo)}/issues/comments/{comment_id}/reactions", opts
        )

    async def create_issue_comment_reaction(
        self, owner: str, repo: str, comment_id: int, content: str
    ) -> Reaction:
        """React to an issue comment."""
        return await self._create_reaction(
            f"repos/{escape(owner)}/{escape(repo)}/issues/comments/{comment_id}/reactions", content
        )

    async def delete_issue_comment_reaction(
        self, owner: str, repo: str, comment_id: int, reaction_id: int
    ) -> Response:
        """Delete a reaction to an issue comment."""
        return await self._delete(
            f"repos/{escape(owner)}/{escape(repo)}/issues/comments/{comment_id}"
            f"/reactions/{reaction_id}"
        )

    async def delete_issue_comment_reaction_by_id(
        self, repo_id: int, comment_id: int, reaction_id: int
    ) -> Response:
        """Delete a reaction to an issue comment, addressing the repository by id."""
        return await self._delete(
            f"repositories/{repo_id}/issues/comments/{comment_id}/reactions/{reaction_id}"
        )

    # ------------------------------------------------------------------
    # Pull request review comments
    # ------------------------------------------------------------------

    async def list_pull_request_comment_reactions(
        self, owner: str, repo: str, comment_id: int, opts: ListReactionOptions | None = None
    ) -> Page[Reaction]:
        """List reactions to a pull request review comment."""
        return await self._list_reactions(
            f"repos/{escape(owner)}/{escape(repo)}/pulls/comments/{comment_id}/reactions", opts
        )

    async def create_pull_request_comment_reaction(
        self, owner: str, repo: str, comment_id: int, content: str
    ) -> Reaction:
        """React to a pull request review comment."""
        return await self._create_reaction(
            f"repos/{escape(owner)}/{escape(repo)}/pulls/comments/{comment_id}/reactions", content
        )

    async def delete_pull_request_comment_reaction(
        self, owner: str, repo: str, comment_id: int, reaction_id: int
    ) -> Response:
        """Delete a reaction to a pull request review comment."""
        return await self._delete(
            f"repos/{escape(owner)}/{escape(repo)}/pulls/comments/{comment_id}"
            f"/reactions/{reaction_id}"
        )

    async def delete_pull_request_comment_reaction_by_id(
        self, repo_id: int, comment_id: int, reaction_id: int
    ) -> Response:
        """Delete a reaction to a review comment, addressing the repository by id."""
        return await self._delete(
            f"repositories/{repo_id}/pulls/comments/{comment_id}/reactions/{reaction_id}"
        )

    # ------------------------------------------------------------------
    # Team discussions
    # ------------------------------------------------------------------

    async def list_team_discussion_reactions(
        self,
        org: str,
        team_slug: str,
        discussion: int,
        opts: ListReactionOptions | None = None,
    ) -> Page[Reaction]:
        """List reactions to a team discussion."""
        return await self._list_reactions(
            f"orgs/{escape(org)}/teams/{escape(team_slug)}/discussions/{discussion}/reactions",
            opts,
        )

    async def create_team_discussion_reaction(
        self, org: str, team_slug: str, discussion: int, content: str
    ) -> Reaction:
        """React to a team discussion."""
        return await self._create_reaction(
            f"orgs/{escape(org)}/teams/{escape(team_slug)}/discussions/{discussion}/reactions",
            content,
        )

    async def delete_team_discussion_reaction(
        self, org: str, team_slug: str, discussion: int, reaction_id: int
    ) -> Response:
        """Delete a reaction to a team discussion."""
        return await self._delete(
            f"orgs/{escape(org)}/teams/{escape(team_slug)}/discussions/{discussion}"
            f"/reactions/{reaction_id}"
        )

    async def delete_team_discussion_reaction_by_org_id_and_team_id(
        self, org_id: int, team_id: int, discussion: int, reaction_id: int
    ) -> Response:
        """Delete a reaction to a team discussion, addressing the team by ids."""
        return await self._delete(
            f"organizations/{org_id}/team/{team_id}/discussions/{discussion}"
            f"/reactions/{reaction_id}"
        )

    async def list_team_discussion_comment_reactions(
        self,
        org: str,
        team_slug: str,
        discussion: int,
        comment: int,
        opts: ListReactionOptions | None = None,
    ) -> Page[Reaction]:
        """List reactions to a team discussion comment."""
        return await self._list_reactions(
            f"orgs/{escape(org)}/teams/{escape(team_slug)}/discussions/{discussion}"
            f"/comments/{comment}/reactions",
            opts,
        )

    async def create_team_discussion_comment_reaction(
        self, org: str, team_slug: str, discussion: int, comment: int, content: str
    ) -> Reaction:
        """React to a team discussion comment."""
        return await self._create_reaction(
            f"orgs/{escape(org)}/teams/{escape(team_slug)}/discussions/{discussion}"
            f"/comments/{comment}/reactions",
            content,
        )

    async def delete_team_discussion_comment_reaction(
        self, org: str, team_slug: str, discussion: int, comment: int, reaction_id: int
    ) -> Response:
        """Delete a reaction to a team discussion comment."""
        return await self._delete(
            f"orgs/{escape(org)}/teams/{escape(team_slug)}/discussions/{discussion}"
            f"/comments/{comment}/reactions/{reaction_id}"
        )

    async def delete_team_discussion_comment_reaction_by_org_id_and_team_id(
        self, org_id: int, team_id: int, discussion: int, comment: int, reaction_id: int
    ) -> Response:
        """Delete a reaction to a team discussion comment, addressing the team by ids."""
        return await self._delete(
            f"organizations/{org_id}/team/{team_id}/discussions/{discussion}"
            f"/comments/{comment}/reactions/{reaction_id}"
        )

    # ------------------------------------------------------------------
    # Releases
    # ------------------------------------------------------------------

    async def list_release_reactions(
        self, owner: str, repo: str, release_id: int, opts: ListReactionOptions | None = None
    ) -> Page[Reaction]:
        """List reactions to a release."""
        return await self._list_reactions(
            f"repos/{escape(owner)}/{escape(repo)}/releases/{release_id}/reactions", opts
        )

    async def create_release_reaction(
        self, owner: str, repo: str, release_id: int, content: str
    ) -> Reaction:
        """React to a release; ``-1`` and ``confused`` are not accepted."""
        if content in ("-1", "confused"):
            raise ValueError(f"reaction {content!r} is not allowed on releases")
        return await self._create_reaction(
            f"repos/{escape(owner)}/{escape(repo)}/releases/{release_id}/reactions", content
        )

    async def delete_release_reaction(
        self, owner: str, repo: str, release_id: int, reaction_id: int
    ) -> Response:
        """Delete a reaction to a release."""
        return await self._delete(
            f"repos/{escape(owner)}/{escape(repo)}/releases/{release_id}/reactions/{reaction_id}"
        )
