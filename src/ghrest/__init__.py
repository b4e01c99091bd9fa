__version__ = "0.1.0"

import argparse
import asyncio
import functools
import logging
import os
import sys

from .client import GitHubClient
from .config import Settings
from .errors import (
    AbuseRateLimitError,
    AcceptedError,
    ErrorResponse,
    GitHubError,
    RateLimitError,
    RedirectionError,
    TwoFactorAuthError,
)
from .pagination import ListCursorOptions, ListOptions, Page, collect, scan
from .response import Response

__all__ = [
    "AbuseRateLimitError",
    "AcceptedError",
    "ErrorResponse",
    "GitHubClient",
    "GitHubError",
    "ListCursorOptions",
    "ListOptions",
    "Page",
    "RateLimitError",
    "RedirectionError",
    "Response",
    "Settings",
    "TwoFactorAuthError",
    "collect",
    "main",
    "scan",
]


# ---------------------------------------------------------------------------
# Command line
# ---------------------------------------------------------------------------


async def _rate_limit(gh: GitHubClient, args: argparse.Namespace) -> None:
    limits = await gh.rate_limit.get()
    for category, rate in limits.by_category().items():
        reset = rate.reset.isoformat() if rate.reset else "-"
        print(f"{category.value:<28} {rate.remaining:>6}/{rate.limit:<6} reset {reset}")


async def _user(gh: GitHubClient, args: argparse.Namespace) -> None:
    user = await gh.users.get(args.login or "")
    print(f"{user.login} ({user.name or '-'}) id={user.id}")
    for field in ("company", "location", "blog", "html_url"):
        value = getattr(user, field)
        if value:
            print(f"  {field}: {value}")


async def _repos(gh: GitHubClient, args: argparse.Namespace) -> None:
    list_repos = gh.repositories.list_by_org if args.org else gh.repositories.list_by_user
    fetch = functools.partial(list_repos, args.owner)
    async for repo in scan(fetch, ListOptions(per_page=args.per_page)):
        print(f"{repo.full_name}\t{repo.stargazers_count or 0}\t{repo.description or ''}")


async def _comments(gh: GitHubClient, args: argparse.Namespace) -> None:
    comments = await collect(
        lambda opts: gh.issues.list_comments(args.owner, args.repo, args.number, opts)
    )
    for comment in comments:
        author = comment.user.login if comment.user else "ghost"
        print(f"--- {author} at {comment.created_at}")
        print(comment.body or "")


_COMMANDS = {
    "rate-limit": _rate_limit,
    "user": _user,
    "repos": _repos,
    "comments": _comments,
}


async def _run(args: argparse.Namespace, settings: Settings) -> None:
    async with GitHubClient.from_settings(settings) as gh:
        await _COMMANDS[args.command](gh, args)


def main() -> None:
    parser = argparse.ArgumentParser(prog="ghrest", description="GitHub REST API client")
    parser.add_argument("--token", default=None, help="API token (default: $GHREST_TOKEN).")
    parser.add_argument(
        "--base-url", default=None, help="API base URL, with a trailing slash."
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO).")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("rate-limit", help="Show the current rate limits.")

    user = sub.add_parser("user", help="Show a user (the authenticated user by default).")
    user.add_argument("login", nargs="?", default="")

    repos = sub.add_parser("repos", help="List every repository of a user or organization.")
    repos.add_argument("owner")
    repos.add_argument("--org", action="store_true", help="OWNER is an organization.")
    repos.add_argument("--per-page", type=int, default=100)

    comments = sub.add_parser("comments", help="Print all comments on an issue.")
    comments.add_argument("owner")
    comments.add_argument("repo")
    comments.add_argument("number", type=int)

    serve = sub.add_parser("serve", help="Run the webhook receiver.")
    serve.add_argument("--host", type=str, default=None, help="Override listen address.")
    serve.add_argument("--port", type=int, default=None, help="Override listen port.")

    args = parser.parse_args()

    # Set environment variables so Settings picks them up
    if args.token:
        os.environ["GHREST_TOKEN"] = args.token
    if args.base_url:
        os.environ["GHREST_BASE_URL"] = args.base_url
    if args.log_level:
        os.environ["GHREST_LOG_LEVEL"] = args.log_level

    settings = Settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        import uvicorn

        uvicorn.run(
            "ghrest.server:app",
            host=args.host or settings.host,
            port=args.port or settings.port,
            log_level=settings.log_level.lower(),
        )
        return

    try:
        asyncio.run(_run(args, settings))
    except GitHubError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)
