"""Users API: https://docs.github.com/en/rest/users"""

from __future__ import annotations

from ..models import RequestBody, User
from ..pagination import Page, QueryOptions
from .base import Service, escape


class UserUpdate(RequestBody):
    """Editable profile fields of the authenticated user."""

    name: str | None = None
    email: str | None = None
    blog: str | None = None
    twitter_username: str | None = None
    company: str | None = None
    location: str | None = None
    hireable: bool | None = None
    bio: str | None = None


class UserListOptions(QueryOptions):
    """``since`` is the ID of the last user seen; ``per_page`` caps the page."""

    since: int | None = None
    per_page: int | None = None


class UsersService(Service):
    async def get(self, user: str = "") -> User:
        """Fetch a user; with an empty login, the authenticated user."""
        url = f"users/{escape(user)}" if user else "user"
        return await self._get(url, User)

    async def get_by_id(self, user_id: int) -> User:
        """Fetch a user by numeric id."""
        return await self._get(f"user/{user_id}", User)

    async def edit(self, update: UserUpdate) -> User:
        """Update the authenticated user's profile."""
        return await self._send("PATCH", "user", User, update)

    async def list_all(self, opts: UserListOptions | None = None) -> Page[User]:
        """List all users in sign-up order; paginate with ``since``."""
        return await self._list("users", User, opts)
