"""Rate limit API: https://docs.github.com/en/rest/rate-limit"""

from __future__ import annotations

from ..rate_limit import RateLimits
from .base import Service


class RateLimitService(Service):
    async def get(self) -> RateLimits:
        """Fetch the current limits for every category.

        Calling this does not count against the primary rate limit, and the
        result refreshes the client's cached limits.
        """
        response = await self._request("GET", "rate_limit")
        limits = RateLimits.model_validate(response.json().get("resources") or {})
        self._client.rate_limits.update(limits.by_category())
        return limits
