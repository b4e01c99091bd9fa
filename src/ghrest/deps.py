"""FastAPI dependency helpers for the webhook receiver."""

from functools import lru_cache

from fastapi import Depends

from .config import Settings
from .ws import WebSocketManager


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings singleton."""
    return Settings()


def get_webhook_secret(settings: Settings = Depends(get_settings)) -> bytes | None:
    """Secret used to validate delivery signatures, if one is configured."""
    return settings.webhook_secret.encode() if settings.webhook_secret else None


# Deliveries are relayed to every subscriber of the process.
_ws_manager = WebSocketManager()


def get_ws_manager() -> WebSocketManager:
    """Return the shared WebSocket manager."""
    return _ws_manager
