"""Client settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://api.github.com/"
DEFAULT_API_VERSION = "2022-11-28"


class Settings(BaseSettings):
    """ghrest settings.

    All fields can be overridden via environment variables
    with the ``GHREST_`` prefix (e.g. ``GHREST_TOKEN=ghp_...``).
    """

    base_url: str = DEFAULT_BASE_URL
    token: str | None = None
    user_agent: str | None = None
    api_version: str = DEFAULT_API_VERSION
    timeout: float = 30.0
    sleep_on_rate_limit: bool = False

    # Webhook receiver
    webhook_secret: str | None = None
    host: str = "127.0.0.1"
    port: int = 8000

    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="GHREST_")
