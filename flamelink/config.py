"""Configuration settings for Flamelink clients."""
from typing import List, Optional

from pydantic_settings import BaseSettings

DEFAULT_ENV = "production"
DEFAULT_LOCALE = "en-US"


class Settings(BaseSettings):
    """Client settings loaded from FLAMELINK_* environment variables."""

    # Content context
    env: str = DEFAULT_ENV
    locale: str = DEFAULT_LOCALE

    # Allow-lists; empty means use /settings/locales and /settings/environments
    locales: List[str] = []
    environments: List[str] = []

    # Firebase
    database_url: str = ""
    credentials: str = ""  # service account JSON or path, empty = application default
    app_name: str = "flamelink"

    # Store round trips
    circuit_threshold: int = 3
    circuit_cooldown: int = 30
    request_timeout: Optional[float] = 30.0

    # Applied with structlog when a client is created; disable to keep the
    # host application's logging configuration
    log_level: str = "INFO"
    configure_logging: bool = True

    class Config:
        env_prefix = "FLAMELINK_"
        env_file = ".env"
        extra = "ignore"


def get_settings(**overrides) -> Settings:
    """Get settings, with explicit keyword overrides taking precedence."""
    return Settings(**overrides)
