"""Application configuration settings."""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./marketplace.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    app_timezone: str = Field(
        default="UTC",
        description="Timezone used to compute listing expiry dates and timestamps",
    )
    log_level: str = Field(default="INFO", description="Root log level")
    event_dispatch_concurrent: bool = Field(
        default=False,
        description="Run the handlers interested in an event concurrently instead of one by one",
    )
    event_handler_timeout_seconds: float | None = Field(
        default=30.0,
        description="Maximum time a single handler may take; unset to disable",
        gt=0,
    )
    job_worker_enabled: bool = Field(
        default=True,
        description="Start the deferred event worker together with the API process",
    )
    job_process_every_seconds: float = Field(
        default=3600.0,
        description="Interval between two polls of the deferred job queue",
        gt=0,
    )
    job_max_concurrency: int = Field(
        default=20,
        description="Maximum number of deferred jobs executed at the same time",
        gt=0,
    )
    job_lock_lifetime_seconds: float = Field(
        default=600.0,
        description="Age after which a running job is considered abandoned and redelivered",
        gt=0,
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


def configure_logging(level: str | int | None = None) -> None:
    """Configure the root logger with the application format."""

    if level is None:
        level = get_settings().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)


__all__ = ["Settings", "configure_logging", "get_settings", "reset_settings_cache"]
