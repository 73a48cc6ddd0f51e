"""
fanlog Configuration Module.

Each sub-module represents an independent concern with its own environment
variable prefix:

    FANLOG_LOG_*     service name, levels, file and console sinks
    FANLOG_NOTIFY_*  webhook and messaging-bot sinks

Multi-Environment Support:
    Set `FANLOG_ENV` to pick extra .env files, loaded in this order
    (later overrides earlier):
    1. .env
    2. .env.local
    3. .env.{environment}
    4. .env.{environment}.local

Usage:
    from fanlog.config import Settings

    settings = Settings()
    settings.logging.service_name
    settings.notifications.webhook_enabled
"""

from functools import cached_property
import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging import ColorMode, LogFormat, LoggingSettings, LogLevel
from .notifications import NotificationSettings


def _get_env_files() -> tuple[str, ...]:
    """Determine which .env files to load based on FANLOG_ENV."""
    env = os.getenv("FANLOG_ENV", "development")
    return (
        ".env",
        ".env.local",
        f".env.{env}",
        f".env.{env}.local",
    )


class Settings(BaseSettings):
    """
    Composite settings aggregating the logging and notification domains.

    Each sub-settings object is loaded lazily from its own environment prefix.
    """

    model_config = SettingsConfigDict(
        env_file=_get_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @cached_property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()

    @cached_property
    def notifications(self) -> NotificationSettings:
        return NotificationSettings()


__all__ = [
    "ColorMode",
    "LogFormat",
    "LogLevel",
    "LoggingSettings",
    "NotificationSettings",
    "Settings",
]
