"""
Logtrail Configuration Module.

Each sub-module covers one concern with its own environment variable prefix.
Settings are read once, at process start.

Multi-Environment Support:
    Set `APP_ENV` to one of: development, testing, staging, production
    The following .env files are loaded in order (later overrides earlier):
    1. .env
    2. .env.local
    3. .env.{environment}
    4. .env.{environment}.local

Usage:
    from logtrail.config import settings

    settings.environment.is_production  # False
    settings.loki.enabled               # True when LOKI_URL is set
    settings.discord.rate_limit_ms      # 30000
"""

from functools import cached_property
import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from .discord import DiscordSettings
from .environment import EnvironmentSettings
from .logging import LoggingSettings
from .loki import LokiSettings
from .sentry import SentrySettings


def _get_env_files() -> tuple[str, ...]:
    """Determine which .env files to load based on APP_ENV."""
    env = os.getenv("APP_ENV", "development")
    return (
        ".env",
        ".env.local",
        f".env.{env}",
        f".env.{env}.local",
    )


class Settings(BaseSettings):
    """
    Composite settings aggregating the per-backend configuration domains.
    """

    model_config = SettingsConfigDict(
        env_file=_get_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @cached_property
    def environment(self) -> EnvironmentSettings:
        return EnvironmentSettings()

    @cached_property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()

    @cached_property
    def loki(self) -> LokiSettings:
        return LokiSettings()

    @cached_property
    def discord(self) -> DiscordSettings:
        return DiscordSettings()

    @cached_property
    def sentry(self) -> SentrySettings:
        return SentrySettings()

    @property
    def log_level(self) -> str:
        """Effective lowest level for the root routing entry."""
        if self.logging.level is not None:
            return self.logging.level.value
        return "info" if self.environment.is_production else "debug"


# Singleton instance
settings = Settings()

__all__ = [
    "Settings",
    "settings",
    "DiscordSettings",
    "EnvironmentSettings",
    "LoggingSettings",
    "LokiSettings",
    "SentrySettings",
]
