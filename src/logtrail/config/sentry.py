"""
Error Tracker Configuration.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REDACTED_ENV_VARS = (
    "GITHUB_PRIVATE_KEY",
    "KEYGEN_API_TOKEN",
    "MEDUSA_PUBLISHABLE_KEY",
    "LOKI_API_KEY",
    "RESEND_API_KEY",
    "DISCORD_WEBHOOK_URL",
)


class SentrySettings(BaseSettings):
    """
    Sentry settings.
    Prefix: SENTRY_
    """

    model_config = SettingsConfigDict(
        env_prefix="SENTRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    dsn: Optional[str] = Field(default=None, description="Project DSN; the sink is skipped when unset")
    traces_sample_rate: Optional[float] = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Defaults to 0.1 in production and 1.0 elsewhere",
    )
    redacted_env_vars: tuple[str, ...] = Field(
        default=DEFAULT_REDACTED_ENV_VARS,
        description="Environment variable names stripped from captured runtime context",
    )

    @property
    def enabled(self) -> bool:
        return bool(self.dsn)
