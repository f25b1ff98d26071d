"""
Environment Configuration.

The environment is determined by the `APP_ENV` environment variable and
selects defaults such as the lowest routed log level and the Sentry sample
rate.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


Environment = Literal["development", "testing", "staging", "production"]


class EnvironmentSettings(BaseSettings):
    """
    Environment detection and service identity.

    Prefix: APP_
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    env: Environment = Field(
        default="development",
        description="Current environment (development, testing, staging, production)",
    )
    service_name: str = Field(default="logtrail", description="Service label attached to shipped logs")

    @property
    def is_development(self) -> bool:
        return self.env == "development"

    @property
    def is_production(self) -> bool:
        return self.env == "production"
