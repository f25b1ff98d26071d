"""
Log Aggregator Configuration.

Connection and batching settings for the Loki push sink. The sink is only
registered when `LOKI_URL` is set.
"""

from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class LokiSettings(BaseSettings):
    """
    Loki push settings.
    Prefix: LOKI_
    """

    model_config = SettingsConfigDict(
        env_prefix="LOKI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    url: Optional[str] = Field(default=None, description="Loki base URL (push path is appended)")
    api_key: Optional[SecretStr] = Field(default=None, description="Sent as X-API-Key when set")
    job: str = Field(default="logtrail", description="Value of the job stream label")
    batch_size: int = Field(default=100, ge=1, description="Entries per push")
    flush_interval_ms: int = Field(default=5000, gt=0, description="Maximum age of a pending batch")
    timeout: float = Field(default=5.0, gt=0, description="Request timeout in seconds")

    @property
    def enabled(self) -> bool:
        return bool(self.url)
