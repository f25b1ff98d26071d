"""
Alert Webhook Configuration.
"""

from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DiscordSettings(BaseSettings):
    """
    Discord webhook alert settings.
    Prefix: DISCORD_
    """

    model_config = SettingsConfigDict(
        env_prefix="DISCORD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # The webhook URL embeds its token
    webhook_url: Optional[SecretStr] = Field(default=None, description="Incoming webhook URL")
    username: str = Field(default="logtrail", description="Display name for alert messages")
    rate_limit_ms: int = Field(default=30_000, ge=0, description="Per-category alert cooldown")
    timeout: float = Field(default=5.0, gt=0, description="Request timeout in seconds")

    @property
    def enabled(self) -> bool:
        return self.webhook_url is not None and bool(self.webhook_url.get_secret_value())
