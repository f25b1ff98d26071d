"""
Logging Configuration.
"""

from enum import Enum
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.severity < other.severity

    def __le__(self, other: object) -> bool:
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.severity <= other.severity

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.severity > other.severity

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.severity >= other.severity

    @classmethod
    def parse(cls, value: "LogLevel | str") -> "LogLevel":
        """Parse a level name, accepting stdlib-style aliases (warn, critical)."""
        if isinstance(value, LogLevel):
            return value
        name = str(value).strip().lower()
        name = _ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown log level: {value!r}") from None


_SEVERITY = {
    LogLevel.DEBUG: 10,
    LogLevel.INFO: 20,
    LogLevel.WARNING: 30,
    LogLevel.ERROR: 40,
    LogLevel.FATAL: 50,
}

_ALIASES = {
    "warn": "warning",
    "critical": "fatal",
    "exception": "error",
}


class LogFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


class LoggingSettings(BaseSettings):
    """Routing and console configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    level: Optional[LogLevel] = Field(
        default=None,
        description="Lowest routed level; defaults to debug outside production and info in production",
    )
    root_category: str = Field(default="app", description="Dotted category the sinks are routed at")
    console_enabled: bool = Field(default=True, description="Register the console sink")
    console_format: LogFormat = Field(default=LogFormat.CONSOLE, description="Console output format")
    intercept_stdlib: bool = Field(default=False, description="Bridge stdlib logging into the pipeline")
    exception_hooks: bool = Field(default=True, description="Log uncaught exceptions before the default hook runs")

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, value):
        if value is None or value == "":
            return None
        return LogLevel.parse(value)
