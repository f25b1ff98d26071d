"""
Log record data model.

A LogRecord is the unit that flows from a Logger handle, through the registry,
into every resolved sink. Records are frozen on construction so that sinks can
share them without copying.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Mapping

from logtrail.config.logging import LogLevel

# Levels forwarded by the alerting and error-tracking sinks
HIGH_SEVERITY = frozenset({LogLevel.ERROR, LogLevel.FATAL})


def _freeze_properties(properties: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(properties or {}))


@dataclass(frozen=True)
class LogRecord:
    """
    Leveled, categorized, timestamped message with structured properties.

    Message parts are kept separate so each sink can render them its own way
    (plain text for the console, JSON for the aggregator).
    """

    category: tuple[str, ...]
    level: LogLevel
    message: tuple[Any, ...] = ()
    properties: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        raw = (self.category,) if isinstance(self.category, str) else self.category
        category = tuple(str(part) for part in raw)
        if not category:
            raise ValueError("LogRecord category must not be empty")
        object.__setattr__(self, "category", category)
        object.__setattr__(self, "level", LogLevel.parse(self.level))
        object.__setattr__(self, "message", tuple(self.message))
        if not isinstance(self.properties, MappingProxyType):
            object.__setattr__(self, "properties", _freeze_properties(self.properties))

    @property
    def category_name(self) -> str:
        return ".".join(self.category)

    @property
    def error(self) -> BaseException | None:
        """The exception stored under the reserved ``error`` property, if any."""
        value = self.properties.get("error")
        return value if isinstance(value, BaseException) else None

    @property
    def timestamp_ns(self) -> int:
        # Microsecond resolution is all a float epoch can carry reliably
        return int(round(self.timestamp * 1_000_000)) * 1_000

    def isoformat(self) -> str:
        dt = datetime.fromtimestamp(self.timestamp, tz=timezone.utc)
        return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")
