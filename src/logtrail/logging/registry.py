"""
Category routing for log records.

The registry maps category prefixes to a sink set and a lowest level. A record
is routed by the longest configured prefix of its category: an entry for
``("app", "auth")`` wins over ``("app",)`` for ``("app", "auth", "oauth")``,
and the root entry ``()`` catches whatever nothing else matches.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from .exceptions import ConfigurationError
from .records import LogLevel, LogRecord
from .sinks.base import BaseSink

Category = tuple[str, ...]


@dataclass(frozen=True)
class RegistryEntry:
    """Routing rule for one category prefix."""

    category: Category
    sinks: frozenset[str] = field(default_factory=frozenset)
    lowest_level: LogLevel = LogLevel.DEBUG

    def __post_init__(self) -> None:
        raw = (self.category,) if isinstance(self.category, str) else self.category
        object.__setattr__(self, "category", tuple(raw))
        object.__setattr__(self, "sinks", frozenset(self.sinks))
        object.__setattr__(self, "lowest_level", LogLevel.parse(self.lowest_level))


@dataclass(frozen=True)
class _RoutingTable:
    sinks: Mapping[str, BaseSink]
    entries: Mapping[Category, RegistryEntry]

    def resolve(self, category: Category) -> Optional[RegistryEntry]:
        for depth in range(len(category), -1, -1):
            entry = self.entries.get(category[:depth])
            if entry is not None:
                return entry
        return None


class LoggerRegistry:
    """Process-wide routing state.

    ``configure`` succeeds at most once; later calls are no-ops until
    ``close`` returns the registry to its unconfigured state. The routing
    table is swapped in as a single attribute, so ``dispatch`` never sees a
    half-configured registry.
    """

    def __init__(self) -> None:
        self._configure_lock = threading.Lock()
        self._table: Optional[_RoutingTable] = None

    @property
    def is_configured(self) -> bool:
        return self._table is not None

    @property
    def sinks(self) -> Mapping[str, BaseSink]:
        table = self._table
        return dict(table.sinks) if table is not None else {}

    def configure(self, sinks: Mapping[str, BaseSink], entries: Iterable[RegistryEntry]) -> None:
        """Install sinks and routing entries.

        Raises:
            ConfigurationError: if another ``configure`` call is in progress,
                an entry names an unknown sink, or two entries share a category.
        """
        if not self._configure_lock.acquire(blocking=False):
            raise ConfigurationError("Logging configuration is already in progress")
        try:
            if self._table is not None:
                return

            sink_map = dict(sinks)
            routes: dict[Category, RegistryEntry] = {}
            for entry in entries:
                missing = sorted(entry.sinks - sink_map.keys())
                if missing:
                    raise ConfigurationError(
                        f"Unknown sink(s) {', '.join(missing)} for category {'.'.join(entry.category) or '<root>'}",
                        details={"category": list(entry.category), "missing": missing},
                    )
                if entry.category in routes:
                    raise ConfigurationError(
                        f"Duplicate routing entry for category {'.'.join(entry.category) or '<root>'}",
                        details={"category": list(entry.category)},
                    )
                routes[entry.category] = entry

            self._table = _RoutingTable(sinks=sink_map, entries=routes)
        finally:
            self._configure_lock.release()

    def resolve(self, category: Iterable[str]) -> Optional[RegistryEntry]:
        table = self._table
        if table is None:
            return None
        return table.resolve(tuple(category))

    def dispatch(self, record: LogRecord) -> None:
        """Deliver ``record`` to every sink of its resolved entry."""
        table = self._table
        if table is None:
            return
        entry = table.resolve(record.category)
        if entry is None or record.level < entry.lowest_level:
            return
        for name in entry.sinks:
            try:
                table.sinks[name].write(record)
            except Exception:
                pass  # A failing sink must not affect the caller or other sinks

    def flush(self) -> None:
        table = self._table
        if table is None:
            return
        for sink in table.sinks.values():
            try:
                sink.flush()
            except Exception:
                pass

    def close(self) -> None:
        """Flush and close every sink, then forget the configuration."""
        with self._configure_lock:
            table, self._table = self._table, None
        if table is None:
            return
        for sink in table.sinks.values():
            try:
                sink.flush()
                sink.close()
            except Exception:
                pass


# =============================================================================
# Process Registry
# =============================================================================

_process_registry: Optional[LoggerRegistry] = None


def get_process_registry() -> Optional[LoggerRegistry]:
    """The registry installed by ``configure_logging``, if any."""
    return _process_registry


def set_process_registry(registry: Optional[LoggerRegistry]) -> None:
    global _process_registry
    _process_registry = registry
