"""
Logger handles.

A Logger is a thin facade bound to one category. It builds LogRecords and
hands them to a registry; it holds no delivery state of its own, so handles
are cheap and may be created at import time, before logging is configured.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from .records import LogLevel, LogRecord
from .registry import LoggerRegistry, get_process_registry


class Logger:
    """Per-category logging facade.

    Args:
        category: Category path, root to leaf (e.g. ``("app", "auth")``)
        registry: Registry to dispatch to; the process registry is resolved
            at emit time when omitted
        properties: Properties attached to every record from this handle
    """

    def __init__(
        self,
        category: Iterable[str],
        *,
        registry: Optional[LoggerRegistry] = None,
        properties: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._category = (category,) if isinstance(category, str) else tuple(category)
        if not self._category:
            raise ValueError("Logger category must not be empty")
        self._registry = registry
        self._properties = MappingProxyType(dict(properties or {}))

    def __repr__(self) -> str:
        return f"Logger({'.'.join(self._category)!r})"

    @property
    def category(self) -> tuple[str, ...]:
        return self._category

    @property
    def properties(self) -> Mapping[str, Any]:
        return self._properties

    def get_child(self, *subcategory: str) -> "Logger":
        return Logger(self._category + subcategory, registry=self._registry, properties=self._properties)

    def bind(self, **properties: Any) -> "Logger":
        """Return a handle whose records always carry ``properties``."""
        return Logger(self._category, registry=self._registry, properties={**self._properties, **properties})

    def emit(
        self,
        level: LogLevel | str,
        message: Iterable[Any] = (),
        properties: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Build a record and dispatch it. Never raises."""
        try:
            registry = self._registry or get_process_registry()
            if registry is None:
                return
            if isinstance(message, str):
                message = (message,)
            merged = {**self._properties, **(properties or {})} if self._properties else properties
            record = LogRecord(
                category=self._category,
                level=LogLevel.parse(level),
                message=tuple(message),
                properties=merged or {},
            )
            registry.dispatch(record)
        except Exception:
            pass

    def debug(self, *message: Any, **properties: Any) -> None:
        self.emit(LogLevel.DEBUG, message, properties)

    def info(self, *message: Any, **properties: Any) -> None:
        self.emit(LogLevel.INFO, message, properties)

    def warning(self, *message: Any, **properties: Any) -> None:
        self.emit(LogLevel.WARNING, message, properties)

    warn = warning

    def error(self, *message: Any, **properties: Any) -> None:
        self.emit(LogLevel.ERROR, message, properties)

    def fatal(self, *message: Any, **properties: Any) -> None:
        self.emit(LogLevel.FATAL, message, properties)


def get_logger(*category: str, registry: Optional[LoggerRegistry] = None) -> Logger:
    """Get a Logger for ``category``.

    Accepts either separate parts (``get_logger("app", "auth")``) or a single
    dotted name (``get_logger("app.auth")``).
    """
    if len(category) == 1 and "." in category[0]:
        category = tuple(category[0].split("."))
    return Logger(category, registry=registry)


# Pre-built handles for the application's main subsystems. Each maps to a
# child of ("app",) so a sink routed at ("app",) receives all of them.
auth_logger = get_logger("app", "auth")
api_logger = get_logger("app", "api")
store_logger = get_logger("app", "store")
license_logger = get_logger("app", "license")
infra_logger = get_logger("app", "infra")
