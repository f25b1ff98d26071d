"""
Bridges from other logging front-ends into the registry.

- structlog: a processor chain ending in a renderer that dispatches records
- stdlib ``logging``: a handler that converts ``logging.LogRecord``
- uncaught exceptions: ``sys.excepthook`` / ``threading.excepthook`` wrappers
"""

from __future__ import annotations

import logging
import sys
import threading
from typing import Any, Optional

import structlog
from structlog.typing import EventDict, WrappedLogger

from .logger import Logger
from .records import LogLevel, LogRecord
from .registry import LoggerRegistry, get_process_registry

# Transports used by the sinks themselves. Their records are never routed back
# into the pipeline, otherwise every push would log a push.
EXCLUDED_LOGGER_PREFIXES = ("httpx", "httpcore", "sentry_sdk", "urllib3", "logtrail", "structlog")

_STRUCTLOG_LEVELS = {
    "debug": LogLevel.DEBUG,
    "info": LogLevel.INFO,
    "warning": LogLevel.WARNING,
    "warn": LogLevel.WARNING,
    "error": LogLevel.ERROR,
    "exception": LogLevel.ERROR,
    "critical": LogLevel.FATAL,
    "fatal": LogLevel.FATAL,
}


def level_from_stdlib(levelno: int) -> LogLevel:
    if levelno >= logging.CRITICAL:
        return LogLevel.FATAL
    if levelno >= logging.ERROR:
        return LogLevel.ERROR
    if levelno >= logging.WARNING:
        return LogLevel.WARNING
    if levelno >= logging.INFO:
        return LogLevel.INFO
    return LogLevel.DEBUG


def _category_from_name(name: Optional[str]) -> tuple[str, ...]:
    parts = tuple(part for part in (name or "").split(".") if part)
    return parts or ("root",)


def _is_excluded(name: str) -> bool:
    return any(name == prefix or name.startswith(prefix + ".") for prefix in EXCLUDED_LOGGER_PREFIXES)


# =============================================================================
# structlog
# =============================================================================


class _NopFile:
    def write(self, s: str) -> None:
        pass

    def flush(self) -> None:
        pass


_NOP_FILE = _NopFile()


class SilentPrintLoggerFactory:
    """Logger factory that returns a logger writing to nowhere."""

    def __call__(self, *args: Any) -> structlog.PrintLogger:
        return structlog.PrintLogger(file=_NOP_FILE)


class RegistryRenderer:
    """Final structlog processor: turn the event dict into a LogRecord and dispatch it.

    The logger name (``get_structlog_logger("app.billing")``) becomes the
    category; ``event`` becomes the message; remaining keys become properties.
    Returns an empty string so the wrapped PrintLogger has nothing to print.
    """

    def __init__(self, registry: Optional[LoggerRegistry] = None):
        self._registry = registry

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        registry = self._registry or get_process_registry()
        if registry is None:
            return ""
        try:
            properties = dict(event_dict)
            name = properties.pop("_name", None) or properties.pop("logger", None)
            level = _STRUCTLOG_LEVELS.get(str(properties.pop("level", method_name)).lower(), LogLevel.INFO)
            event = properties.pop("event", "")

            exc_info = properties.pop("exc_info", None)
            if exc_info is True:
                exc_info = sys.exc_info()[1]
            elif isinstance(exc_info, tuple):
                exc_info = exc_info[1]
            if isinstance(exc_info, BaseException):
                properties.setdefault("error", exc_info)

            registry.dispatch(
                LogRecord(
                    category=_category_from_name(name),
                    level=level,
                    message=(event,),
                    properties=properties,
                )
            )
        except Exception:
            pass  # Fail silently to avoid breaking the application
        return ""


def configure_structlog(registry: Optional[LoggerRegistry] = None) -> None:
    """Route structlog loggers through the registry."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            RegistryRenderer(registry),
        ],
        # Thresholds are applied by registry entries, not here
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
        logger_factory=SilentPrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_structlog_logger(name: str) -> Any:
    """Get a structlog logger whose records are routed to category ``name``."""
    return structlog.get_logger(_name=name)


# =============================================================================
# Standard library logging
# =============================================================================


class RegistryHandler(logging.Handler):
    """
    Redirect standard library logging records into the registry.

    The dotted logger name becomes the category, so ``logging.getLogger("app.db")``
    is routed like ``get_logger("app", "db")``.
    """

    def __init__(self, registry: Optional[LoggerRegistry] = None, level: int = logging.NOTSET):
        super().__init__(level)
        self._registry = registry

    def emit(self, record: logging.LogRecord) -> None:
        if _is_excluded(record.name):
            return
        registry = self._registry or get_process_registry()
        if registry is None:
            return
        try:
            properties: dict[str, Any] = {}
            if record.exc_info and isinstance(record.exc_info[1], BaseException):
                properties["error"] = record.exc_info[1]
            registry.dispatch(
                LogRecord(
                    category=_category_from_name(record.name),
                    level=level_from_stdlib(record.levelno),
                    message=(record.getMessage(),),
                    properties=properties,
                    timestamp=record.created,
                )
            )
        except Exception:
            self.handleError(record)


def intercept_stdlib_logging(registry: Optional[LoggerRegistry] = None, level: int = logging.DEBUG) -> RegistryHandler:
    """Replace root logger handlers with a RegistryHandler."""
    handler = RegistryHandler(registry)
    root_logger = logging.getLogger()
    root_logger.handlers = [h for h in root_logger.handlers if not isinstance(h, RegistryHandler)]
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return handler


# =============================================================================
# Uncaught exceptions
# =============================================================================


def install_exception_hooks(logger: Logger) -> None:
    """Log uncaught exceptions, then chain to the previously installed hooks."""
    previous_excepthook = sys.excepthook
    previous_threading_hook = threading.excepthook

    def excepthook(exc_type, exc_value, exc_traceback):  # type: ignore[no-untyped-def]
        if not issubclass(exc_type, KeyboardInterrupt):
            logger.fatal("Uncaught exception: ", str(exc_value), error=exc_value)
        previous_excepthook(exc_type, exc_value, exc_traceback)

    def threading_excepthook(args: threading.ExceptHookArgs) -> None:
        if args.exc_value is not None:
            thread_name = args.thread.name if args.thread is not None else "unknown"
            logger.error("Uncaught exception in thread ", thread_name, ": ", str(args.exc_value), error=args.exc_value)
        previous_threading_hook(args)

    sys.excepthook = excepthook
    threading.excepthook = threading_excepthook
