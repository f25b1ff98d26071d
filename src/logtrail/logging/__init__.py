"""
Structured logging pipeline for Logtrail.

Records are routed by category to multiple sinks:
- console: local stdout/stderr
- loki: batched pushes to a log aggregator
- discord: rate-limited error alerts to a chat webhook
- sentry: error and fatal records forwarded to the error tracker

Design Pattern: Strategy Pattern for sink abstraction.
Library: orjson for serialization, httpx for delivery, structlog interop.
"""

from .bootstrap import build_relay, configure_logging, shutdown_logging
from .exceptions import ConfigurationError, InvalidLogBatch, LogtrailError
from .logger import Logger, get_logger
from .records import LogLevel, LogRecord
from .registry import LoggerRegistry, RegistryEntry
from .relay import LogRelay, validate_entries

__all__ = [
    "ConfigurationError",
    "InvalidLogBatch",
    "LogLevel",
    "LogRecord",
    "LogRelay",
    "Logger",
    "LoggerRegistry",
    "LogtrailError",
    "RegistryEntry",
    "build_relay",
    "configure_logging",
    "get_logger",
    "shutdown_logging",
    "validate_entries",
]
