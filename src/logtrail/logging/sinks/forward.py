from __future__ import annotations

from typing import Any

import sentry_sdk

from ..formatters import render_message
from ..records import HIGH_SEVERITY, LogLevel, LogRecord
from .base import BaseSink

SENTRY_LEVELS = {
    LogLevel.ERROR: "error",
    LogLevel.FATAL: "fatal",
}


class FilteringForwardSink(BaseSink):
    """
    Forwards error and fatal records to Sentry with full context.

    A record carrying an exception under ``properties["error"]`` becomes an
    exception event; any other record becomes a message event. The SDK owns
    transport and queueing, so ``write`` never blocks on the network.

    Args:
        client: Object exposing ``capture_exception`` / ``capture_message``
            (defaults to the ``sentry_sdk`` module)
    """

    def __init__(self, client: Any = sentry_sdk):
        self._client = client

    def write(self, record: LogRecord) -> None:
        if record.level not in HIGH_SEVERITY:
            return

        category = record.category_name
        extras: dict[str, Any] = {
            "category": category,
            "level": record.level.value,
            "timestamp": record.isoformat(),
        }
        for key, value in record.properties.items():
            if key != "error":
                extras[key] = value

        scope_kwargs = {
            "level": SENTRY_LEVELS[record.level],
            "extras": extras,
            "tags": {"category": category},
        }

        error = record.error
        if error is not None:
            self._client.capture_exception(error, **scope_kwargs)
        else:
            self._client.capture_message(render_message(record.message), **scope_kwargs)

    def flush(self) -> None:
        flush = getattr(self._client, "flush", None)
        if callable(flush):
            flush(timeout=2.0)
