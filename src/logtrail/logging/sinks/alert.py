"""
Rate-limited alerting sink for Discord-style chat webhooks.

Only error and fatal records are posted. Repeats from the same category are
suppressed for ``rate_limit_ms`` so one recurring failure cannot flood the
channel, while a failure in another category is never held back.
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import Executor
from typing import Any, Callable

import httpx

from ..delivery import DEFAULT_TIMEOUT, HttpDelivery
from ..formatters import orjson_bytes, render_message, safe_stringify
from ..records import HIGH_SEVERITY, LogLevel, LogRecord
from .base import BaseSink

DESCRIPTION_LIMIT = 2000
FIELD_VALUE_LIMIT = 1024
MAX_FIELDS = 5

COLORS = {
    LogLevel.ERROR: 15158332,  # red
    LogLevel.FATAL: 10038562,  # dark red
}


def wall_clock_ms() -> float:
    return time.time() * 1000


def build_alert_payload(record: LogRecord, username: str) -> dict[str, Any]:
    """Build the webhook body for a single record."""
    category = record.category_name
    embed = {
        "title": f"{record.level.value.upper()}: {category}",
        "description": render_message(record.message)[:DESCRIPTION_LIMIT],
        "color": COLORS.get(record.level, COLORS[LogLevel.ERROR]),
        "timestamp": record.isoformat(),
        "fields": [
            {"name": name, "value": safe_stringify(value)[:FIELD_VALUE_LIMIT], "inline": True}
            for name, value in list(record.properties.items())[:MAX_FIELDS]
        ],
    }
    return {"username": username, "embeds": [embed]}


class RateLimitedAlertSink(BaseSink):
    """Posts high-severity records to a chat webhook with a per-category cooldown.

    Args:
        webhook_url: Webhook endpoint
        username: Display name for the posted message
        rate_limit_ms: Cooldown per category
        clock: Millisecond clock, injectable for tests
    """

    def __init__(
        self,
        webhook_url: str,
        *,
        username: str = "logtrail",
        rate_limit_ms: int = 30_000,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
        executor: Executor | None = None,
        clock: Callable[[], float] = wall_clock_ms,
    ) -> None:
        if rate_limit_ms < 0:
            raise ValueError("rate_limit_ms must not be negative")
        self._webhook_url = webhook_url
        self._username = username
        self._rate_limit_ms = rate_limit_ms
        self._clock = clock
        self._delivery = HttpDelivery("discord", timeout=timeout, transport=transport, executor=executor)
        self._lock = threading.Lock()
        self._last_sent: dict[str, float] = {}

    def _acquire_slot(self, category: str) -> bool:
        """Check-and-set the cooldown for ``category``."""
        with self._lock:
            now = self._clock()
            last = self._last_sent.get(category)
            if last is not None and now - last < self._rate_limit_ms:
                return False
            self._last_sent[category] = now
            return True

    def write(self, record: LogRecord) -> None:
        if record.level not in HIGH_SEVERITY:
            return
        if not self._acquire_slot(record.category_name):
            return

        body = orjson_bytes(build_alert_payload(record, self._username))
        self._delivery.submit(self._webhook_url, body)

    def close(self) -> None:
        self._delivery.close(wait=True)
