"""
Shared fixtures and deterministic stand-ins for timers, executors, clocks
and HTTP transports.
"""

from __future__ import annotations

from concurrent.futures import Executor, Future
from typing import Any, Callable

import httpx
import orjson
import pytest

from logtrail.logging.records import LogLevel, LogRecord
from logtrail.logging.registry import set_process_registry
from logtrail.logging.sinks.base import BaseSink

LOGTRAIL_ENV_VARS = (
    "APP_ENV",
    "APP_SERVICE_NAME",
    "LOG_LEVEL",
    "LOG_ROOT_CATEGORY",
    "LOG_CONSOLE_ENABLED",
    "LOG_CONSOLE_FORMAT",
    "LOG_INTERCEPT_STDLIB",
    "LOG_EXCEPTION_HOOKS",
    "LOKI_URL",
    "LOKI_API_KEY",
    "LOKI_BATCH_SIZE",
    "LOKI_FLUSH_INTERVAL_MS",
    "LOKI_TIMEOUT",
    "DISCORD_WEBHOOK_URL",
    "DISCORD_USERNAME",
    "DISCORD_RATE_LIMIT_MS",
    "SENTRY_DSN",
    "SENTRY_TRACES_SAMPLE_RATE",
)


# ================================
# Fakes
# ================================


class ImmediateExecutor(Executor):
    """Runs submitted work inline so delivery is observable right after ``write``."""

    def __init__(self) -> None:
        self.submitted = 0

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future:
        self.submitted += 1
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as exc:
            future.set_exception(exc)
        return future


class FakeTimer:
    def __init__(self, interval: float, function: Callable[[], None]) -> None:
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        """Simulate the interval elapsing. A cancelled threading.Timer never runs."""
        if not self.cancelled:
            self.function()


class FakeTimerFactory:
    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def __call__(self, interval: float, function: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(interval, function)
        self.timers.append(timer)
        return timer

    @property
    def live(self) -> list[FakeTimer]:
        return [t for t in self.timers if t.started and not t.cancelled]


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start: float = 1_700_000_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class RecordingTransport(httpx.MockTransport):
    """httpx transport that records requests and answers with a fixed status."""

    def __init__(self, status_code: int = 204, error: Exception | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = status_code
        self.error = error
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code)

    def payloads(self) -> list[Any]:
        return [orjson.loads(request.content) for request in self.requests]


class RecordingSink(BaseSink):
    def __init__(self) -> None:
        self.records: list[LogRecord] = []
        self.flushed = 0
        self.closed = False

    def write(self, record: LogRecord) -> None:
        self.records.append(record)

    def flush(self) -> None:
        self.flushed += 1

    def close(self) -> None:
        self.closed = True


def make_record(
    category: tuple[str, ...] = ("app",),
    level: LogLevel = LogLevel.INFO,
    message: tuple[Any, ...] = ("hello",),
    properties: dict[str, Any] | None = None,
    timestamp: float = 1_700_000_000.0,
) -> LogRecord:
    return LogRecord(
        category=category,
        level=level,
        message=message,
        properties=properties or {},
        timestamp=timestamp,
    )


# ================================
# Fixtures
# ================================


@pytest.fixture(autouse=True)
def reset_process_registry():
    """Each test starts without a process registry."""
    set_process_registry(None)
    yield
    set_process_registry(None)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every logtrail variable from the environment."""
    for name in LOGTRAIL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def executor() -> ImmediateExecutor:
    return ImmediateExecutor()


@pytest.fixture
def timers() -> FakeTimerFactory:
    return FakeTimerFactory()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()
