"""
Batching sink for the Loki push API.

Records are serialized on the emitting thread, buffered, and pushed as one
stream either when the batch is full or when the flush interval elapses,
whichever comes first. Delivery is best-effort: a failed push is dropped and
never retried.
"""

from __future__ import annotations

import threading
from concurrent.futures import Executor
from functools import partial
from typing import Any, Callable, Mapping, Protocol

import httpx

from ..delivery import DEFAULT_TIMEOUT, HttpDelivery
from ..formatters import orjson_bytes, orjson_dumps, record_to_dict
from ..records import LogRecord
from .base import BaseSink

LokiEntry = tuple[str, str]
PUSH_PATH = "/loki/api/v1/push"


class TimerHandle(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


def daemon_timer(interval: float, function: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(interval, function)
    timer.daemon = True
    return timer


def push_endpoint(url: str) -> str:
    return url.rstrip("/") + PUSH_PATH


def build_push_payload(values: list[Any], stream: Mapping[str, str]) -> dict[str, Any]:
    return {"streams": [{"stream": dict(stream), "values": [list(v) for v in values]}]}


def to_entry(record: LogRecord) -> LokiEntry:
    """Serialize a record into a ``(ns-timestamp, line)`` pair."""
    return str(record.timestamp_ns), orjson_dumps(record_to_dict(record))


class BatchingNetworkSink(BaseSink):
    """Buffers records and pushes them to a Loki-compatible endpoint.

    State per instance is the pending batch plus at most one pending flush
    timer. Both are only touched under ``_lock``. A full batch is swapped out
    and queued on the single delivery worker while the lock is held, so pushes
    leave in the order batches were taken and a record written while a push
    is in flight always lands in the next batch.
    """

    def __init__(
        self,
        url: str,
        *,
        api_key: str | None = None,
        labels: Mapping[str, str] | None = None,
        job: str = "logtrail",
        batch_size: int = 100,
        flush_interval_ms: int = 5000,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
        executor: Executor | None = None,
        timer_factory: TimerFactory = daemon_timer,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if flush_interval_ms <= 0:
            raise ValueError("flush_interval_ms must be positive")

        self._endpoint = push_endpoint(url)
        self._headers = {"X-API-Key": api_key} if api_key else {}
        self._stream = {"job": job, **(labels or {})}
        self._batch_size = batch_size
        self._flush_interval = flush_interval_ms / 1000
        self._timer_factory = timer_factory
        self._delivery = HttpDelivery("loki", timeout=timeout, transport=transport, executor=executor)

        self._lock = threading.Lock()
        self._batch: list[LokiEntry] = []
        self._flush_timer: TimerHandle | None = None
        self._timer_generation = 0

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._batch)

    @property
    def timer_pending(self) -> bool:
        with self._lock:
            return self._flush_timer is not None

    def write(self, record: LogRecord) -> None:
        entry = to_entry(record)
        with self._lock:
            self._batch.append(entry)
            if len(self._batch) >= self._batch_size:
                self._send_locked(self._take_batch_locked())
            elif self._flush_timer is None:
                self._timer_generation += 1
                timer = self._timer_factory(
                    self._flush_interval, partial(self._on_timer, self._timer_generation)
                )
                self._flush_timer = timer
                timer.start()

    def flush(self) -> None:
        with self._lock:
            self._send_locked(self._take_batch_locked())

    def close(self) -> None:
        self.flush()
        self._delivery.close(wait=True)

    def _take_batch_locked(self) -> list[LokiEntry]:
        # Invalidate the pending timer together with the batch it was guarding
        if self._flush_timer is not None:
            self._flush_timer.cancel()
            self._flush_timer = None
            self._timer_generation += 1
        entries, self._batch = self._batch, []
        return entries

    def _on_timer(self, generation: int) -> None:
        with self._lock:
            if self._flush_timer is None or generation != self._timer_generation:
                return
            self._flush_timer = None
            entries, self._batch = self._batch, []
            self._send_locked(entries)

    def _send_locked(self, entries: list[LokiEntry]) -> None:
        if not entries:
            return
        body = orjson_bytes(build_push_payload(entries, self._stream))
        self._delivery.submit(self._endpoint, body, self._headers)
