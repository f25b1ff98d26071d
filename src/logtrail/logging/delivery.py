"""
Best-effort HTTP delivery for network sinks.

Requests run on a detached worker so the emitting thread never waits on the
network. Every failure path (connection error, timeout, non-2xx status) ends
in a silent drop: the pipeline must never log its own delivery problems.
"""

from __future__ import annotations

from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Mapping

import httpx

JSON_HEADERS = {"Content-Type": "application/json"}
DEFAULT_TIMEOUT = 5.0


class HttpDelivery:
    """POSTs pre-serialized JSON bodies, synchronously or on a background worker.

    A single worker per sink keeps that sink's requests in submission order.

    Args:
        name: Suffix for the worker thread name
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (tests use ``httpx.MockTransport``)
        executor: Optional executor; one single-thread pool is created otherwise
    """

    def __init__(
        self,
        name: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
        executor: Executor | None = None,
    ) -> None:
        self._client = httpx.Client(timeout=timeout, transport=transport)
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"logtrail-{name}")
        self._closed = False

    def post(self, url: str, body: bytes, headers: Mapping[str, str] | None = None) -> bool:
        """Send one request and report whether it was accepted (2xx)."""
        try:
            response = self._client.post(url, content=body, headers={**JSON_HEADERS, **(headers or {})})
        except httpx.HTTPError:
            return False
        return response.is_success

    def _post_detached(self, url: str, body: bytes, headers: Mapping[str, str] | None) -> None:
        try:
            self.post(url, body, headers)
        except Exception:
            # Terminal no-op: a detached delivery has nobody to report to
            pass

    def submit(self, url: str, body: bytes, headers: Mapping[str, str] | None = None) -> None:
        """Queue a request without waiting for it."""
        if self._closed:
            return
        try:
            self._executor.submit(self._post_detached, url, body, headers)
        except RuntimeError:
            # Executor already shut down (interpreter exit)
            pass

    def close(self, *, wait: bool = True) -> None:
        if self._closed:
            return
        self._closed = True
        if self._owns_executor:
            self._executor.shutdown(wait=wait)
        self._client.close()
