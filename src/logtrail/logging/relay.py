"""
Relay for log entries collected outside the process.

Browser clients batch their records the same way ``BatchingNetworkSink`` does
and hand the raw ``[ns-timestamp, line]`` pairs to the server, which forwards
them so the aggregator is never exposed publicly. Hosting the endpoint is up
to the web framework; this module only validates and forwards.
"""

from __future__ import annotations

from typing import Any, Optional

from .delivery import HttpDelivery
from .exceptions import InvalidLogBatch
from .formatters import orjson_bytes
from .sinks.batching import build_push_payload, push_endpoint


def validate_entries(entries: Any) -> list[tuple[str, str]]:
    """Check that ``entries`` is a non-empty list of ``[timestamp, line]`` string pairs."""
    if not isinstance(entries, list) or not entries:
        raise InvalidLogBatch(details={"reason": "expected a non-empty list"})
    validated = []
    for index, entry in enumerate(entries):
        if (
            not isinstance(entry, (list, tuple))
            or len(entry) != 2
            or not all(isinstance(part, str) for part in entry)
            or not entry[0].isdigit()
        ):
            raise InvalidLogBatch(details={"reason": "malformed entry", "index": index})
        validated.append((entry[0], entry[1]))
    return validated


class LogRelay:
    """Forwards externally collected entries as one ``source=browser`` stream.

    Args:
        url: Loki base URL; ``None`` turns the relay into an accepting no-op
        api_key: Sent as ``X-API-Key`` when set
        service: Value of the ``job`` and ``service`` labels
        environment: Value of the ``environment`` label
        delivery: HTTP delivery to use (one is created when omitted)
    """

    def __init__(
        self,
        url: Optional[str],
        *,
        api_key: Optional[str] = None,
        service: str = "logtrail",
        environment: str = "production",
        delivery: Optional[HttpDelivery] = None,
    ) -> None:
        self._endpoint = push_endpoint(url) if url else None
        self._headers = {"X-API-Key": api_key} if api_key else {}
        self._stream = {
            "job": service,
            "service": service,
            "environment": environment,
            "source": "browser",
        }
        self._delivery = delivery if delivery is not None or not url else HttpDelivery("relay")

    def relay(self, entries: Any) -> bool:
        """Validate and forward ``entries``.

        Returns whether the aggregator accepted them. An unconfigured
        aggregator or a failed push returns ``False`` rather than raising, so
        callers can acknowledge the client either way.

        Raises:
            InvalidLogBatch: if ``entries`` is empty or malformed
        """
        values = validate_entries(entries)
        if self._endpoint is None or self._delivery is None:
            return False
        body = orjson_bytes(build_push_payload(values, self._stream))
        return self._delivery.post(self._endpoint, body, self._headers)

    def close(self) -> None:
        if self._delivery is not None:
            self._delivery.close()
