from .alert import RateLimitedAlertSink
from .base import BaseSink
from .batching import BatchingNetworkSink
from .console import ConsoleSink
from .forward import FilteringForwardSink

__all__ = [
    "BaseSink",
    "BatchingNetworkSink",
    "ConsoleSink",
    "FilteringForwardSink",
    "RateLimitedAlertSink",
]
