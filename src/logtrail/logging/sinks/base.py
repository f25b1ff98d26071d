"""
Log sink abstraction.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..records import LogRecord


class BaseSink(ABC):
    """Abstract base class for log sinks.

    ``write`` is called inline on the emitting thread. Implementations decide
    whether delivery happens immediately, later, or not at all.
    """

    @abstractmethod
    def write(self, record: LogRecord) -> None:
        """Accept one record."""
        ...

    def flush(self) -> None:
        """Push out anything buffered. No-op for unbuffered sinks."""

    def close(self) -> None:
        """Release resources. Called once at shutdown."""
