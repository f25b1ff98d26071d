"""
Exception hierarchy for the logging pipeline.

Only startup problems surface as exceptions. Delivery failures are handled
inside each sink and never reach application code.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class LogtrailError(Exception):
    """Root of all logtrail exceptions."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ConfigurationError(LogtrailError):
    """Raised when the registry cannot be configured.

    Covers unknown sink names in routing entries and overlapping
    ``configure()`` calls.
    """

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="LOGGING_CONFIGURATION_ERROR", details=details)


class InvalidLogBatch(LogtrailError):
    """Raised by the relay when an incoming entry list is malformed."""

    def __init__(self, message: str = "Invalid log format", *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="INVALID_LOG_BATCH", details=details)
