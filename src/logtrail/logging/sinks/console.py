from __future__ import annotations

import sys
from typing import Any, Literal

from ..formatters import ConsoleFormatter, orjson_dumps, record_to_dict
from ..records import HIGH_SEVERITY, LogRecord
from .base import BaseSink

LogFormat = Literal["console", "json"]


class ConsoleSink(BaseSink):
    """Synchronous sink writing to the local standard streams.

    error and fatal records go to ``stderr``, everything else to ``stdout``.

    Args:
        fmt: Output format - "console" (aligned, coloured on a TTY) or "json"
        stdout: Stream for low-severity records (default: sys.stdout)
        stderr: Stream for error/fatal records (default: sys.stderr)
    """

    def __init__(self, fmt: LogFormat = "console", stdout: Any = None, stderr: Any = None):
        self._fmt = fmt
        self._stdout = stdout
        self._stderr = stderr

    def _stream_for(self, record: LogRecord) -> Any:
        # Resolved per call so stream redirection (pytest capsys) is honoured
        if record.level in HIGH_SEVERITY:
            return self._stderr or sys.stderr
        return self._stdout or sys.stdout

    def write(self, record: LogRecord) -> None:
        stream = self._stream_for(record)
        if self._fmt == "json":
            data = record_to_dict(record)
            data["timestamp"] = record.isoformat()
            output = orjson_dumps(data)
        else:
            use_color = bool(getattr(stream, "isatty", lambda: False)())
            output = ConsoleFormatter.format(record, use_color=use_color)

        stream.write(output + "\n")
        stream.flush()
