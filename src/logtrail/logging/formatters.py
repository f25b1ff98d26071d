"""
Rendering helpers shared by the sinks.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping

import orjson

from .records import LogRecord

UNSERIALIZABLE = "[unserializable]"


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseException):
        return {"type": type(value).__name__, "message": str(value)}
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    if isinstance(value, Mapping):
        return dict(value)
    dump = getattr(value, "model_dump", None)
    if callable(dump):
        return dump()
    return UNSERIALIZABLE


_OPTIONS = orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC | orjson.OPT_NON_STR_KEYS
_ENCODE_ERRORS = (orjson.JSONEncodeError, TypeError, ValueError)


def _encode(v: Any) -> bytes:
    return orjson.dumps(v, default=_json_default, option=_OPTIONS)


def _sanitize(value: Any, path: frozenset[int] = frozenset()) -> Any:
    """Rebuild ``value`` with every leaf orjson rejects replaced by the placeholder.

    ``path`` holds the ids of the containers above ``value``; meeting one
    again means a reference cycle.
    """
    if isinstance(value, (Mapping, list, tuple, set, frozenset)):
        if id(value) in path:
            return UNSERIALIZABLE
        path = path | {id(value)}
        if isinstance(value, Mapping):
            return {key: _sanitize(item, path) for key, item in value.items()}
        return [_sanitize(item, path) for item in value]
    try:
        _encode(value)
    except _ENCODE_ERRORS:
        return UNSERIALIZABLE
    return value


def orjson_dumps(v: Any) -> str:
    """Compact JSON serialization using orjson.

    Values orjson cannot encode (unknown types, integers wider than 64 bits,
    reference cycles) become ``"[unserializable]"`` one by one, so the rest
    of the document survives.
    """
    try:
        return _encode(v).decode()
    except _ENCODE_ERRORS:
        pass
    try:
        return _encode(_sanitize(v)).decode()
    except _ENCODE_ERRORS:
        return orjson.dumps(UNSERIALIZABLE).decode()


def orjson_bytes(v: Any) -> bytes:
    return orjson_dumps(v).encode()


def safe_stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    rendered = orjson_dumps(value)
    return UNSERIALIZABLE if rendered == f'"{UNSERIALIZABLE}"' else rendered


def render_message(parts: Iterable[Any]) -> str:
    """Concatenate message parts; non-strings are JSON-encoded."""
    return "".join(safe_stringify(part) for part in parts)


# =============================================================================
# Console Formatter (Aligned Columns)
# =============================================================================

COLORS = {
    "reset": "\033[0m",
    "dim": "\033[2m",
    "timestamp": "\033[90m",
    "category": "\033[35m",
    "key": "\033[34m",
}


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


class ConsoleFormatter:
    """Human-readable console rendering (fixed width, right-aligned)."""

    _RESET = "\x1b[0m"
    _LEVEL_COLORS = {
        "DEBUG": "\x1b[36m",
        "INFO": "\x1b[32m",
        "WARNING": "\x1b[33m",
        "ERROR": "\x1b[31m",
        "FATAL": "\x1b[1;31m",
    }

    TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
    TIMESTAMP_WIDTH = 19
    LEVEL_WIDTH = 7
    CATEGORY_WIDTH = 24
    SEPARATOR = " | "

    @staticmethod
    def _fit_right(text: str, width: int) -> str:
        if width <= 0:
            return text
        if len(text) > width:
            if width <= 3:
                text = text[-width:]
            else:
                text = "..." + text[-(width - 3) :]
        return f"{text:>{width}}"

    @classmethod
    def _colorize_level(cls, text: str, level_upper: str, use_color: bool) -> str:
        if not use_color:
            return text
        color = cls._LEVEL_COLORS.get(level_upper)
        if not color:
            return text
        return f"{color}{text}{cls._RESET}"

    @staticmethod
    def _maybe_color(text: str, color: str, use_color: bool) -> str:
        if not use_color:
            return text
        return colorize(text, color)

    @classmethod
    def format(cls, record: LogRecord, *, use_color: bool = True) -> str:
        """Format a record into an aligned single line."""
        message_text = render_message(record.message)

        extras = []
        for k, v in record.properties.items():
            key_colored = cls._maybe_color(k, "key", use_color)
            value_colored = cls._maybe_color(safe_stringify(v), "dim", use_color)
            extras.append(f"{key_colored}={value_colored}")
        if extras:
            message_text = f"{message_text} " + " ".join(extras)

        timestamp = datetime.fromtimestamp(record.timestamp).strftime(cls.TIMESTAMP_FORMAT)
        level_upper = record.level.value.upper()
        level_text = cls._colorize_level(cls._fit_right(level_upper, cls.LEVEL_WIDTH), level_upper, use_color)

        return "".join(
            [
                cls._maybe_color(cls._fit_right(timestamp, cls.TIMESTAMP_WIDTH), "timestamp", use_color),
                cls.SEPARATOR,
                level_text,
                cls.SEPARATOR,
                cls._maybe_color(cls._fit_right(record.category_name, cls.CATEGORY_WIDTH), "category", use_color),
                cls.SEPARATOR,
                message_text,
            ]
        )


def record_to_dict(record: LogRecord) -> dict[str, Any]:
    """Compact structured form used by the aggregator line and JSON console output."""
    data: dict[str, Any] = {
        "level": record.level.value,
        "category": record.category_name,
        "message": render_message(record.message),
    }
    if record.properties:
        data["properties"] = dict(record.properties)
    return data
