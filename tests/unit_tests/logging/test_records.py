from __future__ import annotations

import dataclasses

import pytest

from logtrail.logging.records import LogLevel, LogRecord


class TestLogLevel:
    def test_ordering(self):
        assert LogLevel.DEBUG < LogLevel.INFO < LogLevel.WARNING < LogLevel.ERROR < LogLevel.FATAL
        assert LogLevel.ERROR >= LogLevel.ERROR
        assert not LogLevel.WARNING >= LogLevel.ERROR

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("info", LogLevel.INFO),
            ("WARNING", LogLevel.WARNING),
            ("warn", LogLevel.WARNING),
            ("critical", LogLevel.FATAL),
            (LogLevel.ERROR, LogLevel.ERROR),
        ],
    )
    def test_parse(self, raw, expected):
        assert LogLevel.parse(raw) is expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            LogLevel.parse("verbose")


class TestLogRecord:
    def test_normalizes_fields(self):
        record = LogRecord(category=["app", "auth"], level="error", message=["a", 1], properties={"k": "v"})
        assert record.category == ("app", "auth")
        assert record.level is LogLevel.ERROR
        assert record.message == ("a", 1)
        assert record.category_name == "app.auth"

    def test_single_string_category(self):
        assert LogRecord(category="app", level=LogLevel.INFO).category == ("app",)

    def test_empty_category_rejected(self):
        with pytest.raises(ValueError):
            LogRecord(category=(), level=LogLevel.INFO)

    def test_is_immutable(self):
        source = {"k": "v"}
        record = LogRecord(category=("app",), level=LogLevel.INFO, properties=source)
        source["k"] = "changed"

        assert record.properties["k"] == "v"
        with pytest.raises(TypeError):
            record.properties["k"] = "x"  # type: ignore[index]
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.level = LogLevel.ERROR  # type: ignore[misc]

    def test_error_property(self):
        exc = RuntimeError("boom")
        assert LogRecord(category=("app",), level="error", properties={"error": exc}).error is exc
        assert LogRecord(category=("app",), level="error", properties={"error": "text"}).error is None

    def test_timestamp_helpers(self):
        record = LogRecord(category=("app",), level="info", timestamp=1_700_000_000.25)
        assert record.timestamp_ns == 1_700_000_000_250_000_000
        assert record.isoformat() == "2023-11-14T22:13:20.250Z"
