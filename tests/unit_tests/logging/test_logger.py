from __future__ import annotations

import pytest

from conftest import RecordingSink
from logtrail.logging.logger import Logger, auth_logger, get_logger
from logtrail.logging.records import LogLevel
from logtrail.logging.registry import LoggerRegistry, RegistryEntry, set_process_registry


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def registry(sink):
    registry = LoggerRegistry()
    registry.configure({"rec": sink}, [RegistryEntry((), {"rec"})])
    return registry


def test_level_methods_build_records(registry, sink):
    logger = get_logger("app", "auth", registry=registry)

    logger.info("User ", 42, " logged in", ip="10.0.0.1")
    logger.warn("slow")
    logger.fatal()

    first, second, third = sink.records
    assert first.level is LogLevel.INFO
    assert first.category == ("app", "auth")
    assert first.message == ("User ", 42, " logged in")
    assert dict(first.properties) == {"ip": "10.0.0.1"}
    assert second.level is LogLevel.WARNING
    assert third.message == ()


def test_emit_accepts_level_names_and_plain_strings(registry, sink):
    get_logger("app", registry=registry).emit("error", "failed", {"code": 3})

    (record,) = sink.records
    assert record.level is LogLevel.ERROR
    assert record.message == ("failed",)
    assert record.properties["code"] == 3


def test_emit_never_raises(registry, sink):
    logger = get_logger("app", registry=registry)

    logger.emit("not-a-level", ["x"])
    logger.emit(LogLevel.INFO, None)  # type: ignore[arg-type]

    assert sink.records == []


def test_dotted_name_and_children(registry, sink):
    logger = get_logger("app.billing", registry=registry).get_child("stripe")
    logger.info("charged")

    assert sink.records[0].category == ("app", "billing", "stripe")


def test_bind_merges_properties(registry, sink):
    logger = get_logger("app", registry=registry).bind(request_id="r1", user="a")

    logger.info("done", user="b")

    assert dict(sink.records[0].properties) == {"request_id": "r1", "user": "b"}


def test_lazy_process_registry(sink, registry):
    logger = get_logger("app")
    logger.info("before configuration")
    assert sink.records == []

    set_process_registry(registry)
    logger.info("after configuration")
    auth_logger.error("from a prebuilt logger")

    assert [r.message for r in sink.records] == [("after configuration",), ("from a prebuilt logger",)]
    assert sink.records[1].category == ("app", "auth")


def test_empty_category_rejected():
    with pytest.raises(ValueError):
        Logger(())
