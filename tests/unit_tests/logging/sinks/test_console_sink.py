from __future__ import annotations

import io

import orjson

from conftest import make_record
from logtrail.logging.records import LogLevel
from logtrail.logging.sinks.console import ConsoleSink


def test_routes_by_severity():
    out, err = io.StringIO(), io.StringIO()
    sink = ConsoleSink(stdout=out, stderr=err)

    sink.write(make_record(level=LogLevel.INFO, message=("fine",)))
    sink.write(make_record(level=LogLevel.WARNING, message=("hmm",)))
    sink.write(make_record(level=LogLevel.ERROR, message=("bad",)))
    sink.write(make_record(level=LogLevel.FATAL, message=("worse",)))

    assert [line.rsplit(" | ", 1)[1] for line in out.getvalue().splitlines()] == ["fine", "hmm"]
    assert [line.rsplit(" | ", 1)[1] for line in err.getvalue().splitlines()] == ["bad", "worse"]


def test_json_format():
    out = io.StringIO()
    ConsoleSink(fmt="json", stdout=out).write(make_record(properties={"k": 1}, timestamp=1_700_000_000.0))

    assert orjson.loads(out.getvalue()) == {
        "level": "info",
        "category": "app",
        "message": "hello",
        "properties": {"k": 1},
        "timestamp": "2023-11-14T22:13:20.000Z",
    }


def test_defaults_to_process_streams(capsys):
    ConsoleSink().write(make_record(level=LogLevel.ERROR, message=("to stderr",)))

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "to stderr" in captured.err
