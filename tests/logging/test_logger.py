import io
import json
import logging
import sys

import pytest

from chainsql.logging import CustomJsonFormatter, ContextFilter, get_logger, setup_logging


@pytest.fixture
def restore_chainsql_logger():
    """Put the package logger back the way the test found it."""
    logger = logging.getLogger("chainsql")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="chainsql.compiler.base",
        level=logging.DEBUG,
        pathname=__file__,
        lineno=10,
        msg="Compiled %s",
        args=("statement",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extras():
    payload = json.loads(CustomJsonFormatter().format(_record(dialect="mysql", bind_count=3)))

    assert payload["message"] == "Compiled statement"
    assert payload["level"] == "DEBUG"
    assert payload["logger"] == "chainsql.compiler.base"
    assert payload["dialect"] == "mysql"
    assert payload["bind_count"] == 3
    assert "timestamp" in payload
    assert "msg" not in payload


def test_json_formatter_maps_trace_ids():
    payload = json.loads(CustomJsonFormatter().format(_record(otelTraceID="abc", otelSpanID="def")))

    assert payload["trace_id"] == "abc"
    assert payload["span_id"] == "def"


def test_json_formatter_serializes_exceptions():
    try:
        raise KeyError("a")
    except KeyError:
        record = _record()
        record.exc_info = sys.exc_info()

    payload = json.loads(CustomJsonFormatter().format(record))

    assert "KeyError" in payload["exception"]


def test_setup_logging_configures_package_logger(restore_chainsql_logger):
    setup_logging("debug")
    logger = restore_chainsql_logger

    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert len(logger.handlers) == 1
    handler = logger.handlers[0]
    assert isinstance(handler.formatter, CustomJsonFormatter)
    assert any(isinstance(f, ContextFilter) for f in handler.filters)


def test_setup_logging_defaults_to_settings(restore_chainsql_logger, monkeypatch):
    monkeypatch.setenv("CHAINSQL_LOG_LEVEL", "warning")

    setup_logging()

    assert restore_chainsql_logger.level == logging.WARNING


def test_records_are_emitted_as_json(restore_chainsql_logger):
    setup_logging("DEBUG")
    stream = io.StringIO()
    restore_chainsql_logger.handlers[0].setStream(stream)

    get_logger("chainsql.compiler.base").debug("Compiled statement", extra={"bind_count": 2})

    payload = json.loads(stream.getvalue().strip())
    assert payload["bind_count"] == 2
    assert payload["sdk_name"] == "chainsql"
