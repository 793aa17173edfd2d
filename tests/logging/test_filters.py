import logging
from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]
FILTERS = PROJECT_ROOT / "src" / "chainsql" / "logging" / "filters.py"

spec = spec_from_file_location("chainsql.logging.filters_test", FILTERS)
filters = module_from_spec(spec)
assert spec and spec.loader
spec.loader.exec_module(filters)  # type: ignore[assignment]

ContextFilter = filters.ContextFilter
set_logging_context = filters.set_logging_context
set_request_context = filters.set_request_context
clear_request_context = filters.clear_request_context


def _record() -> logging.LogRecord:
    return logging.LogRecord(
        name="chainsql.compiler.base",
        level=logging.DEBUG,
        pathname=__file__,
        lineno=10,
        msg="Compiled statement",
        args=(),
        exc_info=None,
    )


def test_context_filter_respects_static_environment():
    set_logging_context(environment="qa", extra={"region": "us-east"})
    try:
        record = _record()
        assert ContextFilter().filter(record)
        assert getattr(record, "environment") == "qa"
        assert getattr(record, "region") == "us-east"
    finally:
        set_logging_context()


def test_context_filter_uses_request_context():
    set_logging_context(environment=None, extra=None)
    set_request_context(request_id="req-1", user_id="user-7")
    try:
        record = _record()
        assert ContextFilter().filter(record)
        assert record.request_id == "req-1"
        assert record.user_id == "user-7"
    finally:
        clear_request_context()


def test_context_filter_tags_sdk():
    record = _record()
    assert ContextFilter().filter(record)
    assert record.sdk_name == "chainsql"
    assert record.chainsql_version


def test_static_context_does_not_override_record_fields():
    set_logging_context(extra={"dialect": "static"})
    try:
        record = _record()
        record.dialect = "sqlite"
        assert ContextFilter().filter(record)
        assert record.dialect == "sqlite"
    finally:
        set_logging_context()


def test_context_filter_no_config_is_graceful():
    set_logging_context(environment=None, extra=None)
    record = _record()
    assert ContextFilter().filter(record)
    assert not hasattr(record, "environment")
    assert record.request_id is None
