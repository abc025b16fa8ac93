import json
import logging

import pytest

from memberfinder.logging import (
    ContextFilter,
    CustomJsonFormatter,
    build_logging_config,
    get_logger,
    setup_logging,
)
from memberfinder.settings import _reload_settings


@pytest.fixture
def restore_package_logger():
    package_logger = logging.getLogger("memberfinder")
    saved = (package_logger.level, list(package_logger.handlers), package_logger.propagate)
    yield package_logger
    package_logger.setLevel(saved[0])
    package_logger.handlers[:] = saved[1]
    package_logger.propagate = saved[2]


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="memberfinder.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="found %d members",
        args=(3,),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_core_fields():
    payload = json.loads(CustomJsonFormatter().format(_record()))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "memberfinder.test"
    assert payload["message"] == "found 3 members"
    assert "timestamp" in payload
    assert "trace_id" not in payload


def test_json_formatter_includes_extras_and_skips_empty():
    record = _record(target_type="app.Service", marker=None)
    payload = json.loads(CustomJsonFormatter().format(record))

    assert payload["target_type"] == "app.Service"
    assert "marker" not in payload


def test_json_formatter_includes_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        import sys
        record = _record()
        record.exc_info = sys.exc_info()

    payload = json.loads(CustomJsonFormatter().format(record))
    assert "ValueError: boom" in payload["exception"]


def test_setup_logging_configures_package_logger(restore_package_logger):
    setup_logging("debug")

    assert restore_package_logger.level == logging.DEBUG
    handler = restore_package_logger.handlers[0]
    assert isinstance(handler.formatter, CustomJsonFormatter)
    assert any(isinstance(f, ContextFilter) for f in handler.filters)


def test_get_logger_returns_stdlib_logger():
    assert get_logger("memberfinder.x") is logging.getLogger("memberfinder.x")


def test_setup_logging_defaults_to_configured_level(restore_package_logger, monkeypatch):
    monkeypatch.setenv("MEMBERFINDER_LOG_LEVEL", "warning")
    _reload_settings()
    try:
        setup_logging()
    finally:
        monkeypatch.delenv("MEMBERFINDER_LOG_LEVEL")
        _reload_settings()

    assert restore_package_logger.level == logging.WARNING
    assert restore_package_logger.handlers[0].level == logging.WARNING


def test_logging_config_leaves_root_logger_alone():
    config = build_logging_config("info", stream="ext://sys.stderr")

    assert "root" not in config
    assert config["loggers"]["memberfinder"] == {
        "level": "INFO",
        "handlers": ["finder_console"],
        "propagate": False,
    }
    assert config["handlers"]["finder_console"]["stream"] == "ext://sys.stderr"
