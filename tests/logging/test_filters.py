import logging
from typing import Annotated

from memberfinder import Marker, ReflectionFinder
from memberfinder.__version__ import __version__
from memberfinder.logging import (
    ContextFilter,
    clear_discovery_context,
    discovery_scope,
    set_discovery_context,
)


class Inject(Marker):
    pass


class Service:
    __module__ = "app.services"

    repo: Annotated[object, Inject()]


def _record() -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="sample",
        args=(),
        exc_info=None,
    )


def test_context_filter_stamps_sdk_identity():
    record = _record()
    assert ContextFilter().filter(record)
    assert record.sdk_name == "memberfinder"
    assert record.finder_version == __version__


def test_context_filter_uses_discovery_context():
    set_discovery_context(target_type="app.Service", marker="app.Inject")
    try:
        record = _record()
        assert ContextFilter().filter(record)
        assert record.target_type == "app.Service"
        assert record.marker == "app.Inject"
    finally:
        clear_discovery_context()


def test_context_filter_no_context_is_graceful():
    clear_discovery_context()
    record = _record()
    assert ContextFilter().filter(record)
    assert record.target_type is None
    assert record.marker is None


def test_discovery_scope_restores_previous_context():
    set_discovery_context(target_type="outer", marker="outer.marker")
    try:
        with discovery_scope("inner", "inner.marker"):
            record = _record()
            ContextFilter().filter(record)
            assert record.target_type == "inner"

        record = _record()
        ContextFilter().filter(record)
        assert record.target_type == "outer"
        assert record.marker == "outer.marker"
    finally:
        clear_discovery_context()


def test_discovery_logs_carry_context(caplog):
    caplog.handler.addFilter(ContextFilter())
    with caplog.at_level(logging.DEBUG, logger="memberfinder.reflection.finder"):
        ReflectionFinder().find_fields(Service, Inject)

    scan_records = [r for r in caplog.records if r.name == "memberfinder.reflection.finder"]
    assert scan_records
    assert all(r.target_type == "app.services.Service" for r in scan_records)
    assert all(r.marker == f"{__name__}.Inject" for r in scan_records)
