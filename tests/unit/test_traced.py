"""Tests for the traced decorator and discovery spans."""

from typing import Annotated
from unittest.mock import MagicMock, patch

import pytest
from opentelemetry.trace import StatusCode

from memberfinder import Marker, ReflectionFinder
from memberfinder.utils import traced


class Inject(Marker):
    pass


class Service:
    __module__ = "app.services"

    repo: Annotated[object, Inject()]


@pytest.fixture
def tracer():
    tracer = MagicMock()
    with patch("memberfinder.utils.decorators.get_tracer", return_value=tracer):
        yield tracer


def span_of(tracer):
    return tracer.start_as_current_span.return_value.__enter__.return_value


class TestTraced:

    def test_sync_function_runs_inside_span(self, tracer):
        @traced("unit.sync", attributes={"static": "yes", "skipped": None})
        def add(a, b):
            return a + b

        assert add(1, 2) == 3
        assert tracer.start_as_current_span.call_args[0][0] == "unit.sync"
        span_of(tracer).set_attribute.assert_called_once_with("static", "yes")

    def test_default_span_name_is_qualified(self, tracer):
        @traced()
        def noop():
            return None

        noop()

        name = tracer.start_as_current_span.call_args[0][0]
        assert name.endswith("test_default_span_name_is_qualified.<locals>.noop")

    def test_exception_is_recorded_and_reraised(self, tracer):
        @traced("unit.fail")
        def fail():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            fail()

        span = span_of(tracer)
        span.record_exception.assert_called_once()
        status = span.set_status.call_args[0][0]
        assert status.status_code == StatusCode.ERROR


class TestDiscoverySpans:

    def test_find_fields_span_attributes(self, tracer):
        ReflectionFinder().find_fields(Service, Inject, include_ancestors=False)

        assert tracer.start_as_current_span.call_args[0][0] == "memberfinder.find_fields"
        attributes = {c[0][0]: c[0][1] for c in span_of(tracer).set_attribute.call_args_list}
        assert attributes == {
            "memberfinder.type": "app.services.Service",
            "memberfinder.marker": f"{__name__}.Inject",
            "memberfinder.include_ancestors": False,
        }

    def test_find_methods_span(self, tracer):
        ReflectionFinder().find_methods(Service, Inject)

        assert tracer.start_as_current_span.call_args[0][0] == "memberfinder.find_methods"
