"""Structured logging for memberfinder.

Log records are rendered as JSON lines carrying the discovery context set by
:mod:`memberfinder.logging.filters` and, inside a traced discovery call, the
OpenTelemetry trace and span ids. Configuration is declarative and goes
through ``logging.config.dictConfig``; the level defaults to the
``MEMBERFINDER_LOG_LEVEL`` setting.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Optional

from opentelemetry import trace

from memberfinder.settings import get_settings

PACKAGE_LOGGER = "memberfinder"

# Attributes every LogRecord has; anything else on a record came from
# ``extra=`` or a filter and is emitted as a JSON field.
_STANDARD_RECORD_ATTRS: FrozenSet[str] = frozenset(
    logging.makeLogRecord({}).__dict__
) | {"asctime", "message"}


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class CustomJsonFormatter(logging.Formatter):
    """Render records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = self._extra_fields(record)
        payload.update(
            timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            level=record.levelname,
            logger=record.name,
            message=record.getMessage(),
        )
        payload.update(self._trace_fields())

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)

    @staticmethod
    def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
        return {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_RECORD_ATTRS and value is not None
        }

    @staticmethod
    def _trace_fields() -> Dict[str, str]:
        span_context = trace.get_current_span().get_span_context()
        if not span_context.is_valid:
            return {}
        return {
            "trace_id": format(span_context.trace_id, "032x"),
            "span_id": format(span_context.span_id, "016x"),
        }


def build_logging_config(level: str, stream: str = "ext://sys.stdout") -> Dict[str, Any]:
    """dictConfig schema routing the package logger to a JSON console handler.

    Only the ``memberfinder`` logger is configured; the host application's
    root logger is left alone.
    """
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "finder_json": {"()": CustomJsonFormatter},
        },
        "filters": {
            "finder_context": {"()": "memberfinder.logging.filters.ContextFilter"},
        },
        "handlers": {
            "finder_console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "finder_json",
                "filters": ["finder_context"],
                "stream": stream,
            }
        },
        "loggers": {
            PACKAGE_LOGGER: {
                "level": level,
                "handlers": ["finder_console"],
                "propagate": False,
            }
        },
    }


def setup_logging(level: Optional[str] = None) -> None:
    """Configure memberfinder's structured logging.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Defaults to the ``log_level`` setting.
    """
    if level is None:
        level = get_settings().log_level

    logging.config.dictConfig(build_logging_config(level))
    get_logger(__name__).debug(f"Logging configured at {level.upper()}")
