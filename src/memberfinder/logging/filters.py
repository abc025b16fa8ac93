"""Logging filters for context injection.

This module provides filters that inject the active discovery context into
log records, so every line emitted while scanning a class can be correlated
with the class and marker being searched for.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

from memberfinder.__version__ import __version__

target_type_var: ContextVar[Optional[str]] = ContextVar("target_type", default=None)
marker_var: ContextVar[Optional[str]] = ContextVar("marker", default=None)


class ContextFilter(logging.Filter):
    """Logging filter that adds discovery context variables to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add context variables to the log record.

        Args:
            record: Log record to enhance

        Returns:
            Always True (doesn't filter out any records)
        """
        setattr(record, "target_type", target_type_var.get())
        setattr(record, "marker", marker_var.get())
        setattr(record, "sdk_name", "memberfinder")
        setattr(record, "finder_version", __version__)

        return True


def set_discovery_context(
    target_type: Optional[str] = None,
    marker: Optional[str] = None,
) -> None:
    """Set discovery context variables."""
    if target_type is not None:
        target_type_var.set(target_type)
    if marker is not None:
        marker_var.set(marker)


def clear_discovery_context() -> None:
    """Clear all discovery context variables."""
    target_type_var.set(None)
    marker_var.set(None)


@contextmanager
def discovery_scope(target_type: str, marker: str) -> Iterator[None]:
    """Bind the discovery context for the duration of a scan, then restore it."""
    type_token = target_type_var.set(target_type)
    marker_token = marker_var.set(marker)
    try:
        yield
    finally:
        marker_var.reset(marker_token)
        target_type_var.reset(type_token)
