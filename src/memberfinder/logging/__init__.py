"""Logging infrastructure for memberfinder.

This module provides structured logging with JSON output and discovery
context tracking.
"""

from memberfinder.logging.filters import (
    ContextFilter,
    clear_discovery_context,
    discovery_scope,
    set_discovery_context,
)
from memberfinder.logging.logger import CustomJsonFormatter, build_logging_config, get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "build_logging_config",
    "CustomJsonFormatter",
    "ContextFilter",
    "discovery_scope",
    "set_discovery_context",
    "clear_discovery_context",
]
