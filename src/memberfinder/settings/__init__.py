"""Settings for memberfinder, built on Pydantic Settings.

Configuration Sources (precedence order):
    1. Environment Variables (highest priority), prefixed ``MEMBERFINDER_``
    2. ``.env`` file in the working directory
    3. Default Values in code (lowest priority)

Quick Start:
    >>> from memberfinder.settings import get_settings
    >>> settings = get_settings()
    >>> settings.search_path_list
    []
"""

from .main import _Settings, get_settings, _reload_settings

from .base import FinderBaseSettings

__all__ = [
    "get_settings",
]
