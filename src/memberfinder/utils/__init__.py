"""Utility functions and helpers for memberfinder."""

from memberfinder.utils.decorators import traced

__all__ = [
    "traced",
]
