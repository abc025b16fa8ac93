"""Protocol definitions for memberfinder.

Protocols provide type-safe interfaces without requiring inheritance,
following Python's structural subtyping (duck typing with type hints).
"""

from .reflection import MemberCacheProtocol, TypeIntrospector

__all__ = [
    "TypeIntrospector",
    "MemberCacheProtocol",
]
