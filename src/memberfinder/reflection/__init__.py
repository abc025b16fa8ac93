"""Marker-based member discovery.

Key Components:
    - **Marker**: base class for marker kinds attached to fields and methods
    - **PythonIntrospector**: reads declared members from class objects
    - **PathFilter**: class-name prefixes restricting which classes are scanned
    - **DiscoveryCache**: shared, never-evicted cache of discovery results
    - **ReflectionFinder**: ancestor-walking discovery plus the caches
"""

from memberfinder.reflection.markers import Marker, attached_markers, marker_kind, marker_name
from memberfinder.reflection.introspection import PythonIntrospector
from memberfinder.reflection.path_filter import PathFilter
from memberfinder.reflection.cache import DiscoveryCache
from memberfinder.reflection.finder import ReflectionFinder, get_finder, reset_finder

__all__ = [
    "Marker",
    "attached_markers",
    "marker_kind",
    "marker_name",
    "PythonIntrospector",
    "PathFilter",
    "DiscoveryCache",
    "ReflectionFinder",
    "get_finder",
    "reset_finder",
]
