"""Find fields or methods carrying a marker inside a class and its ancestors.

Discovery walks from the requested class up its ancestor chain, consulting the
search-path filter at every level. The first class outside the search paths
ends the walk: neither it nor anything above it contributes members.

Note: class names seen at runtime are what the filter matches against. Classes
created dynamically, or re-exported from another module, keep the
``__module__`` they were defined in, which is not always the package they are
imported from.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Sequence

from memberfinder.common.exceptions import ErrorCode, FinderError, configuration_error
from memberfinder.logging import discovery_scope
from memberfinder.protocols import TypeIntrospector
from memberfinder.reflection.cache import DiscoveryCache
from memberfinder.reflection.introspection import PythonIntrospector
from memberfinder.reflection.markers import marker_kind, marker_name
from memberfinder.reflection.path_filter import PathFilter
from memberfinder.settings import get_settings
from memberfinder.types.members import FieldMember, MemberDescriptor, MethodMember
from memberfinder.utils.decorators import traced


logger = logging.getLogger(__name__)


def _span_attributes(
    finder: "ReflectionFinder",
    tp: type,
    marker: Any,
    include_ancestors: bool = True,
) -> Dict[str, Any]:
    return {
        "memberfinder.type": finder.type_name(tp),
        "memberfinder.marker": marker_name(marker_kind(marker)),
        "memberfinder.include_ancestors": include_ancestors,
    }


class ReflectionFinder:
    """Marker-based discovery of fields and methods, with shared result caches.

    The finder is a plain service object: construct one in the application's
    composition root and pass it around, or use :func:`get_finder` for the
    process-wide instance.

    Attributes:
        path_filter: Search-path prefixes restricting which classes are scanned

    Example:
        >>> finder = ReflectionFinder()
        >>> finder.add_search_paths("myapp")
        >>> for member in finder.find_fields(UserService, Inject):
        ...     member.set(service, container.resolve(member.annotation))
    """

    def __init__(
        self,
        introspector: Optional[TypeIntrospector] = None,
        path_filter: Optional[PathFilter] = None,
        cache_key_separator: str = "_",
    ):
        """Initialize the finder.

        Args:
            introspector: Reflection facility, defaults to PythonIntrospector
            path_filter: Search-path filter, defaults to an empty one
            cache_key_separator: Separator used by cache_key

        Raises:
            FinderError: If cache_key_separator is empty
        """
        if not cache_key_separator:
            raise configuration_error(
                "cache_key_separator must not be empty",
                config_key="cache_key_separator",
            )

        self._introspector = introspector or PythonIntrospector()
        self.path_filter = path_filter or PathFilter(self._introspector)
        self._cache_key_separator = cache_key_separator

        # Reflection is heavy, so a common cache is offered to callers. It is
        # "common" since callers may keep caches of their own.
        self._field_cache: Optional[DiscoveryCache[FieldMember]] = None
        self._method_cache: Optional[DiscoveryCache[MethodMember]] = None
        self._cache_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    @traced("memberfinder.find_fields", attribute_getter=_span_attributes)
    def find_fields(self, tp: type, marker: Any, include_ancestors: bool = True) -> List[FieldMember]:
        """Find fields carrying ``marker`` in ``tp`` and, by default, its ancestors.

        Args:
            tp: Class to search
            marker: Marker kind (a Marker subclass)
            include_ancestors: Search the ancestor chain too

        Returns:
            Fields of ``tp`` in declaration order, followed by those of each
            ancestor. Empty when nothing matches or ``tp`` is filtered out.
        """
        return self._scan(tp, marker, include_ancestors, self._introspector.declared_fields)

    @traced("memberfinder.find_methods", attribute_getter=_span_attributes)
    def find_methods(self, tp: type, marker: Any, include_ancestors: bool = True) -> List[MethodMember]:
        """Find methods carrying ``marker`` in ``tp`` and, by default, its ancestors.

        Args:
            tp: Class to search
            marker: Marker kind (a Marker subclass)
            include_ancestors: Search the ancestor chain too

        Returns:
            Methods of ``tp`` in declaration order, followed by those of each
            ancestor. Empty when nothing matches or ``tp`` is filtered out.
        """
        return self._scan(tp, marker, include_ancestors, self._introspector.declared_methods)

    def _scan(
        self,
        tp: type,
        marker: Any,
        include_ancestors: bool,
        declared: Callable[[type], Sequence[MemberDescriptor]],
    ) -> List[Any]:
        kind = marker_kind(marker)
        chain = [tp]
        if include_ancestors:
            chain.extend(self._introspector.ancestors(tp))

        result: List[Any] = []
        with discovery_scope(self.type_name(tp), marker_name(kind)):
            for level in chain:
                if not self.path_filter.is_allowed(level):
                    logger.debug(f"Stopping at {self.type_name(level)}: outside search paths")
                    break

                found = [
                    self._introspector.relax_access(member)
                    for member in declared(level)
                    if self._introspector.has_marker(member, kind)
                ]
                if found:
                    logger.debug(
                        f"Found {len(found)} marked members on {self.type_name(level)}: "
                        f"{', '.join(m.name for m in found)}"
                    )
                result.extend(found)

        return result

    def find_fields_cached(self, tp: type, marker: Any) -> List[FieldMember]:
        """Like find_fields (ancestors included), going through the field cache."""
        key = self.cache_key(tp, marker)
        fields = self.get_field_cache(key)
        if fields is None:
            fields = self.find_fields(tp, marker)
            self.set_field_cache(key, fields)
        return fields

    def find_methods_cached(self, tp: type, marker: Any) -> List[MethodMember]:
        """Like find_methods (ancestors included), going through the method cache."""
        key = self.cache_key(tp, marker)
        methods = self.get_method_cache(key)
        if methods is None:
            methods = self.find_methods(tp, marker)
            self.set_method_cache(key, methods)
        return methods

    # ------------------------------------------------------------------
    # Search paths
    # ------------------------------------------------------------------

    def add_search_paths(self, *paths: Any) -> None:
        """Add search-path prefixes, given as strings or as classes.

        A string such as ``"compet.bundle"`` is added as is. A class such as
        ``compet.bundle.X`` adds its package part, ``compet.bundle``.
        None items are ignored.

        Raises:
            InvalidTypeNameError: If a given class's name has no ``.`` separator
            FinderError: If an item is neither a string nor a class
        """
        for path in paths:
            if path is None:
                continue
            if isinstance(path, str):
                self.path_filter.add_prefixes([path])
            elif isinstance(path, type):
                self.path_filter.add_prefixes_from_types([path])
            else:
                raise FinderError(
                    f"Search paths must be strings or classes, got {type(path).__name__}",
                    error_code=ErrorCode.INVALID_ARGUMENT,
                    details={"value": repr(path)},
                )

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    def type_name(self, tp: type) -> str:
        return self._introspector.type_name(tp)

    def cache_key(self, tp: type, marker: Any) -> str:
        """Recommended cache key for a (class, marker) pair."""
        return f"{self.type_name(tp)}{self._cache_key_separator}{marker_name(marker_kind(marker))}"

    def set_field_cache(self, key: str, fields: Sequence[FieldMember]) -> None:
        self._obtain_field_cache().set(key, fields)

    def get_field_cache(self, key: str) -> Optional[List[FieldMember]]:
        return self._obtain_field_cache().get(key)

    def set_method_cache(self, key: str, methods: Sequence[MethodMember]) -> None:
        self._obtain_method_cache().set(key, methods)

    def get_method_cache(self, key: str) -> Optional[List[MethodMember]]:
        return self._obtain_method_cache().get(key)

    def cache_stats(self) -> Dict[str, Any]:
        """Statistics of both caches; a cache never used reports as not initialized."""
        return {
            'fields': self._field_cache.get_stats() if self._field_cache else {'initialized': False},
            'methods': self._method_cache.get_stats() if self._method_cache else {'initialized': False},
        }

    def _obtain_field_cache(self) -> DiscoveryCache[FieldMember]:
        if self._field_cache is None:
            with self._cache_lock:
                if self._field_cache is None:
                    self._field_cache = DiscoveryCache("fields")
        return self._field_cache

    def _obtain_method_cache(self) -> DiscoveryCache[MethodMember]:
        if self._method_cache is None:
            with self._cache_lock:
                if self._method_cache is None:
                    self._method_cache = DiscoveryCache("methods")
        return self._method_cache


_finder: Optional[ReflectionFinder] = None
_finder_lock = threading.Lock()


def get_finder() -> ReflectionFinder:
    """Get the process-wide finder, creating it on first use.

    The instance is built once, seeded with the search paths and cache key
    separator from settings. Concurrent first calls all receive the same
    instance.

    Returns:
        The shared ReflectionFinder

    Example:
        >>> finder = get_finder()
        >>> assert finder is get_finder()
    """
    global _finder

    if _finder is None:
        with _finder_lock:
            if _finder is None:
                settings = get_settings()
                finder = ReflectionFinder(cache_key_separator=settings.cache_key_separator)
                finder.add_search_paths(*settings.search_path_list)
                _finder = finder
                logger.info(
                    f"Initialized shared ReflectionFinder with search paths: "
                    f"{finder.path_filter.prefixes or 'all'}"
                )

    return _finder


def reset_finder() -> None:
    """Drop the process-wide finder (mainly for testing).

    The next get_finder() call builds a fresh instance with empty caches.
    """
    global _finder
    with _finder_lock:
        _finder = None
    logger.debug("Shared ReflectionFinder reset")
