"""Search-path filter deciding which classes may be scanned.

Matching is a plain string-prefix test on the fully-qualified class name, not
a dotted-segment match: ``"tool.compet"`` admits ``tool.competitor.X`` as well
as ``tool.compet.X``. Add a trailing ``"."`` to a prefix to restrict it to one
package.
"""

import logging
import threading
from typing import Iterable, List, Optional, Set

from memberfinder.common.exceptions import invalid_type_name_error
from memberfinder.protocols import TypeIntrospector
from memberfinder.reflection.introspection import PythonIntrospector


logger = logging.getLogger(__name__)


class PathFilter:
    """Set of class-name prefixes gating discovery.

    An empty filter admits every class.

    Example:
        >>> path_filter = PathFilter()
        >>> path_filter.add_prefixes(["myapp.handlers"])
        >>> path_filter.is_allowed(myapp.handlers.UserHandler)
        True
    """

    def __init__(self, introspector: Optional[TypeIntrospector] = None):
        self._introspector = introspector or PythonIntrospector()
        self._prefixes: Set[str] = set()
        self._lock = threading.RLock()

    def add_prefixes(self, prefixes: Optional[Iterable[Optional[str]]]) -> None:
        """Add each non-None prefix. A None argument is ignored.

        Args:
            prefixes: Prefixes such as ``"compet.bundle"`` or ``"tool.compet"``
        """
        if prefixes is None:
            return

        with self._lock:
            for prefix in prefixes:
                if prefix is None:
                    continue
                if prefix not in self._prefixes:
                    self._prefixes.add(prefix)
                    logger.debug(f"Added search path prefix: {prefix}")

    def add_prefixes_from_types(self, types: Optional[Iterable[Optional[type]]]) -> None:
        """Add the package part of each class's name as a prefix.

        Class ``compet.bundle.X`` contributes ``compet.bundle``, and so does a
        class nested in it such as ``compet.bundle.X.Inner``.

        Raises:
            InvalidTypeNameError: If a class name has no ``.`` separator.
                Prefixes derived before the failing class are kept.
        """
        if types is None:
            return

        self.add_prefixes(self.prefix_of(tp) for tp in types if tp is not None)

    def prefix_of(self, tp: type) -> str:
        """Package part of the class's name: its module, nesting stripped.

        Falls back to stripping the final ``.``-delimited segment of the type
        name when the class reports no module.
        """
        module = getattr(tp, "__module__", None)
        if isinstance(module, str) and module:
            return module

        type_name = self._introspector.type_name(tp)
        head, sep, _ = type_name.rpartition(".")
        if not sep:
            raise invalid_type_name_error(type_name)
        return head

    def is_allowed(self, tp: type) -> bool:
        """True if the filter is empty or the class name starts with a prefix."""
        with self._lock:
            if not self._prefixes:
                return True
            prefixes = tuple(self._prefixes)

        type_name = self._introspector.type_name(tp)
        return any(type_name.startswith(prefix) for prefix in prefixes)

    @property
    def prefixes(self) -> List[str]:
        """Snapshot of the stored prefixes, sorted."""
        with self._lock:
            return sorted(self._prefixes)

    def __len__(self) -> int:
        with self._lock:
            return len(self._prefixes)

    def __contains__(self, prefix: object) -> bool:
        with self._lock:
            return prefix in self._prefixes
