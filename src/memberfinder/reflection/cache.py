"""In-memory cache for discovery results.

Reflection is comparatively heavy, so discovered members can be kept here and
shared between callers. Entries are never evicted: the members declared on a
class do not change during the life of the process.
"""

import logging
import threading
from typing import Any, Dict, Generic, List, Optional, Sequence, TypeVar

from memberfinder.protocols import MemberCacheProtocol


logger = logging.getLogger(__name__)

M = TypeVar("M")


class DiscoveryCache(MemberCacheProtocol, Generic[M]):
    """Thread-safe mapping from string key to an ordered list of members.

    Keys are free-form. ``ReflectionFinder.cache_key`` builds one key per
    (class, marker) pair; callers may use coarser or finer keys of their own.

    Example:
        >>> cache = DiscoveryCache("fields")
        >>> cache.set("app.Service_app.Inject", fields)
        >>> cache.get("app.Service_app.Inject") == fields
        True
    """

    def __init__(self, name: str = "members"):
        self.name = name
        self._storage: Dict[str, List[M]] = {}
        self._hits = 0
        self._misses = 0
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[List[M]]:
        """Get cached members.

        Returns:
            A copy of the cached list, or None when the key was never set
        """
        with self._lock:
            members = self._storage.get(key)
            if members is None:
                self._misses += 1
            else:
                self._hits += 1

        if members is None:
            logger.debug(f"{self.name} cache miss for key: {key}")
            return None

        logger.debug(f"{self.name} cache hit for key: {key}")
        return list(members)

    def set(self, key: str, members: Sequence[M]) -> None:
        """Store members under key, replacing any previous entry."""
        snapshot = list(members)
        with self._lock:
            self._storage[key] = snapshot
        logger.debug(f"Cached {len(snapshot)} {self.name} with key: {key}")

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._storage

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dictionary with entry count, hits and misses
        """
        with self._lock:
            return {
                'name': self.name,
                'total_keys': len(self._storage),
                'hits': self._hits,
                'misses': self._misses,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._storage)
