"""Protocols for the reflection facility and the discovery caches.

Any class implementing these methods can be plugged into ReflectionFinder.
"""

from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence, runtime_checkable

from memberfinder.types.members import FieldMember, MemberDescriptor, MethodMember


@runtime_checkable
class TypeIntrospector(Protocol):
    """Protocol describing the host reflection facility.

    Implementations must be side-effect free: discovery may call them any
    number of times for the same class.
    """

    def type_name(self, tp: type) -> str:
        """Fully-qualified name of the class."""
        ...

    def declared_fields(self, tp: type) -> Sequence[FieldMember]:
        """Fields physically declared on the class, in declaration order."""
        ...

    def declared_methods(self, tp: type) -> Sequence[MethodMember]:
        """Methods physically declared on the class, in declaration order."""
        ...

    def ancestors(self, tp: type) -> Iterable[type]:
        """Ancestor chain of the class, nearest first, excluding the class itself."""
        ...

    def has_marker(self, member: MemberDescriptor, kind: type) -> bool:
        """Whether the member carries a marker of the given kind."""
        ...

    def relax_access(self, member: MemberDescriptor) -> MemberDescriptor:
        """Return a descriptor usable regardless of the member's visibility."""
        ...


@runtime_checkable
class MemberCacheProtocol(Protocol):
    """Protocol defining a discovery cache."""

    def get(self, key: str) -> Optional[List[Any]]:
        """Get cached members, or None when the key was never set."""
        ...

    def set(self, key: str, members: Sequence[Any]) -> None:
        """Store members under key."""
        ...

    def exists(self, key: str) -> bool:
        """Check if key exists in cache."""
        ...

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        ...
