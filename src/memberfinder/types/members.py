"""Descriptors for class members discovered by marker.

A member descriptor identifies one field or method declared on a class and
carries enough information to read, write or invoke it later. Descriptors
are immutable; relaxing a member's accessibility produces a new descriptor.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Tuple

from memberfinder.reflection.markers import Marker


def mangle(owner: type, name: str) -> str:
    """Return the storage name Python uses for ``name`` declared on ``owner``.

    Only private names (leading ``__`` without trailing ``__``) are mangled.
    """
    if not name.startswith("__") or name.endswith("__"):
        return name
    stripped = owner.__name__.lstrip("_")
    if not stripped:
        return name
    return f"_{stripped}{name}"


def demangle(owner: type, attr_name: str) -> str:
    """Inverse of :func:`mangle` for names stored in ``owner.__dict__``."""
    prefix = f"_{owner.__name__.lstrip('_')}__"
    if attr_name.startswith(prefix) and not attr_name.endswith("__"):
        return attr_name[len(prefix) - 2:]
    return attr_name


@dataclass(frozen=True)
class MemberDescriptor:
    """A member declared on ``owner`` and carrying one or more markers.

    Attributes:
        owner: Class that physically declares the member
        name: Name as written in the class body (``__token`` for private members)
        attr_name: Attribute used for access; equals ``name`` until access is relaxed
        markers: Markers attached to the member, in declaration order
        accessible: True once the member was relaxed for use
    """
    owner: type
    name: str
    attr_name: str
    markers: Tuple[Marker, ...] = ()
    accessible: bool = False

    @property
    def qualified_name(self) -> str:
        return f"{self.owner.__module__}.{self.owner.__qualname__}.{self.name}"

    @property
    def is_private(self) -> bool:
        return mangle(self.owner, self.name) != self.name

    def markers_of(self, kind: type) -> Tuple[Marker, ...]:
        """Markers of the given kind attached to this member."""
        return tuple(m for m in self.markers if isinstance(m, kind))


@dataclass(frozen=True)
class FieldMember(MemberDescriptor):
    """A marked field, declared through a class-body annotation.

    Attributes:
        annotation: The annotation with marker metadata stripped
    """
    annotation: Any = None

    def get(self, obj: Any) -> Any:
        return getattr(obj, self.attr_name)

    def set(self, obj: Any, value: Any) -> None:
        setattr(obj, self.attr_name, value)

    def has_value(self, obj: Any) -> bool:
        return hasattr(obj, self.attr_name)


@dataclass(frozen=True)
class MethodMember(MemberDescriptor):
    """A marked method.

    Attributes:
        function: The underlying function, unwrapped from staticmethod/classmethod
        kind: One of ``"instance"``, ``"static"`` or ``"class"``
    """
    function: Callable[..., Any] = field(default=None, compare=False)
    kind: str = "instance"

    def bind(self, obj: Any) -> Callable[..., Any]:
        """Resolve the method on ``obj`` (an instance or the class itself)."""
        return getattr(obj, self.attr_name)

    def invoke(self, obj: Any, *args: Any, **kwargs: Any) -> Any:
        return self.bind(obj)(*args, **kwargs)
