"""Markers attached to class members.

A marker kind is a subclass of :class:`Marker`. Instances of it are attached
to members in one of two ways:

* fields, through ``typing.Annotated`` metadata in the class body::

      class Service:
          repo: Annotated[Repository, Inject()]

* methods, by using the marker instance as a decorator::

      class Service:
          @Subscribe("user.saved")
          def on_saved(self, event): ...

Markers are plain data; define them as dataclasses when they carry options.
"""

from typing import Any, Callable, Tuple, Type

MARKERS_ATTR = "_member_markers"


class Marker:
    """Base class for every marker kind."""

    def __call__(self, target: Any) -> Any:
        """Attach this marker to a function, staticmethod or classmethod.

        The marker is stored on the underlying function so it survives
        ``functools.wraps`` and the staticmethod/classmethod wrappers.
        Returns ``target`` unchanged.
        """
        func = target.__func__ if isinstance(target, (staticmethod, classmethod)) else target
        if not callable(func):
            raise TypeError(
                f"{type(self).__name__} can only decorate functions, got {type(target).__name__}"
            )
        existing: Tuple[Marker, ...] = getattr(func, MARKERS_ATTR, ())
        # Markers are applied bottom-up; keep them in source order
        setattr(func, MARKERS_ATTR, (self,) + existing)
        return target


def marker_name(kind: Type[Marker]) -> str:
    """Fully-qualified name of a marker kind, used in cache keys."""
    return f"{kind.__module__}.{kind.__qualname__}"


def attached_markers(func: Callable[..., Any]) -> Tuple[Marker, ...]:
    """Markers attached to ``func`` by decoration, in source order."""
    return tuple(getattr(func, MARKERS_ATTR, ()))


def marker_kind(marker: Any) -> Type[Marker]:
    """Marker kind given either as the class itself or as one of its instances."""
    return marker if isinstance(marker, type) else type(marker)
