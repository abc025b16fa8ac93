"""Python implementation of the reflection facility.

Reads class metadata directly from the class object: own annotations for
fields, the class ``__dict__`` for methods, and the MRO for the ancestor chain.
Nothing here is cached; see ReflectionFinder for result caching.
"""

import builtins
import dataclasses
import inspect
import logging
import sys
import types
from typing import (
    Annotated, Any, ClassVar, Dict, ForwardRef, Iterable, List, Mapping, Tuple, Union, get_args, get_origin,
)

from memberfinder.reflection.markers import Marker, attached_markers, marker_kind
from memberfinder.types.members import FieldMember, MemberDescriptor, MethodMember, demangle, mangle


logger = logging.getLogger(__name__)


def _split_annotation(annotation: Any) -> Tuple[Any, Tuple[Marker, ...]]:
    """Separate an annotation into its base type and the markers it carries.

    Handles ``Annotated``, ``ClassVar[...]``, ``Optional``/``Union`` members
    (``Annotated[str, M()] | None``) and PEP 695 type aliases.
    """
    origin = get_origin(annotation)

    if origin is Annotated:
        base = get_args(annotation)[0]
        markers = tuple(m for m in annotation.__metadata__ if isinstance(m, Marker))
        _, nested = _split_annotation(base)
        return base, markers + nested

    if origin is ClassVar:
        args = get_args(annotation)
        if args:
            base, markers = _split_annotation(args[0])
            return ClassVar[base], markers
        return annotation, ()

    if origin is Union or origin is getattr(types, "UnionType", None):
        bases: List[Any] = []
        markers: Tuple[Marker, ...] = ()
        for arg in get_args(annotation):
            base, found = _split_annotation(arg)
            bases.append(base)
            markers += found
        if not markers:
            return annotation, ()
        return Union[tuple(bases)], markers

    # Python 3.12+ type alias (``type PathField = Annotated[...]``)
    if hasattr(annotation, "__value__"):
        _, markers = _split_annotation(annotation.__value__)
        return annotation, markers

    return annotation, ()


class _DeferredNamespace(dict):
    """Class namespace turning names defined nowhere into forward references."""

    def __init__(self, namespace: Mapping[str, Any], module_globals: Mapping[str, Any]):
        super().__init__(namespace)
        self._module_globals = module_globals

    def __missing__(self, key: str) -> Any:
        if key in self._module_globals:
            return self._module_globals[key]
        if hasattr(builtins, key):
            return getattr(builtins, key)
        return ForwardRef(key)


class PythonIntrospector:
    """TypeIntrospector backed by the running interpreter's class objects."""

    def type_name(self, tp: type) -> str:
        module = getattr(tp, "__module__", None)
        qualname = getattr(tp, "__qualname__", None) or getattr(tp, "__name__", repr(tp))
        if not module:
            return qualname
        return f"{module}.{qualname}"

    def declared_fields(self, tp: type) -> List[FieldMember]:
        if not isinstance(tp, type):
            return []

        fields = []
        for attr_name, annotation in self._own_annotations(tp).items():
            base, markers = _split_annotation(annotation)
            fields.append(
                FieldMember(
                    owner=tp,
                    name=demangle(tp, attr_name),
                    attr_name=demangle(tp, attr_name),
                    markers=markers,
                    annotation=base,
                )
            )
        return fields

    def declared_methods(self, tp: type) -> List[MethodMember]:
        if not isinstance(tp, type):
            return []

        methods = []
        for attr_name, raw in list(vars(tp).items()):
            if isinstance(raw, staticmethod):
                func, kind = raw.__func__, "static"
            elif isinstance(raw, classmethod):
                func, kind = raw.__func__, "class"
            elif inspect.isfunction(raw):
                func, kind = raw, "instance"
            else:
                continue

            methods.append(
                MethodMember(
                    owner=tp,
                    name=demangle(tp, attr_name),
                    attr_name=demangle(tp, attr_name),
                    markers=attached_markers(func),
                    function=func,
                    kind=kind,
                )
            )
        return methods

    def ancestors(self, tp: type) -> Iterable[type]:
        if not isinstance(tp, type):
            return ()
        return tp.__mro__[1:]

    def has_marker(self, member: MemberDescriptor, kind: Any) -> bool:
        kind = marker_kind(kind)
        return any(isinstance(m, kind) for m in member.markers)

    def relax_access(self, member: MemberDescriptor) -> MemberDescriptor:
        if member.accessible:
            return member
        return dataclasses.replace(
            member,
            attr_name=mangle(member.owner, member.name),
            accessible=True,
        )

    def _own_annotations(self, tp: type) -> Dict[str, Any]:
        """Annotations declared in the class body itself, resolved one by one.

        String annotations (``from __future__ import annotations``) are
        evaluated against the defining module and the class namespace. One
        annotation that cannot be resolved never hides the others.
        """
        annotations = dict(inspect.get_annotations(tp))
        module = sys.modules.get(tp.__module__)
        module_globals = dict(getattr(module, "__dict__", {}))
        namespace = dict(vars(tp))

        for attr_name, annotation in annotations.items():
            if isinstance(annotation, str):
                annotations[attr_name] = self._resolve_annotation(
                    tp, attr_name, annotation, module_globals, namespace
                )
        return annotations

    def _resolve_annotation(
        self,
        tp: type,
        attr_name: str,
        source: str,
        module_globals: Dict[str, Any],
        namespace: Dict[str, Any],
    ) -> Any:
        try:
            return eval(source, module_globals, namespace)
        except NameError:
            # Usually a name imported under TYPE_CHECKING only
            pass
        except (AttributeError, SyntaxError, TypeError) as e:
            return self._unresolved(tp, attr_name, source, e)

        try:
            resolved = eval(source, module_globals, _DeferredNamespace(namespace, module_globals))
        except (NameError, AttributeError, SyntaxError, TypeError) as e:
            return self._unresolved(tp, attr_name, source, e)

        logger.debug(
            f"Annotation of {self.type_name(tp)}.{attr_name} kept forward references: {resolved!r}"
        )
        return resolved

    def _unresolved(self, tp: type, attr_name: str, source: str, error: Exception) -> str:
        # Markers inside an annotation that cannot be evaluated are invisible
        level = logging.WARNING if "Annotated[" in source else logging.DEBUG
        logger.log(
            level,
            f"Could not resolve annotation of {self.type_name(tp)}.{attr_name} ({source!r}): {error}",
        )
        return source
