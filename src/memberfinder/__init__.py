from memberfinder.__version__ import __version__

from memberfinder.reflection import (
    DiscoveryCache,
    Marker,
    PathFilter,
    PythonIntrospector,
    ReflectionFinder,
    get_finder,
    marker_name,
    reset_finder,
)
from memberfinder.types import FieldMember, MemberDescriptor, MethodMember

from memberfinder.common.exceptions import ErrorCode, FinderError, InvalidTypeNameError


__all__ = [
    "__version__",

    "Marker",
    "marker_name",

    "ReflectionFinder",
    "get_finder",
    "reset_finder",
    "PathFilter",
    "DiscoveryCache",
    "PythonIntrospector",

    "MemberDescriptor",
    "FieldMember",
    "MethodMember",

    "FinderError",
    "ErrorCode",
    "InvalidTypeNameError",
]
