"""Member descriptor types returned by discovery."""

from memberfinder.types.members import (
    FieldMember,
    MemberDescriptor,
    MethodMember,
    demangle,
    mangle,
)

__all__ = [
    "MemberDescriptor",
    "FieldMember",
    "MethodMember",
    "mangle",
    "demangle",
]
