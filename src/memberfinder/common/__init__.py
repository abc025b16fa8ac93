"""Common exceptions for memberfinder.

Exception Design:
    The exception system uses error codes for categorization rather than
    numerous specific exception classes. All exceptions inherit from
    FinderError and include structured error information.
"""

from memberfinder.common.exceptions import (
    FinderError,
    ErrorCode,
    InvalidTypeNameError,
    # Helper functions
    invalid_type_name_error,
    configuration_error,
)

__all__ = [
    "FinderError",
    "ErrorCode",
    "InvalidTypeNameError",
    "invalid_type_name_error",
    "configuration_error",
]
