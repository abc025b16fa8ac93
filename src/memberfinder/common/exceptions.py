from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Standard error codes for memberfinder operations.

    Error codes identify error types without creating numerous exception
    classes. Each category has its own prefix.

    Attributes:
        CONFIG_*: Configuration-related errors
        VALIDATION_*: Input validation errors
        REFLECTION_*: Errors raised while deriving data from class metadata
    """
    # Configuration errors
    CONFIG_ERROR = "CONFIG_001"
    CONFIG_INVALID = "CONFIG_002"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_001"
    INVALID_ARGUMENT = "VALIDATION_002"

    # Reflection errors
    INVALID_TYPE_NAME = "REFLECTION_001"


class FinderError(Exception):
    """Base exception for all memberfinder errors.

    Uses error codes for categorization. Only failures that callers are
    expected to handle differently get their own subclass.

    Attributes:
        message: Error message
        error_code: Error code from ErrorCode enum
        details: Additional error details
        cause: Optional underlying exception
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        """Initialize memberfinder error.

        Args:
            message: Error message
            error_code: Error code from ErrorCode enum
            details: Additional error details
            cause: Optional underlying exception
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause

        # Lazy import to avoid circular dependency
        from memberfinder.logging import get_logger
        logger = get_logger(__name__)
        logger.error(
            message,
            extra={
                "error_code": error_code.value,
                "details": self.details,
            },
            exc_info=cause is not None,
        )

    def __str__(self) -> str:
        """String representation of the error."""
        msg = f"[{self.error_code.value}] {self.message}"
        if self.cause:
            msg = f"{msg} (caused by: {type(self.cause).__name__}: {str(self.cause)})"
        return msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "details": self.details,
        }


class InvalidTypeNameError(FinderError):
    """A class name has no namespace separator to derive a search path from."""

    def __init__(self, type_name: str, **kwargs):
        details = kwargs.pop("details", {})
        details["type_name"] = type_name
        super().__init__(
            message=(
                f"Cannot derive a search path from '{type_name}': "
                f"the name has no '.' namespace separator"
            ),
            error_code=ErrorCode.INVALID_TYPE_NAME,
            details=details,
            **kwargs,
        )
        self.type_name = type_name


def invalid_type_name_error(type_name: str, **kwargs) -> InvalidTypeNameError:
    """Create an invalid type name error.

    Args:
        type_name: Fully-qualified name lacking a namespace separator
        **kwargs: Additional error details

    Returns:
        InvalidTypeNameError with INVALID_TYPE_NAME code
    """
    return InvalidTypeNameError(type_name, **kwargs)


def configuration_error(
    message: str,
    config_key: Optional[str] = None,
    **kwargs
) -> FinderError:
    """Create a configuration error.

    Args:
        message: Error message
        config_key: Configuration key that caused the error
        **kwargs: Additional error details

    Returns:
        FinderError with CONFIG_INVALID code
    """
    details = kwargs.get('details', {})
    if config_key:
        details["config_key"] = config_key

    return FinderError(
        message=message,
        error_code=ErrorCode.CONFIG_INVALID,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )
