from enum import Enum
from typing import Any, Dict, Optional


# Detail keys holding caller data (bind values, payload rows); kept on the
# exception but never written to the log.
_UNLOGGED_DETAIL_KEYS = frozenset({"value", "row"})


class ErrorCode(Enum):
    """Standard error codes for chainsql.

    This enum provides categorized error codes that can be used
    to identify error types without creating numerous exception classes.
    Each category has a specific prefix for easy identification.

    Attributes:
        CONFIG_*: Configuration errors (1xxx)
        VALIDATION_*: Contract violations by the caller (2xxx)
        DIALECT_*: Dialect selection errors (3xxx)
        INTERNAL_*: Internal consistency failures (4xxx)
    """
    # Configuration errors (1xxx)
    CONFIG_ERROR = "CONFIG_001"
    CONFIG_INVALID = "CONFIG_002"

    # Validation errors (2xxx)
    VALIDATION_ERROR = "VALIDATION_001"
    INVALID_ARGUMENT = "VALIDATION_002"
    MISSING_PARAMETER = "VALIDATION_003"
    INVALID_CONDITION_TREE = "VALIDATION_004"

    # Dialect errors (3xxx)
    DIALECT_NOT_SUPPORTED = "DIALECT_001"
    DIALECT_MISMATCH = "DIALECT_002"

    # Internal consistency errors (4xxx)
    INTERNAL_ERROR = "INTERNAL_001"


class ChainSQLError(Exception):
    """Base exception for all chainsql errors.

    This exception class uses error codes for categorization
    instead of creating numerous specific exception classes.

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
        """Initialize chainsql error.

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
        from chainsql.logging import get_logger
        logger = get_logger(__name__)
        logger.error(
            message,
            extra={
                "error_code": error_code.value,
                "details": {
                    k: v for k, v in self.details.items() if k not in _UNLOGGED_DETAIL_KEYS
                },
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

    @classmethod
    def from_error_code(
        cls,
        error_code: ErrorCode,
        message: str,
        **kwargs
    ) -> "ChainSQLError":
        """Create exception from error code.

        Args:
            error_code: Error code
            message: Error message
            **kwargs: Additional arguments for ChainSQLError

        Returns:
            ChainSQLError instance
        """
        return cls(message=message, error_code=error_code, **kwargs)


# Helper functions for common error scenarios
def configuration_error(
    message: str,
    config_key: Optional[str] = None,
    **kwargs
) -> ChainSQLError:
    """Create a configuration error.

    Args:
        message: Error message
        config_key: Configuration key that caused the error
        **kwargs: Additional error details

    Returns:
        ChainSQLError with CONFIG_ERROR code
    """
    details = kwargs.get('details', {})
    if config_key:
        details["config_key"] = config_key

    return ChainSQLError(
        message=message,
        error_code=ErrorCode.CONFIG_ERROR,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def validation_error(
    message: str,
    field: Optional[str] = None,
    value: Any = None,
    **kwargs
) -> ChainSQLError:
    """Create a validation error for a value with the wrong shape.

    Args:
        message: Error message
        field: Field or column that failed validation
        value: Invalid value
        **kwargs: Additional error details

    Returns:
        ChainSQLError with INVALID_ARGUMENT code
    """
    details = kwargs.get('details', {})
    if field:
        details["field"] = field
    if value is not None:
        details["value"] = repr(value)

    return ChainSQLError(
        message=message,
        error_code=ErrorCode.INVALID_ARGUMENT,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def missing_parameter_error(
    parameter: str,
    message: str = "",
    **kwargs
) -> ChainSQLError:
    """Create an error for a required builder field that was never set.

    Args:
        parameter: Name of the missing parameter (e.g. ``table``)
        message: Additional message/guidance
        **kwargs: Additional error details

    Returns:
        ChainSQLError with MISSING_PARAMETER code
    """
    details = kwargs.get('details', {})
    details["parameter"] = parameter

    return ChainSQLError(
        message=f"Required parameter '{parameter}' is not set. {message}".strip(),
        error_code=ErrorCode.MISSING_PARAMETER,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def invalid_condition_tree_error(
    message: str,
    position: Optional[int] = None,
    **kwargs
) -> ChainSQLError:
    """Create an error for a condition sequence that cannot render as valid SQL.

    Args:
        message: Error message
        position: Index of the offending node within its sequence
        **kwargs: Additional error details

    Returns:
        ChainSQLError with INVALID_CONDITION_TREE code
    """
    details = kwargs.get('details', {})
    if position is not None:
        details["position"] = position

    return ChainSQLError(
        message=message,
        error_code=ErrorCode.INVALID_CONDITION_TREE,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def dialect_not_supported_error(
    dialect: str,
    **kwargs
) -> ChainSQLError:
    """Create a dialect not supported error.

    Args:
        dialect: Dialect that has no registered compiler
        **kwargs: Additional error details

    Returns:
        ChainSQLError with DIALECT_NOT_SUPPORTED code
    """
    details = kwargs.get('details', {})
    details["dialect"] = dialect

    return ChainSQLError(
        message=f"Dialect '{dialect}' is not supported",
        error_code=ErrorCode.DIALECT_NOT_SUPPORTED,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def dialect_mismatch_error(
    expected: str,
    actual: str,
    clause: str,
    **kwargs
) -> ChainSQLError:
    """Create an error for a nested builder bound to another dialect.

    Args:
        expected: Dialect of the parent builder
        actual: Dialect of the nested builder
        clause: Clause embedding the nested builder (WITH, UNION, ...)
        **kwargs: Additional error details

    Returns:
        ChainSQLError with DIALECT_MISMATCH code
    """
    details = kwargs.get('details', {})
    details.update({"expected": expected, "actual": actual, "clause": clause})

    return ChainSQLError(
        message=(
            f"Nested {clause} builder uses dialect '{actual}' "
            f"but the enclosing statement is compiled for '{expected}'"
        ),
        error_code=ErrorCode.DIALECT_MISMATCH,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def internal_consistency_error(
    message: str,
    **kwargs
) -> ChainSQLError:
    """Create an error for a should-never-happen invariant violation.

    Args:
        message: Error message
        **kwargs: Additional error details (put diagnostic context here)

    Returns:
        ChainSQLError with INTERNAL_ERROR code
    """
    return ChainSQLError(
        message=message,
        error_code=ErrorCode.INTERNAL_ERROR,
        **kwargs
    )
