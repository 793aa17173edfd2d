"""Common utilities and exceptions for chainsql.

Exception Design:
    The exception system uses error codes for categorization rather than
    numerous specific exception classes. All exceptions inherit from
    ChainSQLError and include structured error information.

    Every error raised by chainsql is a caller contract violation or an
    internal consistency failure. They surface synchronously while the
    tree is built or compiled, before any SQL reaches a driver, and are
    never retried.
"""

from chainsql.common.exceptions import (
    ChainSQLError,
    ErrorCode,
    # Helper functions
    configuration_error,
    validation_error,
    missing_parameter_error,
    invalid_condition_tree_error,
    dialect_not_supported_error,
    dialect_mismatch_error,
    internal_consistency_error,
)

__all__ = [
    # Base Exception and Error Codes
    "ChainSQLError",
    "ErrorCode",
    # Helper functions
    "configuration_error",
    "validation_error",
    "missing_parameter_error",
    "invalid_condition_tree_error",
    "dialect_not_supported_error",
    "dialect_mismatch_error",
    "internal_consistency_error",
]
