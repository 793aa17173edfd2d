"""SQL statement constants.

This module contains the enumerations that describe the shape of a
statement tree: comparison operators used in conditions, the statement
method, join kinds and sort directions.
"""

from enum import Enum


class Operator(str, Enum):
    """Comparison / test operator of a condition leaf.

    The SQL token each operator renders to, and whether it consumes bound
    values, lives in ``chainsql.compiler.operators``.

    Arity:
    - BETWEEN, NOT_BETWEEN: exactly two values
    - IN, NOT_IN: a non-empty list of values
    - IS_NULL, IS_NOT_NULL, EXISTS, NOT_EXISTS: no value
    - everything else: one value
    """

    EQUAL = "EQUAL"
    NOT_EQUAL = "NOT_EQUAL"
    IN = "IN"
    NOT_IN = "NOT_IN"
    IS_NULL = "IS_NULL"
    IS_NOT_NULL = "IS_NOT_NULL"
    EXISTS = "EXISTS"
    NOT_EXISTS = "NOT_EXISTS"
    BETWEEN = "BETWEEN"
    NOT_BETWEEN = "NOT_BETWEEN"
    LIKE = "LIKE"
    NOT_LIKE = "NOT_LIKE"
    GREATER_THAN = "GREATER_THAN"
    GREATER_THAN_OR_EQUAL = "GREATER_THAN_OR_EQUAL"
    LESS_THAN = "LESS_THAN"
    LESS_THAN_OR_EQUAL = "LESS_THAN_OR_EQUAL"
    GREATER_OR_LESS_THAN = "GREATER_OR_LESS_THAN"


class Method(str, Enum):
    """SQL operation a statement builder emits."""

    SELECT = "SELECT"
    INSERT = "INSERT"
    INSERT_MANY = "INSERT_MANY"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class JoinType(str, Enum):
    """Join keyword emitted in front of the joined table."""

    JOIN = "JOIN"
    INNER = "INNER JOIN"
    LEFT = "LEFT JOIN"
    RIGHT = "RIGHT JOIN"
    LEFT_OUTER = "LEFT OUTER JOIN"
    RIGHT_OUTER = "RIGHT OUTER JOIN"
    FULL_OUTER = "FULL OUTER JOIN"
    CROSS = "CROSS JOIN"
    RAW = ""


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"
