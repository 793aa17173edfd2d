"""Operator to SQL token mapping."""

from typing import Dict, NamedTuple, Union

from chainsql.constants import Operator


class OperatorSQL(NamedTuple):
    token: str
    consumes_bind: bool


OPERATOR_SQL: Dict[Operator, OperatorSQL] = {
    Operator.EQUAL: OperatorSQL("=", True),
    Operator.NOT_EQUAL: OperatorSQL("!=", True),
    Operator.IN: OperatorSQL("IN", True),
    Operator.NOT_IN: OperatorSQL("NOT IN", True),
    Operator.IS_NULL: OperatorSQL("IS NULL", False),
    Operator.IS_NOT_NULL: OperatorSQL("IS NOT NULL", False),
    Operator.EXISTS: OperatorSQL("EXISTS", False),
    Operator.NOT_EXISTS: OperatorSQL("NOT EXISTS", False),
    Operator.BETWEEN: OperatorSQL("BETWEEN", True),
    Operator.NOT_BETWEEN: OperatorSQL("NOT BETWEEN", True),
    Operator.LIKE: OperatorSQL("LIKE", True),
    Operator.NOT_LIKE: OperatorSQL("NOT LIKE", True),
    Operator.GREATER_THAN: OperatorSQL(">", True),
    Operator.GREATER_THAN_OR_EQUAL: OperatorSQL(">=", True),
    Operator.LESS_THAN: OperatorSQL("<", True),
    Operator.LESS_THAN_OR_EQUAL: OperatorSQL("<=", True),
    Operator.GREATER_OR_LESS_THAN: OperatorSQL("<>", True),
}

RANGE_OPERATORS = frozenset({Operator.BETWEEN, Operator.NOT_BETWEEN})


def operator_to_sql(operator: Union[Operator, str]) -> OperatorSQL:
    """Return the SQL token for ``operator`` and whether it consumes binds.

    Args:
        operator: Operator member or its stored string value

    Returns:
        OperatorSQL(token, consumes_bind)
    """
    return OPERATOR_SQL[Operator(operator)]
