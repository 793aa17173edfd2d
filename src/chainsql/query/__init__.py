"""Statement tree model and its fluent mutators.

The models in this package only describe a statement; rendering lives in
``chainsql.compiler``.
"""

from chainsql.query.builder import QueryBuilder
from chainsql.query.common import (
    CommonClause,
    GroupByClause,
    GroupByRawClause,
    HavingClause,
    LimitClause,
    OffsetClause,
    OrderByClause,
    OrderByRawClause,
    UnionClause,
    WithClause,
)
from chainsql.query.conditions import (
    AndGroup,
    ConditionGroup,
    ConditionNode,
    ExistsCondition,
    JsonContainsCondition,
    OrGroup,
    RawCondition,
    ValueCondition,
)
from chainsql.query.join import (
    JoinBuilder,
    JoinConditionGroup,
    JoinOrGroup,
    OnCondition,
    OnRawCondition,
    OnValueCondition,
)
from chainsql.query.select import ColumnsSelect, RawSelect, SelectItem, SubSelect

__all__ = [
    "QueryBuilder",
    # Conditions
    "ConditionGroup",
    "ConditionNode",
    "ValueCondition",
    "RawCondition",
    "ExistsCondition",
    "JsonContainsCondition",
    "AndGroup",
    "OrGroup",
    # Joins
    "JoinBuilder",
    "JoinConditionGroup",
    "JoinOrGroup",
    "OnCondition",
    "OnValueCondition",
    "OnRawCondition",
    # Select list
    "SelectItem",
    "ColumnsSelect",
    "RawSelect",
    "SubSelect",
    # Common clauses
    "CommonClause",
    "WithClause",
    "UnionClause",
    "LimitClause",
    "OffsetClause",
    "GroupByClause",
    "GroupByRawClause",
    "HavingClause",
    "OrderByClause",
    "OrderByRawClause",
]
