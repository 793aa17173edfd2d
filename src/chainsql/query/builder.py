from typing import Any, List, Optional

from pydantic import Field

from chainsql.query.common import CommonClause, HavingClauses, QueryCommon
from chainsql.query.conditions import ConditionNode, WhereClauses
from chainsql.query.join import JoinBuilder, JoinMethods
from chainsql.types import ChainBaseModel, RawFragment


class QueryBuilder(WhereClauses, JoinMethods, QueryCommon, HavingClauses, ChainBaseModel):
    """Everything after the method fragment of a statement.

    Attributes:
        statements: WHERE condition tree (top level)
        joins: JOIN entries in the order they were added
        clauses: Common clauses (WITH, UNION, LIMIT, ...)
        raw_fragments: Trailing SQL appended after everything else
    """

    statements: List[ConditionNode] = Field(default_factory=list)
    joins: List[JoinBuilder] = Field(default_factory=list)
    clauses: List[CommonClause] = Field(default_factory=list)
    raw_fragments: List[RawFragment] = Field(default_factory=list)

    def add_raw(self, sql: str, binds: Optional[List[Any]] = None) -> "QueryBuilder":
        """Append trailing SQL such as ``FOR UPDATE``."""
        self.raw_fragments.append(RawFragment(sql, binds))
        return self
