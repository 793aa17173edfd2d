"""Common clauses: WITH, UNION, LIMIT, OFFSET, GROUP BY, HAVING, ORDER BY.

Clauses are kept in one ordered list. The compiler walks it once and
accumulates each clause kind into its own fragment, so several entries of
the same kind merge (comma-joined CTEs, chained unions, one GROUP BY).
"""

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import Field, field_validator

from chainsql.common import validation_error
from chainsql.constants import SortDirection
from chainsql.query.conditions import copy_nested_builder
from chainsql.types import ChainBaseModel


class WithClause(ChainBaseModel):
    kind: Literal["with"] = "with"
    alias: str
    recursive: bool = False
    builder: Any

    @field_validator("builder")
    @classmethod
    def validate_builder(cls, v: Any) -> Any:
        return copy_nested_builder(v)


class UnionClause(ChainBaseModel):
    kind: Literal["union"] = "union"
    all: bool = False
    builder: Any

    @field_validator("builder")
    @classmethod
    def validate_builder(cls, v: Any) -> Any:
        return copy_nested_builder(v)


class LimitClause(ChainBaseModel):
    kind: Literal["limit"] = "limit"
    n: int = Field(..., ge=0)


class OffsetClause(ChainBaseModel):
    kind: Literal["offset"] = "offset"
    n: int = Field(..., ge=0)


class GroupByClause(ChainBaseModel):
    kind: Literal["group_by"] = "group_by"
    columns: List[str]


class GroupByRawClause(ChainBaseModel):
    kind: Literal["group_by_raw"] = "group_by_raw"
    sql: str
    binds: List[Any] = Field(default_factory=list)


class HavingClause(ChainBaseModel):
    kind: Literal["having"] = "having"
    sql: str
    binds: List[Any] = Field(default_factory=list)


class OrderByClause(ChainBaseModel):
    kind: Literal["order_by"] = "order_by"
    column: str
    direction: SortDirection = SortDirection.ASC

    @field_validator("direction", mode="before")
    @classmethod
    def normalize_direction(cls, v: Any) -> Any:
        """Accept ``asc``/``desc`` in any case."""
        if isinstance(v, str):
            return v.strip().upper()
        return v


class OrderByRawClause(ChainBaseModel):
    kind: Literal["order_by_raw"] = "order_by_raw"
    sql: str
    binds: List[Any] = Field(default_factory=list)


CommonClause = Annotated[
    Union[
        WithClause,
        UnionClause,
        LimitClause,
        OffsetClause,
        GroupByClause,
        GroupByRawClause,
        HavingClause,
        OrderByClause,
        OrderByRawClause,
    ],
    Field(discriminator="kind"),
]


class QueryCommon:
    """Mutators for the common-clause list. Each returns self."""

    def _push_clause(self, clause: ChainBaseModel):
        self.clauses.append(clause)
        return self

    def with_(self, alias: str, builder: Any):
        """Add ``alias AS (<builder>)`` to the WITH prologue.

        The builder is copied; later changes to it do not affect this
        statement.
        """
        return self._push_clause(WithClause(alias=alias, builder=builder))

    def with_recursive(self, alias: str, builder: Any):
        return self._push_clause(WithClause(alias=alias, recursive=True, builder=builder))

    def union(self, builder: Any):
        return self._push_clause(UnionClause(builder=builder))

    def union_all(self, builder: Any):
        return self._push_clause(UnionClause(all=True, builder=builder))

    def limit(self, n: int):
        """Set the row limit. The last call wins."""
        return self._push_clause(LimitClause(n=n))

    def offset(self, n: int):
        """Set the row offset. The last call wins."""
        return self._push_clause(OffsetClause(n=n))

    def group_by(self, columns: Union[str, List[str]]):
        if isinstance(columns, str):
            columns = [columns]
        return self._push_clause(GroupByClause(columns=list(columns)))

    def group_by_raw(self, sql: str, binds: Optional[List[Any]] = None):
        return self._push_clause(GroupByRawClause(sql=sql, binds=list(binds or [])))

    def order_by(self, column: str, direction: Union[SortDirection, str] = SortDirection.ASC):
        return self._push_clause(OrderByClause(column=column, direction=direction))

    def order_by_raw(self, sql: str, binds: Optional[List[Any]] = None):
        return self._push_clause(OrderByRawClause(sql=sql, binds=list(binds or [])))


class HavingClauses:
    """HAVING mutators. Fragments are combined with AND."""

    def having(self, column: str, operator: str, value: Any):
        """Append ``column operator ?`` binding ``value``.

        Args:
            column: Aggregate or column expression, e.g. ``COUNT(*)``
            operator: Comparison token such as ``>`` or ``=``
            value: Bound value

        Returns:
            self for chaining
        """
        self.clauses.append(HavingClause(sql=f"{column} {operator} ?", binds=[value]))
        return self

    def having_raw(self, sql: str, binds: Optional[List[Any]] = None):
        self.clauses.append(HavingClause(sql=sql, binds=list(binds or [])))
        return self

    def having_between(self, column: str, values: List[Any]):
        if len(values) != 2:
            raise validation_error(
                f"having_between on '{column}' requires exactly 2 values, got {len(values)}",
                field=column,
                value=values,
            )
        self.clauses.append(HavingClause(sql=f"{column} BETWEEN ? AND ?", binds=list(values)))
        return self

    def having_in(self, column: str, values: List[Any]):
        return self._having_membership(column, "IN", values)

    def having_not_in(self, column: str, values: List[Any]):
        return self._having_membership(column, "NOT IN", values)

    def _having_membership(self, column: str, token: str, values: List[Any]):
        if not values:
            raise validation_error(
                f"having {token} on '{column}' requires at least one value",
                field=column,
                value=values,
            )
        placeholders = ", ".join("?" for _ in values)
        self.clauses.append(HavingClause(sql=f"{column} {token} ({placeholders})", binds=list(values)))
        return self
