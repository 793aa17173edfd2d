"""Condition tree for WHERE clauses.

A condition tree is an ordered sequence of nodes scoped to one level.
Leaves compare a column to bound values or splice raw SQL; ``AndGroup``
and ``OrGroup`` nest a child sequence combined with AND / OR relative to
their siblings. Node order is significant for both the emitted SQL and
the positional order of bind values.
"""

from typing import Annotated, Any, Callable, List, Literal, Optional, Union

from pydantic import Field, field_validator

from chainsql.constants import Operator
from chainsql.types import ChainBaseModel


def copy_nested_builder(value: Any) -> Any:
    """Validate a nested ChainBuilder and take ownership of a copy."""
    from chainsql.builder import ChainBuilder

    if not isinstance(value, ChainBuilder):
        raise ValueError(f"Expected a ChainBuilder, got {type(value).__name__}")
    return value.model_copy(deep=True)


class ValueCondition(ChainBaseModel):
    """``column <operator> <value>`` with the value bound positionally."""

    kind: Literal["value"] = "value"
    column: str
    operator: Operator
    value: Any = None


class RawCondition(ChainBaseModel):
    """Verbatim SQL fragment with its own bind values."""

    kind: Literal["raw"] = "raw"
    sql: str
    binds: List[Any] = Field(default_factory=list)


class ExistsCondition(ChainBaseModel):
    """``[NOT ]EXISTS (<sub statement>)``.

    The sub statement is compiled with the enclosing statement's compiler,
    so its binds are spliced in place and its dialect is checked.
    """

    kind: Literal["exists"] = "exists"
    builder: Any
    negated: bool = False

    @field_validator("builder")
    @classmethod
    def validate_builder(cls, v: Any) -> Any:
        return copy_nested_builder(v)


class JsonContainsCondition(ChainBaseModel):
    """Dialect-specific test that a JSON document contains a value."""

    kind: Literal["json_contains"] = "json_contains"
    column: str
    value: Any = None


class AndGroup(ChainBaseModel):
    """Nested sequence combined with AND relative to its siblings."""

    kind: Literal["and"] = "and"
    group: "ConditionGroup"


class OrGroup(ChainBaseModel):
    """Nested sequence combined with OR relative to its siblings."""

    kind: Literal["or"] = "or"
    group: "ConditionGroup"


ConditionNode = Annotated[
    Union[ValueCondition, RawCondition, ExistsCondition, JsonContainsCondition, AndGroup, OrGroup],
    Field(discriminator="kind"),
]


class WhereClauses:
    """Fluent WHERE mutators shared by ConditionGroup and QueryBuilder.

    Every mutator appends exactly one node to ``self.statements`` and
    returns ``self`` unless documented otherwise. Subclasses provide the
    ``statements`` list.
    """

    def _push(self, node: ChainBaseModel):
        self.statements.append(node)
        return self

    def where_clause(self, column: str, operator: Union[Operator, str], value: Any = None):
        """Append a value comparison for any operator.

        Args:
            column: Column expression on the left-hand side
            operator: Operator member or its name (e.g. ``"GREATER_THAN"``)
            value: Bound value; a list for IN/NOT IN, a 2-element list for
                BETWEEN/NOT BETWEEN, ignored for IS NULL/EXISTS-style operators

        Returns:
            self for chaining
        """
        return self._push(ValueCondition(column=column, operator=Operator(operator), value=value))

    def where_eq(self, column: str, value: Any):
        return self.where_clause(column, Operator.EQUAL, value)

    def where_ne(self, column: str, value: Any):
        return self.where_clause(column, Operator.NOT_EQUAL, value)

    def where_in(self, column: str, values: List[Any]):
        return self.where_clause(column, Operator.IN, list(values))

    def where_not_in(self, column: str, values: List[Any]):
        return self.where_clause(column, Operator.NOT_IN, list(values))

    def where_null(self, column: str):
        return self.where_clause(column, Operator.IS_NULL)

    def where_not_null(self, column: str):
        return self.where_clause(column, Operator.IS_NOT_NULL)

    def where_between(self, column: str, values: List[Any]):
        """Append ``column BETWEEN ? AND ?``; ``values`` must hold exactly two items."""
        return self.where_clause(column, Operator.BETWEEN, values)

    def where_not_between(self, column: str, values: List[Any]):
        return self.where_clause(column, Operator.NOT_BETWEEN, values)

    def where_like(self, column: str, value: Any):
        return self.where_clause(column, Operator.LIKE, value)

    def where_not_like(self, column: str, value: Any):
        return self.where_clause(column, Operator.NOT_LIKE, value)

    def where_gt(self, column: str, value: Any):
        return self.where_clause(column, Operator.GREATER_THAN, value)

    def where_gte(self, column: str, value: Any):
        return self.where_clause(column, Operator.GREATER_THAN_OR_EQUAL, value)

    def where_lt(self, column: str, value: Any):
        return self.where_clause(column, Operator.LESS_THAN, value)

    def where_lte(self, column: str, value: Any):
        return self.where_clause(column, Operator.LESS_THAN_OR_EQUAL, value)

    def where_ltgt(self, column: str, value: Any):
        return self.where_clause(column, Operator.GREATER_OR_LESS_THAN, value)

    def where_raw(self, sql: str, binds: Optional[List[Any]] = None):
        """Append a verbatim fragment. Its placeholders must match ``binds``."""
        return self._push(RawCondition(sql=sql, binds=list(binds or [])))

    def where_column(self, lhs: str, operator: str, rhs: str):
        """Compare two columns, e.g. ``where_column("a.id", "=", "b.a_id")``."""
        return self.where_raw(f"{lhs} {operator} {rhs}")

    def where_ilike(self, column: str, value: Any):
        """Case-insensitive LIKE rendered as ``LOWER(column) LIKE LOWER(?)``."""
        return self.where_raw(f"LOWER({column}) LIKE LOWER(?)", [value])

    def where_exists(self, builder: Any):
        return self._push(ExistsCondition(builder=builder))

    def where_not_exists(self, builder: Any):
        return self._push(ExistsCondition(builder=builder, negated=True))

    def where_json_contains(self, column: str, value: Any):
        """Test that the JSON document in ``column`` contains ``value``.

        MySQL renders ``JSON_CONTAINS(column, ?)``; SQLite renders an
        ``EXISTS`` over ``json_each(column)``.
        """
        return self._push(JsonContainsCondition(column=column, value=value))

    def and_(self) -> "ConditionGroup":
        """Open a nested AND group and return it for further mutation."""
        child = ConditionGroup()
        self.statements.append(AndGroup(group=child))
        return child

    def or_(self) -> "ConditionGroup":
        """Open an OR branch and return it for further mutation.

        ``q.where_eq("status", "active").or_().where_eq("status", "pending")``
        compiles to ``status = ? OR status = ?``.
        """
        child = ConditionGroup()
        self.statements.append(OrGroup(group=child))
        return child

    def where_group(self, configure: Callable[["ConditionGroup"], Any]):
        """Build a parenthesized AND group through ``configure`` and return self."""
        configure(self.and_())
        return self

    def or_where_group(self, configure: Callable[["ConditionGroup"], Any]):
        """Build an OR branch through ``configure`` and return self."""
        configure(self.or_())
        return self


class ConditionGroup(WhereClauses, ChainBaseModel):
    """One level of a condition tree."""

    statements: List[ConditionNode] = Field(default_factory=list)


AndGroup.model_rebuild()
OrGroup.model_rebuild()
ConditionGroup.model_rebuild()
