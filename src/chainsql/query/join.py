"""JOIN entries and their ON-condition trees.

Join conditions reuse the AND/OR composition of WHERE trees at a smaller
scope: leaves compare two columns (no bind), a column to a bound value,
or splice raw SQL, and ``or_()`` opens a nested OR branch.
"""

from typing import Annotated, Any, Callable, List, Literal, Optional, Union

from pydantic import Field

from chainsql.constants import JoinType
from chainsql.types import ChainBaseModel, RawFragment


class OnCondition(ChainBaseModel):
    """``left <operator> right`` comparing two columns."""

    kind: Literal["on"] = "on"
    left: str
    operator: str
    right: str


class OnValueCondition(ChainBaseModel):
    """``column <operator> ?`` with one bound value."""

    kind: Literal["on_value"] = "on_value"
    column: str
    operator: str
    value: Any = None


class OnRawCondition(ChainBaseModel):
    kind: Literal["on_raw"] = "on_raw"
    sql: str
    binds: List[Any] = Field(default_factory=list)


class JoinOrGroup(ChainBaseModel):
    """Nested ON conditions combined with OR relative to their siblings."""

    kind: Literal["or"] = "or"
    group: "JoinConditionGroup"


JoinNode = Annotated[
    Union[OnCondition, OnValueCondition, OnRawCondition, JoinOrGroup],
    Field(discriminator="kind"),
]


class OnClauses:
    """ON mutators shared by JoinBuilder and JoinConditionGroup."""

    def on(self, left: str, operator: str, right: str):
        """Append a column-to-column comparison and return self."""
        self.statements.append(OnCondition(left=left, operator=operator, right=right))
        return self

    def on_val(self, column: str, operator: str, value: Any):
        """Append ``column operator ?`` binding ``value`` and return self."""
        self.statements.append(OnValueCondition(column=column, operator=operator, value=value))
        return self

    def on_raw(self, sql: str, binds: Optional[List[Any]] = None):
        self.statements.append(OnRawCondition(sql=sql, binds=list(binds or [])))
        return self

    def or_(self) -> "JoinConditionGroup":
        """Open an OR branch of ON conditions and return it.

        The branch is always parenthesized when compiled:
        ``a.id = b.a_id OR (a.x = b.x AND a.y = b.y)``.
        """
        child = JoinConditionGroup()
        self.statements.append(JoinOrGroup(group=child))
        return child


class JoinConditionGroup(OnClauses, ChainBaseModel):
    statements: List[JoinNode] = Field(default_factory=list)


class JoinBuilder(OnClauses, ChainBaseModel):
    """One JOIN entry.

    Attributes:
        table: Joined table name; prefixed with the statement's database
            name when one is set
        join_type: Join keyword (``JOIN``, ``LEFT JOIN``, ...)
        alias: Optional table alias rendered as ``AS alias``
        statements: ON conditions
        raw: Verbatim join SQL that bypasses structured rendering
    """

    table: str = ""
    join_type: JoinType = JoinType.JOIN
    alias: Optional[str] = None
    statements: List[JoinNode] = Field(default_factory=list)
    raw: Optional[RawFragment] = None

    def as_name(self, alias: str) -> "JoinBuilder":
        self.alias = alias
        return self


class JoinMethods:
    """JOIN mutators for QueryBuilder.

    Each structured join returns the new JoinBuilder so ON conditions can
    be chained; ``configure`` receives the same JoinBuilder when given.
    """

    def _add_join(
        self,
        table: str,
        join_type: JoinType,
        configure: Optional[Callable[[JoinBuilder], Any]] = None,
    ) -> JoinBuilder:
        join = JoinBuilder(table=table, join_type=join_type)
        self.joins.append(join)
        if configure is not None:
            configure(join)
        return join

    def join(self, table: str, configure: Optional[Callable[[JoinBuilder], Any]] = None) -> JoinBuilder:
        return self._add_join(table, JoinType.JOIN, configure)

    def inner_join(self, table: str, configure: Optional[Callable[[JoinBuilder], Any]] = None) -> JoinBuilder:
        return self._add_join(table, JoinType.INNER, configure)

    def left_join(self, table: str, configure: Optional[Callable[[JoinBuilder], Any]] = None) -> JoinBuilder:
        return self._add_join(table, JoinType.LEFT, configure)

    def right_join(self, table: str, configure: Optional[Callable[[JoinBuilder], Any]] = None) -> JoinBuilder:
        return self._add_join(table, JoinType.RIGHT, configure)

    def left_outer_join(self, table: str, configure: Optional[Callable[[JoinBuilder], Any]] = None) -> JoinBuilder:
        return self._add_join(table, JoinType.LEFT_OUTER, configure)

    def right_outer_join(self, table: str, configure: Optional[Callable[[JoinBuilder], Any]] = None) -> JoinBuilder:
        return self._add_join(table, JoinType.RIGHT_OUTER, configure)

    def full_outer_join(self, table: str, configure: Optional[Callable[[JoinBuilder], Any]] = None) -> JoinBuilder:
        return self._add_join(table, JoinType.FULL_OUTER, configure)

    def cross_join(self, table: str, configure: Optional[Callable[[JoinBuilder], Any]] = None) -> JoinBuilder:
        return self._add_join(table, JoinType.CROSS, configure)

    def join_using(self, table: str, columns: List[str]):
        """Append ``JOIN table USING (col, ...)`` and return self."""
        return self.raw_join(f"JOIN {table} USING ({', '.join(columns)})")

    def raw_join(self, sql: str, binds: Optional[List[Any]] = None):
        """Append a verbatim join fragment and return self."""
        self.joins.append(JoinBuilder(join_type=JoinType.RAW, raw=RawFragment(sql, binds)))
        return self


JoinOrGroup.model_rebuild()
JoinConditionGroup.model_rebuild()
