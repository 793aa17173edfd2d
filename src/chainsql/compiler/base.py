"""Dialect-independent statement compiler.

``BaseCompiler`` walks a ChainBuilder tree and renders it into SQL text
with ``?`` placeholders plus the positional bind list. Dialect compilers
only supply the fragments that differ between databases (LIMIT/OFFSET,
empty INSERT rows, JSON containment, identifier quoting).

Binds are always collected in the order their placeholders appear in the
emitted text. Every method below returns a ``Fragment`` and the caller
concatenates fragments in reading order, which is what keeps the two in
step.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, NamedTuple, Optional, Sequence

from opentelemetry.trace import Status, StatusCode

from chainsql.common import (
    dialect_mismatch_error,
    internal_consistency_error,
    invalid_condition_tree_error,
    missing_parameter_error,
    validation_error,
)
from chainsql.compiler.operators import RANGE_OPERATORS, operator_to_sql
from chainsql.constants import Dialect, JoinType, Method, Operator, SortDirection
from chainsql.logging import get_logger
from chainsql.settings import ChainSQLSettings
from chainsql.telemetry import get_tracer
from chainsql.types import RawExpression

if TYPE_CHECKING:
    from chainsql.builder import ChainBuilder

logger = get_logger(__name__)


class Fragment(NamedTuple):
    """A piece of SQL text and the binds for its placeholders."""

    sql: str
    binds: List[Any]


EMPTY = Fragment("", [])


def join_fragments(fragments: Sequence[Fragment], separator: str) -> Fragment:
    """Join fragment texts with ``separator`` and concatenate their binds."""
    binds: List[Any] = []
    for fragment in fragments:
        binds.extend(fragment.binds)
    return Fragment(separator.join(fragment.sql for fragment in fragments), binds)


@dataclass
class CommonParts:
    """Common clauses of one statement, accumulated per kind."""

    recursive: bool = False
    with_entries: List[Fragment] = field(default_factory=list)
    unions: List[Fragment] = field(default_factory=list)
    group_by: List[Fragment] = field(default_factory=list)
    having: List[Fragment] = field(default_factory=list)
    order_by: List[Fragment] = field(default_factory=list)
    limit: Optional[int] = None
    offset: Optional[int] = None


class BaseCompiler(ABC):
    """Base compiler shared by every dialect.

    A compiler is stateless apart from the settings it was created with,
    so one instance can compile any number of builders of its dialect.

    Attributes:
        dialect: Dialect rendered by this compiler
        identifier_quote: Character used by ``quote_identifier``
    """

    dialect: Dialect
    identifier_quote: str = '"'

    def __init__(self, settings: ChainSQLSettings):
        """Initialize the compiler.

        Args:
            settings: Runtime settings; ``update_expression_heuristic`` and
                ``log_compiled_sql`` are read from here
        """
        self.settings = settings

    # ------------------------------------------------------------------
    # Dialect hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def render_limit_offset(self, limit: Optional[int], offset: Optional[int]) -> Fragment:
        """Render the LIMIT/OFFSET tail, including its leading space.

        Args:
            limit: Row limit, or None when not set
            offset: Row offset, or None when not set

        Returns:
            Fragment; empty when neither value is set
        """
        pass

    @abstractmethod
    def render_empty_insert(self) -> str:
        """Return the text following ``INSERT INTO <table>`` for a row with no columns."""
        pass

    @abstractmethod
    def json_contains(self, column: str) -> str:
        """Return a condition testing that JSON ``column`` contains one bound value."""
        pass

    def quote_identifier(self, name: str) -> str:
        """Quote an identifier for this dialect, doubling embedded quotes."""
        quote = self.identifier_quote
        return f"{quote}{name.replace(quote, quote * 2)}{quote}"

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def compile(self, builder: "ChainBuilder") -> Fragment:
        """Compile a top-level statement.

        Runs inside a ``chainsql.compile`` span and emits one debug record.

        Args:
            builder: Statement to compile

        Returns:
            Fragment(sql, binds)

        Raises:
            ChainSQLError: On malformed payloads, operator arity violations,
                missing tables, invalid condition trees or dialect mismatches
        """
        tracer = get_tracer("chainsql")
        with tracer.start_as_current_span("chainsql.compile") as span:
            span.set_attribute("chainsql.dialect", self.dialect.value)
            span.set_attribute("chainsql.method", Method(builder.method).value)
            try:
                result = self.compile_statement(builder)
            except Exception as exc:
                span.record_exception(exc)
                span.set_status(Status(StatusCode.ERROR, str(exc)))
                raise
            span.set_attribute("chainsql.bind_count", len(result.binds))

        extra: Dict[str, Any] = {
            "dialect": self.dialect.value,
            "method": Method(builder.method).value,
            "bind_count": len(result.binds),
        }
        if self.settings.log_compiled_sql:
            extra["sql"] = result.sql
        logger.debug("Compiled statement", extra=extra)
        return result

    def compile_statement(self, builder: "ChainBuilder") -> Fragment:
        """Compile a statement without tracing; used for nested statements too."""
        query = builder.query_builder
        common = self.compile_common(query.clauses)

        parts: List[Fragment] = []
        if common.with_entries:
            keyword = "WITH RECURSIVE " if common.recursive else "WITH "
            entries = join_fragments(common.with_entries, ", ")
            parts.append(Fragment(f"{keyword}{entries.sql} ", entries.binds))

        parts.append(self.compile_method(builder))

        joins = self.compile_joins(builder)
        if joins.sql:
            parts.append(Fragment(f" {joins.sql}", joins.binds))

        where = self.compile_conditions(query.statements)
        if where.sql:
            parts.append(Fragment(f" WHERE {where.sql}", where.binds))

        for keyword, separator, fragments in (
            ("GROUP BY", ", ", common.group_by),
            ("HAVING", " AND ", common.having),
            ("ORDER BY", ", ", common.order_by),
        ):
            if fragments:
                clause = join_fragments(fragments, separator)
                parts.append(Fragment(f" {keyword} {clause.sql}", clause.binds))

        parts.append(self.render_limit_offset(common.limit, common.offset))

        for union in common.unions:
            parts.append(Fragment(f" {union.sql}", union.binds))

        for raw in query.raw_fragments:
            parts.append(Fragment(f" {raw.sql}", list(raw.binds)))

        return join_fragments(parts, "")

    def compile_nested(self, builder: "ChainBuilder", clause: str) -> Fragment:
        """Compile a nested statement after checking it targets this dialect."""
        if Dialect(builder.dialect) != self.dialect:
            raise dialect_mismatch_error(
                expected=self.dialect.value,
                actual=Dialect(builder.dialect).value,
                clause=clause,
            )
        return self.compile_statement(builder)

    # ------------------------------------------------------------------
    # Condition trees
    # ------------------------------------------------------------------

    def compile_conditions(self, statements: Sequence[Any]) -> Fragment:
        """Render one level of a WHERE condition tree.

        Nodes are joined with AND, except that an OR branch is joined with
        OR. A nested group is parenthesized only when it holds more than
        one node, and an empty group emits nothing. Nothing may follow an
        OR branch at the same level except another OR branch, because no
        connective is emitted after it.

        Args:
            statements: Condition nodes of one level

        Returns:
            Fragment for the level; empty when nothing was emitted

        Raises:
            ChainSQLError: INVALID_ARGUMENT for operator arity violations,
                INVALID_CONDITION_TREE for a node following an OR branch
        """
        sql_parts: List[str] = []
        binds: List[Any] = []
        after_or = False

        for position, node in enumerate(statements):
            if node.kind in ("and", "or"):
                child = self.compile_conditions(node.group.statements)
                if not child.sql:
                    continue
                text = f"({child.sql})" if len(node.group.statements) > 1 else child.sql
                fragment = Fragment(text, child.binds)
            else:
                fragment = self._compile_condition_leaf(node)

            # AND is never emitted after an OR branch, so a renderer that just
            # drops the connective would splice this node on with nothing
            # between (`a = ? OR b = ?c = ?`). Refuse the tree instead.
            if after_or and node.kind != "or":
                raise invalid_condition_tree_error(
                    "A condition cannot follow an OR branch at the same level; "
                    "add it inside the branch or wrap the branch with where_group()",
                    position=position,
                )

            if sql_parts:
                sql_parts.append(" OR " if node.kind == "or" else " AND ")
            sql_parts.append(fragment.sql)
            binds.extend(fragment.binds)
            after_or = node.kind == "or"

        return Fragment("".join(sql_parts), binds)

    def _compile_condition_leaf(self, node: Any) -> Fragment:
        if node.kind == "value":
            return self._compile_value_condition(node.column, node.operator, node.value)
        if node.kind == "raw":
            return Fragment(node.sql, list(node.binds))
        if node.kind == "exists":
            sub = self.compile_nested(node.builder, "EXISTS")
            keyword = "NOT EXISTS" if node.negated else "EXISTS"
            return Fragment(f"{keyword} ({sub.sql})", sub.binds)
        if node.kind == "json_contains":
            return Fragment(self.json_contains(node.column), [node.value])
        raise internal_consistency_error(
            f"Unknown condition node kind '{node.kind}'",
            details={"node": repr(node)},
        )

    def _compile_value_condition(self, column: str, operator: Any, value: Any) -> Fragment:
        token, consumes_bind = operator_to_sql(operator)
        text = f"{column} {token}"

        if Operator(operator) in RANGE_OPERATORS:
            if not isinstance(value, (list, tuple)) or len(value) != 2:
                raise validation_error(
                    f"{token} on '{column}' requires exactly 2 values",
                    field=column,
                    value=value,
                )
            return Fragment(f"{text} ? AND ?", list(value))

        if not consumes_bind:
            return Fragment(text, [])

        if isinstance(value, (list, tuple)):
            if not value:
                raise validation_error(
                    f"{token} on '{column}' requires at least one value",
                    field=column,
                    value=value,
                )
            placeholders = ",".join("?" for _ in value)
            return Fragment(f"{text} ({placeholders})", list(value))

        return Fragment(f"{text} ?", [value])

    # ------------------------------------------------------------------
    # Joins
    # ------------------------------------------------------------------

    def compile_joins(self, builder: "ChainBuilder") -> Fragment:
        """Render every JOIN entry, separated by a single space."""
        entries = [self._compile_join(builder, join) for join in builder.query_builder.joins]
        return join_fragments(entries, " ")

    def _compile_join(self, builder: "ChainBuilder", join: Any) -> Fragment:
        if join.raw is not None:
            return Fragment(join.raw.sql, list(join.raw.binds))

        table = f"{builder.db_name}.{join.table}" if builder.db_name else join.table
        header = f"{JoinType(join.join_type).value} {table}"
        if join.alias:
            header = f"{header} AS {join.alias}"

        conditions = self.compile_join_conditions(join.statements)
        if not conditions.sql:
            return Fragment(header, [])
        return Fragment(f"{header} ON {conditions.sql}", conditions.binds)

    def compile_join_conditions(self, statements: Sequence[Any]) -> Fragment:
        """Render ON conditions; OR branches are always parenthesized."""
        sql_parts: List[str] = []
        binds: List[Any] = []
        after_or = False

        for position, node in enumerate(statements):
            if node.kind == "or":
                child = self.compile_join_conditions(node.group.statements)
                if not child.sql:
                    continue
                fragment = Fragment(f"({child.sql})", child.binds)
            elif node.kind == "on":
                fragment = Fragment(f"{node.left} {node.operator} {node.right}", [])
            elif node.kind == "on_value":
                fragment = Fragment(f"{node.column} {node.operator} ?", [node.value])
            elif node.kind == "on_raw":
                fragment = Fragment(node.sql, list(node.binds))
            else:
                raise internal_consistency_error(
                    f"Unknown join condition kind '{node.kind}'",
                    details={"node": repr(node)},
                )

            # Same rule as compile_conditions: no connective follows an OR branch.
            if after_or and node.kind != "or":
                raise invalid_condition_tree_error(
                    "A join condition cannot follow an OR branch at the same level",
                    position=position,
                )

            if sql_parts:
                sql_parts.append(" OR " if node.kind == "or" else " AND ")
            sql_parts.append(fragment.sql)
            binds.extend(fragment.binds)
            after_or = node.kind == "or"

        return Fragment("".join(sql_parts), binds)

    # ------------------------------------------------------------------
    # Common clauses
    # ------------------------------------------------------------------

    def compile_common(self, clauses: Sequence[Any]) -> CommonParts:
        """Accumulate common clauses by kind in a single pass."""
        parts = CommonParts()
        for clause in clauses:
            if clause.kind == "with":
                sub = self.compile_nested(clause.builder, "WITH")
                parts.recursive = parts.recursive or clause.recursive
                parts.with_entries.append(Fragment(f"{clause.alias} AS ({sub.sql})", sub.binds))
            elif clause.kind == "union":
                sub = self.compile_nested(clause.builder, "UNION")
                keyword = "UNION ALL" if clause.all else "UNION"
                parts.unions.append(Fragment(f"{keyword} {sub.sql}", sub.binds))
            elif clause.kind == "limit":
                parts.limit = clause.n
            elif clause.kind == "offset":
                parts.offset = clause.n
            elif clause.kind == "group_by":
                parts.group_by.append(Fragment(", ".join(clause.columns), []))
            elif clause.kind == "group_by_raw":
                parts.group_by.append(Fragment(clause.sql, list(clause.binds)))
            elif clause.kind == "having":
                parts.having.append(Fragment(clause.sql, list(clause.binds)))
            elif clause.kind == "order_by":
                parts.order_by.append(Fragment(f"{clause.column} {SortDirection(clause.direction).value}", []))
            elif clause.kind == "order_by_raw":
                parts.order_by.append(Fragment(clause.sql, list(clause.binds)))
            else:
                raise internal_consistency_error(
                    f"Unknown clause kind '{clause.kind}'",
                    details={"clause": repr(clause)},
                )
        return parts

    # ------------------------------------------------------------------
    # Methods
    # ------------------------------------------------------------------

    def compile_method(self, builder: "ChainBuilder") -> Fragment:
        """Render the SELECT / INSERT / UPDATE / DELETE fragment."""
        method = Method(builder.method)
        if method == Method.SELECT:
            return self.compile_select(builder)
        if method == Method.INSERT:
            return self.compile_insert(builder)
        if method == Method.INSERT_MANY:
            return self.compile_insert_many(builder)
        if method == Method.UPDATE:
            return self.compile_update(builder)
        return self.compile_delete(builder)

    def compile_table(self, builder: "ChainBuilder") -> Fragment:
        """Resolve the statement's table: raw expression first, then ``[db.]table``."""
        if builder.raw_table is not None:
            return Fragment(builder.raw_table.sql, list(builder.raw_table.binds))
        if not builder.table_name:
            raise missing_parameter_error(
                "table",
                "Call table() or table_raw() before compiling.",
            )
        if builder.db_name:
            return Fragment(f"{builder.db_name}.{builder.table_name}", [])
        return Fragment(builder.table_name, [])

    def compile_select(self, builder: "ChainBuilder") -> Fragment:
        items: List[Fragment] = []
        for item in builder.select_list:
            if item.kind == "columns":
                if item.columns:
                    items.append(Fragment(", ".join(item.columns), []))
            elif item.kind == "raw":
                items.append(Fragment(item.sql, list(item.binds)))
            else:
                sub = self.compile_nested(item.builder, "sub-select")
                items.append(Fragment(f"({sub.sql}) AS {item.alias}", sub.binds))

        columns = join_fragments(items, ", ") if items else Fragment("*", [])
        table = self.compile_table(builder)
        distinct = "DISTINCT " if builder.is_distinct else ""
        sql = f"SELECT {distinct}{columns.sql} FROM {table.sql}"
        if builder.alias:
            sql = f"{sql} AS {builder.alias}"
        return Fragment(sql, columns.binds + table.binds)

    def compile_insert(self, builder: "ChainBuilder") -> Fragment:
        row = builder.payload
        if not isinstance(row, dict):
            raise validation_error(
                "insert() requires a dict payload",
                field="payload",
                value=row,
            )
        table = self.compile_table(builder)
        if not row:
            return Fragment(f"INSERT INTO {table.sql}{self.render_empty_insert()}", table.binds)

        columns = sorted(row)
        values = self._row_values(columns, row)
        return Fragment(
            f"INSERT INTO {table.sql} ({', '.join(columns)}) VALUES {values.sql}",
            table.binds + values.binds,
        )

    def compile_insert_many(self, builder: "ChainBuilder") -> Fragment:
        rows = builder.payload
        if not isinstance(rows, (list, tuple)) or not rows:
            raise validation_error(
                "insert_many() requires a non-empty list of dict rows",
                field="payload",
                value=rows,
            )
        for index, row in enumerate(rows):
            if not isinstance(row, dict) or not row:
                raise validation_error(
                    f"insert_many() row {index} must be a non-empty dict",
                    field="payload",
                    value=row,
                    details={"row_index": index},
                )

        columns = sorted(rows[0])
        expected = set(columns)
        for index, row in enumerate(rows[1:], start=1):
            keys = set(row)
            if keys != expected:
                raise validation_error(
                    f"insert_many() row {index} does not match the columns of row 0",
                    field="payload",
                    details={
                        "row_index": index,
                        "missing_keys": sorted(expected - keys),
                        "extra_keys": sorted(keys - expected),
                    },
                )

        table = self.compile_table(builder)
        values = join_fragments([self._row_values(columns, row) for row in rows], ", ")
        return Fragment(
            f"INSERT INTO {table.sql} ({', '.join(columns)}) VALUES {values.sql}",
            table.binds + values.binds,
        )

    def compile_update(self, builder: "ChainBuilder") -> Fragment:
        row = builder.payload
        if not isinstance(row, dict) or not row:
            raise validation_error(
                "update() requires a non-empty dict payload",
                field="payload",
                value=row,
            )
        table = self.compile_table(builder)
        assignments: List[Fragment] = []
        for column in sorted(row):
            value = self._lookup(column, row)
            if isinstance(value, RawExpression):
                assignments.append(Fragment(f"{column} = {value.sql}", list(value.binds)))
            elif self._is_legacy_expression(value):
                assignments.append(Fragment(f"{column} = {value}", []))
            else:
                assignments.append(Fragment(f"{column} = ?", [value]))

        sets = join_fragments(assignments, ", ")
        return Fragment(f"UPDATE {table.sql} SET {sets.sql}", table.binds + sets.binds)

    def compile_delete(self, builder: "ChainBuilder") -> Fragment:
        table = self.compile_table(builder)
        return Fragment(f"DELETE FROM {table.sql}", table.binds)

    def _row_values(self, columns: List[str], row: Dict[str, Any]) -> Fragment:
        placeholders: List[str] = []
        binds: List[Any] = []
        for column in columns:
            value = self._lookup(column, row)
            if isinstance(value, RawExpression):
                placeholders.append(value.sql)
                binds.extend(value.binds)
            else:
                placeholders.append("?")
                binds.append(value)
        return Fragment(f"({', '.join(placeholders)})", binds)

    @staticmethod
    def _lookup(column: str, row: Dict[str, Any]) -> Any:
        try:
            return row[column]
        except KeyError as exc:
            raise internal_consistency_error(
                f"Column '{column}' disappeared from its payload row",
                details={"key": column, "row": repr(row)},
                cause=exc,
            ) from exc

    def _is_legacy_expression(self, value: Any) -> bool:
        return (
            self.settings.update_expression_heuristic
            and isinstance(value, str)
            and (" + " in value or " - " in value)
        )
