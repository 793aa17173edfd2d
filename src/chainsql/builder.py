"""ChainBuilder: the root of a statement tree.

Example:
    >>> from chainsql import ChainBuilder
    >>>
    >>> builder = ChainBuilder("mysql").db("mydb").table("users").select()
    >>> builder.query().where_eq("name", "John").limit(10)
    >>> builder.to_sql()
    ('SELECT * FROM mydb.users WHERE name = ? LIMIT ?', ['John', 10])
"""

from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from pydantic import Field, PrivateAttr, field_validator

from chainsql.common import dialect_not_supported_error
from chainsql.compiler.factory import CompilerFactory, get_compiler
from chainsql.constants import Dialect, Method
from chainsql.query.builder import QueryBuilder
from chainsql.query.select import ColumnsSelect, RawSelect, SelectItem, SubSelect
from chainsql.types import ChainBaseModel, RawExpression, RawFragment


class ChainBuilder(ChainBaseModel):
    """Statement builder for one dialect.

    Mutators return ``self`` so calls can be chained. Nested builders
    passed to ``with_``, ``union``, ``select_builder`` or ``where_exists``
    are copied into this tree; changing them afterwards has no effect on
    this statement.

    Attributes:
        dialect: Target dialect, fixed per builder
        db_name: Optional database prefix for the table and joined tables
        table_name: Table the statement operates on
        raw_table: Raw table expression; takes precedence over table_name
        alias: Optional alias rendered after the table of a SELECT
        select_list: Select-list entries; empty means ``*``
        query_builder: WHERE / JOIN / common clauses / trailing SQL
        method: Statement kind
        payload: Row dict for insert/update, list of row dicts for insert_many
        is_distinct: Emit ``SELECT DISTINCT``
    """

    dialect: Dialect
    db_name: Optional[str] = None
    table_name: Optional[str] = None
    raw_table: Optional[RawFragment] = None
    alias: Optional[str] = None
    select_list: List[SelectItem] = Field(default_factory=list)
    query_builder: QueryBuilder = Field(default_factory=QueryBuilder)
    method: Method = Method.SELECT
    payload: Any = None
    is_distinct: bool = False

    _sql_str: Optional[str] = PrivateAttr(default=None)

    def __init__(self, dialect: Union[Dialect, str, None] = None, **data):
        """Create an empty SELECT builder.

        Args:
            dialect: Target dialect; defaults to the ``default_dialect``
                setting

        Raises:
            ChainSQLError: DIALECT_NOT_SUPPORTED when no compiler exists for
                the dialect
        """
        if dialect is None:
            from chainsql.settings import get_settings
            dialect = get_settings().default_dialect
        super().__init__(dialect=dialect, **data)

    @field_validator("dialect", mode="before")
    @classmethod
    def validate_dialect(cls, v: Any) -> Dialect:
        """Reject dialects without a compiler at construction or reassignment."""
        if not CompilerFactory.is_supported(v):
            raise dialect_not_supported_error(str(getattr(v, "value", v)))
        return Dialect(v)

    @property
    def sql_str(self) -> Optional[str]:
        """SQL text of the last ``to_sql()`` call, or None before the first."""
        return self._sql_str

    # Table

    def db(self, name: str) -> "ChainBuilder":
        self.db_name = name
        return self

    def table(self, name: str) -> "ChainBuilder":
        self.table_name = name
        return self

    def table_raw(self, sql: str, binds: Optional[List[Any]] = None) -> "ChainBuilder":
        """Use a raw table expression such as ``(SELECT ...) AS t``.

        Its binds are spliced at the position the table appears.
        """
        self.raw_table = RawFragment(sql, binds)
        return self

    def as_name(self, alias: str) -> "ChainBuilder":
        self.alias = alias
        return self

    def quote(self, identifier: str) -> str:
        """Quote ``identifier`` for this builder's dialect (backticks or double quotes)."""
        return get_compiler(self.dialect).quote_identifier(identifier)

    # Select list

    def select(self, columns: Union[str, List[str], SelectItem, None] = None) -> "ChainBuilder":
        """Make this a SELECT and append to the select list.

        Args:
            columns: Column name, list of column expressions, or a select
                item (``ColumnsSelect``, ``RawSelect``, ``SubSelect``);
                None selects ``*``

        Returns:
            self for chaining
        """
        self.method = Method.SELECT
        if columns is None:
            return self
        if isinstance(columns, str):
            columns = [columns]
        if isinstance(columns, (ColumnsSelect, RawSelect, SubSelect)):
            self.select_list.append(columns)
        else:
            self.select_list.append(ColumnsSelect(columns=list(columns)))
        return self

    def select_raw(self, sql: str, binds: Optional[List[Any]] = None) -> "ChainBuilder":
        return self.select(RawSelect(sql=sql, binds=list(binds or [])))

    def select_builder(self, alias: str, builder: "ChainBuilder") -> "ChainBuilder":
        """Select a nested statement as ``(<sql>) AS alias``."""
        return self.select(SubSelect(alias=alias, builder=builder))

    def select_distinct(self, columns: Union[str, List[str]]) -> "ChainBuilder":
        return self.distinct().select(columns)

    def select_alias(self, column: str, alias: str) -> "ChainBuilder":
        return self.select(f"{column} AS {alias}")

    def select_count(self, column: str = "*", alias: Optional[str] = None) -> "ChainBuilder":
        return self._select_aggregate("COUNT", column, alias)

    def select_sum(self, column: str, alias: Optional[str] = None) -> "ChainBuilder":
        return self._select_aggregate("SUM", column, alias)

    def select_avg(self, column: str, alias: Optional[str] = None) -> "ChainBuilder":
        return self._select_aggregate("AVG", column, alias)

    def select_max(self, column: str, alias: Optional[str] = None) -> "ChainBuilder":
        return self._select_aggregate("MAX", column, alias)

    def select_min(self, column: str, alias: Optional[str] = None) -> "ChainBuilder":
        return self._select_aggregate("MIN", column, alias)

    def _select_aggregate(self, function: str, column: str, alias: Optional[str]) -> "ChainBuilder":
        expression = f"{function}({column})"
        if alias:
            expression = f"{expression} AS {alias}"
        return self.select_raw(expression)

    def distinct(self) -> "ChainBuilder":
        self.is_distinct = True
        return self

    # Write methods

    def insert(self, row: Dict[str, Any]) -> "ChainBuilder":
        """Insert one row. Columns are emitted in sorted key order."""
        self.method = Method.INSERT
        self.payload = row
        return self

    def insert_many(self, rows: List[Dict[str, Any]]) -> "ChainBuilder":
        """Insert several rows.

        Columns are the sorted keys of the first row; every other row must
        have exactly the same keys.
        """
        self.method = Method.INSERT_MANY
        self.payload = rows
        return self

    def update(self, row: Dict[str, Any]) -> "ChainBuilder":
        """Update columns from ``row``; ``RawExpression`` values render as SQL."""
        self.method = Method.UPDATE
        self.payload = row
        return self

    def increment(self, column: str, amount: Union[int, float] = 1) -> "ChainBuilder":
        """UPDATE ``column = column + ?``, merged with any pending update payload."""
        return self._update_expression(column, RawExpression(f"{column} + ?", [amount]))

    def decrement(self, column: str, amount: Union[int, float] = 1) -> "ChainBuilder":
        return self._update_expression(column, RawExpression(f"{column} - ?", [amount]))

    def _update_expression(self, column: str, expression: RawExpression) -> "ChainBuilder":
        row = dict(self.payload) if self.method == Method.UPDATE and isinstance(self.payload, dict) else {}
        row[column] = expression
        return self.update(row)

    def delete(self) -> "ChainBuilder":
        self.method = Method.DELETE
        self.payload = None
        return self

    # Common clause shortcuts

    def with_(self, alias: str, builder: "ChainBuilder") -> "ChainBuilder":
        self.query_builder.with_(alias, builder)
        return self

    def with_recursive(self, alias: str, builder: "ChainBuilder") -> "ChainBuilder":
        self.query_builder.with_recursive(alias, builder)
        return self

    def union(self, builder: "ChainBuilder") -> "ChainBuilder":
        self.query_builder.union(builder)
        return self

    def union_all(self, builder: "ChainBuilder") -> "ChainBuilder":
        self.query_builder.union_all(builder)
        return self

    def query(self, configure: Optional[Callable[[QueryBuilder], Any]] = None) -> QueryBuilder:
        """Return the QueryBuilder holding WHERE, JOIN and common clauses.

        Args:
            configure: Optional callback applied to the QueryBuilder first

        Returns:
            The builder's QueryBuilder for further chaining
        """
        if configure is not None:
            configure(self.query_builder)
        return self.query_builder

    def add_raw(self, sql: str, binds: Optional[List[Any]] = None) -> "ChainBuilder":
        """Append verbatim SQL after every other clause."""
        self.query_builder.add_raw(sql, binds)
        return self

    # Compilation

    def to_sql(self) -> Tuple[str, List[Any]]:
        """Compile the statement.

        Compiling does not change the tree, so calling this twice returns
        equal results. The SQL text is cached in ``sql_str``.

        Returns:
            Tuple of (sql, binds) with one bind per ``?`` placeholder

        Raises:
            ChainSQLError: When the tree cannot be rendered as valid SQL
        """
        sql, binds = get_compiler(self.dialect).compile(self)
        self._sql_str = sql
        return sql, list(binds)
