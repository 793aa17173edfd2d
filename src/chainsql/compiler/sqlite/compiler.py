from typing import Optional

from chainsql.compiler.base import EMPTY, BaseCompiler, Fragment
from chainsql.constants import Dialect


class SQLiteCompiler(BaseCompiler):
    """Compiler for SQLite.

    LIMIT and OFFSET are inlined as integer literals using the
    ``LIMIT offset, count`` form; they contribute no binds. An offset
    without a limit uses ``-1`` (no upper bound) as the count.
    """

    dialect = Dialect.SQLITE
    identifier_quote = '"'

    def render_limit_offset(self, limit: Optional[int], offset: Optional[int]) -> Fragment:
        if limit is not None and offset is not None:
            return Fragment(f" LIMIT {int(offset)}, {int(limit)}", [])
        if limit is not None:
            return Fragment(f" LIMIT {int(limit)}", [])
        if offset is not None:
            return Fragment(f" LIMIT {int(offset)}, -1", [])
        return EMPTY

    def render_empty_insert(self) -> str:
        return " DEFAULT VALUES"

    def json_contains(self, column: str) -> str:
        return f"EXISTS (SELECT 1 FROM json_each({column}) WHERE json_each.value = ?)"
