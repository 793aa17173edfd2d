from typing import Optional

from chainsql.compiler.base import EMPTY, BaseCompiler, Fragment
from chainsql.constants import Dialect


class MySQLCompiler(BaseCompiler):
    """Compiler for MySQL / MariaDB.

    LIMIT and OFFSET are bound parameters, so a statement's text does not
    change with the page requested.
    """

    dialect = Dialect.MYSQL
    identifier_quote = "`"

    def render_limit_offset(self, limit: Optional[int], offset: Optional[int]) -> Fragment:
        if limit is not None and offset is not None:
            return Fragment(" LIMIT ? OFFSET ?", [limit, offset])
        if limit is not None:
            return Fragment(" LIMIT ?", [limit])
        if offset is not None:
            return Fragment(" OFFSET ?", [offset])
        return EMPTY

    def render_empty_insert(self) -> str:
        return " () VALUES ()"

    def json_contains(self, column: str) -> str:
        return f"JSON_CONTAINS({column}, ?)"
