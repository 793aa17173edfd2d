"""chainsql: a SQL statement builder with per-dialect compilers.

Build a statement tree with ChainBuilder and compile it into SQL text with
``?`` placeholders plus an ordered bind list:

    >>> from chainsql import ChainBuilder
    >>> builder = ChainBuilder("sqlite").table("users").select(["id", "name"])
    >>> builder.query().where_eq("status", "active").limit(10).offset(20)
    >>> builder.to_sql()
    ('SELECT id, name FROM users WHERE status = ? LIMIT 20, 10', ['active'])
"""

from chainsql.__version__ import __version__
from chainsql.builder import ChainBuilder
from chainsql.common import ChainSQLError, ErrorCode
from chainsql.compiler import get_compiler
from chainsql.constants import Dialect, JoinType, Method, Operator, SortDirection
from chainsql.query import ConditionGroup, JoinBuilder, QueryBuilder
from chainsql.types import RawExpression

__all__ = [
    "__version__",
    "ChainBuilder",
    "QueryBuilder",
    "ConditionGroup",
    "JoinBuilder",
    "RawExpression",
    "get_compiler",
    # Enums
    "Dialect",
    "JoinType",
    "Method",
    "Operator",
    "SortDirection",
    # Errors
    "ChainSQLError",
    "ErrorCode",
]
