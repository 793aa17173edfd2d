"""Dialect compilers for chainsql statement trees.

Module Structure:
    - base.py: BaseCompiler with the shared recursive algorithm
    - operators.py: Operator to SQL token mapping
    - factory.py: CompilerFactory and get_compiler
    - mysql/: MySQL compiler (bound LIMIT/OFFSET)
    - sqlite/: SQLite compiler (inlined LIMIT offset, count)
"""

from chainsql.compiler.base import BaseCompiler, Fragment
from chainsql.compiler.factory import CompilerFactory, get_compiler
from chainsql.compiler.mysql import MySQLCompiler
from chainsql.compiler.operators import OperatorSQL, operator_to_sql
from chainsql.compiler.sqlite import SQLiteCompiler

__all__ = [
    "BaseCompiler",
    "Fragment",
    "CompilerFactory",
    "get_compiler",
    "MySQLCompiler",
    "SQLiteCompiler",
    "OperatorSQL",
    "operator_to_sql",
]
