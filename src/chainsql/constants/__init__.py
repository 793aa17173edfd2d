"""Constants module for chainsql.

This module contains all constant values and enumerations used throughout
chainsql. It has no dependencies on other chainsql modules, so every other
layer can import from it freely.

Organization:
    - dialect: Supported SQL dialects
    - sql: Operators, statement methods and join types
"""

from chainsql.constants.dialect import Dialect
from chainsql.constants.sql import JoinType, Method, Operator, SortDirection

__all__ = [
    "Dialect",
    "JoinType",
    "Method",
    "Operator",
    "SortDirection",
]
