"""Dialect-related constants."""

from enum import Enum


class Dialect(str, Enum):
    """Target SQL dialect of a compiled statement.

    A builder is bound to exactly one dialect when it is constructed and
    every nested builder it embeds must share it.

    Values:
        MYSQL: MySQL / MariaDB
            - ``LIMIT ? OFFSET ?`` with bound values
            - Backtick identifier quoting

        SQLITE: SQLite 3
            - ``LIMIT offset, count`` with inlined literals
            - Double-quote identifier quoting

        POSTGRES: PostgreSQL
            - Declared for configuration compatibility only; no compiler
              is registered, so selecting it fails at construction.
    """

    MYSQL = "mysql"
    SQLITE = "sqlite"
    POSTGRES = "postgres"
