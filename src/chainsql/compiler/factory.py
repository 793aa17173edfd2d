"""Compiler Factory.

This module maps a dialect to its compiler. Dialects that are declared in
``Dialect`` but have no compiler are rejected here, which is what makes an
unsupported dialect a construction-time error for ChainBuilder rather
than a failure deep inside rendering.
"""

from typing import Dict, Type, Union

from chainsql.common import dialect_not_supported_error
from chainsql.compiler.base import BaseCompiler
from chainsql.compiler.mysql.compiler import MySQLCompiler
from chainsql.compiler.sqlite.compiler import SQLiteCompiler
from chainsql.constants import Dialect


class CompilerFactory:
    """Factory for creating dialect compilers.

    Compilers are configured from ``get_settings()`` at creation time.

    Example:
        >>> compiler = CompilerFactory.create(Dialect.SQLITE)
        >>> CompilerFactory.is_supported("postgres")
        False
    """

    _registry: Dict[Dialect, Type[BaseCompiler]] = {
        Dialect.MYSQL: MySQLCompiler,
        Dialect.SQLITE: SQLiteCompiler,
    }

    @staticmethod
    def is_supported(dialect: Union[Dialect, str]) -> bool:
        """Check whether a compiler exists for ``dialect``."""
        try:
            return Dialect(dialect) in CompilerFactory._registry
        except ValueError:
            return False

    @staticmethod
    def create(dialect: Union[Dialect, str]) -> BaseCompiler:
        """Create the compiler for ``dialect``.

        Args:
            dialect: Dialect member or its value (``"mysql"``, ``"sqlite"``)

        Returns:
            Compiler configured with the current settings

        Raises:
            ChainSQLError: DIALECT_NOT_SUPPORTED for unknown dialects and for
                declared dialects without a compiler
        """
        from chainsql.settings import get_settings

        if not CompilerFactory.is_supported(dialect):
            raise dialect_not_supported_error(
                str(getattr(dialect, "value", dialect)),
                details={"supported": [d.value for d in CompilerFactory._registry]},
            )
        compiler_cls = CompilerFactory._registry[Dialect(dialect)]
        return compiler_cls(get_settings())


def get_compiler(dialect: Union[Dialect, str]) -> BaseCompiler:
    """Get a compiler for ``dialect`` configured from the current settings.

    Example:
        >>> from chainsql.compiler import get_compiler
        >>> sql, binds = get_compiler("mysql").compile(builder)
    """
    return CompilerFactory.create(dialect)
