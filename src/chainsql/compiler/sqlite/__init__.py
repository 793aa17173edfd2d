from chainsql.compiler.sqlite.compiler import SQLiteCompiler

__all__ = ["SQLiteCompiler"]
