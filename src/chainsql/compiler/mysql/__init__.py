from chainsql.compiler.mysql.compiler import MySQLCompiler

__all__ = ["MySQLCompiler"]
