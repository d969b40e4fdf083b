from sqlhelpers.adapters.sqlite.core import create_mapped_exception
from sqlhelpers.adapters.sqlite.driver import SqliteConnection, SqliteCursor, SqliteExecutor

__all__ = ("SqliteConnection", "SqliteCursor", "SqliteExecutor", "create_mapped_exception")
