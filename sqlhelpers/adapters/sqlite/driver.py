"""SQLite execution collaborator built on the standard library driver."""

import contextlib
import os
import sqlite3
import tempfile
from collections.abc import Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Optional, Union

from sqlhelpers.adapters.sqlite.core import collect_rows, create_mapped_exception, resolve_rowcount
from sqlhelpers.utils.logging import get_logger

if TYPE_CHECKING:
    from types import TracebackType

    from sqlhelpers.core.parameters import ParameterSet

__all__ = ("SqliteConnection", "SqliteCursor", "SqliteExecutor")

logger = get_logger("adapters.sqlite")

SqliteConnection = sqlite3.Connection


class SqliteCursor:
    """Context manager for SQLite cursor management."""

    __slots__ = ("connection", "cursor")

    def __init__(self, connection: SqliteConnection) -> None:
        self.connection = connection
        self.cursor: Optional[sqlite3.Cursor] = None

    def __enter__(self) -> sqlite3.Cursor:
        self.cursor = self.connection.cursor()
        return self.cursor

    def __exit__(self, *_: Any) -> None:
        if self.cursor is not None:
            with contextlib.suppress(sqlite3.Error):
                self.cursor.close()


class SqliteExecutor:
    """Runs statements on a ``sqlite3`` connection.

    The connection is opened in autocommit mode, so every statement is
    committed as it runs. ``sqlite3`` errors are re-raised as
    :class:`~sqlhelpers.exceptions.EngineError` subclasses with the driver
    error as ``__cause__``.

    Example::

        with SqliteExecutor.in_memory() as executor:
            executor.execute("CREATE TABLE t (a)", ())
    """

    __slots__ = ("_connection", "_last_insert_id", "_remove_on_close", "path")

    def __init__(
        self,
        connection: SqliteConnection,
        *,
        path: "Optional[str]" = None,
        remove_on_close: bool = False,
    ) -> None:
        self._connection: Optional[SqliteConnection] = connection
        self._last_insert_id: Optional[int] = None
        self._remove_on_close = remove_on_close
        self.path = path

    @classmethod
    def open(cls, path: "Union[str, os.PathLike[str]]", **connect_kwargs: Any) -> "SqliteExecutor":
        """Open (creating if needed) a database file."""
        database = os.fspath(path)
        connect_kwargs.setdefault("isolation_level", None)
        with cls._handle_database_exceptions():
            connection = sqlite3.connect(database, **connect_kwargs)
        logger.debug("Opened SQLite database %s", database)
        return cls(connection, path=database)

    @classmethod
    def in_memory(cls, **connect_kwargs: Any) -> "SqliteExecutor":
        """Open a private in-memory database that disappears on close."""
        return cls.open(":memory:", **connect_kwargs)

    @classmethod
    def temporary(cls, **connect_kwargs: Any) -> "SqliteExecutor":
        """Open a database in a fresh file in the temp directory.

        The file is deleted when the executor is closed.
        """
        fd, path = tempfile.mkstemp(prefix="sqlhelpers-", suffix=".sqlite3")
        os.close(fd)
        try:
            executor = cls.open(path, **connect_kwargs)
        except Exception:
            with contextlib.suppress(OSError):
                os.remove(path)
            raise
        executor._remove_on_close = True
        return executor

    @staticmethod
    @contextmanager
    def _handle_database_exceptions() -> "Generator[None, None, None]":
        try:
            yield
        except sqlite3.Error as exc:
            raise create_mapped_exception(exc) from exc

    @property
    def connection(self) -> SqliteConnection:
        if self._connection is None:
            msg = "Executor is closed"
            raise sqlite3.ProgrammingError(msg)
        return self._connection

    @property
    def closed(self) -> bool:
        return self._connection is None

    def execute(self, sql: str, parameters: "ParameterSet" = ()) -> int:
        """Run a statement that returns no rows.

        The row id reported by :meth:`last_insert_id` is only recorded when
        the statement moved SQLite's last insert rowid. Inserts into
        ``WITHOUT ROWID`` tables, and statements that insert nothing, leave it
        as None.

        Returns:
            Number of affected rows, 0 for DDL.
        """
        self._last_insert_id = None
        with self._handle_database_exceptions(), SqliteCursor(self.connection) as cursor:
            previous_rowid = cursor.execute("SELECT last_insert_rowid()").fetchone()[0]
            cursor.execute(sql, parameters or ())
            rowid = cursor.lastrowid
            if rowid is not None and rowid != previous_rowid:
                self._last_insert_id = rowid
            return resolve_rowcount(cursor)

    def query(self, sql: str, parameters: "ParameterSet" = ()) -> "list[dict[str, Any]]":
        """Run a statement and return every row as a column-name keyed dict."""
        with self._handle_database_exceptions(), SqliteCursor(self.connection) as cursor:
            cursor.execute(sql, parameters or ())
            return collect_rows(cursor.fetchall(), cursor.description)

    def last_insert_id(self) -> "Optional[int]":
        """Row id of the row inserted by the most recent :meth:`execute`, or None."""
        return self._last_insert_id

    def close(self) -> None:
        """Close the connection, removing the database file if it is temporary. Safe to call twice."""
        if self._connection is None:
            return
        self._connection.close()
        self._connection = None
        if self._remove_on_close and self.path:
            with contextlib.suppress(FileNotFoundError):
                os.remove(self.path)
            logger.debug("Removed temporary SQLite database %s", self.path)

    def __enter__(self) -> "SqliteExecutor":
        return self

    def __exit__(
        self,
        exc_type: "Optional[type[BaseException]]",
        exc_val: "Optional[BaseException]",
        exc_tb: "Optional[TracebackType]",
    ) -> None:
        self.close()
