"""SQLite adapter helpers: error mapping and result collection."""

import sqlite3
from typing import Any, Optional, cast

from sqlhelpers.exceptions import (
    CheckViolationError,
    DatabaseLockedError,
    EngineError,
    EngineSyntaxError,
    ForeignKeyViolationError,
    IntegrityError,
    NotNullViolationError,
    OperationalError,
    UniqueViolationError,
)
from sqlhelpers.utils.type_guards import has_sqlite_error

__all__ = ("collect_rows", "create_mapped_exception", "resolve_rowcount")

SQLITE_ERROR_CODE = 1
SQLITE_BUSY_CODE = 5
SQLITE_LOCKED_CODE = 6
SQLITE_IOERR_CODE = 10
SQLITE_CANTOPEN_CODE = 14
SQLITE_CONSTRAINT_CODE = 19
SQLITE_CONSTRAINT_CHECK_CODE = 275
SQLITE_CONSTRAINT_FOREIGNKEY_CODE = 787
SQLITE_CONSTRAINT_NOTNULL_CODE = 1299
SQLITE_CONSTRAINT_PRIMARYKEY_CODE = 1555
SQLITE_CONSTRAINT_UNIQUE_CODE = 2067


def _create_sqlite_error(
    error: Any, code: "Optional[int]", error_class: "type[EngineError]", description: str
) -> EngineError:
    """Create a package exception from a SQLite error.

    Args:
        error: The original SQLite exception
        code: SQLite extended error code
        error_class: The exception class to instantiate
        description: Human-readable description of the error type

    Returns:
        A new exception instance with the original as its cause
    """
    code_str = f"[code {code}]" if code else ""
    msg = f"SQLite {description} {code_str}: {error}" if code_str else f"SQLite {description}: {error}"
    exc = error_class(msg)
    exc.__cause__ = cast("BaseException", error)
    return exc


def _map_by_message(error: BaseException, error_msg: str, code: "Optional[int]" = None) -> EngineError:
    if "unique constraint" in error_msg:
        return _create_sqlite_error(error, code, UniqueViolationError, "unique constraint violation")
    if "foreign key constraint" in error_msg:
        return _create_sqlite_error(error, code, ForeignKeyViolationError, "foreign key constraint violation")
    if "not null constraint" in error_msg:
        return _create_sqlite_error(error, code, NotNullViolationError, "not-null constraint violation")
    if "check constraint" in error_msg:
        return _create_sqlite_error(error, code, CheckViolationError, "check constraint violation")
    if isinstance(error, sqlite3.IntegrityError):
        return _create_sqlite_error(error, code, IntegrityError, "integrity constraint violation")
    if "syntax error" in error_msg or "incomplete input" in error_msg:
        return _create_sqlite_error(error, code, EngineSyntaxError, "SQL syntax error")
    if isinstance(error, sqlite3.OperationalError):
        return _create_sqlite_error(error, code, OperationalError, "operational error")
    return _create_sqlite_error(error, code, EngineError, "database error")


def create_mapped_exception(error: BaseException) -> EngineError:
    """Map SQLite exceptions to the package's engine error hierarchy.

    This is a factory function that returns an exception instance rather than
    raising, so it can be used from ``except`` blocks and ``__exit__``
    handlers alike.

    Mapping priority:
    1. SQLite extended error codes (Python 3.11+)
    2. Error message patterns and the ``sqlite3`` exception class
    3. Plain EngineError fallback

    Args:
        error: The SQLite exception to map

    Returns:
        An EngineError subclass instance that wraps the original error
    """
    error_msg = str(error).lower()
    if not has_sqlite_error(error):
        if "locked" in error_msg or "busy" in error_msg:
            return _create_sqlite_error(error, None, DatabaseLockedError, "database locked")
        return _map_by_message(error, error_msg)

    sqlite_error = cast("sqlite3.Error", error)
    error_code: int = sqlite_error.sqlite_errorcode
    primary_code = error_code & 0xFF

    # SQLITE_BUSY: another connection holds a lock on the file; SQLITE_LOCKED: a conflict within this connection
    if primary_code in {SQLITE_BUSY_CODE, SQLITE_LOCKED_CODE}:
        return _create_sqlite_error(error, error_code, DatabaseLockedError, "database locked")

    if error_code == SQLITE_CONSTRAINT_UNIQUE_CODE or error_code == SQLITE_CONSTRAINT_PRIMARYKEY_CODE:
        return _create_sqlite_error(error, error_code, UniqueViolationError, "unique constraint violation")
    if error_code == SQLITE_CONSTRAINT_FOREIGNKEY_CODE:
        return _create_sqlite_error(error, error_code, ForeignKeyViolationError, "foreign key constraint violation")
    if error_code == SQLITE_CONSTRAINT_NOTNULL_CODE:
        return _create_sqlite_error(error, error_code, NotNullViolationError, "not-null constraint violation")
    if error_code == SQLITE_CONSTRAINT_CHECK_CODE:
        return _create_sqlite_error(error, error_code, CheckViolationError, "check constraint violation")
    if primary_code == SQLITE_CONSTRAINT_CODE:
        return _create_sqlite_error(error, error_code, IntegrityError, "integrity constraint violation")

    if primary_code in {SQLITE_CANTOPEN_CODE, SQLITE_IOERR_CODE}:
        return _create_sqlite_error(error, error_code, OperationalError, "operational error")

    if primary_code == SQLITE_ERROR_CODE and ("syntax error" in error_msg or "incomplete input" in error_msg):
        return _create_sqlite_error(error, error_code, EngineSyntaxError, "SQL syntax error")

    return _map_by_message(error, error_msg, error_code)


def resolve_rowcount(cursor: Any) -> int:
    """Resolve rowcount from a SQLite cursor.

    Args:
        cursor: SQLite cursor with optional rowcount metadata.

    Returns:
        Positive rowcount value or 0 when unknown, as for DDL statements.
    """
    try:
        rowcount = cursor.rowcount
    except AttributeError:
        return 0
    if isinstance(rowcount, int) and rowcount > 0:
        return rowcount
    return 0


def collect_rows(fetched_data: "list[Any]", description: Any) -> "list[dict[str, Any]]":
    """Turn fetched SQLite rows into column-name keyed dicts.

    Args:
        fetched_data: Raw rows from cursor.fetchall()
        description: Cursor description (tuple of tuples)

    Returns:
        One dict per row, keys in column order.
    """
    if not description:
        return []
    column_names = [col[0] for col in description]
    return [dict(zip(column_names, row)) for row in fetched_data]
