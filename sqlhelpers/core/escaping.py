"""SQLite identifier and literal escaping.

Inline escaping exists for callers that assemble SQL text by hand. Statement
builders bind every value as a parameter instead and only use this module for
identifiers.
"""

import math
import re
from typing import Any, Final

from sqlhelpers.core.values import BLOB_TYPES, Raw, coerce_value
from sqlhelpers.exceptions import InvalidIdentifierError, UnsupportedValueTypeError

__all__ = (
    "SQLITE_KEYWORDS",
    "escape_identifier",
    "escape_string",
    "escape_value",
    "format_identifier",
    "needs_quoting",
    "unescape_identifier",
)

_PLAIN_IDENTIFIER: Final = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

SQLITE_KEYWORDS: Final[frozenset[str]] = frozenset({
    "ABORT", "ACTION", "ADD", "AFTER", "ALL", "ALTER", "ALWAYS", "ANALYZE", "AND", "AS", "ASC",
    "ATTACH", "AUTOINCREMENT", "BEFORE", "BEGIN", "BETWEEN", "BY", "CASCADE", "CASE", "CAST",
    "CHECK", "COLLATE", "COLUMN", "COMMIT", "CONFLICT", "CONSTRAINT", "CREATE", "CROSS",
    "CURRENT", "CURRENT_DATE", "CURRENT_TIME", "CURRENT_TIMESTAMP", "DATABASE", "DEFAULT",
    "DEFERRABLE", "DEFERRED", "DELETE", "DESC", "DETACH", "DISTINCT", "DO", "DROP", "EACH",
    "ELSE", "END", "ESCAPE", "EXCEPT", "EXCLUDE", "EXCLUSIVE", "EXISTS", "EXPLAIN", "FAIL",
    "FILTER", "FIRST", "FOLLOWING", "FOR", "FOREIGN", "FROM", "FULL", "GENERATED", "GLOB",
    "GROUP", "GROUPS", "HAVING", "IF", "IGNORE", "IMMEDIATE", "IN", "INDEX", "INDEXED",
    "INITIALLY", "INNER", "INSERT", "INSTEAD", "INTERSECT", "INTO", "IS", "ISNULL", "JOIN",
    "KEY", "LAST", "LEFT", "LIKE", "LIMIT", "MATCH", "MATERIALIZED", "NATURAL", "NO", "NOT",
    "NOTHING", "NOTNULL", "NULL", "NULLS", "OF", "OFFSET", "ON", "OR", "ORDER", "OTHERS",
    "OUTER", "OVER", "PARTITION", "PLAN", "PRAGMA", "PRECEDING", "PRIMARY", "QUERY", "RAISE",
    "RANGE", "RECURSIVE", "REFERENCES", "REGEXP", "REINDEX", "RELEASE", "RENAME", "REPLACE",
    "RESTRICT", "RETURNING", "RIGHT", "ROLLBACK", "ROW", "ROWS", "SAVEPOINT", "SELECT", "SET",
    "TABLE", "TEMP", "TEMPORARY", "THEN", "TIES", "TO", "TRANSACTION", "TRIGGER", "UNBOUNDED",
    "UNION", "UNIQUE", "UPDATE", "USING", "VACUUM", "VALUES", "VIEW", "VIRTUAL", "WHEN", "WHERE",
    "WINDOW", "WITH", "WITHOUT",
})  # fmt: skip


def _validate_identifier(name: Any) -> str:
    if not isinstance(name, str):
        msg = f"Identifier must be a string, got {type(name).__name__!r}"
        raise InvalidIdentifierError(name, msg)
    if not name:
        msg = "Identifier must not be empty"
        raise InvalidIdentifierError(name, msg)
    if "\x00" in name:
        msg = f"Identifier must not contain NUL characters: {name!r}"
        raise InvalidIdentifierError(name, msg)
    return name


def needs_quoting(name: str) -> bool:
    """Return True if ``name`` cannot appear bare in SQLite SQL text."""
    return not _PLAIN_IDENTIFIER.match(name) or name.upper() in SQLITE_KEYWORDS


def escape_identifier(name: str) -> str:
    """Quote an identifier, doubling embedded double quotes.

    Args:
        name: Table, column or index name.

    Raises:
        InvalidIdentifierError: If the name is empty or not a string.

    Returns:
        The double-quoted identifier.
    """
    normalized = _validate_identifier(name).replace('"', '""')
    return f'"{normalized}"'


def format_identifier(name: str, *, always_quote: bool = False) -> str:
    """Render an identifier, quoting it only when SQLite requires it.

    Plain names (letters, digits, underscores, not a keyword) are emitted
    as-is so generated statements stay readable; everything else goes through
    :func:`escape_identifier`.

    Raises:
        InvalidIdentifierError: If the name is empty or not a string.

    Returns:
        The identifier as it should appear in SQL text.
    """
    name = _validate_identifier(name)
    if always_quote or needs_quoting(name):
        return escape_identifier(name)
    return name


def unescape_identifier(text: str) -> str:
    """Recover the identifier from its bare or quoted SQL text."""
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        return text[1:-1].replace('""', '"')
    if len(text) >= 2 and text[0] == "[" and text[-1] == "]":
        return text[1:-1]
    if len(text) >= 2 and text[0] == "`" and text[-1] == "`":
        return text[1:-1].replace("``", "`")
    return text


def escape_string(value: str) -> str:
    """Render text as a single-quoted SQL literal."""
    escaped = value.replace("'", "''")
    return f"'{escaped}'"


def escape_value(value: Any) -> str:
    """Render a value as an inline SQLite literal.

    ``None`` and NaN render as ``NULL`` (SQLite stores NaN as NULL), booleans
    as ``1``/``0``, infinities as ``9e999``/``-9e999``, text with doubled
    quotes, blobs as ``X'..'`` hex literals. :class:`Raw` text is returned
    unchanged.

    Prefer binding parameters over this function for untrusted data.

    Raises:
        UnsupportedValueTypeError: If the value is outside the supported set.

    Returns:
        The literal SQL text.
    """
    value = coerce_value(value)
    if value is None:
        return "NULL"
    if isinstance(value, Raw):
        return value.sql
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        if math.isnan(value):
            return "NULL"
        if math.isinf(value):
            return "9e999" if value > 0 else "-9e999"
        return repr(value)
    if isinstance(value, str):
        return escape_string(value)
    if isinstance(value, BLOB_TYPES):
        return f"X'{bytes(value).hex()}'"
    raise UnsupportedValueTypeError(value)
