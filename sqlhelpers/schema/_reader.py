"""Turn raw catalog rows into schema values.

The functions here are pure: they accept rows already fetched by an
execution collaborator (``PRAGMA table_info``, ``PRAGMA index_list``,
``PRAGMA index_info`` and ``sqlite_master`` listings) as mappings keyed by
column name.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Optional, Union

from sqlhelpers.exceptions import CorruptSchemaError, TableNotFoundError
from sqlhelpers.schema._types import ColumnSchema, IndexSchema, TableSchema
from sqlhelpers.utils.logging import get_logger

__all__ = (
    "parse_database_schema",
    "parse_index_names",
    "parse_index_schema",
    "parse_table_names",
    "parse_table_schema",
)

logger = get_logger("schema")

Row = Mapping[str, Any]
NameRow = Union[str, Row]

INTERNAL_TABLE_PREFIX = "sqlite_"


def _require_mapping(row: Any, what: str) -> Row:
    if not isinstance(row, Mapping):
        msg = f"Malformed {what} row: expected a mapping, got {type(row).__name__!r}"
        raise CorruptSchemaError(msg)
    return row


def _name_of(row: NameRow, what: str) -> str:
    if isinstance(row, str):
        return row
    row = _require_mapping(row, what)
    name = row.get("name")
    if not isinstance(name, str) or not name:
        msg = f"Malformed {what} row without a name: {dict(row)!r}"
        raise CorruptSchemaError(msg)
    return name


def _int_field(row: Row, key: str, default: int = 0) -> int:
    value = row.get(key, default)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        msg = f"Malformed catalog row: {key!r} is not an integer: {value!r}"
        raise CorruptSchemaError(msg) from exc


def _column_from_row(table_name: str, row: Row) -> ColumnSchema:
    name = _name_of(row, f"column of table {table_name!r}")
    default = row.get("dflt_value")
    return ColumnSchema(
        name=name,
        type=row.get("type") or "",
        not_null=bool(_int_field(row, "notnull")),
        default=None if default is None else str(default),
        primary_key_position=_int_field(row, "pk"),
    )


def parse_table_schema(table_name: str, rows: "Iterable[Row]") -> TableSchema:
    """Build a TableSchema from ``PRAGMA table_info`` rows.

    Args:
        table_name: Table the rows describe.
        rows: Rows with ``cid``, ``name``, ``type``, ``notnull``,
            ``dflt_value`` and ``pk`` entries.

    Raises:
        TableNotFoundError: If there are no rows, which is how SQLite reports
            an unknown table.
        CorruptSchemaError: If a row has no column name.

    Returns:
        The table schema with columns ordered by ``cid``.
    """
    row_list = [_require_mapping(row, f"column of table {table_name!r}") for row in rows]
    if not row_list:
        raise TableNotFoundError(table_name)
    ordered = sorted(enumerate(row_list), key=lambda item: (_int_field(item[1], "cid", item[0]), item[0]))
    columns = tuple(_column_from_row(table_name, row) for _, row in ordered)
    return TableSchema(name=table_name, columns=columns)


def parse_table_names(rows: "Iterable[NameRow]") -> "frozenset[str]":
    """Collect user table names, leaving out SQLite's internal ``sqlite_`` tables."""
    names = (_name_of(row, "table") for row in rows)
    return frozenset(name for name in names if not name.startswith(INTERNAL_TABLE_PREFIX))


def parse_database_schema(
    table_rows: "Iterable[NameRow]", per_table_rows: "Mapping[str, Sequence[Row]]"
) -> "dict[str, TableSchema]":
    """Build the schema of every listed table.

    Args:
        table_rows: Table listing, as mappings with a ``name`` or plain names.
        per_table_rows: ``PRAGMA table_info`` rows for each listed table.

    Raises:
        CorruptSchemaError: If a listed table has no column rows.

    Returns:
        Table schemas keyed by name, in listing order.
    """
    schemas: dict[str, TableSchema] = {}
    for row in table_rows:
        table_name = _name_of(row, "table")
        columns = per_table_rows.get(table_name)
        if not columns:
            msg = f"Table {table_name!r} is listed in the catalog but has no columns"
            raise CorruptSchemaError(msg)
        schemas[table_name] = parse_table_schema(table_name, columns)
    logger.debug("Parsed schema of %d tables", len(schemas))
    return schemas


def parse_index_names(rows: "Iterable[NameRow]") -> "list[str]":
    """Project index names from ``PRAGMA index_list`` rows, keeping catalog order."""
    return [_name_of(row, "index") for row in rows]


def parse_index_schema(index_row: Row, info_rows: "Iterable[Row]", table_name: str) -> IndexSchema:
    """Build an IndexSchema from one ``PRAGMA index_list`` row and its ``PRAGMA index_info`` rows.

    Expression columns, reported with a null name, are skipped.

    Raises:
        CorruptSchemaError: If the index row has no name.

    Returns:
        The index schema with columns ordered by ``seqno``.
    """
    name = _name_of(index_row, f"index of table {table_name!r}")
    checked = [_require_mapping(row, f"column of index {name!r}") for row in info_rows]
    info = sorted(enumerate(checked), key=lambda item: (_int_field(item[1], "seqno", item[0]), item[0]))
    columns = tuple(row["name"] for _, row in info if row.get("name") is not None)
    origin: Optional[str] = index_row.get("origin")
    return IndexSchema(
        name=name,
        table=table_name,
        columns=columns,
        unique=bool(_int_field(index_row, "unique")),
        origin=origin or "c",
    )
