from sqlhelpers.schema._reader import (
    parse_database_schema,
    parse_index_names,
    parse_index_schema,
    parse_table_names,
    parse_table_schema,
)
from sqlhelpers.schema._types import ColumnSchema, IndexSchema, TableSchema

__all__ = (
    "ColumnSchema",
    "IndexSchema",
    "TableSchema",
    "parse_database_schema",
    "parse_index_names",
    "parse_index_schema",
    "parse_table_names",
    "parse_table_schema",
)
