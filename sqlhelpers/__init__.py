"""sqlhelpers: structured, escaped SQL statement building for SQLite."""

from sqlhelpers import adapters, builder, core, exceptions, schema, utils
from sqlhelpers.__metadata__ import __version__
from sqlhelpers.adapters.sqlite import SqliteExecutor
from sqlhelpers.builder import ColumnDefinition, StatementBuilder, sql
from sqlhelpers.config import DEFAULT_CONFIG, StatementConfig
from sqlhelpers.core import (
    ClauseSpec,
    MatchCondition,
    ParameterStyle,
    Raw,
    Statement,
    ValueKind,
    WhereClause,
    build_match_clause,
    escape_identifier,
    escape_string,
    escape_value,
    format_identifier,
    reconcile,
    unescape_identifier,
)
from sqlhelpers.driver import DatabaseHelper, SupportsLastInsertId, SyncExecutor
from sqlhelpers.exceptions import (
    EngineError,
    ParameterError,
    SchemaError,
    SQLBuilderError,
    SQLHelpersError,
    SQLParsingError,
)
from sqlhelpers.schema import ColumnSchema, IndexSchema, TableSchema

__all__ = (
    "DEFAULT_CONFIG",
    "ClauseSpec",
    "ColumnDefinition",
    "ColumnSchema",
    "DatabaseHelper",
    "EngineError",
    "IndexSchema",
    "MatchCondition",
    "ParameterError",
    "ParameterStyle",
    "Raw",
    "SQLBuilderError",
    "SQLHelpersError",
    "SQLParsingError",
    "SchemaError",
    "SqliteExecutor",
    "Statement",
    "StatementBuilder",
    "StatementConfig",
    "SupportsLastInsertId",
    "SyncExecutor",
    "TableSchema",
    "ValueKind",
    "WhereClause",
    "__version__",
    "adapters",
    "build_match_clause",
    "builder",
    "core",
    "escape_identifier",
    "escape_string",
    "escape_value",
    "exceptions",
    "format_identifier",
    "reconcile",
    "schema",
    "sql",
    "unescape_identifier",
    "utils",
)
