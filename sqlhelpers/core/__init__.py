"""Pure statement-building core: escaping, values, clauses and parameter binding."""

from sqlhelpers.core.clauses import (
    MATCH_NOTHING,
    ClauseSpec,
    ClauseText,
    MatchCondition,
    MatchInput,
    WhereClause,
    build_assignments,
    build_clause_tail,
    build_match_clause,
    normalize_conditions,
    normalize_pairs,
    render_clause_text,
    resolve_where,
)
from sqlhelpers.core.escaping import (
    SQLITE_KEYWORDS,
    escape_identifier,
    escape_string,
    escape_value,
    format_identifier,
    needs_quoting,
    unescape_identifier,
)
from sqlhelpers.core.parameters import (
    ParameterSet,
    ParameterStyle,
    PlaceholderInfo,
    detect_parameter_style,
    extract_placeholders,
    reconcile,
)
from sqlhelpers.core.statement import DIALECT, Statement
from sqlhelpers.core.values import BLOB_TYPES, Raw, SQLValue, ValueKind, coerce_value, is_raw, value_kind

__all__ = (
    "BLOB_TYPES",
    "DIALECT",
    "MATCH_NOTHING",
    "SQLITE_KEYWORDS",
    "ClauseSpec",
    "ClauseText",
    "MatchCondition",
    "MatchInput",
    "ParameterSet",
    "ParameterStyle",
    "PlaceholderInfo",
    "Raw",
    "SQLValue",
    "Statement",
    "ValueKind",
    "WhereClause",
    "build_assignments",
    "build_clause_tail",
    "build_match_clause",
    "coerce_value",
    "detect_parameter_style",
    "escape_identifier",
    "escape_string",
    "escape_value",
    "extract_placeholders",
    "format_identifier",
    "is_raw",
    "needs_quoting",
    "normalize_conditions",
    "normalize_pairs",
    "reconcile",
    "render_clause_text",
    "resolve_where",
    "unescape_identifier",
    "value_kind",
)
