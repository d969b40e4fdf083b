"""WHERE, SET and trailing clause fragments.

Match conditions translate column/value pairs into conjunctive conditions with
bound parameters: a scalar becomes ``col = ?``, ``None`` becomes
``col IS NULL`` and a list becomes ``col IN (?,...,?)``. An empty list means
"no value can match" and renders ``1 = 0``; it is never dropped, so it keeps
the whole clause from matching any row. No conditions at all means no WHERE
clause.

Mapping inputs are iterated in insertion order, which Python dicts preserve,
so parameter order always follows the order the caller wrote.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from sqlhelpers.core.escaping import format_identifier
from sqlhelpers.core.parameters import ParameterSet
from sqlhelpers.core.values import Raw, coerce_value
from sqlhelpers.exceptions import EmptyColumnListError, InvalidClauseError, SQLBuilderError, UnsupportedValueTypeError
from sqlhelpers.utils.type_guards import is_mapping, is_pair, is_unordered_collection, is_value_sequence

__all__ = (
    "MATCH_NOTHING",
    "ClauseSpec",
    "ClauseText",
    "MatchCondition",
    "MatchInput",
    "WhereClause",
    "build_assignments",
    "build_clause_tail",
    "build_match_clause",
    "normalize_conditions",
    "normalize_pairs",
    "render_clause_text",
    "resolve_where",
)

MATCH_NOTHING = "1 = 0"

ClauseText = Union[str, Raw, Sequence[str]]
"""Clause text: a raw SQL fragment, or a sequence of column names to escape and join."""


@dataclass(frozen=True)
class WhereClause:
    """A WHERE condition (without the keyword) and its bound parameters."""

    text: str
    parameters: ParameterSet = field(default=())


@dataclass(frozen=True)
class MatchCondition:
    """Constrain ``column`` to a single value or to one of a list of values."""

    column: str
    value: Any

    def __post_init__(self) -> None:
        if is_unordered_collection(self.value):
            msg = f"Match values for {self.column!r} must be a list or tuple; sets have no reproducible order"
            raise UnsupportedValueTypeError(self.value, msg)

    @property
    def is_set(self) -> bool:
        return is_value_sequence(self.value)


MatchInput = Union[Mapping[str, Any], Iterable[Union[MatchCondition, tuple[str, Any]]]]


def normalize_pairs(values: Any, what: str = "values") -> "list[tuple[str, Any]]":
    """Turn an ordered mapping or a sequence of pairs into a list of pairs.

    Raises:
        InvalidClauseError: If an entry is not a ``(column, value)`` pair.

    Returns:
        The pairs in caller order.
    """
    if is_mapping(values):
        return list(values.items())
    if isinstance(values, (str, bytes)) or is_unordered_collection(values):
        msg = f"{what} must be an ordered mapping or a sequence of (column, value) pairs"
        raise InvalidClauseError(msg)
    pairs: list[tuple[str, Any]] = []
    for entry in values:
        if not is_pair(entry):
            msg = f"{what} must contain (column, value) pairs, got {entry!r}"
            raise InvalidClauseError(msg)
        pairs.append((entry[0], entry[1]))
    return pairs


def normalize_conditions(conditions: "Optional[MatchInput]") -> "list[MatchCondition]":
    if conditions is None:
        return []
    if is_mapping(conditions):
        return [MatchCondition(column, value) for column, value in conditions.items()]
    normalized: list[MatchCondition] = []
    for entry in conditions:
        if isinstance(entry, MatchCondition):
            normalized.append(entry)
        elif is_pair(entry):
            normalized.append(MatchCondition(entry[0], entry[1]))
        else:
            msg = f"Expected a MatchCondition or a (column, value) pair, got {entry!r}"
            raise InvalidClauseError(msg)
    return normalized


def _match_fragment(condition: MatchCondition, always_quote: bool) -> "tuple[str, list[Any]]":
    column = format_identifier(condition.column, always_quote=always_quote)
    if condition.is_set:
        values = [coerce_value(v) for v in condition.value]
        if not values:
            return MATCH_NOTHING, []
        for value in values:
            if isinstance(value, Raw):
                msg = f"Raw expressions are not allowed inside the value list for {condition.column!r}"
                raise UnsupportedValueTypeError(value, msg)
        placeholders = ",".join("?" * len(values))
        return f"{column} IN ({placeholders})", values
    value = coerce_value(condition.value)
    if value is None:
        return f"{column} IS NULL", []
    if isinstance(value, Raw):
        return f"{column} = {value.sql}", []
    return f"{column} = ?", [value]


def build_match_clause(conditions: "Optional[MatchInput]", *, always_quote: bool = False) -> "Optional[WhereClause]":
    """Build a conjunctive WHERE condition from match conditions.

    Args:
        conditions: MatchCondition objects, ``(column, value)`` pairs, or an
            ordered mapping of column to value. List or tuple values produce
            ``IN`` tests, ``None`` produces ``IS NULL``.
        always_quote: Quote every column name.

    Raises:
        UnsupportedValueTypeError: If a value is outside the supported set or a
            set-like collection is given instead of a list.
        InvalidIdentifierError: If a column name is invalid.

    Returns:
        The clause, or None when there are no conditions (match every row).

    Example:
        >>> build_match_clause({"title": ["Mrs.", "Ms."], "firstName": "Amelia"})
        WhereClause(text='title IN (?,?) AND firstName = ?', parameters=('Mrs.', 'Ms.', 'Amelia'))
    """
    normalized = normalize_conditions(conditions)
    if not normalized:
        return None
    fragments: list[str] = []
    parameters: list[Any] = []
    for condition in normalized:
        text, values = _match_fragment(condition, always_quote)
        fragments.append(text)
        parameters.extend(values)
    return WhereClause(" AND ".join(fragments), tuple(parameters))


def build_assignments(values: Any, *, allow_raw: bool = True, always_quote: bool = False) -> "tuple[str, list[Any]]":
    """Build the body of a SET clause.

    Args:
        values: Ordered mapping or sequence of ``(column, value)`` pairs.
        allow_raw: Whether :class:`Raw` values may be inlined.
        always_quote: Quote every column name.

    Raises:
        EmptyColumnListError: If no assignments are given.
        UnsupportedValueTypeError: If a value is unsupported, or is Raw while
            ``allow_raw`` is False.

    Returns:
        ``("a = ?, b = lower(b)", [bound values])``.
    """
    pairs = normalize_pairs(values)
    if not pairs:
        msg = "At least one column must be assigned"
        raise EmptyColumnListError(msg)
    assignments: list[str] = []
    parameters: list[Any] = []
    for column, raw_value in pairs:
        name = format_identifier(column, always_quote=always_quote)
        value = coerce_value(raw_value)
        if isinstance(value, Raw):
            if not allow_raw:
                msg = f"Raw expression for {column!r} is not allowed here; use update_expressions()"
                raise UnsupportedValueTypeError(value, msg)
            assignments.append(f"{name} = {value.sql}")
            continue
        assignments.append(f"{name} = ?")
        parameters.append(value)
    return ", ".join(assignments), parameters


def render_clause_text(keyword: str, value: "Optional[ClauseText]", *, always_quote: bool = False) -> "Optional[str]":
    """Render a text clause body, or None when the clause is absent.

    Raises:
        InvalidClauseError: If the clause is present but empty.

    Returns:
        The fragment without its keyword.
    """
    if value is None:
        return None
    if isinstance(value, Raw):
        text = value.sql
    elif isinstance(value, str):
        text = value
    elif isinstance(value, Sequence) and not isinstance(value, bytes):
        text = ", ".join(format_identifier(column, always_quote=always_quote) for column in value)
    else:
        msg = f"{keyword} must be SQL text or a sequence of column names, got {type(value).__name__!r}"
        raise InvalidClauseError(msg)
    if not text.strip():
        msg = f"{keyword} clause is empty; pass None to omit it"
        raise InvalidClauseError(msg)
    return text.strip()


def _validate_count(keyword: str, value: "Optional[int]") -> "Optional[int]":
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{keyword} must be an integer, got {type(value).__name__!r}"
        raise InvalidClauseError(msg)
    if value < 0:
        msg = f"{keyword} must not be negative, got {value}"
        raise InvalidClauseError(msg)
    return value


@dataclass(frozen=True)
class ClauseSpec:
    """Optional clauses that follow WHERE, in the order SQLite expects them."""

    group_by: "Optional[ClauseText]" = None
    having: "Optional[ClauseText]" = None
    order_by: "Optional[ClauseText]" = None
    limit: "Optional[int]" = None
    offset: "Optional[int]" = None


def build_clause_tail(spec: "Optional[ClauseSpec]", *, always_quote: bool = False) -> str:
    """Render GROUP BY, HAVING, ORDER BY, LIMIT and OFFSET.

    Only present clauses are emitted. OFFSET without LIMIT renders
    ``LIMIT -1 OFFSET n`` because SQLite only accepts OFFSET after a LIMIT.

    Raises:
        InvalidClauseError: If a clause is present but empty, or LIMIT/OFFSET
            is negative or not an integer.

    Returns:
        The fragments joined with a leading space, or an empty string.
    """
    if spec is None:
        return ""
    parts: list[str] = []
    for keyword, value in (("GROUP BY", spec.group_by), ("HAVING", spec.having), ("ORDER BY", spec.order_by)):
        text = render_clause_text(keyword, value, always_quote=always_quote)
        if text is not None:
            parts.append(f"{keyword} {text}")
    limit = _validate_count("LIMIT", spec.limit)
    offset = _validate_count("OFFSET", spec.offset)
    if limit is not None:
        parts.append(f"LIMIT {limit}")
    if offset is not None:
        if limit is None:
            parts.append("LIMIT -1")
        parts.append(f"OFFSET {offset}")
    if not parts:
        return ""
    return " " + " ".join(parts)


def resolve_where(
    where: "Optional[Union[str, Raw, WhereClause]]",
    parameters: "Optional[Union[Sequence[Any], Mapping[str, Any]]]" = None,
) -> "tuple[Optional[str], Optional[Union[Sequence[Any], Mapping[str, Any]]]]":
    """Normalize a WHERE argument into condition text and its parameters.

    Raises:
        InvalidClauseError: If the text is empty, or a prebuilt clause is
            combined with separate parameters.
        SQLBuilderError: If ``where`` is of an unsupported type.

    Returns:
        ``(text or None, parameters)``.
    """
    if where is None:
        return None, parameters
    if isinstance(where, WhereClause):
        if parameters:
            msg = "A prebuilt WhereClause carries its own parameters"
            raise InvalidClauseError(msg)
        return where.text, where.parameters
    if isinstance(where, Raw):
        where = where.sql
    if not isinstance(where, str):
        msg = f"WHERE must be SQL text or a WhereClause, got {type(where).__name__!r}"
        raise SQLBuilderError(msg)
    if not where.strip():
        msg = "WHERE clause is empty; pass None to match every row"
        raise InvalidClauseError(msg)
    return where.strip(), parameters
