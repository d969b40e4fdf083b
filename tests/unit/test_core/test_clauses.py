"""Tests for WHERE, SET and trailing clause construction."""

from typing import Any

import pytest

from sqlhelpers.core.clauses import (
    MATCH_NOTHING,
    ClauseSpec,
    MatchCondition,
    WhereClause,
    build_assignments,
    build_clause_tail,
    build_match_clause,
    normalize_pairs,
    render_clause_text,
    resolve_where,
)
from sqlhelpers.core.values import Raw
from sqlhelpers.exceptions import (
    EmptyColumnListError,
    InvalidClauseError,
    InvalidIdentifierError,
    SQLBuilderError,
    UnsupportedValueTypeError,
)


def test_match_clause_membership_and_equality() -> None:
    clause = build_match_clause([
        MatchCondition("title", ["Mrs.", "Ms.", "Mme."]),
        MatchCondition("firstName", "Amelia"),
    ])
    assert clause == WhereClause("title IN (?,?,?) AND firstName = ?", ("Mrs.", "Ms.", "Mme.", "Amelia"))


def test_match_clause_from_mapping_keeps_insertion_order() -> None:
    clause = build_match_clause({"lastName": "Dean", "firstName": "James"})
    assert clause is not None
    assert clause.text == "lastName = ? AND firstName = ?"
    assert clause.parameters == ("Dean", "James")


def test_match_clause_from_pairs() -> None:
    clause = build_match_clause([("age", (30, 40)), ("title", None)])
    assert clause == WhereClause("age IN (?,?) AND title IS NULL", (30, 40))


def test_match_clause_empty_list_matches_nothing() -> None:
    clause = build_match_clause({"title": [], "firstName": "Amelia"})
    assert clause == WhereClause(f"{MATCH_NOTHING} AND firstName = ?", ("Amelia",))


@pytest.mark.parametrize("conditions", [None, [], {}], ids=["none", "empty_list", "empty_mapping"])
def test_match_clause_without_conditions_is_none(conditions: Any) -> None:
    assert build_match_clause(conditions) is None


def test_match_clause_raw_value_inlined() -> None:
    clause = build_match_clause({"lastName": Raw("upper(firstName)")})
    assert clause == WhereClause("lastName = upper(firstName)", ())


def test_match_clause_raw_inside_list_rejected() -> None:
    with pytest.raises(UnsupportedValueTypeError):
        build_match_clause({"a": [1, Raw("b")]})


def test_match_condition_rejects_sets() -> None:
    with pytest.raises(UnsupportedValueTypeError, match="reproducible order"):
        MatchCondition("title", {"Mr.", "Ms."})
    with pytest.raises(UnsupportedValueTypeError):
        build_match_clause({"title": frozenset({"Mr."})})


def test_match_clause_rejects_unsupported_values_and_names() -> None:
    with pytest.raises(UnsupportedValueTypeError):
        build_match_clause({"a": object()})
    with pytest.raises(InvalidIdentifierError):
        build_match_clause({"": 1})
    with pytest.raises(InvalidClauseError):
        build_match_clause(["not a pair"])


def test_match_clause_quotes_columns_when_needed() -> None:
    assert build_match_clause({"first name": "x"}) == WhereClause('"first name" = ?', ("x",))
    assert build_match_clause({"title": "x"}, always_quote=True) == WhereClause('"title" = ?', ("x",))


def test_match_clause_is_deterministic() -> None:
    conditions = {"title": ["Mrs.", "Ms."], "age": 30}
    assert build_match_clause(conditions) == build_match_clause(conditions)


def test_build_assignments() -> None:
    text, parameters = build_assignments({"firstName": "Jim", "modified": Raw("CURRENT_TIMESTAMP"), "age": None})
    assert text == "firstName = ?, modified = CURRENT_TIMESTAMP, age = ?"
    assert parameters == ["Jim", None]


def test_build_assignments_errors() -> None:
    with pytest.raises(EmptyColumnListError):
        build_assignments({})
    with pytest.raises(UnsupportedValueTypeError, match="update_expressions"):
        build_assignments({"a": Raw("b")}, allow_raw=False)


@pytest.mark.parametrize("values", ["abc", {("a", 1)}], ids=["string", "set"])
def test_normalize_pairs_rejects_unordered_or_text_input(values: Any) -> None:
    with pytest.raises(InvalidClauseError):
        normalize_pairs(values)


def test_render_clause_text() -> None:
    assert render_clause_text("ORDER BY", None) is None
    assert render_clause_text("ORDER BY", " lastName DESC ") == "lastName DESC"
    assert render_clause_text("ORDER BY", ["lastName", "first name"]) == 'lastName, "first name"'
    assert render_clause_text("ORDER BY", Raw("random()")) == "random()"


@pytest.mark.parametrize("value", ["", "   ", []], ids=["empty", "blank", "empty_list"])
def test_render_clause_text_rejects_empty(value: Any) -> None:
    with pytest.raises(InvalidClauseError, match="pass None"):
        render_clause_text("GROUP BY", value)


def test_clause_tail_emits_clauses_in_order() -> None:
    spec = ClauseSpec(group_by=["lastName"], having="COUNT(*) > 1", order_by="lastName DESC", limit=10, offset=5)
    assert build_clause_tail(spec) == " GROUP BY lastName HAVING COUNT(*) > 1 ORDER BY lastName DESC LIMIT 10 OFFSET 5"


def test_clause_tail_offset_without_limit() -> None:
    assert build_clause_tail(ClauseSpec(offset=5)) == " LIMIT -1 OFFSET 5"


def test_clause_tail_absent() -> None:
    assert build_clause_tail(None) == ""
    assert build_clause_tail(ClauseSpec()) == ""
    assert build_clause_tail(ClauseSpec(limit=0)) == " LIMIT 0"


@pytest.mark.parametrize(
    "spec",
    [
        ClauseSpec(limit=-1),
        ClauseSpec(offset=-3),
        ClauseSpec(limit=True),
        ClauseSpec(limit="10"),  # type: ignore[arg-type]
    ],
    ids=["negative_limit", "negative_offset", "bool_limit", "text_limit"],
)
def test_clause_tail_rejects_invalid_counts(spec: ClauseSpec) -> None:
    with pytest.raises(InvalidClauseError):
        build_clause_tail(spec)


def test_resolve_where() -> None:
    assert resolve_where(None, [1]) == (None, [1])
    assert resolve_where("  a = ?  ", [1]) == ("a = ?", [1])
    assert resolve_where(Raw("a IS NOT NULL")) == ("a IS NOT NULL", None)
    assert resolve_where(WhereClause("a = ?", (1,))) == ("a = ?", (1,))


def test_resolve_where_errors() -> None:
    with pytest.raises(InvalidClauseError, match="pass None"):
        resolve_where("")
    with pytest.raises(InvalidClauseError, match="own parameters"):
        resolve_where(WhereClause("a = ?", (1,)), [2])
    with pytest.raises(SQLBuilderError):
        resolve_where(42)  # type: ignore[arg-type]
