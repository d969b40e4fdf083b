"""Tests for INSERT, UPDATE and DELETE statements."""

import logging

import pytest

from sqlhelpers.builder import StatementBuilder
from sqlhelpers.config import StatementConfig
from sqlhelpers.core.clauses import build_match_clause
from sqlhelpers.core.values import Raw
from sqlhelpers.exceptions import (
    EmptyColumnListError,
    EmptyRowListError,
    InvalidClauseError,
    ParameterCountMismatchError,
    ParameterStyleMismatchError,
    RowArityMismatchError,
    UnboundParameterError,
    UnsupportedValueTypeError,
)


def test_insert_multiple_rows(builder: StatementBuilder) -> None:
    statement = builder.insert("people", ["firstName", "lastName"], [["James", "Dean"], ["Marilyn", "Monroe"]])
    assert statement.sql == "INSERT INTO people (firstName, lastName) VALUES (?,?), (?,?)"
    assert statement.parameters == ("James", "Dean", "Marilyn", "Monroe")


def test_statement_unpacks(builder: StatementBuilder) -> None:
    sql, parameters = builder.insert("people", ["firstName"], [["James"]])
    assert sql == "INSERT INTO people (firstName) VALUES (?)"
    assert parameters == ("James",)


def test_insert_inlines_raw_cells(builder: StatementBuilder) -> None:
    statement = builder.insert("events", ["name", "created"], [("boot", Raw("CURRENT_TIMESTAMP"))])
    assert statement.sql == "INSERT INTO events (name, created) VALUES (?,CURRENT_TIMESTAMP)"
    assert statement.parameters == ("boot",)


def test_insert_row_arity_mismatch(builder: StatementBuilder) -> None:
    with pytest.raises(RowArityMismatchError) as exc_info:
        builder.insert("people", ["firstName", "lastName"], [["James", "Dean"], ["Cher"]])
    assert (exc_info.value.row_index, exc_info.value.expected, exc_info.value.actual) == (1, 2, 1)


def test_insert_errors(builder: StatementBuilder) -> None:
    with pytest.raises(EmptyColumnListError):
        builder.insert("people", [], [["x"]])
    with pytest.raises(EmptyRowListError):
        builder.insert("people", ["firstName"], [])
    with pytest.raises(UnsupportedValueTypeError):
        builder.insert("people", ["firstName"], ["James"])
    with pytest.raises(UnsupportedValueTypeError):
        builder.insert("people", ["firstName"], [[object()]])


def test_insert_row(builder: StatementBuilder) -> None:
    statement = builder.insert_row("people", {"firstName": "James", "lastName": "Dean"})
    assert statement.sql == "INSERT INTO people (firstName, lastName) VALUES (?,?)"
    assert statement.parameters == ("James", "Dean")
    pairs = builder.insert_row("people", [("lastName", "Dean"), ("firstName", "James")])
    assert pairs.sql == "INSERT INTO people (lastName, firstName) VALUES (?,?)"
    assert pairs.parameters == ("Dean", "James")


def test_insert_row_without_values_uses_defaults(builder: StatementBuilder) -> None:
    statement = builder.insert_row("people", {})
    assert statement.sql == "INSERT INTO people DEFAULT VALUES"
    assert statement.parameters == ()


def test_update_binds_every_value(builder: StatementBuilder) -> None:
    statement = builder.update("people", {"firstName": "Jim", "age": 25}, "lastName = ?", ["Dean"])
    assert statement.sql == "UPDATE people SET firstName = ?, age = ? WHERE lastName = ?"
    assert statement.parameters == ("Jim", 25, "Dean")


def test_update_all_rows(builder: StatementBuilder) -> None:
    statement = builder.update("people", [("title", None)])
    assert statement.sql == "UPDATE people SET title = ?"
    assert statement.parameters == (None,)


def test_update_with_match_clause(builder: StatementBuilder) -> None:
    statement = builder.update("people", {"firstName": "Jim"}, build_match_clause({"lastName": "Dean"}))
    assert statement.sql == "UPDATE people SET firstName = ? WHERE lastName = ?"
    assert statement.parameters == ("Jim", "Dean")


def test_update_rejects_raw_values(builder: StatementBuilder) -> None:
    with pytest.raises(UnsupportedValueTypeError, match="update_expressions"):
        builder.update("people", {"firstName": Raw("lower(firstName)")})


def test_update_parameter_errors(builder: StatementBuilder) -> None:
    with pytest.raises(EmptyColumnListError):
        builder.update("people", {})
    with pytest.raises(ParameterCountMismatchError):
        builder.update("people", {"firstName": "Jim"}, "lastName = ?", [])
    with pytest.raises(ParameterStyleMismatchError):
        builder.update("people", {"firstName": "Jim"}, "lastName = :last", {"last": "Dean"})


def test_update_expressions(builder: StatementBuilder) -> None:
    statement = builder.update_expressions(
        "people", {"firstName": "lower(firstName)", "age": "age + ?"}, "id = ?", [1, 7]
    )
    assert statement.sql == "UPDATE people SET firstName = lower(firstName), age = age + ? WHERE id = ?"
    assert statement.parameters == (1, 7)


def test_update_expressions_with_match_clause(builder: StatementBuilder) -> None:
    """Arguments feed the expressions; the prebuilt clause brings its own values."""
    statement = builder.update_expressions(
        "people", {"age": Raw("age + ?")}, build_match_clause({"lastName": "Dean"}), [1]
    )
    assert statement.sql == "UPDATE people SET age = age + ? WHERE lastName = ?"
    assert statement.parameters == (1, "Dean")


def test_update_expressions_errors(builder: StatementBuilder) -> None:
    with pytest.raises(InvalidClauseError):
        builder.update_expressions("people", {"age": "  "})
    with pytest.raises(UnsupportedValueTypeError):
        builder.update_expressions("people", {"age": 5})
    with pytest.raises(ParameterCountMismatchError):
        builder.update_expressions("people", {"age": "age + ?"})


def test_delete_all_rows(builder: StatementBuilder) -> None:
    statement = builder.delete("people")
    assert statement.sql == "DELETE FROM people"
    assert statement.parameters == ()


def test_delete_with_condition(builder: StatementBuilder) -> None:
    statement = builder.delete("people", "lastName = ?", ["Dean"])
    assert statement.sql == "DELETE FROM people WHERE lastName = ?"
    assert statement.parameters == ("Dean",)


def test_delete_with_named_parameters(builder: StatementBuilder) -> None:
    statement = builder.delete("people", "lastName = :last", {"last": "Dean", "unused": 1})
    assert statement.parameters == {"last": "Dean"}
    assert statement.is_named
    with pytest.raises(UnboundParameterError):
        builder.delete("people", "lastName = :last AND age = :age", {"last": "Dean"})


def test_delete_rejects_empty_where(builder: StatementBuilder) -> None:
    with pytest.raises(InvalidClauseError):
        builder.delete("people", "")


def test_validation_can_be_disabled() -> None:
    builder = StatementBuilder(StatementConfig(validate_parameters=False))
    statement = builder.delete("people", "lastName = ?", [])
    assert statement.sql == "DELETE FROM people WHERE lastName = ?"
    assert statement.parameters == ()


def test_builds_are_deterministic(builder: StatementBuilder) -> None:
    rows = [["James", "Dean"], ["Marilyn", "Monroe"]]
    assert builder.insert("people", ["firstName", "lastName"], rows) == builder.insert(
        "people", ["firstName", "lastName"], rows
    )


def test_log_statements(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="sqlhelpers")
    builder = StatementBuilder(StatementConfig(log_statements=True))
    builder.delete("people")
    assert any(
        record.name == "sqlhelpers.builder" and "DELETE FROM people" in record.getMessage() for record in caplog.records
    )
