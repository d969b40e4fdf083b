"""Tests for the DatabaseHelper facade against a recording executor."""

import logging
from typing import Any, Optional

import pytest

from sqlhelpers.config import StatementConfig
from sqlhelpers.core.parameters import ParameterSet
from sqlhelpers.driver import DatabaseHelper, SupportsLastInsertId, SyncExecutor
from sqlhelpers.exceptions import (
    InvalidClauseError,
    OperationalError,
    ParameterCountMismatchError,
    SchemaError,
    TableNotFoundError,
    UniqueViolationError,
)


class RecordingExecutor:
    """Records every call and answers queries from a canned result table."""

    def __init__(self, results: "Optional[dict[str, list[dict[str, Any]]]]" = None) -> None:
        self.calls: list[tuple[str, str, ParameterSet]] = []
        self.results = results or {}
        self.fail_with: Optional[Exception] = None

    def execute(self, sql: str, parameters: ParameterSet) -> int:
        self.calls.append(("execute", sql, parameters))
        if self.fail_with is not None:
            raise self.fail_with
        return 1

    def query(self, sql: str, parameters: ParameterSet) -> "list[dict[str, Any]]":
        self.calls.append(("query", sql, parameters))
        if self.fail_with is not None:
            raise self.fail_with
        return self.results.get(sql, [])


class RowIdExecutor(RecordingExecutor):
    def last_insert_id(self) -> "Optional[int]":
        return 7


def test_protocols_are_runtime_checkable() -> None:
    assert isinstance(RecordingExecutor(), SyncExecutor)
    assert not isinstance(RecordingExecutor(), SupportsLastInsertId)
    assert isinstance(RowIdExecutor(), SupportsLastInsertId)


def test_statements_are_delegated() -> None:
    executor = RecordingExecutor()
    db = DatabaseHelper(executor)
    assert db.insert("people", ["firstName", "lastName"], [["James", "Dean"]]) == 1
    db.update("people", {"firstName": "Jim"}, "lastName = ?", ["Dean"])
    db.delete("people")
    assert executor.calls == [
        ("execute", "INSERT INTO people (firstName, lastName) VALUES (?,?)", ("James", "Dean")),
        ("execute", "UPDATE people SET firstName = ? WHERE lastName = ?", ("Jim", "Dean")),
        ("execute", "DELETE FROM people", ()),
    ]


def test_insert_row_reports_identity_key_when_supported() -> None:
    assert DatabaseHelper(RowIdExecutor()).insert_row("people", {"firstName": "James"}) == 7
    assert DatabaseHelper(RecordingExecutor()).insert_row("people", {"firstName": "James"}) is None


def test_count_reads_scalar() -> None:
    executor = RecordingExecutor({"SELECT COUNT(*) FROM people": [{"COUNT(*)": 4}]})
    assert DatabaseHelper(executor).count("people") == 4


def test_count_zero_rows_is_not_a_failure() -> None:
    executor = RecordingExecutor({"SELECT COUNT(*) FROM people": [{"COUNT(*)": 0}]})
    assert DatabaseHelper(executor).count("people") == 0


def test_count_returns_sentinel_on_engine_error(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="sqlhelpers")
    executor = RecordingExecutor()
    executor.fail_with = OperationalError("no such table: people")
    assert DatabaseHelper(executor).count("people") == -1
    (record,) = [r for r in caplog.records if "Count failed" in r.getMessage()]
    assert record.levelno == logging.WARNING
    expected = {"sql": "SELECT COUNT(*) FROM people", "error_type": "OperationalError"}
    assert record.extra_fields == expected  # type: ignore[attr-defined]


def test_count_still_raises_build_errors() -> None:
    with pytest.raises(ParameterCountMismatchError):
        DatabaseHelper(RecordingExecutor()).count("people", where="age > ?")
    with pytest.raises(InvalidClauseError):
        DatabaseHelper(RecordingExecutor()).count("people", ["firstName", "lastName"])


def test_engine_errors_propagate_unchanged() -> None:
    executor = RecordingExecutor()
    error = UniqueViolationError("duplicate")
    executor.fail_with = error
    with pytest.raises(UniqueViolationError) as exc_info:
        DatabaseHelper(executor).insert_row("people", {"id": 1})
    assert exc_info.value is error


def test_execute_update_validates_parameters() -> None:
    executor = RecordingExecutor()
    db = DatabaseHelper(executor)
    db.execute_update("UPDATE people SET age = :age", {"age": 30, "unused": 1})
    assert executor.calls[-1] == ("execute", "UPDATE people SET age = :age", {"age": 30})
    with pytest.raises(ParameterCountMismatchError):
        db.execute_update("UPDATE people SET age = ?")
    assert len(executor.calls) == 1


def test_execute_update_without_validation() -> None:
    executor = RecordingExecutor()
    db = DatabaseHelper(executor, StatementConfig(validate_parameters=False))
    db.execute_update("UPDATE people SET age = ?", [1, 2])
    assert executor.calls[-1] == ("execute", "UPDATE people SET age = ?", (1, 2))
    assert db.config.validate_parameters is False


def test_table_schema_and_missing_table() -> None:
    info = [{"cid": 0, "name": "id", "type": "INTEGER", "notnull": 0, "dflt_value": None, "pk": 1}]
    executor = RecordingExecutor({'PRAGMA table_info("people")': info})
    db = DatabaseHelper(executor)
    assert db.table_schema("people").column_names == ("id",)
    with pytest.raises(TableNotFoundError):
        db.table_schema("ghosts")


def test_database_schema_queries_each_listed_table() -> None:
    db = DatabaseHelper(RecordingExecutor())
    listing_sql = db.builder.table_names().sql
    info = [{"cid": 0, "name": "id", "type": "INTEGER", "notnull": 0, "dflt_value": None, "pk": 1}]
    executor = RecordingExecutor({
        listing_sql: [{"name": "people"}, {"name": "pets"}],
        'PRAGMA table_info("people")': info,
    })
    db = DatabaseHelper(executor)
    with pytest.raises(SchemaError, match="pets"):
        db.database_schema()
    executor.results['PRAGMA table_info("pets")'] = info
    assert list(db.database_schema()) == ["people", "pets"]
    assert db.table_names() == frozenset({"people", "pets"})


def test_index_introspection() -> None:
    executor = RecordingExecutor({
        'PRAGMA index_list("people")': [
            {"seq": 0, "name": "idx_last", "unique": 0, "origin": "c", "partial": 0},
            {"seq": 1, "name": "sqlite_autoindex_people_1", "unique": 1, "origin": "u", "partial": 0},
        ],
        'PRAGMA index_info("idx_last")': [{"seqno": 0, "cid": 2, "name": "lastName"}],
        'PRAGMA index_info("sqlite_autoindex_people_1")': [{"seqno": 0, "cid": 3, "name": "email"}],
    })
    db = DatabaseHelper(executor)
    assert db.index_names_on_table("people") == ["idx_last", "sqlite_autoindex_people_1"]
    schemas = db.index_schemas_on_table("people")
    assert [(s.name, s.columns, s.unique, s.origin) for s in schemas] == [
        ("idx_last", ("lastName",), False, "c"),
        ("sqlite_autoindex_people_1", ("email",), True, "u"),
    ]
