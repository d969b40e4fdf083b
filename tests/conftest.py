from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest

from sqlhelpers.adapters.sqlite import SqliteExecutor
from sqlhelpers.builder import StatementBuilder
from sqlhelpers.config import StatementConfig
from sqlhelpers.driver import DatabaseHelper

here = Path(__file__).parent
root_path = here.parent


@pytest.fixture
def builder() -> StatementBuilder:
    return StatementBuilder()


@pytest.fixture
def quoting_builder() -> StatementBuilder:
    return StatementBuilder(StatementConfig(always_quote_identifiers=True))


@pytest.fixture
def sqlite_executor() -> Generator[SqliteExecutor, None, None]:
    executor = SqliteExecutor.in_memory()
    try:
        yield executor
    finally:
        executor.close()


@pytest.fixture
def helper(sqlite_executor: SqliteExecutor) -> DatabaseHelper:
    return DatabaseHelper(sqlite_executor)


@pytest.fixture
def people(helper: DatabaseHelper) -> DatabaseHelper:
    """A helper whose database holds a small ``people`` table."""
    helper.create_table(
        "people",
        ["id INTEGER PRIMARY KEY", "firstName TEXT NOT NULL", "lastName TEXT NOT NULL", "title TEXT", "age INTEGER"],
    )
    helper.insert(
        "people",
        ["firstName", "lastName", "title", "age"],
        [
            ["James", "Dean", "Mr.", 24],
            ["Marilyn", "Monroe", "Ms.", 36],
            ["Amelia", "Earhart", "Mrs.", 39],
            ["Amelia", "Bedelia", "Mme.", None],
        ],
    )
    return helper
