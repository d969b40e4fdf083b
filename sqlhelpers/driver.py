"""Execution protocol and the statement-executing helper facade.

The builders never touch a database. :class:`DatabaseHelper` pairs a
:class:`~sqlhelpers.builder.StatementBuilder` with an execution collaborator
implementing :class:`SyncExecutor` and post-processes what comes back:
catalog rows become schema values, ``count`` reads the single scalar and
``insert_row`` reports the new row's identity key.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional, Protocol, Union, runtime_checkable

from sqlhelpers.builder import ColumnSpec, StatementBuilder, UserParameters, WhereInput
from sqlhelpers.config import StatementConfig
from sqlhelpers.core.clauses import ClauseText, MatchInput
from sqlhelpers.core.parameters import ParameterSet, reconcile
from sqlhelpers.core.statement import Statement
from sqlhelpers.core.values import Raw
from sqlhelpers.exceptions import EngineError
from sqlhelpers.schema import (
    IndexSchema,
    TableSchema,
    parse_database_schema,
    parse_index_names,
    parse_index_schema,
    parse_table_names,
    parse_table_schema,
)
from sqlhelpers.utils.logging import get_logger, log_with_context
from sqlhelpers.utils.type_guards import supports_last_insert_id

__all__ = ("DatabaseHelper", "SupportsLastInsertId", "SyncExecutor")

logger = get_logger("driver")

Row = dict[str, Any]


@runtime_checkable
class SyncExecutor(Protocol):
    """Execution collaborator that runs SQL text with bound parameters."""

    def execute(self, sql: str, parameters: ParameterSet) -> int:
        """Run a statement that returns no rows.

        Returns:
            Number of affected rows, 0 for statements that change none.
        """
        ...

    def query(self, sql: str, parameters: ParameterSet) -> "list[Row]":
        """Run a statement and return its rows as column-name keyed mappings."""
        ...


@runtime_checkable
class SupportsLastInsertId(Protocol):
    """Collaborator that can report the identity key of the last inserted row."""

    def last_insert_id(self) -> "Optional[int]":
        """Return the last inserted row id, or None when unknown."""
        ...


class DatabaseHelper:
    """Builds statements and runs them through an execution collaborator.

    Engine failures raised by the collaborator propagate unchanged, with the
    single exception of :meth:`count`, which reports failure as ``-1``.

    Example::

        with SqliteExecutor.in_memory() as executor:
            db = DatabaseHelper(executor)
            db.create_table("people", ["id INTEGER PRIMARY KEY", "firstName TEXT", "lastName TEXT"])
            db.insert("people", ["firstName", "lastName"], [["James", "Dean"]])
            rows = db.select_matching("people", {"lastName": "Dean"})
    """

    __slots__ = ("builder", "executor")

    def __init__(self, executor: SyncExecutor, config: "Optional[StatementConfig]" = None) -> None:
        self.executor = executor
        self.builder = StatementBuilder(config)

    @property
    def config(self) -> StatementConfig:
        return self.builder.config

    def _execute(self, statement: Statement) -> int:
        logger.debug("Executing: %s", statement.sql)
        return self.executor.execute(statement.sql, statement.parameters)

    def _query(self, statement: Statement) -> "list[Row]":
        logger.debug("Querying: %s", statement.sql)
        return self.executor.query(statement.sql, statement.parameters)

    # DDL

    def create_table(
        self,
        name: str,
        columns: "Sequence[ColumnSpec]",
        constraints: "Optional[Sequence[str]]" = None,
        *,
        if_not_exists: bool = False,
    ) -> int:
        return self._execute(self.builder.create_table(name, columns, constraints, if_not_exists=if_not_exists))

    def rename_table(self, name: str, new_name: str) -> int:
        return self._execute(self.builder.rename_table(name, new_name))

    def add_column(self, table: str, column: ColumnSpec) -> int:
        return self._execute(self.builder.add_column(table, column))

    def drop_table(self, name: str) -> int:
        return self._execute(self.builder.drop_table(name))

    def drop_table_if_exists(self, name: str) -> int:
        return self._execute(self.builder.drop_table_if_exists(name))

    def create_index(
        self,
        name: str,
        table: str,
        columns: "Sequence[Union[str, Raw]]",
        *,
        unique: bool = False,
        if_not_exists: bool = False,
    ) -> int:
        return self._execute(
            self.builder.create_index(name, table, columns, unique=unique, if_not_exists=if_not_exists)
        )

    def create_unique_index(self, name: str, table: str, columns: "Sequence[Union[str, Raw]]") -> int:
        return self._execute(self.builder.create_unique_index(name, table, columns))

    def drop_index(self, name: str, *, if_exists: bool = False) -> int:
        return self._execute(self.builder.drop_index(name, if_exists=if_exists))

    # DML

    def insert(self, table: str, columns: "Sequence[str]", rows: "Sequence[Sequence[Any]]") -> int:
        """Insert rows with a single multi-row statement.

        Returns:
            Number of inserted rows.
        """
        return self._execute(self.builder.insert(table, columns, rows))

    def insert_row(self, table: str, values: Any) -> "Optional[int]":
        """Insert one row from an ordered mapping or ``(column, value)`` pairs.

        Returns:
            The new row's identity key when the collaborator can report it,
            otherwise None.
        """
        self._execute(self.builder.insert_row(table, values))
        if supports_last_insert_id(self.executor):
            return self.executor.last_insert_id()
        return None

    def update(self, table: str, values: Any, where: WhereInput = None, arguments: UserParameters = None) -> int:
        return self._execute(self.builder.update(table, values, where, arguments))

    def update_expressions(
        self, table: str, expressions: Any, where: WhereInput = None, arguments: UserParameters = None
    ) -> int:
        """Update columns to SQL expressions inlined verbatim.

        This is the unescaped path; see
        :meth:`~sqlhelpers.builder.StatementBuilder.update_expressions`.
        """
        return self._execute(self.builder.update_expressions(table, expressions, where, arguments))

    def delete(self, table: str, where: WhereInput = None, arguments: UserParameters = None) -> int:
        return self._execute(self.builder.delete(table, where, arguments))

    def execute_update(self, sql: str, parameters: UserParameters = None) -> int:
        """Run caller-written SQL that returns no rows.

        Parameters are checked against the placeholders first when the
        configuration validates parameters.

        Returns:
            Number of affected rows.
        """
        bound: ParameterSet
        if self.config.validate_parameters:
            bound = reconcile(sql, parameters)
        elif isinstance(parameters, Mapping):
            bound = dict(parameters)
        else:
            bound = tuple(parameters or ())
        return self._execute(Statement(sql, bound))

    # Queries

    def count(
        self,
        from_: "Union[str, Raw]",
        columns: "Optional[Sequence[Union[str, Raw]]]" = None,
        where: WhereInput = None,
        parameters: UserParameters = None,
    ) -> int:
        """Count rows.

        Build errors still raise; only engine failures are reported as the
        ``-1`` sentinel. Zero matching rows is ``0``.

        Returns:
            The row count, or -1 if the engine failed.
        """
        statement = self.builder.count(from_, columns, where, parameters)
        try:
            rows = self._query(statement)
        except EngineError as exc:
            log_with_context(
                logger,
                logging.WARNING,
                f"Count failed for {statement.sql}: {exc}",
                sql=statement.sql,
                error_type=type(exc).__name__,
            )
            return -1
        if not rows:
            return 0
        first = next(iter(rows[0].values()), 0)
        return int(first or 0)

    def select(
        self,
        from_: "Union[str, Raw]",
        columns: "Optional[Sequence[Union[str, Raw]]]" = None,
        where: WhereInput = None,
        parameters: UserParameters = None,
        **clauses: Any,
    ) -> "list[Row]":
        """Select rows.

        Keyword arguments (``distinct``, ``group_by``, ``having``,
        ``order_by``, ``limit``, ``offset``) are passed to
        :meth:`~sqlhelpers.builder.StatementBuilder.select`.

        Returns:
            Rows as column-name keyed dicts.
        """
        return self._query(self.builder.select(from_, columns, where, parameters, **clauses))

    def select_all(self, from_: "Union[str, Raw]", order_by: "Optional[ClauseText]" = None) -> "list[Row]":
        return self._query(self.builder.select_all(from_, order_by))

    def select_matching(
        self,
        from_: "Union[str, Raw]",
        conditions: "Optional[MatchInput]",
        columns: "Optional[Sequence[Union[str, Raw]]]" = None,
        **clauses: Any,
    ) -> "list[Row]":
        return self._query(self.builder.select_matching(from_, conditions, columns, **clauses))

    # Introspection

    def table_names(self) -> "frozenset[str]":
        """Names of the user tables in the database."""
        return parse_table_names(self._query(self.builder.table_names()))

    def table_schema(self, table: str) -> TableSchema:
        """Read one table's columns.

        Raises:
            TableNotFoundError: If the table does not exist.

        Returns:
            The table schema.
        """
        return parse_table_schema(table, self._query(self.builder.table_info(table)))

    def database_schema(self) -> "dict[str, TableSchema]":
        """Read the schema of every user table, keyed by name in catalog order."""
        table_rows = self._query(self.builder.table_names())
        per_table = {row["name"]: self._query(self.builder.table_info(row["name"])) for row in table_rows}
        return parse_database_schema(table_rows, per_table)

    def index_names_on_table(self, table: str) -> "list[str]":
        return parse_index_names(self._query(self.builder.index_list(table)))

    def index_schemas_on_table(self, table: str) -> "list[IndexSchema]":
        """Read every index on a table, including those backing UNIQUE and PRIMARY KEY constraints."""
        schemas: list[IndexSchema] = []
        for index_row in self._query(self.builder.index_list(table)):
            info_rows = self._query(self.builder.index_info(index_row["name"]))
            schemas.append(parse_index_schema(index_row, info_rows, table))
        return schemas
