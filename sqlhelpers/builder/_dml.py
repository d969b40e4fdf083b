"""INSERT, UPDATE and DELETE statements."""

from collections.abc import Mapping, Sequence
from typing import Any, Optional

from sqlhelpers.builder._base import BuilderBase, UserParameters, WhereInput
from sqlhelpers.core.clauses import WhereClause, build_assignments, normalize_pairs, resolve_where
from sqlhelpers.core.statement import Statement
from sqlhelpers.core.values import Raw, coerce_value
from sqlhelpers.exceptions import (
    EmptyRowListError,
    InvalidClauseError,
    ParameterStyleMismatchError,
    RowArityMismatchError,
    UnsupportedValueTypeError,
)
from sqlhelpers.utils.type_guards import is_value_sequence

__all__ = ("DeleteBuilderMixin", "InsertBuilderMixin", "UpdateBuilderMixin")


def _where_suffix(text: "Optional[str]") -> str:
    return f" WHERE {text}" if text is not None else ""


class InsertBuilderMixin(BuilderBase):
    """Single and multi-row inserts."""

    __slots__ = ()

    def insert(self, table: str, columns: "Sequence[str]", rows: "Sequence[Sequence[Any]]") -> Statement:
        """Build one multi-row ``INSERT`` with a placeholder group per row.

        Values are bound in row-major order. Raw cells are inlined instead of
        bound.

        Args:
            table: Target table.
            columns: Column names, in the order row values are given.
            rows: Rows of values, each with one value per column.

        Raises:
            EmptyColumnListError: If no columns are given.
            EmptyRowListError: If no rows are given.
            RowArityMismatchError: If a row's length differs from the column count.

        Returns:
            The statement, e.g.
            ``INSERT INTO people (firstName, lastName) VALUES (?,?), (?,?)``.
        """
        if isinstance(columns, str):
            columns = [columns]
        column_list = self._column_list(columns, what="insert columns")
        if not rows:
            msg = f"Insert into {table!r} needs at least one row"
            raise EmptyRowListError(msg)
        groups: list[str] = []
        parameters: list[Any] = []
        for index, row in enumerate(rows):
            if not is_value_sequence(row):
                msg = f"Row {index} must be a list or tuple, got {type(row).__name__!r}"
                raise UnsupportedValueTypeError(row, msg)
            if len(row) != len(columns):
                raise RowArityMismatchError(index, len(columns), len(row))
            groups.append(self._value_group(row, parameters))
        sql = f"INSERT INTO {self._ident(table)} ({column_list}) VALUES {', '.join(groups)}"
        return self._finish("insert", sql, parameters)

    def insert_row(self, table: str, values: Any) -> Statement:
        """Build a single-row ``INSERT`` from an ordered mapping or ``(column, value)`` pairs.

        An empty mapping inserts a row of defaults (``DEFAULT VALUES``).

        Returns:
            The statement.
        """
        pairs = normalize_pairs(values)
        if not pairs:
            return self._finish("insert", f"INSERT INTO {self._ident(table)} DEFAULT VALUES")
        columns = [column for column, _ in pairs]
        return self.insert(table, columns, [[value for _, value in pairs]])

    @staticmethod
    def _value_group(row: "Sequence[Any]", parameters: "list[Any]") -> str:
        slots: list[str] = []
        for cell in row:
            value = coerce_value(cell)
            if isinstance(value, Raw):
                slots.append(value.sql)
            else:
                slots.append("?")
                parameters.append(value)
        return f"({','.join(slots)})"


class UpdateBuilderMixin(BuilderBase):
    """Value updates and raw-expression updates."""

    __slots__ = ()

    def update(self, table: str, values: Any, where: WhereInput = None, arguments: UserParameters = None) -> Statement:
        """Build ``UPDATE ... SET col = ?, ...`` with every value bound.

        Args:
            table: Target table.
            values: Ordered mapping or ``(column, value)`` pairs; assignment
                order follows it.
            where: Optional condition text or prebuilt WhereClause. None updates every row.
            arguments: Positional values for ``?`` placeholders in ``where``.

        Raises:
            EmptyColumnListError: If no values are given.
            UnsupportedValueTypeError: If a value is a Raw expression (use
                :meth:`update_expressions`) or otherwise unsupported.

        Returns:
            The statement.
        """
        assignments, parameters = build_assignments(
            values, allow_raw=False, always_quote=self.config.always_quote_identifiers
        )
        return self._build_update(table, assignments, parameters, where, arguments)

    def update_expressions(
        self, table: str, expressions: Any, where: WhereInput = None, arguments: UserParameters = None
    ) -> Statement:
        """Build ``UPDATE ... SET col = <expression>, ...`` with expressions inlined verbatim.

        This is the unescaped path: expression text such as ``"lower(firstName)"``
        or ``"?"`` is written into the statement as-is. ``?`` placeholders in the
        expressions consume ``arguments`` first, in order, followed by those in
        ``where``. Never build expression text from untrusted input.

        Args:
            table: Target table.
            expressions: Ordered mapping or ``(column, expression)`` pairs.
                Expressions are SQL text or Raw.
            where: Optional condition text or prebuilt WhereClause.
            arguments: Positional values for every ``?`` in the statement.

        Raises:
            EmptyColumnListError: If no expressions are given.
            InvalidClauseError: If an expression is empty.
            UnsupportedValueTypeError: If an expression is not text.

        Returns:
            The statement.
        """
        pairs = normalize_pairs(expressions, what="expressions")
        raw_pairs: list[tuple[str, Raw]] = []
        for column, expression in pairs:
            if isinstance(expression, str):
                expression = Raw(expression)
            if not isinstance(expression, Raw):
                msg = f"Expression for {column!r} must be SQL text, got {type(expression).__name__!r}"
                raise UnsupportedValueTypeError(expression, msg)
            if not expression.sql.strip():
                msg = f"Expression for {column!r} is empty"
                raise InvalidClauseError(msg)
            raw_pairs.append((column, expression))
        assignments, parameters = build_assignments(raw_pairs, always_quote=self.config.always_quote_identifiers)
        return self._build_update(table, assignments, parameters, where, arguments)

    def _build_update(
        self,
        table: str,
        assignments: str,
        parameters: "list[Any]",
        where: WhereInput,
        arguments: UserParameters,
    ) -> Statement:
        if isinstance(where, WhereClause):
            # arguments feed the SET expressions, the prebuilt clause carries its own values
            sql = f"UPDATE {self._ident(table)} SET {assignments}{_where_suffix(where.text)}"
            if isinstance(arguments, Mapping) or isinstance(where.parameters, Mapping):
                msg = "Named parameters cannot be combined with a prebuilt WhereClause in an UPDATE"
                raise ParameterStyleMismatchError(msg, sql)
            return self._finish("update", sql, [*parameters, *(arguments or ()), *where.parameters])
        where_text, where_parameters = resolve_where(where, arguments)
        sql = f"UPDATE {self._ident(table)} SET {assignments}{_where_suffix(where_text)}"
        return self._finish("update", sql, self._merge_parameters(parameters, where_parameters, sql))


class DeleteBuilderMixin(BuilderBase):
    __slots__ = ()

    def delete(self, table: str, where: WhereInput = None, arguments: UserParameters = None) -> Statement:
        """Build ``DELETE FROM``.

        ``where=None`` deletes every row. An empty string is rejected rather
        than read as "no filter".

        Raises:
            InvalidClauseError: If ``where`` is empty text.

        Returns:
            The statement.
        """
        where_text, where_parameters = resolve_where(where, arguments)
        sql = f"DELETE FROM {self._ident(table)}{_where_suffix(where_text)}"
        return self._finish("delete", sql, where_parameters)

