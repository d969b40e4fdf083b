"""SELECT and COUNT statements."""

from collections.abc import Sequence
from typing import Optional, Union

from sqlhelpers.builder._base import BuilderBase, UserParameters, WhereInput
from sqlhelpers.core.clauses import (
    ClauseSpec,
    ClauseText,
    MatchInput,
    build_clause_tail,
    build_match_clause,
    resolve_where,
)
from sqlhelpers.core.statement import Statement
from sqlhelpers.core.values import Raw
from sqlhelpers.exceptions import InvalidClauseError

__all__ = ("SelectBuilderMixin",)

Source = Union[str, Raw]
Columns = Optional[Sequence[Union[str, Raw]]]


class SelectBuilderMixin(BuilderBase):
    """Row selection and counting."""

    __slots__ = ()

    def select(
        self,
        from_: Source,
        columns: Columns = None,
        where: WhereInput = None,
        parameters: UserParameters = None,
        *,
        distinct: bool = False,
        group_by: "Optional[ClauseText]" = None,
        having: "Optional[ClauseText]" = None,
        order_by: "Optional[ClauseText]" = None,
        limit: "Optional[int]" = None,
        offset: "Optional[int]" = None,
    ) -> Statement:
        """Build a ``SELECT`` statement.

        Args:
            from_: Table name, or Raw text for joins and subqueries.
            columns: Column names (escaped) or Raw expressions. None selects ``*``.
            where: Condition text with ``?`` or named placeholders, or a prebuilt WhereClause.
            parameters: Values for the placeholders in ``where`` and then ``having``.
            distinct: Emit ``SELECT DISTINCT``.
            group_by: GROUP BY text, or a sequence of column names.
            having: HAVING condition text.
            order_by: ORDER BY text such as ``"lastName DESC"``, or a sequence of column names.
            limit: Maximum number of rows, non-negative.
            offset: Rows to skip, non-negative.

        Raises:
            InvalidClauseError: If a clause is present but empty, or limit/offset is invalid.
            ParameterCountMismatchError: If the placeholder count differs from the parameter count.
            UnboundParameterError: If a named placeholder has no value.

        Returns:
            The statement.
        """
        column_list = "*" if columns is None else self._column_list(columns, what="select columns")
        keyword = "SELECT DISTINCT" if distinct else "SELECT"
        where_text, where_parameters = resolve_where(where, parameters)
        tail = build_clause_tail(
            ClauseSpec(group_by=group_by, having=having, order_by=order_by, limit=limit, offset=offset),
            always_quote=self.config.always_quote_identifiers,
        )
        where_sql = f" WHERE {where_text}" if where_text is not None else ""
        sql = f"{keyword} {column_list} FROM {self._source(from_)}{where_sql}{tail}"
        return self._finish("select", sql, where_parameters)

    def select_all(self, from_: Source, order_by: "Optional[ClauseText]" = None) -> Statement:
        return self.select(from_, order_by=order_by)

    def select_matching(
        self,
        from_: Source,
        conditions: "Optional[MatchInput]",
        columns: Columns = None,
        *,
        distinct: bool = False,
        group_by: "Optional[ClauseText]" = None,
        having: "Optional[ClauseText]" = None,
        order_by: "Optional[ClauseText]" = None,
        limit: "Optional[int]" = None,
        offset: "Optional[int]" = None,
    ) -> Statement:
        """Select rows whose columns match the given values.

        Scalars compare with ``=``, ``None`` with ``IS NULL`` and lists with
        ``IN``. An empty list matches no rows. No conditions selects every row.

        Returns:
            The statement.
        """
        where = build_match_clause(conditions, always_quote=self.config.always_quote_identifiers)
        return self.select(
            from_,
            columns,
            where,
            distinct=distinct,
            group_by=group_by,
            having=having,
            order_by=order_by,
            limit=limit,
            offset=offset,
        )

    def count(
        self,
        from_: Source,
        columns: Columns = None,
        where: WhereInput = None,
        parameters: UserParameters = None,
    ) -> Statement:
        """Build ``SELECT COUNT(...) FROM ...``.

        Args:
            from_: Table name or Raw source.
            columns: The counted column, as a one-entry sequence holding a
                name or Raw expression (e.g. ``[Raw("DISTINCT lastName")]``).
                None counts ``*``.
            where: Optional condition text or prebuilt WhereClause.
            parameters: Values for the placeholders in ``where``.

        Raises:
            InvalidClauseError: If more than one column is given; SQLite's
                ``COUNT`` takes a single argument.

        Returns:
            The statement.
        """
        if columns is not None and not isinstance(columns, (str, Raw)) and len(columns) > 1:
            msg = f"COUNT takes a single column, got {len(columns)}"
            raise InvalidClauseError(msg)
        counted = "*" if columns is None else self._column_list(columns, what="count columns")
        where_text, where_parameters = resolve_where(where, parameters)
        where_sql = f" WHERE {where_text}" if where_text is not None else ""
        sql = f"SELECT COUNT({counted}) FROM {self._source(from_)}{where_sql}"
        return self._finish("count", sql, where_parameters)

    def count_matching(self, from_: Source, conditions: "Optional[MatchInput]", columns: Columns = None) -> Statement:
        where = build_match_clause(conditions, always_quote=self.config.always_quote_identifiers)
        return self.count(from_, columns, where)
