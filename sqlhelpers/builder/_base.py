"""Shared plumbing for the statement builder mixins."""

from collections.abc import Mapping, Sequence
from typing import Any, Optional, Union

from mypy_extensions import mypyc_attr

from sqlhelpers.config import StatementConfig
from sqlhelpers.core.clauses import WhereClause
from sqlhelpers.core.escaping import format_identifier
from sqlhelpers.core.parameters import ParameterSet, reconcile
from sqlhelpers.core.statement import Statement
from sqlhelpers.core.values import Raw
from sqlhelpers.exceptions import EmptyColumnListError, InvalidIdentifierError, ParameterStyleMismatchError
from sqlhelpers.utils.logging import get_logger

__all__ = ("BuilderBase", "UserParameters", "WhereInput")

logger = get_logger("builder")

UserParameters = Optional[Union[Sequence[Any], Mapping[str, Any]]]
WhereInput = Optional[Union[str, Raw, WhereClause]]


@mypyc_attr(allow_interpreted_subclasses=True)
class BuilderBase:
    """Identifier formatting and statement finalization used by every mixin."""

    __slots__ = ()

    config: StatementConfig

    def _ident(self, name: str) -> str:
        return format_identifier(name, always_quote=self.config.always_quote_identifiers)

    def _source(self, source: "Union[str, Raw]") -> str:
        """Render a FROM source: a table name, or Raw text for joins and subqueries."""
        if isinstance(source, Raw):
            if not source.sql.strip():
                msg = "FROM source must not be empty"
                raise InvalidIdentifierError(source, msg)
            return source.sql
        return self._ident(source)

    def _column_list(self, columns: "Sequence[Union[str, Raw]]", what: str = "columns") -> str:
        """Escape and join column names, passing Raw entries through.

        Raises:
            EmptyColumnListError: If no columns are given.

        Returns:
            Comma-separated column list.
        """
        if isinstance(columns, (str, Raw)):
            columns = [columns]
        if not columns:
            msg = f"At least one entry is required in {what}"
            raise EmptyColumnListError(msg)
        return ", ".join(c.sql if isinstance(c, Raw) else self._ident(c) for c in columns)

    @staticmethod
    def _merge_parameters(
        generated: "list[Any]", supplied: UserParameters, sql: str
    ) -> "Union[list[Any], Mapping[str, Any]]":
        """Append caller parameters to the ones the builder generated.

        Raises:
            ParameterStyleMismatchError: If a mapping is supplied while the
                builder itself emitted positional placeholders.

        Returns:
            The combined parameters.
        """
        if isinstance(supplied, Mapping):
            if generated:
                msg = "Named parameters cannot be combined with the positional values this statement binds"
                raise ParameterStyleMismatchError(msg, sql)
            return supplied
        return [*generated, *(supplied or ())]

    def _finish(self, kind: str, sql: str, parameters: UserParameters = None) -> Statement:
        """Validate parameters against the final text and wrap both in a Statement.

        Returns:
            The built statement.
        """
        bound: ParameterSet
        if self.config.validate_parameters:
            bound = reconcile(sql, parameters)
        elif isinstance(parameters, Mapping):
            bound = dict(parameters)
        else:
            bound = tuple(parameters or ())
        if self.config.log_statements:
            logger.debug("Built %s statement: %s", kind, sql, extra={"extra_fields": {"parameter_count": len(bound)}})
        return Statement(sql, bound)
