"""Built statement container."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import sqlglot
from sqlglot.errors import ParseError

from sqlhelpers.core.parameters import ParameterSet
from sqlhelpers.exceptions import SQLParsingError

if TYPE_CHECKING:
    from sqlglot import exp

__all__ = ("DIALECT", "Statement")

DIALECT = "sqlite"


@dataclass(frozen=True)
class Statement:
    """SQL text and the parameters that go with it.

    Statements unpack as ``sql, parameters = statement`` so they can be handed
    straight to a DB-API ``execute`` call.
    """

    sql: str
    parameters: ParameterSet = field(default=())

    def __iter__(self) -> Iterator[Any]:
        yield self.sql
        yield self.parameters

    def __str__(self) -> str:
        return self.sql

    @property
    def is_named(self) -> bool:
        return isinstance(self.parameters, dict)

    def to_expression(self) -> "exp.Expression":
        """Parse the statement text into a sqlglot expression tree.

        Raises:
            SQLParsingError: If sqlglot cannot parse the text.

        Returns:
            The parsed expression, using the SQLite dialect.
        """
        try:
            expression = sqlglot.parse_one(self.sql, read=DIALECT)
        except ParseError as exc:
            msg = f"Unable to parse statement: {exc}"
            raise SQLParsingError(msg) from exc
        if expression is None:
            msg = "Statement text is empty"
            raise SQLParsingError(msg)
        return expression
