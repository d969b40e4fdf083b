"""CREATE, ALTER and DROP statements for tables and indexes."""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final, Optional, Union

from sqlhelpers.builder._base import BuilderBase
from sqlhelpers.core.escaping import format_identifier
from sqlhelpers.core.statement import Statement
from sqlhelpers.core.values import Raw
from sqlhelpers.exceptions import EmptyColumnListError, InvalidClauseError, InvalidIdentifierError

__all__ = ("ColumnDefinition", "ColumnSpec", "DDLBuilderMixin")

# A leading quoted name ("..", `..` or [..]) followed by the rest of the definition.
_QUOTED_NAME: Final = re.compile(r'^\s*("(?:[^"]|"")+"|`(?:[^`]|``)+`|\[[^\]]+\])(.*)$', re.DOTALL)


@dataclass(frozen=True)
class ColumnDefinition:
    """Column name plus its type and constraint text, e.g. ``("id", "INTEGER PRIMARY KEY")``.

    The definition text is emitted verbatim; only the name is escaped. A Raw
    name is emitted as written.
    """

    name: "Union[str, Raw]"
    definition: str = ""

    @classmethod
    def parse(cls, text: str) -> "ColumnDefinition":
        """Split a definition string such as ``"firstName TEXT NOT NULL"``.

        The first token is the column name. A leading name that is already
        quoted is kept as written.

        Raises:
            InvalidIdentifierError: If the text is empty.

        Returns:
            The parsed definition.
        """
        if not text or not text.strip():
            msg = "Column definition must not be empty"
            raise InvalidIdentifierError(text, msg)
        quoted = _QUOTED_NAME.match(text)
        if quoted:
            return cls(Raw(quoted.group(1)), quoted.group(2).strip())
        name, *rest = text.split(None, 1)
        return cls(name, rest[0].strip() if rest else "")

    def render(self, always_quote: bool = False) -> str:
        if isinstance(self.name, Raw):
            name = self.name.sql
        else:
            name = format_identifier(self.name, always_quote=always_quote)
        if self.definition:
            return f"{name} {self.definition}"
        return name


ColumnSpec = Union[str, ColumnDefinition, tuple[str, str]]
"""A column given as definition text, a ColumnDefinition, or a ``(name, definition)`` pair."""


class DDLBuilderMixin(BuilderBase):
    """Table and index definition statements."""

    __slots__ = ()

    def _column_definition(self, column: ColumnSpec) -> str:
        if isinstance(column, ColumnDefinition):
            definition = column
        elif isinstance(column, str):
            definition = ColumnDefinition.parse(column)
        elif isinstance(column, tuple) and len(column) == 2:
            definition = ColumnDefinition(column[0], column[1])
        else:
            msg = f"Unsupported column definition: {column!r}"
            raise InvalidIdentifierError(column, msg)
        return definition.render(self.config.always_quote_identifiers)

    def create_table(
        self,
        name: str,
        columns: "Sequence[ColumnSpec]",
        constraints: "Optional[Sequence[str]]" = None,
        *,
        if_not_exists: bool = False,
    ) -> Statement:
        """Build ``CREATE TABLE``.

        Args:
            name: Table name.
            columns: Column definitions, in order.
            constraints: Table constraint texts such as ``"UNIQUE (a, b)"``, emitted verbatim.
            if_not_exists: Add ``IF NOT EXISTS``.

        Raises:
            EmptyColumnListError: If no columns are given.

        Returns:
            The statement.
        """
        if not columns:
            msg = f"Table {name!r} needs at least one column"
            raise EmptyColumnListError(msg)
        parts = [self._column_definition(column) for column in columns]
        for constraint in constraints or ():
            if not constraint or not constraint.strip():
                msg = "Table constraints must not be empty"
                raise InvalidClauseError(msg)
            parts.append(constraint.strip())
        exists = "IF NOT EXISTS " if if_not_exists else ""
        sql = f"CREATE TABLE {exists}{self._ident(name)} ({', '.join(parts)})"
        return self._finish("create_table", sql)

    def rename_table(self, name: str, new_name: str) -> Statement:
        sql = f"ALTER TABLE {self._ident(name)} RENAME TO {self._ident(new_name)}"
        return self._finish("rename_table", sql)

    def add_column(self, table: str, column: ColumnSpec) -> Statement:
        sql = f"ALTER TABLE {self._ident(table)} ADD COLUMN {self._column_definition(column)}"
        return self._finish("add_column", sql)

    def drop_table(self, name: str, *, if_exists: bool = False) -> Statement:
        exists = "IF EXISTS " if if_exists else ""
        return self._finish("drop_table", f"DROP TABLE {exists}{self._ident(name)}")

    def drop_table_if_exists(self, name: str) -> Statement:
        return self.drop_table(name, if_exists=True)

    def create_index(
        self,
        name: str,
        table: str,
        columns: "Sequence[Union[str, Raw]]",
        *,
        unique: bool = False,
        if_not_exists: bool = False,
    ) -> Statement:
        """Build ``CREATE [UNIQUE] INDEX``.

        Args:
            name: Index name.
            table: Indexed table.
            columns: Indexed columns in order; Raw entries (e.g. ``Raw("lastName DESC")``) are emitted verbatim.
            unique: Create a unique index.
            if_not_exists: Add ``IF NOT EXISTS``.

        Raises:
            EmptyColumnListError: If no columns are given.

        Returns:
            The statement.
        """
        column_list = self._column_list(columns, what=f"index {name!r}")
        kind = "UNIQUE INDEX" if unique else "INDEX"
        exists = "IF NOT EXISTS " if if_not_exists else ""
        sql = f"CREATE {kind} {exists}{self._ident(name)} ON {self._ident(table)} ({column_list})"
        return self._finish("create_index", sql)

    def create_unique_index(
        self, name: str, table: str, columns: "Sequence[Union[str, Raw]]", *, if_not_exists: bool = False
    ) -> Statement:
        return self.create_index(name, table, columns, unique=True, if_not_exists=if_not_exists)

    def drop_index(self, name: str, *, if_exists: bool = False) -> Statement:
        exists = "IF EXISTS " if if_exists else ""
        return self._finish("drop_index", f"DROP INDEX {exists}{self._ident(name)}")
