"""Immutable schema values read from the SQLite catalog."""

from dataclasses import dataclass, field
from typing import Optional

__all__ = ("ColumnSchema", "IndexSchema", "TableSchema")


@dataclass(frozen=True)
class ColumnSchema:
    """One column as reported by ``PRAGMA table_info``.

    ``default`` is the default expression text exactly as declared (e.g.
    ``"'unknown'"`` or ``"CURRENT_TIMESTAMP"``), or None.
    ``primary_key_position`` is the 1-based position within the primary key,
    0 when the column is not part of it.
    """

    name: str
    type: str = ""
    not_null: bool = False
    default: "Optional[str]" = None
    primary_key_position: int = 0

    @property
    def primary_key(self) -> bool:
        return self.primary_key_position > 0


@dataclass(frozen=True)
class TableSchema:
    """A table and its columns in declaration order."""

    name: str
    columns: "tuple[ColumnSchema, ...]" = field(default_factory=tuple)

    @property
    def column_names(self) -> "tuple[str, ...]":
        return tuple(column.name for column in self.columns)

    @property
    def primary_key(self) -> "tuple[str, ...]":
        """Primary key column names in key order."""
        key_columns = sorted((c for c in self.columns if c.primary_key), key=lambda c: c.primary_key_position)
        return tuple(column.name for column in key_columns)

    def column(self, name: str) -> "Optional[ColumnSchema]":
        """Return the column with the given name, or None if not found."""
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def __repr__(self) -> str:
        return f"TableSchema(name={self.name!r}, {len(self.columns)} columns)"


@dataclass(frozen=True)
class IndexSchema:
    """An index on a table.

    ``origin`` is ``"c"`` for ``CREATE INDEX``, ``"u"`` for a UNIQUE
    constraint and ``"pk"`` for a PRIMARY KEY constraint.
    """

    name: str
    table: str
    columns: "tuple[str, ...]" = field(default_factory=tuple)
    unique: bool = False
    origin: str = "c"
