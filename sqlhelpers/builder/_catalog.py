"""Catalog queries used for schema introspection."""

from sqlhelpers.builder._base import BuilderBase
from sqlhelpers.core.escaping import escape_identifier
from sqlhelpers.core.statement import Statement

__all__ = ("CatalogBuilderMixin",)


class CatalogBuilderMixin(BuilderBase):
    """Statements that read SQLite's own metadata.

    The schema reader in :mod:`sqlhelpers.schema` turns their rows into
    structured descriptions.
    """

    __slots__ = ()

    def table_names(self) -> Statement:
        sql = (
            "SELECT name FROM sqlite_master "
            "WHERE type = 'table' AND name NOT LIKE 'sqlite\\_%' ESCAPE '\\' ORDER BY name"
        )
        return self._finish("catalog", sql)

    def table_info(self, table: str) -> Statement:
        return self._finish("catalog", f"PRAGMA table_info({escape_identifier(table)})")

    def index_list(self, table: str) -> Statement:
        return self._finish("catalog", f"PRAGMA index_list({escape_identifier(table)})")

    def index_info(self, index: str) -> Statement:
        return self._finish("catalog", f"PRAGMA index_info({escape_identifier(index)})")
