"""Statement builders.

``sql`` is a ready-to-use :class:`StatementBuilder` with the default
configuration::

    from sqlhelpers import sql

    statement = sql.insert("people", ["firstName", "lastName"], [["James", "Dean"]])
    cursor.execute(*statement)
"""

from typing import Optional

from sqlhelpers.builder._base import BuilderBase, UserParameters, WhereInput
from sqlhelpers.builder._catalog import CatalogBuilderMixin
from sqlhelpers.builder._ddl import ColumnDefinition, ColumnSpec, DDLBuilderMixin
from sqlhelpers.builder._dml import DeleteBuilderMixin, InsertBuilderMixin, UpdateBuilderMixin
from sqlhelpers.builder._select import SelectBuilderMixin
from sqlhelpers.config import DEFAULT_CONFIG, StatementConfig

__all__ = (
    "BuilderBase",
    "ColumnDefinition",
    "ColumnSpec",
    "StatementBuilder",
    "UserParameters",
    "WhereInput",
    "sql",
)


class StatementBuilder(
    DDLBuilderMixin,
    InsertBuilderMixin,
    UpdateBuilderMixin,
    DeleteBuilderMixin,
    SelectBuilderMixin,
    CatalogBuilderMixin,
):
    """Builds SQLite statements from structured input.

    Every method returns a :class:`~sqlhelpers.core.statement.Statement` or
    raises a :class:`~sqlhelpers.exceptions.SQLHelpersError` subclass; nothing
    is executed. The builder holds only its configuration, so one instance can
    be shared freely between threads.
    """

    __slots__ = ("config",)

    def __init__(self, config: "Optional[StatementConfig]" = None) -> None:
        self.config = config or DEFAULT_CONFIG

    def __repr__(self) -> str:
        return f"{type(self).__name__}(config={self.config!r})"


sql = StatementBuilder()
