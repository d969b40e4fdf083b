from typing import Any, Optional

__all__ = (
    "CheckViolationError",
    "CorruptSchemaError",
    "DatabaseLockedError",
    "EmptyColumnListError",
    "EmptyRowListError",
    "EngineError",
    "EngineSyntaxError",
    "ForeignKeyViolationError",
    "IntegrityError",
    "InvalidClauseError",
    "InvalidIdentifierError",
    "MissingParameterError",
    "NotNullViolationError",
    "OperationalError",
    "ParameterCountMismatchError",
    "ParameterError",
    "ParameterStyleMismatchError",
    "RowArityMismatchError",
    "SQLBuilderError",
    "SQLHelpersError",
    "SQLParsingError",
    "SchemaError",
    "TableNotFoundError",
    "UnboundParameterError",
    "UniqueViolationError",
    "UnknownParameterError",
    "UnsupportedValueTypeError",
)


class SQLHelpersError(Exception):
    """Base exception class from which all sqlhelpers exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLHelpersError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


# -- Statement building errors --
class SQLBuilderError(SQLHelpersError):
    """Issues building SQL statements."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues building SQL statement."
        super().__init__(message)


class InvalidIdentifierError(SQLBuilderError, ValueError):
    """Raised when a table, column or index name cannot be used as an identifier."""

    identifier: Any

    def __init__(self, identifier: Any, message: Optional[str] = None) -> None:
        self.identifier = identifier
        if message is None:
            message = f"Invalid identifier: {identifier!r}"
        super().__init__(message)


class EmptyColumnListError(SQLBuilderError):
    """Raised when a statement requires at least one column and none were given."""


class EmptyRowListError(SQLBuilderError):
    """Raised when a bulk insert is given no rows."""


class RowArityMismatchError(SQLBuilderError):
    """Raised when an insert row does not have one value per column."""

    row_index: int
    expected: int
    actual: int

    def __init__(self, row_index: int, expected: int, actual: int) -> None:
        self.row_index = row_index
        self.expected = expected
        self.actual = actual
        super().__init__(f"Row {row_index} has {actual} values but {expected} columns were given")


class InvalidClauseError(SQLBuilderError, ValueError):
    """Raised when an optional clause is present but malformed."""


class UnsupportedValueTypeError(SQLBuilderError, TypeError):
    """Raised when a value is outside the supported value set."""

    value: Any

    def __init__(self, value: Any, message: Optional[str] = None) -> None:
        self.value = value
        if message is None:
            message = f"Unsupported value type {type(value).__name__!r}"
        super().__init__(message)


# -- SQL Parameter Errors --
class ParameterError(SQLHelpersError):
    """Base class for parameter-related errors."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        """Initialize with optional SQL context."""
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class ParameterCountMismatchError(ParameterError):
    """Raised when the number of positional values differs from the number of ``?`` placeholders."""

    expected: int
    actual: int

    def __init__(self, expected: int, actual: int, sql: Optional[str] = None) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Statement has {expected} positional placeholders but {actual} values were supplied", sql)


class MissingParameterError(ParameterError):
    """Raised when required parameters are missing."""


class UnboundParameterError(MissingParameterError):
    """Raised when a named placeholder has no supplied value."""

    name: str

    def __init__(self, name: str, sql: Optional[str] = None) -> None:
        self.name = name
        super().__init__(f"No value supplied for named parameter {name!r}", sql)


class UnknownParameterError(ParameterError):
    """Raised when encountering unknown parameter syntax."""


class ParameterStyleMismatchError(ParameterError):
    """Error when parameter style doesn't match SQL placeholder style.

    This exception is raised when there's a mismatch between the parameter type
    (dictionary, tuple, etc.) and the placeholder style in the SQL statement
    (named, positional), or when a statement mixes both styles.
    """

    def __init__(self, message: Optional[str] = None, sql: Optional[str] = None) -> None:
        if message is None:
            message = "Parameter style mismatch: dictionary parameters provided but no named placeholders found in SQL."
        super().__init__(message, sql)


# -- Schema Errors --
class SchemaError(SQLHelpersError):
    """Base class for catalog introspection errors."""


class TableNotFoundError(SchemaError):
    """Raised when the catalog has no columns for the requested table."""

    table: str

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(f"Table {table!r} does not exist")


class CorruptSchemaError(SchemaError):
    """Raised when catalog rows are inconsistent, e.g. a listed table without columns."""


class SQLParsingError(SQLHelpersError):
    """SQL text could not be parsed."""


# -- Execution collaborator errors --
class EngineError(SQLHelpersError):
    """Base class for failures reported by the execution collaborator."""


class EngineSyntaxError(EngineError, SQLParsingError):
    """The engine rejected the statement text."""


class OperationalError(EngineError):
    """Operational failure inside the engine (I/O, missing objects)."""


class DatabaseLockedError(OperationalError):
    """The database or table is busy or locked."""


class IntegrityError(EngineError):
    """Data integrity error."""


class UniqueViolationError(IntegrityError):
    """A unique constraint was violated."""


class ForeignKeyViolationError(IntegrityError):
    """A foreign key constraint was violated."""


class NotNullViolationError(IntegrityError):
    """A not-null constraint was violated."""


class CheckViolationError(IntegrityError):
    """A check constraint was violated."""
