"""Bindable value model.

Every value handed to the builders belongs to a closed set of kinds. Plain
Python values map onto SQLite storage classes and are bound as parameters or
escaped inline; :class:`Raw` is the explicit opt-out that carries pre-formed
SQL text through untouched.
"""

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum, auto
from typing import Any, Final, Union

from mypy_extensions import mypyc_attr
from typing_extensions import TypeAlias

from sqlhelpers.exceptions import UnsupportedValueTypeError

__all__ = (
    "BLOB_TYPES",
    "Raw",
    "SQLValue",
    "ValueKind",
    "coerce_value",
    "is_raw",
    "value_kind",
)

BLOB_TYPES: Final = (bytes, bytearray, memoryview)


class ValueKind(Enum):
    """Storage kinds a value can take."""

    NULL = auto()
    INTEGER = auto()
    REAL = auto()
    TEXT = auto()
    BLOB = auto()
    RAW = auto()

    def __str__(self) -> str:
        return self.name.lower()


@mypyc_attr(allow_interpreted_subclasses=False)
class Raw:
    """Pre-formed SQL text that is inlined verbatim.

    Raw expressions are never escaped and never bound. They are meant for
    function calls, column references and placeholders written by the caller,
    e.g. ``Raw("lower(firstName)")`` or ``Raw("CURRENT_TIMESTAMP")``. Do not wrap
    untrusted input in ``Raw``.
    """

    __slots__ = ("sql",)

    def __init__(self, sql: str) -> None:
        if not isinstance(sql, str):
            msg = f"Raw expects SQL text, got {type(sql).__name__!r}"
            raise UnsupportedValueTypeError(sql, msg)
        self.sql = sql

    def __repr__(self) -> str:
        return f"Raw({self.sql!r})"

    def __str__(self) -> str:
        return self.sql

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Raw):
            return self.sql == other.sql
        return NotImplemented

    def __hash__(self) -> int:
        return hash((Raw, self.sql))


SQLValue: TypeAlias = Union[None, bool, int, float, str, bytes, bytearray, memoryview, Raw]
"""Values accepted by the builders, before coercion."""


def is_raw(value: Any) -> bool:
    return isinstance(value, Raw)


def value_kind(value: Any) -> ValueKind:
    """Classify a value into its storage kind.

    Args:
        value: Value to classify. Coercible types (dates, times, decimals) are
            classified after coercion.

    Raises:
        UnsupportedValueTypeError: If the value is outside the supported set.

    Returns:
        The value's kind.
    """
    value = coerce_value(value)
    if value is None:
        return ValueKind.NULL
    if isinstance(value, Raw):
        return ValueKind.RAW
    # bool is an int subclass and is stored as 0/1
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.REAL
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, BLOB_TYPES):
        return ValueKind.BLOB
    raise UnsupportedValueTypeError(value)


def coerce_value(value: Any) -> Any:
    """Coerce driver-friendly Python types into the supported value set.

    Dates and times become ISO-8601 text and decimals become their text form,
    matching how SQLite stores them. Values already in the supported set are
    returned unchanged, anything else raises.

    Raises:
        UnsupportedValueTypeError: If the value cannot be represented.

    Returns:
        The coerced value.
    """
    if value is None or isinstance(value, (bool, int, float, str, Raw, *BLOB_TYPES)):
        return value
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    raise UnsupportedValueTypeError(value)
