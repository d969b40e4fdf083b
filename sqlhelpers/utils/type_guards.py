"""Type guard functions for runtime type checking in sqlhelpers.

These replace ad-hoc ``isinstance``/``hasattr`` chains at the builder and
facade seams.
"""

from collections.abc import Mapping, Sequence
from collections.abc import Set as AbstractSet
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from typing_extensions import TypeGuard

    from sqlhelpers.driver import SupportsLastInsertId

__all__ = (
    "has_sqlite_error",
    "is_mapping",
    "is_pair",
    "is_unordered_collection",
    "is_value_sequence",
    "supports_last_insert_id",
)


def is_mapping(obj: Any) -> "TypeGuard[Mapping[Any, Any]]":
    return isinstance(obj, Mapping)


def is_value_sequence(obj: Any) -> "TypeGuard[Sequence[Any]]":
    """Check if a value is a list or tuple of values (not text or bytes).

    Args:
        obj: Value to check.

    Returns:
        True for lists and tuples.
    """
    return isinstance(obj, (list, tuple))


def is_unordered_collection(obj: Any) -> bool:
    """Check if a value is a set-like collection whose order is not reproducible."""
    return isinstance(obj, AbstractSet)


def is_pair(obj: Any) -> "TypeGuard[tuple[Any, Any]]":
    return isinstance(obj, (list, tuple)) and len(obj) == 2


def supports_last_insert_id(executor: Any) -> "TypeGuard[SupportsLastInsertId]":
    """Check if an execution collaborator can report the last inserted row id.

    Args:
        executor: Execution collaborator.

    Returns:
        True when the collaborator exposes a callable ``last_insert_id``.
    """
    return callable(getattr(executor, "last_insert_id", None))


def has_sqlite_error(error: Any) -> bool:
    """Check if a driver exception carries SQLite extended error details.

    ``sqlite3.Error`` exposes ``sqlite_errorcode`` and ``sqlite_errorname``
    on Python 3.11+.

    Args:
        error: Exception raised by the driver.

    Returns:
        True when both attributes are present.
    """
    return hasattr(error, "sqlite_errorcode") and hasattr(error, "sqlite_errorname")
