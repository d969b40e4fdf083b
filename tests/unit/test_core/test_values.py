"""Tests for the value model."""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

import pytest

from sqlhelpers.core.values import Raw, ValueKind, coerce_value, is_raw, value_kind
from sqlhelpers.exceptions import UnsupportedValueTypeError


@pytest.mark.parametrize(
    ("value", "kind"),
    [
        (None, ValueKind.NULL),
        (True, ValueKind.INTEGER),
        (3, ValueKind.INTEGER),
        (3.25, ValueKind.REAL),
        ("text", ValueKind.TEXT),
        (b"blob", ValueKind.BLOB),
        (bytearray(b"blob"), ValueKind.BLOB),
        (memoryview(b"blob"), ValueKind.BLOB),
        (Raw("now()"), ValueKind.RAW),
        (date(2024, 5, 1), ValueKind.TEXT),
        (Decimal("9.99"), ValueKind.TEXT),
    ],
    ids=["null", "bool", "int", "float", "text", "bytes", "bytearray", "memoryview", "raw", "date", "decimal"],
)
def test_value_kind(value: Any, kind: ValueKind) -> None:
    assert value_kind(value) is kind


@pytest.mark.parametrize("value", [object(), [1, 2], {"a": 1}, {1, 2}], ids=["object", "list", "dict", "set"])
def test_value_kind_rejects_values_outside_the_closed_set(value: Any) -> None:
    with pytest.raises(UnsupportedValueTypeError) as exc_info:
        value_kind(value)
    assert exc_info.value.value is value


def test_coerce_temporal_values_to_iso_text() -> None:
    assert coerce_value(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02 03:04:05"
    assert coerce_value(date(2024, 1, 2)) == "2024-01-02"
    assert coerce_value(time(12, 30)) == "12:30:00"


def test_coerce_passes_supported_values_through() -> None:
    blob = b"\x01"
    raw = Raw("x")
    assert coerce_value(blob) is blob
    assert coerce_value(raw) is raw
    assert coerce_value(True) is True


def test_raw_equality_and_hash() -> None:
    assert Raw("a + 1") == Raw("a + 1")
    assert Raw("a") != Raw("b")
    assert Raw("a") != "a"
    assert len({Raw("a"), Raw("a")}) == 1
    assert repr(Raw("lower(x)")) == "Raw('lower(x)')"
    assert str(Raw("lower(x)")) == "lower(x)"
    assert is_raw(Raw("x"))
    assert not is_raw("x")


def test_raw_requires_text() -> None:
    with pytest.raises(UnsupportedValueTypeError, match="Raw expects SQL text"):
        Raw(1)  # type: ignore[arg-type]


def test_value_kind_string_representation() -> None:
    assert str(ValueKind.BLOB) == "blob"
