"""JSON encoding used by structured logging."""

import json
from typing import Any

__all__ = ("encode_json",)


def _default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    return str(value)


def encode_json(data: Any) -> str:
    """Encode data to a compact JSON string, stringifying unknown types."""
    return json.dumps(data, default=_default, separators=(",", ":"), ensure_ascii=False)
