"""Placeholder scanning and parameter reconciliation.

Statements use either positional ``?`` placeholders or named placeholders
(``$name``, ``:name``, ``@name``). :func:`reconcile` checks supplied values
against the placeholders actually present in the text and returns the
parameter set the execution collaborator expects.

Named binding is deliberately asymmetric: a placeholder without a supplied
value fails, while supplied entries that no placeholder uses are ignored and
dropped from the result.
"""

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Final, Optional, Union

from sqlhelpers.exceptions import (
    ParameterCountMismatchError,
    ParameterStyleMismatchError,
    UnboundParameterError,
    UnknownParameterError,
)
from sqlhelpers.utils.logging import get_logger

__all__ = (
    "ParameterSet",
    "ParameterStyle",
    "PlaceholderInfo",
    "detect_parameter_style",
    "extract_placeholders",
    "reconcile",
)

logger = get_logger("core.parameters")

ParameterSet = Union[tuple[Any, ...], dict[str, Any]]

# Literals, quoted identifiers and comments are matched first so placeholders inside them are skipped.
# A sigil directly after an identifier character is part of that identifier, as in "price$usd".
_PLACEHOLDER_REGEX: Final = re.compile(
    r"""
    (?P<squote>'(?:[^']|'')*') |
    (?P<dquote>"(?:[^"]|"")*") |
    (?P<backtick>`(?:[^`]|``)*`) |
    (?P<bracket>\[[^\]]*\]) |
    (?P<line_comment>--[^\r\n]*) |
    (?P<block_comment>/\*[\s\S]*?(?:\*/|$)) |
    (?P<numeric>\?(?P<number>\d+)) |
    (?P<qmark>\?) |
    (?P<named>(?<![A-Za-z0-9_$])(?P<sigil>[$:@])(?P<name>[A-Za-z0-9_]+))
    """,
    re.VERBOSE,
)


class ParameterStyle(Enum):
    """Placeholder styles understood by SQLite."""

    NONE = auto()
    QMARK = auto()
    NUMERIC = auto()
    NAMED_DOLLAR = auto()
    NAMED_COLON = auto()
    NAMED_AT = auto()

    def __str__(self) -> str:
        """String representation for better error messages.

        Returns:
            Lowercase name of the style.
        """
        return self.name.lower()

    @property
    def is_named(self) -> bool:
        return self in {ParameterStyle.NAMED_DOLLAR, ParameterStyle.NAMED_COLON, ParameterStyle.NAMED_AT}


_SIGIL_STYLES: "Final[dict[str, ParameterStyle]]" = {
    "$": ParameterStyle.NAMED_DOLLAR,
    ":": ParameterStyle.NAMED_COLON,
    "@": ParameterStyle.NAMED_AT,
}


@dataclass(frozen=True)
class PlaceholderInfo:
    """A placeholder found in statement text."""

    name: "Optional[str]"
    """Parameter name without its sigil, None for positional placeholders."""

    style: ParameterStyle
    """The placeholder style."""

    position: int
    """Offset in the SQL string."""

    ordinal: int = field(compare=False)
    """Order of appearance in SQL (0-based)."""

    placeholder_text: str = field(compare=False)
    """The placeholder as written."""


def extract_placeholders(sql: str) -> "list[PlaceholderInfo]":
    """Extract all placeholders from SQL in order of appearance.

    Args:
        sql: SQL string to scan.

    Returns:
        List of placeholders, skipping any inside literals or comments.
    """
    placeholders: list[PlaceholderInfo] = []
    for match in _PLACEHOLDER_REGEX.finditer(sql):
        if match.group("numeric"):
            style, name = ParameterStyle.NUMERIC, match.group("number")
        elif match.group("qmark"):
            style, name = ParameterStyle.QMARK, None
        elif match.group("named"):
            style, name = _SIGIL_STYLES[match.group("sigil")], match.group("name")
        else:
            # literal, quoted identifier or comment
            continue
        placeholders.append(PlaceholderInfo(name, style, match.start(), len(placeholders), match.group(0)))
    return placeholders


def detect_parameter_style(sql: str) -> ParameterStyle:
    """Return the placeholder style used by ``sql``.

    Raises:
        ParameterStyleMismatchError: If positional and named placeholders are mixed.

    Returns:
        The style of the first placeholder, or ``NONE`` when there are none.
    """
    placeholders = extract_placeholders(sql)
    if not placeholders:
        return ParameterStyle.NONE
    _check_single_style(placeholders, sql)
    return placeholders[0].style


def _check_single_style(placeholders: "list[PlaceholderInfo]", sql: str) -> None:
    numbered = [p for p in placeholders if p.style is ParameterStyle.NUMERIC]
    if numbered:
        msg = f"Numbered placeholder {numbered[0].placeholder_text!r} is not supported; use '?' or a named placeholder"
        raise UnknownParameterError(msg, sql)
    has_positional = any(p.style is ParameterStyle.QMARK for p in placeholders)
    has_named = any(p.style.is_named for p in placeholders)
    if has_positional and has_named:
        msg = "Statement mixes positional '?' and named placeholders"
        raise ParameterStyleMismatchError(msg, sql)


def reconcile(sql: str, parameters: "Optional[Union[Sequence[Any], Mapping[str, Any]]]" = None) -> ParameterSet:
    """Match supplied values with the placeholders in ``sql``.

    Args:
        sql: Statement text.
        parameters: A sequence for ``?`` placeholders, a mapping for named
            placeholders, or None for no parameters.

    Raises:
        ParameterCountMismatchError: If the number of ``?`` placeholders differs
            from the number of supplied values.
        UnboundParameterError: If a named placeholder has no entry in the mapping.
        ParameterStyleMismatchError: If the statement mixes styles or the
            parameter container does not fit the placeholder style.
        UnknownParameterError: If the statement uses numbered ``?NNN`` placeholders.

    Returns:
        A tuple of positional values in placeholder order, or a dict holding
        exactly the names the statement references, in order of first use.
    """
    placeholders = extract_placeholders(sql)
    _check_single_style(placeholders, sql)
    named = [p for p in placeholders if p.style.is_named]

    if parameters is None:
        parameters = ()

    if isinstance(parameters, Mapping):
        if len(named) != len(placeholders):
            msg = "Mapping parameters supplied but the statement uses positional '?' placeholders"
            raise ParameterStyleMismatchError(msg, sql)
        bound: dict[str, Any] = {}
        for placeholder in named:
            name = placeholder.name or ""
            if name not in parameters:
                raise UnboundParameterError(name, sql)
            bound.setdefault(name, parameters[name])
        unused = set(parameters) - set(bound)
        if unused:
            logger.debug("Ignoring unused named parameters: %s", ", ".join(sorted(map(str, unused))))
        return bound

    if isinstance(parameters, (str, bytes)) or not isinstance(parameters, Sequence):
        msg = f"Parameters must be a sequence or a mapping, got {type(parameters).__name__!r}"
        raise ParameterStyleMismatchError(msg, sql)

    if named:
        if not parameters:
            raise UnboundParameterError(named[0].name or "", sql)
        msg = "Sequence parameters supplied but the statement uses named placeholders"
        raise ParameterStyleMismatchError(msg, sql)

    if len(placeholders) != len(parameters):
        raise ParameterCountMismatchError(len(placeholders), len(parameters), sql)
    return tuple(parameters)
