"""Field-level helpers shared by every message parser.

Python's int() and float() accept surrounding whitespace, underscores and
other spellings that never appear on the wire, so numeric fields are
matched against explicit patterns before conversion.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from fsd_messages.protocol.exceptions import FsdMessageParseError, InvalidFieldCount

FIELD_SEPARATOR = ":"

U8_MAX = 0xFF
U16_MAX = 0xFFFF
U32_MAX = 0xFFFF_FFFF
U64_MAX = 0xFFFF_FFFF_FFFF_FFFF
I32_MIN = -(2**31)
I32_MAX = 2**31 - 1

_UNSIGNED_RE = re.compile(r"\+?[0-9]+")
_SIGNED_RE = re.compile(r"[+-]?[0-9]+")
_HEX_RE = re.compile(r"\+?[0-9a-fA-F]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


def check_min_fields(fields: Sequence[str], minimum: int) -> None:
    """Raise InvalidFieldCount unless at least ``minimum`` fields are present."""
    if len(fields) < minimum:
        raise InvalidFieldCount(minimum, len(fields))


def check_exact_fields(fields: Sequence[str], count: int) -> None:
    """Raise InvalidFieldCount unless exactly ``count`` fields are present."""
    if len(fields) != count:
        raise InvalidFieldCount(count, len(fields))


def uppercase_fields(record: object, *names: str) -> None:
    """Uppercase the named string attributes of a frozen record in place.

    Callsigns are canonically uppercase on both decode and encode paths,
    so records call this from ``__post_init__``. None values are skipped.
    """
    for name in names:
        value = getattr(record, name)
        if value is not None:
            object.__setattr__(record, name, value.upper())


def join_fields(fields: Sequence[str]) -> str:
    """Re-assemble fields that were split on a colon belonging to free text."""
    return FIELD_SEPARATOR.join(fields)


def parse_unsigned(
    text: str,
    error: type[FsdMessageParseError],
    maximum: int = U32_MAX,
    raw: str | None = None,
) -> int:
    """Parse a non-negative decimal integer no larger than ``maximum``.

    Args:
        text: Field text
        error: Exception class raised on failure
        maximum: Largest accepted value (width of the wire type)
        raw: Text to carry in the error instead of ``text``

    Raises:
        error: If the text is not a decimal integer in range

    """
    if _UNSIGNED_RE.fullmatch(text) is None:
        raise error(text if raw is None else raw)
    value = int(text)
    if value > maximum:
        raise error(text if raw is None else raw)
    return value


def parse_signed(
    text: str,
    error: type[FsdMessageParseError],
    minimum: int = I32_MIN,
    maximum: int = I32_MAX,
) -> int:
    """Parse a signed decimal integer within [minimum, maximum]."""
    if _SIGNED_RE.fullmatch(text) is None:
        raise error(text)
    value = int(text)
    if not minimum <= value <= maximum:
        raise error(text)
    return value


def parse_hex(text: str, error: type[FsdMessageParseError], maximum: int = U16_MAX) -> int:
    """Parse a hexadecimal integer without a 0x prefix."""
    if _HEX_RE.fullmatch(text) is None:
        raise error(text)
    value = int(text, 16)
    if value > maximum:
        raise error(text)
    return value


def parse_float(text: str, error: type[FsdMessageParseError]) -> float:
    """Parse a decimal floating point field."""
    if _FLOAT_RE.fullmatch(text) is None:
        raise error(text)
    return float(text)


def parse_optional_unsigned(text: str, error: type[FsdMessageParseError], maximum: int = U32_MAX) -> int:
    """Parse an unsigned integer where an empty field means zero."""
    if not text:
        return 0
    return parse_unsigned(text, error, maximum)


def is_unsigned(text: str) -> bool:
    """Return True when the text is a plain unsigned decimal integer."""
    return _UNSIGNED_RE.fullmatch(text) is not None and int(text) <= U32_MAX
