"""Value types shared by several FSD message kinds.

Transponder codes, radio frequencies, altitudes, plane info and flight
plans each have their own textual wire form; this module owns the
conversion in both directions so message records never format these
values by hand.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Self

from fsd_messages.protocol.enums import FlightRules
from fsd_messages.protocol.exceptions import (
    InvalidAltitude,
    InvalidFrequency,
    InvalidMinute,
    InvalidSpeed,
    InvalidTime,
    InvalidTransponderCode,
)
from fsd_messages.protocol.fields import (
    U8_MAX,
    U16_MAX,
    U32_MAX,
    check_exact_fields,
    parse_optional_unsigned,
    parse_unsigned,
)

TRANSPONDER_MAX_DIGIT = 7
TRANSPONDER_MAX_CODE = 7777
COMPACT_FREQUENCY_LENGTH = 5
MAX_MINUTE = 59
FLIGHT_PLAN_FIELD_COUNT = 15

_DIGITS_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True, slots=True)
class TransponderCode:
    """A four digit squawk code whose digits are each 0-7.

    The code is stored as the decimal number formed by its digits, so
    squawk 4700 is ``TransponderCode(4700)``.

    Example:
        >>> str(TransponderCode.parse("0200"))
        '0200'
        >>> TransponderCode(2200).to_bcd()
        8704

    """

    code: int

    def __post_init__(self) -> None:
        if not 0 <= self.code <= TRANSPONDER_MAX_CODE or any(
            digit > str(TRANSPONDER_MAX_DIGIT) for digit in f"{self.code:04}"
        ):
            raise InvalidTransponderCode(f"{self.code:04}")

    @classmethod
    def parse(cls, text: str) -> Self:
        """Parse the text form, e.g. ``"7000"`` or ``"200"``."""
        return cls(parse_unsigned(text, InvalidTransponderCode, U16_MAX))

    @classmethod
    def from_bcd(cls, value: int) -> Self:
        """Decode the FSUIPC offset 0x0354 layout: one digit per nibble."""
        digits = f"{value:04x}"
        if not 0 <= value <= U16_MAX or not digits.isdigit():
            raise InvalidTransponderCode(str(value))
        return cls(int(digits))

    def to_bcd(self) -> int:
        """Pack the digits one per nibble, most significant digit first."""
        digits = f"{self.code:04}"
        return (int(digits[0]) << 12) | (int(digits[1]) << 8) | (int(digits[2]) << 4) | int(digits[3])

    def __str__(self) -> str:
        return f"{self.code:04}"


@dataclass(frozen=True, slots=True, order=True)
class RadioFrequency:
    """A VHF airband frequency stored as (whole MHz, thousandths).

    118.300 MHz is ``RadioFrequency(118, 300)``. Besides the civil band
    118-137 MHz, two reserved channels are allowed: 199.998 and 149.999
    (the data channel clients use to exchange non-voice state).

    Example:
        >>> RadioFrequency(118, 300).to_dotted()
        '118.300'
        >>> str(RadioFrequency.parse_compact("18300"))
        '18300'

    """

    whole: int
    thousandths: int

    def __post_init__(self) -> None:
        valid = (
            118 <= self.whole <= 137  # noqa: PLR2004
            or (self.whole, self.thousandths) == (199, 998)
            or (self.whole, self.thousandths) == (149, 999)
        )
        if not valid or not 0 <= self.thousandths <= 999:  # noqa: PLR2004
            raise InvalidFrequency(f"{self.whole}.{self.thousandths:03}")

    @classmethod
    def parse_compact(cls, text: str) -> Self:
        """Parse the 5 character wire form (``18300`` for 118.300)."""
        if len(text) != COMPACT_FREQUENCY_LENGTH or _DIGITS_RE.fullmatch(text) is None:
            raise InvalidFrequency(text)
        return cls(int(text[:2]) + 100, int(text[2:]))

    @classmethod
    def parse_dotted(cls, text: str) -> Self:
        """Parse the human readable form (``118.300``).

        A fraction shorter than three digits is read as written, so
        ``118.3`` is 118.300. Longer fractions are rejected.
        """
        whole, dot, fraction = text.partition(".")
        if (
            not dot
            or _DIGITS_RE.fullmatch(whole) is None
            or _DIGITS_RE.fullmatch(fraction) is None
            or len(fraction) > 3  # noqa: PLR2004
        ):
            raise InvalidFrequency(text)
        return cls(int(whole), int(fraction.ljust(3, "0")))

    def to_dotted(self) -> str:
        return f"{self.whole}.{self.thousandths:03}"

    def to_compact(self) -> str:
        return f"{self.whole - 100}{self.thousandths:03}"

    def __str__(self) -> str:
        return self.to_compact()


def split_frequencies(text: str) -> list[RadioFrequency]:
    """Split ``&`` / ``@`` separated compact frequencies, dropping invalid ones.

    Example:
        >>> split_frequencies("@18300&@19000")
        [RadioFrequency(whole=118, thousandths=300), RadioFrequency(whole=119, thousandths=0)]

    """
    frequencies: list[RadioFrequency] = []
    for part in re.split(r"[&@]", text):
        try:
            frequencies.append(RadioFrequency.parse_compact(part))
        except InvalidFrequency:
            continue
    return frequencies


def group_frequencies(frequencies: Iterable[RadioFrequency], *, with_symbol: bool = False) -> str:
    """Join frequencies with ``&``, optionally prefixing each with ``@``."""
    prefix = "@" if with_symbol else ""
    return "&".join(f"{prefix}{frequency.to_compact()}" for frequency in frequencies)


def parse_altitude(text: str) -> int:
    """Parse an altitude in feet, accepting a ``FL`` flight level prefix.

    Example:
        >>> parse_altitude("FL350")
        35000
        >>> parse_altitude("")
        0

    Raises:
        InvalidAltitude: If the text is neither empty, a number nor FL + number

    """
    if not text:
        return 0
    if text[:2].upper() == "FL":
        return parse_unsigned(text[2:], InvalidAltitude, U32_MAX // 100, raw=text) * 100
    return parse_unsigned(text, InvalidAltitude, U32_MAX)


@dataclass(frozen=True, slots=True)
class PlaneInfo:
    """Aircraft model details exchanged in ``#SB...:PI:GEN`` lines."""

    equipment: str | None = None
    airline: str | None = None
    livery: str | None = None

    @classmethod
    def from_entries(cls, entries: Sequence[str]) -> Self:
        """Read ``KEY=VALUE`` entries; unknown keys and bare words are ignored."""
        values: dict[str, str] = {}
        for entry in entries:
            parts = entry.split("=")
            if len(parts) < 2:  # noqa: PLR2004
                continue
            key = parts[0].upper()
            if key in ("EQUIPMENT", "AIRLINE", "LIVERY"):
                values[key.lower()] = parts[1]
        return cls(**values)

    def to_text(self) -> str:
        entries = []
        if self.equipment is not None:
            entries.append(f"EQUIPMENT={self.equipment}")
        if self.airline is not None:
            entries.append(f"AIRLINE={self.airline}")
        if self.livery is not None:
            entries.append(f"LIVERY={self.livery}")
        return ":".join(entries)


def _parse_minutes(text: str) -> int:
    minutes = parse_optional_unsigned(text, InvalidTime, U8_MAX)
    if minutes > MAX_MINUTE:
        raise InvalidMinute(text)
    return minutes


@dataclass(frozen=True, slots=True)
class FlightPlan:
    """The fixed 15 field flight plan tail of ``$FP`` and ``$AM``.

    Aircraft type, airports and route are uppercased; remarks are kept as
    filed. Empty numeric fields decode as zero.
    """

    flight_rules: FlightRules
    ac_type: str
    filed_tas: int
    origin: str
    etd: int
    atd: int
    cruise_level: int
    destination: str
    hours_enroute: int
    mins_enroute: int
    hours_fuel: int
    mins_fuel: int
    alternate: str
    remarks: str
    route: str

    def __post_init__(self) -> None:
        for name in ("ac_type", "origin", "destination", "alternate", "route"):
            object.__setattr__(self, name, getattr(self, name).upper())
        if self.mins_enroute > MAX_MINUTE:
            raise InvalidMinute(str(self.mins_enroute))
        if self.mins_fuel > MAX_MINUTE:
            raise InvalidMinute(str(self.mins_fuel))

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        """Build a flight plan from exactly 15 fields.

        Raises:
            InvalidFieldCount: If there are not exactly 15 fields
            InvalidSpeed: If the filed speed is not a number
            InvalidTime: If a time or hour field is not a number
            InvalidMinute: If a minutes field is above 59

        """
        check_exact_fields(fields, FLIGHT_PLAN_FIELD_COUNT)
        return cls(
            flight_rules=FlightRules.parse(fields[0]),
            ac_type=fields[1],
            filed_tas=parse_optional_unsigned(fields[2], InvalidSpeed, U16_MAX),
            origin=fields[3],
            etd=parse_optional_unsigned(fields[4], InvalidTime, U16_MAX),
            atd=parse_optional_unsigned(fields[5], InvalidTime, U16_MAX),
            cruise_level=parse_altitude(fields[6]),
            destination=fields[7],
            hours_enroute=parse_optional_unsigned(fields[8], InvalidTime, U8_MAX),
            mins_enroute=_parse_minutes(fields[9]),
            hours_fuel=parse_optional_unsigned(fields[10], InvalidTime, U8_MAX),
            mins_fuel=_parse_minutes(fields[11]),
            alternate=fields[12],
            remarks=fields[13],
            route=fields[14],
        )

    def to_fields(self) -> list[str]:
        return [
            str(self.flight_rules),
            self.ac_type,
            str(self.filed_tas),
            self.origin,
            str(self.etd),
            str(self.atd),
            str(self.cruise_level),
            self.destination,
            str(self.hours_enroute),
            str(self.mins_enroute),
            str(self.hours_fuel),
            str(self.mins_fuel),
            self.alternate,
            self.remarks,
            self.route,
        ]
