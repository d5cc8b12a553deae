"""Position update records for ATC and pilot clients.

Precision on the wire is fixed per kind: classic ``%`` / ``'`` / ``@``
updates carry coordinates to 5 decimal places, the velocity updates
(``#ST``, ``#SL``, ``^``) to 7, with altitudes at 2 and velocities at 4.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import ClassVar, Self

from fsd_messages.protocol.enums import AtcRating, AtcType, PilotRating, TransponderMode
from fsd_messages.protocol.exceptions import (
    InvalidAltitude,
    InvalidAltitudeDifference,
    InvalidCoordinate,
    InvalidIndex,
    InvalidNosewheelAngle,
    InvalidPositionVelocity,
    InvalidSpeed,
    InvalidVisRange,
)
from fsd_messages.protocol.fields import (
    I32_MAX,
    I32_MIN,
    U32_MAX,
    U64_MAX,
    check_min_fields,
    parse_float,
    parse_signed,
    parse_unsigned,
    uppercase_fields,
)
from fsd_messages.protocol.messages import sender_of
from fsd_messages.protocol.orientation import (
    Orientation,
    format_pitch_bank_heading,
    parse_pitch_bank_heading,
)
from fsd_messages.protocol.primitives import (
    RadioFrequency,
    TransponderCode,
    group_frequencies,
    split_frequencies,
)

SYMBOL_PREFIX_LENGTH = 1


def truncate_i32(value: float) -> int:
    """Convert a float to a 32-bit integer the way the wire format expects.

    Truncates toward zero, saturates at the i32 limits and maps NaN to 0.
    """
    if math.isnan(value):
        return 0
    if value >= I32_MAX:
        return I32_MAX
    if value <= I32_MIN:
        return I32_MIN
    return int(value)


@dataclass(frozen=True, slots=True)
class AtcPositionUpdateMessage:
    """``%``: periodic ATC position and frequency report."""

    PREFIX: ClassVar[str] = "%"

    callsign: str
    frequencies: tuple[RadioFrequency, ...]
    atc_type: AtcType
    vis_range: int
    rating: AtcRating
    latitude: float
    longitude: float
    elevation: int = 0

    def __post_init__(self) -> None:
        uppercase_fields(self, "callsign")
        object.__setattr__(self, "frequencies", tuple(self.frequencies))

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 7)
        elevation = 0
        if len(fields) > 7:  # noqa: PLR2004
            # Elevation is informational; garbage decodes as sea level
            try:
                elevation = parse_signed(fields[7], InvalidAltitude)
            except InvalidAltitude:
                elevation = 0
        return cls(
            callsign=sender_of(fields, SYMBOL_PREFIX_LENGTH),
            frequencies=tuple(split_frequencies(fields[1])),
            atc_type=AtcType.parse(fields[2]),
            vis_range=parse_unsigned(fields[3], InvalidVisRange, U32_MAX),
            rating=AtcRating.parse(fields[4]),
            latitude=parse_float(fields[5], InvalidCoordinate),
            longitude=parse_float(fields[6], InvalidCoordinate),
            elevation=elevation,
        )

    def to_line(self) -> str:
        return (
            f"{self.PREFIX}{self.callsign}:{group_frequencies(self.frequencies)}:{self.atc_type.value}:"
            f"{self.vis_range}:{self.rating.value}:{self.latitude:.5f}:{self.longitude:.5f}:{self.elevation}"
        )


@dataclass(frozen=True, slots=True)
class AtcSecondaryVisCentreMessage:
    """``'``: an additional visibility centre for a controller."""

    PREFIX: ClassVar[str] = "'"

    callsign: str
    index: int
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        uppercase_fields(self, "callsign")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 4)
        return cls(
            callsign=sender_of(fields, SYMBOL_PREFIX_LENGTH),
            index=parse_unsigned(fields[1], InvalidIndex, U64_MAX),
            latitude=parse_float(fields[2], InvalidCoordinate),
            longitude=parse_float(fields[3], InvalidCoordinate),
        )

    def to_line(self) -> str:
        return f"{self.PREFIX}{self.callsign}:{self.index}:{self.latitude:.5f}:{self.longitude:.5f}"


@dataclass(frozen=True, slots=True)
class PilotPositionUpdateMessage:
    """``@``: periodic pilot position report.

    The transponder mode rides in the prefix field (``@N``) and the
    callsign follows it. The wire carries the difference between pressure
    and true altitude rather than pressure altitude itself.
    """

    PREFIX: ClassVar[str] = "@"

    callsign: str
    transponder_mode: TransponderMode
    transponder_code: TransponderCode
    rating: PilotRating
    latitude: float
    longitude: float
    true_altitude: float
    pressure_altitude: float
    ground_speed: int
    orientation: Orientation

    def __post_init__(self) -> None:
        uppercase_fields(self, "callsign")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 10)
        true_altitude = parse_float(fields[6], InvalidAltitude)
        altitude_difference = parse_float(fields[9], InvalidAltitudeDifference)
        return cls(
            callsign=fields[1],
            transponder_mode=TransponderMode.parse(sender_of(fields, SYMBOL_PREFIX_LENGTH)),
            transponder_code=TransponderCode.parse(fields[2]),
            rating=PilotRating.parse(fields[3]),
            latitude=parse_float(fields[4], InvalidCoordinate),
            longitude=parse_float(fields[5], InvalidCoordinate),
            true_altitude=true_altitude,
            pressure_altitude=true_altitude + altitude_difference,
            ground_speed=parse_unsigned(fields[7], InvalidSpeed, U32_MAX),
            orientation=parse_pitch_bank_heading(fields[8]),
        )

    def to_line(self) -> str:
        altitude_difference = truncate_i32(self.pressure_altitude - self.true_altitude)
        return (
            f"{self.PREFIX}{self.transponder_mode}:{self.callsign}:{self.transponder_code}:"
            f"{self.rating.value}:{self.latitude:.5f}:{self.longitude:.5f}:"
            f"{truncate_i32(self.true_altitude)}:{self.ground_speed}:"
            f"{format_pitch_bank_heading(self.orientation)}:{altitude_difference}"
        )


def _parse_nose_gear_angle(fields: Sequence[str], index: int) -> float | None:
    if len(fields) > index:
        return parse_float(fields[index], InvalidNosewheelAngle)
    return None


def _format_nose_gear_angle(angle: float | None) -> str:
    return "" if angle is None else f":{angle:.2f}"


@dataclass(frozen=True, slots=True)
class VelocityStoppedMessage:
    """``#ST``: position of an aircraft at rest, without velocities."""

    PREFIX: ClassVar[str] = "#ST"

    sender: str
    latitude: float
    longitude: float
    true_altitude: float
    altitude_agl: float
    orientation: Orientation
    nose_gear_angle: float | None = None

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 6)
        return cls(
            sender=sender_of(fields),
            latitude=parse_float(fields[1], InvalidCoordinate),
            longitude=parse_float(fields[2], InvalidCoordinate),
            true_altitude=parse_float(fields[3], InvalidAltitude),
            altitude_agl=parse_float(fields[4], InvalidAltitude),
            orientation=parse_pitch_bank_heading(fields[5]),
            nose_gear_angle=_parse_nose_gear_angle(fields, 6),
        )

    def to_line(self) -> str:
        return (
            f"{self.PREFIX}{self.sender}:{self.latitude:.7f}:{self.longitude:.7f}:"
            f"{self.true_altitude:.2f}:{self.altitude_agl:.2f}:{format_pitch_bank_heading(self.orientation)}"
            f"{_format_nose_gear_angle(self.nose_gear_angle)}"
        )


@dataclass(frozen=True, slots=True)
class _VelocityMovingMessage:
    PREFIX: ClassVar[str] = ""
    PREFIX_LENGTH: ClassVar[int] = 3

    sender: str
    latitude: float
    longitude: float
    true_altitude: float
    altitude_agl: float
    orientation: Orientation
    x_velocity: float
    y_velocity: float
    z_velocity: float
    pitch_rad_per_sec: float
    heading_rad_per_sec: float
    bank_rad_per_sec: float
    nose_gear_angle: float | None = None

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 12)
        return cls(
            sender=sender_of(fields, cls.PREFIX_LENGTH),
            latitude=parse_float(fields[1], InvalidCoordinate),
            longitude=parse_float(fields[2], InvalidCoordinate),
            true_altitude=parse_float(fields[3], InvalidAltitude),
            altitude_agl=parse_float(fields[4], InvalidAltitude),
            orientation=parse_pitch_bank_heading(fields[5]),
            x_velocity=parse_float(fields[6], InvalidPositionVelocity),
            y_velocity=parse_float(fields[7], InvalidPositionVelocity),
            z_velocity=parse_float(fields[8], InvalidPositionVelocity),
            pitch_rad_per_sec=parse_float(fields[9], InvalidPositionVelocity),
            heading_rad_per_sec=parse_float(fields[10], InvalidPositionVelocity),
            bank_rad_per_sec=parse_float(fields[11], InvalidPositionVelocity),
            nose_gear_angle=_parse_nose_gear_angle(fields, 12),
        )

    def to_line(self) -> str:
        return (
            f"{self.PREFIX}{self.sender}:{self.latitude:.7f}:{self.longitude:.7f}:"
            f"{self.true_altitude:.2f}:{self.altitude_agl:.2f}:{format_pitch_bank_heading(self.orientation)}:"
            f"{self.x_velocity:.4f}:{self.y_velocity:.4f}:{self.z_velocity:.4f}:"
            f"{self.pitch_rad_per_sec:.4f}:{self.heading_rad_per_sec:.4f}:{self.bank_rad_per_sec:.4f}"
            f"{_format_nose_gear_angle(self.nose_gear_angle)}"
        )

    def to_stopped(self) -> VelocityStoppedMessage:
        """Drop the velocity components, keeping position and attitude."""
        return VelocityStoppedMessage(
            sender=self.sender,
            latitude=self.latitude,
            longitude=self.longitude,
            true_altitude=self.true_altitude,
            altitude_agl=self.altitude_agl,
            orientation=self.orientation,
            nose_gear_angle=self.nose_gear_angle,
        )


@dataclass(frozen=True, slots=True)
class VelocitySlowMessage(_VelocityMovingMessage):
    """``#SL``: low-rate velocity update."""

    PREFIX: ClassVar[str] = "#SL"


@dataclass(frozen=True, slots=True)
class VelocityFastMessage(_VelocityMovingMessage):
    """``^``: high-rate velocity update; the prefix is a single symbol."""

    PREFIX: ClassVar[str] = "^"
    PREFIX_LENGTH: ClassVar[int] = SYMBOL_PREFIX_LENGTH

    @classmethod
    def from_slow(cls, slow: VelocitySlowMessage) -> Self:
        """Re-send a slow update on the fast channel; every field is copied."""
        return cls(
            sender=slow.sender,
            latitude=slow.latitude,
            longitude=slow.longitude,
            true_altitude=slow.true_altitude,
            altitude_agl=slow.altitude_agl,
            orientation=slow.orientation,
            x_velocity=slow.x_velocity,
            y_velocity=slow.y_velocity,
            z_velocity=slow.z_velocity,
            pitch_rad_per_sec=slow.pitch_rad_per_sec,
            heading_rad_per_sec=slow.heading_rad_per_sec,
            bank_rad_per_sec=slow.bank_rad_per_sec,
            nose_gear_angle=slow.nose_gear_angle,
        )
