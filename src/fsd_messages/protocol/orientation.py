"""Pitch / bank / heading bit-packing used by pilot position updates.

Layout of the packed 32-bit value, most significant bit first::

    | pitch (10) | bank (10) | heading (10) | on ground (1) | unused (1) |

Pitch and bank are stored inverted and normalised into [0, 360) before
being scaled to 10 bits, so a level attitude encodes as 0. The format
quantises every angle to 360/1024 degrees (about 0.35 degrees); that loss
is part of the wire format.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from fsd_messages.protocol.exceptions import InvalidPitchBankHeading
from fsd_messages.protocol.fields import U32_MAX, parse_unsigned

ANGLE_STEPS = 1024
ANGLE_MASK = 0x3FF
ON_GROUND_BIT = 0b10

PITCH_SHIFT = 22
BANK_SHIFT = 12
HEADING_SHIFT = 2


@dataclass(frozen=True, slots=True)
class Orientation:
    """Attitude of an aircraft in degrees.

    Attributes:
        pitch: Nose up positive, in (-180, 180]
        bank: Right wing down positive, in (-180, 180]
        heading: True heading in [0, 360)
        on_ground: Whether the aircraft reports weight on wheels
    """

    pitch: float
    bank: float
    heading: float
    on_ground: bool = False


def _to_steps(value: float) -> int:
    # Mirrors an unsigned float-to-int cast: negatives and NaN become 0
    if not math.isfinite(value) or value <= 0:
        return 0
    return int(value) & ANGLE_MASK


def _inverted_steps(angle: float) -> int:
    normalised = angle / -360.0
    if normalised < 0:
        normalised += 1.0
    return _to_steps(normalised * ANGLE_STEPS)


def _signed_angle(steps: int) -> float:
    angle = steps / ANGLE_STEPS * -360.0
    if angle > 180.0:  # noqa: PLR2004
        angle -= 360.0
    elif angle <= -180.0:  # noqa: PLR2004
        angle += 360.0
    return angle


def encode_pitch_bank_heading(pitch: float, bank: float, heading: float, on_ground: bool = False) -> int:
    """Pack an attitude into the 32-bit wire value.

    Example:
        >>> encode_pitch_bank_heading(0.0, 0.0, 90.0, False)
        1024

    """
    p = _inverted_steps(pitch)
    b = _inverted_steps(bank)
    h = _to_steps(heading / 360.0 * ANGLE_STEPS)
    return (p << PITCH_SHIFT) | (b << BANK_SHIFT) | (h << HEADING_SHIFT) | (ON_GROUND_BIT if on_ground else 0)


def decode_pitch_bank_heading(packed: int) -> Orientation:
    """Unpack the 32-bit wire value into an Orientation.

    The on-ground flag is read from the same bit the encoder sets, so
    ``on_ground`` survives a round trip. Some peers never set it; they
    decode as airborne.
    """
    on_ground = (packed & ON_GROUND_BIT) != 0
    heading_steps = (packed >> HEADING_SHIFT) & ANGLE_MASK
    bank_steps = (packed >> BANK_SHIFT) & ANGLE_MASK
    pitch_steps = (packed >> PITCH_SHIFT) & ANGLE_MASK

    heading = heading_steps / ANGLE_STEPS * 360.0
    if heading < 0.0:
        heading += 360.0
    elif heading >= 360.0:  # noqa: PLR2004
        heading -= 360.0

    return Orientation(
        pitch=_signed_angle(pitch_steps),
        bank=_signed_angle(bank_steps),
        heading=heading,
        on_ground=on_ground,
    )


def parse_pitch_bank_heading(text: str) -> Orientation:
    """Decode the textual PBH field of a position line.

    Raises:
        InvalidPitchBankHeading: If the field is not an unsigned 32-bit number

    """
    return decode_pitch_bank_heading(parse_unsigned(text, InvalidPitchBankHeading, U32_MAX))


def format_pitch_bank_heading(orientation: Orientation) -> str:
    return str(
        encode_pitch_bank_heading(
            orientation.pitch,
            orientation.bank,
            orientation.heading,
            orientation.on_ground,
        )
    )
