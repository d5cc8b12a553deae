"""``#PC`` controller-to-controller shared state.

Every shared state line carries the literal ``CCP`` marker in field 2,
then a tag in field 3 and the tag's arguments::

    #PCEDDM_CTR:EDDF_TWR:CCP:SC:DLH4AB:H270

Argument parsers below receive only the fields after the tag.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import ClassVar, Self

from fsd_messages.protocol.constants import SHARED_STATE_MARKER
from fsd_messages.protocol.enums import VoiceCapability
from fsd_messages.protocol.exceptions import InvalidFieldCount, InvalidSharedStateType
from fsd_messages.protocol.fields import (
    FIELD_SEPARATOR,
    check_min_fields,
    join_fields,
    parse_signed,
    uppercase_fields,
)
from fsd_messages.protocol.messages import sender_of
from fsd_messages.protocol.primitives import TransponderCode, parse_altitude
from fsd_messages.protocol.scratchpad import ScratchPad, format_scratchpad, parse_scratchpad

# Index of the first argument after the CCP marker and tag
_ARGS_OFFSET = 4


def _require_args(args: Sequence[str], count: int) -> None:
    # Counts are reported against the whole line, not just the arguments
    if len(args) < count:
        raise InvalidFieldCount(_ARGS_OFFSET + count, _ARGS_OFFSET + len(args))


@dataclass(frozen=True, slots=True)
class _BareState:
    TAG: ClassVar[str] = ""

    @classmethod
    def from_args(cls, args: Sequence[str]) -> Self:
        return cls()

    def to_text(self) -> str:
        return self.TAG


@dataclass(frozen=True, slots=True)
class VersionState(_BareState):
    TAG: ClassVar[str] = "VER"


@dataclass(frozen=True, slots=True)
class IdState(_BareState):
    TAG: ClassVar[str] = "ID"


@dataclass(frozen=True, slots=True)
class DiState(_BareState):
    TAG: ClassVar[str] = "DI"


@dataclass(frozen=True, slots=True)
class _AircraftState:
    TAG: ClassVar[str] = ""

    aircraft: str

    def __post_init__(self) -> None:
        uppercase_fields(self, "aircraft")

    @classmethod
    def from_args(cls, args: Sequence[str]) -> Self:
        _require_args(args, 1)
        return cls(args[0])

    def to_text(self) -> str:
        return f"{self.TAG}:{self.aircraft}"


@dataclass(frozen=True, slots=True)
class IHaveState(_AircraftState):
    """``IH``: the sender is now tracking the aircraft."""

    TAG: ClassVar[str] = "IH"


@dataclass(frozen=True, slots=True)
class HandoffCancelState(_AircraftState):
    TAG: ClassVar[str] = "HC"


@dataclass(frozen=True, slots=True)
class PushToDepartureListState(_AircraftState):
    TAG: ClassVar[str] = "DP"


@dataclass(frozen=True, slots=True)
class PointOutState(_AircraftState):
    TAG: ClassVar[str] = "PT"


@dataclass(frozen=True, slots=True)
class ScratchpadState:
    TAG: ClassVar[str] = "SC"

    aircraft: str
    contents: ScratchPad

    def __post_init__(self) -> None:
        uppercase_fields(self, "aircraft")

    @classmethod
    def from_args(cls, args: Sequence[str]) -> Self:
        _require_args(args, 2)
        return cls(args[0], parse_scratchpad(args[1]))

    def to_text(self) -> str:
        return f"{self.TAG}:{self.aircraft}:{format_scratchpad(self.contents)}"


@dataclass(frozen=True, slots=True)
class _AltitudeState:
    TAG: ClassVar[str] = ""

    aircraft: str
    altitude: int

    def __post_init__(self) -> None:
        uppercase_fields(self, "aircraft")

    @classmethod
    def from_args(cls, args: Sequence[str]) -> Self:
        _require_args(args, 2)
        return cls(args[0], parse_altitude(args[1]))

    def to_text(self) -> str:
        return f"{self.TAG}:{self.aircraft}:{self.altitude}"


@dataclass(frozen=True, slots=True)
class TempAltitudeState(_AltitudeState):
    TAG: ClassVar[str] = "TA"


@dataclass(frozen=True, slots=True)
class FinalAltitudeState(_AltitudeState):
    TAG: ClassVar[str] = "FA"


@dataclass(frozen=True, slots=True)
class VoiceTypeState:
    TAG: ClassVar[str] = "VT"

    aircraft: str
    voice_capability: VoiceCapability

    def __post_init__(self) -> None:
        uppercase_fields(self, "aircraft")

    @classmethod
    def from_args(cls, args: Sequence[str]) -> Self:
        _require_args(args, 2)
        return cls(args[0], VoiceCapability.parse(args[1]))

    def to_text(self) -> str:
        return f"{self.TAG}:{self.aircraft}:{self.voice_capability}"


@dataclass(frozen=True, slots=True)
class BeaconCodeState:
    TAG: ClassVar[str] = "BC"

    aircraft: str
    code: TransponderCode

    def __post_init__(self) -> None:
        uppercase_fields(self, "aircraft")

    @classmethod
    def from_args(cls, args: Sequence[str]) -> Self:
        _require_args(args, 2)
        return cls(args[0], TransponderCode.parse(args[1]))

    def to_text(self) -> str:
        return f"{self.TAG}:{self.aircraft}:{self.code}"


@dataclass(frozen=True, slots=True)
class FlightStripState:
    """``ST``: push a flight strip, with an optional layout and annotations.

    The layout number and the annotations are both optional. An empty
    layout field with annotations after it keeps its place on the wire
    (``ST:DLH4AB::FL350:EDDF``).
    """

    TAG: ClassVar[str] = "ST"

    aircraft: str
    strip_format: int | None = None
    contents: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        uppercase_fields(self, "aircraft")
        if self.contents is not None:
            object.__setattr__(self, "contents", tuple(self.contents))

    @classmethod
    def from_args(cls, args: Sequence[str]) -> Self:
        _require_args(args, 1)
        strip_format = None
        if len(args) > 1 and args[1]:
            strip_format = parse_signed(args[1], InvalidSharedStateType)
        contents = tuple(args[2:]) or None
        return cls(args[0], strip_format, contents)

    def to_text(self) -> str:
        parts = [self.TAG, self.aircraft]
        if self.strip_format is not None:
            parts.append(str(self.strip_format))
        elif self.contents:
            parts.append("")
        if self.contents:
            parts.extend(self.contents)
        return FIELD_SEPARATOR.join(parts)


type SharedState = (
    VersionState
    | IdState
    | DiState
    | IHaveState
    | ScratchpadState
    | TempAltitudeState
    | FinalAltitudeState
    | VoiceTypeState
    | BeaconCodeState
    | HandoffCancelState
    | FlightStripState
    | PushToDepartureListState
    | PointOutState
)

_STATE_PARSERS: dict[str, Callable[[Sequence[str]], SharedState]] = {
    kind.TAG: kind.from_args
    for kind in (
        VersionState,
        IdState,
        DiState,
        IHaveState,
        ScratchpadState,
        TempAltitudeState,
        FinalAltitudeState,
        VoiceTypeState,
        BeaconCodeState,
        HandoffCancelState,
        FlightStripState,
        PushToDepartureListState,
        PointOutState,
    )
}


@dataclass(frozen=True, slots=True)
class SharedStateMessage:
    """``#PC``: scratchpads, altitudes and strips shared between controllers."""

    PREFIX: ClassVar[str] = "#PC"

    sender: str
    recipient: str
    state: SharedState

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender", "recipient")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        """Decode a ``#PC`` line.

        Raises:
            InvalidFieldCount: If fewer than 4 fields are present
            InvalidSharedStateType: If field 2 is not ``CCP`` or the tag
                is not a known shared state kind

        """
        check_min_fields(fields, 4)
        if fields[2] != SHARED_STATE_MARKER:
            raise InvalidSharedStateType(join_fields(fields[2:]))
        parser = _STATE_PARSERS.get(fields[3])
        if parser is None:
            raise InvalidSharedStateType(fields[3])
        return cls(sender_of(fields), fields[1], parser(fields[_ARGS_OFFSET:]))

    def to_line(self) -> str:
        return f"{self.PREFIX}{self.sender}:{self.recipient}:{SHARED_STATE_MARKER}:{self.state.to_text()}"

    @classmethod
    def version(cls, sender: str, recipient: str) -> Self:
        return cls(sender, recipient, VersionState())

    @classmethod
    def id(cls, sender: str, recipient: str) -> Self:
        return cls(sender, recipient, IdState())

    @classmethod
    def di(cls, sender: str, recipient: str) -> Self:
        return cls(sender, recipient, DiState())

    @classmethod
    def i_have(cls, sender: str, recipient: str, aircraft: str) -> Self:
        return cls(sender, recipient, IHaveState(aircraft))

    @classmethod
    def scratchpad(cls, sender: str, recipient: str, aircraft: str, contents: ScratchPad) -> Self:
        return cls(sender, recipient, ScratchpadState(aircraft, contents))

    @classmethod
    def temp_altitude(cls, sender: str, recipient: str, aircraft: str, altitude: int) -> Self:
        return cls(sender, recipient, TempAltitudeState(aircraft, altitude))

    @classmethod
    def final_altitude(cls, sender: str, recipient: str, aircraft: str, altitude: int) -> Self:
        return cls(sender, recipient, FinalAltitudeState(aircraft, altitude))

    @classmethod
    def voice_type(cls, sender: str, recipient: str, aircraft: str, voice: VoiceCapability) -> Self:
        return cls(sender, recipient, VoiceTypeState(aircraft, voice))

    @classmethod
    def beacon_code(cls, sender: str, recipient: str, aircraft: str, code: TransponderCode) -> Self:
        return cls(sender, recipient, BeaconCodeState(aircraft, code))

    @classmethod
    def handoff_cancel(cls, sender: str, recipient: str, aircraft: str) -> Self:
        return cls(sender, recipient, HandoffCancelState(aircraft))

    @classmethod
    def flight_strip(
        cls,
        sender: str,
        recipient: str,
        aircraft: str,
        strip_format: int | None = None,
        contents: Sequence[str] | None = None,
    ) -> Self:
        return cls(
            sender,
            recipient,
            FlightStripState(aircraft, strip_format, None if contents is None else tuple(contents)),
        )

    @classmethod
    def push_to_departure_list(cls, sender: str, recipient: str, aircraft: str) -> Self:
        return cls(sender, recipient, PushToDepartureListState(aircraft))

    @classmethod
    def point_out(cls, sender: str, recipient: str, aircraft: str) -> Self:
        return cls(sender, recipient, PointOutState(aircraft))
