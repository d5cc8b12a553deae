"""Controller scratchpad contents shared between ATC clients.

A scratchpad is a single free-text field, but controller clients and their
plugins overload it with a small command language (assigned heading, stand
assignments, ground states and so on). ``parse_scratchpad`` recognises that
language and never fails: anything unrecognised is kept as PlainText.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import ClassVar

from fsd_messages.protocol.fields import is_unsigned

STAND_PREFIX = "GRP/S/"
MANUAL_STAND_PREFIX = "GRP/M/"


class Operator(StrEnum):
    EXACTLY = "="
    OR_LESS = "-"
    OR_GREATER = "+"


class GroundState(StrEnum):
    """Ground movement states; values are the canonical wire tokens."""

    NO_STATE = "NSTS"
    ON_FREQUENCY = "ONFREQ"
    DE_ICING = "DE-ICE"
    STARTUP = "STUP"
    PUSHBACK = "PUSH"
    TAXI = "TAXI"
    LINE_UP = "LINEUP"
    TAKE_OFF = "DEPA"
    TAXI_IN = "TXIN"
    ON_BLOCK = "PARK"


@dataclass(frozen=True, slots=True)
class PlainText:
    text: str

    def to_text(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class _Numeric:
    prefix: ClassVar[str] = ""

    value: int

    def to_text(self) -> str:
        return f"{self.prefix}{self.value}"


@dataclass(frozen=True, slots=True)
class Heading(_Numeric):
    prefix = "H"


@dataclass(frozen=True, slots=True)
class RateOfClimbDescent(_Numeric):
    prefix = "R"


@dataclass(frozen=True, slots=True)
class Speed(_Numeric):
    prefix = "S"


@dataclass(frozen=True, slots=True)
class Mach(_Numeric):
    prefix = "M"


@dataclass(frozen=True, slots=True)
class SpeedOperator:
    operator: Operator

    def to_text(self) -> str:
        return f"/ASP{self.operator}/"


@dataclass(frozen=True, slots=True)
class RateOfClimbDescentOperator:
    operator: Operator

    def to_text(self) -> str:
        return f"/ARC{self.operator}/"


@dataclass(frozen=True, slots=True)
class Stand:
    stand: str

    def to_text(self) -> str:
        return f"{STAND_PREFIX}{self.stand}"


@dataclass(frozen=True, slots=True)
class CancelledStand:
    def to_text(self) -> str:
        return STAND_PREFIX


@dataclass(frozen=True, slots=True)
class ManualStand:
    icao: str
    stand: str

    def to_text(self) -> str:
        return f"{MANUAL_STAND_PREFIX}{self.icao}/{self.stand}"


@dataclass(frozen=True, slots=True)
class CancelledManualStand:
    def to_text(self) -> str:
        return MANUAL_STAND_PREFIX


@dataclass(frozen=True, slots=True)
class GroundStateChange:
    state: GroundState

    def to_text(self) -> str:
        return str(self.state)


@dataclass(frozen=True, slots=True)
class ClearanceReceived:
    def to_text(self) -> str:
        return "CLEA"


@dataclass(frozen=True, slots=True)
class ClearanceCancelled:
    def to_text(self) -> str:
        return "NOTC"


type ScratchPad = (
    PlainText
    | Heading
    | RateOfClimbDescent
    | Speed
    | Mach
    | SpeedOperator
    | RateOfClimbDescentOperator
    | Stand
    | CancelledStand
    | ManualStand
    | CancelledManualStand
    | GroundStateChange
    | ClearanceReceived
    | ClearanceCancelled
)

_NUMERIC_KINDS: tuple[type[_Numeric], ...] = (Heading, RateOfClimbDescent, Speed, Mach)

_LITERALS: dict[str, ScratchPad] = {
    # TopSky speed / rate operators
    "/ASP=/": SpeedOperator(Operator.EXACTLY),
    "/ASP-/": SpeedOperator(Operator.OR_LESS),
    "/ASP+/": SpeedOperator(Operator.OR_GREATER),
    "/ARC=/": RateOfClimbDescentOperator(Operator.EXACTLY),
    "/ARC-/": RateOfClimbDescentOperator(Operator.OR_LESS),
    "/ARC+/": RateOfClimbDescentOperator(Operator.OR_GREATER),
    # GroundRadar stand cancellations
    STAND_PREFIX: CancelledStand(),
    MANUAL_STAND_PREFIX: CancelledManualStand(),
    # Ground states, including the aliases some clients send
    "NSTS": GroundStateChange(GroundState.NO_STATE),
    "NOSTATE": GroundStateChange(GroundState.NO_STATE),
    "ONFREQ": GroundStateChange(GroundState.ON_FREQUENCY),
    "DE-ICE": GroundStateChange(GroundState.DE_ICING),
    "STUP": GroundStateChange(GroundState.STARTUP),
    "ST-UP": GroundStateChange(GroundState.STARTUP),
    "PUSH": GroundStateChange(GroundState.PUSHBACK),
    "TAXI": GroundStateChange(GroundState.TAXI),
    "LINEUP": GroundStateChange(GroundState.LINE_UP),
    "TXIN": GroundStateChange(GroundState.TAXI_IN),
    "DEPA": GroundStateChange(GroundState.TAKE_OFF),
    "PARK": GroundStateChange(GroundState.ON_BLOCK),
    "CLEA": ClearanceReceived(),
    "NOTC": ClearanceCancelled(),
}


def parse_scratchpad(text: str) -> ScratchPad:
    """Interpret scratchpad text.

    Order matters because some tokens are prefixes of others: numeric
    commands first, then stand assignments, then the fixed literals.

    Example:
        >>> parse_scratchpad("GRP/S/A12")
        Stand(stand='A12')
        >>> parse_scratchpad("GRP/S/")
        CancelledStand()

    """
    for kind in _NUMERIC_KINDS:
        if text.startswith(kind.prefix) and is_unsigned(text[1:]):
            return kind(int(text[1:]))
    if len(text) > len(STAND_PREFIX) and text.startswith(STAND_PREFIX):
        return Stand(text[len(STAND_PREFIX) :])
    if len(text) > len(MANUAL_STAND_PREFIX) and text.startswith(MANUAL_STAND_PREFIX):
        icao, _, stand = text[len(MANUAL_STAND_PREFIX) :].partition("/")
        return ManualStand(icao, stand)
    return _LITERALS.get(text, PlainText(text))


def format_scratchpad(contents: ScratchPad) -> str:
    return contents.to_text()
