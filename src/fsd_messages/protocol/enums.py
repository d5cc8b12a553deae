"""Enumerated field values carried by FSD messages."""

from __future__ import annotations

from collections.abc import Iterable
from enum import IntEnum, StrEnum
from typing import Self

from fsd_messages.protocol.exceptions import (
    InvalidAtcType,
    InvalidClientCapability,
    InvalidFlightRules,
    InvalidProtocolRevision,
    InvalidRating,
    InvalidTransponderMode,
    InvalidVoiceCapability,
)
from fsd_messages.protocol.fields import U8_MAX, parse_unsigned

__all__ = [
    "AtcRating",
    "AtcType",
    "ClientCapability",
    "FlightRules",
    "PilotRating",
    "ProtocolRevision",
    "SimulatorType",
    "TransponderMode",
    "VoiceCapability",
    "format_capabilities",
    "read_capabilities",
]


class AtcRating(IntEnum):
    """Controller rating sent on ATC registration and position updates."""

    OBSERVER = 1
    S1 = 2
    S2 = 3
    S3 = 4
    C1 = 5
    C2 = 6
    C3 = 7
    I1 = 8
    I2 = 9
    I3 = 10
    SUPERVISOR = 11
    ADMINISTRATOR = 12

    @classmethod
    def parse(cls, text: str) -> Self:
        value = parse_unsigned(text, InvalidRating, U8_MAX)
        try:
            return cls(value)
        except ValueError as e:
            raise InvalidRating(text) from e


class PilotRating(IntEnum):
    """Pilot rating sent on pilot registration and position updates."""

    STUDENT = 1
    VFR = 2
    IFR = 3
    INSTRUCTOR = 4
    SUPERVISOR = 5

    @classmethod
    def parse(cls, text: str) -> Self:
        value = parse_unsigned(text, InvalidRating, U8_MAX)
        try:
            return cls(value)
        except ValueError as e:
            raise InvalidRating(text) from e


class ProtocolRevision(IntEnum):
    """Version of the FSD protocol a client registers with."""

    # Legacy / private servers; "1" is accepted as an alias on decode
    CLASSIC = 9
    # VATSIM before client authentication
    VATSIM_NO_AUTH = 10
    # VATSIM until 2022
    VATSIM_AUTH = 100
    # VATSIM Velocity
    VATSIM_2022 = 101

    @classmethod
    def parse(cls, text: str) -> Self:
        revision = _PROTOCOL_REVISIONS.get(text)
        if revision is None:
            raise InvalidProtocolRevision(text)
        return cls(revision)


_PROTOCOL_REVISIONS: dict[str, int] = {
    "1": ProtocolRevision.CLASSIC,
    "9": ProtocolRevision.CLASSIC,
    "10": ProtocolRevision.VATSIM_NO_AUTH,
    "100": ProtocolRevision.VATSIM_AUTH,
    "101": ProtocolRevision.VATSIM_2022,
}


class SimulatorType(IntEnum):
    """Simulator a pilot client is attached to.

    Decoding is lenient: anything unrecognised becomes UNKNOWN.
    """

    UNKNOWN = 0
    MSFS95 = 1
    MSFS98 = 2
    MSCFS = 3
    MSFS2000 = 4
    MSCFS2 = 5
    MSFS2002 = 6
    MSCFS3 = 7
    MSFS2004 = 8
    MSFSX = 9
    MSFS = 10
    MSFS2024 = 11
    XPLANE8 = 12
    XPLANE9 = 13
    XPLANE10 = 14
    XPLANE11 = 15
    XPLANE12 = 16
    P3DV1 = 17
    P3DV2 = 18
    P3DV3 = 19
    P3DV4 = 20
    P3DV5 = 21
    FLIGHTGEAR = 22

    @classmethod
    def parse(cls, text: str) -> Self:
        for member in cls:
            if text == str(member.value) and member is not cls.UNKNOWN:
                return member
        return cls.UNKNOWN


class FlightRules(StrEnum):
    DVFR = "D"
    SVFR = "S"
    VFR = "V"
    IFR = "I"

    @classmethod
    def parse(cls, text: str) -> Self:
        upper = text.upper()
        try:
            return cls(upper)
        except ValueError as e:
            raise InvalidFlightRules(upper) from e


class AtcType(IntEnum):
    """Facility type of an ATC position."""

    OBSERVER = 0
    FLIGHT_SERVICE_STATION = 1
    DELIVERY = 2
    GROUND = 3
    TOWER = 4
    APPROACH = 5
    CENTRE = 6

    @classmethod
    def parse(cls, text: str) -> Self:
        if len(text) != 1 or not "0" <= text <= "6":
            raise InvalidAtcType(text)
        return cls(int(text))


class TransponderMode(StrEnum):
    STANDBY = "S"
    MODE_C = "N"
    IDENT = "Y"

    @classmethod
    def parse(cls, text: str) -> Self:
        try:
            return cls(text)
        except ValueError as e:
            raise InvalidTransponderMode(text) from e


class VoiceCapability(StrEnum):
    """Voice / text / receive-only flag shared between controllers."""

    UNKNOWN = ""
    VOICE = "v"
    TEXT = "t"
    RECEIVE = "r"

    @classmethod
    def parse(cls, text: str) -> Self:
        lower = text.lower()
        try:
            return cls(lower)
        except ValueError as e:
            raise InvalidVoiceCapability(lower) from e


class ClientCapability(StrEnum):
    """Optional protocol features advertised in a CAPS response.

    Declaration order is the order capabilities are written on the wire.
    """

    VERSION = "VERSION"
    ATC_INFO = "ATCINFO"
    MODEL_DESC = "MODELDESC"
    AC_CONFIG = "ACCONFIG"
    VIS_UPDATE = "VISUPDATE"
    RADAR_UPDATE = "RADARUPDATE"
    ATC_MULTI = "ATCMULTI"
    SEC_POS = "SECPOS"
    ICAO_EQ = "ICAOEQ"
    FAST_POS = "FASTPOS"
    ONGOING_COORD = "ONGOINGCOORD"
    INTERIM_POS = "INTERIMPOS"
    STEALTH = "STEALTH"
    TEAMSPEAK = "TEAMSPEAK"
    NEW_ATIS = "NEWATIS"
    MUMBLE = "MUMBLE"
    GLOBAL_DATA = "GLOBALDATA"
    SIMULATED = "SIMULATED"
    OBS_PILOT = "OBSPILOT"

    @classmethod
    def parse(cls, text: str) -> Self:
        try:
            return cls(text.upper())
        except ValueError as e:
            raise InvalidClientCapability(text) from e


def read_capabilities(entries: Iterable[str]) -> frozenset[ClientCapability]:
    """Collect the capabilities switched on in ``KEY=1`` entries.

    Unknown keys, values other than "1" and entries without "=" are dropped
    so newer clients can advertise features this codec does not know.
    """
    capabilities: set[ClientCapability] = set()
    for entry in entries:
        parts = entry.split("=")
        if len(parts) < 2:  # noqa: PLR2004
            continue
        key, value = parts[0], parts[1]
        if value != "1":
            continue
        try:
            capabilities.add(ClientCapability.parse(key))
        except InvalidClientCapability:
            continue
    return frozenset(capabilities)


def format_capabilities(capabilities: Iterable[ClientCapability]) -> str:
    """Render capabilities as colon-separated ``KEY=1`` entries."""
    present = set(capabilities)
    return ":".join(f"{capability}=1" for capability in ClientCapability if capability in present)
