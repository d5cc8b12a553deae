"""``$CQ`` client queries.

A client query is an envelope: sender, recipient, then a tag naming the
query and whatever arguments that query takes::

    $CQEHAM_GND:@94835:WH:KLM167
    $CQN194Q:SERVER:IPC:W:852:8704

Each query is its own record with a ``TAG``, a ``from_fields`` that reads
the full colon-split line and a ``to_text`` that renders everything after
the recipient.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import ClassVar, Self, override

from fsd_messages.protocol.aircraft_config import AircraftConfig
from fsd_messages.protocol.enums import VoiceCapability
from fsd_messages.protocol.exceptions import (
    InvalidClientQueryType,
    InvalidFieldCount,
    InvalidNewAtisMessage,
    InvalidTime,
    InvalidTransponderCode,
)
from fsd_messages.protocol.fields import (
    U16_MAX,
    check_min_fields,
    join_fields,
    parse_unsigned,
    uppercase_fields,
)
from fsd_messages.protocol.messages import sender_of
from fsd_messages.protocol.primitives import TransponderCode, parse_altitude
from fsd_messages.protocol.scratchpad import ScratchPad, format_scratchpad, parse_scratchpad

SIMTIME_FORMAT = "%Y%m%d%H%M%S"
AIRCRAFT_CONFIG_REQUEST = '{"request":"full"}'
IPC_WRITE = "W"
IPC_SQUAWK_OFFSET = "852"

_ATIS_SEPARATORS_RE = re.compile(r"[ -]+")
_MIN_WIND_LENGTH = 7
_MIN_PRESSURE_LENGTH = 4


@dataclass(frozen=True, slots=True)
class _BareQuery:
    """Queries that consist of the tag alone."""

    TAG: ClassVar[str] = ""

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        return cls()

    def to_text(self) -> str:
        return self.TAG


@dataclass(frozen=True, slots=True)
class Com1FrequencyQuery(_BareQuery):
    TAG: ClassVar[str] = "C?"


@dataclass(frozen=True, slots=True)
class PublicIpQuery(_BareQuery):
    TAG: ClassVar[str] = "IP"


@dataclass(frozen=True, slots=True)
class AtisQuery(_BareQuery):
    TAG: ClassVar[str] = "ATIS"


@dataclass(frozen=True, slots=True)
class RealNameQuery(_BareQuery):
    TAG: ClassVar[str] = "RN"


@dataclass(frozen=True, slots=True)
class ServerQuery(_BareQuery):
    TAG: ClassVar[str] = "SV"


@dataclass(frozen=True, slots=True)
class CapabilitiesQuery(_BareQuery):
    TAG: ClassVar[str] = "CAPS"


@dataclass(frozen=True, slots=True)
class ClientInformationQuery(_BareQuery):
    TAG: ClassVar[str] = "INF"


@dataclass(frozen=True, slots=True)
class RequestReliefQuery(_BareQuery):
    TAG: ClassVar[str] = "BY"


@dataclass(frozen=True, slots=True)
class CancelRequestReliefQuery(_BareQuery):
    TAG: ClassVar[str] = "HI"


@dataclass(frozen=True, slots=True)
class AircraftConfigRequestQuery(_BareQuery):
    """``ACC`` asking the recipient for a full configuration snapshot."""

    TAG: ClassVar[str] = "ACC"

    @override
    def to_text(self) -> str:
        return f"{self.TAG}:{AIRCRAFT_CONFIG_REQUEST}"


@dataclass(frozen=True, slots=True)
class AircraftConfigResponseQuery:
    """``ACC`` carrying a (possibly partial) configuration snapshot."""

    TAG: ClassVar[str] = "ACC"

    config: AircraftConfig

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        # The JSON payload contains colons of its own
        return cls(AircraftConfig.from_json(join_fields(fields[3:])))

    def to_text(self) -> str:
        return f"{self.TAG}:{self.config.to_json()}"


@dataclass(frozen=True, slots=True)
class _SubjectQuery:
    """Queries about a single callsign."""

    TAG: ClassVar[str] = ""

    subject: str

    def __post_init__(self) -> None:
        uppercase_fields(self, "subject")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 4)
        return cls(fields[3])

    def to_text(self) -> str:
        return f"{self.TAG}:{self.subject}"


@dataclass(frozen=True, slots=True)
class IsValidAtcQuery(_SubjectQuery):
    TAG: ClassVar[str] = "ATC"


@dataclass(frozen=True, slots=True)
class FlightPlanQuery(_SubjectQuery):
    TAG: ClassVar[str] = "FP"


@dataclass(frozen=True, slots=True)
class WhoHasQuery(_SubjectQuery):
    TAG: ClassVar[str] = "WH"


@dataclass(frozen=True, slots=True)
class InitiateTrackQuery(_SubjectQuery):
    TAG: ClassVar[str] = "IT"


@dataclass(frozen=True, slots=True)
class DropTrackQuery(_SubjectQuery):
    TAG: ClassVar[str] = "DR"


@dataclass(frozen=True, slots=True)
class AcceptHandoffQuery:
    """``HT``: announce that ``atc`` has taken ``aircraft``."""

    TAG: ClassVar[str] = "HT"

    aircraft: str
    atc: str

    def __post_init__(self) -> None:
        uppercase_fields(self, "aircraft", "atc")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 5)
        return cls(fields[3], fields[4])

    def to_text(self) -> str:
        return f"{self.TAG}:{self.aircraft}:{self.atc}"


@dataclass(frozen=True, slots=True)
class _AltitudeQuery:
    TAG: ClassVar[str] = ""

    subject: str
    altitude: int

    def __post_init__(self) -> None:
        uppercase_fields(self, "subject")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 5)
        return cls(fields[3], parse_altitude(fields[4]))

    def to_text(self) -> str:
        return f"{self.TAG}:{self.subject}:{self.altitude}"


@dataclass(frozen=True, slots=True)
class SetFinalAltitudeQuery(_AltitudeQuery):
    TAG: ClassVar[str] = "FA"


@dataclass(frozen=True, slots=True)
class SetTempAltitudeQuery(_AltitudeQuery):
    TAG: ClassVar[str] = "TA"


@dataclass(frozen=True, slots=True)
class SetBeaconCodeQuery:
    """``BC``: a controller assigning a squawk."""

    TAG: ClassVar[str] = "BC"

    subject: str
    code: TransponderCode

    def __post_init__(self) -> None:
        uppercase_fields(self, "subject")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 5)
        return cls(fields[3], TransponderCode.parse(fields[4]))

    def to_text(self) -> str:
        return f"{self.TAG}:{self.subject}:{self.code}"


@dataclass(frozen=True, slots=True)
class ForceBeaconCodeQuery:
    """``IPC:W:852``: the server writing a squawk straight into the simulator.

    852 is FSUIPC offset 0x0354, so the code travels in its BCD form.
    """

    TAG: ClassVar[str] = "IPC"

    code: TransponderCode

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        if len(fields) < 6:  # noqa: PLR2004
            raise InvalidFieldCount(6, len(fields))
        if fields[3] != IPC_WRITE or fields[4] != IPC_SQUAWK_OFFSET:
            raise InvalidClientQueryType(join_fields(fields[2:]))
        bcd = parse_unsigned(fields[5], InvalidTransponderCode, U16_MAX)
        return cls(TransponderCode.from_bcd(bcd))

    def to_text(self) -> str:
        return f"{self.TAG}:{IPC_WRITE}:{IPC_SQUAWK_OFFSET}:{self.code.to_bcd()}"


@dataclass(frozen=True, slots=True)
class SetScratchpadQuery:
    TAG: ClassVar[str] = "SC"

    subject: str
    contents: ScratchPad

    def __post_init__(self) -> None:
        uppercase_fields(self, "subject")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 5)
        return cls(fields[3], parse_scratchpad(fields[4]))

    def to_text(self) -> str:
        return f"{self.TAG}:{self.subject}:{format_scratchpad(self.contents)}"


@dataclass(frozen=True, slots=True)
class SetVoiceTypeQuery:
    TAG: ClassVar[str] = "VT"

    subject: str
    voice_capability: VoiceCapability

    def __post_init__(self) -> None:
        uppercase_fields(self, "subject")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 5)
        return cls(fields[3], VoiceCapability.parse(fields[4]))

    def to_text(self) -> str:
        return f"{self.TAG}:{self.subject}:{self.voice_capability}"


@dataclass(frozen=True, slots=True)
class _HelpQuery:
    TAG: ClassVar[str] = ""

    message: str | None = None

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        return cls(join_fields(fields[3:]) or None)

    def to_text(self) -> str:
        if self.message is None:
            return self.TAG
        return f"{self.TAG}:{self.message}"


@dataclass(frozen=True, slots=True)
class HelpRequestQuery(_HelpQuery):
    TAG: ClassVar[str] = "HLP"


@dataclass(frozen=True, slots=True)
class CancelHelpRequestQuery(_HelpQuery):
    TAG: ClassVar[str] = "NOHLP"


def _parse_atis_letter(text: str, raw: str) -> str:
    letter = text[-1:].upper()
    if not ("A" <= letter <= "Z"):
        raise InvalidNewAtisMessage(raw)
    return letter


@dataclass(frozen=True, slots=True)
class NewAtisQuery:
    """``NEWATIS``: a controller announcing a new ATIS letter.

    Example:
        >>> NewAtisQuery.from_fields(["$CQESSA_A_ATIS", "@94835", "NEWATIS", "ATIS N", "  31016KT - Q986"])
        NewAtisQuery(letter='N', surface_wind='31016KT', pressure='Q986')

    """

    TAG: ClassVar[str] = "NEWATIS"

    letter: str
    surface_wind: str
    pressure: str

    def __post_init__(self) -> None:
        uppercase_fields(self, "letter", "surface_wind", "pressure")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 5)
        first = fields[3].upper()
        last = fields[4].strip().upper()
        raw = f"{first}:{last}"
        letter = _parse_atis_letter(first, raw)
        tokens = [token for token in _ATIS_SEPARATORS_RE.split(last) if token]
        if len(tokens) < 2:  # noqa: PLR2004
            raise InvalidNewAtisMessage(raw)
        wind, pressure = tokens[0], tokens[1]
        if len(wind) < _MIN_WIND_LENGTH or len(pressure) < _MIN_PRESSURE_LENGTH:
            raise InvalidNewAtisMessage(raw)
        return cls(letter, wind, pressure)

    def to_text(self) -> str:
        return f"{self.TAG}:ATIS {self.letter}:  {self.surface_wind} - {self.pressure}"


@dataclass(frozen=True, slots=True)
class NewInfoQuery:
    """``NEWINFO``: the ATIS letter changed, without weather details."""

    TAG: ClassVar[str] = "NEWINFO"

    letter: str

    def __post_init__(self) -> None:
        uppercase_fields(self, "letter")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 4)
        return cls(_parse_atis_letter(fields[3], fields[3]))

    def to_text(self) -> str:
        return f"{self.TAG}:{self.letter}"


@dataclass(frozen=True, slots=True)
class SimTimeQuery:
    """``SIMTIME``: simulator time, always UTC on the wire."""

    TAG: ClassVar[str] = "SIMTIME"

    time: datetime

    def __post_init__(self) -> None:
        # A naive time is taken to be UTC already.
        if self.time.tzinfo is None:
            object.__setattr__(self, "time", self.time.replace(tzinfo=UTC))

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 4)
        try:
            time = datetime.strptime(fields[3], SIMTIME_FORMAT).replace(tzinfo=UTC)
        except ValueError as e:
            raise InvalidTime(fields[3]) from e
        return cls(time)

    def to_text(self) -> str:
        return f"{self.TAG}:{self.time.astimezone(UTC).strftime(SIMTIME_FORMAT)}"


type ClientQuery = (
    Com1FrequencyQuery
    | PublicIpQuery
    | AtisQuery
    | RealNameQuery
    | ServerQuery
    | CapabilitiesQuery
    | ClientInformationQuery
    | RequestReliefQuery
    | CancelRequestReliefQuery
    | AircraftConfigRequestQuery
    | AircraftConfigResponseQuery
    | IsValidAtcQuery
    | FlightPlanQuery
    | WhoHasQuery
    | InitiateTrackQuery
    | DropTrackQuery
    | AcceptHandoffQuery
    | SetFinalAltitudeQuery
    | SetTempAltitudeQuery
    | SetBeaconCodeQuery
    | ForceBeaconCodeQuery
    | SetScratchpadQuery
    | SetVoiceTypeQuery
    | HelpRequestQuery
    | CancelHelpRequestQuery
    | NewAtisQuery
    | NewInfoQuery
    | SimTimeQuery
)


def _parse_aircraft_config(fields: Sequence[str]) -> ClientQuery:
    check_min_fields(fields, 4)
    if "request" in fields[3]:
        return AircraftConfigRequestQuery()
    return AircraftConfigResponseQuery.from_fields(fields)


_QUERY_PARSERS: dict[str, Callable[[Sequence[str]], ClientQuery]] = {
    kind.TAG: kind.from_fields
    for kind in (
        Com1FrequencyQuery,
        PublicIpQuery,
        AtisQuery,
        RealNameQuery,
        ServerQuery,
        CapabilitiesQuery,
        ClientInformationQuery,
        RequestReliefQuery,
        CancelRequestReliefQuery,
        IsValidAtcQuery,
        FlightPlanQuery,
        WhoHasQuery,
        InitiateTrackQuery,
        DropTrackQuery,
        AcceptHandoffQuery,
        SetFinalAltitudeQuery,
        SetTempAltitudeQuery,
        SetBeaconCodeQuery,
        ForceBeaconCodeQuery,
        SetScratchpadQuery,
        SetVoiceTypeQuery,
        HelpRequestQuery,
        CancelHelpRequestQuery,
        NewAtisQuery,
        NewInfoQuery,
        SimTimeQuery,
    )
}
_QUERY_PARSERS[AircraftConfigRequestQuery.TAG] = _parse_aircraft_config


def parse_client_query(fields: Sequence[str]) -> ClientQuery:
    """Decode the query part of a ``$CQ`` line from its tag in field 2.

    Raises:
        InvalidClientQueryType: If the tag is not a known query
        FsdMessageParseError: If the query arguments are malformed

    """
    parser = _QUERY_PARSERS.get(fields[2])
    if parser is None:
        raise InvalidClientQueryType(fields[2])
    return parser(fields)


@dataclass(frozen=True, slots=True)
class ClientQueryMessage:
    """``$CQ``: a query addressed to a client, a controller or the server."""

    PREFIX: ClassVar[str] = "$CQ"

    sender: str
    recipient: str
    query: ClientQuery

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender", "recipient")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 3)
        return cls(sender_of(fields), fields[1], parse_client_query(fields))

    def to_line(self) -> str:
        return f"{self.PREFIX}{self.sender}:{self.recipient}:{self.query.to_text()}"

    @classmethod
    def com_1_freq(cls, sender: str, recipient: str) -> Self:
        return cls(sender, recipient, Com1FrequencyQuery())

    @classmethod
    def public_ip(cls, sender: str, recipient: str) -> Self:
        return cls(sender, recipient, PublicIpQuery())

    @classmethod
    def atis(cls, sender: str, recipient: str) -> Self:
        return cls(sender, recipient, AtisQuery())

    @classmethod
    def real_name(cls, sender: str, recipient: str) -> Self:
        return cls(sender, recipient, RealNameQuery())

    @classmethod
    def server(cls, sender: str, recipient: str) -> Self:
        return cls(sender, recipient, ServerQuery())

    @classmethod
    def capabilities(cls, sender: str, recipient: str) -> Self:
        return cls(sender, recipient, CapabilitiesQuery())

    @classmethod
    def client_information(cls, sender: str, recipient: str) -> Self:
        return cls(sender, recipient, ClientInformationQuery())

    @classmethod
    def request_relief(cls, sender: str, recipient: str) -> Self:
        return cls(sender, recipient, RequestReliefQuery())

    @classmethod
    def cancel_request_relief(cls, sender: str, recipient: str) -> Self:
        return cls(sender, recipient, CancelRequestReliefQuery())

    @classmethod
    def is_valid_atc(cls, sender: str, recipient: str, subject: str) -> Self:
        return cls(sender, recipient, IsValidAtcQuery(subject))

    @classmethod
    def flight_plan(cls, sender: str, recipient: str, subject: str) -> Self:
        return cls(sender, recipient, FlightPlanQuery(subject))

    @classmethod
    def who_has(cls, sender: str, recipient: str, subject: str) -> Self:
        """Ask which controller is tracking ``subject``.

        Example:
            >>> ClientQueryMessage.who_has("eham_gnd", "@94835", "klm167").to_line()
            '$CQEHAM_GND:@94835:WH:KLM167'

        """
        return cls(sender, recipient, WhoHasQuery(subject))

    @classmethod
    def initiate_track(cls, sender: str, recipient: str, subject: str) -> Self:
        return cls(sender, recipient, InitiateTrackQuery(subject))

    @classmethod
    def drop_track(cls, sender: str, recipient: str, subject: str) -> Self:
        return cls(sender, recipient, DropTrackQuery(subject))

    @classmethod
    def accept_handoff(cls, sender: str, recipient: str, aircraft: str, atc: str) -> Self:
        return cls(sender, recipient, AcceptHandoffQuery(aircraft, atc))

    @classmethod
    def set_final_altitude(cls, sender: str, recipient: str, subject: str, altitude: int) -> Self:
        return cls(sender, recipient, SetFinalAltitudeQuery(subject, altitude))

    @classmethod
    def set_temp_altitude(cls, sender: str, recipient: str, subject: str, altitude: int) -> Self:
        return cls(sender, recipient, SetTempAltitudeQuery(subject, altitude))

    @classmethod
    def set_beacon_code(cls, sender: str, recipient: str, subject: str, code: TransponderCode) -> Self:
        return cls(sender, recipient, SetBeaconCodeQuery(subject, code))

    @classmethod
    def force_beacon_code(cls, sender: str, recipient: str, code: TransponderCode) -> Self:
        return cls(sender, recipient, ForceBeaconCodeQuery(code))

    @classmethod
    def set_scratchpad(cls, sender: str, recipient: str, subject: str, contents: ScratchPad) -> Self:
        return cls(sender, recipient, SetScratchpadQuery(subject, contents))

    @classmethod
    def set_voice_type(cls, sender: str, recipient: str, subject: str, voice: VoiceCapability) -> Self:
        return cls(sender, recipient, SetVoiceTypeQuery(subject, voice))

    @classmethod
    def help_request(cls, sender: str, recipient: str, message: str | None = None) -> Self:
        return cls(sender, recipient, HelpRequestQuery(message))

    @classmethod
    def cancel_help_request(cls, sender: str, recipient: str, message: str | None = None) -> Self:
        return cls(sender, recipient, CancelHelpRequestQuery(message))

    @classmethod
    def aircraft_config_request(cls, sender: str, recipient: str) -> Self:
        return cls(sender, recipient, AircraftConfigRequestQuery())

    @classmethod
    def aircraft_config_response(cls, sender: str, recipient: str, config: AircraftConfig) -> Self:
        return cls(sender, recipient, AircraftConfigResponseQuery(config))

    @classmethod
    def new_atis(cls, sender: str, recipient: str, letter: str, surface_wind: str, pressure: str) -> Self:
        return cls(sender, recipient, NewAtisQuery(letter, surface_wind, pressure))

    @classmethod
    def new_info(cls, sender: str, recipient: str, letter: str) -> Self:
        return cls(sender, recipient, NewInfoQuery(letter))

    @classmethod
    def sim_time(cls, sender: str, recipient: str, time: datetime) -> Self:
        return cls(sender, recipient, SimTimeQuery(time))
