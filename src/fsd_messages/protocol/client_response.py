"""``$CR`` responses to client queries.

Responses mirror a subset of the query tags. ATIS responses are streamed
as several lines, one ``AtisLine`` each, finished by an end marker that
carries the number of lines sent.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import ClassVar, Self

from fsd_messages.protocol.enums import ClientCapability, format_capabilities, read_capabilities
from fsd_messages.protocol.exceptions import (
    InvalidAtisLine,
    InvalidClientQueryType,
    InvalidRating,
    InvalidValidAtcStatus,
)
from fsd_messages.protocol.fields import (
    U8_MAX,
    U16_MAX,
    U64_MAX,
    check_min_fields,
    is_unsigned,
    join_fields,
    parse_unsigned,
    uppercase_fields,
)
from fsd_messages.protocol.messages import sender_of
from fsd_messages.protocol.primitives import RadioFrequency


@dataclass(frozen=True, slots=True)
class AtisVoiceServer:
    """``V``: voice server URL of the ATIS channel."""

    KEY: ClassVar[str] = "V"

    voice_server: str

    def to_text(self) -> str:
        return f"{self.KEY}:{self.voice_server}"


@dataclass(frozen=True, slots=True)
class AtisTextLine:
    KEY: ClassVar[str] = "T"

    text: str

    def to_text(self) -> str:
        return f"{self.KEY}:{self.text}"


@dataclass(frozen=True, slots=True)
class AtisLogoffTime:
    """``Z``: planned logoff as HHMM, or None when the controller left it blank."""

    KEY: ClassVar[str] = "Z"

    time: int | None = None

    def to_text(self) -> str:
        if self.time is None:
            return f"{self.KEY}:z"
        return f"{self.KEY}:{self.time:04}z"


@dataclass(frozen=True, slots=True)
class AtisEndMarker:
    KEY: ClassVar[str] = "E"

    line_count: int

    def to_text(self) -> str:
        return f"{self.KEY}:{self.line_count}"


type AtisLine = AtisVoiceServer | AtisTextLine | AtisLogoffTime | AtisEndMarker


def parse_atis_line(fields: Sequence[str]) -> AtisLine:
    """Decode the line kind in field 3 and its value in field 4 onwards."""
    check_min_fields(fields, 5)
    match fields[3]:
        case AtisVoiceServer.KEY:
            return AtisVoiceServer(fields[4])
        case AtisTextLine.KEY:
            return AtisTextLine(join_fields(fields[4:]))
        case AtisLogoffTime.KEY:
            time = fields[4].removesuffix("z")
            if is_unsigned(time) and int(time) <= U16_MAX:
                return AtisLogoffTime(int(time))
            return AtisLogoffTime(None)
        case AtisEndMarker.KEY:
            return AtisEndMarker(parse_unsigned(fields[4], InvalidAtisLine, U64_MAX))
        case _:
            raise InvalidAtisLine(fields[3])


@dataclass(frozen=True, slots=True)
class Com1FrequencyResponse:
    TAG: ClassVar[str] = "C?"

    frequency: RadioFrequency

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        return cls(RadioFrequency.parse_dotted(fields[3]))

    def to_text(self) -> str:
        return f"{self.TAG}:{self.frequency.to_dotted()}"


@dataclass(frozen=True, slots=True)
class AtisResponse:
    TAG: ClassVar[str] = "ATIS"

    line: AtisLine

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        return cls(parse_atis_line(fields))

    def to_text(self) -> str:
        return f"{self.TAG}:{self.line.to_text()}"


@dataclass(frozen=True, slots=True)
class RealNameResponse:
    """``RN``: real name, sector file or other info, and numeric rating."""

    TAG: ClassVar[str] = "RN"

    name: str
    info: str
    rating: int

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 6)
        return cls(fields[3], fields[4], parse_unsigned(fields[5], InvalidRating, U8_MAX))

    def to_text(self) -> str:
        return f"{self.TAG}:{self.name}:{self.info}:{self.rating}"


@dataclass(frozen=True, slots=True)
class PublicIpResponse:
    TAG: ClassVar[str] = "IP"

    ip_address: str

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        return cls(fields[3])

    def to_text(self) -> str:
        return f"{self.TAG}:{self.ip_address}"


@dataclass(frozen=True, slots=True)
class ServerResponse:
    TAG: ClassVar[str] = "SV"

    server: str

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        return cls(fields[3])

    def to_text(self) -> str:
        return f"{self.TAG}:{self.server}"


@dataclass(frozen=True, slots=True)
class IsValidAtcResponse:
    TAG: ClassVar[str] = "ATC"

    subject: str
    valid: bool

    def __post_init__(self) -> None:
        uppercase_fields(self, "subject")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 5)
        match fields[3].upper():
            case "Y":
                valid = True
            case "N":
                valid = False
            case _:
                raise InvalidValidAtcStatus(fields[3])
        return cls(fields[4], valid)

    def to_text(self) -> str:
        return f"{self.TAG}:{'Y' if self.valid else 'N'}:{self.subject}"


@dataclass(frozen=True, slots=True)
class CapabilitiesResponse:
    TAG: ClassVar[str] = "CAPS"

    capabilities: frozenset[ClientCapability]

    def __post_init__(self) -> None:
        object.__setattr__(self, "capabilities", frozenset(self.capabilities))

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        return cls(read_capabilities(fields[3:]))

    def to_text(self) -> str:
        return f"{self.TAG}:{format_capabilities(self.capabilities)}"


type ClientResponse = (
    Com1FrequencyResponse
    | AtisResponse
    | RealNameResponse
    | PublicIpResponse
    | ServerResponse
    | IsValidAtcResponse
    | CapabilitiesResponse
)

_RESPONSE_PARSERS: dict[str, Callable[[Sequence[str]], ClientResponse]] = {
    kind.TAG: kind.from_fields
    for kind in (
        Com1FrequencyResponse,
        AtisResponse,
        RealNameResponse,
        PublicIpResponse,
        ServerResponse,
        IsValidAtcResponse,
        CapabilitiesResponse,
    )
}


def parse_client_response(fields: Sequence[str]) -> ClientResponse:
    """Decode the response part of a ``$CR`` line from its tag in field 2."""
    parser = _RESPONSE_PARSERS.get(fields[2])
    if parser is None:
        raise InvalidClientQueryType(fields[2])
    return parser(fields)


@dataclass(frozen=True, slots=True)
class ClientResponseMessage:
    """``$CR``: the answer to a ``$CQ``."""

    PREFIX: ClassVar[str] = "$CR"

    sender: str
    recipient: str
    response: ClientResponse

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender", "recipient")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 4)
        return cls(sender_of(fields), fields[1], parse_client_response(fields))

    def to_line(self) -> str:
        return f"{self.PREFIX}{self.sender}:{self.recipient}:{self.response.to_text()}"

    @classmethod
    def com_1_freq(cls, sender: str, recipient: str, frequency: RadioFrequency) -> Self:
        return cls(sender, recipient, Com1FrequencyResponse(frequency))

    @classmethod
    def atis(cls, sender: str, recipient: str, line: AtisLine) -> Self:
        return cls(sender, recipient, AtisResponse(line))

    @classmethod
    def real_name(cls, sender: str, recipient: str, name: str, info: str, rating: int) -> Self:
        return cls(sender, recipient, RealNameResponse(name, info, rating))

    @classmethod
    def public_ip(cls, sender: str, recipient: str, ip_address: str) -> Self:
        return cls(sender, recipient, PublicIpResponse(ip_address))

    @classmethod
    def server(cls, sender: str, recipient: str, server: str) -> Self:
        return cls(sender, recipient, ServerResponse(server))

    @classmethod
    def is_valid_atc(cls, sender: str, recipient: str, subject: str, valid: bool) -> Self:
        return cls(sender, recipient, IsValidAtcResponse(subject, valid))

    @classmethod
    def capabilities(cls, sender: str, recipient: str, capabilities: Iterable[ClientCapability]) -> Self:
        return cls(sender, recipient, CapabilitiesResponse(frozenset(capabilities)))
