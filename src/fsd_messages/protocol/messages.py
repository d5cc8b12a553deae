"""Records for the fixed-layout FSD message kinds.

Every record is an immutable dataclass with two entry points:

- ``from_fields(fields)`` builds the record from a colon-split line. The
  first field still carries the kind prefix (``#AA``, ``$PI``, ...) and the
  sender callsign glued together.
- ``to_line()`` renders the canonical wire line without a line terminator.

Callsigns (sender, recipient and subject aircraft) are uppercased at
construction, whichever path created the record.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import ClassVar, Self

from fsd_messages.protocol.enums import AtcRating, PilotRating, ProtocolRevision, SimulatorType
from fsd_messages.protocol.exceptions import (
    InvalidClientId,
    InvalidPingTime,
    InvalidVersionNumber,
    MessageEncodeError,
)
from fsd_messages.protocol.fields import (
    U16_MAX,
    U32_MAX,
    U64_MAX,
    check_exact_fields,
    check_min_fields,
    join_fields,
    parse_hex,
    parse_unsigned,
    uppercase_fields,
)
from fsd_messages.protocol.primitives import (
    FlightPlan,
    PlaneInfo,
    RadioFrequency,
    group_frequencies,
    split_frequencies,
)
from fsd_messages.protocol.server_errors import ServerError

PREFIX_LENGTH = 3


def sender_of(fields: Sequence[str], prefix_length: int = PREFIX_LENGTH) -> str:
    """Strip the kind prefix from the first field, leaving the sender callsign."""
    return fields[0][prefix_length:]


@dataclass(frozen=True, slots=True)
class AtcRegisterMessage:
    """``#AA``: an ATC client logging on after the handshake."""

    PREFIX: ClassVar[str] = "#AA"

    sender: str
    recipient: str
    real_name: str
    cid: str
    password: str
    rating: AtcRating
    protocol: ProtocolRevision

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender", "recipient")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 7)
        return cls(
            sender=sender_of(fields),
            recipient=fields[1],
            real_name=fields[2],
            cid=fields[3],
            password=fields[4],
            rating=AtcRating.parse(fields[5]),
            protocol=ProtocolRevision.parse(fields[6]),
        )

    def to_line(self) -> str:
        return (
            f"{self.PREFIX}{self.sender}:{self.recipient}:{self.real_name}:{self.cid}:"
            f"{self.password}:{self.rating.value}:{self.protocol.value}"
        )


@dataclass(frozen=True, slots=True)
class PilotRegisterMessage:
    """``#AP``: a pilot client logging on after the handshake.

    The real name is the last field and may be missing on older clients.
    """

    PREFIX: ClassVar[str] = "#AP"

    sender: str
    recipient: str
    cid: str
    password: str
    rating: PilotRating
    protocol: ProtocolRevision
    simulator: SimulatorType
    real_name: str = ""

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender", "recipient")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 7)
        return cls(
            sender=sender_of(fields),
            recipient=fields[1],
            cid=fields[2],
            password=fields[3],
            rating=PilotRating.parse(fields[4]),
            protocol=ProtocolRevision.parse(fields[5]),
            simulator=SimulatorType.parse(fields[6]),
            real_name=fields[7] if len(fields) > 7 else "",  # noqa: PLR2004
        )

    def to_line(self) -> str:
        return (
            f"{self.PREFIX}{self.sender}:{self.recipient}:{self.cid}:{self.password}:"
            f"{self.rating.value}:{self.protocol.value}:{self.simulator.value}:{self.real_name}"
        )


@dataclass(frozen=True, slots=True)
class _DeregisterMessage:
    PREFIX: ClassVar[str] = ""

    sender: str
    cid: str | None = None

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        # A bare "#DAEGPH_APP" with no CID is still a valid logoff
        check_min_fields(fields, 1)
        return cls(sender=sender_of(fields), cid=fields[1] if len(fields) > 1 else None)

    def to_line(self) -> str:
        if self.cid is None:
            return f"{self.PREFIX}{self.sender}"
        return f"{self.PREFIX}{self.sender}:{self.cid}"


@dataclass(frozen=True, slots=True)
class AtcDeregisterMessage(_DeregisterMessage):
    """``#DA``: an ATC client logging off."""

    PREFIX: ClassVar[str] = "#DA"


@dataclass(frozen=True, slots=True)
class PilotDeregisterMessage(_DeregisterMessage):
    """``#DP``: a pilot client logging off."""

    PREFIX: ClassVar[str] = "#DP"


@dataclass(frozen=True, slots=True)
class AuthenticationChallengeMessage:
    PREFIX: ClassVar[str] = "$ZC"

    sender: str
    recipient: str
    challenge: str

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender", "recipient")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 3)
        return cls(sender_of(fields), fields[1], fields[2])

    def to_line(self) -> str:
        return f"{self.PREFIX}{self.sender}:{self.recipient}:{self.challenge}"


@dataclass(frozen=True, slots=True)
class AuthenticationResponseMessage:
    PREFIX: ClassVar[str] = "$ZR"

    sender: str
    recipient: str
    response: str

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender", "recipient")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 3)
        return cls(sender_of(fields), fields[1], fields[2])

    def to_line(self) -> str:
        return f"{self.PREFIX}{self.sender}:{self.recipient}:{self.response}"


@dataclass(frozen=True, slots=True)
class TextMessage:
    """``#TM`` addressed to a callsign (or a broadcast token such as ``*``).

    Message text may itself contain colons; everything after the recipient
    is the message.
    """

    PREFIX: ClassVar[str] = "#TM"

    sender: str
    recipient: str
    message: str

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender", "recipient")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 3)
        return cls(sender_of(fields), fields[1], join_fields(fields[2:]))

    def to_line(self) -> str:
        return f"{self.PREFIX}{self.sender}:{self.recipient}:{self.message}"


@dataclass(frozen=True, slots=True)
class FrequencyMessage:
    """``#TM`` addressed to one or more radio frequencies (``@18300&@19000``)."""

    PREFIX: ClassVar[str] = "#TM"

    sender: str
    frequencies: tuple[RadioFrequency, ...]
    message: str

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender")
        object.__setattr__(self, "frequencies", tuple(self.frequencies))

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 3)
        return cls(sender_of(fields), tuple(split_frequencies(fields[1])), join_fields(fields[2:]))

    def to_line(self) -> str:
        recipients = group_frequencies(self.frequencies, with_symbol=True)
        return f"{self.PREFIX}{self.sender}:{recipients}:{self.message}"


@dataclass(frozen=True, slots=True)
class ChangeServerMessage:
    PREFIX: ClassVar[str] = "$XX"

    sender: str
    recipient: str
    hostname: str

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender", "recipient")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 3)
        return cls(sender_of(fields), fields[1], fields[2])

    def to_line(self) -> str:
        return f"{self.PREFIX}{self.sender}:{self.recipient}:{self.hostname}"


@dataclass(frozen=True, slots=True)
class ServerHandshakeMessage:
    """``$DI``: the server's opening message carrying its version and key."""

    PREFIX: ClassVar[str] = "$DI"

    sender: str
    recipient: str
    version: str
    initial_key: str | None = None

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender", "recipient")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 3)
        initial_key = fields[3] if len(fields) > 3 else None  # noqa: PLR2004
        return cls(sender_of(fields), fields[1], fields[2], initial_key)

    def to_line(self) -> str:
        line = f"{self.PREFIX}{self.sender}:{self.recipient}:{self.version}"
        if self.initial_key is not None:
            line += f":{self.initial_key}"
        return line


@dataclass(frozen=True, slots=True)
class ClientHandshakeMessage:
    """``$ID``: the client's reply identifying its software and user.

    Attributes:
        client_id: Network-assigned client software id, hex on the wire
        initial_key: Echo of the server key, only sent by some clients
    """

    PREFIX: ClassVar[str] = "$ID"

    sender: str
    recipient: str
    client_id: int
    client_name: str
    major_version: int
    minor_version: int
    cid: str
    guid: str
    initial_key: str | None = None

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender", "recipient")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 8)
        return cls(
            sender=sender_of(fields),
            recipient=fields[1],
            client_id=parse_hex(fields[2], InvalidClientId, U16_MAX),
            client_name=fields[3],
            major_version=parse_unsigned(fields[4], InvalidVersionNumber, U32_MAX),
            minor_version=parse_unsigned(fields[5], InvalidVersionNumber, U32_MAX),
            cid=fields[6],
            guid=fields[7],
            initial_key=fields[8] if len(fields) > 8 else None,  # noqa: PLR2004
        )

    def to_line(self) -> str:
        line = (
            f"{self.PREFIX}{self.sender}:{self.recipient}:{self.client_id:04x}:{self.client_name}:"
            f"{self.major_version}:{self.minor_version}:{self.cid}:{self.guid}"
        )
        if self.initial_key is not None:
            line += f":{self.initial_key}"
        return line


@dataclass(frozen=True, slots=True)
class SendFastPositionUpdatesMessage:
    PREFIX: ClassVar[str] = "$SF"

    sender: str
    recipient: str
    send_fast: bool

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender", "recipient")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 3)
        return cls(sender_of(fields), fields[1], fields[2] == "1")

    def to_line(self) -> str:
        return f"{self.PREFIX}{self.sender}:{self.recipient}:{1 if self.send_fast else 0}"


@dataclass(frozen=True, slots=True)
class KillMessage:
    """``$!!``: a supervisor or the server disconnecting a client."""

    PREFIX: ClassVar[str] = "$!!"

    sender: str
    recipient: str
    reason: str | None = None

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender", "recipient")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 2)
        reason = join_fields(fields[2:]) if len(fields) > 2 else None  # noqa: PLR2004
        return cls(sender_of(fields), fields[1], reason)

    def to_line(self) -> str:
        line = f"{self.PREFIX}{self.sender}:{self.recipient}"
        if self.reason is not None:
            line += f":{self.reason}"
        return line


@dataclass(frozen=True, slots=True)
class MetarRequestMessage:
    PREFIX: ClassVar[str] = "$AX"

    sender: str
    recipient: str
    station: str

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender", "recipient", "station")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 4)
        return cls(sender_of(fields), fields[1], fields[3])

    def to_line(self) -> str:
        return f"{self.PREFIX}{self.sender}:{self.recipient}:METAR:{self.station}"


@dataclass(frozen=True, slots=True)
class MetarResponseMessage:
    PREFIX: ClassVar[str] = "$AR"

    sender: str
    recipient: str
    metar: str

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender", "recipient", "metar")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 4)
        return cls(sender_of(fields), fields[1], fields[3])

    def to_line(self) -> str:
        return f"{self.PREFIX}{self.sender}:{self.recipient}:METAR:{self.metar}"


@dataclass(frozen=True, slots=True)
class _TimestampMessage:
    PREFIX: ClassVar[str] = ""

    sender: str
    recipient: str
    timestamp: int

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender", "recipient")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 3)
        return cls(sender_of(fields), fields[1], parse_unsigned(fields[2], InvalidPingTime, U64_MAX))

    def to_line(self) -> str:
        return f"{self.PREFIX}{self.sender}:{self.recipient}:{self.timestamp}"


@dataclass(frozen=True, slots=True)
class PingMessage(_TimestampMessage):
    PREFIX: ClassVar[str] = "$PI"


@dataclass(frozen=True, slots=True)
class PongMessage(_TimestampMessage):
    PREFIX: ClassVar[str] = "$PO"


@dataclass(frozen=True, slots=True)
class PlaneInfoRequestMessage:
    """``#SB...:PIR``: ask another pilot client for its aircraft model."""

    PREFIX: ClassVar[str] = "#SB"

    sender: str
    recipient: str

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender", "recipient")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 3)
        return cls(sender_of(fields), fields[1])

    def to_line(self) -> str:
        return f"{self.PREFIX}{self.sender}:{self.recipient}:PIR"


@dataclass(frozen=True, slots=True)
class PlaneInfoResponseMessage:
    """``#SB...:PI:GEN:...``: aircraft model details."""

    PREFIX: ClassVar[str] = "#SB"

    sender: str
    recipient: str
    plane_info: PlaneInfo

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender", "recipient")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 5)
        return cls(sender_of(fields), fields[1], PlaneInfo.from_entries(fields[4:]))

    def to_line(self) -> str:
        return f"{self.PREFIX}{self.sender}:{self.recipient}:PI:GEN:{self.plane_info.to_text()}"


@dataclass(frozen=True, slots=True)
class ServerErrorMessage:
    """``$ER``: the server reporting a fault to a client."""

    PREFIX: ClassVar[str] = "$ER"

    sender: str
    recipient: str
    error: ServerError

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender", "recipient")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 5)
        return cls(sender_of(fields), fields[1], ServerError.from_wire(fields[2], fields[3], join_fields(fields[4:])))

    def to_line(self) -> str:
        code, subject, text = self.error.to_fields()
        return f"{self.PREFIX}{self.sender}:{self.recipient}:{code}:{subject}:{text}"


@dataclass(frozen=True, slots=True)
class FlightPlanMessage:
    """``$FP``: a pilot filing a flight plan.

    The first field carries the filing aircraft's callsign, so there is no
    separate sender.
    """

    PREFIX: ClassVar[str] = "$FP"

    callsign: str
    recipient: str
    flight_plan: FlightPlan

    def __post_init__(self) -> None:
        uppercase_fields(self, "callsign", "recipient")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_exact_fields(fields, 17)
        return cls(sender_of(fields), fields[1], FlightPlan.from_fields(fields[2:]))

    def to_line(self) -> str:
        return f"{self.PREFIX}{self.callsign}:{self.recipient}:{join_fields(self.flight_plan.to_fields())}"


@dataclass(frozen=True, slots=True)
class FlightPlanAmendmentMessage:
    """``$AM``: a controller amending another aircraft's flight plan."""

    PREFIX: ClassVar[str] = "$AM"

    sender: str
    recipient: str
    callsign: str
    flight_plan: FlightPlan

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender", "recipient", "callsign")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_exact_fields(fields, 18)
        return cls(sender_of(fields), fields[1], fields[2], FlightPlan.from_fields(fields[3:]))

    def to_line(self) -> str:
        return (
            f"{self.PREFIX}{self.sender}:{self.recipient}:{self.callsign}:"
            f"{join_fields(self.flight_plan.to_fields())}"
        )


@dataclass(frozen=True, slots=True)
class _HandoffMessage:
    PREFIX: ClassVar[str] = ""

    sender: str
    recipient: str
    aircraft: str

    def __post_init__(self) -> None:
        uppercase_fields(self, "sender", "recipient", "aircraft")

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> Self:
        check_min_fields(fields, 3)
        return cls(sender_of(fields), fields[1], fields[2])

    def to_line(self) -> str:
        return f"{self.PREFIX}{self.sender}:{self.recipient}:{self.aircraft}"


@dataclass(frozen=True, slots=True)
class HandoffOfferMessage(_HandoffMessage):
    PREFIX: ClassVar[str] = "$HO"


@dataclass(frozen=True, slots=True)
class HandoffAcceptMessage(_HandoffMessage):
    PREFIX: ClassVar[str] = "$HA"


@dataclass(frozen=True, slots=True)
class _PayloadlessMessage:
    """Kinds recognised on decode whose content is not retained."""

    def to_line(self) -> str:
        raise MessageEncodeError(type(self).__name__, "decode_only")


@dataclass(frozen=True, slots=True)
class ServerHeartbeat(_PayloadlessMessage):
    """``#DL``: periodic server keep-alive."""


@dataclass(frozen=True, slots=True)
class FsinnPlaneInfoRequest(_PayloadlessMessage):
    """``#SB...:FSIPIR``: FSInn-style plane info request."""


@dataclass(frozen=True, slots=True)
class FsinnPlaneInfoResponse(_PayloadlessMessage):
    """``#SB...:FSIPI``: FSInn-style plane info response."""
