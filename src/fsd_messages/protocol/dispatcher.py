"""Top-level FSD line dispatcher.

A line is split on every colon and routed on the prefix of its first
field. Prefixes are tried in a fixed order; the first match decides the
message kind, so a malformed line of a known kind raises that kind's
error instead of falling through to "unknown".
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from fsd_messages.protocol.client_query import ClientQueryMessage
from fsd_messages.protocol.client_response import ClientResponseMessage
from fsd_messages.protocol.constants import FREQUENCY_MARKER
from fsd_messages.protocol.exceptions import UnknownMessageType
from fsd_messages.protocol.fields import FIELD_SEPARATOR, check_min_fields
from fsd_messages.protocol.messages import (
    AtcDeregisterMessage,
    AtcRegisterMessage,
    AuthenticationChallengeMessage,
    AuthenticationResponseMessage,
    ChangeServerMessage,
    ClientHandshakeMessage,
    FlightPlanAmendmentMessage,
    FlightPlanMessage,
    FrequencyMessage,
    FsinnPlaneInfoRequest,
    FsinnPlaneInfoResponse,
    HandoffAcceptMessage,
    HandoffOfferMessage,
    KillMessage,
    MetarRequestMessage,
    MetarResponseMessage,
    PilotDeregisterMessage,
    PilotRegisterMessage,
    PingMessage,
    PlaneInfoRequestMessage,
    PlaneInfoResponseMessage,
    PongMessage,
    SendFastPositionUpdatesMessage,
    ServerErrorMessage,
    ServerHandshakeMessage,
    ServerHeartbeat,
    TextMessage,
)
from fsd_messages.protocol.positions import (
    AtcPositionUpdateMessage,
    AtcSecondaryVisCentreMessage,
    PilotPositionUpdateMessage,
    VelocityFastMessage,
    VelocitySlowMessage,
    VelocityStoppedMessage,
)
from fsd_messages.protocol.shared_state import SharedStateMessage

logger = logging.getLogger(__name__)

HEARTBEAT_PREFIX = "#DL"
SQUAWK_BOX_PREFIX = "#SB"

type Message = (
    AtcRegisterMessage
    | PilotRegisterMessage
    | AtcDeregisterMessage
    | PilotDeregisterMessage
    | AtcPositionUpdateMessage
    | AtcSecondaryVisCentreMessage
    | PilotPositionUpdateMessage
    | AuthenticationChallengeMessage
    | AuthenticationResponseMessage
    | TextMessage
    | FrequencyMessage
    | ChangeServerMessage
    | ServerHandshakeMessage
    | ClientHandshakeMessage
    | SendFastPositionUpdatesMessage
    | VelocityStoppedMessage
    | VelocitySlowMessage
    | VelocityFastMessage
    | KillMessage
    | MetarRequestMessage
    | MetarResponseMessage
    | PingMessage
    | PongMessage
    | PlaneInfoRequestMessage
    | PlaneInfoResponseMessage
    | ServerErrorMessage
    | FlightPlanMessage
    | FlightPlanAmendmentMessage
    | HandoffOfferMessage
    | HandoffAcceptMessage
    | ClientQueryMessage
    | ClientResponseMessage
    | SharedStateMessage
    | ServerHeartbeat
    | FsinnPlaneInfoRequest
    | FsinnPlaneInfoResponse
)

type _Parser = Callable[[Sequence[str]], Message]


def _parse_text(fields: Sequence[str]) -> Message:
    # A recipient starting with "@" is a frequency list, not a callsign
    if len(fields) > 1 and fields[1].startswith(FREQUENCY_MARKER):
        return FrequencyMessage.from_fields(fields)
    return TextMessage.from_fields(fields)


def _parse_heartbeat(fields: Sequence[str]) -> Message:
    return ServerHeartbeat()


_SQUAWK_BOX_PARSERS: dict[str, _Parser] = {
    "PIR": PlaneInfoRequestMessage.from_fields,
    "PI": PlaneInfoResponseMessage.from_fields,
    "FSIPI": lambda fields: FsinnPlaneInfoResponse(),
    "FSIPIR": lambda fields: FsinnPlaneInfoRequest(),
}


def _parse_squawk_box(fields: Sequence[str]) -> Message:
    check_min_fields(fields, 3)
    parser = _SQUAWK_BOX_PARSERS.get(fields[2])
    if parser is None:
        raise UnknownMessageType(FIELD_SEPARATOR.join(fields))
    return parser(fields)


# Order matters: "$CQ" must not be shadowed and "#TM"/"#SB" sub-dispatch
_PARSERS: tuple[tuple[str, _Parser], ...] = (
    (AtcDeregisterMessage.PREFIX, AtcDeregisterMessage.from_fields),
    (PilotDeregisterMessage.PREFIX, PilotDeregisterMessage.from_fields),
    (AtcRegisterMessage.PREFIX, AtcRegisterMessage.from_fields),
    (PilotRegisterMessage.PREFIX, PilotRegisterMessage.from_fields),
    (AtcPositionUpdateMessage.PREFIX, AtcPositionUpdateMessage.from_fields),
    (AtcSecondaryVisCentreMessage.PREFIX, AtcSecondaryVisCentreMessage.from_fields),
    (PilotPositionUpdateMessage.PREFIX, PilotPositionUpdateMessage.from_fields),
    (AuthenticationChallengeMessage.PREFIX, AuthenticationChallengeMessage.from_fields),
    (AuthenticationResponseMessage.PREFIX, AuthenticationResponseMessage.from_fields),
    (ServerErrorMessage.PREFIX, ServerErrorMessage.from_fields),
    (HandoffOfferMessage.PREFIX, HandoffOfferMessage.from_fields),
    (HandoffAcceptMessage.PREFIX, HandoffAcceptMessage.from_fields),
    (TextMessage.PREFIX, _parse_text),
    (ChangeServerMessage.PREFIX, ChangeServerMessage.from_fields),
    (FlightPlanMessage.PREFIX, FlightPlanMessage.from_fields),
    (FlightPlanAmendmentMessage.PREFIX, FlightPlanAmendmentMessage.from_fields),
    (ServerHandshakeMessage.PREFIX, ServerHandshakeMessage.from_fields),
    (ClientHandshakeMessage.PREFIX, ClientHandshakeMessage.from_fields),
    (SendFastPositionUpdatesMessage.PREFIX, SendFastPositionUpdatesMessage.from_fields),
    (VelocityStoppedMessage.PREFIX, VelocityStoppedMessage.from_fields),
    (HEARTBEAT_PREFIX, _parse_heartbeat),
    (VelocitySlowMessage.PREFIX, VelocitySlowMessage.from_fields),
    (SharedStateMessage.PREFIX, SharedStateMessage.from_fields),
    (VelocityFastMessage.PREFIX, VelocityFastMessage.from_fields),
    (KillMessage.PREFIX, KillMessage.from_fields),
    (MetarRequestMessage.PREFIX, MetarRequestMessage.from_fields),
    (MetarResponseMessage.PREFIX, MetarResponseMessage.from_fields),
    (ClientQueryMessage.PREFIX, ClientQueryMessage.from_fields),
    (ClientResponseMessage.PREFIX, ClientResponseMessage.from_fields),
    (PingMessage.PREFIX, PingMessage.from_fields),
    (PongMessage.PREFIX, PongMessage.from_fields),
    (SQUAWK_BOX_PREFIX, _parse_squawk_box),
)

# Deregistration is the only kind that can arrive as a single field
_SINGLE_FIELD_PARSERS: tuple[tuple[str, _Parser], ...] = _PARSERS[:2]


def parse_message(line: str) -> Message:
    """Decode one line, without its line terminator, into a message record.

    Args:
        line: Raw line text, e.g. ``"#DAEGPH_APP:123456"``

    Returns:
        The decoded record

    Raises:
        UnknownMessageType: If no message kind matches the line prefix
        FsdMessageParseError: If the line matches a kind but its fields
            are invalid (the subclass names the failing field)

    Example:
        >>> parse_message("#DAEGPH_APP:123456")
        AtcDeregisterMessage(sender='EGPH_APP', cid='123456')

    """
    fields = line.split(FIELD_SEPARATOR)
    candidates = _SINGLE_FIELD_PARSERS if len(fields) == 1 else _PARSERS
    for prefix, parser in candidates:
        if fields[0].startswith(prefix):
            message = parser(fields)
            logger.debug("Decoded %s from %d fields", type(message).__name__, len(fields))
            return message
    raise UnknownMessageType(line)


def encode_message(message: Message) -> str:
    """Render a record as its canonical wire line, without a terminator.

    Raises:
        MessageEncodeError: For kinds that are recognised on decode only

    """
    line = message.to_line()
    logger.debug("Encoded %s (%d chars)", type(message).__name__, len(line))
    return line
