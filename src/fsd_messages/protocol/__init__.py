"""FSD protocol package - line decoding and encoding.

Pure codec for the colon-delimited FSD protocol used by flight simulation
networks. Nothing here performs I/O or reads configuration.

Public API:
- Dispatcher (parse_message, encode_message, Message)
- Message records, one per message kind, plus the three envelope kinds
  (ClientQueryMessage, ClientResponseMessage, SharedStateMessage)
- Primitive codecs (TransponderCode, RadioFrequency, FlightPlan, ...)
- Exceptions (FsdMessageParseError and subclasses)
"""

from fsd_messages.protocol.aircraft_config import AircraftConfig, AircraftEngine, AircraftEngines, AircraftLights
from fsd_messages.protocol.client_query import ClientQuery, ClientQueryMessage
from fsd_messages.protocol.client_response import AtisLine, ClientResponse, ClientResponseMessage
from fsd_messages.protocol.constants import (
    AIRCRAFT_HANDLER_RECIPIENT,
    ATC_TEXT_CHANNEL_FREQUENCY,
    SERVER_CALLSIGN,
)
from fsd_messages.protocol.dispatcher import Message, encode_message, parse_message
from fsd_messages.protocol.enums import (
    AtcRating,
    AtcType,
    ClientCapability,
    FlightRules,
    PilotRating,
    ProtocolRevision,
    SimulatorType,
    TransponderMode,
    VoiceCapability,
)
from fsd_messages.protocol.exceptions import (
    FsdMessageParseError,
    FsdProtocolError,
    InvalidFieldCount,
    MessageEncodeError,
    UnknownMessageType,
)
from fsd_messages.protocol.orientation import (
    Orientation,
    decode_pitch_bank_heading,
    encode_pitch_bank_heading,
)
from fsd_messages.protocol.primitives import (
    FlightPlan,
    PlaneInfo,
    RadioFrequency,
    TransponderCode,
    parse_altitude,
)
from fsd_messages.protocol.scratchpad import ScratchPad, format_scratchpad, parse_scratchpad
from fsd_messages.protocol.server_errors import ServerError, ServerErrorCode
from fsd_messages.protocol.shared_state import SharedState, SharedStateMessage

__all__ = [
    # Dispatcher
    "Message",
    "encode_message",
    "parse_message",
    # Envelopes
    "ClientQuery",
    "ClientQueryMessage",
    "AtisLine",
    "ClientResponse",
    "ClientResponseMessage",
    "SharedState",
    "SharedStateMessage",
    # Primitives
    "AircraftConfig",
    "AircraftEngine",
    "AircraftEngines",
    "AircraftLights",
    "FlightPlan",
    "Orientation",
    "PlaneInfo",
    "RadioFrequency",
    "ScratchPad",
    "ServerError",
    "ServerErrorCode",
    "TransponderCode",
    "decode_pitch_bank_heading",
    "encode_pitch_bank_heading",
    "format_scratchpad",
    "parse_altitude",
    "parse_scratchpad",
    # Enumerations
    "AtcRating",
    "AtcType",
    "ClientCapability",
    "FlightRules",
    "PilotRating",
    "ProtocolRevision",
    "SimulatorType",
    "TransponderMode",
    "VoiceCapability",
    # Constants
    "AIRCRAFT_HANDLER_RECIPIENT",
    "ATC_TEXT_CHANNEL_FREQUENCY",
    "SERVER_CALLSIGN",
    # Exceptions
    "FsdMessageParseError",
    "FsdProtocolError",
    "InvalidFieldCount",
    "MessageEncodeError",
    "UnknownMessageType",
]
