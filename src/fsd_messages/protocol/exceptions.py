"""Custom exception types for FSD protocol errors.

This module defines the exception hierarchy for local decode failures,
following the "No Nullability" principle where errors raise exceptions
instead of returning None. Every parse error carries the offending raw
text so callers can report exactly which part of a line was rejected.

Faults reported *by the server* ($ER lines) are not exceptions; they are
modelled as values in protocol.server_errors.
"""

from __future__ import annotations

from typing import ClassVar, override


class FsdProtocolError(Exception):
    """Base exception for all FSD protocol errors.

    All protocol-related exceptions inherit from this base class,
    enabling catch-all error handling when needed while maintaining
    specific exception types for detailed handling.
    """


class FsdMessageParseError(FsdProtocolError):
    """A line, or one of its fields, cannot be decoded.

    Subclasses set ``reason`` (a stable slug used for metric labels) and
    ``template`` (the human-readable message).

    Attributes:
        raw: The offending text exactly as it appeared on the wire
        reason: Failure category, e.g. "invalid_frequency"
    """

    reason: ClassVar[str] = "parse_error"
    template: ClassVar[str] = "{raw} could not be parsed"

    def __init__(self, raw: str = ""):
        self.raw = raw
        super().__init__(self._describe())

    def _describe(self) -> str:
        return self.template.format(raw=self.raw)


class InvalidFieldCount(FsdMessageParseError):
    """Field list is shorter (or, for fixed-width kinds, longer) than allowed.

    Attributes:
        expected: Minimum (or exact) number of fields the message kind needs
        found: Number of fields actually present
    """

    reason = "invalid_field_count"

    def __init__(self, expected: int, found: int):
        self.expected = expected
        self.found = found
        super().__init__()

    @override
    def _describe(self) -> str:
        return f"Invalid field count. Expected {self.expected}, found {self.found}."


class UnknownMessageType(FsdMessageParseError):
    """No message kind matches the line prefix."""

    reason = "unknown_message_type"
    template = "Unknown message type: {raw}"


class InvalidRating(FsdMessageParseError):
    reason = "invalid_rating"
    template = "{raw} is not a valid rating"


class InvalidProtocolRevision(FsdMessageParseError):
    reason = "invalid_protocol_revision"
    template = "{raw} is not a valid protocol revision"


class InvalidFlightRules(FsdMessageParseError):
    reason = "invalid_flight_rules"
    template = "{raw} is not a valid flight rules"


class InvalidAtcType(FsdMessageParseError):
    reason = "invalid_atc_type"
    template = "{raw} is not a valid ATC type"


class InvalidTime(FsdMessageParseError):
    reason = "invalid_time"
    template = "{raw} is not a valid time"


class InvalidMinute(FsdMessageParseError):
    reason = "invalid_minute"
    template = "{raw} is not a valid minute"


class InvalidIndex(FsdMessageParseError):
    reason = "invalid_index"
    template = "{raw} is not a valid index"


class InvalidFrequency(FsdMessageParseError):
    reason = "invalid_frequency"
    template = "{raw} is not a valid radio frequency"


class InvalidVisRange(FsdMessageParseError):
    reason = "invalid_vis_range"
    template = "{raw} is not a valid visibility range"


class InvalidCoordinate(FsdMessageParseError):
    reason = "invalid_coordinate"
    template = "{raw} is not a valid lat / long coordinate"


class InvalidTransponderMode(FsdMessageParseError):
    reason = "invalid_transponder_mode"
    template = "{raw} is not a transponder mode"


class InvalidTransponderCode(FsdMessageParseError):
    reason = "invalid_transponder_code"
    template = "{raw} is not a transponder code"


class InvalidAircraftConfig(FsdMessageParseError):
    reason = "invalid_aircraft_config"
    template = "Unable to parse aircraft config: {raw}"


class InvalidPitchBankHeading(FsdMessageParseError):
    reason = "invalid_pitch_bank_heading"
    template = "{raw} is not a valid pitch / bank / heading number"


class InvalidAltitude(FsdMessageParseError):
    reason = "invalid_altitude"
    template = "{raw} is not a valid altitude"


class InvalidAltitudeDifference(FsdMessageParseError):
    reason = "invalid_altitude_difference"
    template = "{raw} is not a valid altitude difference"


class InvalidVoiceCapability(FsdMessageParseError):
    reason = "invalid_voice_capability"
    template = "{raw} is not a valid voice capability"


class InvalidSpeed(FsdMessageParseError):
    reason = "invalid_speed"
    template = "{raw} is not a valid speed"


class InvalidClientId(FsdMessageParseError):
    reason = "invalid_client_id"
    template = "{raw} is not a valid client ID"


class InvalidVersionNumber(FsdMessageParseError):
    reason = "invalid_version_number"
    template = "{raw} is not a valid version number part"


class InvalidNosewheelAngle(FsdMessageParseError):
    reason = "invalid_nosewheel_angle"
    template = "{raw} is not a valid nosewheel angle"


class InvalidPositionVelocity(FsdMessageParseError):
    reason = "invalid_position_velocity"
    template = "{raw} is not a valid position velocity"


class InvalidPingTime(FsdMessageParseError):
    reason = "invalid_ping_time"
    template = "{raw} is not a valid ping time"


class InvalidServerError(FsdMessageParseError):
    reason = "invalid_server_error"
    template = "{raw} is not a valid server error"


class InvalidClientQueryType(FsdMessageParseError):
    reason = "invalid_client_query_type"
    template = "{raw} is not a valid client query type"


class InvalidNewAtisMessage(FsdMessageParseError):
    reason = "invalid_new_atis_message"
    template = "{raw} is not a valid new ATIS message"


class InvalidValidAtcStatus(FsdMessageParseError):
    reason = "invalid_valid_atc_status"
    template = "{raw} is not a valid ATC status"


class InvalidAtisLine(FsdMessageParseError):
    reason = "invalid_atis_line"
    template = "{raw} is not a valid ATIS line"


class InvalidSharedStateType(FsdMessageParseError):
    reason = "invalid_shared_state_type"
    template = "{raw} is not a valid shared state type"


class InvalidClientCapability(FsdMessageParseError):
    reason = "invalid_client_capability"
    template = "{raw} is not a valid client capability"


class LineTooLong(FsdMessageParseError):
    """Line exceeds the configured maximum length and was not parsed.

    Attributes:
        limit: Maximum accepted length in characters
    """

    reason = "line_too_long"

    def __init__(self, raw: str, limit: int):
        self.limit = limit
        super().__init__(raw)

    @override
    def _describe(self) -> str:
        return f"Line of {len(self.raw)} characters exceeds the {self.limit} character limit"


class MessageEncodeError(FsdProtocolError):
    """A record cannot be serialized to a wire line.

    Attributes:
        kind: Name of the record type that was rejected
        reason: Specific failure reason (e.g., "decode_only")
    """

    def __init__(self, kind: str, reason: str):
        self.kind = kind
        self.reason = reason
        super().__init__(f"Cannot encode {kind}: {reason}")
