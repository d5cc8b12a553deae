"""Faults reported by the FSD server in ``$ER`` lines.

These are protocol values, not local failures: a well-formed ``$ER`` line
decodes into a ServerError describing what the peer complained about.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Self

from fsd_messages.protocol.exceptions import InvalidServerError
from fsd_messages.protocol.fields import U8_MAX, parse_unsigned


class ServerErrorCode(IntEnum):
    """Numeric error codes carried in the third field of ``$ER``."""

    CALLSIGN_IN_USE = 1
    INVALID_CALLSIGN = 2
    ALREADY_REGISTERED = 3
    SYNTAX_ERROR = 4
    INVALID_SOURCE_CALLSIGN = 5
    INVALID_CID_PASSWORD = 6
    NO_SUCH_CALLSIGN = 7
    NO_FLIGHT_PLAN = 8
    NO_WEATHER_PROFILE = 9
    INVALID_PROTOCOL_REVISION = 10
    REQUESTED_LEVEL_TOO_HIGH = 11
    SERVER_FULL = 12
    CERTIFICATE_SUSPENDED = 13
    INVALID_CONTROL = 14
    INVALID_POSITION_FOR_RATING = 15
    UNAUTHORISED_CLIENT = 16
    AUTH_TIME_OUT = 17
    OTHER = 18


# Codes whose fourth field names the callsign (or station) the error is about
SUBJECT_CODES: frozenset[ServerErrorCode] = frozenset(
    {
        ServerErrorCode.NO_SUCH_CALLSIGN,
        ServerErrorCode.NO_FLIGHT_PLAN,
        ServerErrorCode.NO_WEATHER_PROFILE,
    }
)

_MESSAGES: dict[ServerErrorCode, str] = {
    ServerErrorCode.CALLSIGN_IN_USE: "Callsign in use",
    ServerErrorCode.INVALID_CALLSIGN: "Invalid callsign",
    ServerErrorCode.ALREADY_REGISTERED: "Already registered",
    ServerErrorCode.SYNTAX_ERROR: "Syntax error",
    ServerErrorCode.INVALID_SOURCE_CALLSIGN: "Invalid source callsign",
    ServerErrorCode.INVALID_CID_PASSWORD: "Invalid CID / password",
    ServerErrorCode.NO_SUCH_CALLSIGN: "No such callsign as {subject}",
    ServerErrorCode.NO_FLIGHT_PLAN: "No flight plan for {subject}",
    ServerErrorCode.NO_WEATHER_PROFILE: "No weather profile for {subject}",
    ServerErrorCode.INVALID_PROTOCOL_REVISION: "Invalid protocol revision",
    ServerErrorCode.REQUESTED_LEVEL_TOO_HIGH: "Requested level too high",
    ServerErrorCode.SERVER_FULL: "Server full",
    ServerErrorCode.CERTIFICATE_SUSPENDED: "CID has been suspended",
    ServerErrorCode.INVALID_CONTROL: "Invalid control",
    ServerErrorCode.INVALID_POSITION_FOR_RATING: "Invalid position for rating",
    ServerErrorCode.UNAUTHORISED_CLIENT: "Unauthorised client",
    ServerErrorCode.AUTH_TIME_OUT: "Authentication time out",
    ServerErrorCode.OTHER: "Other: {text}",
}


@dataclass(frozen=True, slots=True)
class ServerError:
    """A server-reported fault.

    Attributes:
        code: Error category
        subject: Callsign or station the error refers to (codes 7-9 only)
        text: Free text carried by OTHER errors
    """

    code: ServerErrorCode
    subject: str | None = None
    text: str | None = None

    def __post_init__(self) -> None:
        if self.subject is not None:
            object.__setattr__(self, "subject", self.subject.upper())

    @property
    def message(self) -> str:
        """Human-readable description of the fault."""
        return _MESSAGES[self.code].format(subject=self.subject or "", text=self.text or "")

    @classmethod
    def from_wire(cls, code_text: str, subject: str, text: str) -> Self:
        """Build a ServerError from the code, subject and text fields of ``$ER``.

        Codes 1-17 map onto their category. Any other number that fits in a
        byte is treated as OTHER and keeps the free text.

        Raises:
            InvalidServerError: If the code is not a number in 0-255

        """
        number = parse_unsigned(code_text, InvalidServerError, U8_MAX)
        if ServerErrorCode.CALLSIGN_IN_USE <= number <= ServerErrorCode.AUTH_TIME_OUT:
            code = ServerErrorCode(number)
            if code in SUBJECT_CODES:
                return cls(code, subject=subject)
            return cls(code)
        return cls(ServerErrorCode.OTHER, text=text)

    def to_fields(self) -> tuple[str, str, str]:
        """Return the (code, subject, text) fields written after the recipient."""
        return f"{self.code.value:03}", self.subject or "", self.text or ""
