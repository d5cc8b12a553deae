"""Unit tests for FSD protocol exception types."""

from __future__ import annotations

import pytest

from fsd_messages.protocol.exceptions import (
    FsdMessageParseError,
    FsdProtocolError,
    InvalidFieldCount,
    InvalidFrequency,
    LineTooLong,
    MessageEncodeError,
    UnknownMessageType,
)

# Test constants
EXPECTED_FIELDS = 7
FOUND_FIELDS = 3
LINE_LIMIT = 5
LONG_LINE_LENGTH = 10


@pytest.mark.unit
def test_invalid_field_count_message() -> None:
    """Test InvalidFieldCount reports expected and found counts."""
    error = InvalidFieldCount(EXPECTED_FIELDS, FOUND_FIELDS)

    assert error.expected == EXPECTED_FIELDS
    assert error.found == FOUND_FIELDS
    assert str(error) == "Invalid field count. Expected 7, found 3."
    assert error.reason == "invalid_field_count"


@pytest.mark.unit
def test_parse_error_keeps_raw_text() -> None:
    """Test field errors carry the offending text."""
    error = InvalidFrequency("1830a")

    assert error.raw == "1830a"
    assert str(error) == "1830a is not a valid radio frequency"
    assert error.reason == "invalid_frequency"


@pytest.mark.unit
def test_unknown_message_type_message() -> None:
    """Test UnknownMessageType names the line."""
    error = UnknownMessageType("XYZ:1:2")

    assert str(error) == "Unknown message type: XYZ:1:2"


@pytest.mark.unit
def test_line_too_long_message() -> None:
    """Test LineTooLong reports the length and the limit."""
    error = LineTooLong("x" * LONG_LINE_LENGTH, LINE_LIMIT)

    assert error.limit == LINE_LIMIT
    assert error.reason == "line_too_long"
    assert str(error) == "Line of 10 characters exceeds the 5 character limit"


@pytest.mark.unit
def test_message_encode_error_attributes() -> None:
    """Test MessageEncodeError exposes kind and reason."""
    error = MessageEncodeError("ServerHeartbeat", "decode_only")

    assert error.kind == "ServerHeartbeat"
    assert error.reason == "decode_only"
    assert str(error) == "Cannot encode ServerHeartbeat: decode_only"


@pytest.mark.unit
def test_exceptions_inherit_from_base() -> None:
    """Test exception hierarchy - all inherit from FsdProtocolError."""
    assert isinstance(InvalidFieldCount(1, 0), FsdMessageParseError)
    assert isinstance(UnknownMessageType("x"), FsdProtocolError)
    assert isinstance(MessageEncodeError("x", "y"), FsdProtocolError)
    assert not isinstance(MessageEncodeError("x", "y"), FsdMessageParseError)


@pytest.mark.unit
def test_parse_error_reasons_are_unique() -> None:
    """Test every parse error has its own metric label."""
    reasons = [cls.reason for cls in FsdMessageParseError.__subclasses__()]

    assert len(reasons) == len(set(reasons))
    assert FsdMessageParseError.reason not in reasons


@pytest.mark.unit
def test_fsd_protocol_error_catch_all() -> None:
    """Test FsdProtocolError can catch all protocol exceptions."""
    with pytest.raises(FsdProtocolError) as exc_info:
        raise InvalidFrequency("999")

    assert isinstance(exc_info.value, InvalidFrequency)
