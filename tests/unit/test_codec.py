"""Unit tests for the codec facade."""

from __future__ import annotations

import logging

import pytest

from fsd_messages import codec
from fsd_messages.codec import DecodeResult, decode_line, decode_lines, encode, strip_terminator
from fsd_messages.const import FSD_MAX_LINE_LENGTH
from fsd_messages.correlation import get_correlation_id
from fsd_messages.metrics import registry
from fsd_messages.protocol.exceptions import LineTooLong, MessageEncodeError, UnknownMessageType
from fsd_messages.protocol.messages import PingMessage, ServerHeartbeat
from tests.fixtures.real_lines import ATC_DEREGISTER, PING, PONG

# Test constants
SHORT_LIMIT = 5
BATCH_ID = "capture-0142"


def labels_of(counter: object) -> list[dict[str, str]]:
    return [s.labels for s in counter.collect()[0].samples]  # type: ignore[attr-defined]


class TestStripTerminator:
    """Tests for strip_terminator."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (f"{PING}\r\n", PING),
            (f"{PING}\n", PING),
            (f"{PING}\r", PING),
            (PING, PING),
            ("\r\n", ""),
        ],
    )
    def test_strip(self, raw: str, expected: str) -> None:
        """Test CRLF, LF and CR are removed from the end only."""
        assert strip_terminator(raw) == expected

    @pytest.mark.unit
    def test_keeps_inner_whitespace(self) -> None:
        """Test only the terminator is stripped."""
        assert strip_terminator("#TMBAW123:EGPH_APP:hi  \r\n") == "#TMBAW123:EGPH_APP:hi  "


class TestDecodeLine:
    """Tests for decode_line."""

    @pytest.mark.unit
    def test_decodes_with_terminator(self) -> None:
        """Test a wire line with CRLF decodes."""
        message = decode_line(f"{PING}\r\n")

        assert isinstance(message, PingMessage)
        assert {"kind": "PingMessage"} in labels_of(registry.fsd_messages_decoded_total)

    @pytest.mark.unit
    def test_line_too_long_default_limit(self) -> None:
        """Test lines over the configured limit are rejected unparsed."""
        line = "#TMBAW123:EGPH_APP:" + "x" * FSD_MAX_LINE_LENGTH

        with pytest.raises(LineTooLong) as exc_info:
            decode_line(line)

        assert exc_info.value.limit == FSD_MAX_LINE_LENGTH
        assert {"reason": "line_too_long"} in labels_of(registry.fsd_decode_errors_total)

    @pytest.mark.unit
    def test_line_too_long_custom_limit(self) -> None:
        """Test a caller supplied limit."""
        with pytest.raises(LineTooLong) as exc_info:
            decode_line(PING, max_line_length=SHORT_LIMIT)

        assert exc_info.value.limit == SHORT_LIMIT
        assert exc_info.value.raw == PING

    @pytest.mark.unit
    def test_terminator_not_counted(self) -> None:
        """Test the length check applies to the stripped line."""
        assert isinstance(decode_line(f"{PING}\r\n", max_line_length=len(PING)), PingMessage)

    @pytest.mark.unit
    def test_over_long_line_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test rejected over-long lines are logged at WARNING."""
        with caplog.at_level(logging.WARNING, logger=codec.__name__), pytest.raises(LineTooLong):
            decode_line(PING, max_line_length=SHORT_LIMIT)

        assert "Rejected over-long line" in caplog.text

    @pytest.mark.unit
    def test_unknown_line(self) -> None:
        """Test unknown lines raise and are counted by reason."""
        with pytest.raises(UnknownMessageType):
            decode_line("XYZ:1")

        assert {"reason": "unknown_message_type"} in labels_of(registry.fsd_decode_errors_total)


class TestEncode:
    """Tests for encode."""

    @pytest.mark.unit
    def test_encode(self) -> None:
        """Test a record encodes to its canonical line."""
        assert encode(decode_line(PONG)) == PONG
        assert {"kind": "PongMessage"} in labels_of(registry.fsd_messages_encoded_total)

    @pytest.mark.unit
    def test_encode_decode_only_kind(self) -> None:
        """Test encode failures are re-raised and counted."""
        with pytest.raises(MessageEncodeError):
            encode(ServerHeartbeat())

        assert {"kind": "ServerHeartbeat", "reason": "decode_only"} in labels_of(registry.fsd_encode_errors_total)


class TestDecodeLines:
    """Tests for batch decoding."""

    @pytest.mark.unit
    def test_results_per_line(self) -> None:
        """Test blank lines are skipped but still counted in line numbers."""
        lines = [f"{PING}\r\n", "\r\n", "XYZ:1\r\n", f"{ATC_DEREGISTER}\n"]

        results = list(decode_lines(lines))

        assert [result.line_number for result in results] == [1, 3, 4]
        assert [result.ok for result in results] == [True, False, True]
        assert isinstance(results[1].error, UnknownMessageType)
        assert results[1].message is None
        assert results[1].line == "XYZ:1"

    @pytest.mark.unit
    def test_whitespace_only_line_skipped(self) -> None:
        """Test lines holding only whitespace are treated as blank."""
        assert list(decode_lines(["   \n", "\t\r\n"])) == []

    @pytest.mark.unit
    def test_correlation_id_scoped_to_batch(self) -> None:
        """Test the batch correlation ID is active only while iterating."""
        seen = [get_correlation_id() for _ in decode_lines([PING, PONG], correlation_id=BATCH_ID)]

        assert seen == [BATCH_ID, BATCH_ID]
        assert get_correlation_id() is None

    @pytest.mark.unit
    def test_generated_correlation_id(self) -> None:
        """Test a correlation ID is generated when none is given."""
        seen = [get_correlation_id() for _ in decode_lines([PING])]

        assert seen[0] is not None
        assert len(seen[0]) == 32  # noqa: PLR2004

    @pytest.mark.unit
    def test_line_too_long_reported_not_raised(self) -> None:
        """Test over-long lines become failed results."""
        (result,) = decode_lines([PING], max_line_length=SHORT_LIMIT)

        assert isinstance(result.error, LineTooLong)

    @pytest.mark.unit
    def test_batch_summary_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test the batch summary carries decoded and failed counts."""
        with caplog.at_level(logging.INFO, logger=codec.__name__):
            list(decode_lines([PING, "XYZ:1"], correlation_id=BATCH_ID))

        summary = next(record for record in caplog.records if record.getMessage() == "Decoded batch")
        assert summary.extra_data == {"batch": BATCH_ID, "decoded": 1, "failed": 1}  # type: ignore[attr-defined]


@pytest.mark.unit
def test_decode_result_ok() -> None:
    """Test DecodeResult.ok follows the error field."""
    assert DecodeResult(1, PING, message=PingMessage("EGPH_APP", "BAW123", 1697712000)).ok
    assert not DecodeResult(1, "XYZ:1", error=UnknownMessageType("XYZ:1")).ok
