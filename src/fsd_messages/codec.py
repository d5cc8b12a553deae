"""Codec facade: line decoding and encoding with logging and metrics.

The protocol package is pure; this module adds the operational concerns
around it. Callers that hold raw socket or file lines use these functions
rather than the dispatcher directly.
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from fsd_messages.const import FSD_MAX_LINE_LENGTH
from fsd_messages.correlation import correlation_context
from fsd_messages.logging_abstraction import get_logger
from fsd_messages.metrics import (
    record_decode_error,
    record_decode_latency,
    record_encode_error,
    record_message_decoded,
    record_message_encoded,
)
from fsd_messages.protocol.dispatcher import Message, encode_message, parse_message
from fsd_messages.protocol.exceptions import FsdMessageParseError, LineTooLong, MessageEncodeError

__all__ = [
    "DecodeResult",
    "decode_line",
    "decode_lines",
    "encode",
    "strip_terminator",
]

logger = get_logger(__name__)

LINE_TERMINATOR = "\r\n"


def strip_terminator(line: str) -> str:
    """Remove a trailing CRLF, or a bare LF or CR, from a raw line."""
    if line.endswith(LINE_TERMINATOR):
        return line[: -len(LINE_TERMINATOR)]
    return line.rstrip("\r\n")


def decode_line(line: str, max_line_length: int | None = None) -> Message:
    """Decode one raw line, counting and logging the outcome.

    Args:
        line: Line as read from the wire; a trailing terminator is allowed
        max_line_length: Reject longer lines without parsing them
            (defaults to FSD_MAX_LINE_LENGTH)

    Returns:
        The decoded message record

    Raises:
        LineTooLong: If the line exceeds the length limit
        FsdMessageParseError: If the line cannot be decoded

    """
    limit = max_line_length or FSD_MAX_LINE_LENGTH
    text = strip_terminator(line)
    if len(text) > limit:
        record_decode_error(LineTooLong.reason)
        logger.warning("Rejected over-long line", extra={"length": len(text), "limit": limit})
        raise LineTooLong(text, limit)

    start = time.perf_counter()
    try:
        message = parse_message(text)
    except FsdMessageParseError as e:
        record_decode_error(e.reason)
        logger.debug("Failed to decode line", extra={"reason": e.reason, "error": str(e), "line": text})
        raise
    finally:
        record_decode_latency(time.perf_counter() - start)

    record_message_decoded(type(message).__name__)
    return message


def encode(message: Message) -> str:
    """Encode a record as its wire line, without the CRLF terminator.

    Raises:
        MessageEncodeError: If the record kind cannot be encoded

    """
    kind = type(message).__name__
    try:
        line = encode_message(message)
    except MessageEncodeError as e:
        record_encode_error(kind, e.reason)
        logger.debug("Failed to encode message", extra={"kind": kind, "reason": e.reason})
        raise
    record_message_encoded(kind)
    return line


@dataclass(frozen=True, slots=True)
class DecodeResult:
    """Outcome of decoding one line of a batch."""

    line_number: int
    line: str
    message: Message | None = None
    error: FsdMessageParseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def decode_lines(
    lines: Iterable[str],
    correlation_id: str | None = None,
    max_line_length: int | None = None,
) -> Iterator[DecodeResult]:
    """Decode a batch of lines, reporting failures per line instead of raising.

    Blank lines are skipped. Line numbers start at 1 and count blank lines,
    so they match the source file. The whole batch runs under a single
    correlation ID.
    """
    with correlation_context(correlation_id) as batch_id:
        decoded = failed = 0
        for line_number, raw in enumerate(lines, start=1):
            text = strip_terminator(raw)
            if not text.strip():
                continue
            try:
                message = decode_line(text, max_line_length)
            except FsdMessageParseError as e:
                failed += 1
                yield DecodeResult(line_number, text, error=e)
            else:
                decoded += 1
                yield DecodeResult(line_number, text, message=message)
        logger.info("Decoded batch", extra={"batch": batch_id, "decoded": decoded, "failed": failed})
