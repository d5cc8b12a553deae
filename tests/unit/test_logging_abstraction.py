"""Unit tests for the logging abstraction layer."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator
from itertools import count
from pathlib import Path

import pytest

from fsd_messages.correlation import correlation_context
from fsd_messages.logging_abstraction import FsdLogger, HumanReadableFormatter, JSONFormatter, get_logger

# Test constants
CORRELATION_ID = "abcdef1234567890abcdef1234567890"
_logger_ids = count()


def make_record(msg: str = "Decoded batch", extra_data: dict[str, object] | None = None) -> logging.LogRecord:
    record = logging.LogRecord(
        name="fsd_messages.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=42,
        msg=msg,
        args=None,
        exc_info=None,
        func="replay",
    )
    if extra_data is not None:
        record.extra_data = extra_data
    return record


@pytest.fixture
def logger_name() -> Iterator[str]:
    """Yield a fresh logger name and drop its handlers afterwards."""
    name = f"fsd_messages.test.logger{next(_logger_ids)}"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


class TestHumanReadableFormatter:
    """Tests for HumanReadableFormatter."""

    @pytest.mark.unit
    def test_placeholder_without_correlation(self) -> None:
        """Test records outside a batch show an empty correlation slot."""
        formatted = HumanReadableFormatter().format(make_record())

        assert "[--------]" in formatted
        assert formatted.endswith("> Decoded batch")

    @pytest.mark.unit
    def test_short_correlation_prefix(self) -> None:
        """Test the first eight characters of the batch ID are shown."""
        with correlation_context(CORRELATION_ID):
            formatted = HumanReadableFormatter().format(make_record())

        assert "[abcdef12]" in formatted
        assert CORRELATION_ID not in formatted

    @pytest.mark.unit
    def test_context_appended(self) -> None:
        """Test structured context is rendered as key=value pairs."""
        formatted = HumanReadableFormatter().format(make_record(extra_data={"decoded": 3, "failed": 1}))

        assert formatted.endswith("> Decoded batch | decoded=3 | failed=1")

    @pytest.mark.unit
    def test_empty_context_ignored(self) -> None:
        """Test an empty context adds nothing."""
        formatted = HumanReadableFormatter().format(make_record(extra_data={}))

        assert "|" not in formatted


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    @pytest.mark.unit
    def test_fields(self) -> None:
        """Test the standard fields of a JSON record."""
        with correlation_context(CORRELATION_ID):
            log_data = json.loads(JSONFormatter().format(make_record()))

        assert log_data["level"] == "INFO"
        assert log_data["logger"] == "fsd_messages.test"
        assert log_data["function"] == "replay"
        assert log_data["line"] == 42  # noqa: PLR2004
        assert log_data["message"] == "Decoded batch"
        assert log_data["correlation_id"] == CORRELATION_ID
        assert "context" not in log_data
        assert "exception" not in log_data

    @pytest.mark.unit
    def test_context(self) -> None:
        """Test structured context is nested under "context"."""
        log_data = json.loads(JSONFormatter().format(make_record(extra_data={"reason": "line_too_long"})))

        assert log_data["context"] == {"reason": "line_too_long"}
        assert log_data["correlation_id"] is None

    @pytest.mark.unit
    def test_unserializable_context_stringified(self) -> None:
        """Test values JSON cannot encode are written as strings."""
        log_data = json.loads(JSONFormatter().format(make_record(extra_data={"path": Path("capture.log")})))

        assert log_data["context"] == {"path": "capture.log"}

    @pytest.mark.unit
    def test_exception(self) -> None:
        """Test exception tracebacks are included."""
        record = make_record()
        try:
            raise ValueError("bad line")
        except ValueError:
            record.exc_info = sys.exc_info()

        log_data = json.loads(JSONFormatter().format(record))

        assert "ValueError: bad line" in log_data["exception"]


class TestFsdLogger:
    """Tests for FsdLogger."""

    @pytest.mark.unit
    def test_human_stdout(self, logger_name: str, capsys: pytest.CaptureFixture[str]) -> None:
        """Test human output to stdout with context."""
        logger = FsdLogger(logger_name, log_format="human", human_output="stdout")

        logger.info("Decoded %d lines", 3, extra={"failed": 0})

        out = capsys.readouterr().out
        assert "INFO" in out
        assert "Decoded 3 lines | failed=0" in out

    @pytest.mark.unit
    def test_handlers_configured_once(self, logger_name: str) -> None:
        """Test a second wrapper for the same name adds no handlers."""
        first = FsdLogger(logger_name, log_format="human", human_output="stderr")
        second = FsdLogger(logger_name, log_format="human", human_output="stderr")

        assert len(first.handlers) == 1
        assert second.handlers is first.handlers

    @pytest.mark.unit
    def test_json_file(self, logger_name: str, tmp_path: Path) -> None:
        """Test JSON records are appended to the configured file."""
        json_file = tmp_path / "logs" / "fsd.jsonl"
        logger = FsdLogger(logger_name, log_format="json", json_file=json_file)

        with correlation_context(CORRELATION_ID):
            logger.warning("Rejected over-long line", extra={"length": 5000})
        for handler in logger.handlers:
            handler.flush()

        log_data = json.loads(json_file.read_text(encoding="utf-8").strip())
        assert log_data["level"] == "WARNING"
        assert log_data["context"] == {"length": 5000}
        assert log_data["correlation_id"] == CORRELATION_ID

    @pytest.mark.unit
    def test_json_without_file_has_no_handlers(self, logger_name: str) -> None:
        """Test JSON output is skipped when no file is configured."""
        logger = FsdLogger(logger_name, log_format="json")

        assert logger.handlers == []

    @pytest.mark.unit
    def test_both_formats(self, logger_name: str, tmp_path: Path) -> None:
        """Test "both" configures a JSON and a human handler."""
        logger = FsdLogger(logger_name, log_format="both", json_file=tmp_path / "fsd.jsonl", human_output="stdout")

        formatters = {type(handler.formatter) for handler in logger.handlers}
        assert formatters == {JSONFormatter, HumanReadableFormatter}

    @pytest.mark.unit
    def test_human_file(self, logger_name: str, tmp_path: Path) -> None:
        """Test human output to a file path."""
        human_file = tmp_path / "fsd.log"
        logger = FsdLogger(logger_name, log_format="human", human_output=str(human_file))

        logger.error("Cannot read capture %s", "missing.log")
        for handler in logger.handlers:
            handler.flush()

        assert "ERROR" in human_file.read_text(encoding="utf-8")
        assert "Cannot read capture missing.log" in human_file.read_text(encoding="utf-8")

    @pytest.mark.unit
    def test_set_level(self, logger_name: str) -> None:
        """Test set_level applies to the logger and its handlers."""
        logger = FsdLogger(logger_name, log_format="human", human_output="stderr")

        logger.set_level(logging.WARNING)

        assert logger.logger.level == logging.WARNING
        assert all(handler.level == logging.WARNING for handler in logger.handlers)

    @pytest.mark.unit
    def test_exception_includes_traceback(self, logger_name: str, caplog: pytest.LogCaptureFixture) -> None:
        """Test exception() records the active exception."""
        logger = FsdLogger(logger_name, log_format="json")

        try:
            raise KeyError("kind")
        except KeyError:
            logger.exception("Unexpected failure", extra={"line": 7})

        (record,) = caplog.records
        assert record.exc_info is not None
        assert record.extra_data == {"line": 7}  # type: ignore[attr-defined]

    @pytest.mark.unit
    def test_get_logger(self, logger_name: str) -> None:
        """Test get_logger returns a configured wrapper."""
        logger = get_logger(logger_name, log_format="human", human_output="stdout")

        assert isinstance(logger, FsdLogger)
        assert logger.name == logger_name
        assert logger.log_format == "human"
