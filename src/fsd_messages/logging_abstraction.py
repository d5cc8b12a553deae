"""Logging abstraction layer for fsd-messages.

Human-readable and JSON log output with correlation IDs and structured
context. The protocol package itself only uses plain module loggers; this
layer is for the codec facade and the replay harness, which decide where
records end up.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import cast, override

from fsd_messages.correlation import get_correlation_id

__all__ = [
    "FsdLogger",
    "HumanReadableFormatter",
    "JSONFormatter",
    "get_logger",
]

_NO_CORRELATION = "[--------]"


def _context_of(record: logging.LogRecord) -> Mapping[str, object] | None:
    extra_data = getattr(record, "extra_data", None)
    if isinstance(extra_data, Mapping) and extra_data:
        return cast("Mapping[str, object]", extra_data)
    return None


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for log shipping."""

    @override
    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
            "correlation_id": get_correlation_id(),
        }

        context = _context_of(record)
        if context is not None:
            log_data["context"] = dict(context)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class HumanReadableFormatter(logging.Formatter):
    """Single-line text records: ``time level [module:line] [corr-id] > message | k=v``."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s [%(module)s:%(lineno)d] %(correlation_id)s > %(message)s",
            datefmt="%m/%d/%y %H:%M:%S",
        )

    @override
    def format(self, record: logging.LogRecord) -> str:
        correlation_id = get_correlation_id()
        record.correlation_id = f"[{correlation_id[:8]}]" if correlation_id else _NO_CORRELATION

        formatted = super().format(record)

        context = _context_of(record)
        if context is not None:
            formatted += " | " + " | ".join(f"{key}={value}" for key, value in context.items())

        return formatted


def _human_handler(human_output: str) -> logging.Handler:
    if human_output == "stdout":
        return logging.StreamHandler(sys.stdout)
    if human_output == "stderr":
        return logging.StreamHandler(sys.stderr)
    try:
        human_path = Path(human_output)
        human_path.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(human_path, mode="a")
    except OSError as e:
        print(f"Warning: Failed to open human log file {human_output}: {e}", file=sys.stderr)
        return logging.StreamHandler(sys.stderr)


def _json_handler(json_file: str | Path) -> logging.Handler | None:
    try:
        json_path = Path(json_file)
        json_path.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(json_path, mode="a")
    except OSError as e:
        print(f"Warning: Failed to open JSON log file {json_file}: {e}", file=sys.stderr)
        return None


class FsdLogger:
    """Structured logger wrapper.

    Keyword context passed as ``extra`` is kept apart from the standard
    record attributes (under ``extra_data``) so both formatters can render
    it without clashing with names such as ``message`` or ``module``.
    """

    def __init__(
        self,
        name: str,
        log_format: str = "human",
        json_file: str | Path | None = None,
        human_output: str = "stderr",
    ) -> None:
        """Initialize FsdLogger.

        Args:
            name: Logger name (typically module name)
            log_format: "json", "human", or "both"
            json_file: JSON output file; JSON output is skipped without one
            human_output: "stdout", "stderr", or a file path

        """
        from fsd_messages.const import FSD_DEBUG

        self.name: str = name
        self.log_format: str = log_format
        self.logger: logging.Logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG if FSD_DEBUG else logging.INFO)

        # Loggers are process-wide; configure each name only once
        if not self.logger.handlers:
            self._configure_handlers(json_file, human_output)

    def _configure_handlers(self, json_file: str | Path | None, human_output: str) -> None:
        handlers: list[tuple[logging.Handler, logging.Formatter]] = []
        if self.log_format in ("json", "both") and json_file:
            json_handler = _json_handler(json_file)
            if json_handler is not None:
                handlers.append((json_handler, JSONFormatter()))
        if self.log_format in ("human", "both"):
            handlers.append((_human_handler(human_output), HumanReadableFormatter()))

        for handler, formatter in handlers:
            handler.setFormatter(formatter)
            handler.setLevel(self.logger.level)
            self.logger.addHandler(handler)

    def _log(self, level: int, msg: str, *args: object, extra: Mapping[str, object] | None = None) -> None:
        self.logger.log(level, msg, *args, extra={"extra_data": dict(extra)} if extra else None)

    def debug(self, msg: str, *args: object, extra: Mapping[str, object] | None = None) -> None:
        self._log(logging.DEBUG, msg, *args, extra=extra)

    def info(self, msg: str, *args: object, extra: Mapping[str, object] | None = None) -> None:
        self._log(logging.INFO, msg, *args, extra=extra)

    def warning(self, msg: str, *args: object, extra: Mapping[str, object] | None = None) -> None:
        self._log(logging.WARNING, msg, *args, extra=extra)

    def error(self, msg: str, *args: object, extra: Mapping[str, object] | None = None) -> None:
        self._log(logging.ERROR, msg, *args, extra=extra)

    def exception(self, msg: str, *args: object, extra: Mapping[str, object] | None = None) -> None:
        """Log at ERROR with the active exception's traceback."""
        self.logger.exception(msg, *args, extra={"extra_data": dict(extra)} if extra else None)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)
        for handler in self.logger.handlers:
            handler.setLevel(level)

    @property
    def handlers(self) -> list[logging.Handler]:
        return self.logger.handlers


def get_logger(
    name: str,
    log_format: str | None = None,
    json_file: str | Path | None = None,
    human_output: str | None = None,
) -> FsdLogger:
    """Get an FsdLogger, filling unset options from ``fsd_messages.const``.

    Args:
        name: Logger name
        log_format: Override FSD_LOG_FORMAT
        json_file: Override FSD_LOG_JSON_FILE
        human_output: Override FSD_LOG_HUMAN_OUTPUT

    Returns:
        FsdLogger instance

    """
    from fsd_messages.const import FSD_LOG_FORMAT, FSD_LOG_HUMAN_OUTPUT, FSD_LOG_JSON_FILE

    return FsdLogger(
        name=name,
        log_format=log_format or FSD_LOG_FORMAT,
        json_file=json_file or FSD_LOG_JSON_FILE,
        human_output=human_output or FSD_LOG_HUMAN_OUTPUT,
    )
