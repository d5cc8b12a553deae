import os

__all__ = [
    "FSD_DEBUG",
    "FSD_LOG_FORMAT",
    "FSD_LOG_HUMAN_OUTPUT",
    "FSD_LOG_JSON_FILE",
    "FSD_LOG_NAME",
    "FSD_MAX_LINE_LENGTH",
    "FSD_METRICS_PORT",
    "LOG_FORMATS",
    "YES_ANSWER",
]

YES_ANSWER = ("true", "1", "yes", "y", "t", "on")
LOG_FORMATS = ("human", "json", "both")
FSD_LOG_NAME: str = "fsd_messages"

FSD_DEBUG: bool = os.environ.get("FSD_DEBUG", "0").casefold() in YES_ANSWER

# Logging Configuration
_log_format = os.environ.get("FSD_LOG_FORMAT", "human").casefold()
FSD_LOG_FORMAT: str = _log_format if _log_format in LOG_FORMATS else "human"
_log_json_file = os.environ.get("FSD_LOG_JSON_FILE")
FSD_LOG_JSON_FILE: str | None = _log_json_file if _log_json_file else None
FSD_LOG_HUMAN_OUTPUT: str = os.environ.get("FSD_LOG_HUMAN_OUTPUT", "stderr") or "stderr"  # "stdout", "stderr", or file path

# Replay harness
_metrics_port = os.environ.get("FSD_METRICS_PORT", "9400")
if not _metrics_port:
    _metrics_port_value: int = 9400
else:
    try:
        _metrics_port_value = int(_metrics_port)
    except ValueError:
        _metrics_port_value = 9400
FSD_METRICS_PORT: int = _metrics_port_value

# Codec facade
_max_line_length = os.environ.get("FSD_MAX_LINE_LENGTH", "4096")
FSD_MAX_LINE_LENGTH: int = (
    int(_max_line_length) if _max_line_length and _max_line_length.isdigit() and int(_max_line_length) > 0 else 4096
)
