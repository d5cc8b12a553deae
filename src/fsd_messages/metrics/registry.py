"""Prometheus metrics registry for FSD line decoding and encoding."""

import threading
from typing import Final

from prometheus_client import (  # type: ignore[import-untyped]
    Counter,
    Histogram,
    start_http_server,
)

# Metric definitions
fsd_messages_decoded_total: Final = Counter(  # type: ignore[assignment]
    "fsd_messages_decoded_total",
    "Total lines decoded into a message record",
    ["kind"],
)

fsd_messages_encoded_total: Final = Counter(  # type: ignore[assignment]
    "fsd_messages_encoded_total",
    "Total message records encoded into a line",
    ["kind"],
)

fsd_decode_errors_total: Final = Counter(  # type: ignore[assignment]
    "fsd_decode_errors_total",
    "Total lines rejected by the decoder",
    ["reason"],
)

fsd_encode_errors_total: Final = Counter(  # type: ignore[assignment]
    "fsd_encode_errors_total",
    "Total message records that could not be encoded",
    ["kind", "reason"],
)

fsd_decode_latency_seconds: Final = Histogram(  # type: ignore[assignment]
    "fsd_decode_latency_seconds",
    "Time spent decoding a single line in seconds",
    buckets=(0.00001, 0.000025, 0.00005, 0.0001, 0.00025, 0.0005, 0.001, 0.005, 0.01),
)

_server_state = {"started": False}
_server_lock = threading.Lock()


def start_metrics_server(port: int = 9400) -> None:
    """Start Prometheus HTTP metrics server (idempotent)."""
    with _server_lock:
        if not _server_state["started"]:
            start_http_server(port)  # type: ignore[no-untyped-call]
            _server_state["started"] = True


def record_message_decoded(kind: str) -> None:
    """Record a successfully decoded line."""
    fsd_messages_decoded_total.labels(kind=kind).inc()  # type: ignore[no-untyped-call]


def record_message_encoded(kind: str) -> None:
    """Record a successfully encoded record."""
    fsd_messages_encoded_total.labels(kind=kind).inc()  # type: ignore[no-untyped-call]


def record_decode_error(reason: str) -> None:
    """Record a decode error."""
    fsd_decode_errors_total.labels(reason=reason).inc()  # type: ignore[no-untyped-call]


def record_encode_error(kind: str, reason: str) -> None:
    """Record an encode error."""
    fsd_encode_errors_total.labels(kind=kind, reason=reason).inc()  # type: ignore[no-untyped-call]


def record_decode_latency(latency_seconds: float) -> None:
    """Record time spent decoding one line."""
    fsd_decode_latency_seconds.observe(latency_seconds)  # type: ignore[no-untyped-call]
