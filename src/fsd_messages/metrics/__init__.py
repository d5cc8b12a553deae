"""Metrics module."""

from .registry import (
    record_decode_error,
    record_decode_latency,
    record_encode_error,
    record_message_decoded,
    record_message_encoded,
    start_metrics_server,
)

__all__ = [
    "record_decode_error",
    "record_decode_latency",
    "record_encode_error",
    "record_message_decoded",
    "record_message_encoded",
    "start_metrics_server",
]
