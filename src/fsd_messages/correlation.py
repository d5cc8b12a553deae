"""
Correlation ID tracking for decode batches.

Every line decoded as part of one capture or one client session shares a
correlation ID, so the log records for that batch can be pulled out of a
busy log. IDs live in a contextvar and are therefore safe to use from
threads and asyncio tasks alike.
"""

from __future__ import annotations

import contextvars
import uuid
from collections.abc import Generator
from contextlib import contextmanager

__all__ = [
    "correlation_context",
    "ensure_correlation_id",
    "generate_correlation_id",
    "get_correlation_id",
    "set_correlation_id",
]

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "fsd_correlation_id",
    default=None,
)


def generate_correlation_id() -> str:
    """Return a fresh UUID4 hex string."""
    return uuid.uuid4().hex


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None) -> None:
    _correlation_id.set(correlation_id)


@contextmanager
def correlation_context(correlation_id: str | None = None) -> Generator[str]:
    """
    Scope a correlation ID to a block, restoring the previous one on exit.

    Args:
        correlation_id: ID to use; a new one is generated when None

    Yields:
        The correlation ID active inside the block

    Example:
        with correlation_context("capture-0142") as batch_id:
            for result in decode_lines(lines):
                ...
    """
    active_id = correlation_id or generate_correlation_id()
    token = _correlation_id.set(active_id)
    try:
        yield active_id
    finally:
        _correlation_id.reset(token)


def ensure_correlation_id() -> str:
    """Return the current correlation ID, creating one if none is set."""
    current_id = get_correlation_id()
    if current_id is None:
        current_id = generate_correlation_id()
        set_correlation_id(current_id)
    return current_id
