"""Shared pytest fixtures for fsd-messages tests."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from fsd_messages.correlation import set_correlation_id


@pytest.fixture(autouse=True)
def clear_correlation_id() -> Generator[None]:
    """Start every test without a correlation ID.

    Context variables outlive a single test when tests share a thread.
    """
    set_correlation_id(None)
    yield
    set_correlation_id(None)
