"""Shared pytest fixtures for the order tracker test suite."""

from __future__ import annotations

import pytest

from tests.fakes import ViewRecorder


@pytest.fixture()
def recorder() -> ViewRecorder:
    """Collects every ViewState the poller publishes."""
    return ViewRecorder()
