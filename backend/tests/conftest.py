"""Pytest configuration and fixtures."""

import pytest


class FakeClock:
    """Manually advanced clock for TTL and timestamp tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """A clock that only moves when the test advances it."""
    return FakeClock()
