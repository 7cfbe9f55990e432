"""Pytest fixtures for URL signer tests."""

import pytest

from url_signer.signer import UrlSigner

# 2024-01-01T00:00:00Z
FROZEN_NOW = 1704067200


class FrozenClock:
    """Clock returning a fixed time that tests can move forward."""

    def __init__(self, now: float = FROZEN_NOW):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FrozenClock:
    """A clock frozen at FROZEN_NOW."""
    return FrozenClock()


@pytest.fixture
def now(clock: FrozenClock) -> int:
    """The frozen current time as an integer timestamp."""
    return int(clock.now)


@pytest.fixture
def signer(clock: FrozenClock) -> UrlSigner:
    """Signer with key 'secret' and default parameter names."""
    return UrlSigner("secret", clock=clock)
