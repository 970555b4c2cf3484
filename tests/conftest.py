"""Shared test fixtures."""

from datetime import UTC, datetime

import pytest

from sealed_cache import CacheManager
from sealed_cache.stores import InMemoryStore


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self._now = start

    def now(self) -> datetime:
        return datetime.fromtimestamp(self._now, tz=UTC)

    def advance(self, seconds: float) -> None:
        self._now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def cache(store, clock):
    return CacheManager(store=store, clock=clock)


@pytest.fixture
def inbox():
    return [
        {"id": "c1", "title": "Track day", "participantIds": ["u1", "u2"]},
        {"id": "c2", "title": "Parts order", "participantIds": ["u1", "u3"]},
    ]
