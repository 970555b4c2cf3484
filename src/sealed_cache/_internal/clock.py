"""Clock abstraction so expiry decisions can be tested without sleeping."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol


class Clock(Protocol):
    """Anything with a timezone-aware ``now()``.  Inject a fake in tests."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


def epoch_seconds(clock: Clock) -> float:
    """POSIX timestamp of ``clock.now()``; the unit stored in cache entries."""
    return clock.now().timestamp()
