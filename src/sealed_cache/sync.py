"""Update channel — broadcast cache changes and apply them last-writer-wins."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

logger = logging.getLogger(__name__)

UpdateKind = Literal["write", "invalidate"]


@dataclass(frozen=True)
class CacheUpdate:
    """A change to one cache key, stamped with the time it happened."""

    key: str
    timestamp: float
    kind: UpdateKind = "write"


Subscriber = Callable[[CacheUpdate], None]


class UpdateChannel:
    """In-process publish/subscribe channel for :class:`CacheUpdate` events.

    Subscribers are called synchronously, in subscription order.  One
    failing subscriber is logged and skipped; the rest still receive the
    update.
    """

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register *callback*; return a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, update: CacheUpdate) -> None:
        for callback in list(self._subscribers):
            try:
                callback(update)
            except Exception:
                logger.exception("Cache update subscriber failed for key %s", update.key)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)


class LastWriterWins:
    """Tracks the newest applied timestamp per key.

    ``accept`` returns ``True`` only for updates strictly newer than the
    last accepted one for the same key, so late or replayed updates are
    ignored instead of clobbering fresher state.
    """

    def __init__(self) -> None:
        self._applied: dict[str, float] = {}

    def accept(self, update: CacheUpdate) -> bool:
        last = self._applied.get(update.key)
        if last is not None and update.timestamp <= last:
            return False
        self._applied[update.key] = update.timestamp
        return True

    def last_applied(self, key: str) -> float | None:
        return self._applied.get(key)

    def forget(self, key: str) -> None:
        self._applied.pop(key, None)
