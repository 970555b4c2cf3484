"""AsyncOnce — run an async initializer at most once, even under concurrent first use."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class AsyncOnce(Generic[T]):
    """Memoizes the *in-flight* initialization task, not just its result.

    Every caller that arrives while the first initialization is still
    running awaits the same task, so the initializer never runs twice.
    A failed initialization is forgotten; the next ``get`` retries.
    """

    def __init__(self, initializer: Callable[[], Awaitable[T]]) -> None:
        self._initializer = initializer
        self._task: asyncio.Task[T] | None = None

    async def get(self) -> T:
        if self._task is None:
            self._task = asyncio.ensure_future(self._initializer())
        task = self._task
        try:
            return await asyncio.shield(task)
        except Exception:
            if self._task is task and task.done():
                self._task = None
            raise

    @property
    def started(self) -> bool:
        return self._task is not None

    @property
    def initialized(self) -> bool:
        task = self._task
        if task is None or not task.done() or task.cancelled():
            return False
        return task.exception() is None

    def reset(self) -> None:
        """Forget the current value so the next ``get`` initializes again."""
        self._task = None
