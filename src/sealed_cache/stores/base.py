"""Store protocol — partitioned key-value persistence for cache entries."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Store(ABC):
    """Abstract base for all storage backends.

    Entries live in named *partitions* (e.g. ``"conversations"``).  The
    store is agnostic to what is being stored — it just persists
    ``dict[str, Any]`` records keyed by ``(partition, key)``.  Partitions
    come into existence on first ``put``.

    Implementations raise :class:`~sealed_cache.exceptions.StorageUnavailableError`
    when the medium cannot be used at all and
    :class:`~sealed_cache.exceptions.StorageError` when a single operation fails.
    """

    @abstractmethod
    async def get(self, partition: str, key: str) -> dict[str, Any] | None:
        """Return the stored record, or ``None`` if not found."""
        ...

    @abstractmethod
    async def put(self, partition: str, key: str, value: dict[str, Any]) -> None:
        """Create or wholesale-replace a record."""
        ...

    @abstractmethod
    async def delete(self, partition: str, key: str) -> None:
        """Delete a record.  No-op if the key does not exist."""
        ...

    @abstractmethod
    async def clear(self, partition: str) -> None:
        """Delete every record within a partition."""
        ...

    @abstractmethod
    async def list_all(self, partition: str) -> list[tuple[str, dict[str, Any]]]:
        """Return every ``(key, record)`` pair in a partition.

        Meant for maintenance sweeps, not hot-path reads.
        """
        ...

    @abstractmethod
    async def list_partitions(self) -> list[str]:
        """Return the names of all partitions that currently hold records."""
        ...

    async def close(self) -> None:
        """Release any open handle.  The default implementation does nothing."""
