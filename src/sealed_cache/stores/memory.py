"""InMemoryStore — zero-config, dict-backed storage for development and testing."""

from __future__ import annotations

import copy
from collections import defaultdict
from typing import Any

from sealed_cache.exceptions import StorageUnavailableError
from sealed_cache.stores.base import Store


class InMemoryStore(Store):
    """In-memory store using nested dicts.  Data is lost on process exit.

    Parameters:
        available: When ``False`` every operation raises
                   :class:`StorageUnavailableError`, mimicking a host
                   where durable storage is disabled.
    """

    def __init__(self, *, available: bool = True) -> None:
        self._data: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self.available = available

    def _check(self) -> None:
        if not self.available:
            raise StorageUnavailableError("in-memory store disabled")

    async def get(self, partition: str, key: str) -> dict[str, Any] | None:
        self._check()
        value = self._data.get(partition, {}).get(key)
        return copy.deepcopy(value) if value is not None else None

    async def put(self, partition: str, key: str, value: dict[str, Any]) -> None:
        self._check()
        self._data[partition][key] = copy.deepcopy(value)

    async def delete(self, partition: str, key: str) -> None:
        self._check()
        self._data.get(partition, {}).pop(key, None)

    async def clear(self, partition: str) -> None:
        self._check()
        self._data.pop(partition, None)

    async def list_all(self, partition: str) -> list[tuple[str, dict[str, Any]]]:
        self._check()
        return [(k, copy.deepcopy(v)) for k, v in self._data.get(partition, {}).items()]

    async def list_partitions(self) -> list[str]:
        self._check()
        return [name for name, entries in self._data.items() if entries]
