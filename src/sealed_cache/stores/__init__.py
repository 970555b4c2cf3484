"""Storage backends for encrypted cache entries."""

from sealed_cache.stores.base import Store
from sealed_cache.stores.memory import InMemoryStore
from sealed_cache.stores.sqlite import SQLiteStore

__all__ = ["InMemoryStore", "SQLiteStore", "Store"]
