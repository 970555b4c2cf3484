"""Settings and factories for building a ready-to-use cache."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, Field, ValidationError

from sealed_cache.backend import HttpBackend
from sealed_cache.exceptions import ConfigError
from sealed_cache.loader import ConversationLoader
from sealed_cache.manager import DEFAULT_TTL_SECONDS, CacheManager
from sealed_cache.stores.memory import InMemoryStore
from sealed_cache.stores.sqlite import SQLiteStore

if TYPE_CHECKING:
    from sealed_cache._internal.clock import Clock
    from sealed_cache.stores.base import Store
    from sealed_cache.sync import UpdateChannel


class StoreConfigSchema(BaseModel):
    """Store configuration.

    Attributes:
        type: Store type ("memory" or "sqlite")
        path: Path to SQLite database file (for sqlite type)
    """

    type: Literal["memory", "sqlite"] = "memory"
    path: str = ""


class CacheSettings(BaseModel):
    """Everything needed to assemble a :class:`CacheManager`.

    Attributes:
        store: Where entries are persisted
        default_ttl_seconds: Lifetime of entries written without a TTL
        backend_url: Base URL of the authoritative API
        backend_token: Bearer token for the authoritative API
    """

    store: StoreConfigSchema = Field(default_factory=StoreConfigSchema)
    default_ttl_seconds: float = Field(default=DEFAULT_TTL_SECONDS, ge=0)
    backend_url: str | None = None
    backend_token: str | None = None

    @classmethod
    def from_env(cls) -> CacheSettings:
        """Load settings from ``SEALED_CACHE_*`` environment variables.

        Raises:
            ConfigError: A variable holds an invalid value.
        """
        data: dict[str, object] = {
            "store": {
                "type": os.getenv("SEALED_CACHE_STORE", "memory"),
                "path": os.getenv("SEALED_CACHE_DB_PATH", ""),
            },
            "backend_url": os.getenv("SEALED_CACHE_BACKEND_URL") or None,
            "backend_token": os.getenv("SEALED_CACHE_BACKEND_TOKEN") or None,
        }
        ttl = os.getenv("SEALED_CACHE_TTL_SECONDS")
        if ttl:
            data["default_ttl_seconds"] = ttl
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid cache settings: {e}") from e


def create_store(config: StoreConfigSchema) -> Store:
    """Create store from configuration.

    Raises:
        ConfigError: sqlite store without a path.
    """
    if config.type == "sqlite":
        if not config.path:
            raise ConfigError("SQLite store requires 'path' configuration")
        return SQLiteStore(config.path)
    return InMemoryStore()


def build_manager(
    settings: CacheSettings,
    *,
    clock: Clock | None = None,
    channel: UpdateChannel | None = None,
) -> CacheManager:
    return CacheManager(
        create_store(settings.store),
        clock=clock,
        default_ttl_seconds=settings.default_ttl_seconds,
        channel=channel,
    )


def build_backend(settings: CacheSettings) -> HttpBackend:
    """Create the HTTP client for the authoritative API from *settings*.

    Unset fields fall back to the ``SEALED_CACHE_BACKEND_*`` environment
    variables, as :class:`HttpBackend` does on its own.
    """
    return HttpBackend(base_url=settings.backend_url, api_token=settings.backend_token)


def build_loader(
    settings: CacheSettings,
    *,
    clock: Clock | None = None,
    channel: UpdateChannel | None = None,
) -> ConversationLoader:
    """Wire a manager and the HTTP backend into a read-through loader."""
    return ConversationLoader(
        build_manager(settings, clock=clock, channel=channel),
        build_backend(settings),
    )
