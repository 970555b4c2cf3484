"""ConversationLoader — cache-first access to the authoritative backend."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, TypeVar

from pydantic import TypeAdapter, ValidationError

from sealed_cache.exceptions import CacheError
from sealed_cache.keys import conversations_key, messages_key
from sealed_cache.models import Conversation, Message

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from sealed_cache.manager import CacheManager

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CONVERSATIONS = TypeAdapter(list[Conversation])
_MESSAGES = TypeAdapter(list[Message])


class Backend(Protocol):
    """What the loader needs from the authoritative source."""

    async def fetch_conversations(self, owner_id: str) -> list[Conversation]: ...

    async def fetch_messages(self, owner_id: str, conversation_id: str) -> list[Message]: ...


class ConversationLoader:
    """Serves conversations and messages from the cache, falling back to the backend.

    A miss (absent, expired, undecryptable, or no longer matching the
    model) fetches from the backend and refills the cache.  A failed
    refill is logged and the fetched data is still returned; backend
    errors propagate since there is nothing else to serve.

    Parameters:
        manager:     Cache to read from and refill.
        backend:     Authoritative source, e.g. :class:`HttpBackend`.
        ttl_seconds: TTL for refilled entries.  ``None`` uses the
                     manager's default.
    """

    def __init__(
        self,
        manager: CacheManager,
        backend: Backend,
        ttl_seconds: float | None = None,
    ) -> None:
        self._manager = manager
        self._backend = backend
        self._ttl = ttl_seconds

    async def conversations(self, owner_id: str, *, refresh: bool = False) -> list[Conversation]:
        return await self._load(
            conversations_key(owner_id),
            owner_id,
            _CONVERSATIONS,
            lambda: self._backend.fetch_conversations(owner_id),
            refresh,
        )

    async def messages(
        self, owner_id: str, conversation_id: str, *, refresh: bool = False
    ) -> list[Message]:
        return await self._load(
            messages_key(owner_id, conversation_id),
            owner_id,
            _MESSAGES,
            lambda: self._backend.fetch_messages(owner_id, conversation_id),
            refresh,
        )

    async def _load(
        self,
        key: str,
        owner_id: str,
        adapter: TypeAdapter[T],
        fetch: Callable[[], Awaitable[T]],
        refresh: bool,
    ) -> T:
        if not refresh:
            cached = await self._manager.read(key, owner_id)
            if cached is not None:
                try:
                    return adapter.validate_python(cached)
                except ValidationError:
                    logger.warning("Cached value for %s no longer matches its model", key)

        fresh = await fetch()
        try:
            await self._manager.write(key, adapter.dump_python(fresh, mode="json"), owner_id, self._ttl)
        except CacheError as exc:
            logger.warning("Could not refill cache for %s: %s", key, exc)
        return fresh
