"""CacheManager — the encrypted cache's public surface."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sealed_cache._internal.clock import Clock, SystemClock, epoch_seconds
from sealed_cache.crypto.cipher import AuthenticatedCipher
from sealed_cache.entry import CacheEntry
from sealed_cache.exceptions import (
    CacheError,
    CryptoUnsupportedError,
    StorageUnavailableError,
)
from sealed_cache.keys import (
    PARTITIONS,
    matches_prefix,
    messages_key,
    owner_prefix,
    partition_for,
    resolve_partition,
)
from sealed_cache.stores.memory import InMemoryStore
from sealed_cache.sync import CacheUpdate, UpdateKind

if TYPE_CHECKING:
    from sealed_cache.stores.base import Store
    from sealed_cache.sync import UpdateChannel

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 7 * 24 * 60 * 60


class CacheManager:
    """Reads and writes owner-encrypted values in a partitioned store.

    The cache is advisory.  ``read`` and ``sweep_expired`` never raise;
    ``write`` reports a disabled cache by returning ``False`` and raises
    only for failures of the specific operation.

    Parameters:
        store:               Persistence backend.  Defaults to
                             :class:`InMemoryStore` when omitted.
        cipher:              Sealing implementation.  Defaults to
                             :class:`AuthenticatedCipher`.
        clock:               Injectable clock for testing.
        default_ttl_seconds: Lifetime of entries written without an
                             explicit TTL (7 days).
        channel:             Optional :class:`UpdateChannel` that receives
                             a :class:`CacheUpdate` for every write and
                             invalidation.
    """

    def __init__(
        self,
        store: Store | None = None,
        *,
        cipher: AuthenticatedCipher | None = None,
        clock: Clock | None = None,
        default_ttl_seconds: float = DEFAULT_TTL_SECONDS,
        channel: UpdateChannel | None = None,
    ) -> None:
        if default_ttl_seconds < 0:
            raise ValueError("default_ttl_seconds must not be negative")
        self._store: Store = store or InMemoryStore()
        self._cipher = cipher or AuthenticatedCipher()
        self._clock = clock or SystemClock()
        self._default_ttl = default_ttl_seconds
        self._channel = channel

    @property
    def store(self) -> Store:
        return self._store

    @property
    def channel(self) -> UpdateChannel | None:
        return self._channel

    def enabled(self) -> bool:
        """``False`` when the host cannot run the cipher; every read then misses."""
        try:
            return self._cipher.supported()
        except Exception:
            logger.exception("Cipher support check failed, disabling cache")
            return False

    def _now(self) -> float:
        return epoch_seconds(self._clock)

    def _publish(self, key: str, timestamp: float, kind: UpdateKind) -> None:
        if self._channel is not None:
            self._channel.publish(CacheUpdate(key=key, timestamp=timestamp, kind=kind))

    # ── read path ────────────────────────────────────────────

    async def read(self, key: str, owner_id: str) -> Any | None:
        """Return the cached value for *key*, or ``None`` on any kind of miss.

        Expired and corrupt entries are deleted as a side effect.  Storage,
        crypto and decoding errors are logged and reported as a miss.
        """
        if not self.enabled():
            logger.warning("Encryption not supported, skipping cache")
            return None

        partition = resolve_partition(key)
        try:
            record = await self._store.get(partition, key)
            if record is None:
                return None

            try:
                entry = CacheEntry.from_dict(record)
            except ValueError as exc:
                logger.warning("Dropping malformed cache entry %s: %s", key, exc)
                await self._store.delete(partition, key)
                return None

            if entry.is_expired(self._now()):
                logger.debug("Cache entry %s expired; purging", key)
                await self._store.delete(partition, key)
                return None

            return await self._cipher.decrypt(entry.encrypted, owner_id)
        except CryptoUnsupportedError:
            logger.warning("Encryption not supported, skipping cache")
            return None
        except StorageUnavailableError as exc:
            logger.warning("Cache storage unavailable: %s", exc)
            return None
        except CacheError as exc:
            logger.warning("Failed to read cache entry %s: %s", key, exc)
            return None
        except Exception:
            logger.exception("Unexpected error reading cache entry %s", key)
            return None

    # ── write path ───────────────────────────────────────────

    async def write(
        self,
        key: str,
        value: Any,
        owner_id: str,
        ttl_seconds: float | None = None,
    ) -> bool:
        """Seal *value* for *owner_id* and store it under *key*.

        Returns:
            ``True`` when the entry was stored, ``False`` when the cache is
            disabled on this host (no crypto support or no storage).

        Raises:
            ValueError: Negative ``ttl_seconds``.
            EncryptionFailedError: *value* could not be serialized or sealed.
            StorageError: The store rejected the write.
        """
        ttl = self._default_ttl if ttl_seconds is None else ttl_seconds
        if ttl < 0:
            raise ValueError("ttl_seconds must not be negative")
        if not self.enabled():
            logger.warning("Encryption not supported, skipping cache")
            return False

        try:
            encrypted = await self._cipher.encrypt(value, owner_id)
            now = self._now()
            entry = CacheEntry(encrypted=encrypted, expires_at=now + ttl, written_at=now)
            await self._store.put(resolve_partition(key), key, entry.to_dict())
        except CryptoUnsupportedError:
            logger.warning("Encryption not supported, skipping cache")
            return False
        except StorageUnavailableError as exc:
            logger.warning("Cache storage unavailable, skipping cache: %s", exc)
            return False
        except CacheError as exc:
            logger.error("Failed to set encrypted cache %s: %s", key, exc)
            raise

        self._publish(key, entry.written_at, "write")
        return True

    # ── invalidation ─────────────────────────────────────────

    async def invalidate(self, key: str) -> None:
        """Delete *key*.  Deleting an absent key is not an error.

        Raises:
            StorageError: The store rejected the delete.
        """
        try:
            await self._store.delete(resolve_partition(key), key)
        except StorageUnavailableError as exc:
            logger.warning("Cache storage unavailable, nothing to invalidate: %s", exc)
            return
        except CacheError as exc:
            logger.error("Failed to delete encrypted cache %s: %s", key, exc)
            raise
        self._publish(key, self._now(), "invalidate")

    async def invalidate_prefix(self, owner_id: str, namespace: str) -> int:
        """Delete every entry *owner_id* has under *namespace*.

        Returns the number of entries removed.

        Raises:
            StorageError: Listing or deleting failed.
        """
        prefix = owner_prefix(namespace, owner_id)
        partition = partition_for(namespace)
        removed = 0
        try:
            for key, _ in await self._store.list_all(partition):
                if matches_prefix(key, prefix):
                    await self._store.delete(partition, key)
                    removed += 1
                    self._publish(key, self._now(), "invalidate")
        except StorageUnavailableError as exc:
            logger.warning("Cache storage unavailable, nothing to invalidate: %s", exc)
            return removed
        except CacheError as exc:
            logger.error("Failed to clear %s cache: %s", namespace, exc)
            raise
        logger.debug("Invalidated %d %s entries", removed, namespace)
        return removed

    async def invalidate_conversation_messages(self, owner_id: str, conversation_id: str) -> None:
        """Drop the cached messages of a single conversation."""
        await self.invalidate(messages_key(owner_id, conversation_id))

    async def clear(self, namespace: str) -> None:
        """Empty the partition that holds *namespace*, for every owner.

        Raises:
            StorageError: The store rejected the clear.
        """
        try:
            await self._store.clear(partition_for(namespace))
        except StorageUnavailableError as exc:
            logger.warning("Cache storage unavailable, nothing to clear: %s", exc)

    # ── maintenance ──────────────────────────────────────────

    async def sweep_expired(self) -> int:
        """Delete every expired or malformed entry in every partition.

        Optional: ``read`` already purges expired entries it touches.
        Returns the number of entries removed.  Errors are logged, never
        raised.
        """
        removed = 0
        now = self._now()
        partitions = set(PARTITIONS.values())
        try:
            partitions.update(await self._store.list_partitions())
        except CacheError as exc:
            logger.error("Failed to list cache partitions: %s", exc)
        for partition in sorted(partitions):
            try:
                for key, record in await self._store.list_all(partition):
                    try:
                        expired = CacheEntry.from_dict(record).is_expired(now)
                    except ValueError:
                        expired = True
                    if expired:
                        await self._store.delete(partition, key)
                        removed += 1
            except CacheError as exc:
                logger.error("Failed to cleanup expired cache in %s: %s", partition, exc)
            except Exception:
                logger.exception("Unexpected error sweeping partition %s", partition)
        if removed:
            logger.debug("Swept %d expired cache entries", removed)
        return removed
