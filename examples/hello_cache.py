"""
sealed_cache — Hello World

Values are sealed for their owner, stored by namespace, and
forgotten once their TTL passes. A miss is never an error.
"""

import asyncio
import logging
import tempfile
from pathlib import Path

from sealed_cache import (
    CacheManager,
    CacheUpdate,
    LastWriterWins,
    UpdateChannel,
    conversations_key,
    messages_key,
)
from sealed_cache.stores import SQLiteStore

# ─── Data you would normally get from the backend ───

INBOX = [
    {"id": "c1", "title": "Track day", "participantIds": ["alice", "bob"]},
    {"id": "c2", "title": "Parts order", "participantIds": ["alice", "carol"]},
]

THREAD = [
    {"id": "m1", "senderId": "bob", "body": "Pit lane at 9?"},
    {"id": "m2", "senderId": "alice", "body": "See you there"},
]


async def main():
    logging.basicConfig(level=logging.WARNING)

    with tempfile.TemporaryDirectory() as tmp:
        # ──────────────────────────────────────
        #  1. Create the manager over a durable store
        # ──────────────────────────────────────
        store = SQLiteStore(str(Path(tmp) / "cache.db"))
        channel = UpdateChannel()
        lww = LastWriterWins()

        def on_update(update: CacheUpdate) -> None:
            if lww.accept(update):
                print(f"  [update] {update.kind:<10} {update.key}")

        channel.subscribe(on_update)
        cache = CacheManager(store, channel=channel)

        # ──────────────────────────────────────
        #  2. Write and read back
        # ──────────────────────────────────────
        print("=== Write / read ===\n")

        await cache.write(conversations_key("alice"), INBOX, "alice")
        await cache.write(messages_key("alice", "c1"), THREAD, "alice")

        inbox = await cache.read(conversations_key("alice"), "alice")
        print(f"  Inbox titles: {[c['title'] for c in inbox]}")

        # ──────────────────────────────────────
        #  3. Wrong owner — just a miss
        # ──────────────────────────────────────
        print("\n=== Wrong owner ===\n")

        print(f"  Mallory reads: {await cache.read(conversations_key('alice'), 'mallory')}")

        # ──────────────────────────────────────
        #  4. Short TTL
        # ──────────────────────────────────────
        print("\n=== Expiry ===\n")

        await cache.write(messages_key("alice", "c2"), THREAD, "alice", ttl_seconds=0.5)
        print(f"  Immediately: {await cache.read(messages_key('alice', 'c2'), 'alice') is not None}")
        await asyncio.sleep(0.6)
        print(f"  After 600ms: {await cache.read(messages_key('alice', 'c2'), 'alice') is not None}")

        # ──────────────────────────────────────
        #  5. Sign-out: drop everything for alice
        # ──────────────────────────────────────
        print("\n=== Sign-out ===\n")

        removed = await cache.invalidate_prefix("alice", "messages")
        removed += await cache.invalidate_prefix("alice", "conversations")
        print(f"  Removed {removed} entries, swept {await cache.sweep_expired()} more")

        await store.close()


if __name__ == "__main__":
    asyncio.run(main())
