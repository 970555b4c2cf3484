"""SQLiteStore — durable, single-file storage backend using aiosqlite."""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any

import aiosqlite

from sealed_cache._internal.once import AsyncOnce
from sealed_cache.exceptions import StorageError, StorageUnavailableError
from sealed_cache.stores.base import Store

logger = logging.getLogger(__name__)

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS cache_entries (
    partition TEXT NOT NULL,
    key       TEXT NOT NULL,
    value     TEXT NOT NULL,
    PRIMARY KEY (partition, key)
)
"""


class SQLiteStore(Store):
    """Persistent store backed by a single SQLite file.

    The connection is opened lazily on first use and shared by every
    operation afterwards.  Concurrent first callers all await the same
    open; if opening fails, the next call tries again.

    Parameters:
        db_path: Path to the SQLite database file.  Use ``":memory:"``
                 for an in-memory database (useful for testing).
    """

    def __init__(self, db_path: str = "sealed_cache.db") -> None:
        self._db_path = db_path
        self._handle: AsyncOnce[aiosqlite.Connection] = AsyncOnce(self._open)

    @property
    def db_path(self) -> str:
        return self._db_path

    async def _open(self) -> aiosqlite.Connection:
        try:
            db = await aiosqlite.connect(self._db_path)
        except (sqlite3.Error, OSError) as exc:
            logger.error("Could not open cache database at %s: %s", self._db_path, exc)
            raise StorageUnavailableError(str(exc)) from exc
        try:
            await db.execute(_CREATE_TABLE)
            await db.commit()
        except sqlite3.Error as exc:
            await db.close()
            logger.error("Could not initialize cache database at %s: %s", self._db_path, exc)
            raise StorageUnavailableError(str(exc)) from exc
        logger.debug("Opened cache database at %s", self._db_path)
        return db

    async def _connect(self) -> aiosqlite.Connection:
        return await self._handle.get()

    async def close(self) -> None:
        # An open still in flight must finish so its connection can be closed.
        if self._handle.started:
            try:
                db = await self._handle.get()
            except StorageError:
                db = None
            if db is not None:
                await db.close()
        self._handle.reset()

    # ── Store protocol ───────────────────────────────────────

    async def get(self, partition: str, key: str) -> dict[str, Any] | None:
        db = await self._connect()
        try:
            cursor = await db.execute(
                "SELECT value FROM cache_entries WHERE partition = ? AND key = ?",
                (partition, key),
            )
            row = await cursor.fetchone()
        except sqlite3.Error as exc:
            raise StorageError("get", str(exc)) from exc
        if row is None:
            return None
        return _decode(partition, key, row[0])

    async def put(self, partition: str, key: str, value: dict[str, Any]) -> None:
        db = await self._connect()
        try:
            await db.execute(
                "INSERT OR REPLACE INTO cache_entries (partition, key, value) VALUES (?, ?, ?)",
                (partition, key, json.dumps(value)),
            )
            await db.commit()
        except (sqlite3.Error, TypeError, ValueError) as exc:
            raise StorageError("put", str(exc)) from exc

    async def delete(self, partition: str, key: str) -> None:
        db = await self._connect()
        try:
            await db.execute(
                "DELETE FROM cache_entries WHERE partition = ? AND key = ?",
                (partition, key),
            )
            await db.commit()
        except sqlite3.Error as exc:
            raise StorageError("delete", str(exc)) from exc

    async def clear(self, partition: str) -> None:
        db = await self._connect()
        try:
            await db.execute(
                "DELETE FROM cache_entries WHERE partition = ?",
                (partition,),
            )
            await db.commit()
        except sqlite3.Error as exc:
            raise StorageError("clear", str(exc)) from exc

    async def list_all(self, partition: str) -> list[tuple[str, dict[str, Any]]]:
        db = await self._connect()
        try:
            cursor = await db.execute(
                "SELECT key, value FROM cache_entries WHERE partition = ?",
                (partition,),
            )
            rows = await cursor.fetchall()
        except sqlite3.Error as exc:
            raise StorageError("list_all", str(exc)) from exc
        return [(row[0], _decode(partition, row[0], row[1])) for row in rows]

    async def list_partitions(self) -> list[str]:
        db = await self._connect()
        try:
            cursor = await db.execute("SELECT DISTINCT partition FROM cache_entries")
            rows = await cursor.fetchall()
        except sqlite3.Error as exc:
            raise StorageError("list_partitions", str(exc)) from exc
        return [row[0] for row in rows]


def _decode(partition: str, key: str, raw: str) -> dict[str, Any]:
    # Unreadable rows come back empty so callers treat them as corrupt entries.
    try:
        result = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Corrupt record in partition %s: %s", partition, key)
        return {}
    if not isinstance(result, dict):
        logger.warning("Corrupt record in partition %s: %s", partition, key)
        return {}
    return result
