"""CacheEntry — the record persisted for every cached value."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class CacheEntry:
    """Immutable stored record.

    Only the sealed blob is kept; the plaintext never reaches the store.

    Attributes:
        encrypted:  Base64 blob produced by :class:`AuthenticatedCipher`.
        expires_at: POSIX timestamp after which the entry counts as absent.
        written_at: POSIX timestamp of the write that produced this entry.
    """

    encrypted: str
    expires_at: float
    written_at: float

    def is_expired(self, now: float) -> bool:
        return self.expires_at <= now

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CacheEntry:
        """Rebuild an entry from a stored record.

        Raises:
            ValueError: The record is missing fields or has the wrong types.
        """
        try:
            encrypted = data["encrypted"]
            expires_at = data["expires_at"]
            written_at = data.get("written_at", 0.0)
        except (KeyError, TypeError) as exc:
            raise ValueError(f"malformed cache entry: {exc}") from exc
        if not isinstance(encrypted, str):
            raise ValueError("malformed cache entry: 'encrypted' must be a string")
        if isinstance(expires_at, bool) or not isinstance(expires_at, int | float):
            raise ValueError("malformed cache entry: 'expires_at' must be a number")
        if isinstance(written_at, bool) or not isinstance(written_at, int | float):
            raise ValueError("malformed cache entry: 'written_at' must be a number")
        return cls(encrypted=encrypted, expires_at=float(expires_at), written_at=float(written_at))
