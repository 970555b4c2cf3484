"""AuthenticatedCipher — seals JSON-serializable values into self-describing blobs.

Blob layout (before base64)::

    version[1] || salt[16] || nonce[12] || ciphertext_with_tag[...]

The version byte is authenticated as associated data, so a blob cannot be
relabelled to a different format without failing the tag check.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import json
import os
from typing import Any

from cryptography.exceptions import InvalidTag
from pydantic_core import to_jsonable_python

from sealed_cache.crypto.kdf import SALT_LENGTH, crypto_supported, derive_key
from sealed_cache.exceptions import (
    CryptoUnsupportedError,
    DecryptionFailedError,
    EncryptionFailedError,
)

FORMAT_VERSION = 1
NONCE_LENGTH = 12  # 96-bit GCM nonce
TAG_LENGTH = 16
_HEADER_LENGTH = 1 + SALT_LENGTH + NONCE_LENGTH


def _jsonable(obj: Any) -> Any:
    return to_jsonable_python(obj, by_alias=False)


def _canonical_json(value: Any) -> bytes:
    return json.dumps(
        value,
        default=_jsonable,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    ).encode("utf-8")


class AuthenticatedCipher:
    """Stateless AES-256-GCM sealing keyed by the owner's identifier.

    Every ``encrypt`` call draws a fresh salt and nonce, so the same value
    sealed twice yields unrelated blobs.  Key derivation is CPU-bound and
    runs in a worker thread so the event loop keeps serving other tasks.
    """

    @staticmethod
    def supported() -> bool:
        return crypto_supported()

    async def encrypt(self, value: Any, owner_id: str) -> str:
        """Serialize and seal *value* for *owner_id*; return the base64 blob.

        Raises:
            CryptoUnsupportedError: The host lacks the required primitives.
            EncryptionFailedError: Serialization or encryption failed.
        """
        return await asyncio.to_thread(self._encrypt_sync, value, owner_id)

    async def decrypt(self, blob: str, owner_id: str) -> Any:
        """Open *blob* for *owner_id* and return the deserialized value.

        Raises:
            CryptoUnsupportedError: The host lacks the required primitives.
            DecryptionFailedError: The blob is malformed, tampered with,
                of an unknown version, or was sealed for a different owner.
        """
        return await asyncio.to_thread(self._decrypt_sync, blob, owner_id)

    # ── synchronous core ─────────────────────────────────────

    def _encrypt_sync(self, value: Any, owner_id: str) -> str:
        try:
            plaintext = _canonical_json(value)
        except (TypeError, ValueError) as exc:
            raise EncryptionFailedError(f"value is not JSON-serializable: {exc}") from exc

        header = bytes([FORMAT_VERSION])
        salt = os.urandom(SALT_LENGTH)
        nonce = os.urandom(NONCE_LENGTH)
        try:
            key = derive_key(owner_id, salt)
            ciphertext = key.encrypt(nonce, plaintext, header)
        except CryptoUnsupportedError:
            raise
        except Exception as exc:
            raise EncryptionFailedError(f"failed to encrypt data: {exc}") from exc

        return base64.b64encode(header + salt + nonce + ciphertext).decode("ascii")

    def _decrypt_sync(self, blob: str, owner_id: str) -> Any:
        try:
            raw = base64.b64decode(blob, validate=True)
        except (binascii.Error, ValueError, TypeError) as exc:
            raise DecryptionFailedError("blob is not valid base64") from exc
        if base64.b64encode(raw).decode("ascii") != blob:
            raise DecryptionFailedError("blob is not canonical base64")

        if len(raw) < _HEADER_LENGTH + TAG_LENGTH:
            raise DecryptionFailedError(f"blob too short ({len(raw)} bytes)")
        if raw[0] != FORMAT_VERSION:
            raise DecryptionFailedError(f"unsupported blob format version {raw[0]}")

        header = raw[:1]
        salt = raw[1 : 1 + SALT_LENGTH]
        nonce = raw[1 + SALT_LENGTH : _HEADER_LENGTH]
        ciphertext = raw[_HEADER_LENGTH:]

        try:
            key = derive_key(owner_id, salt)
        except ValueError as exc:
            raise DecryptionFailedError(str(exc)) from exc

        try:
            plaintext = key.decrypt(nonce, ciphertext, header)
        except InvalidTag as exc:
            raise DecryptionFailedError("authentication tag mismatch") from exc

        try:
            return json.loads(plaintext.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise DecryptionFailedError("decrypted payload is not valid JSON") from exc
