"""Key derivation — owner id + random salt to an AES-256-GCM key."""

from __future__ import annotations

import functools
import logging

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from sealed_cache.exceptions import CryptoUnsupportedError

logger = logging.getLogger(__name__)

SALT_LENGTH = 16
KEY_LENGTH = 32  # AES-256
PBKDF2_ITERATIONS = 100_000


@functools.cache
def crypto_supported() -> bool:
    """Return ``True`` if PBKDF2-HMAC-SHA256 and AES-GCM are usable on this host.

    The self-test runs once per process: it derives a throwaway key with a
    single iteration and seals an empty payload with it.
    """
    try:
        throwaway = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_LENGTH,
            salt=bytes(SALT_LENGTH),
            iterations=1,
        ).derive(b"self-test")
        AESGCM(throwaway).encrypt(bytes(12), b"", None)
    except UnsupportedAlgorithm:
        return False
    except Exception:
        logger.exception("Cryptographic self-test failed; disabling the cache")
        return False
    return True


def derive_key(owner_id: str, salt: bytes) -> AESGCM:
    """Derive the AES-GCM key for *owner_id* under *salt*.

    The owner id's UTF-8 bytes are the password; identical
    ``(owner_id, salt)`` pairs always give the same key.  Only the
    :class:`AESGCM` wrapper is returned, never the raw key bytes.

    Raises:
        CryptoUnsupportedError: The host cannot run PBKDF2 or AES-GCM.
        ValueError: Empty owner id or a salt that is not 16 bytes.
    """
    if not crypto_supported():
        raise CryptoUnsupportedError("PBKDF2-HMAC-SHA256 / AES-256-GCM not available")
    if not owner_id:
        raise ValueError("owner_id must be a non-empty string")
    if len(salt) != SALT_LENGTH:
        raise ValueError(f"salt must be exactly {SALT_LENGTH} bytes, got {len(salt)}")

    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=salt,
        iterations=PBKDF2_ITERATIONS,
    )
    return AESGCM(kdf.derive(owner_id.encode("utf-8")))
