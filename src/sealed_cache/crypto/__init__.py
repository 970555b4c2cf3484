"""Key derivation and authenticated encryption for cached values."""

from sealed_cache.crypto.cipher import FORMAT_VERSION, NONCE_LENGTH, AuthenticatedCipher
from sealed_cache.crypto.kdf import (
    KEY_LENGTH,
    PBKDF2_ITERATIONS,
    SALT_LENGTH,
    crypto_supported,
    derive_key,
)

__all__ = [
    "FORMAT_VERSION",
    "KEY_LENGTH",
    "NONCE_LENGTH",
    "PBKDF2_ITERATIONS",
    "SALT_LENGTH",
    "AuthenticatedCipher",
    "crypto_supported",
    "derive_key",
]
