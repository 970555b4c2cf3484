"""Custom exceptions for the sealed_cache package."""

from __future__ import annotations


class CacheError(Exception):
    """Base exception for all cache-related errors."""


class CryptoUnsupportedError(CacheError):
    """Raised when the host lacks the primitives needed for PBKDF2 or AES-GCM."""

    def __init__(self, detail: str = "") -> None:
        msg = "Required cryptographic primitives are unavailable"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class CipherError(CacheError):
    """Base exception for encryption and decryption failures."""


class EncryptionFailedError(CipherError):
    """Raised when a value cannot be serialized or encrypted."""


class DecryptionFailedError(CipherError):
    """Raised when a blob is malformed, tampered with, or sealed for another owner."""


class StorageError(CacheError):
    """Raised when a store operation fails."""

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        msg = f"Store error during '{operation}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class StorageUnavailableError(StorageError):
    """Raised when the storage medium cannot be opened or used at all."""

    def __init__(self, detail: str = "") -> None:
        super().__init__("open", detail or "storage is unavailable")


class BackendError(CacheError):
    """Raised when the authoritative backend request fails."""

    def __init__(self, resource: str, detail: str = "") -> None:
        self.resource = resource
        msg = f"Backend request for '{resource}' failed"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class ConfigError(CacheError):
    """Raised when settings or maintenance input are invalid."""
