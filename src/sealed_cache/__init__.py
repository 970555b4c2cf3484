"""sealed_cache — an owner-encrypted, expiring local cache for conversation data.

Values are sealed with AES-256-GCM under a key derived from the owner's
id, stored in namespace partitions, and dropped once their TTL passes.
The cache is advisory: reads fall back to a miss instead of failing.
"""

from sealed_cache.backend import HttpBackend
from sealed_cache.config import (
    CacheSettings,
    StoreConfigSchema,
    build_backend,
    build_loader,
    build_manager,
    create_store,
)
from sealed_cache.crypto import AuthenticatedCipher, crypto_supported
from sealed_cache.entry import CacheEntry
from sealed_cache.exceptions import (
    BackendError,
    CacheError,
    CipherError,
    ConfigError,
    CryptoUnsupportedError,
    DecryptionFailedError,
    EncryptionFailedError,
    StorageError,
    StorageUnavailableError,
)
from sealed_cache.keys import build_key, conversations_key, messages_key, resolve_partition
from sealed_cache.loader import ConversationLoader
from sealed_cache.manager import DEFAULT_TTL_SECONDS, CacheManager
from sealed_cache.models import Conversation, Message
from sealed_cache.sync import CacheUpdate, LastWriterWins, UpdateChannel

__all__ = [
    "DEFAULT_TTL_SECONDS",
    "AuthenticatedCipher",
    "BackendError",
    "CacheEntry",
    "CacheError",
    "CacheManager",
    "CacheSettings",
    "CacheUpdate",
    "CipherError",
    "ConfigError",
    "Conversation",
    "ConversationLoader",
    "CryptoUnsupportedError",
    "DecryptionFailedError",
    "EncryptionFailedError",
    "HttpBackend",
    "LastWriterWins",
    "Message",
    "StorageError",
    "StorageUnavailableError",
    "StoreConfigSchema",
    "UpdateChannel",
    "build_backend",
    "build_key",
    "build_loader",
    "build_manager",
    "conversations_key",
    "create_store",
    "crypto_supported",
    "messages_key",
    "resolve_partition",
]
