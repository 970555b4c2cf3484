"""Cache keys — ``<namespace>:<id>[:<id>...]`` builders and partition routing."""

from __future__ import annotations

DELIMITER = ":"

CONVERSATIONS = "conversations"
MESSAGES = "messages"

# Namespace → partition.  Unknown namespaces land in DEFAULT_PARTITION.
PARTITIONS: dict[str, str] = {
    CONVERSATIONS: "conversations",
    MESSAGES: "messages",
}
DEFAULT_PARTITION = PARTITIONS[CONVERSATIONS]


def _check_segment(segment: str, label: str) -> str:
    if not segment:
        raise ValueError(f"{label} must be a non-empty string")
    if DELIMITER in segment:
        raise ValueError(f"{label} must not contain {DELIMITER!r}: {segment!r}")
    return segment


def build_key(namespace: str, *ids: str) -> str:
    """Join *namespace* and one or more identifier segments into a cache key."""
    if not ids:
        raise ValueError("a cache key needs at least one identifier segment")
    parts = [_check_segment(namespace, "namespace")]
    parts.extend(_check_segment(i, "identifier") for i in ids)
    return DELIMITER.join(parts)


def conversations_key(owner_id: str) -> str:
    return build_key(CONVERSATIONS, owner_id)


def messages_key(owner_id: str, conversation_id: str) -> str:
    return build_key(MESSAGES, owner_id, conversation_id)


def owner_prefix(namespace: str, owner_id: str) -> str:
    """Key prefix shared by every entry *owner_id* has under *namespace*."""
    return build_key(namespace, owner_id)


def namespace_of(key: str) -> str:
    return key.split(DELIMITER, 1)[0]


def resolve_partition(key: str) -> str:
    """Pick the storage partition for *key* from its namespace prefix."""
    return partition_for(namespace_of(key))


def partition_for(namespace: str) -> str:
    return PARTITIONS.get(namespace, DEFAULT_PARTITION)


def matches_prefix(key: str, prefix: str) -> bool:
    """``True`` if *key* is *prefix* itself or one of its child keys.

    ``"messages:u1"`` matches ``"messages:u1:c1"`` but not ``"messages:u10:c1"``.
    """
    return key == prefix or key.startswith(prefix + DELIMITER)
