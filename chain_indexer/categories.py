"""
categories.py - Event categories and the storage key schema.

Each category owns an independent sequence space:

    {prefix}:q           quantity counter (INCR target)
    {prefix}:{sequence}  serialized record, sequence >= 1

The schema is persistent. Changing a prefix orphans every record already
written under it.
"""

from enum import Enum
from typing import Optional

KEY_SEPARATOR = ":"
QUANTITY_SUFFIX = "q"


class EventCategory(Enum):
    """Closed set of tracked contract events."""

    COLLECTION_CREATED = (
        "collection_created",
        "CollectionCreated",
        "cc",
        "3454b57f2dca4f5a54e8358d096ac9d1a0d2dab98991ddb89ff9ea1746260617",
    )
    TOKEN_MINTED = (
        "token_minted",
        "TokenMinted",
        "tm",
        "c9fee7cd4889f66f10ff8117316524260a5242e88e25e0656dfb3f4196a21917",
    )

    def __init__(self, url_name: str, display_name: str, key_prefix: str, topic: str):
        self.url_name = url_name
        self.display_name = display_name
        self.key_prefix = key_prefix
        # keccak-256 of the event signature, hex without 0x
        self.topic = topic

    @property
    def quantity_key(self) -> str:
        return f"{self.key_prefix}{KEY_SEPARATOR}{QUANTITY_SUFFIX}"

    def record_key(self, sequence: int) -> str:
        return f"{self.key_prefix}{KEY_SEPARATOR}{sequence}"

    @classmethod
    def from_name(cls, name: str) -> Optional["EventCategory"]:
        """Resolve a URL/CLI name such as ``token_minted``; None if unknown."""
        for category in cls:
            if category.url_name == name:
                return category
        return None

    @classmethod
    def names(cls) -> list[str]:
        return [category.url_name for category in cls]


_prefixes = [category.key_prefix for category in EventCategory]
assert len(_prefixes) == len(set(_prefixes)), "category key prefixes must be unique"
assert all(KEY_SEPARATOR not in prefix for prefix in _prefixes)
