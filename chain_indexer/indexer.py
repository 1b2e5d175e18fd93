"""
indexer.py - Sequence allocation and record persistence.

HARD INVARIANTS:
- The category counter's INCR is the ONLY ordering authority. It is one
  atomic storage call, never a read followed by a write.
- For N ingested events a category's sequences are exactly {1, ..., N}.
- Records are written once and never updated or deleted.

KNOWN GAP:
If INCR succeeds and the record SET then fails, that sequence stays
unfilled forever: get_quantity() counts it, get_by_index() reports it
absent. The storage offers no rollback, so this is surfaced rather than
repaired.
"""

import logging
from typing import Any

from chain_indexer.categories import EventCategory
from chain_indexer.errors import StorageUnavailable
from chain_indexer.serialization import serialize_payload
from chain_indexer.storage import Storage

logger = logging.getLogger(__name__)


class Indexer:
    """Sole writer of quantity counters and event records."""

    def __init__(self, storage: Storage):
        self.storage = storage

    def ingest(self, category: EventCategory, payload: Any) -> int:
        """
        Assign the next sequence number of ``category`` to ``payload`` and persist it.

        Steps:
        1. Serialize the payload (no storage touched on failure)
        2. INCR the category's quantity counter -> n
        3. SET {prefix}:{n} = serialized payload
        4. Return n

        Args:
            category: Event category owning the sequence space.
            payload: Decoded log notification; any JSON-representable value.

        Returns:
            The 1-based sequence number assigned to this ingestion.

        Raises:
            SerializationError: Payload cannot be encoded. Nothing was written.
            StorageUnavailable: INCR failed (no sequence consumed) or SET
                failed (sequence consumed and left unfilled).
        """
        data = serialize_payload(payload)

        sequence = self.storage.incr(category.quantity_key)

        key = category.record_key(sequence)
        try:
            self.storage.set(key, data)
        except StorageUnavailable:
            logger.error(
                "Sequence %d of %s allocated but record write failed; "
                "index %d will stay unfilled",
                sequence,
                category.display_name,
                sequence,
            )
            raise

        logger.debug("Stored %s", key)
        return sequence
