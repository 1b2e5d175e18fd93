"""
query.py - Read-only access to indexed events.

Both operations are stateless and idempotent and never write. A sequence
outside the allocated range is "absent" (None), not an error.
"""

from chain_indexer.categories import EventCategory
from chain_indexer.errors import ValidationError
from chain_indexer.storage import Storage

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def check_int64(value: object, name: str = "sequence") -> int:
    """Return ``value`` if it is a signed 64-bit integer, else raise ValidationError."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(
            f"{name} must be an integer",
            details={name: repr(value)},
        )
    if not INT64_MIN <= value <= INT64_MAX:
        raise ValidationError(
            f"{name} is outside the signed 64-bit range",
            details={name: str(value)},
        )
    return value


class QueryService:
    def __init__(self, storage: Storage):
        self.storage = storage

    def get_quantity(self, category: EventCategory) -> int | None:
        """
        Current quantity counter of ``category``.

        Returns:
            The count, or None if nothing was ever ingested.

        Raises:
            StorageUnavailable: Backend failure.
        """
        value = self.storage.get(category.quantity_key)
        if value is None:
            return None
        return int(value)

    def get_by_index(self, category: EventCategory, sequence: int) -> str | None:
        """
        Serialized record stored at ``sequence``, exactly as written.

        Returns:
            The record text, or None when no record exists at ``sequence``
            (never allocated, zero/negative, or an unfilled sequence).

        Raises:
            ValidationError: ``sequence`` is not a signed 64-bit integer.
            StorageUnavailable: Backend failure.
        """
        sequence = check_int64(sequence)
        if sequence < 1:
            return None
        return self.storage.get(category.record_key(sequence))
