"""
chain_indexer/errors.py - Error Taxonomy

Every failure the indexer can surface is one of these classes.
"Not found" is not an error: query operations return None for it.
"""
from enum import Enum
from typing import Any, Dict, Optional


class IndexerErrorCode(str, Enum):
    # Fatal to the ingestor process
    TRANSPORT_FAILURE = "INDEXER_TRANSPORT_FAILURE"

    # Fatal to the ingestor, HTTP 500 on the query path
    STORAGE_UNAVAILABLE = "INDEXER_STORAGE_UNAVAILABLE"

    # Fatal to one ingestion attempt
    SERIALIZATION_FAILED = "INDEXER_SERIALIZATION_FAILED"

    # HTTP 400
    VALIDATION_FAILED = "INDEXER_VALIDATION_FAILED"


class IndexerException(Exception):
    """Base class for all indexer failures."""

    code: IndexerErrorCode = IndexerErrorCode.STORAGE_UNAVAILABLE

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the exception into a plain dictionary for structured logs.

        Returns:
            dict: ``error_code``, ``message`` and ``details`` (empty dict if unset).
        """
        return {
            "error_code": self.code.value,
            "message": self.message,
            "details": self.details or {},
        }


class TransportError(IndexerException):
    """Subscription or connection failure on the ledger stream."""

    code = IndexerErrorCode.TRANSPORT_FAILURE


class StorageUnavailable(IndexerException):
    """Pool exhaustion or backend failure."""

    code = IndexerErrorCode.STORAGE_UNAVAILABLE


class SerializationError(IndexerException):
    """Payload cannot be encoded."""

    code = IndexerErrorCode.SERIALIZATION_FAILED


class ValidationError(IndexerException):
    """Malformed input at a boundary."""

    code = IndexerErrorCode.VALIDATION_FAILED


def storage_unavailable(operation: str, key: str, cause: Exception) -> StorageUnavailable:
    """
    Build a StorageUnavailable for a failed single-key operation.

    Parameters:
        operation (str): Storage primitive that failed (``incr``, ``get``, ``set``).
        key (str): Key the operation targeted.
        cause (Exception): Backend exception, kept in ``details`` as text.
    """
    return StorageUnavailable(
        f"Storage {operation} failed for key {key!r}",
        details={"operation": operation, "key": key, "cause": str(cause)},
    )
