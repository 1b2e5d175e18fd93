"""
conftest.py - Shared fixtures.

Test strategy:
- InMemoryStorage stands in for Redis (same single-key atomicity)
- FlakyStorage injects StorageUnavailable on chosen primitives
- Redis clients and WebSocket connections are MagicMocks
"""

import pytest
from fastapi.testclient import TestClient

from chain_indexer.api.deps import get_query_service
from chain_indexer.errors import StorageUnavailable
from chain_indexer.indexer import Indexer
from chain_indexer.main import app
from chain_indexer.query import QueryService
from chain_indexer.storage import InMemoryStorage

CONTRACT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"


class FlakyStorage(InMemoryStorage):
    """InMemoryStorage that fails the primitives listed in ``fail_on``."""

    def __init__(self, fail_on: set[str] | None = None) -> None:
        super().__init__()
        self.fail_on = fail_on or set()
        self.calls: list[tuple[str, str]] = []

    def _check(self, operation: str, key: str) -> None:
        self.calls.append((operation, key))
        if operation in self.fail_on:
            raise StorageUnavailable(f"{operation} failed", details={"key": key})

    def incr(self, key: str) -> int:
        self._check("incr", key)
        return super().incr(key)

    def get(self, key: str) -> str | None:
        self._check("get", key)
        return super().get(key)

    def set(self, key: str, value: str) -> None:
        self._check("set", key)
        super().set(key, value)


def make_log(n: int, topic: str = "0x" + "ab" * 32) -> dict:
    """Build a decoded log notification as delivered by eth_subscribe."""
    return {
        "address": CONTRACT_ADDRESS.lower(),
        "topics": [topic],
        "data": "0x" + f"{n:064x}",
        "blockNumber": hex(100 + n),
        "blockHash": "0x" + f"{n:064x}",
        "transactionHash": "0x" + f"{n + 1:064x}",
        "transactionIndex": "0x0",
        "logIndex": hex(n),
        "removed": False,
    }


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def indexer(storage):
    return Indexer(storage)


@pytest.fixture
def query_service(storage):
    return QueryService(storage)


@pytest.fixture
def client(query_service):
    """TestClient whose query service reads the test's storage."""
    app.dependency_overrides[get_query_service] = lambda: query_service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
