"""Read path: absent results versus errors."""

import pytest

from chain_indexer.categories import EventCategory
from chain_indexer.errors import StorageUnavailable, ValidationError
from chain_indexer.query import INT64_MAX, INT64_MIN, QueryService, check_int64

from tests.conftest import FlakyStorage

CC = EventCategory.COLLECTION_CREATED
TM = EventCategory.TOKEN_MINTED


class TestGetQuantity:
    def test_never_ingested_is_none(self, query_service):
        assert query_service.get_quantity(CC) is None

    def test_reads_counter(self, storage, query_service):
        storage.set("tm:q", "12")
        assert query_service.get_quantity(TM) == 12

    def test_storage_failure_propagates(self):
        service = QueryService(FlakyStorage(fail_on={"get"}))
        with pytest.raises(StorageUnavailable):
            service.get_quantity(CC)


class TestGetByIndex:
    def test_beyond_quantity_is_absent(self, indexer, query_service):
        indexer.ingest(CC, "p1")
        assert query_service.get_by_index(CC, 2) is None
        assert query_service.get_by_index(CC, INT64_MAX) is None

    @pytest.mark.parametrize("sequence", [0, -1, INT64_MIN])
    def test_non_positive_is_absent_without_storage_access(self, sequence):
        storage = FlakyStorage()
        service = QueryService(storage)

        assert service.get_by_index(CC, sequence) is None
        assert storage.calls == []

    @pytest.mark.parametrize("sequence", ["1", 1.0, True, None])
    def test_non_integers_rejected(self, query_service, sequence):
        with pytest.raises(ValidationError):
            query_service.get_by_index(CC, sequence)

    @pytest.mark.parametrize("sequence", [INT64_MAX + 1, INT64_MIN - 1])
    def test_outside_int64_rejected(self, query_service, sequence):
        with pytest.raises(ValidationError):
            query_service.get_by_index(CC, sequence)

    def test_reads_never_write(self):
        storage = FlakyStorage()
        service = QueryService(storage)

        service.get_quantity(CC)
        service.get_by_index(CC, 3)

        assert {op for op, _ in storage.calls} == {"get"}


def test_check_int64_bounds():
    assert check_int64(INT64_MAX) == INT64_MAX
    assert check_int64(INT64_MIN) == INT64_MIN
