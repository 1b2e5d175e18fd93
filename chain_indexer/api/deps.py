from functools import lru_cache

from chain_indexer.config import settings
from chain_indexer.query import QueryService
from chain_indexer.storage import Storage, create_storage


@lru_cache(maxsize=1)
def get_storage() -> Storage:
    """Process-wide storage; one bounded pool shared by all requests."""
    return create_storage(settings.SERVER_POOL_SIZE)


def get_query_service() -> QueryService:
    return QueryService(get_storage())
