"""
main.py - Ingestor: one ledger subscription feeding the Indexer.

Consumes log notifications for exactly one category, strictly one at a
time, and indexes each as it arrives.

GUARANTEES:
- Sequential handling: two notifications from this process never race
- No deduplication: a notification delivered twice is indexed twice
- Fail closed: any transport, storage or serialization failure stops the
  process (no retry, no backoff); a supervisor is expected to restart it
- Graceful shutdown on SIGTERM/SIGINT: the in-flight ingest completes,
  then the loop exits
"""

import logging
import signal
from typing import Any

from chain_indexer.categories import EventCategory
from chain_indexer.config import settings
from chain_indexer.errors import IndexerException
from chain_indexer.indexer import Indexer
from chain_indexer.storage import create_storage
from chain_indexer.transport import LogSubscription

logger = logging.getLogger(__name__)


class Ingestor:
    """
    Lifecycle:
    1. Open the subscription
    2. Loop: receive -> Indexer.ingest
    3. On SIGTERM/SIGINT: finish the current notification, exit cleanly
    4. On any IndexerException: log and re-raise
    """

    def __init__(
        self,
        category: EventCategory,
        subscription: LogSubscription,
        indexer: Indexer,
        recv_timeout: float | None = None,
    ) -> None:
        self.category = category
        self.subscription = subscription
        self.indexer = indexer
        self.recv_timeout = (
            settings.TRANSPORT_RECV_TIMEOUT if recv_timeout is None else recv_timeout
        )
        self.running = False
        self.ingested_count = 0

    def start(self) -> None:
        """Install signal handlers and run until shutdown or failure."""
        signal.signal(signal.SIGTERM, self._shutdown_handler)
        signal.signal(signal.SIGINT, self._shutdown_handler)
        self.run()

    def run(self) -> None:
        self.running = True
        try:
            with self.subscription:
                logger.info(
                    "Ingestor for %s started",
                    self.category.display_name,
                )
                while self.running:
                    log = self.subscription.receive(timeout=self.recv_timeout)
                    if log is None:
                        continue
                    self.handle(log)
        except IndexerException as e:
            logger.error(
                "Ingestor for %s failed: %s",
                self.category.display_name,
                e.to_dict(),
            )
            raise
        finally:
            self.running = False

        logger.info(
            "Ingestor for %s stopped gracefully after %d events.",
            self.category.display_name,
            self.ingested_count,
        )

    def handle(self, log: dict[str, Any]) -> int:
        sequence = self.indexer.ingest(self.category, log)
        self.ingested_count += 1
        logger.info(
            "Indexed %s #%d (tx %s, log index %s)",
            self.category.display_name,
            sequence,
            log.get("transactionHash"),
            log.get("logIndex"),
        )
        return sequence

    def _shutdown_handler(self, signum: int, frame: Any) -> None:
        logger.info(
            "Received signal %d. Finishing current event and shutting down...", signum
        )
        self.running = False


def run_ingestor(category: EventCategory, contract_address: str) -> None:
    """
    Build storage, subscription and indexer from settings and run until stopped.

    Raises:
        IndexerException: Any fatal failure; nothing is retried.
    """
    storage = create_storage(settings.INGESTOR_POOL_SIZE)
    subscription = LogSubscription(settings.NODE_WS_URL, contract_address, category)
    ingestor = Ingestor(category, subscription, Indexer(storage))
    ingestor.start()
