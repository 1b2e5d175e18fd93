"""
transport.py - Ledger log subscription over Ethereum JSON-RPC WebSocket.

Opens one eth_subscribe("logs") filtered by contract address and event
topic, and hands back decoded log objects one at a time. There is no
reconnect and no backfill: any failure is a TransportError and the caller
is expected to terminate.
"""

import json
import logging
from typing import Any

from web3 import Web3
from websockets.exceptions import ConnectionClosed, WebSocketException
from websockets.sync.client import ClientConnection, connect

from chain_indexer.categories import EventCategory
from chain_indexer.errors import TransportError, ValidationError

logger = logging.getLogger(__name__)

SUBSCRIBE_TIMEOUT = 10.0


def normalize_contract_address(address: str) -> str:
    """
    Validate a contract address and return its EIP-55 checksum form.

    Raises:
        ValidationError: ``address`` is not a 20-byte hex address.
    """
    if not Web3.is_address(address):
        raise ValidationError(
            f"Invalid contract address: {address}",
            details={"address": address},
        )
    return Web3.to_checksum_address(address)


class LogSubscription:
    """
    One log subscription for one (contract, category) pair.

    Use as a context manager:

        with LogSubscription(url, address, category) as subscription:
            log = subscription.receive(timeout=1.0)
    """

    def __init__(self, url: str, contract_address: str, category: EventCategory):
        self.url = url
        self.contract_address = normalize_contract_address(contract_address)
        self.category = category
        self.subscription_id: str | None = None
        self._connection: ClientConnection | None = None
        self._request_id = 0

    def __enter__(self) -> "LogSubscription":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _connect(self) -> ClientConnection:
        return connect(self.url, open_timeout=SUBSCRIBE_TIMEOUT)

    def open(self) -> None:
        try:
            self._connection = self._connect()
        except (OSError, TimeoutError, WebSocketException) as e:
            raise TransportError(
                f"Cannot connect to {self.url}",
                details={"url": self.url, "cause": str(e)},
            ) from e

        try:
            self._subscribe()
        except TransportError:
            self.close()
            raise

        logger.info(
            "Subscribed to %s logs of %s (subscription %s)",
            self.category.display_name,
            self.contract_address,
            self.subscription_id,
        )

    def _subscribe(self) -> None:
        self._request_id += 1
        request_id = self._request_id
        self._send(
            {
                "jsonrpc": "2.0",
                "id": request_id,
                "method": "eth_subscribe",
                "params": [
                    "logs",
                    {
                        "address": self.contract_address,
                        "topics": ["0x" + self.category.topic],
                    },
                ],
            }
        )

        while self.subscription_id is None:
            message = self._recv(SUBSCRIBE_TIMEOUT)
            if message is None:
                raise TransportError(
                    "Timed out waiting for subscription id",
                    details={"url": self.url},
                )
            if message.get("id") != request_id:
                continue
            if "error" in message or "result" not in message:
                raise TransportError(
                    "Subscription rejected by node",
                    details={"response": message},
                )
            self.subscription_id = message["result"]

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def receive(self, timeout: float | None = None) -> dict[str, Any] | None:
        """
        Next log notification of this subscription.

        Returns:
            The notification's ``result`` object, or None if nothing arrived
            within ``timeout`` seconds.

        Raises:
            TransportError: Connection lost, malformed frame or node error.
        """
        if self._connection is None or self.subscription_id is None:
            raise TransportError("Subscription is not open")

        message = self._recv(timeout)
        while message is not None:
            if "error" in message:
                raise TransportError(
                    "Node reported an error",
                    details={"response": message},
                )
            if message.get("method") == "eth_subscription":
                params = message.get("params") or {}
                if params.get("subscription") == self.subscription_id:
                    result = params.get("result")
                    if not isinstance(result, dict):
                        raise TransportError(
                            "Malformed log notification",
                            details={"response": message},
                        )
                    return result
            logger.debug("Skipping unrelated message: %s", message)
            message = self._recv(timeout)
        return None

    def _send(self, message: dict[str, Any]) -> None:
        try:
            self._connection.send(json.dumps(message))
        except (ConnectionClosed, OSError) as e:
            raise TransportError(
                "Connection lost while sending",
                details={"cause": str(e)},
            ) from e

    def _recv(self, timeout: float | None) -> dict[str, Any] | None:
        try:
            frame = self._connection.recv(timeout=timeout)
        except TimeoutError:
            return None
        except (ConnectionClosed, OSError) as e:
            raise TransportError(
                "Connection lost",
                details={"cause": str(e)},
            ) from e

        try:
            message = json.loads(frame)
        except (TypeError, ValueError) as e:
            raise TransportError(
                "Malformed frame from node",
                details={"cause": str(e)},
            ) from e
        if not isinstance(message, dict):
            raise TransportError(
                "Unexpected JSON-RPC message",
                details={"message": message},
            )
        return message
