#!/usr/bin/env python3
"""
chain_indexer/cli.py - Command-Line Interface

Usage:
    chain-indexer subscribe collection_created 0x5FbDB2315678afecb367f032d93F642f64180aa3
    chain-indexer serve --port 8080

Exit Codes:
    0 = stopped gracefully
    1 = fatal failure (transport, storage, serialization)
    2 = invalid arguments
"""
import argparse
import logging
import sys

from chain_indexer.categories import EventCategory
from chain_indexer.config import settings
from chain_indexer.errors import IndexerException, ValidationError
from chain_indexer.transport import normalize_contract_address

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chain-indexer",
        description="Index contract events by category and serve them over HTTP",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subscribe_parser = subparsers.add_parser(
        "subscribe", help="Listen for one event category and index it"
    )
    subscribe_parser.add_argument(
        "category",
        choices=EventCategory.names(),
        help="Event category to monitor",
    )
    subscribe_parser.add_argument("contract_address", help="Contract address")

    serve_parser = subparsers.add_parser("serve", help="Run the query API")
    serve_parser.add_argument("--host", default=settings.API_HOST)
    serve_parser.add_argument("--port", type=int, default=settings.API_PORT)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and dispatch to the requested process."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging()

    if args.command == "subscribe":
        run_subscribe(parser, args)
    elif args.command == "serve":
        run_serve(args)


def run_subscribe(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    """
    Run an ingestor until shutdown.

    Any failure is fatal: it is logged and the process exits with status 1,
    leaving restarts to the supervisor.
    """
    from chain_indexer.worker.main import run_ingestor

    category = EventCategory.from_name(args.category)
    try:
        contract_address = normalize_contract_address(args.contract_address)
    except ValidationError as e:
        parser.error(e.message)

    logger.info(
        "Starting ingestor for %s on contract %s",
        category.display_name,
        contract_address,
    )
    try:
        run_ingestor(category, contract_address)
    except IndexerException:
        logger.exception("Ingestor terminated")
        sys.exit(1)


def run_serve(args: argparse.Namespace) -> None:
    import uvicorn

    logger.info("Starting query API on %s:%d", args.host, args.port)
    uvicorn.run(
        "chain_indexer.main:app",
        host=args.host,
        port=args.port,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
