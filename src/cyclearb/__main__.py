"""
Entry point for the cycle arbitrage detector.

Usage:
    python -m cyclearb scan [BASE] [--max-path-length N] [--exchange ID] [--pairs-file FILE]
    python -m cyclearb serve [--host HOST] [--port PORT]
    cyclearb ...  # if installed via pip
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from decimal import Decimal, InvalidOperation
from pathlib import Path

import orjson
from pydantic import ValidationError

from cyclearb import __version__
from cyclearb.config.constants import MAX_ALLOWED_PATH_LENGTH
from cyclearb.config.settings import Settings, get_settings
from cyclearb.core.types import ExchangePair
from cyclearb.exceptions import ConfigurationError, MarketDataError
from cyclearb.exchange.client import CoinGeckoClient
from cyclearb.strategy.graph import normalize_asset
from cyclearb.strategy.service import ArbitrageService
from cyclearb.telemetry.logger import setup_logging
from cyclearb.telemetry.reporter import OpportunityReporter


logger = logging.getLogger("cyclearb.cli")


def load_pairs_file(path: Path) -> list[ExchangePair]:
    """
    Read exchange pairs from a JSON file.

    The file holds an array of {"base", "target", "rate"} objects.
    Non-positive rates are kept; the graph builder skips them.

    Raises:
        ConfigurationError: If the file is missing or malformed.
    """
    try:
        data = orjson.loads(path.read_bytes())
    except OSError as e:
        raise ConfigurationError(f"Cannot read pairs file {path}: {e}") from e
    except orjson.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in pairs file {path}: {e}") from e

    if not isinstance(data, list):
        raise ConfigurationError(f"Pairs file {path} must contain a JSON array")

    pairs: list[ExchangePair] = []
    for i, item in enumerate(data):
        if not isinstance(item, dict) or not {"base", "target", "rate"} <= item.keys():
            raise ConfigurationError(f"Pair #{i} in {path} needs base, target and rate")
        try:
            rate = Decimal(str(item["rate"]))
        except InvalidOperation as e:
            raise ConfigurationError(f"Pair #{i} in {path} has a non-numeric rate") from e
        pairs.append(ExchangePair(base=str(item["base"]), target=str(item["target"]), rate=rate))

    return pairs


class StaticPairProvider:
    """Provider serving a fixed list of pairs."""

    def __init__(self, pairs: Sequence[ExchangePair]) -> None:
        self._pairs = list(pairs)

    async def get_exchange_pairs(self) -> list[ExchangePair]:
        return list(self._pairs)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="cyclearb",
        description="Detect cyclical arbitrage in an exchange-rate graph.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan = subparsers.add_parser("scan", help="Run one detection and print the report")
    scan.add_argument("base", nargs="?", help="Base asset id (default from settings)")
    scan.add_argument(
        "--max-path-length",
        type=int,
        choices=range(1, MAX_ALLOWED_PATH_LENGTH + 1),
        metavar=f"1..{MAX_ALLOWED_PATH_LENGTH}",
        help="Maximum nodes in a path before closing (default from settings)",
    )
    scan.add_argument("--exchange", help="CoinGecko exchange id (default from settings)")
    scan.add_argument(
        "--pairs-file",
        type=Path,
        help="Read pairs from a JSON file instead of CoinGecko",
    )

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", help="Bind host (default from settings)")
    serve.add_argument("--port", type=int, help="Bind port (default from settings)")

    return parser


async def run_scan(args: argparse.Namespace, settings: Settings) -> int:
    """Fetch pairs, detect opportunities and print the report."""
    base = normalize_asset(args.base or settings.default_base_asset)
    max_path_length = args.max_path_length or settings.max_path_length

    if args.pairs_file:
        pairs = load_pairs_file(args.pairs_file)
        logger.info(f"Loaded {len(pairs)} pairs from {args.pairs_file}")
    else:
        exchange_id = args.exchange.strip().lower() if args.exchange else None
        async with CoinGeckoClient.from_settings(settings, exchange_id=exchange_id) as client:
            pairs = await client.get_exchange_pairs()

    service = ArbitrageService(
        StaticPairProvider(pairs),
        stable_assets=settings.stable_assets,
        search_timeout_seconds=settings.search_timeout_seconds,
    )
    detection = await service.scan(base, max_path_length)

    OpportunityReporter().display(
        base,
        max_path_length,
        detection.opportunities,
        graph_summary=detection.graph_summary,
    )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success).
    """
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    if args.command == "serve":
        from cyclearb.api.server import main as serve

        async_logger = setup_logging(level=settings.log_level, log_file=settings.log_file)
        try:
            serve(host=args.host, port=args.port)
        finally:
            async_logger.stop()
        return 0

    async_logger = setup_logging(level=settings.log_level, log_file=settings.log_file)
    try:
        return asyncio.run(run_scan(args, settings))

    except (ConfigurationError, MarketDataError) as e:
        logger.error(f"{e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130

    finally:
        async_logger.stop()


if __name__ == "__main__":
    sys.exit(main())
