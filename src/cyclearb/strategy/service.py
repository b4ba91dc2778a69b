"""
Arbitrage detection service.

Wires the market data provider, graph builder and cycle search into
the single public detection operation.
"""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from cyclearb.config.constants import DEFAULT_MAX_PATH_LENGTH, STABLE_ASSETS
from cyclearb.core.types import ArbitrageOpportunity, ExchangePair, ExchangePairProvider
from cyclearb.strategy.cycle_search import CancellationToken, CycleSearch
from cyclearb.strategy.graph import GraphBuilder, normalize_asset, summarize


logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Detection:
    """Result of one detection run."""

    opportunities: list[ArbitrageOpportunity]
    graph_summary: dict[str, int] = field(default_factory=dict)


class ArbitrageService:
    """
    Detects arbitrage cycles from live exchange pairs.

    Each call fetches fresh pairs, builds a new graph and runs an
    independent search; nothing is shared between calls, so one
    service can serve concurrent requests. Upstream failures propagate
    as MarketDataError and are never reported as an empty result.
    """

    def __init__(
        self,
        provider: ExchangePairProvider,
        stable_assets: Iterable[str] = STABLE_ASSETS,
        search_timeout_seconds: float | None = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            provider: Source of exchange pairs.
            stable_assets: Assets eligible for a natural return.
            search_timeout_seconds: Optional deadline per search.
        """
        self._provider = provider
        self._stable_assets = frozenset(stable_assets)
        self._search_timeout = search_timeout_seconds

    async def find_arbitrage_opportunities(
        self,
        base_asset_id: str,
        max_path_length: int = DEFAULT_MAX_PATH_LENGTH,
    ) -> list[ArbitrageOpportunity]:
        """
        Find profitable cycles starting and ending at `base_asset_id`.

        Args:
            base_asset_id: Start asset, any case.
            max_path_length: Maximum nodes in a path before closing.

        Returns:
            Opportunities in discovery order.

        Raises:
            MarketDataError: If the provider cannot fetch pairs.
        """
        detection = await self.scan(base_asset_id, max_path_length)
        return detection.opportunities

    async def scan(
        self,
        base_asset_id: str,
        max_path_length: int = DEFAULT_MAX_PATH_LENGTH,
    ) -> Detection:
        """Fetch pairs and detect, keeping the graph summary of this run."""
        pairs = await self._provider.get_exchange_pairs()
        logger.info(f"Fetched {len(pairs)} exchange pairs")

        return await asyncio.to_thread(
            self.run_detection,
            pairs,
            base_asset_id,
            max_path_length,
        )

    def detect(
        self,
        pairs: Iterable[ExchangePair],
        base_asset_id: str,
        max_path_length: int = DEFAULT_MAX_PATH_LENGTH,
    ) -> list[ArbitrageOpportunity]:
        """Synchronous detection over already fetched pairs."""
        return self.run_detection(pairs, base_asset_id, max_path_length).opportunities

    def run_detection(
        self,
        pairs: Iterable[ExchangePair],
        base_asset_id: str,
        max_path_length: int = DEFAULT_MAX_PATH_LENGTH,
    ) -> Detection:
        """
        Build the graph and search it.

        Builds its own builder and search so concurrent calls share no
        state.
        """
        start = normalize_asset(base_asset_id)

        graph = GraphBuilder().build(pairs)
        summary = summarize(graph, start)
        logger.info(f"Graph summary: {summary}")

        token = (
            CancellationToken.with_timeout(self._search_timeout)
            if self._search_timeout is not None
            else None
        )

        search = CycleSearch(stable_assets=self._stable_assets)
        opportunities = search.find_opportunities(graph, start, max_path_length, token)

        logger.info(
            f"Found {len(opportunities)} opportunities from {start} "
            f"(max path length {max_path_length})"
        )

        return Detection(opportunities=opportunities, graph_summary=summary)
