"""
Pytest configuration and shared fixtures.

Provides reusable test fixtures for all test modules.
"""

from decimal import Decimal

import pytest

from cyclearb.config.settings import Settings
from cyclearb.core.types import ExchangePair, Graph
from cyclearb.strategy.cycle_search import CycleSearch
from cyclearb.strategy.graph import GraphBuilder
from tests.mocks import MockPairProvider


# =============================================================================
# Pair Fixtures
# =============================================================================


@pytest.fixture
def pairs_triangle() -> list[ExchangePair]:
    """
    USDT -> ETH -> BTC -> USDT with a rate product of exactly 1.05.

    0.0005 * 0.05 * 42000 = 1.05
    """
    return [
        ExchangePair("usdt", "eth", Decimal("0.0005")),
        ExchangePair("eth", "btc", Decimal("0.05")),
        ExchangePair("btc", "usdt", Decimal("42000")),
    ]


@pytest.fixture
def pairs_fair_triangle() -> list[ExchangePair]:
    """Consistent prices: every cycle multiplies to exactly 1."""
    return [
        ExchangePair("usdt", "eth", Decimal("0.0005")),
        ExchangePair("eth", "btc", Decimal("0.05")),
        ExchangePair("btc", "usdt", Decimal("40000")),
    ]


@pytest.fixture
def pairs_dense() -> list[ExchangePair]:
    """Four assets, every pair quoted, mixed case identifiers."""
    return [
        ExchangePair("USDT", "ETH", Decimal("0.0005")),
        ExchangePair("ETH", "BTC", Decimal("0.05")),
        ExchangePair("BTC", "USDT", Decimal("42000")),
        ExchangePair("BNB", "USDT", Decimal("600")),
        ExchangePair("BNB", "BTC", Decimal("0.015")),
        ExchangePair("ETH", "BNB", Decimal("3.4")),
    ]


@pytest.fixture
def pairs_disconnected() -> list[ExchangePair]:
    """Two components; the usdt/eth/btc one is unreachable from sol."""
    return [
        ExchangePair("usdt", "eth", Decimal("0.0005")),
        ExchangePair("eth", "btc", Decimal("0.05")),
        ExchangePair("btc", "usdt", Decimal("42000")),
        ExchangePair("sol", "ray", Decimal("40")),
    ]


# =============================================================================
# Component Fixtures
# =============================================================================


@pytest.fixture
def builder() -> GraphBuilder:
    """Fresh graph builder."""
    return GraphBuilder()


@pytest.fixture
def search() -> CycleSearch:
    """Cycle search with the default stable assets."""
    return CycleSearch()


@pytest.fixture
def graph_triangle(builder: GraphBuilder, pairs_triangle: list[ExchangePair]) -> Graph:
    """Graph of the profitable triangle."""
    return builder.build(pairs_triangle)


@pytest.fixture
def graph_dense(builder: GraphBuilder, pairs_dense: list[ExchangePair]) -> Graph:
    """Graph of the dense four-asset market."""
    return builder.build(pairs_dense)


@pytest.fixture
def mock_provider(pairs_triangle: list[ExchangePair]) -> MockPairProvider:
    """Provider serving the profitable triangle."""
    return MockPairProvider(pairs_triangle)


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None, log_level="DEBUG")
