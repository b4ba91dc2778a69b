"""
Type definitions for the cycle arbitrage detector.

This module contains the dataclasses, aliases and Protocol definitions
shared by the graph builder, the cycle search and their collaborators.
Using slots=True for memory efficiency and faster attribute access.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Protocol, TypeAlias


# =============================================================================
# Market Data Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class ExchangePair:
    """
    A quoted trading pair.

    `rate` is the last traded price: units of target per unit of base.
    Identifiers are kept as supplied; the graph builder normalizes them.
    """

    base: str
    target: str
    rate: Decimal

    def __repr__(self) -> str:
        return f"{self.base}/{self.target}@{self.rate}"


# =============================================================================
# Graph Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class Edge:
    """Directed, rate-weighted edge to `to`."""

    to: str
    rate: Decimal


# Asset id (lowercase) -> outgoing edges in insertion order
Graph: TypeAlias = dict[str, list[Edge]]

# Asset ids in traversal order, first element is the start asset
Path: TypeAlias = list[str]


# =============================================================================
# Opportunity Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class ArbitrageOpportunity:
    """
    Detected arbitrage cycle.

    `path` includes the closing node, so a three-hop cycle has four
    entries. `profit_percentage` is (product of rates - 1) * 100.
    """

    path: tuple[str, ...]
    profit_percentage: Decimal

    @property
    def hops(self) -> int:
        """Number of trades along the cycle."""
        return len(self.path) - 1

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dict."""
        return {
            "path": list(self.path),
            "profit_percentage": str(self.profit_percentage),
        }


# =============================================================================
# Protocols (Interfaces)
# =============================================================================


class ExchangePairProvider(Protocol):
    """Source of the current exchange pairs."""

    async def get_exchange_pairs(self) -> list[ExchangePair]:
        """Return (base, target, last rate) for all known trading pairs."""
        ...
