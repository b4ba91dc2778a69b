"""Core module containing the shared type definitions."""

from cyclearb.core.types import (
    ArbitrageOpportunity,
    Edge,
    ExchangePair,
    ExchangePairProvider,
    Graph,
    Path,
)


__all__ = [
    "ArbitrageOpportunity",
    "Edge",
    "ExchangePair",
    "ExchangePairProvider",
    "Graph",
    "Path",
]
