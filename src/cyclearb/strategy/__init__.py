"""Strategy module for graph construction and cycle detection."""

from cyclearb.strategy.cycle_search import CancellationToken, CycleSearch, SearchStats
from cyclearb.strategy.graph import BuildStats, GraphBuilder, to_networkx
from cyclearb.strategy.service import ArbitrageService, Detection


__all__ = [
    "ArbitrageService",
    "BuildStats",
    "CancellationToken",
    "CycleSearch",
    "Detection",
    "GraphBuilder",
    "SearchStats",
    "to_networkx",
]
