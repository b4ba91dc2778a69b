"""
Exchange-rate graph construction.

Builds a plain adjacency mapping for the search hot path and can
convert it to NetworkX for inspection and summaries.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

import networkx as nx

from cyclearb.core.types import Edge, ExchangePair, Graph
from cyclearb.utils.math import invert_rate, to_rate


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BuildStats:
    """Counters for a single graph build."""

    pairs_seen: int = 0
    pairs_accepted: int = 0
    pairs_skipped: int = 0
    nodes: int = 0
    edges: int = 0


def normalize_asset(asset_id: str) -> str:
    """Canonical form of an asset id used as a graph key."""
    return asset_id.strip().lower()


class GraphBuilder:
    """
    Builds a directed, rate-weighted graph from exchange pairs.

    Each accepted pair (base, target, rate) contributes:
    - base -> target with weight rate
    - target -> base with weight 1 / rate

    Parallel edges are kept. Pairs with a blank identifier or a rate
    that is not a positive finite number are skipped.
    """

    def __init__(self) -> None:
        self._last_build = BuildStats()

    def build(self, pairs: Iterable[ExchangePair]) -> Graph:
        """
        Build the adjacency mapping.

        Args:
            pairs: Quoted pairs, identifiers in any case.

        Returns:
            Mapping of lowercase asset id to outgoing edges.
        """
        graph: Graph = {}
        stats = BuildStats()

        for pair in pairs:
            stats.pairs_seen += 1

            base = normalize_asset(pair.base or "")
            target = normalize_asset(pair.target or "")
            rate = to_rate(pair.rate)

            if not base or not target or rate is None:
                stats.pairs_skipped += 1
                logger.debug(f"Skipping malformed pair {pair!r}")
                continue

            graph.setdefault(base, []).append(Edge(to=target, rate=rate))
            graph.setdefault(target, []).append(Edge(to=base, rate=invert_rate(rate)))
            stats.pairs_accepted += 1

        stats.nodes = len(graph)
        stats.edges = sum(len(edges) for edges in graph.values())
        self._last_build = stats

        logger.info(
            f"Built graph with {stats.nodes} assets, {stats.edges} edges "
            f"({stats.pairs_skipped} of {stats.pairs_seen} pairs skipped)"
        )

        return graph

    @property
    def last_build(self) -> BuildStats:
        """Counters from the most recent build."""
        return self._last_build


def to_networkx(graph: Graph) -> nx.MultiDiGraph:
    """
    Convert an adjacency mapping to a NetworkX multigraph.

    Parallel edges survive as separate keys; each carries a `rate`
    attribute.
    """
    nx_graph = nx.MultiDiGraph()
    nx_graph.add_nodes_from(graph)

    for source, edges in graph.items():
        for edge in edges:
            nx_graph.add_edge(source, edge.to, rate=edge.rate)

    return nx_graph


def summarize(graph: Graph, start: str | None = None) -> dict[str, int]:
    """
    Summarize graph shape.

    Args:
        graph: Adjacency mapping.
        start: Optional asset whose reachable set is counted.

    Returns:
        Dict with node, edge, component and reachability counts.
    """
    nx_graph = to_networkx(graph)

    summary = {
        "nodes": nx_graph.number_of_nodes(),
        "edges": nx_graph.number_of_edges(),
        "components": nx.number_weakly_connected_components(nx_graph)
        if nx_graph.number_of_nodes()
        else 0,
    }

    if start is not None:
        summary["reachable"] = (
            len(nx.descendants(nx_graph, start)) if start in nx_graph else 0
        )

    return summary
