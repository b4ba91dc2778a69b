"""
Bounded depth-first cycle search.

Enumerates paths from a start asset that return to it with a
rate product above 1. Cost is O(branching ** max_path_length), so
callers keep max_path_length small (<= 6-8) on dense graphs.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal, Overflow

from cyclearb.config.constants import MIN_CYCLE_PATH_LENGTH, STABLE_ASSETS
from cyclearb.core.types import ArbitrageOpportunity, Edge, Graph, Path
from cyclearb.utils.math import ONE, profit_percentage
from cyclearb.utils.time import LatencyTimer, format_duration_us, get_timestamp_us, seconds_to_us


logger = logging.getLogger(__name__)


class CancellationToken:
    """
    Cooperative stop signal for a running search.

    Cancelled explicitly via cancel(), or implicitly once an optional
    deadline passes. The search polls it once per step.
    """

    __slots__ = ("_cancelled", "_deadline_us")

    def __init__(self, deadline_us: int | None = None) -> None:
        self._cancelled = False
        self._deadline_us = deadline_us

    @classmethod
    def with_timeout(cls, seconds: float) -> "CancellationToken":
        """Token that cancels itself `seconds` from now."""
        return cls(deadline_us=get_timestamp_us() + seconds_to_us(seconds))

    def cancel(self) -> None:
        """Request the search to stop."""
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        """Whether the search should stop."""
        if not self._cancelled and self._deadline_us is not None:
            if get_timestamp_us() >= self._deadline_us:
                self._cancelled = True
        return self._cancelled


@dataclass(slots=True)
class SearchStats:
    """Counters for a single search."""

    steps: int = 0
    edges_examined: int = 0
    opportunities: int = 0
    pruned: int = 0
    cancelled: bool = False
    elapsed_us: int = 0


@dataclass(slots=True)
class _SearchState:
    """Scratch structures owned by one find_opportunities call."""

    graph: Graph
    start: str
    max_path_length: int
    path: Path
    visited: set[str]
    results: list[ArbitrageOpportunity]
    stats: SearchStats
    token: CancellationToken | None


class CycleSearch:
    """
    Finds profitable cycles through a start asset.

    The path and visited set are shared across the whole traversal and
    restored after every descent; each recorded opportunity snapshots
    the path at discovery time.

    Two closures are checked separately:
    - natural return: the node just entered is the (stable) start asset
    - forced closure: an edge leads back to the already visited start

    An edge whose rate product overflows the decimal context is pruned.
    """

    __slots__ = ("_stable_assets", "_last_stats")

    def __init__(self, stable_assets: Iterable[str] = STABLE_ASSETS) -> None:
        """
        Initialize the search.

        Args:
            stable_assets: Asset ids eligible for a natural return.
        """
        self._stable_assets = frozenset(a.lower() for a in stable_assets)
        self._last_stats = SearchStats()

    def find_opportunities(
        self,
        graph: Graph,
        start: str,
        max_path_length: int,
        token: CancellationToken | None = None,
    ) -> list[ArbitrageOpportunity]:
        """
        Enumerate profitable cycles from `start`.

        Args:
            graph: Adjacency mapping from GraphBuilder.
            start: Normalized (lowercase) start asset.
            max_path_length: Maximum nodes in a path before closing.
            token: Optional cancellation token.

        Returns:
            Opportunities in discovery order, duplicates kept. Partial
            if the token was cancelled.
        """
        stats = SearchStats()
        self._last_stats = stats

        if max_path_length < MIN_CYCLE_PATH_LENGTH or start not in graph:
            return []

        state = _SearchState(
            graph=graph,
            start=start,
            max_path_length=max_path_length,
            path=[start],
            visited={start},
            results=[],
            stats=stats,
            token=token,
        )

        with LatencyTimer() as timer:
            self._search(state, start, ONE)

        stats.elapsed_us = timer.latency_us
        stats.opportunities = len(state.results)

        if stats.cancelled:
            logger.warning(
                f"Cycle search from {start} cancelled after {stats.steps} steps, "
                f"returning {stats.opportunities} partial results"
            )
        else:
            logger.debug(
                f"Cycle search from {start}: {stats.opportunities} opportunities, "
                f"{stats.steps} steps, {stats.edges_examined} edges in "
                f"{format_duration_us(stats.elapsed_us)}"
            )

        return state.results

    def _search(self, state: _SearchState, current: str, accumulated: Decimal) -> None:
        """One DFS step at `current`, already appended to the path."""
        if len(state.path) > state.max_path_length:
            return

        if state.token is not None and state.token.cancelled:
            state.stats.cancelled = True
            return

        state.stats.steps += 1

        if self._is_natural_return(state, current, accumulated):
            self._record(state, tuple(state.path), profit_percentage(accumulated))
            return

        edges = state.graph.get(current)
        if not edges:
            return

        for edge in edges:
            state.stats.edges_examined += 1

            if edge.to not in state.visited:
                try:
                    extended = accumulated * edge.rate
                except Overflow:
                    self._prune(state, edge)
                    continue

                state.visited.add(edge.to)
                state.path.append(edge.to)

                self._search(state, edge.to, extended)

                # Backtrack
                state.visited.discard(edge.to)
                state.path.pop()

                if state.stats.cancelled:
                    return

            elif self._is_forced_closure(state, edge):
                self._close_cycle(state, accumulated, edge)

    def _is_natural_return(
        self,
        state: _SearchState,
        current: str,
        accumulated: Decimal,
    ) -> bool:
        """
        Entered the start asset as an unvisited neighbor.

        The start is visited from the outset, so only the first step
        reaches this check at the start node, where the path is too
        short.
        """
        return (
            len(state.path) >= MIN_CYCLE_PATH_LENGTH
            and current in self._stable_assets
            and current == state.start
            and accumulated > ONE
        )

    def _is_forced_closure(self, state: _SearchState, edge: Edge) -> bool:
        """Edge leads back to the visited start from a long enough path."""
        return edge.to == state.start and len(state.path) >= MIN_CYCLE_PATH_LENGTH

    def _close_cycle(self, state: _SearchState, accumulated: Decimal, edge: Edge) -> None:
        """Record the cycle closed by `edge` if it is profitable."""
        try:
            profit = profit_percentage(accumulated * edge.rate)
        except Overflow:
            self._prune(state, edge)
            return

        if profit > 0:
            self._record(state, (*state.path, edge.to), profit)

    def _prune(self, state: _SearchState, edge: Edge) -> None:
        """Drop an edge whose product leaves the decimal exponent range."""
        state.stats.pruned += 1
        logger.debug(f"Pruned {' -> '.join(state.path)} -> {edge.to}: rate product overflows")

    def _record(
        self,
        state: _SearchState,
        path: tuple[str, ...],
        profit: Decimal,
    ) -> None:
        state.results.append(ArbitrageOpportunity(path=path, profit_percentage=profit))
        logger.debug(f"Found cycle {' -> '.join(path)} at {profit}%")

    @property
    def stable_assets(self) -> frozenset[str]:
        """Assets eligible for a natural return."""
        return self._stable_assets

    @property
    def last_stats(self) -> SearchStats:
        """Counters from the most recent search."""
        return self._last_stats
