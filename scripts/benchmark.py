#!/usr/bin/env python3
"""
Cycle Search Benchmark Script.

Measures graph build and search latency on synthetic markets of
increasing density and depth.
"""

import random
import statistics
import sys
from decimal import Decimal
from pathlib import Path

# Add src to path for direct execution
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cyclearb.core.types import ExchangePair, Graph
from cyclearb.strategy.cycle_search import CycleSearch
from cyclearb.strategy.graph import GraphBuilder
from cyclearb.utils.time import format_duration_us, get_timestamp_us


def make_market(assets: int, density: float, seed: int = 7) -> list[ExchangePair]:
    """
    Random market where each asset pair is quoted with probability `density`.

    Prices are consistent up to +/-0.5% noise, so a few cycles are
    profitable.
    """
    rng = random.Random(seed)
    names = ["usdt"] + [f"a{i}" for i in range(1, assets)]
    prices = {name: Decimal(str(round(rng.uniform(0.1, 1000), 6))) for name in names}
    prices["usdt"] = Decimal(1)

    pairs: list[ExchangePair] = []
    for i, base in enumerate(names):
        for target in names[i + 1 :]:
            if rng.random() > density:
                continue
            noise = Decimal(str(round(rng.uniform(0.995, 1.005), 6)))
            pairs.append(ExchangePair(base, target, prices[base] / prices[target] * noise))
    return pairs


def summarize_latencies(latencies: list[int]) -> dict[str, float]:
    return {
        "min": min(latencies),
        "max": max(latencies),
        "avg": statistics.mean(latencies),
        "p50": statistics.median(latencies),
    }


def benchmark_build(pairs: list[ExchangePair], iterations: int = 200) -> dict[str, float]:
    """Benchmark graph construction latency."""
    builder = GraphBuilder()
    latencies: list[int] = []

    for _ in range(iterations):
        start = get_timestamp_us()
        builder.build(pairs)
        latencies.append(get_timestamp_us() - start)

    return summarize_latencies(latencies)


def benchmark_search(
    graph: Graph,
    max_path_length: int,
    iterations: int = 5,
) -> tuple[dict[str, float], int, int]:
    """Benchmark one search depth; also returns opportunities and steps."""
    search = CycleSearch()
    latencies: list[int] = []
    found = 0

    for _ in range(iterations):
        start = get_timestamp_us()
        found = len(search.find_opportunities(graph, "usdt", max_path_length))
        latencies.append(get_timestamp_us() - start)

    return summarize_latencies(latencies), found, search.last_stats.steps


def format_stats(stats: dict[str, float]) -> str:
    """Format stats for display."""
    return (
        f"min={format_duration_us(int(stats['min']))}, "
        f"avg={format_duration_us(int(stats['avg']))}, "
        f"p50={format_duration_us(int(stats['p50']))}, "
        f"max={format_duration_us(int(stats['max']))}"
    )


def main() -> int:
    """Run all benchmarks."""
    print("=" * 70)
    print("  CYCLE SEARCH BENCHMARK")
    print("=" * 70)
    print()

    for assets, density in ((20, 0.3), (40, 0.2), (80, 0.1)):
        pairs = make_market(assets, density)
        graph = GraphBuilder().build(pairs)

        print(f"Market: {assets} assets, {len(pairs)} pairs")
        print(f"   build  {format_stats(benchmark_build(pairs))}")

        for depth in (3, 4, 5):
            stats, found, steps = benchmark_search(graph, depth)
            print(f"   depth {depth}  {format_stats(stats)}  ({found} cycles, {steps} steps)")
        print()

    return 0


if __name__ == "__main__":
    sys.exit(main())
