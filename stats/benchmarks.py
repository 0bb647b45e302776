#!/usr/bin/env python3
"""
Benchmarks for the B-tree data structure.

This script measures:
 1. Full tree build times for several sizes and orders
 2. Structure statistics of a large random tree
 3. Per-operation cost (add, contains, remove) on trees of various sizes
 4. Per-method timings collected by the PerformanceTracker

Usage:
    python -m stats.benchmarks [--orders 4 8 64] [--sizes 100 1000 10000] [--trials T]
"""
import argparse
import time
import gc
from pprint import pprint
from dataclasses import asdict
from statistics import mean, variance

import numpy as np
from tqdm import tqdm

from btrees.btree_base import btree_stats_
from btrees.profiling import PerformanceTracker
from stats.stats_btree import random_btree_of_size, random_keys, KEY_SPACE


def bench_build(sizes: list[int], order: int) -> None:
    """Measure random_btree_of_size for various sizes."""
    for n in sizes:
        t0 = time.perf_counter()
        _ = random_btree_of_size(n, order)
        elapsed = time.perf_counter() - t0
        print(f"[bench] random_btree_of_size({n}, order={order}): {elapsed:.4f}s")


def bench_stats(n: int, order: int) -> None:
    """Build a single random tree and print its stats."""
    tree, _ = random_btree_of_size(n, order)
    stats = btree_stats_(tree)
    print(f"[bench] random_btree_of_size({n}, {order}) stats:")
    pprint(asdict(stats))


def _timed(op, args_list) -> list[float]:
    gc.collect()
    gc.disable()
    try:
        times = []
        for fn, arg in args_list:
            t0 = time.perf_counter()
            op(fn, arg)
            times.append(time.perf_counter() - t0)
    finally:
        gc.enable()
    return times


def measure_single_ops(n: int, order: int, trials: int = 200) -> dict[str, tuple[float, float]]:
    """
    Measure per-operation cost on trees of exactly `n` keys, averaged over
    `trials` independent trees. Returns {op: (mean_s, variance_s)}.
    """
    rng = np.random.default_rng()
    trees = []
    for _ in tqdm(range(trials), desc=f"build n={n}", leave=False):
        trees.append(random_btree_of_size(n, order, rng))

    fresh = random_keys(trials, rng)
    stored = [keys[int(rng.integers(len(keys)))] if keys else 0 for _, keys in trees]

    results = {}
    results["contains"] = _timed(lambda t, k: t.contains(k), zip((t for t, _ in trees), fresh))
    results["add"] = _timed(lambda t, k: t.add(k), zip((t for t, _ in trees), fresh))
    results["remove"] = _timed(lambda t, k: t.remove(k), zip((t for t, _ in trees), stored))

    return {op: (mean(ts), variance(ts) if len(ts) > 1 else 0.0) for op, ts in results.items()}


def bench_single_ops(sizes: list[int], order: int, trials: int) -> None:
    """Run measure_single_ops for each size and print results."""
    for n in tqdm(sizes, desc=f"order={order}"):
        for op, (avg, var) in measure_single_ops(n, order, trials).items():
            tqdm.write(
                f"[bench] {op:<8} size {n:<7} → avg {avg*1e6:8.2f} µs   σ²={var*1e12:8.2f} µs²"
            )


def main():
    parser = argparse.ArgumentParser(description="B-tree benchmarks")
    parser.add_argument("--orders", nargs='+', type=int, default=[4, 8, 64],
                        help="Tree orders to benchmark")
    parser.add_argument("--sizes", nargs='+', type=int, default=[100, 1000, 10_000],
                        help="Tree sizes for single-operation benchmarks")
    parser.add_argument("--trials", type=int, default=100,
                        help="Number of trials for single-operation benchmarks")
    parser.add_argument("--stats-size", type=int, default=100_000,
                        help=f"Tree size for the statistics run (keys drawn from [0, {KEY_SPACE}))")
    args = parser.parse_args()

    tracker = PerformanceTracker.get_instance()

    for order in args.orders:
        print(f"\n=== Full BTree Build (order={order}) ===")
        bench_build([10, 100, 1000, 10_000, 100_000], order)

        print(f"\n=== Random Tree Stats (order={order}) ===")
        bench_stats(args.stats_size, order)

        print(f"\n=== Single-Operation Benchmarks (order={order}) ===")
        tracker.enable()
        bench_single_ops(args.sizes, order, args.trials)
        tracker.disable()

        print("\n=== Method-Level Performance Breakdown ===")
        print(tracker.report())
        tracker.reset()


if __name__ == "__main__":
    main()
