"""Statistics for B-trees."""
# pylint: skip-file

import os
import logging
import math
import time
from statistics import mean
from typing import List, Optional, Tuple
from dataclasses import asdict
from datetime import datetime
import numpy as np

from btrees.btree import BTree
from btrees.btree_base import (
    btree_stats_,
    Stats,
)

TREE_FLAGS = (
    "leaves_same_depth",
    "nodes_within_bounds",
    "children_count_ok",
    "is_search_tree",
    "keys_in_order",
    "size_consistent",
)

# Keys are drawn from [0, KEY_SPACE)
KEY_SPACE = 1 << 24


def assert_invariants(t: BTree, stats: Stats) -> bool:
    """Check all invariants, but only log ERROR messages on failures."""
    ok = True
    for flag in TREE_FLAGS:
        if not getattr(stats, flag):
            logging.error("Invariant failed: %s is False", flag)
            ok = False

    if not t.is_empty():
        if stats.key_count <= 0:
            logging.error(
                "Invariant failed: key_count=%d ≤ 0 for non-empty tree",
                stats.key_count
            )
            ok = False
        if stats.least_key is None or stats.greatest_key is None:
            logging.error(
                "Invariant failed: least/greatest key missing for non-empty tree"
            )
            ok = False
    return ok


def random_keys(n: int, rng: Optional[np.random.Generator] = None) -> List[int]:
    """Draw `n` distinct random keys from the key space."""
    if KEY_SPACE <= n:
        raise ValueError(f"Key-space too small! Required: {n + 1}, Available: {KEY_SPACE}")
    rng = rng if rng is not None else np.random.default_rng()
    return [int(k) for k in rng.choice(KEY_SPACE, size=n, replace=False)]


def random_btree_of_size(
    n: int,
    order: int,
    rng: Optional[np.random.Generator] = None
) -> Tuple[BTree, List[int]]:
    """Create a B-tree of the given order holding `n` random keys."""
    keys = random_keys(n, rng)
    tree = BTree(order)
    tree_add = tree.add
    for key in keys:
        tree_add(key)
    return tree, keys


def random_churn(
    tree: BTree,
    keys: List[int],
    n_ops: int,
    rng: Optional[np.random.Generator] = None
) -> List[int]:
    """
    Apply `n_ops` random operations: each removes a stored key or inserts a
    fresh one with equal probability. Returns the keys stored afterwards.
    """
    rng = rng if rng is not None else np.random.default_rng()
    present = list(keys)
    for coin in rng.random(n_ops):
        if present and coin < 0.5:
            victim = present.pop(int(rng.integers(len(present))))
            tree.remove(victim)
        else:
            key = int(rng.integers(KEY_SPACE))
            if tree.add(key):
                present.append(key)
    return present


def repeated_experiment(
        size: int,
        repetitions: int,
        order: int,
    ) -> None:
    """
    Repeatedly builds random B-trees with `size` keys, churns them, and
    logs averages and variances of their shape and timings.
    """
    t_all_0 = time.perf_counter()
    rng = np.random.default_rng()

    results: List[Stats] = []
    times_build = []
    times_churn = []
    times_stats = []

    for _ in range(repetitions):
        t0 = time.perf_counter()
        tree, keys = random_btree_of_size(size, order, rng)
        times_build.append(time.perf_counter() - t0)

        t0 = time.perf_counter()
        random_churn(tree, keys, size // 2, rng)
        times_churn.append(time.perf_counter() - t0)

        t0 = time.perf_counter()
        stats = btree_stats_(tree)
        times_stats.append(time.perf_counter() - t0)

        results.append(stats)
        assert_invariants(tree, stats)
        logging.debug("Tree stats: %s", asdict(stats))

    # Minimum possible height for this many keys
    perfect_height = math.ceil(math.log(size + 1, order)) if size > 0 else 0

    heights     = np.array([s.height for s in results], dtype=float)
    node_counts = np.array([s.node_count for s in results], dtype=float)
    key_counts  = np.array([s.key_count for s in results], dtype=float)
    fill        = np.array([s.key_count / s.key_slot_count for s in results if s.key_slot_count])
    leaf_counts = np.array([s.leaf_count for s in results], dtype=float)

    rows = [
        ("Key count",           key_counts.mean(),  key_counts.var()),
        ("Node count",          node_counts.mean(), node_counts.var()),
        ("Leaf count",          leaf_counts.mean(), leaf_counts.var()),
        ("Fill factor",         fill.mean() if fill.size else 0.0, fill.var() if fill.size else 0.0),
        ("Height",              heights.mean(),     heights.var()),
        ("Perfect height",      perfect_height,     None),
    ]

    header = f"{'Metric':<20} {'Avg':>15} {'(Var)':>15}"
    sep_line = "-" * len(header)

    logging.info(header)
    logging.info(sep_line)
    for name, avg, var in rows:
        if var is None:
            logging.info(f"{name:<20} {avg:>15}")
        else:
            var_str = f"({var:.2f})"
            avg_fmt = f"{avg:15.2f}"
            logging.info(f"{name:<20} {avg_fmt} {var_str:>15}")

    sum_build = sum(times_build)
    sum_churn = sum(times_churn)
    sum_stats = sum(times_stats)
    total_sum = sum_build + sum_churn + sum_stats

    perf_rows = [
        ("Build time (s)", times_build, sum_build),
        ("Churn time (s)", times_churn, sum_churn),
        ("Stats time (s)", times_stats, sum_stats),
    ]

    header = f"{'Metric':<20}{'Avg(s)':>13}{'Var(s)':>13}{'Total(s)':>13}{'%Total':>10}"
    sep = "-" * len(header)

    logging.info("")
    logging.info("Performance summary:")
    logging.info(header)
    logging.info(sep)
    for name, times, total in perf_rows:
        pct = (total / total_sum * 100) if total_sum else 0
        logging.info(
            f"{name:<20}"
            f"{mean(times):13.6f}"
            f"{np.var(times):13.6f}"
            f"{total:13.6f}"
            f"{pct:10.2f}%"
        )

    logging.info(sep)
    logging.info("Execution time: %.3f seconds", time.perf_counter() - t_all_0)


if __name__ == "__main__":
    log_dir = os.path.join(os.getcwd(), "stats/logs")
    os.makedirs(log_dir, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = os.path.join(log_dir, f"run_{ts}.log")

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.FileHandler(log_path, mode="w"),
            logging.StreamHandler()
        ]
    )

    sizes = [1000, 10_000]
    orders = [4, 5, 8, 64]
    repetitions = 5

    for n in sizes:
        for order in orders:
            logging.info("")
            logging.info(f"---------------- NOW RUNNING EXPERIMENT: n = {n}, order = {order}, repetitions = {repetitions} ----------------")
            t0 = time.perf_counter()
            repeated_experiment(size=n, repetitions=repetitions, order=order)
            logging.info(f"Total experiment time: {time.perf_counter() - t0:.3f} seconds")
