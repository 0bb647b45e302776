"""Utility functions for testing BTree invariants."""

from btrees.btree_base import (
    BTreeBase,
    Stats
)

TREE_FLAGS = (
    "leaves_same_depth",
    "nodes_within_bounds",
    "children_count_ok",
    "is_search_tree",
    "keys_in_order",
    "size_consistent",
)

def assert_tree_invariants_tc(tc, t: BTreeBase, stats: Stats) -> None:
    """TestCase version: use inside unittest.TestCase methods."""
    for flag in TREE_FLAGS:
        tc.assertTrue(
            getattr(stats, flag),
            f"Invariant failed: {flag} is False\n{t.print_structure()}"
        )

    if not t.is_empty():
        tc.assertGreater(
            stats.key_count, 0,
            f"Invariant failed: key_count={stats.key_count} ≤ 0 for non-empty tree"
        )
        tc.assertGreater(
            stats.node_count, 0,
            f"Invariant failed: node_count={stats.node_count} ≤ 0 for non-empty tree"
        )
        tc.assertEqual(
            stats.height, t.height(),
            f"Invariant failed: stats height {stats.height} ≠ height() {t.height()}"
        )
        tc.assertIsNotNone(
            stats.least_key,
            "Invariant failed: least_key is None for non-empty tree"
        )
        tc.assertIsNotNone(
            stats.greatest_key,
            "Invariant failed: greatest_key is None for non-empty tree"
        )
        tc.assertEqual(len(t), stats.key_count,
                       f"Invariant failed: len()={len(t)} ≠ key_count={stats.key_count}")
