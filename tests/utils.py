"""Utility functions for testing ordered index invariants."""

from typing import Optional

from ordered_index.base import AbstractOrderedIndex
from ordered_index.tree_stats import Stats

INDEX_FLAGS = (
    "is_search_tree",
    "is_balanced",
    "leaf_chain_ok",
)


def assert_index_invariants_tc(tc, index: AbstractOrderedIndex, stats: Stats, err_msg: Optional[str] = "") -> None:
    """TestCase version: use inside unittest.TestCase methods."""
    for flag in INDEX_FLAGS:
        tc.assertTrue(
            getattr(stats, flag),
            f"Invariant failed: {flag} is False \n\n{err_msg}"
        )

    tc.assertEqual(
        stats.entry_count, len(index),
        f"Invariant failed: entry_count={stats.entry_count} != len(index)={len(index)}\n\n{err_msg}"
    )

    if not index.is_empty():
        tc.assertGreater(
            stats.node_count, 0,
            f"Invariant failed: node_count={stats.node_count} ≤ 0 for non-empty index\n\n{err_msg}"
        )
        tc.assertGreater(
            stats.height, 0,
            f"Invariant failed: height={stats.height} ≤ 0 for non-empty index\n\n{err_msg}"
        )
        tc.assertEqual(
            stats.height, index.height(),
            f"Invariant failed: stats.height={stats.height} != index.height()={index.height()}\n\n{err_msg}"
        )
        tc.assertIsNotNone(
            stats.least_key,
            f"Invariant failed: least_key is None for non-empty index\n\n{err_msg}"
        )
        tc.assertIsNotNone(
            stats.greatest_key,
            f"Invariant failed: greatest_key is None for non-empty index\n\n{err_msg}"
        )
    else:
        tc.assertEqual(stats.node_count, 0, f"Empty index has nodes\n\n{err_msg}")
