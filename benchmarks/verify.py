"""Correctness verification for benchmark indexes."""

import logging
from typing import List, Optional

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from ordered_index.base import AbstractOrderedIndex
from ordered_index.invariants import InvariantError
from ordered_index.tree_stats import Stats


# Index invariant flags to check
INDEX_FLAGS = (
    "is_search_tree",
    "is_balanced",
    "leaf_chain_ok",
)


def verify_invariants(index: AbstractOrderedIndex, stats: Stats) -> bool:
    """
    Check all index invariants.

    This is the verify phase - not timed in benchmarks.

    Args:
        index: The index to verify
        stats: Computed statistics for the index

    Returns:
        True if all invariants pass, False otherwise
    """
    all_passed = True

    for flag in INDEX_FLAGS:
        if not getattr(stats, flag):
            logging.error("Invariant failed: %s is False", flag)
            all_passed = False

    try:
        index.check_invariants()
    except InvariantError as e:
        logging.error("Structural check failed: %s", e)
        all_passed = False

    if stats.entry_count != len(index):
        logging.error(
            "Invariant failed: entry_count=%d != len(index)=%d",
            stats.entry_count, len(index)
        )
        all_passed = False

    if not index.is_empty():
        if stats.node_count <= 0:
            logging.error(
                "Invariant failed: node_count=%d ≤ 0 for non-empty index",
                stats.node_count
            )
            all_passed = False
        if stats.least_key is None or stats.greatest_key is None:
            logging.error("Invariant failed: least/greatest key missing for non-empty index")
            all_passed = False

    return all_passed


def check_keys(index: AbstractOrderedIndex, expected_keys: Optional[List[int]] = None) -> bool:
    """
    Walk the index in order and compare against ``expected_keys``.

    This is the verify phase - not timed in benchmarks.
    """
    keys = list(index.keys())
    order_ok = all(a < b for a, b in zip(keys, keys[1:]))
    if not order_ok:
        logging.error("Keys are not in ascending order")

    presence_ok = True
    if expected_keys is not None:
        presence_ok = len(keys) == len(expected_keys) and set(keys) == set(expected_keys)
        if not presence_ok:
            logging.error(
                "Key mismatch: index holds %d keys, expected %d",
                len(keys), len(expected_keys)
            )
    return order_ok and presence_ok
