"""Utilities for benchmark data generation and index creation."""

from dataclasses import dataclass
from typing import List, Tuple

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import numpy as np

from ordered_index.base import AbstractOrderedIndex
from ordered_index.factory import create_index


@dataclass
class Workload:
    """Deterministic input for one benchmark repetition."""
    keys: List[int]
    probes: List[int]
    ranges: List[Tuple[int, int]]
    delete_order: List[int]


def generate_workload(n: int, seed: int, range_queries: int = 100, range_width: int = 1000) -> Workload:
    """
    Generate deterministic random keys, lookup probes and query windows.

    This is the setup phase - not timed in benchmarks.

    Args:
        n: Number of keys to generate
        seed: Random seed for reproducibility
        range_queries: Number of range query windows
        range_width: Width of each window in key space units

    Returns:
        Workload with insert order, probes (half hits, half misses),
        range windows and a shuffled delete order

    Raises:
        ValueError: If key-space is too small for requested n
    """
    rng = np.random.default_rng(seed)

    # Key space: 2^24 = 16,777,216 unique values
    space = 1 << 24
    if space <= 2 * n:
        raise ValueError(f"Key-space too small! Required: {2 * n + 1}, Available: {space}")

    drawn = rng.choice(space, size=2 * n, replace=False)
    keys = drawn[:n]
    misses = drawn[n:]

    hits = rng.choice(keys, size=n // 2, replace=False) if n else keys
    probes = np.concatenate([hits, misses[: n - len(hits)]])
    rng.shuffle(probes)

    lows = rng.integers(0, space, size=range_queries)
    ranges = [(int(low), int(low) + range_width) for low in lows]

    return Workload(
        keys=keys.tolist(),
        probes=probes.tolist(),
        ranges=ranges,
        delete_order=rng.permutation(keys).tolist(),
    )


def build_index(variant: str, keys: List[int], min_degree: int, seed: int) -> AbstractOrderedIndex:
    """
    Create an index of ``variant`` and insert every key.

    Args:
        variant: Index variant name
        keys: Keys in insertion order
        min_degree: Minimum degree for the multiway variants
        seed: Priority seed for the treap

    Returns:
        The populated index
    """
    options = {}
    if variant in ("btree", "bplus_tree"):
        options["min_degree"] = min_degree
    elif variant == "treap":
        options["seed"] = seed
    index = create_index(variant, **options)
    index_insert = index.insert
    for key in keys:
        index_insert(key, f"val_{key}")
    return index
