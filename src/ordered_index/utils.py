"""Comparison and randomness helpers shared by all index variants."""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence

import numpy as np

Comparator = Callable[[Any, Any], int]
PrioritySource = Callable[[], float]


def natural_order(a: Any, b: Any) -> int:
    """Three-way comparison based on the keys' own ``<`` / ``>``."""
    return (a > b) - (a < b)


def reverse_order(a: Any, b: Any) -> int:
    return (b > a) - (b < a)


def bisect_left_cmp(keys: Sequence[Any], key: Any, cmp: Comparator) -> int:
    """Index of the first element in ``keys`` that is not less than ``key``."""
    lo, hi = 0, len(keys)
    while lo < hi:
        mid = (lo + hi) // 2
        if cmp(keys[mid], key) < 0:
            lo = mid + 1
        else:
            hi = mid
    return lo


def bisect_right_cmp(keys: Sequence[Any], key: Any, cmp: Comparator) -> int:
    """Index of the first element in ``keys`` that is greater than ``key``."""
    lo, hi = 0, len(keys)
    while lo < hi:
        mid = (lo + hi) // 2
        if cmp(key, keys[mid]) < 0:
            hi = mid
        else:
            lo = mid + 1
    return lo


def make_priority_source(seed: Optional[int] = None) -> PrioritySource:
    """
    Return a zero-argument callable drawing uniform priorities in [0, 1).

    Backed by a numpy ``Generator`` so a seed makes treap shapes reproducible.
    """
    rng = np.random.default_rng(seed)

    def draw() -> float:
        return float(rng.random())

    return draw


def sequence_priority_source(priorities: Sequence[float]) -> PrioritySource:
    """Replay a fixed list of priorities, one per created node."""
    it = iter(priorities)

    def draw() -> float:
        return float(next(it))

    return draw


def short_key(key: Any) -> str:
    """Create a short representation of a key for display purposes."""
    if isinstance(key, (bytes, bytearray)):
        s = key.hex()
    else:
        s = str(key)
    return s if len(s) <= 10 else f"{s[:3]}...{s[-3:]}"


def perfect_height(n: int, fanout: int = 2) -> int:
    """Height of the shallowest tree with ``fanout``-way nodes holding ``n`` keys."""
    if n <= 0:
        return 0
    if fanout == 2:
        return int(np.ceil(np.log2(n + 1)))
    # a node of a fanout-way tree holds fanout - 1 keys
    return int(np.ceil(np.log(n + 1) / np.log(fanout)))
