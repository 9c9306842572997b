"""Statistics for ordered index structures."""

from __future__ import annotations

import collections
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict

from ordered_index.invariants import InvariantError, assert_index_invariants
from ordered_index.logging_config import get_logger
from ordered_index.node import BPlusLeafNode

if TYPE_CHECKING:
    from ordered_index.base import AbstractOrderedIndex

logger = get_logger(__name__)


@dataclass
class Stats:
    """Aggregated statistics for an ordered index."""

    variant: str
    height: int
    node_count: int
    entry_count: int
    leaf_count: int
    key_slot_count: int
    least_key: Any | None
    greatest_key: Any | None
    is_search_tree: bool
    is_balanced: bool
    leaf_chain_ok: bool
    avg_fill: float = 0.0
    depth_hist: Dict[int, int] = field(default_factory=dict)
    structural_counts: Dict[str, int] = field(default_factory=dict)


def index_stats(index: AbstractOrderedIndex) -> Stats:
    """
    Returns aggregated statistics for ``index`` in **O(n)** time.

    Node-level figures are collected through the generic ``key_count`` /
    ``child_at`` accessors, so the same walk serves binary and multiway
    variants. ``is_balanced`` reflects the full invariant check.
    """
    root = index.root_node()
    counts = dict(getattr(index.balancer, "counts", {}))

    if root is None:
        return Stats(
            variant=index.VARIANT,
            height=0,
            node_count=0,
            entry_count=0,
            leaf_count=0,
            key_slot_count=0,
            least_key=None,
            greatest_key=None,
            is_search_tree=True,
            is_balanced=True,
            leaf_chain_ok=True,
            structural_counts=counts,
        )

    depth_hist = collections.Counter()
    node_count = 0
    leaf_count = 0
    key_slots = 0
    entry_count = 0
    stack = [(root, 1)]
    while stack:
        node, depth = stack.pop()
        node_count += 1
        depth_hist[depth] += 1
        key_slots += node.key_count()
        if node.is_leaf():
            leaf_count += 1
        children = list(node.children_iter())
        # B+ internal keys are separator copies, entries live in leaves
        if index.VARIANT != "bplus_tree" or isinstance(node, BPlusLeafNode):
            entry_count += node.key_count()
        for child in children:
            stack.append((child, depth + 1))

    keys = [k for k, _ in index.items()]
    is_search_tree = all(index.cmp(a, b) < 0 for a, b in zip(keys, keys[1:]))

    try:
        assert_index_invariants(index)
        is_balanced = True
    except InvariantError:
        is_balanced = False

    leaf_chain_ok = True
    if index.VARIANT == "bplus_tree":
        chained = sum(len(leaf.keys) for leaf in index.chain)
        leaf_chain_ok = chained == entry_count and len(keys) == entry_count

    capacity = getattr(index, "t", None)
    if capacity is not None:
        avg_fill = key_slots / (node_count * (2 * capacity - 1))
    else:
        avg_fill = 1.0

    return Stats(
        variant=index.VARIANT,
        height=max(depth_hist),
        node_count=node_count,
        entry_count=entry_count,
        leaf_count=leaf_count,
        key_slot_count=key_slots,
        least_key=keys[0] if keys else None,
        greatest_key=keys[-1] if keys else None,
        is_search_tree=is_search_tree,
        is_balanced=is_balanced,
        leaf_chain_ok=leaf_chain_ok,
        avg_fill=avg_fill,
        depth_hist=dict(depth_hist),
        structural_counts=counts,
    )
