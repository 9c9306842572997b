"""Shared invariant-checking utilities.

Used by :meth:`AbstractOrderedIndex.check_invariants`, the stats script
and the test suite. Every check raises :class:`InvariantError` on the
first violation it finds; nothing here mutates the index.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Callable, List, Optional

from ordered_index.logging_config import get_logger
from ordered_index.node import (
    AVLNode,
    BinaryNode,
    BPlusInternalNode,
    BPlusLeafNode,
    BTreeNode,
    Color,
    RedBlackNode,
    TreapNode,
    WAVLNode,
    height_of,
    rank_of,
)

if TYPE_CHECKING:
    from ordered_index.base import AbstractOrderedIndex

logger = get_logger(__name__)


class InvariantError(AssertionError):
    """Raised when a structural invariant of an ordered index is violated."""


def _fail(message: str) -> None:
    logger.error(f"Invariant failed: {message}")
    raise InvariantError(f"Invariant failed: {message}")


def check_strictly_ascending(keys: List[Any], cmp: Callable[[Any, Any], int], where: str = "") -> None:
    for a, b in zip(keys, keys[1:]):
        if cmp(a, b) >= 0:
            _fail(f"keys not strictly ascending{where}: {a!r} before {b!r}")


# ----------------------------------------------------------------------
# Binary variants
# ----------------------------------------------------------------------

def _binary_nodes(root: Optional[BinaryNode]):
    """Pre-order walk yielding ``(node, low, high)`` exclusive key bounds."""
    if root is None:
        return
    stack = [(root, None, None)]
    while stack:
        node, low, high = stack.pop()
        yield node, low, high
        if node.right is not None:
            stack.append((node.right, node, high))
        if node.left is not None:
            stack.append((node.left, low, node))


def check_binary_search_tree(root: Optional[BinaryNode], cmp) -> int:
    """Ordering invariant on a binary tree; returns the node count."""
    count = 0
    for node, low, high in _binary_nodes(root):
        count += 1
        if low is not None and cmp(node.key, low.key) <= 0:
            _fail(f"key {node.key!r} not greater than ancestor {low.key!r}")
        if high is not None and cmp(node.key, high.key) >= 0:
            _fail(f"key {node.key!r} not smaller than ancestor {high.key!r}")
    return count


def check_avl(root: Optional[AVLNode]) -> None:
    for node, _, _ in _binary_nodes(root):
        hl, hr = height_of(node.left), height_of(node.right)
        if node.height != 1 + max(hl, hr):
            _fail(f"stale height {node.height} at key {node.key!r}, expected {1 + max(hl, hr)}")
        if abs(hl - hr) > 1:
            _fail(f"balance factor {hl - hr} at key {node.key!r}")


def check_wavl(root: Optional[WAVLNode]) -> None:
    for node, _, _ in _binary_nodes(root):
        for child in (node.left, node.right):
            diff = node.rank - rank_of(child)
            if diff not in (1, 2):
                _fail(f"rank difference {diff} below key {node.key!r}")
        if node.is_leaf() and node.rank != 0:
            _fail(f"leaf {node.key!r} has rank {node.rank}")


def check_red_black(root: Optional[RedBlackNode]) -> int:
    """Red-Black rules plus parent consistency; returns the black height."""
    if root is None:
        return 0
    if root.color is not Color.BLACK:
        _fail("root is red")
    if root.parent is not None:
        _fail("root has a parent reference")

    black_height = None
    stack = [(root, 1)]
    while stack:
        node, blacks = stack.pop()
        for child in (node.left, node.right):
            if child is None:
                if black_height is None:
                    black_height = blacks
                elif blacks != black_height:
                    _fail(f"black height {blacks} below key {node.key!r}, expected {black_height}")
                continue
            if child.parent is not node:
                _fail(f"parent reference of {child.key!r} does not point to {node.key!r}")
            if node.color is Color.RED and child.color is Color.RED:
                _fail(f"red key {node.key!r} has red child {child.key!r}")
            stack.append((child, blacks + (child.color is Color.BLACK)))
    return black_height


def check_treap(root: Optional[TreapNode]) -> None:
    for node, _, _ in _binary_nodes(root):
        for child in (node.left, node.right):
            if child is not None and child.priority > node.priority:
                _fail(f"heap order broken: {child.key!r} ({child.priority}) below {node.key!r} ({node.priority})")


# ----------------------------------------------------------------------
# Multiway variants
# ----------------------------------------------------------------------

def _check_node_bounds(node, t: int, is_root: bool) -> None:
    n = node.key_count()
    if n > 2 * t - 1:
        _fail(f"node {node!r} has {n} keys, max is {2 * t - 1}")
    if not is_root and n < t - 1:
        _fail(f"node {node!r} has {n} keys, min is {t - 1}")
    if is_root and n == 0:
        _fail("root node has no keys")


def check_btree(root: Optional[BTreeNode], t: int, cmp) -> int:
    """Key bounds, ordering, child counts and uniform leaf depth; returns entry count."""
    if root is None:
        return 0
    entries = 0
    leaf_depth = None
    stack = [(root, 1, None, None)]
    while stack:
        node, depth, low, high = stack.pop()
        _check_node_bounds(node, t, node is root)
        if len(node.values) != len(node.keys):
            _fail(f"node {node!r} has {len(node.values)} values for {len(node.keys)} keys")
        check_strictly_ascending(node.keys, cmp, f" in {node!r}")
        if low is not None and cmp(node.keys[0], low) <= 0:
            _fail(f"node {node!r} violates lower bound {low!r}")
        if high is not None and cmp(node.keys[-1], high) >= 0:
            _fail(f"node {node!r} violates upper bound {high!r}")
        entries += len(node.keys)

        if node.is_leaf():
            if leaf_depth is None:
                leaf_depth = depth
            elif depth != leaf_depth:
                _fail(f"leaf {node!r} at depth {depth}, expected {leaf_depth}")
            continue

        if len(node.children) != len(node.keys) + 1:
            _fail(f"node {node!r} has {len(node.children)} children for {len(node.keys)} keys")
        bounds = [low] + list(node.keys) + [high]
        for j, child in enumerate(node.children):
            stack.append((child, depth + 1, bounds[j], bounds[j + 1]))
    return entries


def check_bplus_tree(root, t: int, cmp, chain) -> int:
    """
    B+tree rules: bounds, separator routing, values only in leaves, equal
    leaf depth, and a leaf chain that visits exactly the tree's leaves in
    key order. Returns the entry count.
    """
    if root is None:
        if chain.head is not None:
            _fail("empty tree with a non-empty leaf chain")
        return 0

    leaves_in_order: List[BPlusLeafNode] = []
    leaf_depth = None
    # low is inclusive, high exclusive for B+ separators
    stack = [(root, 1, None, None)]
    while stack:
        node, depth, low, high = stack.pop()
        _check_node_bounds(node, t, node is root)
        check_strictly_ascending(node.keys, cmp, f" in {node!r}")
        if node.keys:
            if low is not None and cmp(node.keys[0], low) < 0:
                _fail(f"node {node!r} has key below separator {low!r}")
            if high is not None and cmp(node.keys[-1], high) >= 0:
                _fail(f"node {node!r} has key not below separator {high!r}")

        if isinstance(node, BPlusLeafNode):
            if len(node.values) != len(node.keys):
                _fail(f"leaf {node!r} has {len(node.values)} values for {len(node.keys)} keys")
            if leaf_depth is None:
                leaf_depth = depth
            elif depth != leaf_depth:
                _fail(f"leaf {node!r} at depth {depth}, expected {leaf_depth}")
            leaves_in_order.append(node)
            continue

        if not isinstance(node, BPlusInternalNode):
            _fail(f"unexpected node type {type(node).__name__}")
        if hasattr(node, "values"):
            _fail(f"internal node {node!r} holds values")
        if len(node.children) != len(node.keys) + 1:
            _fail(f"node {node!r} has {len(node.children)} children for {len(node.keys)} keys")
        bounds = [low] + list(node.keys) + [high]
        # push right to left so leaves come off the stack in key order
        for j in range(len(node.children) - 1, -1, -1):
            stack.append((node.children[j], depth + 1, bounds[j], bounds[j + 1]))

    check_leaf_chain(chain, leaves_in_order, cmp)
    return sum(len(leaf.keys) for leaf in leaves_in_order)


def check_leaf_chain(chain, expected_leaves: List[BPlusLeafNode], cmp) -> None:
    """The chain must list exactly ``expected_leaves`` in order with ascending keys."""
    seen = set()
    walked = []
    for leaf in chain:
        if id(leaf) in seen:
            _fail("leaf chain contains a cycle")
        seen.add(id(leaf))
        walked.append(leaf)
        if len(walked) > len(expected_leaves):
            _fail("leaf chain is longer than the number of leaves")

    if len(walked) != len(expected_leaves) or any(a is not b for a, b in zip(walked, expected_leaves)):
        _fail(f"leaf chain {[l.keys for l in walked]} does not match leaves {[l.keys for l in expected_leaves]}")

    prev_last = None
    for leaf in walked:
        if leaf.keys:
            if prev_last is not None and cmp(prev_last, leaf.keys[0]) >= 0:
                _fail(f"leaf chain out of order at {leaf.keys[0]!r}")
            prev_last = leaf.keys[-1]


# ----------------------------------------------------------------------
# Dispatch
# ----------------------------------------------------------------------

def max_height(n: int, variant: str) -> Optional[float]:
    """Worst-case height of a valid ``variant`` tree with ``n`` keys, None if unbounded."""
    if n <= 0:
        return 0
    if variant == "avl":
        return 1.4405 * math.log2(n + 2) - 0.3277 + 1
    if variant == "red_black":
        return 2 * math.log2(n + 1)
    if variant == "wavl":
        return 2 * math.log2(n + 1) + 1
    return None


def assert_index_invariants(index: AbstractOrderedIndex) -> None:
    """Run every check applicable to ``index``'s variant."""
    root = index.root_node()
    cmp = index.cmp
    variant = index.VARIANT

    if variant in ("btree", "bplus_tree"):
        if variant == "btree":
            count = check_btree(root, index.t, cmp)
        else:
            count = check_bplus_tree(root, index.t, cmp, index.chain)
    else:
        count = check_binary_search_tree(root, cmp)
        if variant == "avl":
            check_avl(root)
        elif variant == "red_black":
            check_red_black(root)
        elif variant == "wavl":
            check_wavl(root)
        elif variant == "treap":
            check_treap(root)

    if count != len(index):
        _fail(f"index reports {len(index)} entries, structure holds {count}")

    bound = max_height(count, variant)
    if bound is not None and index.height() > bound:
        _fail(f"height {index.height()} exceeds {bound:.2f} for {count} keys")
