"""Unbalanced binary search tree, the baseline for statistics and benchmarks."""

from ordered_index.balance.base import NoopBalancer
from ordered_index.binary_index import BinarySearchIndexBase
from ordered_index.node import BinaryNode


class BSTIndex(BinarySearchIndexBase):
    """Plain BST: no balance invariant, height is O(n) for sorted input."""

    NODE_CLASS = BinaryNode
    BALANCER_CLASS = NoopBalancer
    VARIANT = "bst"
