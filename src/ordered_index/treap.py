"""Randomized treap ordered index."""

from __future__ import annotations

from typing import Any, Optional

from ordered_index.balance.treap import TreapBalancer
from ordered_index.binary_index import BinarySearchIndexBase
from ordered_index.node import TreapNode
from ordered_index.utils import Comparator, PrioritySource, make_priority_source


class TreapIndex(BinarySearchIndexBase):
    """
    Binary search tree on keys and max-heap on node priorities.

    Args:
        cmp: three-way key comparison (natural ordering by default)
        priority_source: zero-argument callable returning a priority in [0, 1);
            drawn once per created node
        seed: seed for the default numpy-backed source, ignored when
            ``priority_source`` is given
    """

    NODE_CLASS = TreapNode
    BALANCER_CLASS = TreapBalancer
    VARIANT = "treap"

    def __init__(
        self,
        cmp: Optional[Comparator] = None,
        check_invariants: bool = False,
        priority_source: Optional[PrioritySource] = None,
        seed: Optional[int] = None,
    ):
        super().__init__(cmp, check_invariants)
        self.priority_source = (
            priority_source if priority_source is not None else make_priority_source(seed)
        )

    def _new_node(self, key: Any, value: Any) -> TreapNode:
        return TreapNode(key, value, self.priority_source())
