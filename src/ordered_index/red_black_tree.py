"""Red-Black ordered index."""

from __future__ import annotations

from typing import Any, Optional

from ordered_index.balance.red_black import RedBlackBalancer
from ordered_index.binary_index import BinarySearchIndexBase
from ordered_index.node import Color, RedBlackNode


class RedBlackTreeIndex(BinarySearchIndexBase):
    """
    Red-Black tree. Nodes keep a weak reference to their parent, which the
    balancer uses for its upward walks; every relink goes through
    :meth:`_link` / :meth:`_set_root` so the back-references stay in sync
    with the owning child links.
    """

    NODE_CLASS = RedBlackNode
    BALANCER_CLASS = RedBlackBalancer
    VARIANT = "red_black"

    def _new_node(self, key: Any, value: Any) -> RedBlackNode:
        return RedBlackNode(key, value, Color.RED)

    def _set_root(self, node: Optional[RedBlackNode]) -> None:
        self._root = node
        if node is not None:
            node.parent = None

    def _link(self, parent: RedBlackNode, direction: int, child: Optional[RedBlackNode]) -> None:
        parent.set_child(direction, child)
        if child is not None:
            child.parent = parent

    def black_height(self) -> int:
        """Black nodes on the path from the root to the leftmost null."""
        count = 0
        node = self._root
        while node is not None:
            if node.color is Color.BLACK:
                count += 1
            node = node.left
        return count
