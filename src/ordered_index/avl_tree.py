"""Height-balanced (AVL) ordered index."""

from ordered_index.balance.avl import AVLBalancer
from ordered_index.binary_index import BinarySearchIndexBase
from ordered_index.node import AVLNode


class AVLTreeIndex(BinarySearchIndexBase):
    """|height(left) - height(right)| <= 1 at every node."""

    NODE_CLASS = AVLNode
    BALANCER_CLASS = AVLBalancer
    VARIANT = "avl"

    def height(self) -> int:
        return self._root.height if self._root is not None else 0
