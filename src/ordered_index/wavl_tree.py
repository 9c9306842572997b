"""Weak AVL (rank-balanced) ordered index."""

from ordered_index.balance.wavl import WAVLBalancer
from ordered_index.binary_index import BinarySearchIndexBase
from ordered_index.node import WAVLNode


class WAVLTreeIndex(BinarySearchIndexBase):
    NODE_CLASS = WAVLNode
    BALANCER_CLASS = WAVLBalancer
    VARIANT = "wavl"

    def root_rank(self) -> int:
        return self._root.rank if self._root is not None else -1
