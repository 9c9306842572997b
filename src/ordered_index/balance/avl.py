"""AVL rebalancing.

Heights are stored on the nodes (leaf = 1, null = 0). After an insert or a
splice the ancestors on the search path are retraced bottom-up; the walk
stops at the first ancestor whose height is unchanged, since nothing above
it can have changed either.

+--------------------+---------------------------+
| Operation          | Rotations                 |
+====================+===========================+
| rebalance_insert   | at most 1 single / double |
| rebalance_delete   | O(log n)                  |
+--------------------+---------------------------+
"""

from __future__ import annotations

from ordered_index.balance.base import Balancer
from ordered_index.balance.rotations import rotate_left, rotate_right
from ordered_index.node import AVLNode, height_of


def update_height(node: AVLNode) -> None:
    node.height = 1 + max(height_of(node.left), height_of(node.right))


def balance_factor(node: AVLNode) -> int:
    return height_of(node.left) - height_of(node.right)


class AVLBalancer(Balancer):
    name = "avl"

    def rebalance_insert(self, index, path, node):
        self._retrace(index, path)

    def rebalance_delete(self, index, path, removed, child):
        self._retrace(index, path)

    def _retrace(self, index, path) -> None:
        for depth in range(len(path) - 1, -1, -1):
            node = path[depth][0]
            old_height = node.height
            sub = self._balance(node)
            if sub is not node:
                self.replace_subtree(index, path, depth, sub)
            if sub.height == old_height:
                break

    def _balance(self, node: AVLNode) -> AVLNode:
        """Fix the balance factor at ``node``; return the subtree's new root."""
        bf = balance_factor(node)

        if bf > 1:
            # left-right: straighten the left child first
            if balance_factor(node.left) < 0:
                node.left = self._rotate_left(node.left)
            return self._rotate_right(node)

        if bf < -1:
            if balance_factor(node.right) > 0:
                node.right = self._rotate_right(node.right)
            return self._rotate_left(node)

        update_height(node)
        return node

    def _rotate_left(self, node: AVLNode) -> AVLNode:
        self._log("rotations", node)
        pivot = rotate_left(node)
        update_height(node)
        update_height(pivot)
        return pivot

    def _rotate_right(self, node: AVLNode) -> AVLNode:
        self._log("rotations", node)
        pivot = rotate_right(node)
        update_height(node)
        update_height(pivot)
        return pivot
