"""Treap rebalancing: binary search tree on keys, max-heap on priorities.

Priorities are drawn once when a node is created and never change; the
tree shape is therefore a function of the insertion order and the draws.
"""

from __future__ import annotations

from ordered_index.balance.base import Balancer
from ordered_index.balance.rotations import lift
from ordered_index.node import LEFT, RIGHT, opposite


class TreapBalancer(Balancer):
    name = "treap"

    def rebalance_insert(self, index, path, node):
        depth = len(path) - 1
        while depth >= 0:
            parent, d = path[depth]
            if node.priority <= parent.priority:
                return
            sub = lift(parent, d)
            self._log("rotations", parent)
            self.replace_subtree(index, path, depth, sub)
            depth -= 1

    def remove(self, index, path, node):
        """Rotate ``node`` down until it has at most one child, then splice it out."""
        while node.left is not None and node.right is not None:
            d = LEFT if node.left.priority > node.right.priority else RIGHT
            child = node.child(d)
            lift(node, d)
            self._log("rotations", node)
            self.replace_subtree(index, path, len(path), child)
            path.append((child, opposite(d)))

        child = node.left if node.left is not None else node.right
        self.replace_subtree(index, path, len(path), child)
        node.left = node.right = None
        self.rebalance_delete(index, path, node, child)

    def rebalance_delete(self, index, path, removed, child):
        # splicing a node with at most one child keeps the heap order
        return None
