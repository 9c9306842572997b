"""Weak AVL (rank-balanced) rebalancing.

Every node stores a rank (leaf = 0, null = -1). The rank difference
between a node and each of its children is 1 or 2, and every leaf has
rank 0. Insertion promotes along the path and ends with at most two
rotations; deletion demotes along the path and ends with at most two
rotations as well.

Insert, at parent ``p`` whose child ``x`` became a 0-child:
  * sibling is a 1-child        -> promote ``p``, continue upward
  * sibling is a 2-child        -> single rotation (demote ``p``) or
                                   double rotation, then stop

Delete, at parent ``p`` whose child ``x`` became a 3-child:
  * sibling ``s`` is a 2-child  -> demote ``p``, continue upward
  * ``s`` is a 2,2 node         -> demote ``p`` and ``s``, continue upward
  * otherwise                   -> single or double rotation, then stop
"""

from __future__ import annotations

from ordered_index.balance.base import Balancer
from ordered_index.balance.rotations import lift
from ordered_index.node import WAVLNode, opposite, rank_of


def rank_diff(parent: WAVLNode, child) -> int:
    return parent.rank - rank_of(child)


class WAVLBalancer(Balancer):
    name = "wavl"

    def rebalance_insert(self, index, path, node):
        x = node
        depth = len(path) - 1
        while depth >= 0:
            p, d = path[depth]
            if rank_diff(p, x) != 0:
                return
            s = p.child(opposite(d))
            if rank_diff(p, s) == 1:
                p.rank += 1
                self._log("promotions", p)
                x = p
                depth -= 1
                continue

            # p is a 0,2 node
            inner = x.child(opposite(d))
            if inner is None or rank_diff(x, inner) == 2:
                sub = lift(p, d)
                p.rank -= 1
                self._log("rotations", p)
                self._log("demotions", p)
            else:
                p.set_child(d, lift(x, opposite(d)))
                sub = lift(p, d)
                inner.rank += 1
                x.rank -= 1
                p.rank -= 1
                self._log("rotations", p, 2)
            self.replace_subtree(index, path, depth, sub)
            return

    def rebalance_delete(self, index, path, removed, child):
        depth = len(path) - 1
        if depth < 0:
            return

        p, d = path[depth]
        x = child
        # removing p's only child can leave a 2,2 leaf
        if p.is_leaf() and p.rank == 1:
            p.rank = 0
            self._log("demotions", p)
            x = p
            depth -= 1
            if depth < 0:
                return
            p, d = path[depth]

        while True:
            if rank_diff(p, x) <= 2:
                return

            s = p.child(opposite(d))
            if rank_diff(p, s) == 2:
                p.rank -= 1
                self._log("demotions", p)
            else:
                inner = s.child(d)
                outer = s.child(opposite(d))
                if rank_diff(s, inner) == 2 and rank_diff(s, outer) == 2:
                    p.rank -= 1
                    s.rank -= 1
                    self._log("demotions", p, 2)
                else:
                    self._rotate_delete(index, path, depth, p, d, s, inner, outer)
                    return

            x = p
            depth -= 1
            if depth < 0:
                return
            p, d = path[depth]

    def _rotate_delete(self, index, path, depth, p, d, s, inner, outer) -> None:
        """``p`` has a 3-child on side ``d`` and a 1-child ``s`` that is not 2,2."""
        if rank_diff(s, outer) == 1:
            sub = lift(p, opposite(d))
            s.rank += 1
            p.rank -= 1
            if p.is_leaf():
                p.rank -= 1
            self._log("rotations", p)
        else:
            p.set_child(opposite(d), lift(s, d))
            sub = lift(p, opposite(d))
            inner.rank += 2
            s.rank -= 1
            p.rank -= 2
            self._log("rotations", p, 2)
        self.replace_subtree(index, path, depth, sub)
