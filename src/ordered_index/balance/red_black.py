"""Red-Black rebalancing with parent back-references.

Unlike the other rotation balancers this one walks upward through each
node's (weak) ``parent`` reference instead of the descent path, following
the classic insert and delete fix-up procedures. Null children count as
black; the fix-up loops treat a missing node explicitly.
"""

from __future__ import annotations

from typing import Optional

from ordered_index.balance.base import Balancer
from ordered_index.node import Color, RedBlackNode, color_of

RED = Color.RED
BLACK = Color.BLACK


class RedBlackBalancer(Balancer):
    name = "red_black"

    # ------------------------------------------------------------------
    # Rotations (parent-aware)
    # ------------------------------------------------------------------

    def _rotate_left(self, index, x: RedBlackNode) -> None:
        self._log("rotations", x)
        y = x.right
        x.right = y.left
        if y.left is not None:
            y.left.parent = x
        self._replace_child(index, x, y)
        y.left = x
        x.parent = y

    def _rotate_right(self, index, x: RedBlackNode) -> None:
        self._log("rotations", x)
        y = x.left
        x.left = y.right
        if y.right is not None:
            y.right.parent = x
        self._replace_child(index, x, y)
        y.right = x
        x.parent = y

    @staticmethod
    def _replace_child(index, old: RedBlackNode, new: Optional[RedBlackNode]) -> None:
        """Put ``new`` where ``old`` hangs from its parent (or the root)."""
        parent = old.parent
        if parent is None:
            index._set_root(new)
        elif old is parent.left:
            parent.left = new
        else:
            parent.right = new
        if new is not None:
            new.parent = parent

    # ------------------------------------------------------------------
    # Insert
    # ------------------------------------------------------------------

    def rebalance_insert(self, index, path, node):
        z = node
        while z.parent is not None and z.parent.color is RED:
            p = z.parent
            g = p.parent
            if p is g.left:
                uncle = g.right
                if color_of(uncle) is RED:
                    p.color = BLACK
                    uncle.color = BLACK
                    g.color = RED
                    self._log("recolors", g, 3)
                    z = g
                    continue
                if z is p.right:
                    z = p
                    self._rotate_left(index, z)
                    p = z.parent
                p.color = BLACK
                g.color = RED
                self._log("recolors", g, 2)
                self._rotate_right(index, g)
            else:
                uncle = g.left
                if color_of(uncle) is RED:
                    p.color = BLACK
                    uncle.color = BLACK
                    g.color = RED
                    self._log("recolors", g, 3)
                    z = g
                    continue
                if z is p.left:
                    z = p
                    self._rotate_right(index, z)
                    p = z.parent
                p.color = BLACK
                g.color = RED
                self._log("recolors", g, 2)
                self._rotate_left(index, g)

        root = index.root_node()
        if root.color is RED:
            root.color = BLACK
            self._log("recolors", root)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def remove(self, index, path, node):
        z = node
        y_color = z.color
        if z.left is None:
            x = z.right
            x_parent = z.parent
            self._replace_child(index, z, z.right)
        elif z.right is None:
            x = z.left
            x_parent = z.parent
            self._replace_child(index, z, z.left)
        else:
            y = z.right
            while y.left is not None:
                y = y.left
            y_color = y.color
            x = y.right
            if y.parent is z:
                x_parent = y
            else:
                x_parent = y.parent
                self._replace_child(index, y, y.right)
                y.right = z.right
                y.right.parent = y
            self._replace_child(index, z, y)
            y.left = z.left
            y.left.parent = y
            y.color = z.color

        z.left = z.right = None
        z.parent = None
        if y_color is BLACK:
            self._delete_fixup(index, x, x_parent)

    def rebalance_delete(self, index, path, removed, child):
        # remove() runs the fix-up itself, it needs the removed color
        return None

    def _delete_fixup(self, index, x: Optional[RedBlackNode], parent: Optional[RedBlackNode]) -> None:
        while x is not index.root_node() and color_of(x) is BLACK:
            if x is parent.left:
                w = parent.right
                if w.color is RED:
                    w.color = BLACK
                    parent.color = RED
                    self._log("recolors", w, 2)
                    self._rotate_left(index, parent)
                    w = parent.right
                if color_of(w.left) is BLACK and color_of(w.right) is BLACK:
                    w.color = RED
                    self._log("recolors", w)
                    x = parent
                    parent = x.parent
                else:
                    if color_of(w.right) is BLACK:
                        w.left.color = BLACK
                        w.color = RED
                        self._log("recolors", w, 2)
                        self._rotate_right(index, w)
                        w = parent.right
                    w.color = parent.color
                    parent.color = BLACK
                    w.right.color = BLACK
                    self._log("recolors", w, 3)
                    self._rotate_left(index, parent)
                    x = index.root_node()
                    parent = None
            else:
                w = parent.left
                if w.color is RED:
                    w.color = BLACK
                    parent.color = RED
                    self._log("recolors", w, 2)
                    self._rotate_right(index, parent)
                    w = parent.left
                if color_of(w.left) is BLACK and color_of(w.right) is BLACK:
                    w.color = RED
                    self._log("recolors", w)
                    x = parent
                    parent = x.parent
                else:
                    if color_of(w.left) is BLACK:
                        w.right.color = BLACK
                        w.color = RED
                        self._log("recolors", w, 2)
                        self._rotate_left(index, w)
                        w = parent.left
                    w.color = parent.color
                    parent.color = BLACK
                    w.left.color = BLACK
                    self._log("recolors", w, 3)
                    self._rotate_right(index, parent)
                    x = index.root_node()
                    parent = None

        if x is not None:
            x.color = BLACK
