"""Shared orchestration for the binary-search-tree based variants.

The index owns the root; descent is iterative and collects an explicit
ancestor path that is handed to the variant's :class:`Balancer` for the
bottom-up repair. Subclasses pick the node type and the balancer.

+---------------------+----------------------+
| Operation           | Time                 |
+=====================+======================+
| ``search``          | O(h)                 |
| ``insert``          | O(h) + rebalance     |
| ``delete``          | O(h) + rebalance     |
| ``range_query``     | O(h + k), lazy       |
| ``items``           | O(n), lazy           |
+---------------------+----------------------+

h is O(log n) for every balanced variant, O(n) worst case for the plain BST.
"""

from __future__ import annotations

from typing import Any, Iterator, Optional, Tuple

from ordered_index.balance.base import Balancer, NoopBalancer, Path
from ordered_index.base import NOT_FOUND, AbstractOrderedIndex, Entry
from ordered_index.node import LEFT, RIGHT, BinaryNode
from ordered_index.utils import Comparator


class BinarySearchIndexBase(AbstractOrderedIndex):
    NODE_CLASS = BinaryNode
    BALANCER_CLASS = NoopBalancer
    VARIANT = "bst"

    def __init__(self, cmp: Optional[Comparator] = None, check_invariants: bool = False):
        super().__init__(cmp, check_invariants)
        self._root: Optional[BinaryNode] = None
        self.balancer: Balancer = self.BALANCER_CLASS()

    # ------------------------------------------------------------------
    # Structural hooks (overridden by variants with parent references)
    # ------------------------------------------------------------------

    def _new_node(self, key: Any, value: Any) -> BinaryNode:
        return self.NODE_CLASS(key, value)

    def _set_root(self, node: Optional[BinaryNode]) -> None:
        self._root = node

    def _link(self, parent: BinaryNode, direction: int, child: Optional[BinaryNode]) -> None:
        parent.set_child(direction, child)

    def root_node(self) -> Optional[BinaryNode]:
        return self._root

    # ------------------------------------------------------------------
    # Descent
    # ------------------------------------------------------------------

    def _find(self, key: Any) -> Tuple[Optional[BinaryNode], Path]:
        """Return ``(node, path)``; ``node`` is None if ``key`` is absent."""
        cmp = self.cmp
        path: Path = []
        node = self._root
        while node is not None:
            c = cmp(key, node.key)
            if c == 0:
                return node, path
            direction = LEFT if c < 0 else RIGHT
            path.append((node, direction))
            node = node.child(direction)
        return None, path

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def search(self, key: Any) -> Any:
        cmp = self.cmp
        node = self._root
        while node is not None:
            c = cmp(key, node.key)
            if c == 0:
                return node.value
            node = node.left if c < 0 else node.right
        return NOT_FOUND

    def insert(self, key: Any, value: Any = None) -> bool:
        found, path = self._find(key)
        if found is not None:
            return False

        node = self._new_node(key, value)
        if path:
            parent, direction = path[-1]
            self._link(parent, direction, node)
        else:
            self._set_root(node)
        self._size += 1
        self.balancer.rebalance_insert(self, path, node)
        self._after_mutation("insert", key)
        return True

    def delete(self, key: Any) -> bool:
        node, path = self._find(key)
        if node is None:
            return False
        self.balancer.remove(self, path, node)
        self._size -= 1
        self._after_mutation("delete", key)
        return True

    def clear(self) -> None:
        self._set_root(None)
        self._size = 0

    def range_query(self, low: Any, high: Any) -> Iterator[Entry]:
        cmp = self.cmp
        if cmp(low, high) > 0:
            return
        stack = []
        node = self._root
        while stack or node is not None:
            while node is not None:
                if cmp(node.key, low) < 0:
                    node = node.right
                else:
                    stack.append(node)
                    node = node.left
            if not stack:
                return
            node = stack.pop()
            if cmp(node.key, high) > 0:
                return
            yield node.key, node.value
            node = node.right

    def items(self) -> Iterator[Entry]:
        stack = []
        node = self._root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node.key, node.value
            node = node.right

    def min_key(self) -> Any:
        node = self._root
        if node is None:
            return NOT_FOUND
        while node.left is not None:
            node = node.left
        return node.key

    def max_key(self) -> Any:
        node = self._root
        if node is None:
            return NOT_FOUND
        while node.right is not None:
            node = node.right
        return node.key

    def height(self) -> int:
        if self._root is None:
            return 0
        best = 0
        stack = [(self._root, 1)]
        while stack:
            node, depth = stack.pop()
            best = max(best, depth)
            if node.left is not None:
                stack.append((node.left, depth + 1))
            if node.right is not None:
                stack.append((node.right, depth + 1))
        return best
