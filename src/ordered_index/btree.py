"""B-tree ordered index.

Every node holds between t-1 and 2t-1 keys (the root may hold fewer) with
their values; internal nodes hold one more child than keys and all leaves
sit at the same depth. Insert splits full nodes on the way down, delete
refills minimal nodes on the way down, so neither ever walks back up.

+---------------------+-------------------------+
| Operation           | Time (t = min. degree)  |
+=====================+=========================+
| ``search``          | O(log_t n · log t)      |
| ``insert``          | O(t · log_t n)          |
| ``delete``          | O(t · log_t n)          |
| ``range_query``     | O(t · log_t n + k)      |
+---------------------+-------------------------+
"""

from __future__ import annotations

from typing import Any, Iterator, Optional, Tuple

from ordered_index.balance.split_merge import BTreeBalancer
from ordered_index.base import NOT_FOUND, AbstractOrderedIndex, Entry
from ordered_index.node import BTreeNode
from ordered_index.utils import Comparator, bisect_left_cmp

DEFAULT_MIN_DEGREE = 3


class BTreeIndex(AbstractOrderedIndex):
    NODE_CLASS = BTreeNode
    MIN_DEGREE = DEFAULT_MIN_DEGREE
    VARIANT = "btree"

    def __init__(
        self,
        cmp: Optional[Comparator] = None,
        check_invariants: bool = False,
        min_degree: Optional[int] = None,
    ):
        super().__init__(cmp, check_invariants)
        self.t = min_degree if min_degree is not None else self.MIN_DEGREE
        self.balancer = BTreeBalancer(self.t)
        self._root: Optional[BTreeNode] = None

    def root_node(self) -> Optional[BTreeNode]:
        return self._root

    def clear(self) -> None:
        self._root = None
        self._size = 0

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def _locate(self, key: Any) -> Tuple[Optional[BTreeNode], int]:
        cmp = self.cmp
        node = self._root
        while node is not None:
            i = bisect_left_cmp(node.keys, key, cmp)
            if i < len(node.keys) and cmp(node.keys[i], key) == 0:
                return node, i
            node = node.children[i] if node.children else None
        return None, -1

    def search(self, key: Any) -> Any:
        node, i = self._locate(key)
        return node.values[i] if node is not None else NOT_FOUND

    # ------------------------------------------------------------------
    # Insert
    # ------------------------------------------------------------------

    def insert(self, key: Any, value: Any = None) -> bool:
        # duplicates must not trigger the proactive splits below
        if self._locate(key)[0] is not None:
            return False

        if self._root is None:
            self._root = self.NODE_CLASS([key], [value])
        else:
            if self.balancer.is_full(self._root):
                new_root = self.NODE_CLASS(children=[self._root])
                self.balancer.split_child(new_root, 0)
                self._root = new_root
            self._insert_nonfull(self._root, key, value)

        self._size += 1
        self._after_mutation("insert", key)
        return True

    def _insert_nonfull(self, node: BTreeNode, key: Any, value: Any) -> None:
        cmp = self.cmp
        while node.children:
            i = bisect_left_cmp(node.keys, key, cmp)
            if self.balancer.is_full(node.children[i]):
                self.balancer.split_child(node, i)
                if cmp(key, node.keys[i]) > 0:
                    i += 1
            node = node.children[i]
        i = bisect_left_cmp(node.keys, key, cmp)
        node.keys.insert(i, key)
        node.values.insert(i, value)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete(self, key: Any) -> bool:
        if self._locate(key)[0] is None:
            return False

        target = key
        cmp = self.cmp
        balancer = self.balancer
        node = self._root
        while True:
            i = bisect_left_cmp(node.keys, key, cmp)
            found = i < len(node.keys) and cmp(node.keys[i], key) == 0

            if not node.children:
                if found:
                    del node.keys[i]
                    del node.values[i]
                break

            if found:
                left, right = node.children[i], node.children[i + 1]
                if left.key_count() >= self.t:
                    pred = left
                    while pred.children:
                        pred = pred.children[-1]
                    node.keys[i], node.values[i] = pred.keys[-1], pred.values[-1]
                    key, node = pred.keys[-1], left
                elif right.key_count() >= self.t:
                    succ = right
                    while succ.children:
                        succ = succ.children[0]
                    node.keys[i], node.values[i] = succ.keys[0], succ.values[0]
                    key, node = succ.keys[0], right
                else:
                    balancer.merge_children(node, i)
                    node = self._shrink_root(node, left)
                continue

            if balancer.is_minimal(node.children[i]):
                i = balancer.fill_child(node, i)
            node = self._shrink_root(node, node.children[i])

        if self._root is not None and not self._root.keys:
            self._root = None
        self._size -= 1
        self._after_mutation("delete", target)
        return True

    def _shrink_root(self, node: BTreeNode, child: BTreeNode) -> BTreeNode:
        """Drop an emptied root after a merge below it; return ``child``."""
        if node is self._root and not node.keys:
            self._root = child
        return child

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _iter_from(self, low: Any = None, bounded: bool = False) -> Iterator[Entry]:
        cmp = self.cmp
        stack = []
        node = self._root
        while node is not None:
            i = bisect_left_cmp(node.keys, low, cmp) if bounded else 0
            stack.append((node, i))
            node = node.children[i] if node.children else None

        while stack:
            node, i = stack.pop()
            if i >= len(node.keys):
                continue
            yield node.keys[i], node.values[i]
            stack.append((node, i + 1))
            if node.children:
                child = node.children[i + 1]
                while child is not None:
                    stack.append((child, 0))
                    child = child.children[0] if child.children else None

    def range_query(self, low: Any, high: Any) -> Iterator[Entry]:
        cmp = self.cmp
        if cmp(low, high) > 0:
            return
        for key, value in self._iter_from(low, bounded=True):
            if cmp(key, high) > 0:
                return
            yield key, value

    def items(self) -> Iterator[Entry]:
        return self._iter_from()

    def height(self) -> int:
        depth = 0
        node = self._root
        while node is not None:
            depth += 1
            node = node.children[0] if node.children else None
        return depth

    def node_count(self) -> int:
        if self._root is None:
            return 0
        count = 0
        stack = [self._root]
        while stack:
            node = stack.pop()
            count += 1
            stack.extend(node.children)
        return count
