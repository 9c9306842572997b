"""B+tree ordered index.

Values live only in the leaves; internal nodes hold separator copies that
route a key to the child whose range contains it (keys below
``keys[j]`` go left of it, keys equal or above go right). The leaves form
a :class:`LeafChain` so range scans descend once and then walk forward.

+---------------------+----------------------------------------+
| Operation           | Time (t = min. degree)                 |
+=====================+========================================+
| ``search``          | O(log_t n · log t)                     |
| ``insert``          | O(t · log_t n)                         |
| ``delete``          | O(t · log_t n)                         |
| ``range_query``     | O(log_t n · log t + k), leaf chain     |
+---------------------+----------------------------------------+
"""

from __future__ import annotations

from typing import Any, Iterator, Optional

from ordered_index.balance.split_merge import BPlusTreeBalancer
from ordered_index.base import NOT_FOUND, AbstractOrderedIndex, Entry
from ordered_index.btree import DEFAULT_MIN_DEGREE
from ordered_index.leaf_chain import LeafChain
from ordered_index.node import BPlusInternalNode, BPlusLeafNode, Node
from ordered_index.utils import Comparator, bisect_left_cmp, bisect_right_cmp


class BPlusTreeIndex(AbstractOrderedIndex):
    LEAF_CLASS = BPlusLeafNode
    INTERNAL_CLASS = BPlusInternalNode
    MIN_DEGREE = DEFAULT_MIN_DEGREE
    VARIANT = "bplus_tree"

    def __init__(
        self,
        cmp: Optional[Comparator] = None,
        check_invariants: bool = False,
        min_degree: Optional[int] = None,
    ):
        super().__init__(cmp, check_invariants)
        self.t = min_degree if min_degree is not None else self.MIN_DEGREE
        self.chain = LeafChain()
        self.balancer = BPlusTreeBalancer(self.t, self.chain)
        self._root: Optional[Node] = None

    def root_node(self) -> Optional[Node]:
        return self._root

    def clear(self) -> None:
        self._root = None
        self.chain.reset()
        self._size = 0

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def _find_leaf(self, key: Any) -> Optional[BPlusLeafNode]:
        cmp = self.cmp
        node = self._root
        while isinstance(node, BPlusInternalNode):
            node = node.children[bisect_right_cmp(node.keys, key, cmp)]
        return node

    def search(self, key: Any) -> Any:
        leaf = self._find_leaf(key)
        if leaf is None:
            return NOT_FOUND
        i = bisect_left_cmp(leaf.keys, key, self.cmp)
        if i < len(leaf.keys) and self.cmp(leaf.keys[i], key) == 0:
            return leaf.values[i]
        return NOT_FOUND

    # ------------------------------------------------------------------
    # Insert
    # ------------------------------------------------------------------

    def insert(self, key: Any, value: Any = None) -> bool:
        if self.search(key) is not NOT_FOUND:
            return False

        if self._root is None:
            leaf = self.LEAF_CLASS([key], [value])
            self._root = leaf
            self.chain.reset(leaf)
        else:
            balancer = self.balancer
            if balancer.is_full(self._root):
                new_root = self.INTERNAL_CLASS(children=[self._root])
                balancer.split_child(new_root, 0)
                self._root = new_root

            cmp = self.cmp
            node = self._root
            while isinstance(node, BPlusInternalNode):
                i = bisect_right_cmp(node.keys, key, cmp)
                if balancer.is_full(node.children[i]):
                    balancer.split_child(node, i)
                    if cmp(key, node.keys[i]) >= 0:
                        i += 1
                node = node.children[i]

            i = bisect_left_cmp(node.keys, key, cmp)
            node.keys.insert(i, key)
            node.values.insert(i, value)

        self._size += 1
        self._after_mutation("insert", key)
        return True

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete(self, key: Any) -> bool:
        if self.search(key) is NOT_FOUND:
            return False

        cmp = self.cmp
        balancer = self.balancer
        node = self._root
        while isinstance(node, BPlusInternalNode):
            i = bisect_right_cmp(node.keys, key, cmp)
            if balancer.is_minimal(node.children[i]):
                i = balancer.fill_child(node, i)
            child = node.children[i]
            if node is self._root and not node.keys:
                self._root = child
            node = child

        i = bisect_left_cmp(node.keys, key, cmp)
        del node.keys[i]
        del node.values[i]

        if node is self._root and not node.keys:
            self._root = None
            self.chain.reset()
        self._size -= 1
        self._after_mutation("delete", key)
        return True

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def range_query(self, low: Any, high: Any) -> Iterator[Entry]:
        cmp = self.cmp
        if cmp(low, high) > 0:
            return
        leaf = self._find_leaf(low)
        if leaf is None:
            return
        start = bisect_left_cmp(leaf.keys, low, cmp)
        for key, value in self.chain.iter_entries(leaf, start):
            if cmp(key, high) > 0:
                return
            yield key, value

    def items(self) -> Iterator[Entry]:
        return self.chain.iter_entries()

    def leaves(self) -> Iterator[BPlusLeafNode]:
        return iter(self.chain)

    def height(self) -> int:
        depth = 0
        node = self._root
        while node is not None:
            depth += 1
            node = node.children[0] if isinstance(node, BPlusInternalNode) else None
        return depth
