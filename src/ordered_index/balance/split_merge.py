"""Split / merge rebalancing for the multiway variants.

Both trees work top-down: a full child (2t-1 keys) is split before the
descent enters it on insert, and a minimal child (t-1 keys) is refilled
before the descent enters it on delete. Hence every repair touches only a
parent and two adjacent children.

+--------------------+----------------------------------------------+
| Operation          | Effect                                       |
+====================+==============================================+
| ``split_child``    | median moves up (B-tree), or a copy of the   |
|                    | right leaf's first key moves up (B+ leaf)    |
| ``fill_child``     | borrow from left, else from right, else      |
|                    | merge with a sibling                         |
+--------------------+----------------------------------------------+
"""

from __future__ import annotations

import collections
import logging
from abc import ABC, abstractmethod
from typing import Optional

from ordered_index.leaf_chain import LeafChain
from ordered_index.logging_config import get_logger
from ordered_index.node import BPlusInternalNode, BPlusLeafNode, BTreeNode, Node

logger = get_logger(__name__)


class MultiwayBalancer(ABC):
    name = "multiway"

    def __init__(self, min_degree: int):
        if min_degree < 2:
            raise ValueError(f"minimum degree must be >= 2, got {min_degree}")
        self.t = min_degree
        self.counts: collections.Counter = collections.Counter()

    @property
    def max_keys(self) -> int:
        return 2 * self.t - 1

    @property
    def min_keys(self) -> int:
        return self.t - 1

    def is_full(self, node: Node) -> bool:
        return node.key_count() >= self.max_keys

    def is_minimal(self, node: Node) -> bool:
        return node.key_count() <= self.min_keys

    def fill_child(self, parent, i: int) -> int:
        """
        Make sure ``parent.children[i]`` holds at least t keys.

        Returns:
            int: index of the child that now covers the original child's key range
                (``i - 1`` when it was merged into its left sibling).
        """
        last = len(parent.children) - 1
        if i > 0 and parent.children[i - 1].key_count() >= self.t:
            self._borrow_from_left(parent, i)
            self._log("borrows", parent)
            return i
        if i < last and parent.children[i + 1].key_count() >= self.t:
            self._borrow_from_right(parent, i)
            self._log("borrows", parent)
            return i
        if i < last:
            self.merge_children(parent, i)
            return i
        self.merge_children(parent, i - 1)
        return i - 1

    def merge_children(self, parent, i: int) -> None:
        self._merge(parent, i)
        self._log("merges", parent)

    def _log(self, event: str, node: Node) -> None:
        self.counts[event] += 1
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"[{self.name}] {event[:-1]} below {node!r}")

    @abstractmethod
    def split_child(self, parent, i: int) -> None:
        """Split the full child ``parent.children[i]`` in two."""
        pass

    @abstractmethod
    def _borrow_from_left(self, parent, i: int) -> None:
        pass

    @abstractmethod
    def _borrow_from_right(self, parent, i: int) -> None:
        pass

    @abstractmethod
    def _merge(self, parent, i: int) -> None:
        pass


class BTreeBalancer(MultiwayBalancer):
    """Classic B-tree: keys and values live in every node."""

    name = "btree"

    def split_child(self, parent: BTreeNode, i: int) -> None:
        t = self.t
        full = parent.children[i]
        right = type(full)(full.keys[t:], full.values[t:], full.children[t:])
        median_key, median_value = full.keys[t - 1], full.values[t - 1]
        del full.keys[t - 1:]
        del full.values[t - 1:]
        del full.children[t:]
        parent.keys.insert(i, median_key)
        parent.values.insert(i, median_value)
        parent.children.insert(i + 1, right)
        self._log("splits", full)

    def _borrow_from_left(self, parent: BTreeNode, i: int) -> None:
        child, left = parent.children[i], parent.children[i - 1]
        child.keys.insert(0, parent.keys[i - 1])
        child.values.insert(0, parent.values[i - 1])
        parent.keys[i - 1] = left.keys.pop()
        parent.values[i - 1] = left.values.pop()
        if left.children:
            child.children.insert(0, left.children.pop())

    def _borrow_from_right(self, parent: BTreeNode, i: int) -> None:
        child, right = parent.children[i], parent.children[i + 1]
        child.keys.append(parent.keys[i])
        child.values.append(parent.values[i])
        parent.keys[i] = right.keys.pop(0)
        parent.values[i] = right.values.pop(0)
        if right.children:
            child.children.append(right.children.pop(0))

    def _merge(self, parent: BTreeNode, i: int) -> None:
        left, right = parent.children[i], parent.children[i + 1]
        left.keys.append(parent.keys.pop(i))
        left.values.append(parent.values.pop(i))
        left.keys.extend(right.keys)
        left.values.extend(right.values)
        left.children.extend(right.children)
        parent.children.pop(i + 1)


class BPlusTreeBalancer(MultiwayBalancer):
    """
    B+tree: values only in leaves, internal nodes hold separator copies.

    For every internal node, keys under ``children[j]`` are smaller than
    ``keys[j]`` and keys under ``children[j + 1]`` are greater or equal.
    """

    name = "bplus_tree"

    def __init__(self, min_degree: int, chain: Optional[LeafChain] = None):
        super().__init__(min_degree)
        self.chain = chain if chain is not None else LeafChain()

    def split_child(self, parent: BPlusInternalNode, i: int) -> None:
        child = parent.children[i]
        if isinstance(child, BPlusLeafNode):
            self._split_leaf(parent, i, child)
        else:
            self._split_internal(parent, i, child)
        self._log("splits", child)

    def _split_leaf(self, parent: BPlusInternalNode, i: int, leaf: BPlusLeafNode) -> None:
        t = self.t
        right = type(leaf)(leaf.keys[t - 1:], leaf.values[t - 1:])
        del leaf.keys[t - 1:]
        del leaf.values[t - 1:]
        parent.keys.insert(i, right.keys[0])
        parent.children.insert(i + 1, right)
        self.chain.splice_after(leaf, right)

    def _split_internal(self, parent: BPlusInternalNode, i: int, node: BPlusInternalNode) -> None:
        t = self.t
        right = type(node)(node.keys[t:], node.children[t:])
        separator = node.keys[t - 1]
        del node.keys[t - 1:]
        del node.children[t:]
        parent.keys.insert(i, separator)
        parent.children.insert(i + 1, right)

    def _borrow_from_left(self, parent: BPlusInternalNode, i: int) -> None:
        child, left = parent.children[i], parent.children[i - 1]
        if isinstance(child, BPlusLeafNode):
            child.keys.insert(0, left.keys.pop())
            child.values.insert(0, left.values.pop())
            parent.keys[i - 1] = child.keys[0]
        else:
            child.keys.insert(0, parent.keys[i - 1])
            parent.keys[i - 1] = left.keys.pop()
            child.children.insert(0, left.children.pop())

    def _borrow_from_right(self, parent: BPlusInternalNode, i: int) -> None:
        child, right = parent.children[i], parent.children[i + 1]
        if isinstance(child, BPlusLeafNode):
            child.keys.append(right.keys.pop(0))
            child.values.append(right.values.pop(0))
            parent.keys[i] = right.keys[0]
        else:
            child.keys.append(parent.keys[i])
            parent.keys[i] = right.keys.pop(0)
            child.children.append(right.children.pop(0))

    def _merge(self, parent: BPlusInternalNode, i: int) -> None:
        left, right = parent.children[i], parent.children[i + 1]
        separator = parent.keys.pop(i)
        if isinstance(left, BPlusLeafNode):
            left.keys.extend(right.keys)
            left.values.extend(right.values)
            self.chain.unlink_after(left)
        else:
            left.keys.append(separator)
            left.keys.extend(right.keys)
            left.children.extend(right.children)
        parent.children.pop(i + 1)
