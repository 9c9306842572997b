"""Forward-linked list of B+tree leaves in ascending key order."""

from __future__ import annotations

from typing import Any, Iterator, Optional, Tuple

from ordered_index.node import BPlusLeafNode


class LeafChain:
    """
    Owns only the head reference; the links themselves live on the leaves
    (``leaf.next``). Splits splice the new right sibling in directly after
    the leaf it was split from, merges unlink the absorbed right sibling.
    """

    __slots__ = ("head",)

    def __init__(self, head: Optional[BPlusLeafNode] = None):
        self.head = head

    def reset(self, head: Optional[BPlusLeafNode] = None) -> None:
        self.head = head

    def splice_after(self, leaf: BPlusLeafNode, new_leaf: BPlusLeafNode) -> None:
        """Link ``new_leaf`` right after ``leaf`` in O(1)."""
        new_leaf.next = leaf.next
        leaf.next = new_leaf

    def unlink_after(self, leaf: BPlusLeafNode) -> Optional[BPlusLeafNode]:
        """Drop ``leaf.next`` from the chain in O(1) and return it."""
        gone = leaf.next
        if gone is not None:
            leaf.next = gone.next
            gone.next = None
        return gone

    def __iter__(self) -> Iterator[BPlusLeafNode]:
        leaf = self.head
        while leaf is not None:
            yield leaf
            leaf = leaf.next

    def iter_leaves(self) -> Iterator[BPlusLeafNode]:
        return iter(self)

    def iter_entries(
        self,
        start: Optional[BPlusLeafNode] = None,
        start_index: int = 0,
    ) -> Iterator[Tuple[Any, Any]]:
        """Yield ``(key, value)`` pairs from ``start[start_index]`` to the end."""
        leaf = self.head if start is None else start
        i = start_index
        while leaf is not None:
            keys, values = leaf.keys, leaf.values
            while i < len(keys):
                yield keys[i], values[i]
                i += 1
            leaf = leaf.next
            i = 0

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return "LeafChain(" + " -> ".join(str(leaf.keys) for leaf in self) + ")"
