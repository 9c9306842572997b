"""Balancer interface shared by the rotation-based variants."""

from __future__ import annotations

import collections
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional, Tuple

from ordered_index.logging_config import get_logger
from ordered_index.node import LEFT, RIGHT, BinaryNode

if TYPE_CHECKING:
    from ordered_index.binary_index import BinarySearchIndexBase

logger = get_logger(__name__)

# Ancestor stack collected on descent: (ancestor, direction taken from it).
Path = List[Tuple[BinaryNode, int]]


class Balancer(ABC):
    """
    Restores a variant's structural invariant after a key was added to or
    removed from the tree, using only the nodes on the search path.

    ``counts`` tallies structural events (rotations, promotions, ...) so
    statistics and benchmarks can report the amount of repair work.
    """

    name = "abstract"

    def __init__(self):
        self.counts: collections.Counter = collections.Counter()

    @abstractmethod
    def rebalance_insert(self, index: BinarySearchIndexBase, path: Path, node: BinaryNode) -> None:
        """Called after ``node`` was linked as a new leaf below ``path[-1]``."""
        pass

    @abstractmethod
    def rebalance_delete(
        self,
        index: BinarySearchIndexBase,
        path: Path,
        removed: BinaryNode,
        child: Optional[BinaryNode],
    ) -> None:
        """
        Called after ``removed`` was spliced out and ``child`` took its place
        below ``path[-1]`` (or became the root when ``path`` is empty).
        """
        pass

    def remove(self, index: BinarySearchIndexBase, path: Path, node: BinaryNode) -> None:
        """
        Unlink ``node`` from the tree and rebalance.

        A node with two children takes over the payload of its in-order
        successor, which is then spliced out instead. ``path`` is extended
        in place down to the spliced node's parent.
        """
        if node.left is not None and node.right is not None:
            path.append((node, RIGHT))
            succ = node.right
            while succ.left is not None:
                path.append((succ, LEFT))
                succ = succ.left
            node.key, node.value = succ.key, succ.value
            node = succ

        child = node.left if node.left is not None else node.right
        self.replace_subtree(index, path, len(path), child)
        node.left = node.right = None
        self.rebalance_delete(index, path, node, child)

    @staticmethod
    def replace_subtree(
        index: BinarySearchIndexBase,
        path: Path,
        depth: int,
        sub: Optional[BinaryNode],
    ) -> None:
        """Hang ``sub`` where the subtree rooted at depth ``depth`` of ``path`` was."""
        if depth == 0:
            index._set_root(sub)
        else:
            parent, direction = path[depth - 1]
            index._link(parent, direction, sub)

    def _log(self, event: str, node: BinaryNode, n: int = 1) -> None:
        self.counts[event] += n
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"[{self.name}] {event[:-1]} at key={node.key!r}")


class NoopBalancer(Balancer):
    """Plain binary search tree: nothing to restore."""

    name = "bst"

    def rebalance_insert(self, index, path, node):
        return None

    def rebalance_delete(self, index, path, removed, child):
        return None
