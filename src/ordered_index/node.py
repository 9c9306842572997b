"""
Node types for the ordered index variants.

Binary nodes (AVL, WAVL, Red-Black, Treap, plain BST) hold exactly one key
and up to two children. Multiway nodes (B-tree, B+tree) hold parallel key
and value lists plus a child list with ``len(keys) + 1`` entries when
internal. Nodes carry no behaviour beyond accessors; every mutation is
performed by the owning index or its balancer.
"""

from __future__ import annotations

import enum
import weakref
from abc import ABC, abstractmethod
from typing import Any, Iterator, List, Optional

LEFT = 0
RIGHT = 1


def opposite(direction: int) -> int:
    return 1 - direction


class Node(ABC):
    """Accessor contract shared by every node kind."""

    __slots__ = ()

    @abstractmethod
    def key_count(self) -> int:
        pass

    @abstractmethod
    def child_count(self) -> int:
        pass

    @abstractmethod
    def key_at(self, i: int) -> Any:
        pass

    @abstractmethod
    def child_at(self, i: int) -> Optional[Node]:
        pass

    @abstractmethod
    def is_leaf(self) -> bool:
        pass

    def children_iter(self) -> Iterator[Node]:
        for i in range(self.child_count()):
            child = self.child_at(i)
            if child is not None:
                yield child

    def _check_key_index(self, i: int) -> None:
        if not 0 <= i < self.key_count():
            raise IndexError(
                f"key index {i} out of range for {type(self).__name__} "
                f"with {self.key_count()} keys"
            )

    def _check_child_index(self, i: int) -> None:
        if not 0 <= i < self.child_count():
            raise IndexError(
                f"child index {i} out of range for {type(self).__name__} "
                f"with {self.child_count()} child slots"
            )


# ----------------------------------------------------------------------
# Binary nodes
# ----------------------------------------------------------------------

class BinaryNode(Node):
    __slots__ = ("key", "value", "left", "right")

    def __init__(self, key: Any, value: Any = None):
        self.key = key
        self.value = value
        self.left: Optional[BinaryNode] = None
        self.right: Optional[BinaryNode] = None

    def child(self, direction: int) -> Optional[BinaryNode]:
        return self.left if direction == LEFT else self.right

    def set_child(self, direction: int, node: Optional[BinaryNode]) -> None:
        if direction == LEFT:
            self.left = node
        else:
            self.right = node

    def key_count(self) -> int:
        return 1

    def child_count(self) -> int:
        return 2

    def key_at(self, i: int) -> Any:
        self._check_key_index(i)
        return self.key

    def child_at(self, i: int) -> Optional[BinaryNode]:
        self._check_child_index(i)
        return self.left if i == 0 else self.right

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def meta(self) -> str:
        """Variant metadata rendered by the display helpers."""
        return ""

    def __repr__(self) -> str:
        meta = self.meta()
        suffix = f", {meta}" if meta else ""
        return f"{type(self).__name__}(key={self.key!r}{suffix})"


class AVLNode(BinaryNode):
    __slots__ = ("height",)

    def __init__(self, key: Any, value: Any = None):
        super().__init__(key, value)
        self.height = 1

    def meta(self) -> str:
        return f"h={self.height}"


class WAVLNode(BinaryNode):
    __slots__ = ("rank",)

    def __init__(self, key: Any, value: Any = None):
        super().__init__(key, value)
        self.rank = 0

    def meta(self) -> str:
        return f"r={self.rank}"


class Color(enum.Enum):
    RED = "R"
    BLACK = "B"


class RedBlackNode(BinaryNode):
    """
    Red-Black node. The parent link is a weak reference: children are owned
    through ``left`` / ``right`` only, the parent is used for upward walks.
    """

    __slots__ = ("color", "_parent", "__weakref__")

    def __init__(self, key: Any, value: Any = None, color: Color = Color.RED):
        super().__init__(key, value)
        self.color = color
        self._parent = None

    @property
    def parent(self) -> Optional[RedBlackNode]:
        return self._parent() if self._parent is not None else None

    @parent.setter
    def parent(self, node: Optional[RedBlackNode]) -> None:
        self._parent = weakref.ref(node) if node is not None else None

    def meta(self) -> str:
        return self.color.value


class TreapNode(BinaryNode):
    __slots__ = ("priority",)

    def __init__(self, key: Any, value: Any = None, priority: float = 0.0):
        super().__init__(key, value)
        self.priority = priority

    def meta(self) -> str:
        return f"p={self.priority:.3f}"


def height_of(node: Optional[AVLNode]) -> int:
    return node.height if node is not None else 0


def rank_of(node: Optional[WAVLNode]) -> int:
    return node.rank if node is not None else -1


def color_of(node: Optional[RedBlackNode]) -> Color:
    return node.color if node is not None else Color.BLACK


# ----------------------------------------------------------------------
# Multiway nodes
# ----------------------------------------------------------------------

class BTreeNode(Node):
    __slots__ = ("keys", "values", "children")

    def __init__(
        self,
        keys: Optional[List[Any]] = None,
        values: Optional[List[Any]] = None,
        children: Optional[List[BTreeNode]] = None,
    ):
        self.keys: List[Any] = keys if keys is not None else []
        self.values: List[Any] = values if values is not None else []
        self.children: List[BTreeNode] = children if children is not None else []

    def key_count(self) -> int:
        return len(self.keys)

    def child_count(self) -> int:
        return len(self.children)

    def key_at(self, i: int) -> Any:
        self._check_key_index(i)
        return self.keys[i]

    def value_at(self, i: int) -> Any:
        self._check_key_index(i)
        return self.values[i]

    def child_at(self, i: int) -> BTreeNode:
        self._check_child_index(i)
        return self.children[i]

    def is_leaf(self) -> bool:
        return not self.children

    def __repr__(self) -> str:
        return f"{type(self).__name__}(keys={self.keys!r})"


class BPlusLeafNode(Node):
    __slots__ = ("keys", "values", "next")

    def __init__(self, keys: Optional[List[Any]] = None, values: Optional[List[Any]] = None):
        self.keys: List[Any] = keys if keys is not None else []
        self.values: List[Any] = values if values is not None else []
        self.next: Optional[BPlusLeafNode] = None

    def key_count(self) -> int:
        return len(self.keys)

    def child_count(self) -> int:
        return 0

    def key_at(self, i: int) -> Any:
        self._check_key_index(i)
        return self.keys[i]

    def value_at(self, i: int) -> Any:
        self._check_key_index(i)
        return self.values[i]

    def child_at(self, i: int) -> Node:
        self._check_child_index(i)

    def is_leaf(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}(keys={self.keys!r})"


class BPlusInternalNode(Node):
    """Navigation node: separator keys and children, never values."""

    __slots__ = ("keys", "children")

    def __init__(self, keys: Optional[List[Any]] = None, children: Optional[List[Node]] = None):
        self.keys: List[Any] = keys if keys is not None else []
        self.children: List[Node] = children if children is not None else []

    def key_count(self) -> int:
        return len(self.keys)

    def child_count(self) -> int:
        return len(self.children)

    def key_at(self, i: int) -> Any:
        self._check_key_index(i)
        return self.keys[i]

    def child_at(self, i: int) -> Node:
        self._check_child_index(i)
        return self.children[i]

    def is_leaf(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(keys={self.keys!r})"
