"""Pretty-printing and display utilities for ordered index structures."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from ordered_index.node import BinaryNode, Color, RedBlackNode
from ordered_index.utils import short_key

if TYPE_CHECKING:
    from ordered_index.base import AbstractOrderedIndex


# ANSI colour codes
PRIMARY = '\033[32m'    # green
SECONDARY = '\033[33m'  # yellow
RED = '\033[31m'
RESET = '\033[0m'


def _format_node(node, color: bool) -> str:
    if isinstance(node, BinaryNode):
        meta = node.meta()
        label = f"{short_key(node.key)}({meta})" if meta else short_key(node.key)
        if color and isinstance(node, RedBlackNode) and node.color is Color.RED:
            return f"{RED}{label}{RESET}"
        return label
    label = "[" + " | ".join(short_key(k) for k in node.keys) + "]"
    if color and node.is_leaf():
        return f"{SECONDARY}{label}{RESET}"
    return label


def print_pretty(index: AbstractOrderedIndex, color: bool = False) -> str:
    """
    Render ``index`` level by level:
      • Lines go from the root (depth 0) down to the deepest level.
      • Within a line, nodes appear left→right in key order.
      • Binary nodes carry their variant metadata (height, rank, colour
        or priority), multiway nodes print their key list.
    """
    from ordered_index.base import AbstractOrderedIndex

    if not isinstance(index, AbstractOrderedIndex):
        raise TypeError(f"print_pretty() expects an AbstractOrderedIndex, got {type(index).__name__}")

    header = f"{type(index).__name__} (variant={index.VARIANT}, size={len(index)})"
    if color:
        header = f"{PRIMARY}{header}{RESET}"

    root = index.root_node()
    if root is None:
        return f"{header}: Empty"

    lines: List[str] = [header]
    level = [root]
    depth = 0
    while level:
        lines.append(f"Depth {depth}: " + "  ".join(_format_node(n, color) for n in level))
        level = [child for node in level for child in node.children_iter()]
        depth += 1

    chain = getattr(index, "chain", None)
    if chain is not None:
        lines.append("Leaves: " + " -> ".join(_format_node(leaf, False) for leaf in chain))
    return "\n".join(lines)


def print_structure(index: AbstractOrderedIndex, indent: int = 0) -> str:
    """Indented one-node-per-line dump, children below their parent."""
    root = index.root_node()
    if root is None:
        return " " * indent + "Empty"
    out: List[str] = []
    stack = [(root, indent)]
    while stack:
        node, pad = stack.pop()
        out.append(" " * pad + _format_node(node, False))
        for child in reversed(list(node.children_iter())):
            stack.append((child, pad + 2))
    return "\n".join(out)
