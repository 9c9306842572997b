"""Single rotations on parent-pointer-free binary nodes.

Each function returns the new root of the rotated subtree; relinking it
into the parent (or the index root) is the caller's job.
"""

from __future__ import annotations

from ordered_index.node import LEFT, BinaryNode


def rotate_left(node: BinaryNode) -> BinaryNode:
    pivot = node.right
    node.right = pivot.left
    pivot.left = node
    return pivot


def rotate_right(node: BinaryNode) -> BinaryNode:
    pivot = node.left
    node.left = pivot.right
    pivot.right = node
    return pivot


def lift(node: BinaryNode, direction: int) -> BinaryNode:
    """Rotate the child on ``direction`` side of ``node`` above it."""
    if direction == LEFT:
        return rotate_right(node)
    return rotate_left(node)
