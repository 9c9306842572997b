"""In-memory self-balancing ordered indexes.

Quick start::

    from ordered_index import create_index

    index = create_index("avl")
    index.insert(10, "ten")
    index.search(10)                 # "ten"
    list(index.range_query(5, 15))   # [(10, "ten")]
"""

from ordered_index.avl_tree import AVLTreeIndex
from ordered_index.base import NOT_FOUND, AbstractOrderedIndex
from ordered_index.bplus_tree import BPlusTreeIndex
from ordered_index.bst import BSTIndex
from ordered_index.btree import BTreeIndex
from ordered_index.config import IndexConfig
from ordered_index.factory import (
    VARIANTS,
    create_index,
    make_bplustree_classes,
    make_btree_classes,
)
from ordered_index.invariants import InvariantError
from ordered_index.leaf_chain import LeafChain
from ordered_index.red_black_tree import RedBlackTreeIndex
from ordered_index.treap import TreapIndex
from ordered_index.wavl_tree import WAVLTreeIndex

__all__ = [
    "NOT_FOUND",
    "AbstractOrderedIndex",
    "AVLTreeIndex",
    "RedBlackTreeIndex",
    "WAVLTreeIndex",
    "TreapIndex",
    "BSTIndex",
    "BTreeIndex",
    "BPlusTreeIndex",
    "LeafChain",
    "IndexConfig",
    "InvariantError",
    "VARIANTS",
    "create_index",
    "make_btree_classes",
    "make_bplustree_classes",
]
