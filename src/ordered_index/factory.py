"""Ordered index factory module."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple, Type

from ordered_index.avl_tree import AVLTreeIndex
from ordered_index.base import AbstractOrderedIndex
from ordered_index.bplus_tree import BPlusTreeIndex
from ordered_index.bst import BSTIndex
from ordered_index.btree import BTreeIndex
from ordered_index.config import IndexConfig
from ordered_index.logging_config import PACKAGE_LOGGER, get_logger, setup_logging
from ordered_index.node import BPlusInternalNode, BPlusLeafNode, BTreeNode
from ordered_index.red_black_tree import RedBlackTreeIndex
from ordered_index.treap import TreapIndex
from ordered_index.wavl_tree import WAVLTreeIndex

logger = get_logger(__name__)

BINARY_VARIANTS: Dict[str, Type[AbstractOrderedIndex]] = {
    "avl": AVLTreeIndex,
    "red_black": RedBlackTreeIndex,
    "wavl": WAVLTreeIndex,
    "treap": TreapIndex,
    "bst": BSTIndex,
}

VARIANTS: Tuple[str, ...] = ("avl", "red_black", "wavl", "treap", "btree", "bplus_tree", "bst")

_ALIASES = {
    "rb": "red_black",
    "redblack": "red_black",
    "b": "btree",
    "b_tree": "btree",
    "bplus": "bplus_tree",
    "b+": "bplus_tree",
    "b+tree": "bplus_tree",
    "b+_tree": "bplus_tree",
    "bplustree": "bplus_tree",
}


def normalize_variant(name: str) -> str:
    """Map user spellings like ``"Red-Black"`` or ``"B+tree"`` to a variant name."""
    key = name.strip().lower().replace("-", "_").replace(" ", "_")
    key = _ALIASES.get(key, key)
    if key not in VARIANTS:
        raise ValueError(f"Unknown index variant {name!r}; expected one of {', '.join(VARIANTS)}")
    return key


@lru_cache(maxsize=None)
def make_btree_classes(t: int) -> Tuple[Type[BTreeIndex], Type[BTreeNode]]:
    """
    Factory function to generate B-tree classes specialized for a given
    minimum degree t.

    Args:
        t: The minimum degree; nodes hold between t-1 and 2t-1 keys

    Returns:
        BTreeT: Subclass of BTreeIndex with MIN_DEGREE=t and NODE_CLASS=BTreeNodeT
        BTreeNodeT: Subclass of BTreeNode
    """
    if t < 2:
        raise ValueError(f"minimum degree must be >= 2, got {t}")

    BTreeNodeT = type(
        f"BTreeNode_T{t}",
        (BTreeNode,),
        {"__slots__": ()},
    )
    BTreeT = type(
        f"BTree_T{t}",
        (BTreeIndex,),
        {"NODE_CLASS": BTreeNodeT, "MIN_DEGREE": t},
    )
    return BTreeT, BTreeNodeT


@lru_cache(maxsize=None)
def make_bplustree_classes(
    t: int,
) -> Tuple[Type[BPlusTreeIndex], Type[BPlusLeafNode], Type[BPlusInternalNode]]:
    """
    Factory function to generate B+tree classes specialized for a given
    minimum degree t.

    Returns:
        BPlusTreeT: Subclass of BPlusTreeIndex with MIN_DEGREE=t
        BPlusLeafT: Subclass of BPlusLeafNode
        BPlusInternalT: Subclass of BPlusInternalNode
    """
    if t < 2:
        raise ValueError(f"minimum degree must be >= 2, got {t}")

    BPlusLeafT = type(f"BPlusLeaf_T{t}", (BPlusLeafNode,), {"__slots__": ()})
    BPlusInternalT = type(f"BPlusInternal_T{t}", (BPlusInternalNode,), {"__slots__": ()})
    BPlusTreeT = type(
        f"BPlusTree_T{t}",
        (BPlusTreeIndex,),
        {"LEAF_CLASS": BPlusLeafT, "INTERNAL_CLASS": BPlusInternalT, "MIN_DEGREE": t},
    )
    return BPlusTreeT, BPlusLeafT, BPlusInternalT


def create_index(
    variant: Optional[str] = None,
    *,
    config: Optional[IndexConfig] = None,
    **options: Any,
) -> AbstractOrderedIndex:
    """
    Create a new, empty ordered index.

    Args:
        variant: one of :data:`VARIANTS` (aliases accepted); defaults to the config's
        config: defaults for variant, min degree, seed and invariant checking
        **options: ``cmp``, ``check_invariants``, ``min_degree`` (multiway variants),
            ``priority_source`` / ``seed`` (treap). Explicit options win over config.

    Returns:
        AbstractOrderedIndex: the index instance
    """
    if config is None:
        config = IndexConfig()
    else:
        config.validate()
        level = config.level_number()
        if level is not None and logging.getLogger(PACKAGE_LOGGER).level != level:
            setup_logging(level=level)

    name = normalize_variant(variant if variant is not None else config.variant)
    cmp = options.pop("cmp", None)
    check = options.pop("check_invariants", config.check_invariants)
    seed = options.pop("seed", config.seed)

    if name in ("btree", "bplus_tree"):
        t = options.pop("min_degree", config.min_degree)
        _reject_unknown(name, options)
        if name == "btree":
            cls = make_btree_classes(t)[0]
        else:
            cls = make_bplustree_classes(t)[0]
        index = cls(cmp=cmp, check_invariants=check)
    elif name == "treap":
        priority_source = options.pop("priority_source", None)
        _reject_unknown(name, options)
        index = TreapIndex(cmp=cmp, check_invariants=check, priority_source=priority_source, seed=seed)
    else:
        _reject_unknown(name, options)
        index = BINARY_VARIANTS[name](cmp=cmp, check_invariants=check)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Created {type(index).__name__} for variant {name}")
    return index


def _reject_unknown(name: str, options: Dict[str, Any]) -> None:
    if options:
        raise TypeError(f"Unexpected options for variant {name!r}: {', '.join(sorted(options))}")
