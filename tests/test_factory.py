"""Tests for the index factory and construction config"""

import logging
import unittest
from unittest import mock

from ordered_index.avl_tree import AVLTreeIndex
from ordered_index.bplus_tree import BPlusTreeIndex
from ordered_index.bst import BSTIndex
from ordered_index.btree import BTreeIndex
from ordered_index.config import IndexConfig
from ordered_index.factory import (
    VARIANTS,
    create_index,
    make_bplustree_classes,
    make_btree_classes,
    normalize_variant,
)
from ordered_index.node import BPlusInternalNode, BPlusLeafNode, BTreeNode
from ordered_index.red_black_tree import RedBlackTreeIndex
from ordered_index.treap import TreapIndex
from ordered_index.utils import reverse_order
from ordered_index.wavl_tree import WAVLTreeIndex


class TestCreateIndex(unittest.TestCase):
    def test_every_variant(self):
        expected = {
            "avl": AVLTreeIndex,
            "red_black": RedBlackTreeIndex,
            "wavl": WAVLTreeIndex,
            "treap": TreapIndex,
            "btree": BTreeIndex,
            "bplus_tree": BPlusTreeIndex,
            "bst": BSTIndex,
        }
        self.assertEqual(set(VARIANTS), set(expected))
        for variant, cls in expected.items():
            with self.subTest(variant=variant):
                index = create_index(variant)
                self.assertIsInstance(index, cls)
                self.assertEqual(index.VARIANT, variant)
                self.assertTrue(index.is_empty())

    def test_default_variant_is_avl(self):
        self.assertIsInstance(create_index(), AVLTreeIndex)

    def test_aliases(self):
        cases = {
            "AVL": "avl",
            "Red-Black": "red_black",
            "rb": "red_black",
            "B-tree": "btree",
            "B+tree": "bplus_tree",
            "bplus": "bplus_tree",
            " wavl ": "wavl",
        }
        for name, variant in cases.items():
            with self.subTest(name=name):
                self.assertEqual(normalize_variant(name), variant)

    def test_unknown_variant(self):
        with self.assertRaises(ValueError):
            create_index("skiplist")

    def test_unexpected_option(self):
        with self.assertRaises(TypeError):
            create_index("avl", min_degree=4)
        with self.assertRaises(TypeError):
            create_index("btree", priority_source=lambda: 0.5)

    def test_options_are_forwarded(self):
        index = create_index("red_black", cmp=reverse_order, check_invariants=True)
        self.assertIs(index.cmp, reverse_order)
        self.assertTrue(index.check_invariants_on_mutation)

    def test_seed_is_ignored_by_deterministic_variants(self):
        index = create_index("avl", seed=5)
        self.assertIsInstance(index, AVLTreeIndex)

    def test_min_degree_below_two(self):
        with self.assertRaises(ValueError):
            create_index("btree", min_degree=1)
        with self.assertRaises(ValueError):
            create_index("bplus_tree", min_degree=1)


class TestSpecializedClasses(unittest.TestCase):
    def test_btree_classes_are_cached(self):
        tree_cls, node_cls = make_btree_classes(4)
        self.assertIs(make_btree_classes(4)[0], tree_cls)
        self.assertEqual(tree_cls.__name__, "BTree_T4")
        self.assertEqual(tree_cls.MIN_DEGREE, 4)
        self.assertTrue(issubclass(node_cls, BTreeNode))
        self.assertIs(tree_cls.NODE_CLASS, node_cls)
        self.assertIs(type(create_index("btree", min_degree=4)), tree_cls)

    def test_bplus_classes(self):
        tree_cls, leaf_cls, internal_cls = make_bplustree_classes(5)
        self.assertEqual(tree_cls.__name__, "BPlusTree_T5")
        self.assertTrue(issubclass(leaf_cls, BPlusLeafNode))
        self.assertTrue(issubclass(internal_cls, BPlusInternalNode))
        index = create_index("bplus_tree", min_degree=5)
        self.assertIs(type(index), tree_cls)
        for k in range(20):
            index.insert(k)
        self.assertIsInstance(index.root_node(), internal_cls)
        self.assertTrue(all(type(leaf) is leaf_cls for leaf in index.leaves()))

    def test_specialized_nodes_have_no_dict(self):
        _, node_cls = make_btree_classes(3)
        self.assertFalse(hasattr(node_cls([1], [None]), "__dict__"))


class TestIndexConfig(unittest.TestCase):
    def test_defaults(self):
        config = IndexConfig()
        self.assertEqual(config.variant, "avl")
        self.assertEqual(config.min_degree, 3)
        self.assertIsNone(config.seed)
        self.assertFalse(config.check_invariants)

    def test_from_env(self):
        env = {
            "ORDERED_INDEX_VARIANT": "bplus_tree",
            "ORDERED_INDEX_MIN_DEGREE": "4",
            "ORDERED_INDEX_SEED": "42",
            "ORDERED_INDEX_CHECK_INVARIANTS": "yes",
            "ORDERED_INDEX_LOG_LEVEL": "warning",
        }
        with mock.patch.dict("os.environ", env):
            config = IndexConfig.from_env()
        self.assertEqual(config.variant, "bplus_tree")
        self.assertEqual(config.min_degree, 4)
        self.assertEqual(config.seed, 42)
        self.assertTrue(config.check_invariants)
        self.assertEqual(config.log_level, "WARNING")

    def test_config_drives_factory(self):
        config = IndexConfig(variant="btree", min_degree=4, check_invariants=True)
        index = create_index(config=config)
        self.assertEqual(type(index).__name__, "BTree_T4")
        self.assertTrue(index.check_invariants_on_mutation)

    def test_explicit_options_win(self):
        config = IndexConfig(variant="btree", min_degree=4)
        index = create_index("bplus_tree", config=config, min_degree=2)
        self.assertEqual(index.t, 2)

    def test_treap_seed_from_config(self):
        config = IndexConfig(variant="treap", seed=17)
        first, second = create_index(config=config), create_index(config=config)
        for k in range(30):
            first.insert(k)
            second.insert(k)
        self.assertEqual(first.root_node().key, second.root_node().key)

    def test_invalid_config(self):
        with self.assertRaises(ValueError):
            create_index(config=IndexConfig(min_degree=1))

    def test_unknown_log_level_rejected(self):
        with self.assertRaisesRegex(ValueError, "log_level"):
            IndexConfig(log_level="LOUD").validate()
        with self.assertRaisesRegex(ValueError, "log_level"):
            create_index(config=IndexConfig(log_level="LOUD"))

    def test_config_without_log_level_leaves_logger_alone(self):
        package_logger = logging.getLogger("ordered_index")
        previous = package_logger.level
        try:
            package_logger.setLevel(logging.ERROR)
            create_index(config=IndexConfig())
            self.assertEqual(package_logger.level, logging.ERROR)
            create_index(config=IndexConfig(log_level="info"))
            self.assertEqual(package_logger.level, logging.INFO)
        finally:
            package_logger.setLevel(previous)

    def test_level_number(self):
        self.assertIsNone(IndexConfig().level_number())
        self.assertEqual(IndexConfig(log_level="debug").level_number(), logging.DEBUG)


if __name__ == "__main__":
    unittest.main()
