"""Tests for the B-tree ordered index"""

from ordered_index.btree import BTreeIndex
from tests.test_base import IndexTestCase


def _levels(index):
    """Key lists per level, left to right."""
    out = []
    level = [index.root_node()] if index.root_node() is not None else []
    while level:
        out.append([node.keys for node in level])
        level = [child for node in level for child in node.children]
    return out


class TestBTreeInsert(IndexTestCase):
    VARIANT = "btree"
    OPTIONS = {"min_degree": 3}

    def test_factory_specializes_min_degree(self):
        self.assertIsInstance(self.index, BTreeIndex)
        self.assertEqual(self.index.t, 3)
        self.assertEqual(type(self.index).MIN_DEGREE, 3)

    def test_root_split_moves_median_up(self):
        self.insert_keys([1, 2, 3, 4, 5])
        self.assertEqual(_levels(self.index), [[[1, 2, 3, 4, 5]]])
        self.insert_keys([6])
        self.assertEqual(_levels(self.index), [[[3]], [[1, 2], [4, 5, 6]]])
        self.assertEqual(self.index.balancer.counts["splits"], 1)
        self.expected_keys = [1, 2, 3, 4, 5, 6]

    def test_values_travel_with_keys(self):
        self.insert_keys(range(1, 30))
        self.assert_round_trip(range(1, 30))
        self.expected_keys = list(range(1, 30))

    def test_duplicate_on_full_root_does_not_split(self):
        self.index = self.make_index(min_degree=2)
        self.insert_keys([1, 2, 3])
        self.assertFalse(self.index.insert(2, "again"))
        self.assertEqual(_levels(self.index), [[[1, 2, 3]]])
        self.assertEqual(self.index.search(2), "val_2")
        self.assertEqual(self.index.balancer.counts["splits"], 0)
        self.expected_keys = [1, 2, 3]

    def test_height_grows_logarithmically(self):
        self.index = self.make_index(min_degree=2, check_invariants=False)
        self.insert_keys(range(1000))
        # every node has at least two children below the root
        self.assertLessEqual(self.index.height(), 10)
        self.expected_keys = list(range(1000))

    def test_range_query_spans_levels(self):
        self.insert_keys(range(0, 100, 5))
        self.assertEqual([k for k, _ in self.index.range_query(12, 48)], [15, 20, 25, 30, 35, 40, 45])
        self.assertEqual(list(self.index.range_query(50, 10)), [])
        self.expected_keys = list(range(0, 100, 5))


class TestBTreeDelete(IndexTestCase):
    VARIANT = "btree"
    OPTIONS = {"min_degree": 3}

    def test_delete_internal_key_uses_successor(self):
        self.insert_keys([1, 2, 3, 4, 5, 6])
        self.assertTrue(self.index.delete(3))
        self.assertEqual(_levels(self.index), [[[4]], [[1, 2], [5, 6]]])
        self.expected_keys = [1, 2, 4, 5, 6]

    def test_delete_internal_key_uses_predecessor(self):
        self.insert_keys([1, 2, 3, 4, 5, 6, 0])
        # left child [0, 1, 2] can spare a key
        self.assertTrue(self.index.delete(3))
        self.assertEqual(_levels(self.index), [[[2]], [[0, 1], [4, 5, 6]]])
        self.expected_keys = [0, 1, 2, 4, 5, 6]

    def test_merge_collapses_root(self):
        self.insert_keys([1, 2, 3, 4, 5, 6])
        self.index.delete(3)
        self.assertTrue(self.index.delete(1))
        self.assertEqual(_levels(self.index), [[[2, 4, 5, 6]]])
        self.assertEqual(self.index.height(), 1)
        self.assertGreaterEqual(self.index.balancer.counts["merges"], 1)
        self.expected_keys = [2, 4, 5, 6]

    def test_borrow_from_sibling(self):
        self.insert_keys([1, 2, 3, 4, 5, 6, 7])
        # children [1, 2] and [4, 5, 6, 7]; deleting 1 borrows through the root
        self.assertTrue(self.index.delete(1))
        self.assertEqual(_levels(self.index), [[[4]], [[2, 3], [5, 6, 7]]])
        self.assertEqual(self.index.balancer.counts["borrows"], 1)
        self.expected_keys = [2, 3, 4, 5, 6, 7]

    def test_delete_everything(self):
        self.index = self.make_index(min_degree=2)
        keys = list(range(50))
        self.insert_keys(keys)
        for k in keys[::3] + keys[1::3] + keys[2::3]:
            self.assertTrue(self.index.delete(k))
            self.assertFalse(self.index.delete(k))
        self.assertTrue(self.index.is_empty())
        self.assertIsNone(self.index.root_node())

    def test_random_workloads(self):
        for t in (2, 3, 5):
            for seed in range(3):
                with self.subTest(t=t, seed=seed):
                    self.index = self.make_index(min_degree=t)
                    self.random_workload(seed, n=400, key_space=200)
