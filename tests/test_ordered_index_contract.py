"""Behaviour every index variant shares, run once per variant"""

import random
import types

from ordered_index.base import NOT_FOUND
from ordered_index.factory import VARIANTS, create_index
from ordered_index.utils import reverse_order
from tests.test_base import BaseTestCase


class TestOrderedIndexContract(BaseTestCase):
    """Each test loops over all variants with ``subTest``."""

    def make(self, variant, **options):
        options.setdefault("check_invariants", True)
        if variant == "treap":
            options.setdefault("seed", 7)
        return create_index(variant, **options)

    def fill(self, index, keys):
        for k in keys:
            self.assertTrue(index.insert(k, f"val_{k}"))
        return index

    def test_small_scenario(self):
        for variant in VARIANTS:
            with self.subTest(variant=variant):
                index = self.fill(self.make(variant), [50, 30, 70])
                self.assertEqual(index.search(30), "val_30")
                self.assertEqual(list(index.range_query(25, 55)), [(30, "val_30"), (50, "val_50")])
                self.assertTrue(index.delete(50))
                self.assertIs(index.search(50), NOT_FOUND)
                self.validate_index(index, [30, 70], variant)

    def test_seven_key_scenario(self):
        keys = [50, 30, 70, 20, 40, 60, 80]
        for variant in VARIANTS:
            with self.subTest(variant=variant):
                index = self.fill(self.make(variant), keys)
                self.assertEqual(index.search(40), "val_40")
                self.assertIs(index.search(90), NOT_FOUND)
                self.assertEqual(len(index), 7)
                self.validate_index(index, keys, variant)

    def test_round_trip(self):
        keys = list(range(0, 300, 3))
        random.Random(11).shuffle(keys)
        for variant in VARIANTS:
            with self.subTest(variant=variant):
                index = self.fill(self.make(variant), keys)
                for k in keys:
                    self.assertEqual(index.search(k), f"val_{k}")
                for k in range(1, 300, 3):
                    self.assertIs(index.search(k), NOT_FOUND)
                self.assertEqual(list(index.keys()), sorted(keys))
                self.validate_index(index, keys, variant)

    def test_duplicate_insert_is_idempotent(self):
        for variant in VARIANTS:
            with self.subTest(variant=variant):
                index = self.fill(self.make(variant), range(20))
                height = index.height()
                self.assertFalse(index.insert(7, "other"))
                self.assertEqual(index.search(7), "val_7")
                self.assertEqual(len(index), 20)
                self.assertEqual(index.height(), height)
                self.validate_index(index, list(range(20)), variant)

    def test_delete_missing_key(self):
        for variant in VARIANTS:
            with self.subTest(variant=variant):
                index = self.fill(self.make(variant), [1, 2, 3])
                self.assertFalse(index.delete(99))
                self.assertEqual(len(index), 3)
                self.validate_index(index, [1, 2, 3], variant)

    def test_none_value_is_not_absence(self):
        for variant in VARIANTS:
            with self.subTest(variant=variant):
                index = self.make(variant)
                self.assertTrue(index.insert(5))
                self.assertIsNone(index.search(5))
                self.assertIn(5, index)
                self.assertNotIn(6, index)
                self.assertEqual(index.get(6, "missing"), "missing")

    def test_range_matches_brute_force(self):
        rng = random.Random(3)
        keys = rng.sample(range(1000), 150)
        for variant in VARIANTS:
            with self.subTest(variant=variant):
                index = self.fill(self.make(variant, check_invariants=False), keys)
                for _ in range(25):
                    low, high = sorted(rng.randrange(-50, 1050) for _ in range(2))
                    expected = [(k, f"val_{k}") for k in sorted(keys) if low <= k <= high]
                    self.assertEqual(list(index.range_query(low, high)), expected, (low, high))
                self.validate_index(index, keys, variant)

    def test_range_edge_cases(self):
        for variant in VARIANTS:
            with self.subTest(variant=variant):
                index = self.fill(self.make(variant), range(10, 60, 10))
                self.assertIsInstance(index.range_query(0, 100), types.GeneratorType)
                self.assertEqual(list(index.range_query(40, 20)), [])
                self.assertEqual(list(index.range_query(20, 20)), [(20, "val_20")])
                self.assertEqual(list(index.range_query(21, 29)), [])
                self.assertEqual([k for k, _ in index.range_query(0, 100)], [10, 20, 30, 40, 50])
                self.assertEqual(list(index.range_query(51, 60)), [])
                self.assertEqual(list(index.range_query(0, 9)), [])
                self.assertEqual(list(index.range_query(45, 1000)), [(50, "val_50")])

    def test_range_above_every_key(self):
        for variant in VARIANTS:
            with self.subTest(variant=variant):
                index = self.fill(self.make(variant), [10, 20, 30])
                self.assertEqual(list(index.range_query(31, 40)), [])
                self.assertEqual(list(index.range_query(31, 31)), [])
                index.delete(30)
                self.assertEqual(list(index.range_query(21, 30)), [])

    def test_empty_index(self):
        for variant in VARIANTS:
            with self.subTest(variant=variant):
                index = self.make(variant)
                self.assertTrue(index.is_empty())
                self.assertEqual(len(index), 0)
                self.assertEqual(index.height(), 0)
                self.assertIsNone(index.root_node())
                self.assertIs(index.search(1), NOT_FOUND)
                self.assertFalse(index.delete(1))
                self.assertEqual(list(index.range_query(0, 10)), [])
                self.assertEqual(list(index.items()), [])
                self.assertIs(index.min_key(), NOT_FOUND)
                self.assertIs(index.max_key(), NOT_FOUND)
                self.assertIs(index.kth_smallest(1), NOT_FOUND)
                self.validate_index(index, [], variant)

    def test_kth_smallest_and_bounds(self):
        keys = [40, 10, 30, 20, 50]
        for variant in VARIANTS:
            with self.subTest(variant=variant):
                index = self.fill(self.make(variant), keys)
                self.assertEqual([index.kth_smallest(k) for k in range(1, 6)], [10, 20, 30, 40, 50])
                self.assertIs(index.kth_smallest(6), NOT_FOUND)
                with self.assertRaises(ValueError):
                    index.kth_smallest(0)
                self.assertEqual(index.min_key(), 10)
                self.assertEqual(index.max_key(), 50)
                self.assertEqual(list(index.values()), [f"val_{k}" for k in sorted(keys)])
                self.assertEqual(list(index), sorted(keys))

    def test_reverse_comparator(self):
        keys = [5, 1, 9, 3, 7, 2, 8]
        for variant in VARIANTS:
            with self.subTest(variant=variant):
                index = self.fill(self.make(variant, cmp=reverse_order), keys)
                self.assertEqual(list(index.keys()), sorted(keys, reverse=True))
                self.assertEqual([k for k, _ in index.range_query(8, 3)], [8, 7, 5, 3])
                self.assertEqual(list(index.range_query(3, 8)), [])
                self.assertTrue(index.delete(9))
                self.assertEqual(index.min_key(), 8)
                index.check_invariants()

    def test_string_keys(self):
        words = ["pear", "apple", "fig", "kiwi", "banana", "cherry", "date"]
        for variant in VARIANTS:
            with self.subTest(variant=variant):
                index = self.make(variant)
                for w in words:
                    index.insert(w, len(w))
                self.assertEqual(list(index.keys()), sorted(words))
                self.assertEqual([k for k, _ in index.range_query("b", "d")], ["banana", "cherry"])
                self.assertEqual(index.search("kiwi"), 4)
                self.validate_index(index, words, variant)

    def test_clear_and_reuse(self):
        for variant in VARIANTS:
            with self.subTest(variant=variant):
                index = self.fill(self.make(variant), range(40))
                index.clear()
                self.assertTrue(index.is_empty())
                self.assertIsNone(index.root_node())
                self.assertEqual(list(index.items()), [])
                self.fill(index, [3, 1, 2])
                self.validate_index(index, [1, 2, 3], variant)

    def test_delete_in_insertion_order(self):
        keys = list(range(100))
        random.Random(5).shuffle(keys)
        for variant in VARIANTS:
            with self.subTest(variant=variant):
                index = self.fill(self.make(variant), keys)
                for i, k in enumerate(keys):
                    self.assertTrue(index.delete(k))
                    self.assertEqual(len(index), len(keys) - i - 1)
                self.assertTrue(index.is_empty())
                self.validate_index(index, [], variant)

    def test_repr_mentions_size(self):
        for variant in VARIANTS:
            with self.subTest(variant=variant):
                index = self.fill(self.make(variant), [1, 2, 3])
                self.assertIn("size=3", repr(index))
