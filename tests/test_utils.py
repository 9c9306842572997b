"""Tests for comparison, randomness and logging helpers"""

import bisect
import logging
import random
import unittest
from unittest import mock

from ordered_index.logging_config import LOG_LEVEL_ENV, _default_level, get_logger
from ordered_index.utils import (
    bisect_left_cmp,
    bisect_right_cmp,
    make_priority_source,
    natural_order,
    perfect_height,
    reverse_order,
    sequence_priority_source,
    short_key,
)


class TestComparators(unittest.TestCase):
    def test_natural_order(self):
        self.assertLess(natural_order(1, 2), 0)
        self.assertEqual(natural_order("a", "a"), 0)
        self.assertGreater(natural_order(b"b", b"a"), 0)

    def test_reverse_order(self):
        self.assertGreater(reverse_order(1, 2), 0)
        self.assertEqual(reverse_order(3, 3), 0)
        self.assertLess(reverse_order(2, 1), 0)

    def test_bisect_matches_stdlib(self):
        rng = random.Random(0)
        for _ in range(50):
            keys = sorted(rng.sample(range(100), rng.randrange(0, 12)))
            probe = rng.randrange(-5, 105)
            self.assertEqual(bisect_left_cmp(keys, probe, natural_order), bisect.bisect_left(keys, probe))
            self.assertEqual(bisect_right_cmp(keys, probe, natural_order), bisect.bisect_right(keys, probe))

    def test_bisect_with_reverse_order(self):
        keys = [9, 7, 5, 3]
        self.assertEqual(bisect_left_cmp(keys, 7, reverse_order), 1)
        self.assertEqual(bisect_right_cmp(keys, 7, reverse_order), 2)
        self.assertEqual(bisect_left_cmp(keys, 10, reverse_order), 0)
        self.assertEqual(bisect_right_cmp(keys, 1, reverse_order), 4)


class TestPrioritySources(unittest.TestCase):
    def test_seeded_source_is_reproducible(self):
        first, second = make_priority_source(123), make_priority_source(123)
        draws = [first() for _ in range(10)]
        self.assertEqual(draws, [second() for _ in range(10)])
        for p in draws:
            self.assertIsInstance(p, float)
            self.assertTrue(0.0 <= p < 1.0)

    def test_different_seeds_differ(self):
        a, b = make_priority_source(1), make_priority_source(2)
        self.assertNotEqual([a() for _ in range(5)], [b() for _ in range(5)])

    def test_sequence_source(self):
        source = sequence_priority_source([0.25, 0.75])
        self.assertEqual((source(), source()), (0.25, 0.75))
        with self.assertRaises(StopIteration):
            source()


class TestDisplayHelpers(unittest.TestCase):
    def test_short_key(self):
        self.assertEqual(short_key(42), "42")
        self.assertEqual(short_key("0123456789"), "0123456789")
        self.assertEqual(short_key("0123456789abc"), "012...abc")
        self.assertEqual(short_key(b"\x01\xff"), "01ff")

    def test_perfect_height(self):
        self.assertEqual(perfect_height(0), 0)
        self.assertEqual(perfect_height(1), 1)
        self.assertEqual(perfect_height(7), 3)
        self.assertEqual(perfect_height(8), 4)
        self.assertEqual(perfect_height(23, fanout=5), 2)
        self.assertEqual(perfect_height(26, fanout=5), 3)


class TestLogging(unittest.TestCase):
    def test_logger_names_live_under_package(self):
        self.assertEqual(get_logger("ordered_index.btree").name, "ordered_index.btree")
        self.assertEqual(get_logger("Stats").name, "ordered_index.Stats")

    def test_level_from_environment(self):
        with mock.patch.dict("os.environ", {LOG_LEVEL_ENV: "debug"}):
            self.assertEqual(_default_level(), logging.DEBUG)
        with mock.patch.dict("os.environ", {LOG_LEVEL_ENV: "nonsense"}):
            self.assertEqual(_default_level(), logging.WARNING)


if __name__ == "__main__":
    unittest.main()
