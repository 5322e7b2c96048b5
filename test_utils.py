#!/usr/bin/env python3
import itertools
import unittest

from errors import OverCompletionError
from utils import CallbackMerger, deep_merge, merge_only, table_row


class TestCallbackMerger(unittest.TestCase):
    def test_fires_once_with_merged_result(self):
        results = []
        merger = CallbackMerger(3, results.append)
        merger.submit({"a": 1, "nested": {"x": 1}})
        merger.call({"b": 2, "nested": {"y": 2}})
        self.assertEqual(results, [])
        self.assertEqual(merger.remaining, 1)
        self.assertFalse(merger.completed)
        merger({"a": 3})
        self.assertEqual(results, [{"a": 3, "b": 2, "nested": {"x": 1, "y": 2}}])
        self.assertTrue(merger.completed)

    def test_order_does_not_matter(self):
        parts = [{"a": 1}, {"b": {"x": 2}}, {"c": 3}]
        for order in itertools.permutations(parts):
            results = []
            merger = CallbackMerger(len(order), results.append)
            for part in order:
                merger.submit(part)
            self.assertEqual(results, [{"a": 1, "b": {"x": 2}, "c": 3}])

    def test_over_completion(self):
        results = []
        merger = CallbackMerger(1, results.append)
        merger.submit({})
        with self.assertRaises(OverCompletionError):
            merger.submit({"late": True})
        self.assertEqual(len(results), 1)
        self.assertEqual(results[0], {})

    def test_needs_positive_count(self):
        for n in (0, -2):
            with self.assertRaises(ValueError):
                CallbackMerger(n, print)

    def test_submitted_dicts_are_not_modified(self):
        part = {"nested": {"x": 1}}
        merger = CallbackMerger(2, lambda arg: None)
        merger.submit(part)
        merger.submit({"nested": {"y": 2}})
        self.assertEqual(part, {"nested": {"x": 1}})


class TestDictHelpers(unittest.TestCase):
    def test_deep_merge(self):
        target = {"a": {"b": 1, "c": 2}, "d": 1}
        deep_merge(target, {"a": {"c": 3}, "d": {"e": 4}})
        self.assertEqual(target, {"a": {"b": 1, "c": 3}, "d": {"e": 4}})

    def test_merge_only(self):
        self.assertEqual(merge_only({"a": 1, "b": 2}, {"b": 5, "z": 9}), {"a": 1, "b": 5})


class TestTableRow(unittest.TestCase):
    def test_fixed_width(self):
        row = table_row(["H_1", 1.0, 0.123456789, 3])
        self.assertTrue(row.endswith("\n"))
        fields = [row[i:i + 20] for i in range(0, 80, 20)]
        self.assertEqual(len(row), 81)
        self.assertEqual([f.strip() for f in fields], ["H_1", "1.00000", "0.12346", "3"])

    def test_custom_format(self):
        self.assertEqual(table_row([0.5, "x"], width=6, precision=2), "  0.50     x\n")
        self.assertEqual(table_row([float("nan")], width=4), " nan\n")


if __name__ == "__main__":
    unittest.main()
