"""Tests for operation profiling"""
# pylint: skip-file

import unittest

from btrees.btree import BTree
from btrees.profiling import PerformanceTracker, OperationMetrics, track_performance


class TestPerformanceTracker(unittest.TestCase):
    def setUp(self):
        self.tracker = PerformanceTracker.get_instance()
        self.tracker.reset()

    def tearDown(self):
        self.tracker.disable()
        self.tracker.reset()

    def test_singleton(self):
        self.assertIs(PerformanceTracker.get_instance(), self.tracker)

    def test_disabled_by_default_records_nothing(self):
        self.tracker.disable()
        tree = BTree(4)
        tree.add(1)
        tree.contains(1)
        self.assertEqual(self.tracker.report(), "No performance data collected.")

    def test_tree_operations_are_tracked(self):
        self.tracker.enable()
        tree = BTree(4)
        for v in range(10):
            tree.add(v)
        tree.contains(3)
        tree.remove(3)
        tree.remove(3)

        metrics = self.tracker.metrics
        self.assertEqual(metrics["BTreeBase.add"].call_count, 10)
        self.assertEqual(metrics["BTreeBase.contains"].call_count, 1)
        self.assertEqual(metrics["BTreeBase.remove"].call_count, 2)
        report = self.tracker.report(sort_by="call_count")
        self.assertIn("BTreeBase.add", report.splitlines()[4])

    def test_custom_tag_and_exceptions_still_recorded(self):
        @track_performance(tag="failing")
        def boom():
            raise RuntimeError("x")

        self.tracker.enable()
        with self.assertRaises(RuntimeError):
            boom()
        self.assertEqual(self.tracker.metrics["failing"].call_count, 1)


class TestOperationMetrics(unittest.TestCase):
    def test_aggregates(self):
        m = OperationMetrics()
        self.assertEqual(m.avg_time, 0)
        self.assertEqual(m.median_time, 0)
        for t in [0.3, 0.1, 0.2]:
            m.add_measurement(t)
        self.assertEqual(m.call_count, 3)
        self.assertAlmostEqual(m.total_time, 0.6)
        self.assertAlmostEqual(m.avg_time, 0.2)
        self.assertAlmostEqual(m.median_time, 0.2)
        self.assertEqual(m.min_time, 0.1)
        self.assertEqual(m.max_time, 0.3)
        self.assertIn("Calls: 3", str(m))


if __name__ == "__main__":
    unittest.main()
