"""Base test case for BTree tests"""
# pylint: skip-file

from typing import Any, Iterable, List
import unittest
import logging

from btrees.factory import make_btree_classes
from btrees.btree_base import btree_stats_, collect_keys
from tests.utils import assert_tree_invariants_tc

# Configure logging for test
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class TreeTestCase(unittest.TestCase):
    """Base class for all BTree tests"""
    ORDER = 4  # Default order for tests

    def setUp(self):
        self.TreeClass, self.NodeClass = make_btree_classes(self.ORDER)
        self.tree = self.TreeClass()
        logger.debug(f"Created BTree test with order={self.ORDER}, using class {self.TreeClass.__name__}")

    def tearDown(self):
        tree = getattr(self, 'tree', None)
        if tree is None:
            return

        stats = btree_stats_(tree)
        assert_tree_invariants_tc(self, tree, stats)

        # --- optional invariants ---
        expected_keys = getattr(self, 'expected_keys', None)
        if expected_keys is not None:
            self.assertEqual(
                collect_keys(tree), list(expected_keys),
                f"Keys do not match expected {expected_keys}\n"
                f"Tree structure:\n{tree.print_structure()}"
            )

        expected_levels = getattr(self, 'expected_levels', None)
        if expected_levels is not None:
            self.assertEqual(
                list(tree.level_iterator()), expected_levels,
                f"Levels do not match expected\n"
                f"Tree structure:\n{tree.print_structure()}"
            )

    def _add_all(self, values: Iterable[Any]) -> List[bool]:
        return [self.tree.add(v) for v in values]

    def _levels(self) -> List[List[List[Any]]]:
        return list(self.tree.level_iterator())
