"""Tests for the order-specialised class factory"""
# pylint: skip-file

import unittest
import logging

from btrees.factory import make_btree_classes, create_btree
from btrees.btree import BTree, BTreeNode

# Configure logging for test
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

TEST_ORDERS = [3, 4, 8, 64]


class TestBTreeFactory(unittest.TestCase):
    def test_factory_creates_different_classes(self):
        classes = {}
        for order in TEST_ORDERS:
            tree_class, node_class = make_btree_classes(order)
            classes[order] = (tree_class, node_class)

            self.assertIn(str(order), tree_class.__name__)
            self.assertIn(str(order), node_class.__name__)
            self.assertEqual(tree_class.ORDER, order)
            self.assertIs(tree_class.NodeClass, node_class)
            self.assertTrue(issubclass(tree_class, BTree))
            self.assertTrue(issubclass(node_class, BTreeNode))

        for o1 in TEST_ORDERS:
            for o2 in TEST_ORDERS:
                if o1 != o2:
                    self.assertIsNot(classes[o1][0], classes[o2][0])

    def test_classes_are_cached(self):
        self.assertIs(make_btree_classes(6)[0], make_btree_classes(6)[0])

    def test_default_order_from_class(self):
        tree_class, _ = make_btree_classes(5)
        tree = tree_class()
        self.assertEqual(tree.order, 5)
        self.assertEqual(tree.min_key_count, 2)

    def test_explicit_order_overrides_class_default(self):
        tree_class, _ = make_btree_classes(5)
        self.assertEqual(tree_class(7).order, 7)

    def test_invalid_order(self):
        for order in [2, 0, "4", None]:
            with self.assertRaises(ValueError):
                make_btree_classes(order)

    def test_create_btree(self):
        tree = create_btree(4)
        self.assertEqual(type(tree).__name__, "BTree_O4")
        self.assertTrue(tree.is_empty())
        for v in [3, 1, 2, 4]:
            tree.add(v)
        self.assertEqual(list(tree), [1, 2, 3, 4])
        self.assertIsInstance(tree.root, make_btree_classes(4)[1])

    def test_create_btree_with_structure_and_comparator(self):
        tree = create_btree(
            3,
            comparator=lambda a, b: (a < b) - (a > b),
            structure=[[[5]], [[9], [1]]],
        )
        self.assertEqual(list(tree), [9, 5, 1])


if __name__ == "__main__":
    unittest.main()
