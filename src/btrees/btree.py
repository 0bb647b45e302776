"""Concrete B-tree classes"""

from btrees.btree_base import BTreeBase, BTreeNodeBase


class BTreeNode(BTreeNodeBase):
    __slots__ = ()


class BTree(BTreeBase):
    """
    An ordered set backed by a B-tree.

    Usage:
        tree = BTree(8)
        tree.add(5)
        5 in tree            # True
        tree.remove(5)       # True
        list(tree)           # ascending keys

        # custom ordering: any cmp-style callable
        desc = BTree(4, comparator=lambda a, b: (a < b) - (a > b))

        # rebuild from a level description (root level first)
        fixed = BTree(3, structure=[[[5]], [[1], [7]]])
    """
    __slots__ = ()
    NodeClass = BTreeNode
