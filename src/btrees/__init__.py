"""
B-tree ordered collections.

This package provides an in-memory B-tree set with pluggable ordering,
in-order and level-order snapshot iterators, and tools to inspect and
verify tree structure.
"""

from btrees.base import (
    AbstractSetDataStructure,
    SearchResult,
    StructureError,
    natural_order,
)
from btrees.btree_base import (
    BTreeBase,
    BTreeNodeBase,
    Stats,
    btree_stats_,
    collect_keys,
    print_pretty,
)
from btrees.btree import BTree, BTreeNode
from btrees.iterators import InOrderIterator, LevelOrderIterator
from btrees.factory import make_btree_classes, create_btree

__all__ = [
    'AbstractSetDataStructure',
    'SearchResult',
    'StructureError',
    'natural_order',
    'BTreeBase',
    'BTreeNodeBase',
    'BTree',
    'BTreeNode',
    'InOrderIterator',
    'LevelOrderIterator',
    'Stats',
    'btree_stats_',
    'collect_keys',
    'print_pretty',
    'make_btree_classes',
    'create_btree',
]
