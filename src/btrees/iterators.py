"""Snapshot iterators over B-tree nodes"""

from __future__ import annotations
import collections
from typing import TYPE_CHECKING, Any, Deque, List, Optional

if TYPE_CHECKING:
    from btrees.btree_base import BTreeNodeBase


class InOrderIterator:
    """
    Yields every key of a (sub)tree in ascending order.

    The keys are collected once, at construction, by a reverse in-order
    traversal onto a stack, so that popping the stack produces ascending
    order. Later changes to the tree are not reflected. The iterator is
    one-shot: once exhausted it keeps raising StopIteration.
    """
    __slots__ = ("_stack",)

    def __init__(self, root: Optional[BTreeNodeBase]):
        self._stack: List[Any] = []
        if root is not None:
            self._push_reversed(root)

    def _push_reversed(self, node: BTreeNodeBase) -> None:
        keys = node.keys
        children = node.children
        for i in range(len(keys) - 1, -1, -1):
            if children:
                self._push_reversed(children[i + 1])
            self._stack.append(keys[i])
        if children:
            self._push_reversed(children[0])

    def __iter__(self) -> InOrderIterator:
        return self

    def __next__(self) -> Any:
        if not self._stack:
            raise StopIteration
        return self._stack.pop()

    def __length_hint__(self) -> int:
        return len(self._stack)


class LevelOrderIterator:
    """
    Yields the tree one depth at a time, root level first.

    Each element is a list with one entry per node on that level (left to
    right), and each entry is a copy of that node's key list.
    """
    __slots__ = ("_levels",)

    def __init__(self, root: Optional[BTreeNodeBase]):
        self._levels: Deque[List[List[Any]]] = collections.deque()
        level = [root] if root is not None else []
        while level:
            self._levels.append([list(node.keys) for node in level])
            level = [child for node in level for child in node.children]

    def __iter__(self) -> LevelOrderIterator:
        return self

    def __next__(self) -> List[List[Any]]:
        if not self._levels:
            raise StopIteration
        return self._levels.popleft()

    def __length_hint__(self) -> int:
        return len(self._levels)
