"""B-tree base implementation"""

from __future__ import annotations
import logging
import math
from typing import Any, List, Optional, Sequence, Tuple, Type
from dataclasses import dataclass

from btrees.base import (
    AbstractSetDataStructure,
    Comparator,
    SearchResult,
    StructureError,
    natural_order,
)
from btrees.iterators import InOrderIterator, LevelOrderIterator
from btrees.profiling import track_performance

# Configure logging
logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

# Constants
MIN_ORDER = 3
# Below this many keys a node is searched linearly
LINEAR_SEARCH_LIMIT = 8


class BTreeNodeBase:
    """
    A B-tree node: a sorted list of keys and, for internal nodes,
    len(keys) + 1 children. Leaves have no children.
    """
    __slots__ = ("keys", "children")

    def __init__(
        self,
        keys: Optional[Sequence[Any]] = None,
        children: Optional[Sequence[BTreeNodeBase]] = None
    ) -> None:
        self.keys: List[Any] = list(keys) if keys is not None else []
        self.children: List[BTreeNodeBase] = list(children) if children is not None else []

    def is_leaf(self) -> bool:
        return not self.children

    def is_full(self, order: int) -> bool:
        return len(self.keys) >= order - 1

    def __repr__(self) -> str:
        cls = self.__class__.__name__
        return f"{cls}(keys={self.keys!r}, children={len(self.children)})"


class BTreeBase(AbstractSetDataStructure):
    """
    A B-tree of a fixed order storing unique values.

    Attributes:
        order (int): Maximum number of children per node (>= 3).
        min_key_count (int): Minimum number of keys in a non-root node,
            ceil(order / 2) - 1.
        comparator (Comparator): Ordering callable returning a negative,
            zero or positive int.
        root (Optional[BTreeNodeBase]): The root node, None until the
            first insertion.
    """
    __slots__ = ("order", "min_key_count", "comparator", "root", "_size")

    # Overridden by subclasses and by factory-created classes
    NodeClass: Type[BTreeNodeBase] = BTreeNodeBase
    ORDER: Optional[int] = None

    def __init__(
        self,
        order: Optional[int] = None,
        comparator: Optional[Comparator] = None,
        structure: Optional[Sequence[Sequence[Sequence[Any]]]] = None
    ) -> None:
        """
        Create an empty tree, or one matching `structure`.

        Args:
            order (int): The order of the tree. Defaults to the class ORDER.
            comparator (Comparator): Optional ordering callable; natural
                ordering is used when omitted.
            structure: Optional level description, root level first. Each
                level is a list of nodes and each node a list of keys. See
                `from_structure`.

        Raises:
            ValueError: If order is not an int >= 3.
            TypeError: If comparator is not callable.
            StructureError: If structure does not describe a valid tree.
        """
        if order is None:
            order = self.ORDER
        if isinstance(order, bool) or not isinstance(order, int) or order < MIN_ORDER:
            raise ValueError(f"order must be an int >= {MIN_ORDER}, got {order!r}")
        if comparator is None:
            comparator = natural_order
        elif not callable(comparator):
            raise TypeError(f"comparator must be callable, got {type(comparator).__name__}")

        self.order = order
        self.min_key_count = math.ceil(order / 2) - 1
        self.comparator = comparator
        self.root: Optional[BTreeNodeBase] = None
        self._size = 0

        if structure is not None:
            self.root, self._size = self._build_from_structure(structure)

    @classmethod
    def from_structure(
        cls,
        order: int,
        structure: Sequence[Sequence[Sequence[Any]]],
        comparator: Optional[Comparator] = None
    ) -> BTreeBase:
        """
        Build a tree from an explicit level description.

        `structure` lists the levels root first, i.e. in the shape produced
        by `list(tree.level_iterator())`:

            [[[5]], [[1, 3], [7, 9]]]

        Nodes are created bottom-up; every node takes the next
        len(keys) + 1 nodes of the level below as its children.
        """
        return cls(order, comparator=comparator, structure=structure)

    # Public API
    def is_empty(self) -> bool:
        return self.root is None or not self.root.keys

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __contains__(self, value: Any) -> bool:
        return self.contains(value)

    def __iter__(self) -> InOrderIterator:
        return self.iterator()

    def __str__(self):
        cls = self.__class__.__name__
        if self.is_empty():
            return f"Empty {cls}(order={self.order})"
        return f"{cls}(order={self.order}, size={self._size}, height={self.height()})"

    __repr__ = __str__

    @track_performance
    def add(self, value: Any) -> bool:
        """
        Insert a value (average-case O(log n)). Duplicates are ignored.

        Full nodes are split on the way down, so the node a value
        finally lands in always has room for it. A full root is split
        even when the value turns out to be a duplicate.

        Returns:
            bool: True if inserted, False if the value was already present.
        """
        if self.is_empty():
            self.root = self.NodeClass([value])
            self._size = 1
            return True

        if self.root.is_full(self.order):
            old_root = self.root
            self.root = self.NodeClass(children=[old_root])
            self._split_child(self.root, 0)
            logger.debug(f"Root split, new root keys: {self.root.keys}")

        inserted = self._insert(self.root, value)
        self._collapse_root()
        if inserted:
            self._size += 1
        return inserted

    @track_performance
    def remove(self, value: Any) -> bool:
        """
        Remove a value if present.

        Returns:
            bool: True if the value was found and removed. When False the
            tree is left untouched.
        """
        if self.is_empty():
            return False

        removed = self._delete(self.root, value)
        if removed:
            self._size -= 1
            self._collapse_root()
        return removed

    @track_performance
    def contains(self, value: Any) -> bool:
        """Iterative membership test; False for an empty tree."""
        node = self.root
        if node is None:
            return False

        while True:
            index, found = self._search(node, value)
            if found:
                return True
            if node.is_leaf():
                return False
            node = node.children[index]

    def iterator(self) -> InOrderIterator:
        """Return a one-shot iterator over a snapshot of all keys in ascending order."""
        return InOrderIterator(self.root)

    def level_iterator(self) -> LevelOrderIterator:
        """Return a one-shot iterator over a snapshot of the keys, grouped by node, one depth at a time."""
        return LevelOrderIterator(self.root)

    def height(self) -> int:
        """
        Number of levels in the tree (0 when empty). An empty root leaf
        left behind by removals counts as zero levels.
        """
        if self.is_empty():
            return 0
        height = 1
        node = self.root
        while not node.is_leaf():
            node = node.children[0]
            height += 1
        return height

    def min(self) -> Any:
        if self.is_empty():
            raise ValueError("min() of an empty tree")
        return self._min_key(self.root)

    def max(self) -> Any:
        if self.is_empty():
            raise ValueError("max() of an empty tree")
        return self._max_key(self.root)

    # Search
    def _key_index(self, node: BTreeNodeBase, value: Any) -> int:
        """Smallest index i with keys[i] >= value, or len(keys)."""
        keys = node.keys
        compare = self.comparator

        if len(keys) < LINEAR_SEARCH_LIMIT:
            index = 0
            for key in keys:
                if compare(value, key) <= 0:
                    break
                index += 1
            return index

        lo, hi = 0, len(keys)
        while lo < hi:
            mid = (lo + hi) // 2
            if compare(keys[mid], value) < 0:
                lo = mid + 1
            else:
                hi = mid
        return lo

    def _search(self, node: BTreeNodeBase, value: Any) -> SearchResult:
        index = self._key_index(node, value)
        found = index < len(node.keys) and self.comparator(node.keys[index], value) == 0
        return SearchResult(index, found)

    @staticmethod
    def _min_key(node: BTreeNodeBase) -> Any:
        while not node.is_leaf():
            node = node.children[0]
        return node.keys[0]

    @staticmethod
    def _max_key(node: BTreeNodeBase) -> Any:
        while not node.is_leaf():
            node = node.children[-1]
        return node.keys[-1]

    # Insertion
    def _split_child(self, parent: BTreeNodeBase, index: int) -> None:
        """
        Split the full child at `index`, promoting its median key into
        `parent` at the same index. The left half stays at `index`, the
        right half becomes the child at `index + 1`.
        """
        node = parent.children[index]
        keys = node.keys
        # Median at round-half-up(len / 2) - 1
        mid = (len(keys) + 1) // 2 - 1

        right = self.NodeClass(keys[mid + 1:], node.children[mid + 1:])
        parent.keys.insert(index, keys[mid])
        parent.children.insert(index + 1, right)

        node.keys = keys[:mid]
        node.children = node.children[:mid + 1]

    def _insert(self, node: BTreeNodeBase, value: Any) -> bool:
        """
        Insert below a node that is known not to be full.

        With an odd order a split leaves one half a key short of
        min_key_count; such children are rebalanced once the recursive
        call returns.
        """
        index, found = self._search(node, value)

        if node.is_leaf():
            if found:
                return False
            node.keys.insert(index, value)
            return True

        if not found and node.children[index].is_full(self.order):
            self._split_child(node, index)
            index, found = self._search(node, value)

        inserted = not found and self._insert(node.children[index], value)
        self._restore_min_fill(node)
        return inserted

    def _restore_min_fill(self, parent: BTreeNodeBase) -> None:
        i = 0
        while i < len(parent.children):
            if len(parent.children[i].keys) < self.min_key_count:
                self._rebalance(parent, i)
                # a merge shifts the children left of i
                i = max(i - 1, 0)
            else:
                i += 1

    # Deletion
    def _delete(self, node: BTreeNodeBase, value: Any) -> bool:
        index, found = self._search(node, value)

        if node.is_leaf():
            if not found:
                return False
            del node.keys[index]
            return True

        child = node.children[index]
        if found:
            # Swap in the in-order predecessor and delete it from the left subtree
            predecessor = self._max_key(child)
            node.keys[index] = predecessor
            self._delete(child, predecessor)
        elif not self._delete(child, value):
            return False

        if len(child.keys) < self.min_key_count:
            self._rebalance(node, index)
        return True

    def _rebalance(self, parent: BTreeNodeBase, index: int) -> None:
        """
        Restore the minimum key count of parent.children[index] by
        stealing from the left sibling, else from the right sibling, else
        by merging with a neighbour.
        """
        node = parent.children[index]
        left = parent.children[index - 1] if index > 0 else None
        right = parent.children[index + 1] if index < len(parent.keys) else None

        if left is not None and len(left.keys) > self.min_key_count:
            node.keys.insert(0, parent.keys[index - 1])
            parent.keys[index - 1] = left.keys.pop()
            if not node.is_leaf():
                node.children.insert(0, left.children.pop())
            logger.debug(f"Rotated {parent.keys[index - 1]!r} up from left sibling")
        elif right is not None and len(right.keys) > self.min_key_count:
            node.keys.append(parent.keys[index])
            parent.keys[index] = right.keys.pop(0)
            if not node.is_leaf():
                node.children.append(right.children.pop(0))
            logger.debug(f"Rotated {parent.keys[index]!r} up from right sibling")
        else:
            # Merge with the right neighbour unless this is the last child
            separator = index if index < len(parent.keys) else index - 1
            self._merge_children(parent, separator)

    def _merge_children(self, parent: BTreeNodeBase, separator: int) -> None:
        """Fold parent.keys[separator] and the right child into the left child."""
        left = parent.children[separator]
        right = parent.children.pop(separator + 1)
        left.keys.append(parent.keys.pop(separator))
        left.keys.extend(right.keys)
        left.children.extend(right.children)
        logger.debug(f"Merged nodes into {left.keys!r}")

    def _collapse_root(self) -> None:
        while self.root is not None and not self.root.keys and self.root.children:
            self.root = self.root.children[0]
            logger.debug("Root emptied, its only child became the new root")

    # Structural constructor
    def _build_from_structure(
        self, structure: Sequence[Sequence[Sequence[Any]]]
    ) -> Tuple[Optional[BTreeNodeBase], int]:
        levels = [list(level) for level in structure]
        if not levels:
            return None, 0
        if len(levels[0]) != 1:
            raise StructureError(
                f"root level must contain exactly one node, got {len(levels[0])}"
            )

        size = 0
        child_level: Optional[List[BTreeNodeBase]] = None
        for depth in range(len(levels) - 1, -1, -1):
            current = []
            consumed = 0
            for pos, keys in enumerate(levels[depth]):
                node = self.NodeClass(keys)
                self._check_node_keys(node, depth, pos, is_leaf_root=len(levels) == 1)

                if child_level is not None:
                    count = len(node.keys) + 1
                    available = len(child_level) - consumed
                    if count > available:
                        raise StructureError(
                            f"node {pos} on level {depth} needs {count} children, "
                            f"but only {available} remain on level {depth + 1}"
                        )
                    node.children = child_level[consumed:consumed + count]
                    consumed += count
                    self._check_separators(node, depth, pos)

                size += len(node.keys)
                current.append(node)

            if child_level is not None and consumed != len(child_level):
                raise StructureError(
                    f"{len(child_level) - consumed} node(s) on level {depth + 1} "
                    f"are not attached to any parent"
                )
            child_level = current

        logger.debug(f"Built tree with {len(levels)} level(s) and {size} key(s) from structure")
        return child_level[0], size

    def _check_node_keys(
        self, node: BTreeNodeBase, depth: int, pos: int, is_leaf_root: bool
    ) -> None:
        keys = node.keys
        if len(keys) > self.order - 1:
            raise StructureError(
                f"node {pos} on level {depth} holds {len(keys)} keys, "
                f"more than order - 1 = {self.order - 1}"
            )
        if not keys and not is_leaf_root:
            raise StructureError(f"node {pos} on level {depth} has no keys")
        for a, b in zip(keys, keys[1:]):
            if self.comparator(a, b) >= 0:
                raise StructureError(
                    f"keys of node {pos} on level {depth} are not strictly increasing: "
                    f"{a!r} before {b!r}"
                )

    def _check_separators(self, node: BTreeNodeBase, depth: int, pos: int) -> None:
        compare = self.comparator
        for i, child in enumerate(node.children):
            if i > 0 and compare(self._min_key(child), node.keys[i - 1]) <= 0:
                raise StructureError(
                    f"child {i} of node {pos} on level {depth} holds keys "
                    f"not greater than separator {node.keys[i - 1]!r}"
                )
            if i < len(node.keys) and compare(self._max_key(child), node.keys[i]) >= 0:
                raise StructureError(
                    f"child {i} of node {pos} on level {depth} holds keys "
                    f"not less than separator {node.keys[i]!r}"
                )

    def print_structure(self, indent: int = 0) -> str:
        prefix = ' ' * indent
        if self.is_empty():
            return f"{prefix}Empty {self.__class__.__name__}"

        result = []

        def _collect(node: BTreeNodeBase, level: int) -> None:
            pad = prefix + ' ' * (4 * level)
            kind = "Leaf" if node.is_leaf() else "Internal"
            result.append(f"{pad}{node.__class__.__name__}({kind}, keys={node.keys})")
            for child in node.children:
                _collect(child, level + 1)

        _collect(self.root, 0)
        return "\n".join(result)


@dataclass
class Stats:
    height: int
    node_count: int
    key_count: int
    key_slot_count: int
    leaf_count: int
    least_key: Optional[Any]
    greatest_key: Optional[Any]
    leaves_same_depth: bool
    nodes_within_bounds: bool
    children_count_ok: bool
    is_search_tree: bool
    keys_in_order: bool
    size_consistent: bool


def btree_stats_(t: BTreeBase) -> Stats:
    """
    Returns aggregated statistics and invariant flags for a B-tree in
    **O(n)** time.
    """
    # ---------- empty tree return ---------------------------------
    if t is None or t.is_empty():
        return Stats(height            = 0,
                     node_count        = 0,
                     key_count         = 0,
                     key_slot_count    = 0,
                     leaf_count        = 0,
                     least_key         = None,
                     greatest_key      = None,
                     leaves_same_depth = True,
                     # an empty root may only be a leaf
                     nodes_within_bounds = t is None or t.root is None or not t.root.children,
                     children_count_ok = True,
                     is_search_tree    = True,
                     keys_in_order     = True,
                     size_consistent   = t is None or len(t) == 0)

    stats = _node_stats(t, t.root, is_root=True)

    # ---------- root-level checks (once) ---------------------------
    keys = collect_keys(t)
    compare = t.comparator
    stats.keys_in_order = all(compare(a, b) < 0 for a, b in zip(keys, keys[1:]))
    stats.size_consistent = len(keys) == len(t) == stats.key_count
    return stats


def _node_stats(t: BTreeBase, node: BTreeNodeBase, is_root: bool) -> Stats:
    compare = t.comparator
    keys = node.keys
    child_stats = [_node_stats(t, child, False) for child in node.children]

    stats = Stats(
        height=1,
        node_count=1,
        key_count=len(keys),
        key_slot_count=t.order - 1,
        leaf_count=1 if node.is_leaf() else 0,
        least_key=keys[0] if keys else None,
        greatest_key=keys[-1] if keys else None,
        leaves_same_depth=True,
        nodes_within_bounds=len(keys) <= t.order - 1 and (is_root or len(keys) >= t.min_key_count),
        children_count_ok=node.is_leaf() or len(node.children) == len(keys) + 1,
        is_search_tree=all(compare(a, b) < 0 for a, b in zip(keys, keys[1:])),
        keys_in_order=True,
        size_consistent=True,
    )
    if not child_stats:
        return stats

    heights = {cs.height for cs in child_stats}
    stats.height = 1 + max(heights)
    stats.leaves_same_depth = len(heights) == 1

    for i, cs in enumerate(child_stats):
        stats.node_count += cs.node_count
        stats.key_count += cs.key_count
        stats.key_slot_count += cs.key_slot_count
        stats.leaf_count += cs.leaf_count
        stats.leaves_same_depth &= cs.leaves_same_depth
        stats.nodes_within_bounds &= cs.nodes_within_bounds
        stats.children_count_ok &= cs.children_count_ok
        stats.is_search_tree &= cs.is_search_tree

        # Separator ordering against the child's whole key range
        if cs.least_key is not None and i > 0 and i - 1 < len(keys):
            if compare(cs.least_key, keys[i - 1]) <= 0:
                stats.is_search_tree = False
        if cs.greatest_key is not None and i < len(keys):
            if compare(cs.greatest_key, keys[i]) >= 0:
                stats.is_search_tree = False

    # ----- LEAST / GREATEST -----
    if child_stats[0].least_key is not None:
        stats.least_key = child_stats[0].least_key
    if child_stats[-1].greatest_key is not None:
        stats.greatest_key = child_stats[-1].greatest_key
    return stats


def collect_keys(tree: BTreeBase) -> List[Any]:
    return list(tree.iterator())


def print_pretty(tree: BTreeBase) -> None:
    """
    Prints the tree so that all nodes of one depth appear on the same
    line, root first, with every node padded to a common column width.
    """
    SEP = " | "
    levels = [
        [SEP.join(str(key) for key in node_keys) for node_keys in level]
        for level in tree.level_iterator()
    ]
    if not levels:
        print("Empty tree")
        return

    column_width = max(len(text) for level in levels for text in level) + 2
    max_slots = max(len(level) for level in levels)
    line_width = column_width * max_slots

    for depth, level in enumerate(levels):
        line = "".join(f"[{text}]".center(column_width) for text in level)
        print(f"Level {depth}: {line.center(line_width)}")
