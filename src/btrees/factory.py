"""Factory for order-specialised B-tree classes"""

from typing import Any, Dict, Optional, Sequence, Tuple, Type
import logging

from btrees.base import Comparator
from btrees.btree import BTree, BTreeNode
from btrees.btree_base import MIN_ORDER

# Configure logging
logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

# Cache for previously created classes to avoid recreating them
_class_cache: Dict[int, Tuple[Type[BTree], Type[BTreeNode]]] = {}


def make_btree_classes(order: int) -> Tuple[Type[BTree], Type[BTreeNode]]:
    """
    Generate a BTree subclass whose default order is `order`, together with
    its node class.

    Returns:
        BTreeO     – subclass of BTree with ORDER=order and NodeClass=BTreeNodeO.
        BTreeNodeO – subclass of BTreeNode.

    Raises:
        ValueError: If order is not an int >= 3.
    """
    if isinstance(order, bool) or not isinstance(order, int) or order < MIN_ORDER:
        raise ValueError(f"order must be an int >= {MIN_ORDER}, got {order!r}")

    if order in _class_cache:
        logger.debug(f"Using cached classes for order={order}")
        return _class_cache[order]

    logger.debug(f"Creating new classes for order={order}")

    BTreeNodeO = type(
        f"BTreeNode_O{order}",
        (BTreeNode,),
        {"__slots__": ()}
    )
    BTreeO = type(
        f"BTree_O{order}",
        (BTree,),
        {
            "ORDER": order,
            "NodeClass": BTreeNodeO,
            "__slots__": ()
        }
    )
    logger.debug(f"Created {BTreeO.__name__} with NodeClass={BTreeNodeO.__name__}")

    _class_cache[order] = (BTreeO, BTreeNodeO)
    return BTreeO, BTreeNodeO


def create_btree(
    order: int,
    comparator: Optional[Comparator] = None,
    structure: Optional[Sequence[Sequence[Sequence[Any]]]] = None
) -> BTree:
    """
    Create a new B-tree of the given order.

    Args:
        order (int): The order of the tree.
        comparator: Optional cmp-style ordering callable.
        structure: Optional level description, root level first.

    Returns:
        An instance of the order-specialised BTree class.
    """
    BTreeO, _ = make_btree_classes(order)
    tree = BTreeO(comparator=comparator, structure=structure)
    logger.debug(f"Created tree instance of type {type(tree).__name__}")
    return tree
