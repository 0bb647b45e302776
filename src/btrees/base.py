from abc import ABC, abstractmethod

from typing import Any, Callable, NamedTuple, TypeVar, Generic

# Two-argument ordering callable: negative, zero or positive like cmp().
Comparator = Callable[[Any, Any], int]


def natural_order(a: Any, b: Any) -> int:
    """Compare two values by their natural ordering (``<`` and ``>``)."""
    return (a > b) - (a < b)


class StructureError(ValueError):
    """Raised when a level description does not describe a valid B-tree."""
    pass


class SearchResult(NamedTuple):
    """
    A container for the result of locating a value inside a single node.

    Attributes:
        index (int):
            The smallest index i such that keys[i] >= value, or len(keys)
            if every key is smaller. For internal nodes this is also the
            index of the child to descend into.
        found (bool):
            True if keys[index] compares equal to the value.
    """
    index: int
    found: bool


T = TypeVar("T", bound="AbstractSetDataStructure")

class AbstractSetDataStructure(ABC, Generic[T]):
    """
    Abstract base class for an ordered set data structure.
    """

    @abstractmethod
    def add(self, value: Any) -> bool:
        """
        Add a value to the set. Values already present are ignored.

        Parameters:
            value: The value to be added.

        Returns:
            bool: True if the value was inserted, False if it was already present.
        """
        pass

    @abstractmethod
    def remove(self, value: Any) -> bool:
        """
        Remove a value from the set.

        Parameters:
            value: The value to be removed.

        Returns:
            bool: True if the value was found and removed, False otherwise.
        """
        pass

    @abstractmethod
    def contains(self, value: Any) -> bool:
        """
        Test whether the value is stored in the set.

        Parameters:
            value: The value to look up.

        Returns:
            bool: True if present.
        """
        pass

    @abstractmethod
    def is_empty(self) -> bool:
        pass
