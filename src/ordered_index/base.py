"""Common interface of every ordered index variant."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterator, Optional, Tuple

from ordered_index.logging_config import get_logger
from ordered_index.utils import Comparator, natural_order

logger = get_logger("OrderedIndex")

Entry = Tuple[Any, Any]


class _NotFound:
    """Marker returned by lookups for absent keys."""

    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"

    def __reduce__(self):
        return (_NotFound, ())


NOT_FOUND = _NotFound()


class AbstractOrderedIndex(ABC):
    """
    Abstract base class for an in-memory ordered key/value index.

    Keys are unique and ordered by a caller-supplied three-way comparison
    function ``cmp(a, b)`` returning a negative number, zero or a positive
    number. Absent keys and duplicate inserts are ordinary outcomes,
    reported as :data:`NOT_FOUND` / ``False`` instead of exceptions.
    """

    VARIANT = "abstract"

    def __init__(self, cmp: Optional[Comparator] = None, check_invariants: bool = False):
        self.cmp: Comparator = cmp if cmp is not None else natural_order
        self.check_invariants_on_mutation = check_invariants
        self._size = 0

    @abstractmethod
    def insert(self, key: Any, value: Any = None) -> bool:
        """
        Insert ``key`` with ``value``.

        Returns:
            bool: True if the entry was added, False if ``key`` was already present
                (the index is left untouched).
        """
        pass

    @abstractmethod
    def search(self, key: Any) -> Any:
        """Return the value stored for ``key`` or :data:`NOT_FOUND`."""
        pass

    @abstractmethod
    def delete(self, key: Any) -> bool:
        """Remove ``key``. Returns False if it was not present."""
        pass

    @abstractmethod
    def range_query(self, low: Any, high: Any) -> Iterator[Entry]:
        """
        Lazily yield ``(key, value)`` pairs with ``low <= key <= high`` in
        ascending order. ``low > high`` yields nothing.
        """
        pass

    @abstractmethod
    def items(self) -> Iterator[Entry]:
        """Yield every ``(key, value)`` pair in ascending key order."""
        pass

    @abstractmethod
    def height(self) -> int:
        """Number of node levels; 0 for an empty index."""
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    @abstractmethod
    def root_node(self):
        """Root node or None. Used by statistics, display and invariant checks."""
        pass

    # ------------------------------------------------------------------
    # Derived operations
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self._size == 0

    def __contains__(self, key: Any) -> bool:
        return self.search(key) is not NOT_FOUND

    def get(self, key: Any, default: Any = None) -> Any:
        value = self.search(key)
        return default if value is NOT_FOUND else value

    def __iter__(self) -> Iterator[Any]:
        for key, _ in self.items():
            yield key

    def keys(self) -> Iterator[Any]:
        return iter(self)

    def values(self) -> Iterator[Any]:
        for _, value in self.items():
            yield value

    def min_key(self) -> Any:
        for key, _ in self.items():
            return key
        return NOT_FOUND

    def max_key(self) -> Any:
        last = NOT_FOUND
        for key, _ in self.items():
            last = key
        return last

    def kth_smallest(self, k: int) -> Any:
        """Return the k-th smallest key (1-based) or NOT_FOUND if k > len(self)."""
        if k < 1:
            raise ValueError(f"k must be >= 1, got {k}")
        if k > self._size:
            return NOT_FOUND
        for i, key in enumerate(self, start=1):
            if i == k:
                return key
        return NOT_FOUND

    def check_invariants(self) -> None:
        """Verify every structural invariant, raising InvariantError on failure."""
        # Lazy import to break circular dependency
        from ordered_index.invariants import assert_index_invariants
        assert_index_invariants(self)

    def _after_mutation(self, op: str, key: Any) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"{self.VARIANT}: {op}({key!r}) -> size={self._size}")
        if self.check_invariants_on_mutation:
            self.check_invariants()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={self._size}, height={self.height()})"


def debug_log(message, *args, **kwargs):
    """Log a debug message only if debug logging is enabled"""
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(message, *args, **kwargs)
