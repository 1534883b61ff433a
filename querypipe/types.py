from typing import (
    TypeVar, Generic, Callable, Iterator, Iterable, Any, Optional, Union,
    Dict, List, Tuple, Set, Type
)

T = TypeVar('T')
U = TypeVar('U')
K = TypeVar('K')
V = TypeVar('V')

Predicate = Callable[[T], bool]
Selector = Callable[[T], U]
KeySelector = Callable[[T], K]
Accumulator = Callable[[U, T], U]
SortKey = Tuple[Callable[[T], Any], bool]


class Grouping(Generic[K, T]):
    """
    a (key, items) pair produced by group_by.
    unpacks like a tuple: `for key, items in groups`.
    """

    def __init__(self, key: K, items: List[T]):
        self.key = key
        self.items = items

    @property
    def count(self) -> int: return len(self.items)

    def as_enumerable(self) -> 'Enumerable[T]':
        """the group's members as a fresh enumerable, for per-group aggregation"""
        from .factories import from_iterable
        return from_iterable(self.items)

    def __iter__(self) -> Iterator[Any]:
        return iter((self.key, self.items))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Grouping):
            return NotImplemented
        return self.key == other.key and self.items == other.items

    def __repr__(self) -> str:
        return f"Grouping(key={self.key!r}, items={len(self.items)})"
