from __future__ import annotations

import logging
from operator import itemgetter
from abc import ABC, abstractmethod
from .types import *
from .errors import TypeMismatchError, guarded

# --- core functionality ---
from .extensions.core import _CoreOperations

# --- accessors ---
from .extensions.join import JoinAccessor
from .extensions.grouping import GroupingAccessor
from .extensions.stats import StatsAccessor
from .extensions.terminal import TerminalAccessor

logger = logging.getLogger(__name__)


def _collision(keyed: List[Tuple[Any, Any]]) -> str:
    """describe the first pair of (key, record) entries whose keys cannot be ordered"""
    for i, (left_key, left) in enumerate(keyed):
        for right_key, right in keyed[i + 1:]:
            try:
                left_key < right_key
                right_key < left_key
            except TypeError:
                return f"{left_key!r} (record {left!r}) vs {right_key!r} (record {right!r})"
    return "no single pair collides"

# --- abstract base class ---

class IEnumerable(ABC, Generic[T]):
    @abstractmethod
    def _get_data(self) -> List[T]:
        """get the underlying data as a list"""
        pass

# --- base enumerable implementation ---

class _BaseEnumerable(IEnumerable[T]):
    def __init__(self, data_func: Callable[[], List[T]]):
        """init with a function that returns data when called"""
        self._data_func = data_func
        self._cached_result: Optional[List[T]] = None
        self._is_cached = False

    def _get_data(self) -> List[T]:
        """get the current data, caching the result"""
        if not self._is_cached:
            self._cached_result = self._data_func()
            self._is_cached = True
        return self._cached_result

    def __iter__(self) -> Iterator[T]:
        return iter(self._get_data())

    def __len__(self) -> int:
        return self.to.count()

# --- main enumerable class ---

class Enumerable(
    _BaseEnumerable[T],
    _CoreOperations[T]
):
    """a deferred, chainable query over an in-memory sequence."""
    def __init__(self, data_func: Callable[[], List[T]]):
        super().__init__(data_func)
        # --- initialize accessors ---
        self.join = JoinAccessor(self)
        self.group = GroupingAccessor(self)
        self.stats = StatsAccessor(self)
        self.to = TerminalAccessor(self)

    def __repr__(self) -> str:
        state = f"{len(self._cached_result)} items" if self._is_cached else "pending"
        return f"{type(self).__name__}({state})"

# --- ordered enumerable class ---

class OrderedEnumerable(Enumerable[T]):
    """represents a sorted sequence, allowing for subsequent orderings."""

    def __init__(self, data_func: Callable[[], List[T]], sort_keys: List[SortKey]):
        super().__init__(data_func)
        self._original_data_func = data_func
        self._sort_keys = sort_keys
        # reset cache flags after parent init
        self._cached_result: Optional[List[T]] = None
        self._is_cached = False

    @property
    def sort_keys(self) -> List[SortKey]:
        return list(self._sort_keys)

    def _get_data(self) -> List[T]:
        """overrides base to apply all sorts at once using stable sort."""
        if not self._is_cached:
            data = list(self._original_data_func())
            # python's sort is stable, so we sort from the last key to the first
            for level, (key_selector, is_descending) in reversed(list(enumerate(self._sort_keys))):
                role = f"sort key #{level + 1}"
                key = guarded(key_selector, role)
                keyed = [(key(item), item) for item in data]
                try:
                    keyed.sort(key=itemgetter(0), reverse=is_descending)
                except TypeError as e:
                    raise TypeMismatchError(f"{role} produced incomparable values: {_collision(keyed)}") from e
                data = [item for _, item in keyed]
            logger.debug(f"sorted {len(data)} items on {len(self._sort_keys)} key(s)")
            self._cached_result = data
            self._is_cached = True
        return self._cached_result

    def then_by(self, key_selector: KeySelector[T, K]) -> 'OrderedEnumerable[T]':
        """secondary sort ascending"""
        new_keys = self._sort_keys + [(key_selector, False)]
        return OrderedEnumerable(self._original_data_func, new_keys)

    def then_by_descending(self, key_selector: KeySelector[T, K]) -> 'OrderedEnumerable[T]':
        """secondary sort descending"""
        new_keys = self._sort_keys + [(key_selector, True)]
        return OrderedEnumerable(self._original_data_func, new_keys)
