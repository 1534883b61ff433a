from __future__ import annotations
import typing
from itertools import takewhile, dropwhile
from ..types import *
from ..errors import InvalidKeyError, guarded

if typing.TYPE_CHECKING:
    from ..enumerable import Enumerable, OrderedEnumerable

class _CoreOperations(Generic[T]):
    def where(self: 'Enumerable[T]', predicate: Predicate[T]) -> 'Enumerable[T]':
        """filter elements based on a predicate, evaluated once per element"""
        from ..enumerable import Enumerable
        check = guarded(predicate, "predicate")
        def filter_data():
            return [x for x in self._get_data() if check(x)]
        # always return a base enumerable
        return Enumerable(filter_data)

    def select(self: 'Enumerable[T]', selector: Selector[T, U]) -> 'Enumerable[U]':
        """project each element to a new form"""
        from ..enumerable import Enumerable
        project = guarded(selector, "selector")
        return Enumerable(lambda: [project(x) for x in self._get_data()])

    def select_many(self: 'Enumerable[T]', selector: Selector[T, Iterable[U]]) -> 'Enumerable[U]':
        """project and flatten sequences"""
        from ..enumerable import Enumerable
        project = guarded(selector, "selector")
        def flat_map_data():
            result = []
            for item in self._get_data():
                inner = project(item)
                try:
                    members = iter(inner)
                except TypeError as e:
                    raise InvalidKeyError(item, "selector", f"returned non-iterable {inner!r}") from e
                result.extend(members)
            return result
        return Enumerable(flat_map_data)

    def select_with_index(self: 'Enumerable[T]', selector: Callable[[T, int], U]) -> 'Enumerable[U]':
        """project each element to a new form, using the element's index"""
        from ..enumerable import Enumerable
        def map_with_index_data():
            return [selector(item, index) for index, item in enumerate(self._get_data())]
        return Enumerable(map_with_index_data)

    def order_by(self: 'Enumerable[T]', key_selector: Callable[[T], K]) -> 'OrderedEnumerable[T]':
        """sort elements by a key"""
        from ..enumerable import OrderedEnumerable
        return OrderedEnumerable(self._get_data, [(key_selector, False)])

    def order_by_descending(self: 'Enumerable[T]', key_selector: Callable[[T], K]) -> 'OrderedEnumerable[T]':
        """sort elements by a key in descending order"""
        from ..enumerable import OrderedEnumerable
        return OrderedEnumerable(self._get_data, [(key_selector, True)])

    def order_by_keys(self: 'Enumerable[T]', sort_keys: Iterable[SortKey]) -> 'OrderedEnumerable[T]':
        """
        sort by an ordered list of (key_selector, is_descending) pairs.
        the first pair is the primary key, later pairs break ties.
        """
        from ..enumerable import OrderedEnumerable
        keys = list(sort_keys)
        if not keys:
            raise ValueError("order_by_keys requires at least one sort key.")
        return OrderedEnumerable(self._get_data, keys)

    def take(self: 'Enumerable[T]', count: int) -> 'Enumerable[T]':
        """take the first 'count' elements"""
        from ..enumerable import Enumerable
        return Enumerable(lambda: self._get_data()[:count])

    def skip(self: 'Enumerable[T]', count: int) -> 'Enumerable[T]':
        """skip the first 'count' elements"""
        from ..enumerable import Enumerable
        return Enumerable(lambda: self._get_data()[count:])

    def take_while(self: 'Enumerable[T]', predicate: Predicate[T]) -> 'Enumerable[T]':
        """take elements while predicate is true"""
        from ..enumerable import Enumerable
        return Enumerable(lambda: list(takewhile(guarded(predicate, "predicate"), self._get_data())))

    def skip_while(self: 'Enumerable[T]', predicate: Predicate[T]) -> 'Enumerable[T]':
        """skip elements while predicate is true"""
        from ..enumerable import Enumerable
        return Enumerable(lambda: list(dropwhile(guarded(predicate, "predicate"), self._get_data())))

    def default_if_empty(self: 'Enumerable[T]', default_value: T) -> 'Enumerable[T]':
        """returns the elements of a sequence, or a default value in a singleton collection if the sequence is empty"""
        from ..enumerable import Enumerable
        def default_data():
            data = self._get_data()
            return list(data) if data else [default_value]
        return Enumerable(default_data)

    def as_ordered(self: 'Enumerable[T]') -> 'OrderedEnumerable[T]':
        """
        treats the current sequence as already ordered, allowing 'then_by' to be called.
        this does not perform a sort. use it only when the source is pre-sorted.
        """
        from ..enumerable import OrderedEnumerable
        # the key is constant, so python's stable sort preserves the original order
        return OrderedEnumerable(self._get_data, [(lambda x: 0, False)])
