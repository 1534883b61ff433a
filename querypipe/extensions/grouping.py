from __future__ import annotations
import logging
import typing
from ..types import *
from ..errors import guarded

if typing.TYPE_CHECKING:
    from ..enumerable import Enumerable

logger = logging.getLogger(__name__)


class Lookup(Generic[K, T]):
    """
    an ordered key -> members index using value equality.
    keys keep first-seen order and members keep insertion order.
    unhashable keys (lists, dicts) fall back to an equality scan.
    """

    def __init__(self):
        self._slots: Dict[Any, int] = {}
        self._unhashable: List[Tuple[K, int]] = []
        self._keys: List[K] = []
        self._members: List[List[T]] = []

    @classmethod
    def build(cls, items: Iterable[T], key_selector: KeySelector[T, K]) -> 'Lookup[K, T]':
        lookup = cls()
        for item in items:
            lookup.add(key_selector(item), item)
        return lookup

    def _find(self, key: K) -> Optional[int]:
        try:
            return self._slots.get(key)
        except TypeError:
            return next((slot for k, slot in self._unhashable if k == key), None)

    def add(self, key: K, item: T) -> None:
        slot = self._find(key)
        if slot is None:
            slot = len(self._keys)
            self._keys.append(key)
            self._members.append([])
            try:
                self._slots[key] = slot
            except TypeError:
                self._unhashable.append((key, slot))
        self._members[slot].append(item)

    def get(self, key: K) -> List[T]:
        """members for key, or an empty list"""
        slot = self._find(key)
        return self._members[slot] if slot is not None else []

    def __contains__(self, key: K) -> bool:
        return self._find(key) is not None

    def __len__(self) -> int:
        return len(self._keys)

    def groupings(self) -> List[Grouping[K, T]]:
        return [Grouping(key, list(members)) for key, members in zip(self._keys, self._members)]


class GroupingAccessor(Generic[T]):
    def __init__(self, enumerable_instance: 'Enumerable[T]'):
        self._enumerable = enumerable_instance

    def group_by(self, key_selector: KeySelector[T, K]) -> 'Enumerable[Grouping[K, T]]':
        """group elements by a key, groups in first-seen key order"""
        from ..enumerable import Enumerable
        key = guarded(key_selector, "group key")
        def group_data():
            groups = Lookup.build(self._enumerable._get_data(), key).groupings()
            logger.debug(f"grouped into {len(groups)} group(s)")
            return groups
        return Enumerable(group_data)

    def group_by_multiple(self, *key_selectors: KeySelector[T, Any]) -> 'Enumerable[Grouping[Tuple, T]]':
        """group by multiple keys returning composite key tuples"""
        if not key_selectors:
            raise ValueError("group_by_multiple requires at least one key selector.")
        keys = [guarded(selector, f"group key #{i + 1}") for i, selector in enumerate(key_selectors)]
        return self.group_by(lambda item: tuple(key(item) for key in keys))

    def group_by_with_aggregate(self, key_selector: KeySelector[T, K],
                                element_selector: Selector[T, U],
                                result_selector: Callable[[K, 'Enumerable[U]'], V]) -> 'Enumerable[V]':
        """group by key, project members, then reduce each group to one result"""
        from ..enumerable import Enumerable
        from ..factories import from_iterable
        element = guarded(element_selector, "element selector")
        def aggregate_data():
            groups = self.group_by(key_selector).to.list()
            return [result_selector(g.key, from_iterable([element(item) for item in g.items])) for g in groups]
        return Enumerable(aggregate_data)

    def partition(self, predicate: Predicate[T]) -> Tuple[List[T], List[T]]:
        """partition elements based on predicate"""
        check = guarded(predicate, "predicate")
        true_items, false_items = [], []
        for item in self._enumerable._get_data():
            (true_items if check(item) else false_items).append(item)
        return true_items, false_items
