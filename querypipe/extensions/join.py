from __future__ import annotations
import logging
import typing
from ..types import *
from ..errors import TypeMismatchError, guarded
from .grouping import Lookup

if typing.TYPE_CHECKING:
    from ..enumerable import Enumerable

logger = logging.getLogger(__name__)


def _key_shape(key: Any) -> Optional[int]:
    """None for a scalar key, the arity for a composite (tuple) key"""
    return len(key) if isinstance(key, tuple) else None


def _check_key_shapes(keys: List[Any]) -> None:
    """every join key, on both sides, must have the shape of the first one"""
    if not keys:
        return
    first, expected = keys[0], _key_shape(keys[0])
    for key in keys[1:]:
        actual = _key_shape(key)
        if actual == expected:
            continue
        if expected is None or actual is None:
            raise TypeMismatchError(f"cannot match composite and scalar join keys: {first!r} vs {key!r}")
        raise TypeMismatchError(f"composite keys differ in length: {first!r} vs {key!r}")


class JoinAccessor(Generic[T]):
    def __init__(self, enumerable_instance: 'Enumerable[T]'):
        self._enumerable = enumerable_instance

    def _keyed(self, inner: Iterable[U], outer_key_selector: KeySelector[T, K],
               inner_key_selector: KeySelector[U, K]) -> Tuple[List[Tuple[K, T]], Lookup[K, U]]:
        """evaluate each key once: outer (key, item) pairs plus an inner lookup"""
        outer_key = guarded(outer_key_selector, "outer join key")
        inner_key = guarded(inner_key_selector, "inner join key")
        inner_items = list(inner)
        inner_keys = [inner_key(item) for item in inner_items]
        outer_pairs = [(outer_key(item), item) for item in self._enumerable._get_data()]
        _check_key_shapes(inner_keys + [key for key, _ in outer_pairs])
        lookup = Lookup()
        for key, item in zip(inner_keys, inner_items):
            lookup.add(key, item)
        return outer_pairs, lookup

    def join(self, inner: Iterable[U], outer_key_selector: KeySelector[T, K],
             inner_key_selector: KeySelector[U, K],
             result_selector: Callable[[T, U], V]) -> 'Enumerable[V]':
        """inner join two sequences based on matching keys"""
        from ..enumerable import Enumerable
        def join_data():
            outer_pairs, inner_lookup = self._keyed(inner, outer_key_selector, inner_key_selector)
            result = [result_selector(outer_item, inner_item)
                      for outer_key, outer_item in outer_pairs
                      for inner_item in inner_lookup.get(outer_key)]
            logger.debug(f"join matched {len(result)} pair(s) from {len(outer_pairs)} outer item(s)")
            return result
        return Enumerable(join_data)

    def left_join(self, inner: Iterable[U], outer_key_selector: KeySelector[T, K],
                  inner_key_selector: KeySelector[U, K],
                  result_selector: Callable[[T, Optional[U]], V],
                  default_inner: Optional[U] = None) -> 'Enumerable[V]':
        """left outer join - includes all outer elements even without matches"""
        from ..enumerable import Enumerable
        def left_join_data():
            outer_pairs, inner_lookup = self._keyed(inner, outer_key_selector, inner_key_selector)
            result = []
            for outer_key, outer_item in outer_pairs:
                matched_inners = inner_lookup.get(outer_key)
                if matched_inners:
                    for inner_item in matched_inners:
                        result.append(result_selector(outer_item, inner_item))
                else:
                    result.append(result_selector(outer_item, default_inner))
            return result
        return Enumerable(left_join_data)

    def group_join(self, inner: Iterable[U], outer_key_selector: KeySelector[T, K],
                   inner_key_selector: KeySelector[U, K],
                   result_selector: Callable[[T, List[U]], V]) -> 'Enumerable[V]':
        """group join - pairs each outer element with all of its inner matches"""
        from ..enumerable import Enumerable
        def group_join_data():
            outer_pairs, inner_lookup = self._keyed(inner, outer_key_selector, inner_key_selector)
            return [result_selector(o, list(inner_lookup.get(key))) for key, o in outer_pairs]
        return Enumerable(group_join_data)
