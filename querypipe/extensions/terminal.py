from __future__ import annotations
import typing
import numpy as np
import pandas as pd
from functools import reduce
from ..types import *
from ..errors import EmptySequenceError, QueryError, guarded

if typing.TYPE_CHECKING:
    from ..enumerable import Enumerable

_NO_SEED = object()


class TerminalAccessor(Generic[T]):
    """materializes a chain into concrete, caller-owned results."""
    def __init__(self, enumerable_instance: 'Enumerable[T]'):
        self._enumerable = enumerable_instance

    def list(self) -> List[T]:
        """convert to a fresh list"""
        return list(self._enumerable._get_data())

    def array(self) -> np.ndarray:
        """convert to numpy array"""
        return np.array(self._enumerable._get_data())

    def set(self) -> Set[T]:
        """convert to set"""
        return set(self._enumerable._get_data())

    def dict(self, key_selector: KeySelector[T, K],
             value_selector: Optional[Selector[T, V]] = None) -> Dict[K, V]:
        """convert to dictionary"""
        key = guarded(key_selector, "dict key")
        val_sel = guarded(value_selector, "dict value") if value_selector else lambda item: item
        return {key(item): val_sel(item) for item in self._enumerable._get_data()}

    def df(self) -> pd.DataFrame:
        """convert to pandas dataframe; dataclass and dict records become columns"""
        return pd.DataFrame(self._enumerable._get_data())

    def count(self, predicate: Optional[Predicate[T]] = None) -> int:
        """count elements"""
        if predicate is None: return len(self._enumerable._get_data())
        check = guarded(predicate, "predicate")
        return sum(1 for x in self._enumerable._get_data() if check(x))

    def any(self, predicate: Optional[Predicate[T]] = None) -> bool:
        """check if any element satisfies condition"""
        data = self._enumerable._get_data()
        if predicate is None: return len(data) > 0
        check = guarded(predicate, "predicate")
        return any(check(x) for x in data)

    def all(self, predicate: Predicate[T]) -> bool:
        """check if all elements satisfy condition"""
        check = guarded(predicate, "predicate")
        return all(check(x) for x in self._enumerable._get_data())

    def first(self, predicate: Optional[Predicate[T]] = None) -> T:
        """get first element"""
        data = self._enumerable._get_data()
        if predicate is None:
            if not data: raise EmptySequenceError("sequence contains no elements")
            return data[0]
        check = guarded(predicate, "predicate")
        for item in data:
            if check(item): return item
        raise EmptySequenceError("no element satisfies the condition")

    def first_or_default(self, predicate: Optional[Predicate[T]] = None,
                         default: Optional[T] = None) -> Optional[T]:
        """get first element or default"""
        try: return self.first(predicate)
        except EmptySequenceError: return default

    def single(self, predicate: Optional[Predicate[T]] = None) -> T:
        """get single element, erroring if not exactly one"""
        data = self._enumerable._get_data()
        if predicate:
            check = guarded(predicate, "predicate")
            data = [x for x in data if check(x)]
        if len(data) == 0: raise EmptySequenceError("sequence contains no matching elements")
        if len(data) > 1: raise QueryError("sequence contains more than one matching element")
        return data[0]

    def aggregate(self, accumulator: Accumulator[T, T], seed: Any = _NO_SEED) -> T:
        """applies accumulator function over sequence"""
        data = self._enumerable._get_data()
        if seed is not _NO_SEED: return reduce(accumulator, data, seed)
        if not data: raise EmptySequenceError("cannot aggregate empty sequence without seed")
        return reduce(accumulator, data)
