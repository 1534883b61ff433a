from __future__ import annotations
import typing
from decimal import Decimal
from ..types import *
from ..errors import EmptySequenceError, TypeMismatchError, guarded

if typing.TYPE_CHECKING:
    from ..enumerable import Enumerable

Number = Union[int, float, Decimal]


class StatsAccessor(Generic[T]):
    """
    numeric aggregates over a sequence.
    arithmetic stays in the type of the extracted values, so decimal money
    totals are exact and never pass through binary floating point.
    """
    def __init__(self, enumerable_instance: 'Enumerable[T]'):
        self._enumerable = enumerable_instance

    def _get_values(self, selector: Optional[Selector[T, Number]] = None) -> List[Number]:
        """helper to extract numeric values for statistical operations."""
        data = self._enumerable._get_data()
        if selector:
            extract = guarded(selector, "value selector")
            data = [extract(item) for item in data]
        for value in data:
            if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
                raise TypeMismatchError(f"non-numeric value {value!r} in statistical operation.")
        has_decimal = any(isinstance(v, Decimal) for v in data)
        if has_decimal and any(isinstance(v, float) for v in data):
            raise TypeMismatchError("cannot mix decimal and float values in one aggregate.")
        return data

    def sum(self, selector: Optional[Selector[T, Number]] = None) -> Number:
        """calc sum; an empty sequence sums to 0"""
        return sum(self._get_values(selector))

    def average(self, selector: Optional[Selector[T, Number]] = None) -> Number:
        """calc average; decimal input gives a decimal, int input a float"""
        values = self._get_values(selector)
        if not values: raise EmptySequenceError("cannot calculate average of empty sequence")
        return sum(values) / len(values)

    def min(self, selector: Optional[Selector[T, Any]] = None) -> T:
        """find the minimum element (by selector when given)"""
        data = self._enumerable._get_data()
        if not data: raise EmptySequenceError("cannot find minimum of empty sequence")
        try:
            return min(data, key=guarded(selector, "min key")) if selector else min(data)
        except TypeError as e:
            raise TypeMismatchError(f"min over incomparable values: {e}") from e

    def max(self, selector: Optional[Selector[T, Any]] = None) -> T:
        """find the maximum element (by selector when given)"""
        data = self._enumerable._get_data()
        if not data: raise EmptySequenceError("cannot find maximum of empty sequence")
        try:
            return max(data, key=guarded(selector, "max key")) if selector else max(data)
        except TypeError as e:
            raise TypeMismatchError(f"max over incomparable values: {e}") from e
