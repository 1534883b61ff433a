from decimal import Decimal

import suite
from querypipe import P, empty, from_range, EmptySequenceError, TypeMismatchError, InvalidKeyError

test = suite.test
assert_that = suite.assert_that
assert_raises = suite.assert_raises

orders = [{'total': Decimal('50')}, {'total': Decimal('150')}]
cents = [{'total': Decimal('0.1')} for _ in range(10)]


# --- sum ---

@test("sum of decimal totals is exact")
def test_sum_exact_decimal():
    total = P(orders).stats.sum(lambda o: o['total'])
    assert_that(total == Decimal('200'), f"expected 200, got {total}")
    assert_that(isinstance(total, Decimal), "decimal input should give a decimal sum")

    dimes = P(cents).stats.sum(lambda o: o['total'])
    assert_that(dimes == Decimal('1.0'), f"ten dimes should be exactly one, got {dimes}")


@test("sum over an empty group is zero")
def test_sum_empty():
    assert_that(empty().stats.sum() == 0, "empty sum should be 0")
    assert_that(empty().stats.sum(lambda o: o['total']) == 0, "empty sum with selector should be 0")


@test("sum of plain numbers")
def test_sum_plain():
    assert_that(from_range(1, 4).stats.sum() == 10, "1 + 2 + 3 + 4")
    assert_that(P([0.5, 0.25]).stats.sum() == 0.75, "floats sum as floats")


@test("sum refuses to mix decimal and float")
def test_sum_mixed_types():
    assert_raises(TypeMismatchError, lambda: P([Decimal('1'), 0.5]).stats.sum())
    assert_raises(TypeMismatchError, lambda: P(['1', '2']).stats.sum(), "strings are not numbers")


# --- average ---

@test("average of order counts and totals")
def test_average_values():
    intensity = P([2, 4]).stats.average()
    income = P([Decimal('100'), Decimal('300')]).stats.average()
    assert_that(intensity == 3.0 and isinstance(intensity, float), f"int average should be the float 3.0, got {intensity}")
    assert_that(income == Decimal('200') and isinstance(income, Decimal), f"decimal average should be 200, got {income}")


@test("average reads each value once and stays exact")
def test_average_single_pass():
    calls = []
    orders = P([{'total': Decimal('0.10')}, {'total': Decimal('0.20')}, {'total': Decimal('0.30')}])
    result = orders.stats.average(lambda o: calls.append(o) or o['total'])
    assert_that(result == Decimal('0.2'), f"decimal cents should average exactly, got {result}")
    assert_that(len(calls) == 3, f"selector should run once per element, ran {len(calls)} times")


@test("average over an empty group fails")
def test_average_empty():
    error = assert_raises(EmptySequenceError, lambda: empty().stats.average())
    assert_that(isinstance(error, ZeroDivisionError), "empty average is also a division by zero")


@test("average names the record whose value could not be extracted")
def test_average_invalid_key():
    error = assert_raises(InvalidKeyError, lambda: P([{'total': Decimal('1')}, {}]).stats.average(lambda o: o['total']))
    assert_that(error.role == "value selector", "role should be the value selector")


# --- min / max ---

@test("min and max find extreme elements")
def test_min_max():
    words = P(['pear', 'fig', 'banana'])
    assert_that(words.stats.min(len) == 'fig', "shortest word")
    assert_that(words.stats.max(len) == 'banana', "longest word")
    assert_that(P([3, 1, 2]).stats.max() == 3, "largest number")
    assert_raises(EmptySequenceError, lambda: empty().stats.min())
    assert_raises(EmptySequenceError, lambda: empty().stats.max())
    assert_raises(TypeMismatchError, lambda: P([1, 'a']).stats.max())


if __name__ == "__main__":
    suite.run(title="querypipe stats test suite")
