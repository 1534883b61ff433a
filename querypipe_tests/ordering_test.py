from datetime import date
from decimal import Decimal

import suite
from dgen import from_schema
from querypipe import P, empty, OrderedEnumerable, TypeMismatchError, InvalidKeyError

test = suite.test
assert_that = suite.assert_that
assert_raises = suite.assert_raises

sales_schema = {
    'year': {'_qen_provider': 'choice', 'from': [2022, 2023]},
    'region': {'_qen_provider': 'choice', 'from': ['na', 'eu']},
    'sales': ('pyint', {'min_value': 100, 'max_value': 1000}),
}

# records sharing year and month, differing in total and id
starts = [
    {'id': 'ALFKI', 'start': date(1997, 8, 25), 'total': Decimal('150')},
    {'id': 'BONAP', 'start': date(1997, 8, 2), 'total': Decimal('300')},
    {'id': 'ANTON', 'start': date(1997, 8, 14), 'total': Decimal('150')},
    {'id': 'WOLZA', 'start': date(1998, 1, 5), 'total': Decimal('10')},
    {'id': 'QUICK', 'start': date(1996, 12, 1), 'total': Decimal('900')},
]


@test("order_by sorts ascending and order_by_descending sorts descending")
def test_order_by_directions():
    data = P([3, 1, 2])
    assert_that(isinstance(data.order_by(lambda x: x), OrderedEnumerable), "should return an ordered enumerable")
    assert_that(data.order_by(lambda x: x).to.list() == [1, 2, 3], "ascending")
    assert_that(data.order_by_descending(lambda x: x).to.list() == [3, 2, 1], "descending")


@test("constant key leaves the original order unchanged")
def test_order_by_constant_key_is_stable():
    data = from_schema(sales_schema, seed=7).take(30).to.list()
    assert_that(P(data).order_by(lambda r: 0).to.list() == data, "ascending constant key must be a no-op")
    assert_that(P(data).order_by_descending(lambda r: 0).to.list() == data, "descending constant key must be a no-op")


@test("equal keys keep their relative order")
def test_order_by_stable_ties():
    words = P(['bb', 'a', 'cc', 'd', 'ee'])
    assert_that(words.order_by(len).to.list() == ['a', 'd', 'bb', 'cc', 'ee'], "ties should keep source order")
    assert_that(words.order_by_descending(len).to.list() == ['bb', 'cc', 'ee', 'a', 'd'],
                "descending ties should keep source order too")


@test("year, month, total, id all descending breaks ties key by key")
def test_multi_key_descending():
    ordered = (P(starts)
               .order_by_descending(lambda r: r['start'].year)
               .then_by_descending(lambda r: r['start'].month)
               .then_by_descending(lambda r: r['total'])
               .then_by_descending(lambda r: r['id'])
               .select(lambda r: r['id'])
               .to.list())
    assert_that(ordered == ['WOLZA', 'BONAP', 'ANTON', 'ALFKI', 'QUICK'], f"unexpected order {ordered}")


@test("order_by_keys matches the chained form")
def test_order_by_keys():
    keys = [(lambda r: r['start'].year, True), (lambda r: r['start'].month, True),
            (lambda r: r['total'], True), (lambda r: r['id'], True)]
    chained = (P(starts).order_by_descending(lambda r: r['start'].year)
               .then_by_descending(lambda r: r['start'].month)
               .then_by_descending(lambda r: r['total'])
               .then_by_descending(lambda r: r['id']).to.list())
    assert_that(P(starts).order_by_keys(keys).to.list() == chained, "both forms should agree")
    assert_raises(ValueError, lambda: P(starts).order_by_keys([]), "an empty key list is rejected")


@test("mixed directions are independent per key")
def test_mixed_directions():
    data = from_schema(sales_schema, seed=11).take(40)
    ordered = data.order_by(lambda r: r['region']).then_by_descending(lambda r: r['sales']).to.list()
    for a, b in zip(ordered, ordered[1:]):
        assert_that(a['region'] <= b['region'], "primary key ascending")
        if a['region'] == b['region']:
            assert_that(a['sales'] >= b['sales'], "secondary key descending within equal regions")


@test("as_ordered keeps the source order for then_by")
def test_as_ordered():
    result = P(['b1', 'a2', 'b0']).as_ordered().then_by(lambda s: s[1]).to.list()
    assert_that(result == ['b0', 'b1', 'a2'], f"then_by should order by the second char, got {result}")


@test("order_by on an ordered sequence keeps the previous order for ties")
def test_reorder_is_stable():
    data = P([('x', 2), ('y', 1), ('x', 1)])
    result = data.order_by(lambda t: t[1]).order_by(lambda t: t[0]).to.list()
    assert_that(result == [('x', 1), ('x', 2), ('y', 1)], f"second sort should be stable, got {result}")


@test("incomparable keys raise TypeMismatchError")
def test_incomparable_keys():
    data = P([{'region': 'WA'}, {'region': None}, {'region': 'BC'}])
    error = assert_raises(TypeMismatchError, lambda: data.order_by(lambda c: c['region']).to.list())
    assert_that("'WA' (record {'region': 'WA'}) vs None (record {'region': None})" in str(error),
                f"error should name the colliding keys and records, got {error}")
    assert_that(isinstance(error.__cause__, TypeError), "the comparison error should be chained")


@test("incomparable keys on a later sort level name that level")
def test_incomparable_secondary_keys():
    data = P([{'year': 1997, 'region': 'WA'}, {'year': 1997, 'region': None}])
    error = assert_raises(TypeMismatchError,
                          lambda: data.order_by(lambda c: c['year']).then_by(lambda c: c['region']).to.list())
    assert_that(str(error).startswith("sort key #2"), f"error should name the second key, got {error}")


@test("a failing sort key names the record")
def test_sort_key_failure():
    data = P([{'total': 1}, {}])
    error = assert_raises(InvalidKeyError, lambda: data.order_by(lambda r: r['total']).to.list())
    assert_that(error.record == {}, "error should carry the record without the field")


@test("ordering an empty sequence is empty")
def test_order_empty():
    assert_that(empty().order_by(lambda x: x).then_by(lambda x: x).to.list() == [], "should be empty")


if __name__ == "__main__":
    suite.run(title="querypipe ordering test suite")
