"""
the sample exercises, each a self-contained pipeline over the dataset
snapshot. every function returns a freshly materialized list of named
records; printing them is left to the caller.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from .enumerable import Enumerable
from .factories import P
from .models import Customer, Dataset, Product, Supplier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SampleSettings:
    """thresholds and filters used by the exercises"""
    limit: int = 5
    city: str = "London"
    total_threshold: Decimal = Decimal("1000")
    order_threshold: Decimal = Decimal("100")
    cheap_limit: Decimal = Decimal("20")
    expensive_limit: Decimal = Decimal("50")

    def replace(self, **changes) -> 'SampleSettings':
        return replace(self, **changes)


DEFAULT_SETTINGS = SampleSettings()

# --- result records ---

@dataclass(frozen=True)
class CustomerTotal:
    customer_id: str
    total_sum: Decimal


@dataclass(frozen=True)
class SupplierCustomers:
    supplier: Supplier
    customer_ids: Tuple[str, ...]


@dataclass(frozen=True)
class CustomerStart:
    customer_id: str
    start_date: date
    total_sum: Optional[Decimal] = None


@dataclass(frozen=True)
class CityStatistics:
    city: str
    intensity: float
    average_income: Decimal


@dataclass(frozen=True)
class StockGroup:
    in_stock: bool
    products: Tuple[Product, ...]


@dataclass(frozen=True)
class CategoryStock:
    category: str
    products_by_stock: Tuple[StockGroup, ...]


@dataclass(frozen=True)
class PriceBand:
    band: str
    products: Tuple[Product, ...]


@dataclass(frozen=True)
class ActivityCount:
    period: object
    order_count: int


@dataclass(frozen=True)
class CustomerActivity:
    by_month: Tuple[ActivityCount, ...]
    by_year: Tuple[ActivityCount, ...]
    by_year_month: Tuple[ActivityCount, ...]


# --- helpers ---

def _materialize(name: str, query: Enumerable) -> list:
    result = query.to.list()
    logger.info(f"{name}: {len(result)} result(s)")
    return result


def order_total(customer: Customer) -> Decimal:
    """exact sum of a customer's order totals, 0 when there are none"""
    return Decimal(P(customer.orders).stats.sum(lambda o: o.total))


def first_order_date(customer: Customer) -> date:
    """date of the earliest order; EmptySequenceError for customers without orders"""
    return P(customer.orders).order_by(lambda o: o.order_date).to.first().order_date


def has_incomplete_contacts(customer: Customer) -> bool:
    """non-numeric postal code, blank region, or a phone without an operator code"""
    postal = customer.postal_code
    non_numeric_postal = postal is not None and any(ch < '0' or ch > '9' for ch in postal)
    blank_region = not (customer.region or "").strip()
    no_operator_code = not customer.phone.startswith("(")
    return non_numeric_postal or blank_region or no_operator_code


_PRICE_BANDS = ("cheap", "average", "expensive")


def price_band(product: Product, cheap_limit: Decimal, expensive_limit: Decimal) -> str:
    if product.unit_price < cheap_limit: return "cheap"
    if product.unit_price < expensive_limit: return "average"
    return "expensive"


# --- restriction ---

def low_numbers(numbers: Iterable[int], settings: SampleSettings = DEFAULT_SETTINGS) -> List[int]:
    return _materialize("low_numbers", P(numbers).where(lambda n: n < settings.limit))


def products_in_stock(products: Iterable[Product]) -> List[Product]:
    return _materialize("products_in_stock", P(products).where(lambda p: p.units_in_stock > 0))


def customers_in_city(customers: Iterable[Customer],
                      settings: SampleSettings = DEFAULT_SETTINGS) -> List[Customer]:
    return _materialize("customers_in_city", P(customers).where(lambda c: c.city == settings.city))


def customers_with_total_over(customers: Iterable[Customer],
                              settings: SampleSettings = DEFAULT_SETTINGS) -> List[CustomerTotal]:
    """customers whose orders add up to more than the total threshold"""
    query = (P(customers)
             .select(lambda c: CustomerTotal(c.customer_id, order_total(c)))
             .where(lambda t: t.total_sum > settings.total_threshold))
    return _materialize("customers_with_total_over", query)


def customers_with_order_over(customers: Iterable[Customer],
                              settings: SampleSettings = DEFAULT_SETTINGS) -> List[str]:
    """ids of customers with at least one single order above the order threshold"""
    query = (P(customers)
             .where(lambda c: P(c.orders).to.any(lambda o: o.total > settings.order_threshold))
             .select(lambda c: c.customer_id))
    return _materialize("customers_with_order_over", query)


def customers_with_incomplete_contacts(customers: Iterable[Customer]) -> List[Customer]:
    return _materialize("customers_with_incomplete_contacts", P(customers).where(has_incomplete_contacts))


# --- suppliers ---

def _location(record) -> Tuple[str, str]:
    return record.country, record.city


def suppliers_with_local_customers(dataset: Dataset) -> List[SupplierCustomers]:
    """each supplier (in supplier order) with the customers sharing its country and city"""
    query = (P(dataset.suppliers)
             .join.group_join(dataset.customers, _location, _location,
                              lambda s, cs: SupplierCustomers(s, tuple(c.customer_id for c in cs)))
             .where(lambda sc: P(sc.customer_ids).to.any()))
    return _materialize("suppliers_with_local_customers", query)


def suppliers_with_local_customers_grouped(dataset: Dataset) -> List[SupplierCustomers]:
    """same pairing built by join + group-by; suppliers come out in customer order"""
    query = (P(dataset.customers)
             .join.join(dataset.suppliers, _location, _location, lambda c, s: (s, c))
             .group.group_by(lambda pair: pair[0])
             .select(lambda g: SupplierCustomers(g.key, tuple(c.customer_id for _, c in g.items))))
    return _materialize("suppliers_with_local_customers_grouped", query)


# --- first orders ---

def first_order_dates(customers: Iterable[Customer]) -> List[CustomerStart]:
    query = (P(customers)
             .where(lambda c: P(c.orders).to.any())
             .select(lambda c: CustomerStart(c.customer_id, first_order_date(c))))
    return _materialize("first_order_dates", query)


def first_orders_ordered(customers: Iterable[Customer]) -> List[CustomerStart]:
    """first order dates ordered by year, month, order total and id, all descending"""
    query = (P(customers)
             .where(lambda c: P(c.orders).to.any())
             .select(lambda c: CustomerStart(c.customer_id, first_order_date(c), order_total(c)))
             .order_by_descending(lambda s: s.start_date.year)
             .then_by_descending(lambda s: s.start_date.month)
             .then_by_descending(lambda s: s.total_sum)
             .then_by_descending(lambda s: s.customer_id))
    return _materialize("first_orders_ordered", query)


# --- grouping ---

def city_statistics(customers: Iterable[Customer]) -> List[CityStatistics]:
    """per city: average order count (intensity) and average order total (income)"""
    query = (P(customers)
             .group.group_by(lambda c: c.city)
             .select(lambda g: CityStatistics(
                 city=g.key,
                 intensity=float(g.as_enumerable().stats.average(lambda c: len(c.orders))),
                 average_income=g.as_enumerable().stats.average(order_total))))
    return _materialize("city_statistics", query)


def products_by_category(products: Iterable[Product]) -> List[CategoryStock]:
    """products per category, split by stock availability, each split ordered by price"""
    def stock_groups(category_products: Enumerable[Product]) -> Tuple[StockGroup, ...]:
        return tuple(category_products
                     .group.group_by(lambda p: p.units_in_stock > 0)
                     .select(lambda g: StockGroup(g.key, tuple(g.as_enumerable().order_by(lambda p: p.unit_price))))
                     .to.list())

    query = (P(products)
             .group.group_by(lambda p: p.category)
             .select(lambda g: CategoryStock(g.key, stock_groups(g.as_enumerable()))))
    return _materialize("products_by_category", query)


def products_by_price_band(products: Iterable[Product],
                           settings: SampleSettings = DEFAULT_SETTINGS) -> List[PriceBand]:
    if settings.cheap_limit > settings.expensive_limit:
        raise ValueError("cheap_limit must not exceed expensive_limit")
    query = (P(products)
             .group.group_by(lambda p: price_band(p, settings.cheap_limit, settings.expensive_limit))
             .order_by(lambda g: _PRICE_BANDS.index(g.key))
             .select(lambda g: PriceBand(g.key, tuple(g.items))))
    return _materialize("products_by_price_band", query)


def customer_activity(customers: Iterable[Customer]) -> CustomerActivity:
    """order counts by calendar month, by year, and by (year, month)"""
    orders = P(customers).select_many(lambda c: c.orders)

    def counts(grouped: Enumerable) -> Tuple[ActivityCount, ...]:
        return tuple(grouped
                     .order_by(lambda g: g.key)
                     .select(lambda g: ActivityCount(g.key, g.count)))

    activity = CustomerActivity(
        by_month=counts(orders.group.group_by(lambda o: o.order_date.month)),
        by_year=counts(orders.group.group_by(lambda o: o.order_date.year)),
        by_year_month=counts(orders.group.group_by_multiple(lambda o: o.order_date.year,
                                                            lambda o: o.order_date.month)),
    )
    logger.info(f"customer_activity: {len(activity.by_year_month)} active month(s)")
    return activity
