"""
read-only records for the sample dataset: customers (owning their orders),
products and suppliers. relationships are expressed by matching keys.

money is always `decimal.Decimal`. constructors accept int/str/Decimal and
convert exactly; floats are refused so totals never drift.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Tuple

from .errors import TypeMismatchError


def to_money(value: Any, field_name: str = "amount") -> Decimal:
    """convert to an exact, finite decimal, rejecting binary floats"""
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeMismatchError(f"{field_name} must be exact (Decimal, int or str), got {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(value)
        except InvalidOperation as e:
            raise TypeMismatchError(f"{field_name} is not a decimal number: {value!r}") from e
    else:
        raise TypeMismatchError(f"{field_name} must be exact (Decimal, int or str), got {value!r}")
    # nan and infinity do not compare or add like money
    if not result.is_finite():
        raise TypeMismatchError(f"{field_name} must be a finite amount, got {value!r}")
    return result


def _duplicates(values) -> list:
    return [value for value, seen in Counter(values).items() if seen > 1]


@dataclass(frozen=True)
class Order:
    order_id: int
    customer_id: str
    order_date: date
    total: Decimal

    def __post_init__(self):
        if not isinstance(self.order_date, date):
            raise TypeMismatchError(f"order_date must be a date, got {self.order_date!r}")
        object.__setattr__(self, "total", to_money(self.total, "total"))


@dataclass(frozen=True)
class Customer:
    customer_id: str
    company_name: str
    city: str
    country: str
    phone: str
    region: Optional[str] = None
    postal_code: Optional[str] = None
    orders: Tuple[Order, ...] = field(default=())

    def __post_init__(self):
        object.__setattr__(self, "orders", tuple(self.orders))
        strangers = [o.order_id for o in self.orders if o.customer_id != self.customer_id]
        if strangers:
            raise ValueError(f"customer {self.customer_id} holds orders of another customer: {strangers}")


@dataclass(frozen=True)
class Product:
    product_id: int
    product_name: str
    category: str
    unit_price: Decimal
    units_in_stock: int

    def __post_init__(self):
        object.__setattr__(self, "unit_price", to_money(self.unit_price, "unit_price"))


@dataclass(frozen=True)
class Supplier:
    supplier_name: str
    city: str
    country: str
    address: Optional[str] = None


@dataclass(frozen=True)
class Dataset:
    """a static snapshot built once before any query runs"""
    customers: Tuple[Customer, ...] = ()
    products: Tuple[Product, ...] = ()
    suppliers: Tuple[Supplier, ...] = ()

    def __post_init__(self):
        for name in ("customers", "products", "suppliers"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

        checks = {
            "customer id": [c.customer_id for c in self.customers],
            "order id": [o.order_id for o in self.orders],
            "product id": [p.product_id for p in self.products],
            "supplier name": [s.supplier_name for s in self.suppliers],
        }
        for label, values in checks.items():
            repeated = _duplicates(values)
            if repeated:
                raise ValueError(f"duplicate {label}(s) in dataset: {repeated}")

    @property
    def orders(self) -> Tuple[Order, ...]:
        return tuple(order for customer in self.customers for order in customer.orders)
