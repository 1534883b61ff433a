r'''
.------..------..------..------.
|d.--. ||g.--. ||e.--. ||n.--. |
| :/\: || :/\: || (\/) || :(): |
| (__) || :\/: || :\/: || ()() |
| '--'d|| '--'g|| '--'e|| '--'n|
`------'`------'`------'`------'
seeded sample datasets for querypipe tests.
'''

from datetime import date
from decimal import Decimal
from itertools import count
from typing import Any, Dict, Optional

import numpy as np
from faker import Faker

from querypipe import from_iterable, Enumerable
from querypipe.models import Customer, Dataset, Order, Product, Supplier

# (city, country) pairs shared by customers and suppliers so joins find matches
LOCATIONS = [
    ("London", "UK"), ("Berlin", "Germany"), ("Madrid", "Spain"),
    ("Paris", "France"), ("Seattle", "USA"), ("Sao Paulo", "Brazil"),
]
CATEGORIES = ["Beverages", "Condiments", "Confections", "Dairy Products", "Seafood"]

CUSTOMER_SCHEMA = {
    'company_name': 'company',
    'location': {'_qen_provider': 'choice', 'from': LOCATIONS},
    'region': {'_qen_provider': 'choice', 'from': ['WA', 'SP', 'BC', None, '', '  ']},
    'postal_code': {'_qen_provider': 'bothify', 'from': ['#####', '?# #??', '##-###', None]},
    'phone': {'_qen_provider': 'bothify', 'from': ['(###) ###-####', '###-#######', '(#) ###-##-##']},
    'orders': [{
        '_qen_count': (0, 6),
        '_qen_items': {
            'order_date': ('date_between', {'start_date': date(1996, 7, 1), 'end_date': date(1998, 5, 31)}),
            'total': {'_qen_provider': 'money', 'min': 10, 'max': 2500},
        },
    }],
}

PRODUCT_SCHEMA = {
    'product_name': 'word',
    'category': {'_qen_provider': 'choice', 'from': CATEGORIES},
    'unit_price': {'_qen_provider': 'money', 'min': 2, 'max': 120},
    'units_in_stock': {'_qen_provider': 'choice', 'from': [0, 0, 5, 13, 29, 40, 120]},
}

SUPPLIER_SCHEMA = {
    'name': 'company',
    'location': {'_qen_provider': 'choice', 'from': LOCATIONS + [("Tokyo", "Japan")]},
    'address': 'street_address',
}


class Generator:
    """schema interpreter."""

    def __init__(self, seed: Optional[int] = None):
        self._fake = Faker()
        if seed is not None:
            Faker.seed(seed)
            self._rng = np.random.default_rng(seed)
        else:
            self._rng = np.random.default_rng()

    def _resolve_faker_method(self, method_name: str, kwargs: Optional[Dict] = None) -> Any:
        try:
            method = getattr(self._fake, method_name)
        except AttributeError:
            raise ValueError(f"faker has no provider '{method_name}'")
        return method(**(kwargs or {}))

    def _pick(self, options: list) -> Any:
        # index first so tuples and None survive untouched by numpy
        return options[int(self._rng.integers(len(options)))]

    def _resolve_provider(self, config: Dict) -> Any:
        provider = config["_qen_provider"]
        if provider == "choice":
            return self._pick(config["from"])

        elif provider == "bothify":
            template = self._pick(config["from"])
            return None if template is None else self._fake.bothify(template)

        elif provider == "money":
            cents = self._rng.integers(config["min"] * 100, config["max"] * 100, endpoint=True)
            return Decimal(int(cents)).scaleb(-2)

        else:
            raise ValueError(f"unknown _qen_provider: '{provider}'")

    def create(self, schema: Any) -> Any:
        if isinstance(schema, dict):
            if "_qen_provider" in schema:
                return self._resolve_provider(schema)

            return {k: self.create(v) for k, v in schema.items()}

        if isinstance(schema, list):
            if not schema: return []
            item_schema = schema[0]
            count_ = self._get_count(item_schema)
            actual_item_schema = item_schema.get('_qen_items', item_schema)
            return [self.create(actual_item_schema) for _ in range(count_)]

        if isinstance(schema, str):
            if hasattr(self._fake, schema):
                return self._resolve_faker_method(schema)
            return schema  # otherwise, it's a literal string.

        if isinstance(schema, tuple) and len(schema) == 2 and isinstance(schema[1], dict):
            return self._resolve_faker_method(schema[0], schema[1])

        return schema

    def _get_count(self, item_schema: Any) -> int:
        count_ = 5 # default count
        if isinstance(item_schema, dict) and "_qen_count" in item_schema:
            count_config = item_schema["_qen_count"]
            if isinstance(count_config, int):
                count_ = count_config
            elif isinstance(count_config, (list, tuple)) and len(count_config) == 2:
                low, high = count_config
                count_ = int(self._rng.integers(low, high, endpoint=True))
        return count_


class _SchemaProvider:
    def __init__(self, schema: Any, seed: Optional[int] = None):
        self._schema = schema
        self._generator = Generator(seed)

    def take(self, count_: int) -> Enumerable:
        return from_iterable([self._generator.create(self._schema) for _ in range(count_)])


def from_schema(schema: Any, seed: Optional[int] = None) -> _SchemaProvider:
    return _SchemaProvider(schema, seed)

# --- typed sample datasets ---

def sample_dataset(seed: Optional[int] = None, customers: int = 20,
                   products: int = 30, suppliers: int = 8) -> Dataset:
    """a read-only snapshot of customers (with orders), products and suppliers."""
    gen = Generator(seed)
    order_ids = count(10248)

    built_customers = []
    for n in range(customers):
        raw = gen.create(CUSTOMER_SCHEMA)
        customer_id = f"C{n:04d}"
        city, country = raw['location']
        orders = tuple(Order(next(order_ids), customer_id, o['order_date'], o['total']) for o in raw['orders'])
        built_customers.append(Customer(
            customer_id=customer_id, company_name=raw['company_name'], city=city, country=country,
            phone=raw['phone'], region=raw['region'], postal_code=raw['postal_code'], orders=orders))

    built_products = []
    for n in range(products):
        raw = gen.create(PRODUCT_SCHEMA)
        built_products.append(Product(product_id=n + 1, **raw))

    built_suppliers = []
    for n in range(suppliers):
        raw = gen.create(SUPPLIER_SCHEMA)
        city, country = raw['location']
        built_suppliers.append(Supplier(f"S{n:03d} {raw['name']}", city, country, raw['address']))

    return Dataset(built_customers, built_products, built_suppliers)
