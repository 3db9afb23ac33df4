"""
Rental Catalog - the fixed set of rental products offered
"""

from dataclasses import dataclass
from datetime import timedelta
from types import MappingProxyType
from typing import Iterable, Optional

from rental_service.errors import InvalidProduct
from rental_service.models.enums import DayType

SATURDAY = 5


@dataclass(frozen=True)
class RentalProduct:
    """One rentable package: price, span and which days it may start on"""
    id: str
    name: str
    unit_price_cents: int
    duration_days: int
    day_type: DayType
    start_weekday: Optional[int] = None  # date.weekday() value, Monday == 0

    def end_date(self, start_date):
        return start_date + timedelta(days=self.duration_days - 1)

    def can_start_on(self, day) -> bool:
        """Day-type and start-weekday rules for a candidate start date"""
        if not self.day_type.admits(day):
            return False
        if self.start_weekday is not None and day.weekday() != self.start_weekday:
            return False
        return True


DEFAULT_PRODUCTS = (
    RentalProduct('half_day_weekday', 'Half Day Rental (Weekday)', 4500, 1, DayType.WEEKDAY),
    RentalProduct('full_day_weekday', 'Full Day Rental (Weekday)', 7500, 1, DayType.WEEKDAY),
    RentalProduct('half_day_weekend', 'Half Day Rental (Weekend)', 5500, 1, DayType.WEEKEND),
    RentalProduct('full_day_weekend', 'Full Day Rental (Weekend)', 10000, 1, DayType.WEEKEND),
    RentalProduct('weekend_package', 'Weekend Package (Sat+Sun)', 17500, 2, DayType.WEEKEND,
                  start_weekday=SATURDAY),
    RentalProduct('weekly', 'Weekly Rental', 35000, 7, DayType.ANY),
)


class RentalCatalog:
    """Read-only lookup table of rental products"""

    def __init__(self, products: Iterable[RentalProduct] = DEFAULT_PRODUCTS,
                 default_product_id: str = 'full_day_weekday'):
        table = {}
        for product in products:
            if product.duration_days < 1:
                raise ValueError(f"Product {product.id} must span at least one day")
            if product.id in table:
                raise ValueError(f"Duplicate product id {product.id}")
            table[product.id] = product
        if default_product_id not in table:
            raise ValueError(f"Default product {default_product_id} is not in the catalog")

        self._products = MappingProxyType(table)
        self.default_product_id = default_product_id

    def lookup(self, product_id: str) -> RentalProduct:
        """Get product by id, raising InvalidProduct for unknown ids"""
        product = self._products.get(product_id)
        if product is None:
            raise InvalidProduct(product_id)
        return product

    def __contains__(self, product_id):
        return product_id in self._products

    def __iter__(self):
        return iter(self._products.values())

    def __len__(self):
        return len(self._products)


def init_catalog(app):
    """Build the catalog once at startup and attach it to the app"""
    catalog = RentalCatalog(default_product_id=app.config.get('DEFAULT_RENTAL_TYPE', 'full_day_weekday'))
    app.extensions['rental_catalog'] = catalog
    return catalog


def get_catalog():
    """Catalog attached to the current app"""
    from flask import current_app
    return current_app.extensions['rental_catalog']
