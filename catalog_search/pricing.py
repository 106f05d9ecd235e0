# catalog_search/pricing.py
"""Inventory lookup: quantity on hand and display prices for a product or variant."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Optional, Union

from .exceptions import PricingError
from .models import Product, ProductVariant
from .schemas import InventoryEntry

Sellable = Union[Product, ProductVariant]


def format_amount(amount: Decimal, currency: str) -> str:
    return f"{currency} {amount:,.2f}"


@dataclass(frozen=True)
class FinalPrice:
    original_price: Decimal
    final_price: Decimal
    discounted: bool
    currency: str

    @property
    def string_price(self) -> str:
        return format_amount(self.original_price, self.currency)

    @property
    def string_discounted_price(self) -> str:
        return format_amount(self.final_price, self.currency)


def _pricing_source(item: Sellable) -> Sellable:
    # A variant without its own price sells at the parent's price
    if isinstance(item, ProductVariant) and item.price is None:
        return item.product
    return item


def _special_active(source: Sellable, today: date) -> bool:
    if source.special_price is None or source.special_price >= source.price:
        return False
    if source.special_from is not None and today < source.special_from:
        return False
    if source.special_to is not None and today > source.special_to:
        return False
    return True


class PricingService:
    def __init__(self, today: Optional[Callable[[], date]] = None):
        self._today = today or date.today

    def calculate(self, item: Sellable, currency: str) -> FinalPrice:
        source = _pricing_source(item)
        if source is None or source.price is None:
            raise PricingError(f"No price defined for sku {item.sku!r}")

        price = Decimal(source.price)
        if _special_active(source, self._today()):
            return FinalPrice(price, Decimal(source.special_price), True, currency)
        return FinalPrice(price, price, False, currency)

    def inventory_entry(self, item: Sellable, currency: str) -> InventoryEntry:
        """Snapshot of sku, quantity and price; ``discount_price`` only when on special."""
        final = self.calculate(item, currency)
        sku = item.sku
        if not sku and isinstance(item, ProductVariant):
            sku = item.product.sku
        entry = InventoryEntry(
            sku=sku,
            quantity=item.quantity or 0,
            price=final.string_price,
        )
        if final.discounted:
            entry.discount_price = final.string_discounted_price
        return entry
