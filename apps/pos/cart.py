"""
In-progress sale cart.

The cart is a plain Python object so it can be rebuilt from the JSON
snapshot stored on a checkout session, mutated, and written back. All
money is ``Decimal``; nothing is rounded here. Rounding to cents happens
only when values are displayed or persisted.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Optional

from .catalog import Product

ZERO = Decimal("0")


@dataclass
class LineItem:
    """A product and the quantity being sold. Quantity is always positive."""

    product: Product
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {"product": self.product.to_dict(), "quantity": self.quantity}


class Cart:
    """
    Ordered list of line items, unique by product id.

    Adding a product that is already in the cart increments its quantity
    instead of appending a second line, and lines keep the order in which
    their product was first added.
    """

    def __init__(self, items: Optional[List[LineItem]] = None, tax_rate: Decimal = ZERO):
        self._items: List[LineItem] = list(items or [])
        self.tax_rate = Decimal(str(tax_rate))

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[LineItem]:
        return iter(self._items)

    @property
    def items(self) -> List[LineItem]:
        return list(self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def item_count(self) -> int:
        """Total number of units across all lines."""
        return sum(item.quantity for item in self._items)

    def get_item(self, product_id: str) -> Optional[LineItem]:
        for item in self._items:
            if item.product.id == str(product_id):
                return item
        return None

    # Mutations

    def add_item(self, product: Product) -> LineItem:
        """Add one unit of ``product``. Stock is not checked here."""
        existing = self.get_item(product.id)
        if existing:
            existing.quantity += 1
            return existing

        item = LineItem(product=product, quantity=1)
        self._items.append(item)
        return item

    def update_quantity(self, product_id: str, quantity: int) -> None:
        """Set the quantity of a line. Zero or less removes it; unknown ids are ignored."""
        if quantity <= 0:
            self.remove_item(product_id)
            return

        item = self.get_item(product_id)
        if item:
            item.quantity = quantity

    def remove_item(self, product_id: str) -> None:
        self._items = [item for item in self._items if item.product.id != str(product_id)]

    def clear(self) -> None:
        self._items = []

    # Totals

    @property
    def subtotal(self) -> Decimal:
        return sum((item.line_total for item in self._items), ZERO)

    @property
    def tax(self) -> Decimal:
        return self.subtotal * self.tax_rate

    @property
    def total(self) -> Decimal:
        return self.subtotal + self.tax

    # Persistence

    def to_snapshot(self) -> List[Dict[str, Any]]:
        return [item.to_dict() for item in self._items]

    @classmethod
    def from_snapshot(
        cls, data: Optional[List[Dict[str, Any]]], tax_rate: Decimal = ZERO
    ) -> "Cart":
        items = [
            LineItem(product=Product.from_dict(entry["product"]), quantity=int(entry["quantity"]))
            for entry in data or []
        ]
        return cls(items=items, tax_rate=tax_rate)
