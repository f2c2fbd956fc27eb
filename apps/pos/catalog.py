"""
Catalog value types for the POS checkout.

Products and customers are owned by the retail backend and are read-only
here. The backend returns loosely shaped dicts (``_id`` or ``id``, a
category object or a plain string, optional fields), so every dict coming
from the API goes through ``normalize_product`` / ``normalize_customer``
exactly once and the rest of the code only sees these dataclasses.
"""

from dataclasses import asdict, dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional

from django.conf import settings


@dataclass(frozen=True)
class Product:
    """A sellable product as shown to the cashier."""

    id: str
    name: str
    sku: str
    price: Decimal
    stock: int = 0
    category: str = ""
    image: str = ""
    barcode: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["price"] = str(self.price)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        """Rebuild a product from ``to_dict`` output."""
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            sku=data.get("sku", ""),
            price=Decimal(str(data.get("price", "0"))),
            stock=int(data.get("stock", 0)),
            category=data.get("category", ""),
            image=data.get("image", ""),
            barcode=data.get("barcode", ""),
        )


@dataclass(frozen=True)
class Customer:
    """A customer attached to a sale. ``None`` is used for walk-in sales."""

    id: str
    name: str
    email: str = ""
    phone: str = ""
    loyalty_points: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["Customer"]:
        if not data:
            return None
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            email=data.get("email") or "",
            phone=data.get("phone") or "",
            loyalty_points=int(data.get("loyalty_points") or 0),
        )


def _api_id(data: Dict[str, Any]) -> str:
    return str(data.get("_id") or data.get("id") or "")


def _related_name(value: Any) -> str:
    # Populated references come back as objects, bare ones as strings
    if isinstance(value, dict):
        return value.get("name") or ""
    return value or ""


def _to_decimal(value: Any) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return Decimal("0")


def normalize_product(data: Dict[str, Any]) -> Product:
    """
    Convert a backend product dict into a ``Product``.

    Categories are lower-cased so they can be compared against the
    cashier's category filter. Missing images fall back to
    ``POS_DEFAULT_PRODUCT_IMAGE``.
    """
    return Product(
        id=_api_id(data),
        name=data.get("name", ""),
        sku=data.get("sku", ""),
        price=_to_decimal(data.get("price", 0)),
        stock=int(data.get("stock") or 0),
        category=_related_name(data.get("category")).lower(),
        image=data.get("image") or settings.POS_DEFAULT_PRODUCT_IMAGE,
        barcode=data.get("barcode") or "",
    )


def normalize_customer(data: Dict[str, Any]) -> Customer:
    """Convert a backend customer dict into a ``Customer``."""
    return Customer(
        id=_api_id(data),
        name=data.get("name", ""),
        email=data.get("email") or "",
        phone=data.get("phone") or "",
        loyalty_points=int(data.get("loyaltyPoints") or 0),
    )


def filter_products(
    products: Iterable[Product], search_term: str = "", category: str = "all"
) -> List[Product]:
    """
    Filter products by search term and category.

    The search term matches the product name or SKU, case-insensitively.
    The special category ``"all"`` matches every product.
    """
    term = (search_term or "").strip().lower()
    category = (category or "all").lower()

    results = []
    for product in products:
        matches_search = not term or term in product.name.lower() or term in product.sku.lower()
        matches_category = category == "all" or product.category == category
        if matches_search and matches_category:
            results.append(product)
    return results
