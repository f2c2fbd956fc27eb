"""
Tests for catalog normalization and product filtering.
"""

from decimal import Decimal

from apps.pos.catalog import (
    Customer,
    Product,
    filter_products,
    normalize_customer,
    normalize_product,
)


class TestNormalizeProduct:
    """Test converting backend product dicts."""

    def test_mongo_style_id_and_category_object(self):
        product = normalize_product(
            {
                "_id": "abc123",
                "name": "Widget",
                "sku": "WID-001",
                "price": 10,
                "stock": 4,
                "category": {"_id": "cat1", "name": "Tools"},
                "image": "https://example.com/widget.png",
                "barcode": "1111",
            }
        )

        assert product == Product(
            id="abc123",
            name="Widget",
            sku="WID-001",
            price=Decimal("10"),
            stock=4,
            category="tools",
            image="https://example.com/widget.png",
            barcode="1111",
        )

    def test_plain_id_string_category_and_default_image(self, settings):
        settings.POS_DEFAULT_PRODUCT_IMAGE = "https://example.com/none.png"
        product = normalize_product(
            {"id": 7, "name": "Gadget", "sku": "G", "price": "5.50", "category": "Electronics"}
        )

        assert product.id == "7"
        assert product.price == Decimal("5.50")
        assert product.category == "electronics"
        assert product.image == "https://example.com/none.png"
        assert product.stock == 0

    def test_bad_price_becomes_zero(self):
        assert normalize_product({"id": "x", "price": "n/a"}).price == 0


class TestNormalizeCustomer:
    def test_loyalty_points_and_missing_contact(self):
        customer = normalize_customer({"_id": "c9", "name": "Sam", "loyaltyPoints": 12})

        assert customer == Customer(id="c9", name="Sam", loyalty_points=12)

    def test_snapshot_roundtrip(self, customer):
        assert Customer.from_dict(customer.to_dict()) == customer
        assert Customer.from_dict(None) is None


class TestFilterProducts:
    """Test search term and category filtering."""

    def test_all_category_and_empty_search_returns_everything(self, widget, gadget):
        assert filter_products([widget, gadget]) == [widget, gadget]

    def test_search_matches_name_case_insensitively(self, widget, gadget):
        assert filter_products([widget, gadget], search_term="wid") == [widget]

    def test_search_matches_sku(self, widget, gadget):
        assert filter_products([widget, gadget], search_term="gad-002") == [gadget]

    def test_category_filter(self, widget, gadget):
        assert filter_products([widget, gadget], category="Electronics") == [gadget]

    def test_search_and_category_combine(self, widget, gadget):
        assert filter_products([widget, gadget], search_term="wid", category="electronics") == []
