"""
Serializers for the POS checkout API.

Input serializers validate request bodies before they reach the cart or
the session. ``CheckoutSessionSerializer`` renders the full checkout
state the till screen needs in a single response.
"""

from decimal import Decimal

from rest_framework import serializers

from .builder import to_cents
from .catalog import Customer, Product
from .models import CheckoutSession
from .payment import parse_amount

# Largest amount a transaction record can hold (12 digits, 2 decimal places)
MAX_AMOUNT = Decimal("9999999999.99")


def money(value):
    return str(to_cents(value))


class ProductSerializer(serializers.Serializer):
    """Product snapshot sent by the till when adding to the cart."""

    id = serializers.CharField(max_length=64)
    name = serializers.CharField(max_length=200)
    sku = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0"))
    stock = serializers.IntegerField(min_value=0, required=False, default=0)
    category = serializers.CharField(required=False, allow_blank=True, default="")
    image = serializers.CharField(required=False, allow_blank=True, default="")
    barcode = serializers.CharField(required=False, allow_blank=True, default="")

    def to_product(self):
        data = self.validated_data
        return Product(
            id=data["id"],
            name=data["name"],
            sku=data["sku"],
            price=data["price"],
            stock=data["stock"],
            category=data["category"].lower(),
            image=data["image"],
            barcode=data["barcode"],
        )


class CustomerSerializer(serializers.Serializer):
    """Customer snapshot selected for the sale."""

    id = serializers.CharField(max_length=64)
    name = serializers.CharField(max_length=200)
    email = serializers.CharField(required=False, allow_blank=True, default="")
    phone = serializers.CharField(required=False, allow_blank=True, default="")
    loyalty_points = serializers.IntegerField(required=False, default=0)


class CustomerCreateSerializer(serializers.Serializer):
    """Quick add of a customer during checkout."""

    name = serializers.CharField(max_length=200)
    email = serializers.EmailField(required=False, allow_blank=True, default="")
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")


class OpenCheckoutSerializer(serializers.Serializer):
    customer = CustomerSerializer(required=False, allow_null=True, default=None)


class QuantitySerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=0)


class ScanSerializer(serializers.Serializer):
    barcode = serializers.CharField(max_length=100, trim_whitespace=True)


class SubmitSerializer(serializers.Serializer):
    mark_as_due = serializers.BooleanField(required=False, default=False)


class CheckoutUpdateSerializer(serializers.ModelSerializer):
    """Fields the cashier can edit directly on the checkout."""

    customer = CustomerSerializer(required=False, allow_null=True)

    class Meta:
        model = CheckoutSession
        fields = [
            "search_term",
            "selected_category",
            "payment_method",
            "amount_tendered",
            "customer",
        ]
        extra_kwargs = {
            "search_term": {"required": False},
            "selected_category": {"required": False},
            "payment_method": {"required": False},
            "amount_tendered": {"required": False},
        }

    def validate_selected_category(self, value):
        return (value or "all").lower()

    def validate_amount_tendered(self, value):
        """
        Keep the text as typed so blank and unparseable entries still mean
        exact payment, but reject numbers no sale can be paid with.
        """
        amount = parse_amount(value)
        if amount is not None and amount < 0:
            raise serializers.ValidationError("Amount tendered cannot be negative.")
        if amount is not None and amount > MAX_AMOUNT:
            raise serializers.ValidationError(f"Amount tendered cannot exceed {MAX_AMOUNT}.")
        return value

    def update(self, instance, validated_data):
        if "customer" in validated_data:
            customer = validated_data.pop("customer")
            instance.set_customer(Customer(**customer) if customer else None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()
        return instance


class CheckoutSessionSerializer(serializers.ModelSerializer):
    """Read-only checkout state with totals and wizard flags."""

    items = serializers.SerializerMethodField()
    item_count = serializers.SerializerMethodField()
    subtotal = serializers.SerializerMethodField()
    tax = serializers.SerializerMethodField()
    total = serializers.SerializerMethodField()
    step_number = serializers.IntegerField(read_only=True)
    payment = serializers.SerializerMethodField()
    can_advance = serializers.SerializerMethodField()
    can_submit = serializers.SerializerMethodField()
    can_mark_as_due = serializers.SerializerMethodField()

    class Meta:
        model = CheckoutSession
        fields = [
            "id",
            "step",
            "step_number",
            "items",
            "item_count",
            "customer",
            "search_term",
            "selected_category",
            "payment_method",
            "amount_tendered",
            "tax_rate",
            "subtotal",
            "tax",
            "total",
            "payment",
            "can_advance",
            "can_submit",
            "can_mark_as_due",
            "is_submitting",
            "last_error",
            "updated_at",
        ]
        read_only_fields = fields

    def get_items(self, obj):
        return [
            {
                **item.product.to_dict(),
                "price": money(item.product.price),
                "quantity": item.quantity,
                "line_total": money(item.line_total),
            }
            for item in obj.cart
        ]

    def get_item_count(self, obj):
        return obj.cart.item_count

    def get_subtotal(self, obj):
        return money(obj.cart.subtotal)

    def get_tax(self, obj):
        return money(obj.cart.tax)

    def get_total(self, obj):
        return money(obj.cart.total)

    def get_payment(self, obj):
        check = obj.payment_check()
        return {
            "amount_paid": money(check.amount_paid),
            "sufficient": check.sufficient,
            "change": money(check.change),
            "due": money(check.due),
        }

    def get_can_advance(self, obj):
        return obj.can_advance()

    def get_can_submit(self, obj):
        return obj.can_submit()

    def get_can_mark_as_due(self, obj):
        return obj.can_submit(mark_as_due=True)
