"""
Serializers for recorded transactions.
"""

from rest_framework import serializers

from .models import Transaction, TransactionItem


class TransactionItemSerializer(serializers.ModelSerializer):
    """Serializer for transaction line items."""

    class Meta:
        model = TransactionItem
        fields = ["product_id", "name", "sku", "unit_price", "quantity", "line_total"]


class TransactionListSerializer(serializers.ModelSerializer):
    """Serializer for the transaction list."""

    cashier_name = serializers.SerializerMethodField()
    customer_name = serializers.CharField(source="get_customer_display", read_only=True)
    item_count = serializers.SerializerMethodField()

    class Meta:
        model = Transaction
        fields = [
            "id",
            "backend_id",
            "transaction_number",
            "cashier_name",
            "customer_name",
            "payment_method",
            "total",
            "due_amount",
            "status",
            "item_count",
            "created_at",
        ]

    def get_cashier_name(self, obj):
        return obj.cashier.get_full_name() or obj.cashier.get_username()

    def get_item_count(self, obj):
        return sum(item.quantity for item in obj.items.all())


class TransactionDetailSerializer(TransactionListSerializer):
    """Full transaction with items, customer snapshot and amounts."""

    items = TransactionItemSerializer(many=True, read_only=True)
    customer = serializers.SerializerMethodField()

    class Meta(TransactionListSerializer.Meta):
        fields = TransactionListSerializer.Meta.fields + [
            "items",
            "customer",
            "subtotal",
            "tax",
            "discount",
            "amount_paid",
            "change_amount",
        ]

    def get_customer(self, obj):
        if obj.is_walk_in:
            return None
        return {
            "id": obj.customer_id,
            "name": obj.customer_name,
            "email": obj.customer_email,
            "phone": obj.customer_phone,
        }


class TransactionStatsSerializer(serializers.Serializer):
    total_transactions = serializers.IntegerField()
    total_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    average_transaction = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_items_sold = serializers.IntegerField()
    today_sales = serializers.DecimalField(max_digits=14, decimal_places=2)
