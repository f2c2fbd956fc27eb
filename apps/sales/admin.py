"""
Django admin configuration for sales models.

Transactions are immutable, so the admin is read-only.
"""

from django.contrib import admin

from .models import Transaction, TransactionItem


class TransactionItemInline(admin.TabularInline):
    """Inline admin for TransactionItem model."""

    model = TransactionItem
    extra = 0
    can_delete = False
    fields = ["product_id", "name", "sku", "unit_price", "quantity", "line_total"]
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """Admin interface for Transaction model."""

    list_display = [
        "transaction_number",
        "tenant_id",
        "cashier",
        "customer_name",
        "payment_method",
        "total",
        "status",
        "created_at",
    ]
    list_filter = ["status", "payment_method", "created_at"]
    search_fields = ["transaction_number", "backend_id", "customer_name", "tenant_id"]
    inlines = [TransactionItemInline]
    fieldsets = [
        (
            "Basic Information",
            {
                "fields": ["id", "tenant_id", "backend_id", "transaction_number", "cashier"],
            },
        ),
        (
            "Customer",
            {
                "fields": ["customer_id", "customer_name", "customer_email", "customer_phone"],
            },
        ),
        (
            "Financial Details",
            {
                "fields": [
                    "payment_method",
                    "subtotal",
                    "tax",
                    "discount",
                    "total",
                    "amount_paid",
                    "change_amount",
                    "due_amount",
                ],
            },
        ),
        (
            "Status",
            {
                "fields": ["status", "created_at"],
            },
        ),
    ]

    def get_readonly_fields(self, request, obj=None):
        return [field.name for field in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
