"""
Django admin configuration for checkout sessions.
"""

from django.contrib import admin

from .models import CheckoutSession


@admin.register(CheckoutSession)
class CheckoutSessionAdmin(admin.ModelAdmin):
    """Admin interface for CheckoutSession model."""

    list_display = ["id", "tenant_id", "cashier", "step", "is_submitting", "updated_at"]
    list_filter = ["step", "is_submitting", "payment_method"]
    search_fields = ["tenant_id", "cashier__username"]
    readonly_fields = ["id", "idempotency_key", "created_at", "updated_at"]
    fieldsets = [
        (
            "Basic Information",
            {
                "fields": ["id", "tenant_id", "cashier", "step"],
            },
        ),
        (
            "Cart",
            {
                "fields": ["items", "customer", "search_term", "selected_category", "tax_rate"],
            },
        ),
        (
            "Payment",
            {
                "fields": ["payment_method", "amount_tendered"],
            },
        ),
        (
            "Submission",
            {
                "fields": ["idempotency_key", "is_submitting", "last_error"],
            },
        ),
        (
            "Timestamps",
            {
                "fields": ["created_at", "updated_at"],
            },
        ),
    ]
