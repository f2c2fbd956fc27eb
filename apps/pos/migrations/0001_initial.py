import uuid

import django.db.models.deletion
import django_fsm
from django.conf import settings
from django.db import migrations, models

import apps.pos.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="CheckoutSession",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for the checkout session",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "tenant_id",
                    models.CharField(
                        help_text="Store identifier forwarded to the backend", max_length=64
                    ),
                ),
                (
                    "step",
                    django_fsm.FSMField(
                        choices=[
                            ("products", "Products"),
                            ("review", "Review"),
                            ("payment", "Payment"),
                        ],
                        default="products",
                        help_text="Current checkout wizard step",
                        max_length=50,
                    ),
                ),
                (
                    "items",
                    models.JSONField(
                        blank=True, default=list, help_text="Cart line items snapshot"
                    ),
                ),
                (
                    "customer",
                    models.JSONField(
                        blank=True,
                        help_text="Selected customer snapshot, empty for walk-in sales",
                        null=True,
                    ),
                ),
                ("search_term", models.CharField(blank=True, default="", max_length=200)),
                ("selected_category", models.CharField(default="all", max_length=100)),
                (
                    "payment_method",
                    models.CharField(
                        choices=[("cash", "Cash"), ("card", "Card"), ("digital", "Digital")],
                        default="cash",
                        max_length=20,
                    ),
                ),
                (
                    "amount_tendered",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Amount tendered exactly as typed by the cashier",
                        max_length=50,
                    ),
                ),
                (
                    "tax_rate",
                    models.DecimalField(
                        decimal_places=4,
                        default=apps.pos.models.default_tax_rate,
                        help_text="Tax rate applied to the cart subtotal (0.08 = 8%)",
                        max_digits=6,
                    ),
                ),
                (
                    "idempotency_key",
                    models.UUIDField(
                        default=uuid.uuid4,
                        help_text=(
                            "Sent with the transaction request; stable across retries of one sale"
                        ),
                    ),
                ),
                (
                    "is_submitting",
                    models.BooleanField(
                        default=False,
                        help_text="A transaction request for this session is in flight",
                    ),
                ),
                ("last_error", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "cashier",
                    models.ForeignKey(
                        help_text="Cashier who owns this draft sale",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="checkout_sessions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Checkout Session",
                "verbose_name_plural": "Checkout Sessions",
                "db_table": "pos_checkout_sessions",
                "ordering": ["-updated_at"],
                "unique_together": {("tenant_id", "cashier")},
            },
        ),
    ]
