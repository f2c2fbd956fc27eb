"""
Sales models for the retail POS.

A ``Transaction`` is the local, immutable record of a sale the backend
has accepted. It keeps a snapshot of the items, customer and amounts as
they were at checkout so receipts and reports never depend on later
changes to products or customers. Corrections to a sale go through the
backend, never through these rows.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models, transaction
from django.db.models import Count, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

CENT = Decimal("0.01")


def _cents(value):
    return Decimal(str(value)).quantize(CENT)


class TransactionManager(models.Manager):
    """Manager with the write path used by checkout."""

    @transaction.atomic
    def record_checkout(self, *, tenant_id, cashier, cart, customer, request, result, payment):
        """
        Create a transaction and its items from a completed checkout.

        Args:
            tenant_id: Store identifier
            cashier: User who processed the sale
            cart: ``Cart`` that was submitted
            customer: ``Customer`` or None for walk-in sales
            request: ``TransactionRequest`` sent to the backend
            result: ``TransactionResult`` returned by the backend
            payment: ``PaymentCheck`` for the submitted amount

        Returns:
            The new ``Transaction``
        """
        record = self.create(
            tenant_id=tenant_id,
            backend_id=result.id,
            transaction_number=result.transaction_number,
            cashier=cashier,
            customer_id=customer.id if customer else "",
            customer_name=customer.name if customer else "",
            customer_email=customer.email if customer else "",
            customer_phone=customer.phone if customer else "",
            payment_method=request.payment_method,
            subtotal=_cents(request.subtotal),
            tax=_cents(request.tax),
            discount=_cents(request.discount),
            total=_cents(request.total),
            amount_paid=_cents(request.amount_paid),
            change_amount=_cents(payment.change),
            due_amount=_cents(request.due_amount),
            status=Transaction.COMPLETED if request.is_paid else Transaction.DUE,
        )

        TransactionItem.objects.bulk_create(
            [
                TransactionItem(
                    transaction=record,
                    position=position,
                    product_id=item.product.id,
                    name=item.product.name,
                    sku=item.product.sku,
                    unit_price=_cents(item.product.price),
                    quantity=item.quantity,
                    line_total=_cents(item.line_total),
                )
                for position, item in enumerate(cart)
            ]
        )
        return record

    def summary(self, tenant_id, queryset=None):
        """
        Aggregate sales figures for a store.

        Returns a dict with total_transactions, total_revenue,
        average_transaction, total_items_sold and today_sales.
        """
        queryset = queryset if queryset is not None else self.filter(tenant_id=tenant_id)
        zero = models.Value(Decimal("0.00"), output_field=models.DecimalField())

        totals = queryset.aggregate(
            total_transactions=Count("id"),
            total_revenue=Coalesce(Sum("total"), zero),
        )
        items_sold = TransactionItem.objects.filter(transaction__in=queryset).aggregate(
            total=Coalesce(Sum("quantity"), 0)
        )["total"]
        today_sales = self.filter(
            tenant_id=tenant_id, created_at__date=timezone.localdate()
        ).aggregate(total=Coalesce(Sum("total"), zero))["total"]

        count = totals["total_transactions"]
        revenue = totals["total_revenue"]
        return {
            "total_transactions": count,
            "total_revenue": revenue,
            "average_transaction": _cents(revenue / count) if count else Decimal("0.00"),
            "total_items_sold": items_sold,
            "today_sales": today_sales,
        }


class Transaction(models.Model):
    """
    Completed sale as accepted by the backend.

    Rows are write-once: saving an existing transaction raises
    ``ValueError``.
    """

    # Payment method choices
    CASH = "cash"
    CARD = "card"
    DIGITAL = "digital"

    PAYMENT_METHOD_CHOICES = [
        (CASH, "Cash"),
        (CARD, "Card"),
        (DIGITAL, "Digital"),
    ]

    # Status choices
    COMPLETED = "completed"
    DUE = "due"
    CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (COMPLETED, "Completed"),
        (DUE, "Due"),
        (CANCELLED, "Cancelled"),
    ]

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the local transaction record",
    )

    tenant_id = models.CharField(
        max_length=64,
        db_index=True,
        help_text="Store that made the sale",
    )

    backend_id = models.CharField(
        max_length=64,
        help_text="Transaction id assigned by the backend",
    )

    transaction_number = models.CharField(
        max_length=64,
        blank=True,
        help_text="Human-readable transaction number from the backend",
    )

    cashier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="pos_transactions",
        help_text="Cashier who processed the sale",
    )

    # Customer snapshot (blank for walk-in sales)
    customer_id = models.CharField(max_length=64, blank=True)
    customer_name = models.CharField(max_length=200, blank=True)
    customer_email = models.CharField(max_length=254, blank=True)
    customer_phone = models.CharField(max_length=50, blank=True)

    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES)

    # Financial details
    subtotal = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    tax = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    discount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Total amount (subtotal + tax - discount)",
    )

    amount_paid = models.DecimalField(max_digits=12, decimal_places=2)

    change_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Change handed back to the customer",
    )

    due_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Outstanding balance for partially paid sales",
    )

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=COMPLETED)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    objects = TransactionManager()

    class Meta:
        db_table = "pos_transactions"
        ordering = ["-created_at"]
        verbose_name = "Transaction"
        verbose_name_plural = "Transactions"
        indexes = [
            models.Index(fields=["tenant_id", "-created_at"], name="txn_tenant_date_idx"),
            models.Index(fields=["tenant_id", "status"], name="txn_tenant_status_idx"),
            models.Index(fields=["tenant_id", "payment_method"], name="txn_payment_idx"),
        ]

    def __str__(self):
        return f"{self.transaction_number or self.backend_id} - {self.total}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Transactions are immutable once recorded")
        super().save(*args, **kwargs)

    @property
    def is_walk_in(self):
        return not self.customer_id

    def get_customer_display(self):
        return self.customer_name or "Walk-in"


class TransactionItem(models.Model):
    """Line item snapshot of a recorded transaction."""

    transaction = models.ForeignKey(
        Transaction,
        on_delete=models.CASCADE,
        related_name="items",
    )

    position = models.PositiveIntegerField(default=0)

    product_id = models.CharField(max_length=64)
    name = models.CharField(max_length=200)
    sku = models.CharField(max_length=100, blank=True)

    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    quantity = models.IntegerField(validators=[MinValueValidator(1)])

    line_total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Unit price x quantity",
    )

    class Meta:
        db_table = "pos_transaction_items"
        ordering = ["position"]
        verbose_name = "Transaction Item"
        verbose_name_plural = "Transaction Items"

    def __str__(self):
        return f"{self.name} x {self.quantity}"
