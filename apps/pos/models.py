"""
Checkout session model.

A checkout session is the draft sale a cashier is working on: the cart,
the selected customer, the product search state, and the three-step
checkout wizard (products -> review -> payment). There is one session per
cashier per store. Sessions are reset, not deleted, when a sale completes
or the cashier closes the checkout.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models

from django_fsm import FSMField, can_proceed, transition

from .cart import Cart
from .catalog import Customer
from .payment import check_payment, parse_amount, resolve_amount_paid


def default_tax_rate():
    """Tax rate for new sessions, from ``POS_TAX_RATE``."""
    return Decimal(str(settings.POS_TAX_RATE))


def has_items(session):
    """Transition condition: the cart holds at least one line."""
    return bool(session.items)


class CheckoutSession(models.Model):
    """
    Draft sale with FSM-driven checkout steps.

    Moving forward from ``products`` requires a non-empty cart. Moving
    back never loses data: items, customer, payment method and the
    tendered amount survive every backward step.
    """

    # Wizard steps
    PRODUCTS = "products"
    REVIEW = "review"
    PAYMENT = "payment"

    STEP_CHOICES = [
        (PRODUCTS, "Products"),
        (REVIEW, "Review"),
        (PAYMENT, "Payment"),
    ]

    STEP_NUMBERS = {PRODUCTS: 1, REVIEW: 2, PAYMENT: 3}

    # Payment methods
    CASH = "cash"
    CARD = "card"
    DIGITAL = "digital"

    PAYMENT_METHOD_CHOICES = [
        (CASH, "Cash"),
        (CARD, "Card"),
        (DIGITAL, "Digital"),
    ]

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the checkout session",
    )

    tenant_id = models.CharField(
        max_length=64,
        help_text="Store identifier forwarded to the backend",
    )

    cashier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="checkout_sessions",
        help_text="Cashier who owns this draft sale",
    )

    step = FSMField(
        default=PRODUCTS,
        choices=STEP_CHOICES,
        protected=False,
        help_text="Current checkout wizard step",
    )

    items = models.JSONField(
        default=list,
        blank=True,
        help_text="Cart line items snapshot",
    )

    customer = models.JSONField(
        null=True,
        blank=True,
        help_text="Selected customer snapshot, empty for walk-in sales",
    )

    search_term = models.CharField(max_length=200, blank=True, default="")

    selected_category = models.CharField(max_length=100, default="all")

    payment_method = models.CharField(
        max_length=20,
        choices=PAYMENT_METHOD_CHOICES,
        default=CASH,
    )

    amount_tendered = models.CharField(
        max_length=50,
        blank=True,
        default="",
        help_text="Amount tendered exactly as typed by the cashier",
    )

    tax_rate = models.DecimalField(
        max_digits=6,
        decimal_places=4,
        default=default_tax_rate,
        help_text="Tax rate applied to the cart subtotal (0.08 = 8%)",
    )

    # Submission guard
    idempotency_key = models.UUIDField(
        default=uuid.uuid4,
        help_text="Sent with the transaction request; stable across retries of one sale",
    )

    is_submitting = models.BooleanField(
        default=False,
        help_text="A transaction request for this session is in flight",
    )

    last_error = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "pos_checkout_sessions"
        ordering = ["-updated_at"]
        verbose_name = "Checkout Session"
        verbose_name_plural = "Checkout Sessions"
        unique_together = [["tenant_id", "cashier"]]

    def __str__(self):
        return f"Checkout {self.id} ({self.step})"

    # Cart access

    @property
    def cart(self) -> Cart:
        return Cart.from_snapshot(self.items, tax_rate=self.tax_rate)

    def store_cart(self, cart: Cart) -> None:
        self.items = cart.to_snapshot()

    def get_customer(self):
        return Customer.from_dict(self.customer)

    def set_customer(self, customer) -> None:
        self.customer = customer.to_dict() if customer else None

    @property
    def step_number(self) -> int:
        return self.STEP_NUMBERS[self.step]

    # Payment

    def payment_check(self, mark_as_due=False):
        """
        Check the tendered amount against the cart total.

        A blank or zero entry counts as exact payment, except for a
        partial ("due") payment where it counts as nothing paid.
        """
        total = self.cart.total
        fallback = Decimal("0") if mark_as_due else None
        amount_paid = resolve_amount_paid(self.amount_tendered, total, fallback=fallback)
        return check_payment(amount_paid, total)

    def can_mark_as_due(self) -> bool:
        """A partial payment needs a blank tender or one short of the total."""
        if not self.amount_tendered.strip():
            return True
        amount = parse_amount(self.amount_tendered)
        return amount is not None and amount < self.cart.total

    def can_submit(self, mark_as_due=False) -> bool:
        if self.step != self.PAYMENT or not self.items or self.is_submitting:
            return False
        if mark_as_due:
            return self.can_mark_as_due()
        return self.payment_check().sufficient

    # FSM Transitions

    @transition(field=step, source=PRODUCTS, target=REVIEW, conditions=[has_items])
    def proceed_to_review(self):
        """Move from product selection to review."""

    @transition(field=step, source=REVIEW, target=PAYMENT)
    def proceed_to_payment(self):
        """Move from review to payment."""

    @transition(field=step, source=REVIEW, target=PRODUCTS)
    def back_to_products(self):
        """Return to product selection."""

    @transition(field=step, source=PAYMENT, target=REVIEW)
    def back_to_review(self):
        """Return to review."""

    def _try(self, method) -> bool:
        if not can_proceed(method):
            return False
        method()
        return True

    def can_advance(self) -> bool:
        forward = {self.PRODUCTS: self.proceed_to_review, self.REVIEW: self.proceed_to_payment}
        method = forward.get(self.step)
        return method is not None and can_proceed(method)

    def advance(self) -> bool:
        """Take the next step forward. Returns False and changes nothing if not allowed."""
        if self.step == self.PRODUCTS:
            return self._try(self.proceed_to_review)
        if self.step == self.REVIEW:
            return self._try(self.proceed_to_payment)
        return False

    def go_back(self) -> bool:
        """Take one step back. Returns False on the first step."""
        if self.step == self.REVIEW:
            return self._try(self.back_to_products)
        if self.step == self.PAYMENT:
            return self._try(self.back_to_review)
        return False

    def reset(self, customer=None, tax_rate=None) -> None:
        """
        Return every transient field to its initial value.

        Used when the checkout is closed, when it is opened for a new
        customer and after a sale is recorded. Does not save.
        """
        self.items = []
        self.search_term = ""
        self.selected_category = "all"
        self.step = self.PRODUCTS
        self.payment_method = self.CASH
        self.amount_tendered = ""
        self.set_customer(customer)
        self.is_submitting = False
        self.last_error = ""
        self.idempotency_key = uuid.uuid4()
        self.tax_rate = default_tax_rate() if tax_rate is None else tax_rate
