"""
Transaction request builder.

Turns a finished checkout into the body of the backend's
transaction-creation call. The builder reads the cart and never changes
it; the session is only cleared after the backend accepts the request.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Dict, Optional, Tuple

from .cart import Cart
from .catalog import Customer

CENT = Decimal("0.01")
ZERO = Decimal("0")

PAYMENT_METHODS = ("cash", "card", "digital")


def to_cents(value: Decimal) -> Decimal:
    """Round to cents, half-up, whatever the magnitude. Non-finite values give 0.00."""
    value = Decimal(str(value))
    if not value.is_finite():
        return ZERO.quantize(CENT)
    with localcontext() as ctx:
        # Quantizing needs room for every integer digit plus the cents
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        ctx.Emax = max(ctx.Emax, value.adjusted() + 1)
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class TransactionRequest:
    """Snapshot of a sale ready to be sent to the backend."""

    items: Tuple[Tuple[str, int], ...]
    customer_id: Optional[str]
    payment_method: str
    amount_paid: Decimal
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    discount: Decimal = ZERO
    due_amount: Decimal = ZERO

    @property
    def is_paid(self) -> bool:
        return self.due_amount <= ZERO

    def to_payload(self) -> Dict[str, Any]:
        payload = {
            "items": [
                {"product": product_id, "quantity": quantity} for product_id, quantity in self.items
            ],
            "paymentMethod": self.payment_method,
            "amountPaid": float(to_cents(self.amount_paid)),
            "discount": float(to_cents(self.discount)),
            "isPaid": self.is_paid,
            "dueAmount": float(to_cents(self.due_amount)),
        }
        # Walk-in sales omit the customer key entirely
        if self.customer_id:
            payload["customer"] = self.customer_id
        return payload


def build_transaction_request(
    cart: Cart,
    customer: Optional[Customer],
    payment_method: str,
    amount_paid: Decimal,
    due_amount: Decimal = ZERO,
) -> Optional[TransactionRequest]:
    """
    Build the request for ``cart``.

    Returns ``None`` for an empty cart: there is nothing to submit.
    """
    if cart.is_empty:
        return None
    if payment_method not in PAYMENT_METHODS:
        raise ValueError(f"Unsupported payment method: {payment_method}")

    return TransactionRequest(
        items=tuple((item.product.id, item.quantity) for item in cart),
        customer_id=customer.id if customer else None,
        payment_method=payment_method,
        amount_paid=Decimal(str(amount_paid)),
        subtotal=cart.subtotal,
        tax=cart.tax,
        total=cart.total,
        due_amount=max(Decimal(str(due_amount)), ZERO),
    )
