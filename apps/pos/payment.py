"""
Payment sufficiency checks for the checkout.

The cashier types the amount tendered as free text. The till treats a
blank, unparseable or zero entry as exact payment of the total, matching
the behaviour cashiers already rely on at the counter. Partial payments
("mark as due") pass an explicit fallback of zero instead.
"""

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

ZERO = Decimal("0")

# Leading numeric prefix, the way browser number parsing reads "12.50abc" as 12.50
_NUMBER_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


@dataclass(frozen=True)
class PaymentCheck:
    """Result of comparing the amount paid against the total due."""

    amount_paid: Decimal
    total: Decimal
    sufficient: bool
    delta: Decimal

    @property
    def change(self) -> Decimal:
        return self.delta if self.sufficient else ZERO

    @property
    def due(self) -> Decimal:
        return ZERO if self.sufficient else -self.delta


def check_payment(amount_paid: Decimal, total: Decimal) -> PaymentCheck:
    """Compare ``amount_paid`` with ``total``; ``delta`` is ``amount_paid - total``."""
    amount_paid = Decimal(str(amount_paid))
    total = Decimal(str(total))
    return PaymentCheck(
        amount_paid=amount_paid,
        total=total,
        sufficient=amount_paid >= total,
        delta=amount_paid - total,
    )


def parse_amount(raw) -> Optional[Decimal]:
    """
    Parse a tendered amount.

    Returns ``None`` when no leading number can be read. Numbers are
    accepted as-is, strings are read up to the first non-numeric
    character.

    Only finite amounts are returned. "Infinity", "NaN" and infinite
    numbers give ``None``, so they fall back like any unreadable entry
    instead of counting as an unlimited payment.
    """
    if raw is None:
        return None
    if isinstance(raw, (int, float, Decimal)) and not isinstance(raw, bool):
        value = Decimal(str(raw))
        return value if value.is_finite() else None

    match = _NUMBER_PREFIX.match(str(raw))
    if not match:
        return None
    return Decimal(match.group(1))


def resolve_amount_paid(raw, total: Decimal, fallback: Optional[Decimal] = None) -> Decimal:
    """
    Resolve the amount paid from the raw tendered input.

    Empty, unparseable and zero inputs resolve to ``total``, or to
    ``fallback`` when one is given.
    """
    value = parse_amount(raw)
    if not value:
        return Decimal(str(total)) if fallback is None else Decimal(str(fallback))
    return value
