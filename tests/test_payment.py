"""
Tests for payment sufficiency checks and tendered amount parsing.
"""

from decimal import Decimal

import pytest

from apps.pos.payment import check_payment, parse_amount, resolve_amount_paid


class TestCheckPayment:
    """Test comparing amount paid against the total."""

    def test_sufficient_payment_gives_change(self):
        check = check_payment(Decimal("30.00"), Decimal("27.54"))

        assert check.sufficient is True
        assert check.delta == Decimal("2.46")
        assert check.change == Decimal("2.46")
        assert check.due == 0

    def test_exact_payment_is_sufficient(self):
        check = check_payment(Decimal("27.54"), Decimal("27.54"))

        assert check.sufficient is True
        assert check.change == 0

    def test_short_payment_reports_due(self):
        check = check_payment(Decimal("20"), Decimal("27.54"))

        assert check.sufficient is False
        assert check.delta == Decimal("-7.54")
        assert check.change == 0
        assert check.due == Decimal("7.54")

    @pytest.mark.parametrize(
        "paid,total,expected",
        [("0", "0", True), ("0.01", "0", True), ("9.99", "10", False), ("10", "10", True)],
    )
    def test_sufficient_iff_paid_at_least_total(self, paid, total, expected):
        assert check_payment(Decimal(paid), Decimal(total)).sufficient is expected


class TestParseAmount:
    """Test reading the tendered amount the way browsers parse numbers."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("30", Decimal("30")),
            ("  12.50 ", Decimal("12.50")),
            ("12.50abc", Decimal("12.50")),
            (".5", Decimal(".5")),
            ("-3", Decimal("-3")),
            ("1e2", Decimal("100")),
            (20, Decimal("20")),
            (Decimal("4.25"), Decimal("4.25")),
        ],
    )
    def test_parses_leading_number(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [None, "", "   ", "abc", "$10", ".", "Infinity", "-Infinity", "NaN", float("inf")],
    )
    def test_unparseable_returns_none(self, raw):
        assert parse_amount(raw) is None


class TestResolveAmountPaid:
    """Test the blank-means-exact-payment rule."""

    @pytest.mark.parametrize("raw", ["", "abc", "0", None, "Infinity"])
    def test_blank_unparseable_or_zero_resolves_to_total(self, raw):
        assert resolve_amount_paid(raw, Decimal("27.54")) == Decimal("27.54")

    def test_number_is_used_as_is(self):
        assert resolve_amount_paid("30", Decimal("27.54")) == Decimal("30")

    def test_fallback_replaces_total(self):
        """Partial payments treat a blank entry as nothing paid."""
        assert resolve_amount_paid("", Decimal("27.54"), fallback=Decimal("0")) == 0

    def test_blank_entry_is_always_sufficient(self):
        total = Decimal("27.54")
        assert check_payment(resolve_amount_paid("", total), total).sufficient
