"""
Tests for checkout submission.

Tests cover:
- Successful submission records a transaction and resets the session
- Failed submission keeps the session intact for a retry
- The in-flight guard and submit gating
- Mark-as-due (partial payment) submissions
"""

import json
from decimal import Decimal

import pytest

from apps.pos.exceptions import CheckoutSubmissionError
from apps.pos.models import CheckoutSession
from apps.pos.services import CheckoutService, get_checkout_session
from apps.sales.models import Transaction


def transaction_created(mocked_backend, api_url, backend_id="t1", number="TXN-0001"):
    mocked_backend.add(
        mocked_backend.POST,
        api_url("/transactions"),
        json={"success": True, "data": {"_id": backend_id, "transactionId": number}},
        status=201,
    )


@pytest.mark.django_db
class TestGetCheckoutSession:
    def test_creates_one_session_per_cashier_and_store(self, cashier):
        first = get_checkout_session("store-1", cashier)
        again = get_checkout_session("store-1", cashier)
        other_store = get_checkout_session("store-2", cashier)

        assert first.id == again.id
        assert other_store.id != first.id
        assert first.tax_rate == Decimal("0.08")


@pytest.mark.django_db
class TestSubmitSuccess:
    """Test a sale accepted by the backend."""

    def test_records_transaction(
        self, session_at_payment, cashier, customer, mocked_backend, api_url
    ):
        session_at_payment.set_customer(customer)
        session_at_payment.amount_tendered = "30"
        session_at_payment.save()
        transaction_created(mocked_backend, api_url)

        record = CheckoutService().submit(session_at_payment.id, cashier)

        assert record.backend_id == "t1"
        assert record.transaction_number == "TXN-0001"
        assert record.subtotal == Decimal("25.50")
        assert record.tax == Decimal("2.04")
        assert record.total == Decimal("27.54")
        assert record.amount_paid == Decimal("30.00")
        assert record.change_amount == Decimal("2.46")
        assert record.status == Transaction.COMPLETED
        assert record.customer_name == "Jane Doe"
        assert [(item.product_id, item.quantity) for item in record.items.all()] == [
            ("p1", 2),
            ("p2", 1),
        ]

    def test_sends_expected_payload(
        self, session_at_payment, cashier, customer, mocked_backend, api_url
    ):
        session_at_payment.set_customer(customer)
        session_at_payment.payment_method = CheckoutSession.CARD
        session_at_payment.save()
        transaction_created(mocked_backend, api_url)

        CheckoutService().submit(session_at_payment.id, cashier)

        request = mocked_backend.calls[0].request
        assert json.loads(request.body) == {
            "items": [{"product": "p1", "quantity": 2}, {"product": "p2", "quantity": 1}],
            "customer": "c1",
            "paymentMethod": "card",
            "amountPaid": 27.54,
            "discount": 0.0,
            "isPaid": True,
            "dueAmount": 0.0,
        }
        assert request.headers["Idempotency-Key"] == str(session_at_payment.idempotency_key)
        assert request.headers["X-Tenant-ID"] == "store-1"

    def test_resets_session_after_success(
        self, session_at_payment, cashier, mocked_backend, api_url
    ):
        old_key = session_at_payment.idempotency_key
        transaction_created(mocked_backend, api_url)

        CheckoutService().submit(session_at_payment.id, cashier)

        session_at_payment.refresh_from_db()
        assert session_at_payment.items == []
        assert session_at_payment.step == CheckoutSession.PRODUCTS
        assert session_at_payment.is_submitting is False
        assert session_at_payment.idempotency_key != old_key


@pytest.mark.django_db
class TestSubmitFailure:
    """A rejected submission leaves the session as it was."""

    def test_backend_error_preserves_session(
        self, session_at_payment, cashier, customer, mocked_backend, api_url
    ):
        session_at_payment.set_customer(customer)
        session_at_payment.payment_method = CheckoutSession.DIGITAL
        session_at_payment.amount_tendered = "40"
        session_at_payment.save()
        before_items = session_at_payment.items
        before_key = session_at_payment.idempotency_key
        mocked_backend.add(
            mocked_backend.POST,
            api_url("/transactions"),
            json={"success": False, "message": "Insufficient stock"},
            status=400,
        )

        with pytest.raises(CheckoutSubmissionError) as exc_info:
            CheckoutService().submit(session_at_payment.id, cashier)

        assert exc_info.value.message == "Insufficient stock"
        session_at_payment.refresh_from_db()
        assert session_at_payment.items == before_items
        assert session_at_payment.get_customer() == customer
        assert session_at_payment.step == CheckoutSession.PAYMENT
        assert session_at_payment.payment_method == CheckoutSession.DIGITAL
        assert session_at_payment.amount_tendered == "40"
        assert session_at_payment.idempotency_key == before_key
        assert session_at_payment.is_submitting is False
        assert session_at_payment.last_error == "Insufficient stock"
        assert Transaction.objects.count() == 0

    def test_network_failure_is_retried_then_reported(
        self, session_at_payment, cashier, mocked_backend, api_url
    ):
        import requests

        mocked_backend.add(
            mocked_backend.POST, api_url("/transactions"), body=requests.ConnectionError()
        )

        with pytest.raises(CheckoutSubmissionError):
            CheckoutService().submit(session_at_payment.id, cashier)

        assert len(mocked_backend.calls) == 2
        session_at_payment.refresh_from_db()
        assert session_at_payment.is_submitting is False
        assert len(session_at_payment.items) == 2

    def test_broken_response_releases_session(
        self, session_at_payment, cashier, mocked_backend, api_url
    ):
        import requests

        mocked_backend.add(
            mocked_backend.POST,
            api_url("/transactions"),
            body=requests.exceptions.ChunkedEncodingError("connection broken"),
        )

        with pytest.raises(CheckoutSubmissionError):
            CheckoutService().submit(session_at_payment.id, cashier)

        session_at_payment.refresh_from_db()
        assert session_at_payment.is_submitting is False
        assert "connection broken" in session_at_payment.last_error
        assert session_at_payment.step == CheckoutSession.PAYMENT

    def test_unexpected_error_releases_session(
        self, session_at_payment, cashier, mocked_backend, api_url, monkeypatch
    ):
        transaction_created(mocked_backend, api_url)
        before_key = session_at_payment.idempotency_key

        def fail(**kwargs):
            raise RuntimeError("database went away")

        monkeypatch.setattr(Transaction.objects, "record_checkout", fail)

        with pytest.raises(RuntimeError):
            CheckoutService().submit(session_at_payment.id, cashier)

        session_at_payment.refresh_from_db()
        assert session_at_payment.is_submitting is False
        assert session_at_payment.last_error != ""
        assert session_at_payment.idempotency_key == before_key
        assert len(session_at_payment.items) == 2
        assert Transaction.objects.count() == 0

    def test_session_can_be_resubmitted_after_failure(
        self, session_at_payment, cashier, mocked_backend, api_url
    ):
        import requests

        mocked_backend.add(
            mocked_backend.POST,
            api_url("/transactions"),
            body=requests.exceptions.ChunkedEncodingError("connection broken"),
        )
        with pytest.raises(CheckoutSubmissionError):
            CheckoutService().submit(session_at_payment.id, cashier)

        mocked_backend.replace(
            mocked_backend.POST,
            api_url("/transactions"),
            json={"success": True, "data": {"_id": "t1", "transactionId": "TXN-0001"}},
            status=201,
        )
        record = CheckoutService().submit(session_at_payment.id, cashier)

        assert record.backend_id == "t1"


@pytest.mark.django_db
class TestSubmitGating:
    """Submissions that must not reach the backend."""

    def test_submit_while_submitting_is_noop(self, session_at_payment, cashier, mocked_backend):
        CheckoutSession.objects.filter(id=session_at_payment.id).update(is_submitting=True)

        assert CheckoutService().submit(session_at_payment.id, cashier) is None
        assert len(mocked_backend.calls) == 0

    def test_insufficient_payment_is_noop(self, session_at_payment, cashier, mocked_backend):
        session_at_payment.amount_tendered = "10"
        session_at_payment.save()

        assert CheckoutService().submit(session_at_payment.id, cashier) is None
        assert len(mocked_backend.calls) == 0

    def test_not_at_payment_step_is_noop(self, checkout_session, cashier, widget, mocked_backend):
        cart = checkout_session.cart
        cart.add_item(widget)
        checkout_session.store_cart(cart)
        checkout_session.save()

        assert CheckoutService().submit(checkout_session.id, cashier) is None
        assert len(mocked_backend.calls) == 0


@pytest.mark.django_db
class TestMarkAsDue:
    """Partial payments."""

    def test_blank_tender_records_full_amount_due(
        self, session_at_payment, cashier, mocked_backend, api_url
    ):
        transaction_created(mocked_backend, api_url)

        record = CheckoutService().submit(session_at_payment.id, cashier, mark_as_due=True)

        payload = json.loads(mocked_backend.calls[0].request.body)
        assert payload["amountPaid"] == 0
        assert payload["isPaid"] is False
        assert payload["dueAmount"] == 27.54
        assert record.status == Transaction.DUE
        assert record.amount_paid == Decimal("0.00")
        assert record.due_amount == Decimal("27.54")

    def test_partial_tender_records_remainder_due(
        self, session_at_payment, cashier, mocked_backend, api_url
    ):
        session_at_payment.amount_tendered = "20"
        session_at_payment.save()
        transaction_created(mocked_backend, api_url)

        record = CheckoutService().submit(session_at_payment.id, cashier, mark_as_due=True)

        assert record.amount_paid == Decimal("20.00")
        assert record.due_amount == Decimal("7.54")
        assert record.change_amount == Decimal("0.00")

    def test_full_tender_cannot_be_marked_as_due(
        self, session_at_payment, cashier, mocked_backend
    ):
        session_at_payment.amount_tendered = "50"
        session_at_payment.save()

        assert CheckoutService().submit(session_at_payment.id, cashier, mark_as_due=True) is None
        assert len(mocked_backend.calls) == 0
