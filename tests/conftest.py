"""
Pytest configuration and fixtures for the retail POS checkout service.
"""

from decimal import Decimal

from django.conf import settings

import pytest
import responses

from apps.pos.catalog import Customer, Product

TENANT_ID = "store-1"


@pytest.fixture
def api_url():
    """Build a URL on the mocked retail backend."""

    def build(endpoint):
        return f"{settings.POS_API_BASE_URL}{endpoint}"

    return build


@pytest.fixture
def mocked_backend():
    """
    Fixture for the mocked retail backend.

    Every request the code under test makes must be registered.
    """
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def api_client():
    """
    Fixture for Django REST framework API client.
    """
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def cashier(django_user_model):
    """
    Fixture for creating a cashier user.
    """
    return django_user_model.objects.create_user(
        username="cashier",
        email="cashier@example.com",
        password="testpass123",
        first_name="Casey",
        last_name="Register",
    )


@pytest.fixture
def authenticated_api_client(api_client, cashier):
    """
    Fixture for an API client logged in as the cashier for ``TENANT_ID``.
    """
    api_client.force_authenticate(user=cashier)
    api_client.credentials(HTTP_X_TENANT_ID=TENANT_ID)
    return api_client


@pytest.fixture
def tenant_id():
    return TENANT_ID


@pytest.fixture
def widget():
    return Product(
        id="p1",
        name="Widget",
        sku="WID-001",
        price=Decimal("10.00"),
        stock=5,
        category="tools",
        barcode="1111",
    )


@pytest.fixture
def gadget():
    return Product(
        id="p2",
        name="Gadget",
        sku="GAD-002",
        price=Decimal("5.50"),
        stock=0,
        category="electronics",
        barcode="2222",
    )


@pytest.fixture
def customer():
    return Customer(id="c1", name="Jane Doe", email="jane@example.com", phone="555-0100")


@pytest.fixture
def checkout_session(cashier):
    """
    Fixture for the cashier's checkout session with an 8% tax rate.
    """
    from apps.pos.models import CheckoutSession

    return CheckoutSession.objects.create(
        tenant_id=TENANT_ID, cashier=cashier, tax_rate=Decimal("0.08")
    )


@pytest.fixture
def session_at_payment(checkout_session, widget, gadget):
    """
    Checkout session with Widget x2 and Gadget x1 moved to the payment step.

    Totals: subtotal 25.50, tax 2.04, total 27.54.
    """
    cart = checkout_session.cart
    cart.add_item(widget)
    cart.add_item(widget)
    cart.add_item(gadget)
    checkout_session.store_cart(cart)
    checkout_session.advance()
    checkout_session.advance()
    checkout_session.save()
    return checkout_session


@pytest.fixture
def make_transaction(cashier, widget, gadget):
    """
    Factory for recorded transactions.

    Defaults to Widget x2 + Gadget x1 at 8% tax paid with 30.00 cash.
    """
    from apps.pos.api_client import TransactionResult
    from apps.pos.builder import build_transaction_request
    from apps.pos.cart import Cart
    from apps.pos.payment import check_payment
    from apps.sales.models import Transaction

    counter = {"n": 0}

    def make(
        tenant_id=TENANT_ID,
        customer=None,
        payment_method="cash",
        amount_paid=Decimal("30.00"),
        due_amount=Decimal("0"),
        quantities=(2, 1),
    ):
        counter["n"] += 1
        cart = Cart(tax_rate=Decimal("0.08"))
        for product, quantity in zip((widget, gadget), quantities):
            for _ in range(quantity):
                cart.add_item(product)

        request = build_transaction_request(
            cart, customer, payment_method, amount_paid, due_amount=due_amount
        )
        result = TransactionResult(
            id=f"t{counter['n']}", transaction_number=f"TXN-{counter['n']:04d}"
        )
        return Transaction.objects.record_checkout(
            tenant_id=tenant_id,
            cashier=cashier,
            cart=cart,
            customer=customer,
            request=request,
            result=result,
            payment=check_payment(amount_paid, cart.total),
        )

    return make
