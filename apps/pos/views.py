"""
Views for the POS checkout.

Every endpoint works on the calling cashier's checkout session for the
current store. Responses use the same envelope as the retail backend:
``{"success": bool, "data": ..., "message": ...}``.

Cart endpoints:
- Add, update, remove and clear cart lines (products step only)
- Barcode scan that looks the product up on the backend

Wizard endpoints:
- Open / close the checkout
- Advance / go back through products -> review -> payment
- Submit the sale
"""

import logging

from django.db import transaction

from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.permissions import HasTenantAccess
from apps.sales.serializers import TransactionDetailSerializer

from .api_client import BackendAPIClient
from .catalog import Customer, filter_products
from .exceptions import BackendAPIError, CheckoutSubmissionError
from .models import CheckoutSession
from .serializers import (
    CheckoutSessionSerializer,
    CheckoutUpdateSerializer,
    CustomerCreateSerializer,
    OpenCheckoutSerializer,
    ProductSerializer,
    QuantitySerializer,
    ScanSerializer,
    SubmitSerializer,
)
from .services import CheckoutService, get_checkout_session, lock_checkout_session

logger = logging.getLogger(__name__)


def envelope(data=None, message="", success=True, status_code=status.HTTP_200_OK):
    return Response({"success": success, "data": data, "message": message}, status=status_code)


def error(message, status_code, data=None):
    return envelope(data=data, message=message, success=False, status_code=status_code)


def checkout_response(session, message="", status_code=status.HTTP_200_OK):
    return envelope(CheckoutSessionSerializer(session).data, message, status_code=status_code)


def backend_client(request):
    return BackendAPIClient.from_settings(tenant_id=request.tenant_id)


def _submitting_conflict(session):
    """409 response while a sale for this session is in flight, else None."""
    if session.is_submitting:
        return error(
            "A sale is being submitted",
            status.HTTP_409_CONFLICT,
            data=CheckoutSessionSerializer(session).data,
        )
    return None


def _editable_session(request):
    """
    Return the locked session and an error response when the cart is locked.

    Must be called inside ``transaction.atomic()``.
    """
    session = lock_checkout_session(request.tenant_id, request.user)
    busy = _submitting_conflict(session)
    if busy:
        return session, busy
    if session.step != CheckoutSession.PRODUCTS:
        return session, error(
            "The cart can only be changed while selecting products",
            status.HTTP_409_CONFLICT,
            data=CheckoutSessionSerializer(session).data,
        )
    return session, None


# Checkout session


@api_view(["GET", "PATCH"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def checkout_detail(request):
    """
    Get the current checkout, or update its editable fields.

    PATCH body (all optional):
    {
        "search_term": "",
        "selected_category": "all",
        "payment_method": "cash|card|digital",
        "amount_tendered": "50.00",
        "customer": {"id": "...", "name": "..."} or null
    }
    """
    if request.method == "GET":
        return checkout_response(get_checkout_session(request.tenant_id, request.user))

    with transaction.atomic():
        session = lock_checkout_session(request.tenant_id, request.user)
        busy = _submitting_conflict(session)
        if busy:
            return busy

        serializer = CheckoutUpdateSerializer(session, data=request.data, partial=True)
        if not serializer.is_valid():
            return error("Invalid checkout data", status.HTTP_400_BAD_REQUEST, serializer.errors)
        session = serializer.save()
    return checkout_response(session)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def checkout_open(request):
    """
    Start a fresh checkout, optionally for a selected customer.

    Any previous draft for this cashier is discarded.
    """
    serializer = OpenCheckoutSerializer(data=request.data)
    if not serializer.is_valid():
        return error("Invalid customer", status.HTTP_400_BAD_REQUEST, serializer.errors)

    customer_data = serializer.validated_data.get("customer")
    customer = Customer(**customer_data) if customer_data else None

    with transaction.atomic():
        session = lock_checkout_session(request.tenant_id, request.user)
        busy = _submitting_conflict(session)
        if busy:
            return busy
        session.reset(customer=customer)
        session.save()
    return checkout_response(session, "Checkout opened")


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def checkout_close(request):
    """Close the checkout, discarding the draft sale."""
    with transaction.atomic():
        session = lock_checkout_session(request.tenant_id, request.user)
        busy = _submitting_conflict(session)
        if busy:
            return busy
        session.reset()
        session.save()
    return checkout_response(session, "Checkout closed")


# Cart


@api_view(["POST", "DELETE"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def cart_items(request):
    """
    Add one unit of a product (POST) or clear the cart (DELETE).

    POST body is the product snapshot:
    {"id": "...", "name": "...", "sku": "...", "price": "10.00", "stock": 3}
    """
    serializer = None
    if request.method == "POST":
        serializer = ProductSerializer(data=request.data)
        if not serializer.is_valid():
            return error("Invalid product", status.HTTP_400_BAD_REQUEST, serializer.errors)

    with transaction.atomic():
        session, locked = _editable_session(request)
        if locked:
            return locked

        cart = session.cart
        if serializer is None:
            cart.clear()
            message = "Cart cleared"
        else:
            product = serializer.to_product()
            cart.add_item(product)
            message = f"{product.name} added to cart"
        session.store_cart(cart)
        session.save()
    return checkout_response(session, message)


@api_view(["PATCH", "DELETE"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def cart_item_detail(request, product_id):
    """
    Set a line's quantity (PATCH) or remove it (DELETE).

    A quantity of zero removes the line.
    """
    quantity = None
    if request.method == "PATCH":
        serializer = QuantitySerializer(data=request.data)
        if not serializer.is_valid():
            return error("Invalid quantity", status.HTTP_400_BAD_REQUEST, serializer.errors)
        quantity = serializer.validated_data["quantity"]

    with transaction.atomic():
        session, locked = _editable_session(request)
        if locked:
            return locked

        cart = session.cart
        if request.method == "DELETE":
            cart.remove_item(product_id)
        else:
            cart.update_quantity(product_id, quantity)
        session.store_cart(cart)
        session.save()
    return checkout_response(session)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def cart_scan(request):
    """
    Add a product by barcode.

    Looks the barcode up on the backend; unknown barcodes leave the cart
    unchanged and answer 404. The session is checked again after the
    lookup, since the backend call is made without holding the row lock.
    """
    serializer = ScanSerializer(data=request.data)
    if not serializer.is_valid():
        return error("Invalid barcode", status.HTTP_400_BAD_REQUEST, serializer.errors)

    with transaction.atomic():
        session, locked = _editable_session(request)
    if locked:
        return locked

    barcode = serializer.validated_data["barcode"]
    try:
        product = backend_client(request).get_product_by_barcode(barcode)
    except BackendAPIError as e:
        if e.status_code == 404:
            return error("Product not found", status.HTTP_404_NOT_FOUND)
        logger.warning(f"Barcode lookup failed for {barcode}: {e.message}")
        return error(e.message, status.HTTP_502_BAD_GATEWAY)

    with transaction.atomic():
        session, locked = _editable_session(request)
        if locked:
            return locked

        cart = session.cart
        cart.add_item(product)
        session.store_cart(cart)
        session.save()
    return checkout_response(session, f"{product.name} added to cart")


# Wizard


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def checkout_advance(request):
    """Move to the next checkout step."""
    with transaction.atomic():
        session = lock_checkout_session(request.tenant_id, request.user)
        busy = _submitting_conflict(session)
        if busy:
            return busy
        if not session.advance():
            return error(
                "Cannot continue from this step",
                status.HTTP_409_CONFLICT,
                data=CheckoutSessionSerializer(session).data,
            )
        session.save()
    return checkout_response(session)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def checkout_back(request):
    """Move to the previous checkout step. Nothing entered so far is lost."""
    with transaction.atomic():
        session = lock_checkout_session(request.tenant_id, request.user)
        busy = _submitting_conflict(session)
        if busy:
            return busy
        if not session.go_back():
            return error(
                "Already at the first step",
                status.HTTP_409_CONFLICT,
                data=CheckoutSessionSerializer(session).data,
            )
        session.save()
    return checkout_response(session)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def checkout_submit(request):
    """
    Complete the sale.

    Request body:
    {
        "mark_as_due": false (optional, record a partial payment)
    }

    Returns 201 with the recorded transaction, 409 when the checkout is
    not ready, 502 when the backend rejects the sale. On failure the cart,
    customer and payment details are kept so the cashier can retry.
    """
    serializer = SubmitSerializer(data=request.data)
    if not serializer.is_valid():
        return error("Invalid request", status.HTTP_400_BAD_REQUEST, serializer.errors)

    session = get_checkout_session(request.tenant_id, request.user)
    try:
        record = CheckoutService().submit(
            session.id, request.user, mark_as_due=serializer.validated_data["mark_as_due"]
        )
    except CheckoutSubmissionError as e:
        session.refresh_from_db()
        return error(
            e.message,
            status.HTTP_502_BAD_GATEWAY,
            data=CheckoutSessionSerializer(session).data,
        )

    if record is None:
        session.refresh_from_db()
        return error(
            "Checkout is not ready to be completed",
            status.HTTP_409_CONFLICT,
            data=CheckoutSessionSerializer(session).data,
        )

    return envelope(
        TransactionDetailSerializer(record).data,
        "Transaction completed",
        status_code=status.HTTP_201_CREATED,
    )


# Catalog


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def product_list(request):
    """
    Products for the till, filtered by the checkout's search term and category.

    Query parameters ``search`` and ``category`` override the values saved
    on the checkout.
    """
    session = get_checkout_session(request.tenant_id, request.user)
    search = request.query_params.get("search", session.search_term)
    category = request.query_params.get("category", session.selected_category)

    try:
        products = backend_client(request).list_products()
    except BackendAPIError as e:
        logger.warning(f"Product list failed: {e.message}")
        return error(e.message, status.HTTP_502_BAD_GATEWAY)

    results = filter_products(products, search_term=search, category=category)
    return envelope([product.to_dict() for product in results])


@api_view(["GET", "POST"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def customer_list(request):
    """
    Search customers (GET ``?search=``) or quick add one (POST).

    POST body:
    {"name": "...", "email": "" (optional), "phone": "" (optional)}
    """
    client = backend_client(request)

    if request.method == "GET":
        try:
            customers = client.list_customers(search=request.query_params.get("search"))
        except BackendAPIError as e:
            logger.warning(f"Customer search failed: {e.message}")
            return error(e.message, status.HTTP_502_BAD_GATEWAY)
        return envelope([customer.to_dict() for customer in customers])

    serializer = CustomerCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return error("Invalid customer", status.HTTP_400_BAD_REQUEST, serializer.errors)

    try:
        customer = client.create_customer(**serializer.validated_data)
    except BackendAPIError as e:
        logger.warning(f"Customer creation failed: {e.message}")
        return error(e.message, status.HTTP_502_BAD_GATEWAY)
    return envelope(customer.to_dict(), "Customer created", status_code=status.HTTP_201_CREATED)
