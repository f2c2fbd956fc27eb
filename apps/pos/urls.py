"""
URL configuration for the POS checkout API.
"""

from django.urls import path

from . import views

app_name = "pos"

urlpatterns = [
    # Checkout session
    path("api/pos/checkout/", views.checkout_detail, name="checkout_detail"),
    path("api/pos/checkout/open/", views.checkout_open, name="checkout_open"),
    path("api/pos/checkout/close/", views.checkout_close, name="checkout_close"),
    # Cart
    path("api/pos/checkout/items/", views.cart_items, name="cart_items"),
    path(
        "api/pos/checkout/items/<str:product_id>/",
        views.cart_item_detail,
        name="cart_item_detail",
    ),
    path("api/pos/checkout/scan/", views.cart_scan, name="cart_scan"),
    # Wizard
    path("api/pos/checkout/advance/", views.checkout_advance, name="checkout_advance"),
    path("api/pos/checkout/back/", views.checkout_back, name="checkout_back"),
    path("api/pos/checkout/submit/", views.checkout_submit, name="checkout_submit"),
    # Catalog
    path("api/pos/products/", views.product_list, name="product_list"),
    path("api/pos/customers/", views.customer_list, name="customer_list"),
]
