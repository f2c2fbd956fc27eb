"""
URL configuration for sales app.
"""

from django.urls import path

from . import views

app_name = "sales"

urlpatterns = [
    path("api/sales/transactions/", views.TransactionListView.as_view(), name="transaction_list"),
    path("api/sales/transactions/stats/", views.transaction_stats, name="transaction_stats"),
    path(
        "api/sales/transactions/<uuid:id>/",
        views.TransactionDetailView.as_view(),
        name="transaction_detail",
    ),
    path(
        "api/sales/transactions/<uuid:transaction_id>/receipt.pdf",
        views.receipt_pdf,
        name="receipt_pdf",
    ),
]
