"""
Views for recorded transactions.

- Transaction list with filters
- Transaction detail
- Sales summary statistics
- PDF receipt download
"""

from django.http import Http404, HttpResponse
from django.utils.dateparse import parse_date

from rest_framework import generics, permissions, serializers, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.permissions import HasTenantAccess

from .models import Transaction
from .receipt_service import ReceiptService
from .serializers import (
    TransactionDetailSerializer,
    TransactionListSerializer,
    TransactionStatsSerializer,
)


def _date_param(params, name):
    value = params.get(name)
    if not value:
        return None
    try:
        parsed = parse_date(value)
    except ValueError:
        parsed = None
    if parsed is None:
        raise serializers.ValidationError({name: "Enter a valid date (YYYY-MM-DD)."})
    return parsed


def filter_transactions(queryset, params):
    """
    Apply the list filters shared by the list and stats endpoints.

    Raises ``ValidationError`` (400) for a malformed ``date_from`` or ``date_to``.
    """
    payment_method = params.get("payment_method")
    if payment_method:
        queryset = queryset.filter(payment_method=payment_method)

    transaction_status = params.get("status")
    if transaction_status:
        queryset = queryset.filter(status=transaction_status)

    date_from = _date_param(params, "date_from")
    if date_from:
        queryset = queryset.filter(created_at__date__gte=date_from)

    date_to = _date_param(params, "date_to")
    if date_to:
        queryset = queryset.filter(created_at__date__lte=date_to)

    return queryset


class TransactionListView(generics.ListAPIView):
    """
    API endpoint for listing transactions with filters.

    Query parameters:
    - payment_method: Filter by payment method
    - status: Filter by status
    - date_from: Filter by date (YYYY-MM-DD)
    - date_to: Filter by date (YYYY-MM-DD)
    - page: Page number
    """

    serializer_class = TransactionListSerializer
    permission_classes = [permissions.IsAuthenticated, HasTenantAccess]

    def get_queryset(self):
        queryset = (
            Transaction.objects.filter(tenant_id=self.request.tenant_id)
            .select_related("cashier")
            .prefetch_related("items")
        )
        return filter_transactions(queryset, self.request.query_params)


class TransactionDetailView(generics.RetrieveAPIView):
    """API endpoint for retrieving a single transaction."""

    serializer_class = TransactionDetailSerializer
    permission_classes = [permissions.IsAuthenticated, HasTenantAccess]
    lookup_field = "id"

    def get_queryset(self):
        return (
            Transaction.objects.filter(tenant_id=self.request.tenant_id)
            .select_related("cashier")
            .prefetch_related("items")
        )


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def transaction_stats(request):
    """
    Sales summary for the current store.

    Accepts the same filters as the transaction list. ``today_sales`` is
    always today's revenue regardless of filters.
    """
    queryset = filter_transactions(
        Transaction.objects.filter(tenant_id=request.tenant_id), request.query_params
    )
    summary = Transaction.objects.summary(request.tenant_id, queryset=queryset)
    return Response(TransactionStatsSerializer(summary).data, status=status.HTTP_200_OK)


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def receipt_pdf(request, transaction_id):
    """
    Download the PDF receipt for a transaction.

    Query parameters:
    - format: 'thermal' (default) or 'standard'
    """
    format_type = request.query_params.get("format", "thermal")
    if format_type not in ReceiptService.FORMATS:
        return Response(
            {"detail": f"Unsupported receipt format: {format_type}"},
            status=status.HTTP_400_BAD_REQUEST,
        )

    try:
        record = (
            Transaction.objects.select_related("cashier")
            .prefetch_related("items")
            .get(id=transaction_id, tenant_id=request.tenant_id)
        )
    except Transaction.DoesNotExist:
        raise Http404("Receipt not found")

    pdf_bytes = ReceiptService.generate_receipt(record, format_type)

    response = HttpResponse(pdf_bytes, content_type="application/pdf")
    filename = ReceiptService.get_filename(record, format_type)
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response
