"""
Tenant context middleware.

Resolves the store a request belongs to and exposes it as
``request.tenant_id``. Checkout sessions and transaction records are
scoped by this id, and it is forwarded to the retail backend in the
``X-Tenant-ID`` header.
"""

import logging
from typing import Optional

from django.http import HttpRequest

logger = logging.getLogger(__name__)


class TenantContextMiddleware:
    """
    Set ``request.tenant_id`` for each request.

    Lookup order:
    1. ``X-Tenant-ID`` header
    2. ``tenant`` query parameter
    3. Subdomain of the request host (``www`` and ``localhost`` are ignored)

    Requests without a tenant get ``request.tenant_id = None``; views that
    need one are protected by ``HasTenantAccess``.
    """

    IGNORED_SUBDOMAINS = {"www", "localhost"}

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request: HttpRequest):
        request.tenant_id = self._extract_tenant_id(request)
        if request.tenant_id:
            logger.debug(f"Tenant context set for request: {request.tenant_id}")
        return self.get_response(request)

    def _extract_tenant_id(self, request: HttpRequest) -> Optional[str]:
        header = request.headers.get("X-Tenant-ID", "").strip()
        if header:
            return header

        param = request.GET.get("tenant", "").strip()
        if param:
            return param

        return self._subdomain(request)

    def _subdomain(self, request: HttpRequest) -> Optional[str]:
        host = request.get_host().split(":")[0]
        parts = host.split(".")
        # Bare hosts and IP addresses carry no subdomain
        if len(parts) < 3 or all(part.isdigit() for part in parts):
            return None
        subdomain = parts[0].lower()
        if subdomain in self.IGNORED_SUBDOMAINS:
            return None
        return subdomain
