"""
Tests for the tenant context middleware and tenant permission.

Covers tenant resolution from the X-Tenant-ID header, the ``tenant`` query
parameter and the request subdomain.
"""

from unittest.mock import Mock

from django.contrib.auth.models import AnonymousUser
from django.http import HttpResponse
from django.test import RequestFactory

import pytest

from apps.core.middleware import TenantContextMiddleware
from apps.core.permissions import HasTenantAccess


@pytest.fixture
def middleware():
    return TenantContextMiddleware(lambda request: HttpResponse("ok"))


@pytest.fixture
def factory():
    return RequestFactory()


class TestTenantResolution:
    """Test the tenant lookup order."""

    def test_header_wins(self, middleware, factory):
        request = factory.get(
            "/api/pos/checkout/?tenant=from-query",
            HTTP_X_TENANT_ID="from-header",
            HTTP_HOST="shop.example.com",
        )

        middleware(request)

        assert request.tenant_id == "from-header"

    def test_query_param_before_subdomain(self, middleware, factory):
        request = factory.get("/api/pos/checkout/?tenant=from-query", HTTP_HOST="shop.example.com")

        middleware(request)

        assert request.tenant_id == "from-query"

    def test_subdomain(self, middleware, factory):
        request = factory.get("/api/pos/checkout/", HTTP_HOST="Shop.example.com:8000")

        middleware(request)

        assert request.tenant_id == "shop"

    @pytest.mark.parametrize("host", ["www.example.com", "localhost", "example.com", "10.0.0.1"])
    def test_hosts_without_tenant(self, middleware, factory, host):
        request = factory.get("/api/pos/checkout/", HTTP_HOST=host)

        middleware(request)

        assert request.tenant_id is None

    def test_response_passes_through(self, middleware, factory):
        response = middleware(factory.get("/", HTTP_X_TENANT_ID="store-1"))

        assert response.content == b"ok"


class TestHasTenantAccess:
    """Test the tenant permission."""

    def _request(self, user, tenant_id):
        request = Mock()
        request.user = user
        request.tenant_id = tenant_id
        return request

    def test_authenticated_with_tenant(self):
        user = Mock(is_authenticated=True)

        assert HasTenantAccess().has_permission(self._request(user, "store-1"), None)

    def test_missing_tenant_denied(self):
        user = Mock(is_authenticated=True)

        assert not HasTenantAccess().has_permission(self._request(user, None), None)

    def test_anonymous_denied(self):
        assert not HasTenantAccess().has_permission(
            self._request(AnonymousUser(), "store-1"), None
        )

    def test_object_from_other_store_denied(self):
        request = self._request(Mock(is_authenticated=True), "store-1")

        assert HasTenantAccess().has_object_permission(request, None, Mock(tenant_id="store-1"))
        assert not HasTenantAccess().has_object_permission(
            request, None, Mock(tenant_id="store-2")
        )
