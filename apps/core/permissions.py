"""
Custom permissions for the POS API.
"""

from rest_framework import permissions


class HasTenantAccess(permissions.BasePermission):
    """
    Permission class to ensure the request is authenticated and scoped to a store.
    """

    message = "A store (tenant) must be selected for this request."

    def has_permission(self, request, view):
        tenant_id = getattr(request, "tenant_id", None)
        return bool(request.user and request.user.is_authenticated and tenant_id)

    def has_object_permission(self, request, view, obj):
        # Check if the object belongs to the request's store
        if hasattr(obj, "tenant_id"):
            return obj.tenant_id == request.tenant_id
        return True
