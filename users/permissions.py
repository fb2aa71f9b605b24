from rest_framework.permissions import BasePermission


class IsStoreAdmin(BasePermission):
    """Allow authenticated users holding the admin role (or Django staff)."""

    message = "Admin access required."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, "is_store_admin", False))
