# FILE: /backend/apps/accounts/permissions.py
from rest_framework import permissions

from .models import User


# ----------------------------------------------------------------------
# Role constants
# ----------------------------------------------------------------------
ADMIN_ROLES = [User.Role.ADMIN, User.Role.SUPER_ADMIN]


class IsAdmin(permissions.BasePermission):
    """
    Permission check for Admin users (includes Super Admins).
    """

    def has_permission(self, request, view):
        user = request.user
        if not (user and getattr(user, 'is_authenticated', False)):
            return False
        return getattr(user, 'role', None) in ADMIN_ROLES


def get_logged_in_user_tenant_domain(request):
    """Tenant domain of the authenticated caller."""
    return getattr(request.user, 'tenant_domain', None)
