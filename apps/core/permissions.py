"""
Role-Based Permissions for the UMKM Directory.

Maps AccountProfile.role to DRF permission classes.

Roles:
- village_admin: full back-office access
- business_owner: self-service access to their own business

Usage:
    from apps.core.permissions import IsVillageAdmin, PortalAccessPermission

    class MyView(APIView):
        permission_classes = [PortalAccessPermission, IsVillageAdmin]
"""

import logging

from django.contrib.auth import logout
from rest_framework.authentication import SessionAuthentication
from rest_framework.permissions import BasePermission

from apps.core.middleware import bind_actor
from apps.core.models import AccountProfile, UserRole

logger = logging.getLogger(__name__)


def get_user_role(user):
    """
    Helper function to get user's role.

    Returns: 'village_admin', 'business_owner', or None when anonymous
    """
    if not user or not user.is_authenticated:
        return None

    if user.is_superuser:
        return UserRole.VILLAGE_ADMIN.value

    try:
        return AccountProfile.objects.get(user=user).role
    except AccountProfile.DoesNotExist:
        # No profile - least privileged role
        return UserRole.BUSINESS_OWNER.value


class PortalAccessPermission(BasePermission):
    """
    Run the business activation gate on every authenticated request.

    A business can be deactivated mid-session, so passing the gate at
    login is not enough. The resolved TenancyScope is cached on the
    request as request.tenancy for views and later permissions.
    Gate failures raise the typed 403 errors; session logins are ended.
    """

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False

        from apps.businesses.tenancy import enforce_portal_access
        from apps.core.exceptions import DirectoryException

        try:
            request.tenancy = enforce_portal_access(request.user)
        except DirectoryException:
            if isinstance(request.successful_authenticator, SessionAuthentication):
                logout(request._request)
            raise
        bind_actor(request.user, request.tenancy.role.value)
        return True


class RolePermission(BasePermission):
    """Base class for role-based permissions."""

    # Override in subclasses
    allowed_roles = []

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        return get_user_role(request.user) in self.allowed_roles


class IsVillageAdmin(RolePermission):
    """Back-office endpoints (/api/admin/...)."""
    allowed_roles = [UserRole.VILLAGE_ADMIN.value]
    message = "Village admin access required."


class IsBusinessOwner(RolePermission):
    """Self-service portal endpoints (/api/umkm/...)."""
    allowed_roles = [UserRole.BUSINESS_OWNER.value]
    message = "Business owner access required."
