# users/permissions.py

from rest_framework.permissions import SAFE_METHODS

from tenants.api.permissions import HasOrganization


# ---------------- BASE ROLE PERMISSION ----------------
class HasRole(HasOrganization):
    """
    Tenant member whose role is in allowed_roles.
    """

    allowed_roles = set()

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            return False
        return request.user.role in self.allowed_roles


# ---------------- ROLE PERMISSIONS ----------------
class IsOwnerOrAdmin(HasRole):
    allowed_roles = {"owner", "admin"}


class IsMemberReadOnlyOrAdmin(HasOrganization):
    """
    Any member may read; only owners/admins may write.
    Used for account management.
    """

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            return False
        if request.method in SAFE_METHODS:
            return True
        return request.user.role in IsOwnerOrAdmin.allowed_roles
