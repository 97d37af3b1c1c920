# tenants/api/permissions.py

from rest_framework.permissions import BasePermission


class HasOrganization(BasePermission):
    """
    Authenticated AND attached to an active organization.
    """

    message = "User is not attached to an active organization"

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        organization = getattr(user, "organization", None)
        return organization is not None and organization.is_active


class IsOrganizationAdmin(HasOrganization):
    """
    Owners and admins may change organization settings.
    """

    allowed_roles = {"owner", "admin"}

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            return False
        if request.method in ("GET", "HEAD", "OPTIONS"):
            return True
        return getattr(request.user, "role", None) in self.allowed_roles
