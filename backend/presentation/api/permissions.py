"""
Role-based permission classes.

Anonymous requests fail authentication (401); authenticated users
without the required role get 403.
"""

from rest_framework.permissions import BasePermission

from infrastructure.persistence.models import UserRoleChoices


class HasRole(BasePermission):
    """Allow access to authenticated users whose role is in `allowed_roles`."""

    allowed_roles = ()
    message = 'Недостаточно прав'

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return getattr(user, 'role', None) in self.allowed_roles


class IsAdmin(HasRole):
    allowed_roles = (UserRoleChoices.ADMIN,)


class IsAdminOrManager(HasRole):
    allowed_roles = (UserRoleChoices.ADMIN, UserRoleChoices.MANAGER)
