"""
Role based permission classes.

Every endpoint names the roles that may call it; anything else gets a 403.
"""
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import BasePermission

DOCTOR = 'DOCTOR'
NURSE = 'NURSE'
PARENT = 'PARENT'


class RolePermission(BasePermission):
    """Allow authenticated users whose ``role`` is in ``allowed_roles``."""
    allowed_roles: frozenset[str] = frozenset()
    message = 'You do not have permission to perform this action.'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "role", None) in self.allowed_roles)


class IsDoctor(RolePermission):
    allowed_roles = frozenset({DOCTOR})


class IsMedicalStaff(RolePermission):
    """Doctors and nurses."""
    allowed_roles = frozenset({DOCTOR, NURSE})


class IsRegisteredUser(RolePermission):
    """Any of the three account roles."""
    allowed_roles = frozenset({DOCTOR, NURSE, PARENT})


def require(request, permission_class) -> None:
    """Per-method role check for views that serve several verbs."""
    if not permission_class().has_permission(request, None):
        raise PermissionDenied(permission_class.message)
