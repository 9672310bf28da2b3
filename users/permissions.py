"""Role-based DRF permissions and warehouse scoping helpers."""

from common.exceptions import ScopeError
from rest_framework.permissions import BasePermission

from .models import User


class HasRole(BasePermission):
    """Allow authenticated, active users whose role is in `allowed_roles`.

    Superusers are always allowed.
    """

    allowed_roles: tuple = ()
    message = "Your role is not authorized to access this resource."

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not user.is_authenticated or not user.is_active:
            return False
        if user.is_superuser:
            return True
        return getattr(user, "role", None) in self.allowed_roles


class IsAdmin(HasRole):
    allowed_roles = (User.ROLE_ADMIN,)


class IsAdminOrManager(HasRole):
    allowed_roles = (User.ROLE_ADMIN, User.ROLE_MANAGER)


class IsInventoryUser(HasRole):
    allowed_roles = (User.ROLE_ADMIN, User.ROLE_MANAGER, User.ROLE_WAREHOUSE)


def ensure_warehouse_access(user, *warehouse_ids) -> None:
    """Raise ScopeError unless `user` may act on every given warehouse.

    Admins and managers are unrestricted. Warehouse staff must have an
    assigned warehouse equal to each of `warehouse_ids`.
    """
    if not getattr(user, "is_warehouse_staff", False) or user.is_superuser:
        return
    assigned = user.assigned_warehouse_id
    if assigned is None:
        raise ScopeError("No warehouse is assigned to your account.")
    for warehouse_id in warehouse_ids:
        if warehouse_id is None or int(warehouse_id) != int(assigned):
            raise ScopeError("You can only operate on your assigned warehouse.")
