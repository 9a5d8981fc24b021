# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission

from core.exceptions import Forbidden


# =========================================================
# ROLE CONSTANTS
# =========================================================
ROLE_ADMIN = "ADMIN_ROLE"
ROLE_CLIENT = "CLIENT_ROLE"

ROLE_CHOICES = [
    (ROLE_ADMIN, "Admin"),
    (ROLE_CLIENT, "Client"),
]

ALL_ROLES = {ROLE_ADMIN, ROLE_CLIENT}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def is_admin(user) -> bool:
    return get_user_role(user) == ROLE_ADMIN


def can_mutate(actor, target) -> bool:
    """
    THE mutation policy for user accounts.

    True iff:
    - actor and target are the same user, OR
    - actor is ADMIN and target is NOT an admin

    Consequences:
    - an admin can never mutate/deactivate another admin
    - a client can only mutate itself
    """
    if actor is None or target is None:
        return False

    if actor.pk == target.pk:
        return True

    return is_admin(actor) and not is_admin(target)


def can_access(actor, owner) -> bool:
    """
    Read/update access to owned records (carts, invoices):
    the owner, or any admin.
    """
    if actor is None or owner is None:
        return False
    return actor.pk == owner.pk or is_admin(actor)


def require_admin(actor, message: str | None = None) -> None:
    if not is_admin(actor):
        raise Forbidden(message or "Only admins can perform this action")


def require_can_mutate(actor, target, message: str | None = None) -> None:
    if not can_mutate(actor, target):
        raise Forbidden(message or "You do not have permission to modify this user")


# =========================================================
# Base Role Permission (DRF)
# =========================================================
class BaseRolePermission(BasePermission):
    """
    Base permission for role-based access control.

    Subclasses must define:
    - allowed_roles (set)
    """

    allowed_roles: set[str] = set()

    def has_permission(self, request, view):
        user = request.user

        if not user or not user.is_authenticated:
            return False

        user_role = get_user_role(user)
        if not user_role:
            return False

        return user_role in self.allowed_roles


class IsAdmin(BaseRolePermission):
    allowed_roles = {ROLE_ADMIN}


class IsAdminOrClient(BaseRolePermission):
    allowed_roles = ALL_ROLES
