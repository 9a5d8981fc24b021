"""
PATH: users/services/accounts.py

ACCOUNT SERVICE (identity + access)

Purpose:
- Registration, login, password change, deactivation, profile edits.
- Every mutating operation on a user goes through permissions.roles.can_mutate.

Rules:
- Lookups for a target user happen first (NotFound), then the policy
  check (Forbidden), then credential checks.
- Users are never hard-deleted; deactivation flips status to INACTIVE.
- A non-admin can only ever hold CLIENT_ROLE (RoleEscalation otherwise).

Views call these functions and never touch the models directly.
"""

from __future__ import annotations

import logging
from pathlib import PurePath
from typing import Any, Optional

from django.conf import settings
from django.contrib.auth import authenticate, password_validation
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from rest_framework_simplejwt.tokens import RefreshToken

from core.exceptions import (
    AlreadyInactive,
    BadCredential,
    Conflict,
    NotFound,
    RoleEscalation,
    SamePassword,
    ValidationFailed,
)
from core.lifecycle import Lifecycle
from permissions.roles import ALL_ROLES, ROLE_CLIENT, is_admin, require_admin, require_can_mutate
from users.models import User

logger = logging.getLogger(__name__)

# Fields a profile update may touch. Password/status have dedicated flows.
PROFILE_FIELDS = ("name", "surname", "username", "email", "phone", "role")


# ---------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------
def _get_user_by_username(username: str) -> User:
    username = (username or "").strip()
    try:
        return User.objects.get(username__iexact=username)
    except User.DoesNotExist:
        raise NotFound(f"User '{username}' not found")


def _check_role_change(actor, role: Optional[str]) -> str:
    if role is None or role == "":
        return ROLE_CLIENT
    if role not in ALL_ROLES:
        raise ValidationFailed(f"Unknown role '{role}'")
    if role != ROLE_CLIENT and not is_admin(actor):
        raise RoleEscalation("Only an admin can grant a role other than CLIENT_ROLE")
    return role


def _validate_password(password: str, user: Optional[User] = None) -> None:
    try:
        password_validation.validate_password(password, user=user)
    except DjangoValidationError as exc:
        raise ValidationFailed(" ".join(exc.messages))


def _ensure_unique(*, email: Optional[str] = None, username: Optional[str] = None, exclude_pk=None) -> None:
    qs = User.objects.all()
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)

    if email and qs.filter(email__iexact=email).exists():
        raise Conflict(f"Email '{email}' is already registered")
    if username and qs.filter(username__iexact=username).exists():
        raise Conflict(f"Username '{username}' is already taken")


# ---------------------------------------------------------------------
# Registration / login
# ---------------------------------------------------------------------
def register_user(
    *,
    email: str,
    username: str,
    password: str,
    name: str = "",
    surname: str = "",
    phone: str = "",
    role: Optional[str] = None,
    actor=None,
) -> User:
    """
    Create an ACTIVE account.

    `actor` is the authenticated caller, if any. Anonymous callers and
    clients always get CLIENT_ROLE; asking for anything else is a
    RoleEscalation.
    """
    email = (email or "").strip()
    username = (username or "").strip()

    role = _check_role_change(actor, role)
    _ensure_unique(email=email, username=username)
    _validate_password(password)

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                username=username,
                password=password,
                name=name,
                surname=surname,
                phone=phone,
                role=role,
            )
    except IntegrityError:
        raise Conflict("Email or username is already registered")
    except DjangoValidationError as exc:
        raise ValidationFailed(" ".join(exc.messages))

    logger.info("user registered username=%s role=%s", user.username, user.role)
    return user


def authenticate_user(*, identifier: str, password: str, request=None) -> User:
    """Resolve an email-or-username + password pair. Inactive users fail."""
    user = authenticate(request=request, username=identifier, password=password)
    if user is None:
        raise BadCredential("Invalid credentials")
    return user


def issue_tokens(user: User) -> dict[str, str]:
    refresh = RefreshToken.for_user(user)
    refresh["role"] = user.role
    return {
        "refresh": str(refresh),
        "access": str(refresh.access_token),
    }


# ---------------------------------------------------------------------
# Password / deactivation
# ---------------------------------------------------------------------
@transaction.atomic
def change_password(*, actor, target_username: str, old_password: str, new_password: str) -> User:
    target = _get_user_by_username(target_username)
    require_can_mutate(actor, target, "You cannot change this user's password")

    if not target.check_password(old_password or ""):
        raise BadCredential("Old password is incorrect")

    if old_password == new_password:
        raise SamePassword("The new password must differ from the old one")

    _validate_password(new_password, user=target)

    target.set_password(new_password)
    target.save(update_fields=["password", "updated_at"])

    logger.info("password changed target=%s actor=%s", target.username, actor.username)
    return target


@transaction.atomic
def deactivate_user(*, actor, target_username: str, password: str) -> User:
    """
    Soft-delete an account. The caller confirms with the TARGET's password,
    so an admin deactivating a client must know it.
    """
    target = _get_user_by_username(target_username)
    require_can_mutate(actor, target, "You cannot deactivate this user")

    if target.status == Lifecycle.INACTIVE:
        raise AlreadyInactive(f"User '{target.username}' is already inactive")

    if not target.check_password(password or ""):
        raise BadCredential("Password is incorrect")

    target.deactivate()

    logger.info("user deactivated target=%s actor=%s", target.username, actor.username)
    return target


# ---------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------
@transaction.atomic
def update_profile(*, actor, target_username: str, fields: dict[str, Any]) -> User:
    target = _get_user_by_username(target_username)
    require_can_mutate(actor, target, "You cannot modify this user")

    changes = {k: v for k, v in (fields or {}).items() if k in PROFILE_FIELDS}

    if "role" in changes:
        changes["role"] = _check_role_change(actor, changes["role"])

    _ensure_unique(
        email=changes.get("email"),
        username=changes.get("username"),
        exclude_pk=target.pk,
    )

    for key, value in changes.items():
        setattr(target, key, value.strip() if isinstance(value, str) else value)

    try:
        target.full_clean(exclude=["password"])
    except DjangoValidationError as exc:
        raise ValidationFailed(" ".join(exc.messages))

    target.save()
    return target


def _extension_of(filename: str) -> str:
    return PurePath(filename or "").suffix.lower().lstrip(".")


@transaction.atomic
def update_profile_picture(*, actor, upload) -> User:
    """
    One picture per user: the new upload replaces (and deletes) the old file.
    """
    allowed = [ext.lower() for ext in settings.PROFILE_PICTURE_EXTENSIONS]
    ext = _extension_of(getattr(upload, "name", ""))
    if ext not in allowed:
        raise ValidationFailed(
            f"Extension '{ext}' is not allowed. Allowed: {', '.join(allowed)}"
        )

    user = User.objects.select_for_update().get(pk=actor.pk)

    previous = user.profile_picture
    previous_name = previous.name if previous else ""

    user.profile_picture.save(f"{user.pk}.{ext}", upload, save=False)
    user.save(update_fields=["profile_picture", "updated_at"])

    if previous_name and previous_name != user.profile_picture.name:
        previous.storage.delete(previous_name)

    return user


# ---------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------
def list_users(*, actor):
    require_admin(actor, "Only admins can list users")
    return User.objects.all().order_by("username")


def get_me(*, actor) -> User:
    return User.objects.get(pk=actor.pk)
