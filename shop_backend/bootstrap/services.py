# bootstrap/services.py

"""
======================================================
PATH: bootstrap/services.py
======================================================
WELL-KNOWN ROWS

Two rows must always exist:
- the default ADMIN account (sentinel: DEFAULT_ADMIN_EMAIL)
- the default category (sentinel: DEFAULT_CATEGORY_NAME)

Rules:
- Both ensure_* functions are idempotent: existing rows are returned as-is
  (an existing admin's password is never reset).
- Their ids are captured once in a frozen WellKnownEntities record; the
  catalog reads ids from it instead of looking rows up by name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction

from core.lifecycle import Lifecycle
from permissions.roles import ROLE_ADMIN
from products.models import Category
from users.models import User

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_DESCRIPTION = "This is a default category."


@dataclass(frozen=True)
class WellKnownEntities:
    default_category_id: UUID
    default_admin_id: UUID


_well_known: Optional[WellKnownEntities] = None


@transaction.atomic
def ensure_default_category() -> Category:
    name = settings.DEFAULT_CATEGORY_NAME

    category, created = Category.objects.get_or_create(
        name=name,
        defaults={"description": DEFAULT_CATEGORY_DESCRIPTION},
    )

    if created:
        logger.info("bootstrap: created default category name=%s", name)
    elif category.status != Lifecycle.ACTIVE:
        # The default category is never deletable; heal rows edited by hand.
        category.status = Lifecycle.ACTIVE
        category.save(update_fields=["status", "updated_at"])
        logger.warning("bootstrap: reactivated default category name=%s", name)

    return category


@transaction.atomic
def ensure_default_admin() -> User:
    email = settings.DEFAULT_ADMIN_EMAIL

    user = User.objects.filter(email__iexact=email).first()
    if user is not None:
        return user

    user = User.objects.create_user(
        email=email,
        username=settings.DEFAULT_ADMIN_USERNAME,
        password=settings.DEFAULT_ADMIN_PASSWORD,
        name="Admin",
        surname="User",
        phone="12345678",
        role=ROLE_ADMIN,
        is_staff=True,
        is_superuser=True,
    )
    logger.info("bootstrap: created default admin email=%s", email)
    return user


def ensure_defaults() -> WellKnownEntities:
    """
    Ensure both rows and (re)capture their ids.
    """
    global _well_known

    category = ensure_default_category()
    admin = ensure_default_admin()

    _well_known = WellKnownEntities(
        default_category_id=category.pk,
        default_admin_id=admin.pk,
    )
    return _well_known


def well_known() -> WellKnownEntities:
    """
    Ids of the default rows. Resolved on first use if the post_migrate hook
    did not run in this process (e.g. a fresh web worker).
    """
    if _well_known is None:
        return ensure_defaults()
    return _well_known


def reset_well_known() -> None:
    global _well_known
    _well_known = None
