# bootstrap/signals.py

"""
Seed the well-known rows after `migrate`.

Skipped when BOOTSTRAP_ON_MIGRATE is off, or when the user/category tables
are not there yet (partial migrate to an earlier state).
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.db import connections

logger = logging.getLogger(__name__)


def _tables_ready(using: str) -> bool:
    from products.models import Category
    from users.models import User

    existing = set(connections[using].introspection.table_names())
    return {User._meta.db_table, Category._meta.db_table} <= existing


def seed_defaults_after_migrate(sender, using="default", **kwargs):
    if not getattr(settings, "BOOTSTRAP_ON_MIGRATE", True):
        return

    if not _tables_ready(using):
        logger.info("bootstrap skipped: tables not migrated yet")
        return

    from bootstrap.services import ensure_defaults

    ensure_defaults()
