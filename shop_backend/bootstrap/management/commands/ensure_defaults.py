# bootstrap/management/commands/ensure_defaults.py

"""
PATH: bootstrap/management/commands/ensure_defaults.py

Create the default admin + default category if missing (idempotent).

- Safe to run on every deploy.
- Never prints the admin password.
"""

from __future__ import annotations

from django.core.management.base import BaseCommand

from bootstrap.services import ensure_defaults


class Command(BaseCommand):
    help = "Ensure the default admin account and default category exist (idempotent)."

    def handle(self, *args, **options):
        entities = ensure_defaults()

        self.stdout.write(
            self.style.SUCCESS(
                f"Defaults ready: category={entities.default_category_id} "
                f"admin={entities.default_admin_id}"
            )
        )
