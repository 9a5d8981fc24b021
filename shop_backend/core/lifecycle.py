# core/lifecycle.py

"""
LIFECYCLE STATE (SOFT DELETE)

Records are never hard-deleted. Instead every soft-deletable model carries a
tagged `status` column:

    ACTIVE   -> visible, usable
    INACTIVE -> soft-deleted (kept for history + referential integrity)

New lifecycle states can be added to `Lifecycle` without touching callers
that only ask `is_active`.
"""

from __future__ import annotations

from django.db import models


class Lifecycle(models.TextChoices):
    ACTIVE = "ACTIVE", "Active"
    INACTIVE = "INACTIVE", "Inactive"


class LifecycleQuerySet(models.QuerySet):
    def active(self):
        return self.filter(status=Lifecycle.ACTIVE)

    def inactive(self):
        return self.filter(status=Lifecycle.INACTIVE)


class LifecycleModel(models.Model):
    """
    Abstract base for soft-deletable entities.
    """

    status = models.CharField(
        max_length=16,
        choices=Lifecycle.choices,
        default=Lifecycle.ACTIVE,
        db_index=True,
    )

    class Meta:
        abstract = True

    @property
    def is_active(self) -> bool:
        return self.status == Lifecycle.ACTIVE

    def deactivate(self, *, save: bool = True) -> None:
        self.status = Lifecycle.INACTIVE
        if save:
            fields = ["status"]
            if any(f.name == "updated_at" for f in self._meta.fields):
                fields.append("updated_at")
            self.save(update_fields=fields)
