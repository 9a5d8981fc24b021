# products/models/category.py

import uuid

from django.db import models

from core.lifecycle import LifecycleModel, LifecycleQuerySet


class Category(LifecycleModel):
    """
    Product grouping.

    - name is unique across ACTIVE and INACTIVE rows.
    - Deleting a category is a soft delete; its products move to the
      default category first (see products.services.catalog).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=25, unique=True)
    description = models.CharField(max_length=200, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = LifecycleQuerySet.as_manager()

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "categories"

    def __str__(self):
        return self.name
