"""
PATH: carts/models/cart.py

CART MODEL

Purpose:
- A user's working list of product lines, later frozen into an invoice.

Rules:
- At most one ACTIVE cart per user (DB constraint).
- `version` is an optimistic-concurrency token: every write to the cart
  bumps it through a compare-and-swap UPDATE (see carts.services.cart).
- After checkout the cart is set INACTIVE and becomes the invoice's
  snapshot; it is never modified through the cart service again.
"""

import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from core.lifecycle import Lifecycle, LifecycleModel, LifecycleQuerySet


class Cart(LifecycleModel):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="carts",
    )

    name = models.CharField(max_length=100, blank=True)

    version = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = LifecycleQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user"],
                condition=models.Q(status=Lifecycle.ACTIVE),
                name="one_active_cart_per_user",
            )
        ]

    def clean(self):
        if self.user_id is None:
            raise ValidationError({"user": "user is required"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"Cart {self.name or self.id} | {self.user_id} | {self.status}"
