# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from core.lifecycle import LifecycleModel, LifecycleQuerySet

from .category import Category


class Product(LifecycleModel):
    """
    Represents a sellable product.

    STOCK MODEL:
    - `stock` is the on-hand quantity, never negative (DB constraint).
    - `sold_quantity` only grows, and only through checkout.
    - Checkout decrements stock with a guarded UPDATE (stock >= qty), so the
      row is the single source of truth under concurrency.

    `price` is the current selling price. The price paid is snapshotted
    per invoice line (invoices.InvoiceItem).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name="products",
    )

    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)

    price = models.DecimalField(max_digits=10, decimal_places=2)

    stock = models.PositiveIntegerField(default=50)
    sold_quantity = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = LifecycleQuerySet.as_manager()

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(condition=Q(stock__gte=0), name="product_stock_non_negative"),
            models.CheckConstraint(condition=Q(sold_quantity__gte=0), name="product_sold_non_negative"),
            models.CheckConstraint(condition=Q(price__gt=0), name="product_price_positive"),
        ]
        indexes = [
            models.Index(fields=["-sold_quantity"], name="product_sold_qty_idx"),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        if self.price is None or Decimal(self.price) <= 0:
            raise ValidationError({"price": "Price must be greater than zero"})
