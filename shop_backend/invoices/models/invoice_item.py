# invoices/models/invoice_item.py

"""
INVOICE ITEM (SNAPSHOT)

One row per product line of an invoice, frozen at invoice time:
name and unit price are copied so the invoice reads the same after the
product is renamed, repriced or deactivated.
"""

from __future__ import annotations

import uuid

from django.db import models

from products.models import Product

from .invoice import Invoice


class InvoiceItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.CASCADE,
        related_name="items",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="invoice_items",
    )

    product_name = models.CharField(max_length=100)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField()
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        ordering = ["product_name"]
        constraints = [
            models.UniqueConstraint(fields=["invoice", "product"], name="unique_product_per_invoice"),
            models.CheckConstraint(condition=models.Q(quantity__gt=0), name="invoice_item_quantity_positive"),
        ]

    def save(self, *args, **kwargs):
        self.subtotal = self.unit_price * int(self.quantity)
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.product_name} x {self.quantity}"
