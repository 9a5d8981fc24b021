# invoices/models/invoice.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q

from carts.models import Cart
from core.lifecycle import LifecycleModel, LifecycleQuerySet


class Invoice(LifecycleModel):
    """
    A completed checkout.

    GUARANTEES:
    - total_amount == sum of InvoiceItem.subtotal (prices snapshotted at
      invoice time, so later price edits never change past invoices)
    - `cart` is the frozen (INACTIVE) cart the invoice was built from
    - document_status records whether the PDF receipt was emitted; a failed
      document never undoes the commercial record
    """

    class DocumentStatus(models.TextChoices):
        PENDING = "PENDING", "Pending"
        EMITTED = "EMITTED", "Emitted"
        FAILED = "FAILED", "Failed"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="invoices",
    )

    cart = models.OneToOneField(
        Cart,
        on_delete=models.PROTECT,
        related_name="invoice",
    )

    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    document_status = models.CharField(
        max_length=16,
        choices=DocumentStatus.choices,
        default=DocumentStatus.PENDING,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = LifecycleQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(condition=Q(total_amount__gte=0), name="invoice_total_non_negative"),
        ]
        indexes = [
            models.Index(fields=["user", "created_at"], name="invoice_user_created_idx"),
        ]

    def __str__(self):
        return f"Invoice {self.id} | {self.user_id} | {self.total_amount}"
