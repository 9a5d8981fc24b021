# carts/models/cart_item.py

"""
CART ITEM MODEL

Rules:
- One line per product per cart (DB constraint); repeated adds merge.
- Quantity must be > 0.
- No price here: the cart always shows the current product price and the
  invoice snapshots the price it charged.
"""

import uuid

from django.core.exceptions import ValidationError
from django.db import models

from products.models import Product

from .cart import Cart


class CartItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    cart = models.ForeignKey(
        Cart,
        on_delete=models.CASCADE,
        related_name="items",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="cart_items",
    )

    quantity = models.PositiveIntegerField(help_text="Must be greater than zero")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["cart", "product"],
                name="unique_product_per_cart",
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="cart_item_quantity_positive",
            ),
        ]

    def clean(self):
        if self.quantity is None or int(self.quantity) <= 0:
            raise ValidationError({"quantity": "Quantity must be greater than zero"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    @property
    def line_total(self):
        return self.product.price * int(self.quantity or 0)

    def __str__(self):
        return f"{getattr(self.product, 'name', 'Product')} x {self.quantity}"
