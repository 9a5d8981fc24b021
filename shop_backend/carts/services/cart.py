# carts/services/cart.py

"""
======================================================
PATH: carts/services/cart.py
======================================================
CART SERVICE

Purpose:
- Maintain the caller's single ACTIVE cart (upsert, remove line, clear, read).

Rules:
- Lines reference products by NAME (resolved to an ACTIVE product).
- Requested quantities merge into existing lines; the merged quantity must
  not exceed current stock (InsufficientStock).
- Every requested line is validated before anything is written.
- Writes to an existing cart go through a version compare-and-swap; a lost
  race raises Conflict and the caller retries.
- Stock is NOT reserved here. Checkout re-validates with a guarded update.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from carts.models import Cart, CartItem
from core.exceptions import Conflict, InsufficientStock, NotFound, ValidationFailed
from core.lifecycle import Lifecycle
from products.models import Product

logger = logging.getLogger(__name__)

DEFAULT_CART_NAME = "Cart"


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------
def _to_quantity(value) -> int:
    if isinstance(value, bool):
        raise ValidationFailed("quantity must be an integer")
    try:
        qty = int(value)
    except (TypeError, ValueError):
        raise ValidationFailed("quantity must be an integer")
    if qty < 1:
        raise ValidationFailed("quantity must be at least 1")
    return qty


def parse_lines(lines: Iterable[dict]) -> dict[str, int]:
    """
    Normalize [{"product": name, "quantity": n}, ...] into an ordered
    {name: total_quantity} map. Duplicate names in one request are summed.
    """
    requested: dict[str, int] = {}
    for line in lines or []:
        product_name = (line.get("product") or "").strip()
        if not product_name:
            raise ValidationFailed("Each line needs a product name")
        requested[product_name] = requested.get(product_name, 0) + _to_quantity(line.get("quantity"))
    return requested


def _clean_cart_name(name: Optional[str]) -> Optional[str]:
    if name is None:
        return None
    name = name.strip()
    if len(name) > 100:
        raise ValidationFailed("name must be at most 100 characters")
    return name


def active_cart_for(user) -> Optional[Cart]:
    return Cart.objects.active().filter(user=user).first()


def _bump_version(cart: Cart, *, name: Optional[str] = None) -> None:
    """
    Compare-and-swap on `version`. Zero rows updated means another writer
    got there first (or the cart was checked out meanwhile).
    """
    fields = {"version": F("version") + 1, "updated_at": timezone.now()}
    if name is not None:
        fields["name"] = name

    updated = Cart.objects.filter(
        pk=cart.pk,
        version=cart.version,
        status=Lifecycle.ACTIVE,
    ).update(**fields)

    if updated == 0:
        raise Conflict("The cart was modified concurrently. Please retry.")

    cart.version += 1
    if name is not None:
        cart.name = name


def _with_lines(cart: Cart) -> Cart:
    return (
        Cart.objects.prefetch_related("items__product__category")
        .select_related("user")
        .get(pk=cart.pk)
    )


# ---------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------
def upsert_cart(*, user, name: Optional[str] = None, lines: Iterable[dict] = ()) -> Cart:
    """
    Load-or-create the user's ACTIVE cart and merge `lines` into it.
    """
    name = _clean_cart_name(name)
    requested = parse_lines(lines)

    cart = active_cart_for(user)
    existing: dict = {}
    if cart is not None:
        existing = {item.product_id: item for item in cart.items.all()}

    # ---- validate everything first ----
    plan = []
    for product_name, qty in requested.items():
        product = Product.objects.active().filter(name=product_name).first()
        if product is None:
            raise NotFound(f"Product '{product_name}' not found")

        current = existing[product.pk].quantity if product.pk in existing else 0
        wanted = current + qty
        if wanted > product.stock:
            raise InsufficientStock(
                f"Insufficient stock for '{product.name}': requested {wanted}, available {product.stock}"
            )
        plan.append((product, wanted))

    # ---- write ----
    try:
        with transaction.atomic():
            if cart is None:
                cart = Cart.objects.create(user=user, name=name or DEFAULT_CART_NAME)
            else:
                _bump_version(cart, name=name)

            for product, quantity in plan:
                item = existing.get(product.pk)
                if item is None:
                    CartItem.objects.create(cart=cart, product=product, quantity=quantity)
                else:
                    CartItem.objects.filter(pk=item.pk).update(quantity=quantity)
    except (IntegrityError, DjangoValidationError):
        # Concurrent first-cart creation or concurrent first add of a product.
        raise Conflict("The cart was modified concurrently. Please retry.")

    logger.info("cart upserted user=%s cart=%s lines=%s", user.pk, cart.pk, len(plan))
    return _with_lines(cart)


def remove_line(*, user, product_name: str, quantity: Optional[int] = None) -> Cart:
    """
    Decrement a line by `quantity`, or delete it when `quantity` is omitted
    or not smaller than the line quantity.
    """
    cart = active_cart_for(user)
    if cart is None:
        raise NotFound("No active cart")

    product = Product.objects.filter(name=(product_name or "").strip()).first()
    if product is None:
        raise NotFound(f"Product '{product_name}' not found")

    item = CartItem.objects.filter(cart=cart, product=product).first()
    if item is None:
        raise NotFound(f"Product '{product.name}' is not in the cart")

    qty = _to_quantity(quantity) if quantity is not None else None

    with transaction.atomic():
        _bump_version(cart)
        if qty is not None and qty < item.quantity:
            CartItem.objects.filter(pk=item.pk).update(quantity=F("quantity") - qty)
        else:
            item.delete()

    return _with_lines(cart)


def get_cart(*, user) -> Cart:
    cart = active_cart_for(user)
    if cart is None:
        raise NotFound("No active cart")
    return _with_lines(cart)


def clear_cart(*, user) -> Cart:
    cart = active_cart_for(user)
    if cart is None:
        raise NotFound("No active cart")

    with transaction.atomic():
        _bump_version(cart)
        cart.items.all().delete()

    return _with_lines(cart)
