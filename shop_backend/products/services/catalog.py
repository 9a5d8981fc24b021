# products/services/catalog.py

"""
======================================================
PATH: products/services/catalog.py
======================================================
CATALOG SERVICES

Purpose:
- Category + product lifecycle (create, update, soft delete).
- Catalog queries (by category, best sellers, out of stock, by name).

Rules:
- Every write is admin-only (Forbidden otherwise).
- Names are unique per entity; collisions raise Conflict, including a
  collision only the DB unique index sees (two writers racing).
- Price must be a positive decimal (InvalidPrice).
- Deleting a category moves its products to the default category and then
  soft-deletes it, in one transaction. The default category itself can be
  neither deleted nor renamed.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from django.db import IntegrityError, transaction
from django.utils import timezone

from bootstrap.services import WellKnownEntities, well_known
from core.exceptions import AlreadyInactive, Conflict, Forbidden, InvalidPrice, NotFound, ValidationFailed
from core.lifecycle import Lifecycle
from permissions.roles import require_admin
from products.models import Category, Product

logger = logging.getLogger(__name__)

CATEGORY_FIELDS = ("name", "description")
PRODUCT_FIELDS = ("name", "stock", "description", "price")


# ---------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------
def _to_price(value) -> Decimal:
    if value is None or value == "" or isinstance(value, bool):
        raise InvalidPrice("price is required")
    try:
        price = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidPrice("price must be a valid decimal")
    if not price.is_finite() or price <= Decimal("0"):
        raise InvalidPrice("price must be greater than zero")
    return price.quantize(Decimal("0.01"))


def _to_stock(value) -> int:
    if isinstance(value, bool):
        raise ValidationFailed("stock must be an integer")
    try:
        stock = int(value)
    except (TypeError, ValueError):
        raise ValidationFailed("stock must be an integer")
    if stock < 0:
        raise ValidationFailed("stock cannot be negative")
    return stock


def _clean_name(value, *, field_name="name", max_length: int) -> str:
    name = (value or "").strip()
    if not name:
        raise ValidationFailed(f"{field_name} is required")
    if len(name) > max_length:
        raise ValidationFailed(f"{field_name} must be at most {max_length} characters")
    return name


def _active_category_by_name(name: str) -> Category:
    category = Category.objects.active().filter(name=(name or "").strip()).first()
    if category is None:
        raise NotFound(f"Category '{name}' not found")
    return category


# ---------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------
def list_categories():
    return Category.objects.active().order_by("name")


def get_category(category_id) -> Category:
    try:
        return Category.objects.get(pk=category_id)
    except Category.DoesNotExist:
        raise NotFound("Category not found")


def create_category(*, name: str, description: str = "", actor) -> Category:
    require_admin(actor, "Only admins can create categories")

    name = _clean_name(name, max_length=25)
    if Category.objects.filter(name=name).exists():
        raise Conflict(f"Category '{name}' already exists")

    try:
        with transaction.atomic():
            category = Category.objects.create(name=name, description=(description or "").strip())
    except IntegrityError:
        raise Conflict(f"Category '{name}' already exists")

    logger.info("category created name=%s", category.name)
    return category


@transaction.atomic
def update_category(
    *,
    category_id,
    fields: dict[str, Any],
    actor,
    defaults: Optional[WellKnownEntities] = None,
) -> Category:
    require_admin(actor, "Only admins can update categories")

    category = get_category(category_id)
    changes = {k: v for k, v in (fields or {}).items() if k in CATEGORY_FIELDS}

    if "name" in changes:
        new_name = _clean_name(changes["name"], max_length=25)
        if new_name != category.name:
            if category.pk == (defaults or well_known()).default_category_id:
                raise Forbidden("The default category cannot be renamed")
            if Category.objects.filter(name=new_name).exclude(pk=category.pk).exists():
                raise Conflict(f"Category '{new_name}' already exists")
        category.name = new_name

    if "description" in changes:
        category.description = (changes["description"] or "").strip()

    try:
        with transaction.atomic():
            category.save()
    except IntegrityError:
        raise Conflict(f"Category '{category.name}' already exists")
    return category


@transaction.atomic
def delete_category(*, category_id, actor, defaults: Optional[WellKnownEntities] = None) -> Category:
    """
    Soft delete + reassignment, all-or-nothing.

    Products of the deleted category keep working (they are reachable through
    the default category), so invoices referencing them are never blocked.
    """
    require_admin(actor, "Only admins can delete categories")

    try:
        category = Category.objects.select_for_update().get(pk=category_id)
    except Category.DoesNotExist:
        raise NotFound("Category not found")

    if category.status == Lifecycle.INACTIVE:
        raise AlreadyInactive(f"Category '{category.name}' is already inactive")

    default_category_id = (defaults or well_known()).default_category_id
    if category.pk == default_category_id:
        raise Forbidden("The default category cannot be deleted")

    moved = Product.objects.filter(category=category).update(
        category_id=default_category_id,
        updated_at=timezone.now(),
    )
    category.deactivate()

    logger.info("category deleted name=%s products_moved=%s", category.name, moved)
    return category


# ---------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------
def create_product(
    *,
    name: str,
    stock=50,
    description: str = "",
    price,
    category_name: str,
    actor,
) -> Product:
    require_admin(actor, "Only admins can create products")

    category = _active_category_by_name(category_name)

    name = _clean_name(name, max_length=100)
    if Product.objects.filter(name=name).exists():
        raise Conflict(f"Product '{name}' already exists")

    stock = _to_stock(stock)
    price = _to_price(price)

    try:
        with transaction.atomic():
            product = Product.objects.create(
                name=name,
                stock=stock,
                description=(description or "").strip(),
                price=price,
                category=category,
            )
    except IntegrityError:
        raise Conflict(f"Product '{name}' already exists")

    logger.info("product created name=%s category=%s", product.name, category.name)
    return product


@transaction.atomic
def update_product(
    *,
    product_id,
    fields: dict[str, Any],
    category_name: Optional[str] = None,
    actor,
) -> Product:
    """
    Partial update. Only the keys present in `fields` change.
    """
    require_admin(actor, "Only admins can update products")

    category = _active_category_by_name(category_name) if category_name else None

    try:
        product = Product.objects.select_for_update().get(pk=product_id)
    except Product.DoesNotExist:
        raise NotFound("Product not found")

    changes = {k: v for k, v in (fields or {}).items() if k in PRODUCT_FIELDS}

    if "name" in changes:
        new_name = _clean_name(changes["name"], max_length=100)
        if Product.objects.filter(name=new_name).exclude(pk=product.pk).exists():
            raise Conflict(f"Product '{new_name}' already exists")
        product.name = new_name

    if "price" in changes:
        product.price = _to_price(changes["price"])

    if "stock" in changes:
        product.stock = _to_stock(changes["stock"])

    if "description" in changes:
        product.description = (changes["description"] or "").strip()

    if category is not None:
        product.category = category

    try:
        with transaction.atomic():
            product.save()
    except IntegrityError:
        raise Conflict(f"Product '{product.name}' already exists")
    return product


@transaction.atomic
def delete_product(*, product_id, actor) -> Product:
    require_admin(actor, "Only admins can delete products")

    try:
        product = Product.objects.select_for_update().get(pk=product_id)
    except Product.DoesNotExist:
        raise NotFound("Product not found")

    if product.status == Lifecycle.INACTIVE:
        raise AlreadyInactive(f"Product '{product.name}' is already inactive")

    product.deactivate()
    logger.info("product deleted name=%s", product.name)
    return product


# ---------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------
def list_products(*, category_name: Optional[str] = None):
    qs = Product.objects.active().select_related("category")
    if category_name:
        qs = qs.filter(category=_active_category_by_name(category_name))
    return qs.order_by("name")


def best_sellers():
    return Product.objects.active().select_related("category").order_by("-sold_quantity", "name")


def out_of_stock():
    return Product.objects.active().filter(stock=0).select_related("category").order_by("name")


def get_product(product_id) -> Product:
    try:
        return Product.objects.active().select_related("category").get(pk=product_id)
    except Product.DoesNotExist:
        raise NotFound("Product not found")


def get_product_by_name(name: str) -> Product:
    product = Product.objects.active().select_related("category").filter(name=(name or "").strip()).first()
    if product is None:
        raise NotFound(f"Product '{name}' not found")
    return product
