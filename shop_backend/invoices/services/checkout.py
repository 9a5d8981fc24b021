# invoices/services/checkout.py

"""
CHECKOUT / INVOICE ENGINE (APPLICATION SERVICE)

Purpose:
- Turn the caller's ACTIVE cart into an Invoice (stock out, sold counters
  up, price snapshot), then emit the PDF receipt.
- Edit an existing invoice's lines, moving stock by the delta.
- Invoice reads (per user, per invoice lines).

States of one checkout attempt:

    PENDING -> STOCK_VALIDATED -> COMMITTED -> DOCUMENT_EMITTED
       |             |                 |
       +-> REJECTED  +-> REJECTED      +-> COMMITTED_FAILED

Hard rules:
- Nothing is written before every line is validated and priced.
- Stock leaves through a guarded UPDATE (stock >= qty). If any line loses
  the race the whole commit rolls back, so stock never goes negative and the
  last unit is never sold twice.
- The cart is frozen by a version compare-and-swap in the same transaction;
  a cart edited after it was priced is not checked out.
- The PDF is rendered after the commit. A rendering failure is recorded on
  the invoice (document_status=FAILED) and never rolls it back. The
  rendered file is kept on disk only when INVOICE_DOCUMENT_CLEANUP is off.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Optional

from django.conf import settings
from django.db import models, transaction
from django.db.models import F
from django.utils import timezone

from carts.models import Cart, CartItem
from carts.services.cart import active_cart_for, parse_lines
from core.exceptions import Conflict, Forbidden, InsufficientStock, InvalidPrice, NotFound, ValidationFailed
from core.lifecycle import Lifecycle
from invoices.models import Invoice, InvoiceItem
from invoices.services.documents import render_invoice_document, write_invoice_document
from permissions.roles import can_access, require_admin
from products.models import Product
from users.models import User

logger = logging.getLogger(__name__)


class CheckoutState(models.TextChoices):
    PENDING = "PENDING", "Pending"
    STOCK_VALIDATED = "STOCK_VALIDATED", "Stock validated"
    COMMITTED = "COMMITTED", "Committed"
    DOCUMENT_EMITTED = "DOCUMENT_EMITTED", "Document emitted"
    REJECTED = "REJECTED", "Rejected"
    COMMITTED_FAILED = "COMMITTED_FAILED", "Committed, document failed"


@dataclass
class PricedLine:
    product: Product
    quantity: int
    unit_price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass
class CheckoutResult:
    invoice: Invoice
    state: CheckoutState
    document_path: Optional[Path] = None
    document_error: Optional[str] = None


@dataclass
class InvoiceLine:
    product_id: object
    name: str
    description: str
    price: Decimal
    quantity: int

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


# ---------------------------------------------------------------------
# Stock primitives
# ---------------------------------------------------------------------
def _take_stock(product: Product, quantity: int) -> None:
    """
    Guarded decrement. Zero rows means the stock moved under us.
    """
    updated = Product.objects.filter(
        pk=product.pk,
        status=Lifecycle.ACTIVE,
        stock__gte=quantity,
    ).update(
        stock=F("stock") - quantity,
        sold_quantity=F("sold_quantity") + quantity,
        updated_at=timezone.now(),
    )
    if updated == 0:
        raise InsufficientStock(f"Insufficient stock for '{product.name}'")


def _return_stock(product_id, quantity: int) -> None:
    Product.objects.filter(pk=product_id).update(
        stock=F("stock") + quantity,
        sold_quantity=F("sold_quantity") - quantity,
        updated_at=timezone.now(),
    )


def _check_price(product: Product) -> Decimal:
    price = product.price
    if price is None or not isinstance(price, Decimal) or not price.is_finite() or price <= 0:
        raise InvalidPrice(f"Product '{product.name}' has no valid price")
    return price


# ---------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------
def _price_lines(cart: Cart) -> list[PricedLine]:
    items = list(cart.items.select_related("product"))
    if not items:
        raise ValidationFailed("Cart is empty")

    lines = []
    for item in items:
        product = Product.objects.active().filter(pk=item.product_id).first()
        if product is None:
            raise NotFound(f"Product '{item.product.name}' is no longer available")

        price = _check_price(product)

        if product.stock < item.quantity:
            raise InsufficientStock(
                f"Insufficient stock for '{product.name}': requested {item.quantity}, available {product.stock}"
            )

        lines.append(PricedLine(product=product, quantity=item.quantity, unit_price=price))
    return lines


def _commit(*, user, cart: Cart, lines: list[PricedLine]) -> Invoice:
    with transaction.atomic():
        for line in lines:
            _take_stock(line.product, line.quantity)

        frozen = Cart.objects.filter(
            pk=cart.pk,
            version=cart.version,
            status=Lifecycle.ACTIVE,
        ).update(
            status=Lifecycle.INACTIVE,
            version=F("version") + 1,
            updated_at=timezone.now(),
        )
        if frozen == 0:
            raise Conflict("The cart changed during checkout. Please retry.")

        invoice = Invoice.objects.create(
            user=user,
            cart=cart,
            total_amount=sum((line.subtotal for line in lines), Decimal("0.00")),
        )
        InvoiceItem.objects.bulk_create(
            [
                InvoiceItem(
                    invoice=invoice,
                    product=line.product,
                    product_name=line.product.name,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                    subtotal=line.subtotal,
                )
                for line in lines
            ]
        )
    return invoice


def _emit_document(result: CheckoutResult) -> CheckoutResult:
    invoice = result.invoice
    path = None
    try:
        content = render_invoice_document(invoice)
        if not settings.INVOICE_DOCUMENT_CLEANUP:
            path = write_invoice_document(invoice, content)
    except Exception as exc:
        logger.exception("invoice document failed invoice=%s", invoice.pk)
        Invoice.objects.filter(pk=invoice.pk).update(document_status=Invoice.DocumentStatus.FAILED)
        invoice.document_status = Invoice.DocumentStatus.FAILED
        result.state = CheckoutState.COMMITTED_FAILED
        result.document_error = str(exc)
        return result

    Invoice.objects.filter(pk=invoice.pk).update(document_status=Invoice.DocumentStatus.EMITTED)
    invoice.document_status = Invoice.DocumentStatus.EMITTED
    result.state = CheckoutState.DOCUMENT_EMITTED
    result.document_path = path
    return result


def create_invoice(*, user) -> CheckoutResult:
    state = CheckoutState.PENDING

    cart = active_cart_for(user)
    if cart is None:
        raise NotFound("No active cart")

    try:
        lines = _price_lines(cart)
        state = CheckoutState.STOCK_VALIDATED
        invoice = _commit(user=user, cart=cart, lines=lines)
    except (ValidationFailed, NotFound, InvalidPrice, InsufficientStock, Conflict) as exc:
        logger.info(
            "checkout %s -> %s user=%s cart=%s reason=%s",
            state, CheckoutState.REJECTED, user.pk, cart.pk, exc.kind,
        )
        raise

    logger.info("checkout committed user=%s invoice=%s total=%s", user.pk, invoice.pk, invoice.total_amount)

    result = _emit_document(CheckoutResult(invoice=invoice, state=CheckoutState.COMMITTED))
    logger.info("checkout finished invoice=%s state=%s", invoice.pk, result.state)
    return result


# ---------------------------------------------------------------------
# Invoice edits
# ---------------------------------------------------------------------
def _get_invoice(invoice_id, actor) -> Invoice:
    try:
        invoice = Invoice.objects.select_related("user", "cart").get(pk=invoice_id)
    except Invoice.DoesNotExist:
        raise NotFound("Invoice not found")

    if not can_access(actor, invoice.user):
        raise Forbidden("You cannot access this invoice")
    return invoice


def get_invoice(*, invoice_id, actor) -> Invoice:
    return _get_invoice(invoice_id, actor)


def update_invoice(*, invoice_id, lines: Iterable[dict], actor) -> Invoice:
    """
    Replace an invoice's lines.

    Stock moves by the per-product delta against the previous lines
    (more -> guarded take, fewer or dropped -> returned). All lines are
    re-priced at the current product price.
    """
    invoice = _get_invoice(invoice_id, actor)
    cart = invoice.cart
    if cart is None:
        raise NotFound("Invoice cart not found")

    requested = parse_lines(lines)
    if not requested:
        raise ValidationFailed("An invoice needs at least one line")

    previous = {item.product_id: item.quantity for item in invoice.items.all()}

    priced = []
    for product_name, qty in requested.items():
        product = Product.objects.active().filter(name=product_name).first()
        if product is None:
            raise NotFound(f"Product '{product_name}' not found")

        price = _check_price(product)
        delta = qty - previous.get(product.pk, 0)
        if delta > 0 and product.stock < delta:
            raise InsufficientStock(
                f"Insufficient stock for '{product.name}': requested {delta} more, available {product.stock}"
            )
        priced.append(PricedLine(product=product, quantity=qty, unit_price=price))

    kept = {line.product.pk for line in priced}

    with transaction.atomic():
        for line in priced:
            delta = line.quantity - previous.get(line.product.pk, 0)
            if delta > 0:
                _take_stock(line.product, delta)
            elif delta < 0:
                _return_stock(line.product.pk, -delta)

        for product_id, qty in previous.items():
            if product_id not in kept:
                _return_stock(product_id, qty)

        cart.items.all().delete()
        CartItem.objects.bulk_create(
            [CartItem(cart=cart, product=line.product, quantity=line.quantity) for line in priced]
        )

        invoice.items.all().delete()
        InvoiceItem.objects.bulk_create(
            [
                InvoiceItem(
                    invoice=invoice,
                    product=line.product,
                    product_name=line.product.name,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                    subtotal=line.subtotal,
                )
                for line in priced
            ]
        )

        invoice.total_amount = sum((line.subtotal for line in priced), Decimal("0.00"))
        invoice.save(update_fields=["total_amount", "updated_at"])

    logger.info("invoice updated invoice=%s actor=%s total=%s", invoice.pk, actor.pk, invoice.total_amount)
    return invoice


# ---------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------
def get_invoices_for_user(*, actor, username: Optional[str] = None):
    """
    The caller's invoices, or (admins only) another user's by username.
    """
    target = actor
    username = (username or "").strip()

    if username and username.lower() != actor.username.lower():
        require_admin(actor, "Only admins can list other users' invoices")
        target = User.objects.filter(username__iexact=username).first()
        if target is None:
            raise NotFound(f"User '{username}' not found")

    return (
        Invoice.objects.filter(user=target)
        .select_related("user", "cart")
        .prefetch_related("items__product")
        .order_by("-created_at")
    )


def get_lines_for_invoice(*, invoice_id, actor) -> list[InvoiceLine]:
    """
    Lines read through the invoice's cart snapshot; name and price come from
    the invoice-time snapshot rows.
    """
    invoice = _get_invoice(invoice_id, actor)
    snapshots = {item.product_id: item for item in invoice.items.all()}

    lines = []
    for item in invoice.cart.items.select_related("product"):
        snap = snapshots.get(item.product_id)
        lines.append(
            InvoiceLine(
                product_id=item.product_id,
                name=snap.product_name if snap else item.product.name,
                description=item.product.description,
                price=snap.unit_price if snap else item.product.price,
                quantity=item.quantity,
            )
        )
    return lines
