# invoices/tests/test_checkout.py

from decimal import Decimal
from unittest import mock

from django.test import TestCase, override_settings

from bootstrap.services import well_known
from carts.models import Cart
from carts.services.cart import upsert_cart
from core.exceptions import Forbidden, InsufficientStock, InvalidPrice, NotFound, ValidationFailed
from core.lifecycle import Lifecycle
from invoices.models import Invoice
from invoices.services import checkout
from invoices.services.checkout import CheckoutState
from invoices.services.documents import document_path_for
from permissions.roles import ROLE_ADMIN
from products.models import Product
from products.services import catalog
from users.models import User


class CheckoutTestBase(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(
            email="boss@shop.test", username="boss", password="x", role=ROLE_ADMIN
        )
        self.user = User.objects.create_user(email="max@shop.test", username="max", password="x")
        self.other = User.objects.create_user(email="noa@shop.test", username="noa", password="x")
        catalog.create_category(name="Books", actor=self.admin)
        self.atlas = catalog.create_product(
            name="Atlas", stock=5, price="10.00", category_name="Books", actor=self.admin
        )
        self.novel = catalog.create_product(
            name="Novel", stock=10, price="8.00", category_name="Books", actor=self.admin
        )


class CreateInvoiceTests(CheckoutTestBase):
    """
    GUARANTEES:
    - Books/Atlas scenario: stock 5, buy 2 -> stock 3, sold 2, total 20
    - total == sum(quantity x price at invoice time)
    - The cart becomes the invoice's INACTIVE snapshot
    - Rejections leave stock untouched
    """

    def test_books_atlas_scenario(self):
        upsert_cart(user=self.user, lines=[{"product": "Atlas", "quantity": 2}])

        result = checkout.create_invoice(user=self.user)

        self.atlas.refresh_from_db()
        self.assertEqual(self.atlas.stock, 3)
        self.assertEqual(self.atlas.sold_quantity, 2)
        self.assertEqual(result.invoice.total_amount, Decimal("20.00"))
        self.assertEqual(result.state, CheckoutState.DOCUMENT_EMITTED)

        # Cart-add beyond the remaining stock is rejected without mutation.
        with self.assertRaises(InsufficientStock):
            upsert_cart(user=self.user, lines=[{"product": "Atlas", "quantity": 10}])
        self.atlas.refresh_from_db()
        self.assertEqual(self.atlas.stock, 3)

        # Deleting "Books" moves Atlas to the default category.
        books = self.atlas.category
        catalog.delete_category(category_id=books.pk, actor=self.admin)
        self.atlas.refresh_from_db()
        books.refresh_from_db()
        self.assertEqual(self.atlas.category_id, well_known().default_category_id)
        self.assertEqual(books.status, Lifecycle.INACTIVE)

    def test_total_uses_price_at_invoice_time(self):
        upsert_cart(
            user=self.user,
            lines=[{"product": "Atlas", "quantity": 2}, {"product": "Novel", "quantity": 3}],
        )
        invoice = checkout.create_invoice(user=self.user).invoice

        catalog.update_product(product_id=self.atlas.pk, fields={"price": "99.00"}, actor=self.admin)

        invoice.refresh_from_db()
        items = list(invoice.items.all())
        self.assertEqual(invoice.total_amount, Decimal("44.00"))
        self.assertEqual(invoice.total_amount, sum(i.unit_price * i.quantity for i in items))

    def test_cart_is_frozen_and_next_upsert_starts_fresh(self):
        cart = upsert_cart(user=self.user, lines=[{"product": "Atlas", "quantity": 1}])

        invoice = checkout.create_invoice(user=self.user).invoice

        cart.refresh_from_db()
        self.assertEqual(cart.status, Lifecycle.INACTIVE)
        self.assertEqual(invoice.cart_id, cart.pk)

        new_cart = upsert_cart(user=self.user, lines=[{"product": "Novel", "quantity": 1}])
        self.assertNotEqual(new_cart.pk, cart.pk)

    def test_no_cart(self):
        with self.assertRaises(NotFound):
            checkout.create_invoice(user=self.user)

    def test_empty_cart(self):
        upsert_cart(user=self.user, name="Empty", lines=[])

        with self.assertRaises(ValidationFailed):
            checkout.create_invoice(user=self.user)

    def test_stock_dropped_after_cart_add(self):
        upsert_cart(user=self.user, lines=[{"product": "Atlas", "quantity": 4}])
        Product.objects.filter(pk=self.atlas.pk).update(stock=1)

        with self.assertRaises(InsufficientStock):
            checkout.create_invoice(user=self.user)

        self.atlas.refresh_from_db()
        self.assertEqual(self.atlas.stock, 1)
        self.assertEqual(Invoice.objects.count(), 0)

    def test_product_deactivated_after_cart_add(self):
        upsert_cart(user=self.user, lines=[{"product": "Atlas", "quantity": 1}])
        catalog.delete_product(product_id=self.atlas.pk, actor=self.admin)

        with self.assertRaises(NotFound):
            checkout.create_invoice(user=self.user)

    def test_unpriced_product_is_rejected(self):
        for price in (None, Decimal("0"), Decimal("-1"), Decimal("NaN")):
            with self.subTest(price=price):
                with self.assertRaises(InvalidPrice):
                    checkout._check_price(Product(name="Broken", price=price))

    @override_settings(INVOICE_DOCUMENT_CLEANUP=True)
    def test_receipt_leaves_no_file_behind(self):
        upsert_cart(user=self.user, lines=[{"product": "Atlas", "quantity": 1}])

        result = checkout.create_invoice(user=self.user)

        self.assertEqual(result.state, CheckoutState.DOCUMENT_EMITTED)
        self.assertIsNone(result.document_path)
        self.assertFalse(document_path_for(result.invoice).exists())

    @override_settings(INVOICE_DOCUMENT_CLEANUP=False)
    def test_receipt_is_kept_when_cleanup_is_off(self):
        upsert_cart(user=self.user, lines=[{"product": "Atlas", "quantity": 1}])

        result = checkout.create_invoice(user=self.user)
        self.addCleanup(result.document_path.unlink)

        self.assertEqual(result.document_path, document_path_for(result.invoice))
        self.assertTrue(result.document_path.read_bytes().startswith(b"%PDF"))

    def test_document_failure_keeps_invoice(self):
        upsert_cart(user=self.user, lines=[{"product": "Atlas", "quantity": 1}])

        with mock.patch("invoices.services.checkout.render_invoice_document", side_effect=OSError("disk full")):
            result = checkout.create_invoice(user=self.user)

        self.assertEqual(result.state, CheckoutState.COMMITTED_FAILED)
        self.assertEqual(result.document_error, "disk full")
        invoice = Invoice.objects.get(pk=result.invoice.pk)
        self.assertEqual(invoice.document_status, Invoice.DocumentStatus.FAILED)
        self.atlas.refresh_from_db()
        self.assertEqual(self.atlas.stock, 4)


class ConcurrentCheckoutTests(CheckoutTestBase):
    """
    Two checkouts race for the last unit. The competitor commits between the
    first checkout's validation and its commit; the guarded decrement must
    reject the first one and leave stock at zero.
    """

    def test_last_unit_is_sold_once(self):
        Product.objects.filter(pk=self.atlas.pk).update(stock=1)
        upsert_cart(user=self.user, lines=[{"product": "Atlas", "quantity": 1}])
        upsert_cart(user=self.other, lines=[{"product": "Atlas", "quantity": 1}])

        original = checkout._price_lines
        raced = []

        def price_then_lose_race(cart):
            lines = original(cart)
            if not raced:
                raced.append(True)
                checkout.create_invoice(user=self.other)
            return lines

        with mock.patch("invoices.services.checkout._price_lines", side_effect=price_then_lose_race):
            with self.assertRaises(InsufficientStock):
                checkout.create_invoice(user=self.user)

        self.atlas.refresh_from_db()
        self.assertEqual(self.atlas.stock, 0)
        self.assertEqual(self.atlas.sold_quantity, 1)
        self.assertEqual(Invoice.objects.count(), 1)
        self.assertEqual(Invoice.objects.get().user, self.other)
        self.assertTrue(Cart.objects.active().filter(user=self.user).exists())


class UpdateInvoiceTests(CheckoutTestBase):
    def setUp(self):
        super().setUp()
        upsert_cart(user=self.user, lines=[{"product": "Atlas", "quantity": 2}, {"product": "Novel", "quantity": 1}])
        self.invoice = checkout.create_invoice(user=self.user).invoice

    def test_increase_decrease_and_drop_lines(self):
        invoice = checkout.update_invoice(
            invoice_id=self.invoice.pk,
            lines=[{"product": "Atlas", "quantity": 4}],
            actor=self.user,
        )

        self.atlas.refresh_from_db()
        self.novel.refresh_from_db()
        self.assertEqual((self.atlas.stock, self.atlas.sold_quantity), (1, 4))
        self.assertEqual((self.novel.stock, self.novel.sold_quantity), (10, 0))
        self.assertEqual(invoice.total_amount, Decimal("40.00"))
        self.assertEqual([(i.product_name, i.quantity) for i in invoice.items.all()], [("Atlas", 4)])
        self.assertEqual([(i.product.name, i.quantity) for i in invoice.cart.items.all()], [("Atlas", 4)])

    def test_increase_beyond_stock(self):
        with self.assertRaises(InsufficientStock):
            checkout.update_invoice(
                invoice_id=self.invoice.pk,
                lines=[{"product": "Atlas", "quantity": 6}],
                actor=self.user,
            )

        self.atlas.refresh_from_db()
        self.assertEqual(self.atlas.stock, 3)

    def test_other_client_is_forbidden(self):
        with self.assertRaises(Forbidden):
            checkout.update_invoice(
                invoice_id=self.invoice.pk,
                lines=[{"product": "Atlas", "quantity": 1}],
                actor=self.other,
            )

    def test_admin_may_update(self):
        invoice = checkout.update_invoice(
            invoice_id=self.invoice.pk,
            lines=[{"product": "Novel", "quantity": 2}],
            actor=self.admin,
        )

        self.assertEqual(invoice.total_amount, Decimal("16.00"))

    def test_missing_invoice(self):
        with self.assertRaises(NotFound):
            checkout.update_invoice(
                invoice_id="00000000-0000-0000-0000-000000000000",
                lines=[{"product": "Novel", "quantity": 1}],
                actor=self.user,
            )


class InvoiceReadTests(CheckoutTestBase):
    def setUp(self):
        super().setUp()
        upsert_cart(user=self.user, lines=[{"product": "Atlas", "quantity": 2}])
        self.invoice = checkout.create_invoice(user=self.user).invoice

    def test_client_sees_own_invoices(self):
        self.assertEqual(list(checkout.get_invoices_for_user(actor=self.user)), [self.invoice])
        self.assertEqual(list(checkout.get_invoices_for_user(actor=self.other)), [])

    def test_client_cannot_query_other_username(self):
        with self.assertRaises(Forbidden):
            checkout.get_invoices_for_user(actor=self.other, username="max")

    def test_admin_queries_by_username(self):
        self.assertEqual(list(checkout.get_invoices_for_user(actor=self.admin, username="max")), [self.invoice])

        with self.assertRaises(NotFound):
            checkout.get_invoices_for_user(actor=self.admin, username="ghost")

    def test_lines_use_invoice_time_price(self):
        catalog.update_product(product_id=self.atlas.pk, fields={"price": "50.00"}, actor=self.admin)

        lines = checkout.get_lines_for_invoice(invoice_id=self.invoice.pk, actor=self.user)

        self.assertEqual(len(lines), 1)
        self.assertEqual(lines[0].name, "Atlas")
        self.assertEqual(lines[0].price, Decimal("10.00"))
        self.assertEqual(lines[0].quantity, 2)

    def test_lines_for_missing_invoice(self):
        with self.assertRaises(NotFound):
            checkout.get_lines_for_invoice(invoice_id="00000000-0000-0000-0000-000000000000", actor=self.user)
