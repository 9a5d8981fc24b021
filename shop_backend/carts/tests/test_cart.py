# carts/tests/test_cart.py

from django.test import TestCase
from rest_framework.test import APIClient

from carts.models import Cart, CartItem
from carts.services import cart as cart_service
from core.exceptions import Conflict, InsufficientStock, NotFound
from core.lifecycle import Lifecycle
from products.models import Category, Product
from users.models import User


class CartTestBase(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="kim@shop.test", username="kim", password="x")
        self.books = Category.objects.create(name="Books")
        self.atlas = Product.objects.create(name="Atlas", stock=3, price="10.00", category=self.books)
        self.novel = Product.objects.create(name="Novel", stock=10, price="8.00", category=self.books)


class UpsertCartTests(CartTestBase):
    """
    GUARANTEES:
    - One ACTIVE cart per user, created on first upsert
    - Repeated adds merge into one line
    - Merged quantity never exceeds stock; a rejected request writes nothing
    """

    def test_first_upsert_creates_cart(self):
        cart = cart_service.upsert_cart(user=self.user, name="Weekend", lines=[{"product": "Atlas", "quantity": 2}])

        self.assertEqual(cart.name, "Weekend")
        self.assertEqual(cart.status, Lifecycle.ACTIVE)
        self.assertEqual([(i.product.name, i.quantity) for i in cart.items.all()], [("Atlas", 2)])

    def test_repeated_adds_merge(self):
        cart_service.upsert_cart(user=self.user, lines=[{"product": "Novel", "quantity": 2}])
        cart = cart_service.upsert_cart(user=self.user, lines=[{"product": "Novel", "quantity": 3}])

        self.assertEqual(CartItem.objects.filter(cart=cart).count(), 1)
        self.assertEqual(cart.items.get().quantity, 5)
        self.assertEqual(Cart.objects.filter(user=self.user).count(), 1)

    def test_upsert_renames_and_bumps_version(self):
        first = cart_service.upsert_cart(user=self.user, name="A", lines=[{"product": "Novel", "quantity": 1}])
        second = cart_service.upsert_cart(user=self.user, name="B", lines=[])

        self.assertEqual(second.pk, first.pk)
        self.assertEqual(second.name, "B")
        self.assertEqual(second.version, first.version + 1)

    def test_merged_quantity_over_stock_is_rejected(self):
        cart_service.upsert_cart(user=self.user, lines=[{"product": "Atlas", "quantity": 2}])

        with self.assertRaises(InsufficientStock):
            cart_service.upsert_cart(user=self.user, lines=[{"product": "Atlas", "quantity": 2}])

        self.assertEqual(CartItem.objects.get(cart__user=self.user, product=self.atlas).quantity, 2)

    def test_all_lines_validated_before_writing(self):
        with self.assertRaises(InsufficientStock):
            cart_service.upsert_cart(
                user=self.user,
                lines=[{"product": "Novel", "quantity": 1}, {"product": "Atlas", "quantity": 10}],
            )

        self.assertFalse(Cart.objects.filter(user=self.user).exists())
        self.atlas.refresh_from_db()
        self.assertEqual(self.atlas.stock, 3)

    def test_unknown_product(self):
        with self.assertRaises(NotFound):
            cart_service.upsert_cart(user=self.user, lines=[{"product": "Ghost", "quantity": 1}])

    def test_stale_version_conflicts(self):
        cart = cart_service.upsert_cart(user=self.user, lines=[{"product": "Novel", "quantity": 1}])
        stale = Cart.objects.get(pk=cart.pk)

        cart_service.upsert_cart(user=self.user, lines=[{"product": "Novel", "quantity": 1}])

        with self.assertRaises(Conflict):
            cart_service._bump_version(stale)


class RemoveLineTests(CartTestBase):
    def setUp(self):
        super().setUp()
        cart_service.upsert_cart(user=self.user, lines=[{"product": "Novel", "quantity": 4}])

    def test_decrement_when_quantity_is_smaller(self):
        cart = cart_service.remove_line(user=self.user, product_name="Novel", quantity=1)

        self.assertEqual(cart.items.get().quantity, 3)

    def test_remove_when_quantity_covers_line(self):
        cart = cart_service.remove_line(user=self.user, product_name="Novel", quantity=4)

        self.assertFalse(cart.items.exists())

    def test_remove_without_quantity(self):
        cart = cart_service.remove_line(user=self.user, product_name="Novel")

        self.assertFalse(cart.items.exists())

    def test_product_not_in_cart(self):
        with self.assertRaises(NotFound):
            cart_service.remove_line(user=self.user, product_name="Atlas")

    def test_no_cart(self):
        other = User.objects.create_user(email="lee@shop.test", username="lee", password="x")

        with self.assertRaises(NotFound):
            cart_service.remove_line(user=other, product_name="Novel")


class GetAndClearCartTests(CartTestBase):
    def test_get_cart_without_cart(self):
        with self.assertRaises(NotFound):
            cart_service.get_cart(user=self.user)

    def test_clear_cart(self):
        cart_service.upsert_cart(
            user=self.user,
            lines=[{"product": "Novel", "quantity": 1}, {"product": "Atlas", "quantity": 1}],
        )

        cart = cart_service.clear_cart(user=self.user)

        self.assertEqual(cart.items.count(), 0)
        self.assertEqual(cart.status, Lifecycle.ACTIVE)


class CartApiTests(CartTestBase):
    def setUp(self):
        super().setUp()
        self.api = APIClient()
        self.api.force_authenticate(self.user)

    def test_put_then_get_resolves_product_details(self):
        res = self.api.put(
            "/api/cart/",
            {"name": "Trip", "products": [{"product": "Atlas", "quantity": 2}]},
            format="json",
        )
        self.assertEqual(res.status_code, 200)

        res = self.api.get("/api/cart/")
        self.assertEqual(res.status_code, 200)
        line = res.data["cart"]["items"][0]
        self.assertEqual(line["name"], "Atlas")
        self.assertEqual(line["price"], "10.00")
        self.assertEqual(line["category"], "Books")
        self.assertEqual(res.data["cart"]["total_amount"], "20.00")

    def test_insufficient_stock_envelope(self):
        res = self.api.put("/api/cart/", {"products": [{"product": "Atlas", "quantity": 10}]}, format="json")

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"], "InsufficientStock")

    def test_remove_line_endpoint(self):
        self.api.put("/api/cart/", {"products": [{"product": "Novel", "quantity": 3}]}, format="json")

        res = self.api.post("/api/cart/lines/remove/", {"product": "Novel", "quantity": 1}, format="json")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["cart"]["items"][0]["quantity"], 2)

    def test_account_without_role_is_refused(self):
        User.objects.filter(pk=self.user.pk).update(role="")
        self.user.refresh_from_db()
        api = APIClient()
        api.force_authenticate(self.user)

        res = api.put("/api/cart/", {"products": [{"product": "Atlas", "quantity": 1}]}, format="json")

        self.assertEqual(res.status_code, 403)
        self.assertFalse(Cart.objects.filter(user=self.user).exists())
