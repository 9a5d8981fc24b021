# products/tests/test_api.py

from django.test import TestCase
from rest_framework.test import APIClient

from permissions.roles import ROLE_ADMIN
from products.models import Product
from users.models import User


class CatalogApiTests(TestCase):
    """
    GUARANTEES:
    - Catalog reads are public
    - Writes need an authenticated admin
    - Errors use the {success: false} envelope
    """

    def setUp(self):
        self.admin = User.objects.create_user(
            email="boss@shop.test", username="boss", password="x", role=ROLE_ADMIN
        )
        self.client_user = User.objects.create_user(email="jo@shop.test", username="jo", password="x")
        self.api = APIClient()

    def _admin_creates_books_and_atlas(self):
        self.api.force_authenticate(self.admin)
        res = self.api.post("/api/catalog/categories/", {"name": "Books", "description": "Printed"}, format="json")
        self.assertEqual(res.status_code, 201)
        res = self.api.post(
            "/api/catalog/products/",
            {"name": "Atlas", "stock": 5, "price": "10.00", "category": "Books"},
            format="json",
        )
        self.assertEqual(res.status_code, 201)
        self.api.force_authenticate(None)
        return res.data["product"]

    def test_public_listing(self):
        self._admin_creates_books_and_atlas()

        res = self.api.get("/api/catalog/products/", {"category": "Books"})

        self.assertEqual(res.status_code, 200)
        self.assertEqual([p["name"] for p in res.data["products"]], ["Atlas"])
        self.assertEqual(res.data["products"][0]["category_name"], "Books")

    def test_by_name(self):
        self._admin_creates_books_and_atlas()

        res = self.api.get("/api/catalog/products/by-name/", {"name": "Atlas"})

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["product"]["stock"], 5)

    def test_anonymous_write_is_unauthenticated(self):
        res = self.api.post("/api/catalog/categories/", {"name": "Music"}, format="json")

        self.assertEqual(res.status_code, 401)

    def test_client_write_is_forbidden(self):
        self.api.force_authenticate(self.client_user)

        res = self.api.post("/api/catalog/categories/", {"name": "Music"}, format="json")

        self.assertEqual(res.status_code, 403)
        self.assertEqual(res.data["error"], "Forbidden")

    def test_invalid_price_envelope(self):
        self._admin_creates_books_and_atlas()
        self.api.force_authenticate(self.admin)

        res = self.api.post(
            "/api/catalog/products/",
            {"name": "Free", "price": "0.00", "category": "Books"},
            format="json",
        )

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"], "InvalidPrice")
        self.assertFalse(Product.objects.filter(name="Free").exists())

    def test_patch_and_delete_product(self):
        product = self._admin_creates_books_and_atlas()
        self.api.force_authenticate(self.admin)

        res = self.api.patch(f"/api/catalog/products/{product['id']}/", {"stock": 7}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["product"]["stock"], 7)
        self.assertEqual(res.data["product"]["price"], "10.00")

        res = self.api.delete(f"/api/catalog/products/{product['id']}/")
        self.assertEqual(res.status_code, 200)

        res = self.api.get(f"/api/catalog/products/{product['id']}/")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["error"], "NotFound")

    def test_delete_category_moves_products(self):
        self._admin_creates_books_and_atlas()
        self.api.force_authenticate(self.admin)
        books_id = self.api.get("/api/catalog/categories/").data["categories"]
        books_id = next(c["id"] for c in books_id if c["name"] == "Books")

        res = self.api.delete(f"/api/catalog/categories/{books_id}/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(Product.objects.get(name="Atlas").category.name, "CATEGORY_DEFAULT")
