# products/urls.py

"""
CATALOG URLS (mounted under /api/catalog/)
"""

from django.urls import path

from products.views import (
    BestSellersView,
    CategoryDetailView,
    CategoryListCreateView,
    OutOfStockView,
    ProductByNameView,
    ProductDetailView,
    ProductListCreateView,
)

app_name = "catalog"

urlpatterns = [
    path("categories/", CategoryListCreateView.as_view(), name="categories"),
    path("categories/<uuid:category_id>/", CategoryDetailView.as_view(), name="category-detail"),
    path("products/", ProductListCreateView.as_view(), name="products"),
    path("products/best-sellers/", BestSellersView.as_view(), name="best-sellers"),
    path("products/out-of-stock/", OutOfStockView.as_view(), name="out-of-stock"),
    path("products/by-name/", ProductByNameView.as_view(), name="by-name"),
    path("products/<uuid:product_id>/", ProductDetailView.as_view(), name="product-detail"),
]
