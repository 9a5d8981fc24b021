# products/views/__init__.py

from .category import CategoryDetailView, CategoryListCreateView
from .product import (
    BestSellersView,
    OutOfStockView,
    ProductByNameView,
    ProductDetailView,
    ProductListCreateView,
)

__all__ = [
    "BestSellersView",
    "CategoryDetailView",
    "CategoryListCreateView",
    "OutOfStockView",
    "ProductByNameView",
    "ProductDetailView",
    "ProductListCreateView",
]
