from .catalog import (
    best_sellers,
    create_category,
    create_product,
    delete_category,
    delete_product,
    get_product,
    get_product_by_name,
    list_categories,
    list_products,
    out_of_stock,
    update_category,
    update_product,
)

__all__ = [
    "best_sellers",
    "create_category",
    "create_product",
    "delete_category",
    "delete_product",
    "get_product",
    "get_product_by_name",
    "list_categories",
    "list_products",
    "out_of_stock",
    "update_category",
    "update_product",
]
