# products/admin.py

from django.contrib import admin

from products.models import Category, Product


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("name",)
    ordering = ("name",)


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "price", "stock", "sold_quantity", "status")
    list_filter = ("status", "category")
    search_fields = ("name",)
    ordering = ("name",)
    # Stock counters move through checkout only.
    readonly_fields = ("sold_quantity", "created_at", "updated_at")
