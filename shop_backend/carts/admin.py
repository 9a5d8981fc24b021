# carts/admin.py

from django.contrib import admin

from carts.models import Cart, CartItem


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0
    readonly_fields = ("product", "quantity", "created_at")
    can_delete = False


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "name", "status", "version", "updated_at")
    list_filter = ("status",)
    search_fields = ("user__username", "name")
    readonly_fields = ("version", "created_at", "updated_at")
    inlines = [CartItemInline]
