# invoices/admin.py

from django.contrib import admin

from invoices.models import Invoice, InvoiceItem


class InvoiceItemInline(admin.TabularInline):
    model = InvoiceItem
    extra = 0
    can_delete = False
    readonly_fields = ("product", "product_name", "unit_price", "quantity", "subtotal")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "total_amount", "document_status", "status", "created_at")
    list_filter = ("document_status", "status")
    search_fields = ("user__username", "user__email")
    readonly_fields = ("user", "cart", "total_amount", "document_status", "created_at", "updated_at")
    inlines = [InvoiceItemInline]
