# invoices/serializers.py

from rest_framework import serializers

from carts.serializers import CartLineInputSerializer
from invoices.models import Invoice, InvoiceItem


class InvoiceItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = InvoiceItem
        fields = ["product", "product_name", "unit_price", "quantity", "subtotal"]
        read_only_fields = fields


class InvoiceSerializer(serializers.ModelSerializer):
    """
    Invoice with its snapshot lines.
    """

    username = serializers.CharField(source="user.username", read_only=True)
    items = InvoiceItemSerializer(many=True, read_only=True)

    class Meta:
        model = Invoice
        fields = [
            "id",
            "user",
            "username",
            "cart",
            "total_amount",
            "status",
            "document_status",
            "items",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class InvoiceLineSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    name = serializers.CharField()
    description = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    quantity = serializers.IntegerField()
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)


class UpdateInvoiceInputSerializer(serializers.Serializer):
    products = CartLineInputSerializer(many=True, allow_empty=False)
