# carts/serializers.py

"""
CART SERIALIZERS

Output:
- lines resolve to the CURRENT product name/price/description/category.
- totals are computed server-side.

Input:
- lines reference products by name.
"""

from decimal import Decimal

from rest_framework import serializers

from carts.models import Cart, CartItem


class CartItemSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(source="product.id", read_only=True)
    name = serializers.CharField(source="product.name", read_only=True)
    price = serializers.DecimalField(source="product.price", max_digits=10, decimal_places=2, read_only=True)
    description = serializers.CharField(source="product.description", read_only=True)
    category = serializers.CharField(source="product.category.name", read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = CartItem
        fields = [
            "product_id",
            "name",
            "price",
            "description",
            "category",
            "quantity",
            "line_total",
        ]
        read_only_fields = fields


class CartSerializer(serializers.ModelSerializer):
    items = CartItemSerializer(many=True, read_only=True)
    total_amount = serializers.SerializerMethodField()

    class Meta:
        model = Cart
        fields = [
            "id",
            "user",
            "name",
            "status",
            "version",
            "items",
            "total_amount",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_total_amount(self, obj) -> str:
        total = sum((item.line_total for item in obj.items.all()), Decimal("0.00"))
        return f"{total:.2f}"


# ---------------- INPUT ----------------
class CartLineInputSerializer(serializers.Serializer):
    product = serializers.CharField(max_length=100, help_text="Product name")
    quantity = serializers.IntegerField(min_value=1)


class UpsertCartInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    products = CartLineInputSerializer(many=True, allow_empty=True)


class RemoveLineInputSerializer(serializers.Serializer):
    product = serializers.CharField(max_length=100)
    quantity = serializers.IntegerField(min_value=1, required=False)
