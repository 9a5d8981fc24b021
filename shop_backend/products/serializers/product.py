# products/serializers/product.py

"""
PRODUCT SERIALIZERS

- ProductSerializer: read shape (category resolved to id + name).
- ProductInputSerializer: write shape. Category is referenced by NAME, which
  the catalog service resolves to an ACTIVE category.
"""

from rest_framework import serializers

from products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source="category.name", read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "stock",
            "sold_quantity",
            "category",
            "category_name",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProductInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    stock = serializers.IntegerField(min_value=0, required=False, default=50)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    # Positivity is a domain rule (InvalidPrice), checked by the service.
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    category = serializers.CharField(max_length=25, help_text="Category name")
