# products/serializers/category.py

from rest_framework import serializers

from products.models import Category


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name", "description", "status", "created_at"]
        read_only_fields = fields


class CategoryInputSerializer(serializers.Serializer):
    """
    Create/update payload.

    Rules:
    - name is required on create, optional on update (partial=True)
    - uniqueness is checked by the catalog service, not here
    """

    name = serializers.CharField(max_length=25)
    description = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")

    def validate_name(self, value: str):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("name cannot be blank")
        return v
