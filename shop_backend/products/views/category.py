# products/views/category.py

"""
CATEGORY API

Policy:
- Anyone can READ active categories (product forms + storefront need them).
- Writes require authentication; the catalog service enforces ADMIN.
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import SAFE_METHODS, AllowAny, IsAuthenticated
from rest_framework.views import APIView

from core.api import success_response
from products.serializers import CategoryInputSerializer, CategorySerializer
from products.services import catalog


class ReadAnyWriteAuthenticated:
    def get_permissions(self):
        if self.request.method in SAFE_METHODS:
            return [AllowAny()]
        return [IsAuthenticated()]


class CategoryListCreateView(ReadAnyWriteAuthenticated, APIView):
    serializer_class = CategorySerializer

    @extend_schema(responses={200: CategorySerializer(many=True)})
    def get(self, request):
        categories = catalog.list_categories()
        return success_response({"categories": CategorySerializer(categories, many=True).data})

    @extend_schema(request=CategoryInputSerializer, responses={201: CategorySerializer})
    def post(self, request):
        serializer = CategoryInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        category = catalog.create_category(
            name=serializer.validated_data["name"],
            description=serializer.validated_data.get("description", ""),
            actor=request.user,
        )
        return success_response(
            {"category": CategorySerializer(category).data},
            message="Category created",
            http_status=status.HTTP_201_CREATED,
        )


class CategoryDetailView(ReadAnyWriteAuthenticated, APIView):
    serializer_class = CategorySerializer

    @extend_schema(responses={200: CategorySerializer})
    def get(self, request, category_id):
        category = catalog.get_category(category_id)
        return success_response({"category": CategorySerializer(category).data})

    @extend_schema(request=CategoryInputSerializer, responses={200: CategorySerializer})
    def patch(self, request, category_id):
        serializer = CategoryInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        category = catalog.update_category(
            category_id=category_id,
            fields=serializer.validated_data,
            actor=request.user,
        )
        return success_response({"category": CategorySerializer(category).data}, message="Category updated")

    @extend_schema(responses={200: CategorySerializer})
    def delete(self, request, category_id):
        category = catalog.delete_category(category_id=category_id, actor=request.user)
        return success_response({"category": CategorySerializer(category).data}, message="Category deleted")
