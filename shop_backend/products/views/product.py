# products/views/product.py

"""
PRODUCT API

Purpose:
- Admin product management (create, partial update, soft delete).
- Public catalog reads: list (optionally by category), detail, by name,
  best sellers, out of stock.

Reads only ever return ACTIVE products.
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.views import APIView

from core.api import success_response
from core.exceptions import ValidationFailed
from products.serializers import ProductInputSerializer, ProductSerializer
from products.services import catalog
from products.views.category import ReadAnyWriteAuthenticated


def _products(qs):
    return {"products": ProductSerializer(qs, many=True).data}


class ProductListCreateView(ReadAnyWriteAuthenticated, APIView):
    serializer_class = ProductSerializer

    @extend_schema(
        parameters=[OpenApiParameter("category", str, description="Category name")],
        responses={200: ProductSerializer(many=True)},
    )
    def get(self, request):
        category = (request.query_params.get("category") or "").strip() or None
        return success_response(_products(catalog.list_products(category_name=category)))

    @extend_schema(request=ProductInputSerializer, responses={201: ProductSerializer})
    def post(self, request):
        serializer = ProductInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        product = catalog.create_product(
            name=data["name"],
            stock=data.get("stock", 50),
            description=data.get("description", ""),
            price=data["price"],
            category_name=data["category"],
            actor=request.user,
        )
        return success_response(
            {"product": ProductSerializer(product).data},
            message="Product created",
            http_status=status.HTTP_201_CREATED,
        )


class ProductDetailView(ReadAnyWriteAuthenticated, APIView):
    serializer_class = ProductSerializer

    @extend_schema(responses={200: ProductSerializer})
    def get(self, request, product_id):
        return success_response({"product": ProductSerializer(catalog.get_product(product_id)).data})

    @extend_schema(request=ProductInputSerializer, responses={200: ProductSerializer})
    def patch(self, request, product_id):
        serializer = ProductInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        fields = dict(serializer.validated_data)
        category_name = fields.pop("category", None)

        product = catalog.update_product(
            product_id=product_id,
            fields=fields,
            category_name=category_name,
            actor=request.user,
        )
        return success_response({"product": ProductSerializer(product).data}, message="Product updated")

    @extend_schema(responses={200: ProductSerializer})
    def delete(self, request, product_id):
        product = catalog.delete_product(product_id=product_id, actor=request.user)
        return success_response({"product": ProductSerializer(product).data}, message="Product deleted")


class BestSellersView(ReadAnyWriteAuthenticated, APIView):
    serializer_class = ProductSerializer

    @extend_schema(responses={200: ProductSerializer(many=True)})
    def get(self, request):
        return success_response(_products(catalog.best_sellers()))


class OutOfStockView(ReadAnyWriteAuthenticated, APIView):
    serializer_class = ProductSerializer

    @extend_schema(responses={200: ProductSerializer(many=True)})
    def get(self, request):
        return success_response(_products(catalog.out_of_stock()))


class ProductByNameView(ReadAnyWriteAuthenticated, APIView):
    serializer_class = ProductSerializer

    @extend_schema(
        parameters=[OpenApiParameter("name", str, required=True)],
        responses={200: ProductSerializer},
    )
    def get(self, request):
        name = (request.query_params.get("name") or "").strip()
        if not name:
            raise ValidationFailed("name query parameter is required")
        return success_response({"product": ProductSerializer(catalog.get_product_by_name(name)).data})
