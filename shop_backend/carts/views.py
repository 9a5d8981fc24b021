# carts/views.py

"""
CART API

All endpoints act on the caller's single ACTIVE cart.
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework.views import APIView

from carts.serializers import CartSerializer, RemoveLineInputSerializer, UpsertCartInputSerializer
from carts.services import cart as cart_service
from core.api import success_response
from permissions.roles import IsAdminOrClient


class CartView(APIView):
    permission_classes = [IsAdminOrClient]
    serializer_class = CartSerializer

    @extend_schema(responses={200: CartSerializer})
    def get(self, request):
        cart = cart_service.get_cart(user=request.user)
        return success_response({"cart": CartSerializer(cart).data})

    @extend_schema(request=UpsertCartInputSerializer, responses={200: CartSerializer})
    def put(self, request):
        serializer = UpsertCartInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        cart = cart_service.upsert_cart(
            user=request.user,
            name=data.get("name"),
            lines=data["products"],
        )
        return success_response({"cart": CartSerializer(cart).data}, message="Cart saved")

    post = put

    @extend_schema(responses={200: CartSerializer})
    def delete(self, request):
        cart = cart_service.clear_cart(user=request.user)
        return success_response({"cart": CartSerializer(cart).data}, message="Cart cleared")


class RemoveLineView(APIView):
    permission_classes = [IsAdminOrClient]
    serializer_class = RemoveLineInputSerializer

    @extend_schema(request=RemoveLineInputSerializer, responses={200: CartSerializer})
    def post(self, request):
        serializer = RemoveLineInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = cart_service.remove_line(
            user=request.user,
            product_name=serializer.validated_data["product"],
            quantity=serializer.validated_data.get("quantity"),
        )
        return success_response({"cart": CartSerializer(cart).data}, message="Cart updated")
