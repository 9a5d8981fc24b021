"""
PATH: users/views/auth.py

PUBLIC AUTH ENDPOINTS

- register: open to anonymous callers (CLIENT_ROLE only); an authenticated
  admin may register other roles.
- login: email OR username + password -> JWT pair.
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from core.api import success_response
from users.serializers import LoginSerializer, RegisterSerializer, TokenPairSerializer, UserSerializer
from users.services.accounts import authenticate_user, issue_tokens, register_user


class RegisterView(APIView):
    permission_classes = [AllowAny]
    serializer_class = RegisterSerializer

    @extend_schema(
        request=RegisterSerializer,
        responses={201: UserSerializer},
        description="Register a new user account",
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        actor = request.user if request.user and request.user.is_authenticated else None

        user = register_user(
            email=data["email"],
            username=data["username"],
            password=data["password"],
            name=data.get("name", ""),
            surname=data.get("surname", ""),
            phone=data.get("phone", ""),
            role=data.get("role"),
            actor=actor,
        )

        return success_response(
            {"user": UserSerializer(user).data},
            message="User registered successfully",
            http_status=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    permission_classes = [AllowAny]
    serializer_class = LoginSerializer

    @extend_schema(
        request=LoginSerializer,
        responses={200: TokenPairSerializer},
        description="Authenticate with email or username and receive a JWT pair",
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = authenticate_user(
            identifier=serializer.validated_data["identifier"],
            password=serializer.validated_data["password"],
            request=request,
        )

        return success_response(
            {
                "user": UserSerializer(user).data,
                "tokens": issue_tokens(user),
            },
            message="Login successful",
        )
