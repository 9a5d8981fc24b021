"""
PATH: users/views/accounts.py

ACCOUNT ENDPOINTS (authenticated)

Every mutation targets `username` from the body, defaulting to the caller.
The policy (self, or admin over non-admin) is enforced in the service.
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import generics
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.views import APIView

from core.api import success_response
from permissions.roles import IsAdmin
from users.models import User
from users.serializers import (
    ChangePasswordSerializer,
    DeactivateSerializer,
    ProfilePictureSerializer,
    ProfileUpdateSerializer,
    UserSerializer,
)
from users.services import accounts


def _target_username(request, data) -> str:
    return (data.get("username") or request.user.username).strip()


# ---------------- LIST (ADMIN) ----------------
class UserListView(generics.ListAPIView):
    """
    Paginated (limit/offset) user list, filterable by role and status.
    """

    serializer_class = UserSerializer
    permission_classes = [IsAdmin]
    filterset_fields = ["role", "status"]
    queryset = User.objects.none()

    def get_queryset(self):
        return accounts.list_users(actor=self.request.user)

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        data = self.get_serializer(page, many=True).data
        return success_response({"count": self.paginator.count, "users": data})


# ---------------- PROFILE ----------------
class ProfileView(APIView):
    serializer_class = ProfileUpdateSerializer

    @extend_schema(request=ProfileUpdateSerializer, responses={200: UserSerializer})
    def patch(self, request):
        serializer = ProfileUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        target = _target_username(request, data)
        data.pop("username", None)
        if "new_username" in data:
            data["username"] = data.pop("new_username")

        user = accounts.update_profile(actor=request.user, target_username=target, fields=data)
        return success_response({"user": UserSerializer(user).data}, message="Profile updated")


# ---------------- PASSWORD ----------------
class ChangePasswordView(APIView):
    serializer_class = ChangePasswordSerializer

    @extend_schema(request=ChangePasswordSerializer, responses={200: dict})
    def post(self, request):
        serializer = ChangePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        accounts.change_password(
            actor=request.user,
            target_username=_target_username(request, data),
            old_password=data["old_password"],
            new_password=data["new_password"],
        )
        return success_response(message="Password updated")


# ---------------- DEACTIVATE ----------------
class DeactivateView(APIView):
    serializer_class = DeactivateSerializer

    @extend_schema(request=DeactivateSerializer, responses={200: UserSerializer})
    def post(self, request):
        serializer = DeactivateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user = accounts.deactivate_user(
            actor=request.user,
            target_username=_target_username(request, data),
            password=data["password"],
        )
        return success_response({"user": UserSerializer(user).data}, message="User deactivated")


# ---------------- PROFILE PICTURE ----------------
class ProfilePictureView(APIView):
    serializer_class = ProfilePictureSerializer
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(request=ProfilePictureSerializer, responses={200: UserSerializer})
    def put(self, request):
        serializer = ProfilePictureSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = accounts.update_profile_picture(
            actor=request.user,
            upload=serializer.validated_data["file"],
        )
        return success_response({"user": UserSerializer(user).data}, message="Profile picture updated")
