"""
PATH: users/serializers.py

User serializers.

- Input serializers only validate shape; business rules (uniqueness, role
  escalation, password policy) live in users.services.accounts.
- UserSerializer is the one safe output shape (never exposes the hash).
"""

from __future__ import annotations

from rest_framework import serializers

from permissions.roles import ROLE_CHOICES
from users.models import User


# ---------------- REGISTER ----------------
class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True, style={"input_type": "password"})
    name = serializers.CharField(max_length=25, required=False, allow_blank=True, default="")
    surname = serializers.CharField(max_length=25, required=False, allow_blank=True, default="")
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True, default="")
    role = serializers.ChoiceField(choices=ROLE_CHOICES, required=False)


# ---------------- LOGIN (INPUT ONLY) ----------------
class LoginSerializer(serializers.Serializer):
    """
    `identifier` is an email or a username.
    """

    identifier = serializers.CharField()
    password = serializers.CharField(write_only=True, style={"input_type": "password"})


class TokenPairSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


# ---------------- ACCOUNT MUTATIONS ----------------
class ChangePasswordSerializer(serializers.Serializer):
    username = serializers.CharField(required=False)
    old_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True)


class DeactivateSerializer(serializers.Serializer):
    username = serializers.CharField(required=False)
    password = serializers.CharField(write_only=True)


class ProfileUpdateSerializer(serializers.Serializer):
    username = serializers.CharField(required=False, help_text="Target user (defaults to the caller)")
    name = serializers.CharField(max_length=25, required=False, allow_blank=True)
    surname = serializers.CharField(max_length=25, required=False, allow_blank=True)
    new_username = serializers.CharField(max_length=150, required=False)
    email = serializers.EmailField(required=False)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=ROLE_CHOICES, required=False)


class ProfilePictureSerializer(serializers.Serializer):
    file = serializers.FileField()


# ---------------- USER OUTPUT ----------------
class UserSerializer(serializers.ModelSerializer):
    """
    Safe user representation for frontend consumption.
    """

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "surname",
            "username",
            "email",
            "phone",
            "role",
            "profile_picture",
            "status",
            "created_at",
        ]
        read_only_fields = fields
