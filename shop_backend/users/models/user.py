"""
PATH: users/models/user.py

CUSTOM USER MODEL

Identity rules:
- username and email are both unique; login accepts either (see auth backend).
- role is ADMIN_ROLE or CLIENT_ROLE.
- Accounts are never hard-deleted: deactivation sets status=INACTIVE.
  `is_active` is derived from status, so Django auth + JWT reject inactive users.
- One profile picture per user (stored through Django's storage API).
"""

from __future__ import annotations

import uuid

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.exceptions import ValidationError
from django.db import models

from core.lifecycle import Lifecycle, LifecycleModel
from permissions.roles import ROLE_ADMIN, ROLE_CHOICES, ROLE_CLIENT


# ---------------- USER MANAGER ----------------
class UserManager(BaseUserManager):
    def create_user(self, email=None, password=None, **extra_fields):
        """
        Rules:
        - email is required.
        - If username is missing, it is derived from the email local-part
          (uniqueness ensured).
        """
        email = (email or extra_fields.pop("email", "") or "").strip()
        if not email:
            raise ValueError("An email address is required")

        email = self.normalize_email(email)

        username = (extra_fields.pop("username", "") or "").strip()
        if not username:
            base = (email.split("@")[0] or "user").strip().lower()
            candidate = base
            i = 1
            while self.model.objects.filter(username__iexact=candidate).exists():
                i += 1
                candidate = f"{base}{i}"
            username = candidate

        extra_fields.setdefault("role", ROLE_CLIENT)
        extra_fields.setdefault("status", Lifecycle.ACTIVE)

        user = self.model(email=email, username=username, **extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.full_clean(exclude=["password"])
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("Superuser must have an email")
        if not password:
            raise ValueError("Superuser must have a password")

        extra_fields.setdefault("role", ROLE_ADMIN)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True")

        return self.create_user(email=email, password=password, **extra_fields)


# ---------------- USER MODEL ----------------
class User(LifecycleModel, AbstractBaseUser, PermissionsMixin):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=25, blank=True)
    surname = models.CharField(max_length=25, blank=True)

    username = models.CharField(max_length=150, unique=True)
    email = models.EmailField(unique=True)

    phone = models.CharField(max_length=20, blank=True)

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_CLIENT)

    profile_picture = models.FileField(
        upload_to="profile-pictures/",
        blank=True,
        default="",
    )

    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        ordering = ["-created_at"]

    def clean(self):
        if self.email:
            self.email = self.__class__.objects.normalize_email(self.email).strip()
        self.username = (self.username or "").strip()

        if not self.username:
            raise ValidationError({"username": "username is required"})

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def __str__(self):
        return f"{self.username} ({self.role})"
