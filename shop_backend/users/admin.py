# users/admin.py

"""
USERS ADMIN REGISTRATION

`is_active` is derived from `status`, so the admin edits `status` directly.
"""

from __future__ import annotations

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from users.models import User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    ordering = ("email",)
    list_display = ("email", "username", "role", "status", "is_staff", "is_superuser")
    list_filter = ("role", "status", "is_staff", "is_superuser")
    search_fields = ("email", "username", "name", "surname")

    fieldsets = (
        (None, {"fields": ("email", "username", "password")}),
        ("Profile", {"fields": ("name", "surname", "phone", "role", "profile_picture")}),
        (
            "Access",
            {
                "fields": (
                    "status",
                    "is_staff",
                    "is_superuser",
                    "groups",
                    "user_permissions",
                )
            },
        ),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": (
                    "email",
                    "username",
                    "password1",
                    "password2",
                    "role",
                    "is_staff",
                ),
            },
        ),
    )
