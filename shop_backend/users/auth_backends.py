"""
PATH: users/auth_backends.py

AUTH BACKEND: email OR username login

Rules:
- The identifier is an email when it contains "@", otherwise a username.
- Lookups are case-insensitive.
- Inactive accounts (status=INACTIVE) never authenticate.

Used by django.contrib.auth.authenticate() and therefore by the login service.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import BaseBackend

User = get_user_model()


class EmailOrUsernameBackend(BaseBackend):
    def authenticate(self, request, username=None, password=None, **kwargs):
        identifier = (username or kwargs.get("email") or kwargs.get("identifier") or "").strip()
        if not identifier or password is None:
            return None

        lookup = {"email__iexact": identifier} if "@" in identifier else {"username__iexact": identifier}

        try:
            user = User.objects.get(**lookup)
        except User.DoesNotExist:
            # Run the hasher anyway to keep timing flat for unknown identifiers.
            User().set_password(password)
            return None

        if not user.is_active:
            return None

        if user.check_password(password):
            return user

        return None

    def get_user(self, user_id):
        try:
            user = User.objects.get(pk=user_id)
        except User.DoesNotExist:
            return None
        return user if user.is_active else None
