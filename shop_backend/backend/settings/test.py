# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS
Used by `manage.py test` (auto-selected) and pytest-django.

- Fast password hashing (tests create many users)
- Throttling off (API tests fire many requests)
- Media + invoice documents go to a throwaway temp dir
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from .base import *  # noqa: F403
from .base import REST_FRAMEWORK

DEBUG = False

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_CLASSES": (),
}

MEDIA_ROOT = Path(tempfile.mkdtemp(prefix="shop-media-"))
INVOICE_DOCUMENT_DIR = MEDIA_ROOT / "invoices"
INVOICE_DOCUMENT_CLEANUP = True

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {"null": {"class": "logging.NullHandler"}},
    "root": {"handlers": ["null"], "level": "CRITICAL"},
}
