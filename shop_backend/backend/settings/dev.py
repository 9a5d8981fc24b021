# backend/settings/dev.py
"""
PATH: backend/settings/dev.py

LOCAL DEVELOPMENT SETTINGS

- Storefront dev servers (Vite, CRA) allowed through CORS/CSRF
- Receipts kept under media/invoices/ so they can be opened after checkout
- Service-layer loggers at DEBUG
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import LOGGING, env

DEBUG = True

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=["localhost", "127.0.0.1", "[::1]"])

SHOP_DEV_ORIGINS = ["http://localhost:5173", "http://localhost:3000"]

CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS", default=SHOP_DEV_ORIGINS)
CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=SHOP_DEV_ORIGINS)
CORS_ALLOW_CREDENTIALS = True

INVOICE_DOCUMENT_CLEANUP = env.bool("INVOICE_DOCUMENT_CLEANUP", default=False)

LOGGING = {
    **LOGGING,
    "loggers": {name: {**config, "level": "DEBUG"} for name, config in LOGGING["loggers"].items()},
}
