# core/tests/test_settings.py

import importlib
import os
from unittest import mock

from django.test import SimpleTestCase

DEV_ENV_KEYS = ("ALLOWED_HOSTS", "CORS_ALLOWED_ORIGINS", "CSRF_TRUSTED_ORIGINS", "INVOICE_DOCUMENT_CLEANUP", "SENTRY_DSN")


class DevSettingsTests(SimpleTestCase):
    """
    GUARANTEES:
    - Dev settings allow the storefront dev servers and keep receipts on disk
    - Every project logger runs at DEBUG in dev
    """

    def _load_dev(self):
        with mock.patch.dict(os.environ):
            for key in DEV_ENV_KEYS:
                os.environ.pop(key, None)
            return importlib.reload(importlib.import_module("backend.settings.dev"))

    def test_storefront_origins_and_receipts(self):
        dev = self._load_dev()

        self.assertTrue(dev.DEBUG)
        self.assertIn("http://localhost:5173", dev.CORS_ALLOWED_ORIGINS)
        self.assertIn("http://localhost:3000", dev.CSRF_TRUSTED_ORIGINS)
        self.assertFalse(dev.INVOICE_DOCUMENT_CLEANUP)

    def test_project_loggers_at_debug(self):
        dev = self._load_dev()

        self.assertEqual({cfg["level"] for cfg in dev.LOGGING["loggers"].values()}, {"DEBUG"})
        self.assertIn("invoices", dev.LOGGING["loggers"])
