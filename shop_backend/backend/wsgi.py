# backend/wsgi.py
"""
WSGI entrypoint for the shop API.

Falls back to dev settings when DJANGO_SETTINGS_MODULE is unset; deployments
set backend.settings.prod explicitly.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings.dev")

application = get_wsgi_application()
