# backend/urls.py
"""
PROJECT URLS

All API routes live under /api/:

- auth/       register, login (JWT pair), JWT refresh
- users/      profile, password, deactivation, picture, admin list
- catalog/    categories + products
- cart/       the caller's active cart
- invoices/   checkout, invoice edits, lines, PDF receipt

Operational:
- /api/health/ (AllowAny) checks DB connectivity.
- Django admin path is configurable via ADMIN_PATH.
"""

from __future__ import annotations

from django.conf import settings
from django.contrib import admin
from django.db import connections
from django.db.utils import OperationalError
from django.urls import include, path
from django.views.generic import RedirectView
from drf_spectacular.utils import extend_schema
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenRefreshView

from core.api import success_response
from users.urls import auth_urlpatterns


# ------------------ API ROOT (PUBLIC) ------------------
@extend_schema(responses={200: dict})
@api_view(["GET"])
@permission_classes([AllowAny])
def api_root(request):
    return success_response(
        {
            "auth": {
                "register": "/api/auth/register/",
                "login": "/api/auth/login/",
                "jwt_refresh": "/api/auth/jwt/refresh/",
            },
            "docs": {
                "swagger": "/api/docs/",
                "schema": "/api/schema/",
            },
            "modules": {
                "users": "/api/users/",
                "catalog": "/api/catalog/",
                "cart": "/api/cart/",
                "invoices": "/api/invoices/",
            },
        },
        message="Shop Backend API is running",
    )


# ------------------ HEALTH CHECK (PUBLIC) ------------------
@extend_schema(responses={200: dict, 503: dict})
@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    try:
        with connections["default"].cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except OperationalError as e:
        return Response({"status": "degraded", "db": "down", "error": str(e)}, status=503)
    return Response({"status": "ok", "db": "ok"})


ADMIN_PATH = getattr(settings, "ADMIN_PATH", "admin/")
if not ADMIN_PATH.endswith("/"):
    ADMIN_PATH = f"{ADMIN_PATH}/"


# ------------------ API ROUTES (ALL UNDER /api/) ------------------
api_urlpatterns = [
    path("", api_root, name="api-root"),
    path("health/", health_check, name="health-check"),
    # OpenAPI / Swagger
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    # Auth
    path("auth/", include((auth_urlpatterns, "auth"))),
    path("auth/jwt/refresh/", TokenRefreshView.as_view(), name="jwt-refresh"),
    # Domain modules
    path("users/", include("users.urls")),
    path("catalog/", include("products.urls")),
    path("cart/", include("carts.urls")),
    path("invoices/", include("invoices.urls")),
]

urlpatterns = [
    path(ADMIN_PATH, admin.site.urls),
    path("", RedirectView.as_view(url="/api/docs/", permanent=False), name="root"),
    path("api/", include(api_urlpatterns)),
]
