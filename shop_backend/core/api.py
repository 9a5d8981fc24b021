# core/api.py

"""
API RESPONSE ENVELOPE + ERROR NORMALIZATION

Every endpoint answers with one shape:

    success: {"success": true,  "message"?: str, <entity or list>}
    failure: {"success": false, "error": <kind>, "message": str, "detail"?: ...}

Status mapping:
- 200/201 success
- 400 validation (and domain rule failures like InsufficientStock)
- 401 missing/invalid credentials (JWT layer)
- 403 permission
- 404 missing
- 409 conflict
- 500 unexpected (generic message + underlying message for diagnostics)
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from core.exceptions import ServiceError

logger = logging.getLogger(__name__)

_KIND_BY_STATUS = {
    400: "Validation",
    401: "NotAuthenticated",
    403: "Forbidden",
    404: "NotFound",
    405: "MethodNotAllowed",
    409: "Conflict",
    415: "Validation",
    429: "Throttled",
}


def success_response(payload: dict | None = None, *, message: str | None = None, http_status=status.HTTP_200_OK):
    body = {"success": True}
    if message:
        body["message"] = message
    if payload:
        body.update(payload)
    return Response(body, status=http_status)


def error_body(*, kind: str, message: str, detail=None) -> dict:
    body = {"success": False, "error": kind, "message": message}
    if detail is not None:
        body["detail"] = detail
    return body


def error_response(*, kind: str, message: str, http_status: int, detail=None):
    return Response(error_body(kind=kind, message=message, detail=detail), status=http_status)


def _first_message(data) -> str:
    """
    Pull a human-readable sentence out of DRF's nested error payloads.
    """
    if isinstance(data, dict):
        if "detail" in data:
            return _first_message(data["detail"])
        for key, value in data.items():
            msg = _first_message(value)
            if key == "non_field_errors":
                return msg
            return f"{key}: {msg}"
        return "Invalid input"
    if isinstance(data, (list, tuple)):
        return _first_message(data[0]) if data else "Invalid input"
    return str(data)


def exception_handler(exc, context):
    """
    DRF EXCEPTION_HANDLER.

    Single boundary for the whole API: nothing leaves a view as a raw
    traceback, and every failure carries its error kind.
    """
    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else "unknown"

    if isinstance(exc, ServiceError):
        if exc.status_code >= 500:
            logger.error("%s failed: %s", view_name, exc.message, exc_info=exc)
        else:
            logger.info("%s rejected (%s): %s", view_name, exc.kind, exc.message)
        return error_response(kind=exc.kind, message=exc.message, http_status=exc.status_code)

    if isinstance(exc, DjangoValidationError):
        messages = exc.message_dict if hasattr(exc, "error_dict") else exc.messages
        return error_response(
            kind="Validation",
            message=_first_message(messages),
            http_status=status.HTTP_400_BAD_REQUEST,
            detail=messages,
        )

    response = drf_exception_handler(exc, context)
    if response is not None:
        data = response.data
        response.data = error_body(
            kind=_KIND_BY_STATUS.get(response.status_code, "Validation"),
            message=_first_message(data),
            detail=data if not (isinstance(data, dict) and set(data) == {"detail"}) else None,
        )
        return response

    logger.exception("Unhandled error in %s", view_name)
    return error_response(
        kind="Unexpected",
        message="Unexpected error",
        http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(exc),
    )
