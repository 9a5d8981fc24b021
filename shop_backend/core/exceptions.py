# core/exceptions.py

"""
SERVICE ERRORS

Centralized domain errors for every service module.

Each error carries:
- kind:        stable machine-readable name (echoed to API clients)
- status_code: HTTP status the API boundary maps it to

Services raise these; `core.api.exception_handler` is the single place that
turns them into the JSON envelope.
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base exception for all service failures."""

    kind = "Unexpected"
    status_code = 500
    default_message = "Unexpected error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(ServiceError):
    """Malformed or missing input."""

    kind = "Validation"
    status_code = 400
    default_message = "Invalid input"


class Conflict(ServiceError):
    """Unique-constraint violation or lost concurrent update."""

    kind = "Conflict"
    status_code = 409
    default_message = "Resource already exists"


class Forbidden(ServiceError):
    """Role or ownership rule violation."""

    kind = "Forbidden"
    status_code = 403
    default_message = "You do not have permission to perform this action"


class NotFound(ServiceError):
    """Referenced entity is absent."""

    kind = "NotFound"
    status_code = 404
    default_message = "Not found"


class AlreadyInactive(ServiceError):
    """Soft delete requested on an already inactive record."""

    kind = "AlreadyInactive"
    status_code = 400
    default_message = "Resource was already deleted"


class InsufficientStock(ServiceError):
    kind = "InsufficientStock"
    status_code = 400
    default_message = "Insufficient stock"


class InvalidPrice(ServiceError):
    kind = "InvalidPrice"
    status_code = 400
    default_message = "Price must be a positive number"


class BadCredential(ServiceError):
    kind = "BadCredential"
    status_code = 400
    default_message = "Password is incorrect"


class SamePassword(ServiceError):
    kind = "SamePassword"
    status_code = 400
    default_message = "New password cannot be the same as the current one"


class RoleEscalation(ServiceError):
    kind = "RoleEscalation"
    status_code = 400
    default_message = "Only CLIENT_ROLE can be self-assigned"


class Unexpected(ServiceError):
    """Lower-layer failure (storage unavailable, rendering crashed, ...)."""
