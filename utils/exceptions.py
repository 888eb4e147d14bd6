"""
Typed application errors.

Services raise these; api/errors.py turns them into the uniform error envelope.
"""
from __future__ import annotations


class AppError(Exception):
    status = 500
    error = "INTERNAL_ERROR"
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, details: dict | None = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class BadRequestError(AppError):
    status = 400
    error = "BAD_REQUEST"
    default_message = "Bad request"


class UnauthorizedError(AppError):
    status = 401
    error = "UNAUTHORIZED"
    default_message = "Unauthorized"


class ForbiddenError(AppError):
    status = 403
    error = "FORBIDDEN"
    default_message = "Forbidden"


class NotFoundError(AppError):
    status = 404
    error = "NOT_FOUND"
    default_message = "Resource not found"


class ConflictError(AppError):
    status = 409
    error = "CONFLICT"
    default_message = "Conflict"


class EmailDeliveryError(Exception):
    """Raised by an email dispatcher when a message could not be handed off."""
