# taskmanager/core/errors.py
from __future__ import annotations

from typing import Optional


class AppError(Exception):
    """Base for errors rendered as ``{"success": false, "error": ...}``."""

    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: Optional[str] = None, *, field: Optional[str] = None):
        self.message = message or self.default_message
        self.field = field
        super().__init__(self.message)

    def to_body(self) -> dict:
        body = {"success": False, "error": self.message}
        if self.field:
            body["field"] = self.field
        return body


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class InvalidOrExpiredTokenError(ValidationError):
    default_message = "Invalid or expired reset token"


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Not authorized"


class AuthorizationError(AppError):
    status_code = 403
    default_message = "Not authorized to access this resource"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Resource already exists"


class TransportError(AppError):
    status_code = 500
    default_message = "Downstream service failed"
