"""
Application exceptions rendered by the global error handlers
"""
from typing import Any, Dict, Optional


class APIError(Exception):
    """Base API error carrying an HTTP status and a machine-readable code"""

    status_code = 500
    error_code = "API_ERROR"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code


class BadRequestError(APIError):
    status_code = 400
    error_code = "BAD_REQUEST"


class AuthError(APIError):
    status_code = 401
    error_code = "AUTH_ERROR"


class ForbiddenError(APIError):
    status_code = 403
    error_code = "FORBIDDEN"


class NotFoundError(APIError):
    """Resource not found error"""
    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, resource: str, message: Optional[str] = None, **kwargs):
        super().__init__(message or f"{resource} not found", **kwargs)
        self.resource = resource


class ConflictError(APIError):
    status_code = 409
    error_code = "CONFLICT"


class DatabaseError(APIError):
    status_code = 500
    error_code = "DATABASE_ERROR"
