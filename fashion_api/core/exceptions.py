"""
Custom exceptions for the fashion API.

Every exception carries an HTTP status, a stable error code and a
human-readable message. The handlers in main.py render them as
{"error": {"code": ..., "message": ...}}.
"""


class FashionAPIError(Exception):
    """Base exception for errors surfaced to API clients."""

    status_code = 500
    code = 'INTERNAL_SERVER_ERROR'

    def __init__(self, message: str, code: str | None = None, status_code: int | None = None):
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(FashionAPIError):
    """Raised when request data fails a business rule."""

    status_code = 400
    code = 'VALIDATION_ERROR'


class AuthenticationError(FashionAPIError):
    """Raised when the request carries no valid credentials."""

    status_code = 401
    code = 'UNAUTHORIZED'

    def __init__(self, message: str = 'Authentication required', code: str | None = None):
        super().__init__(message, code)


class PermissionDeniedError(FashionAPIError):
    """Raised when the authenticated user may not perform the action."""

    status_code = 403
    code = 'FORBIDDEN'


class NotFoundError(FashionAPIError):
    """Raised when a requested resource does not exist."""

    status_code = 404
    code = 'NOT_FOUND'

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} '{identifier}' not found")


class ConflictError(FashionAPIError):
    """Raised when a write would violate a uniqueness rule."""

    status_code = 409
    code = 'CONFLICT'


class InvalidImageError(FashionAPIError):
    """Raised when image validation fails."""

    status_code = 400
    code = 'INVALID_FILE_TYPE'

    def __init__(self, filename: str, reason: str, code: str | None = None):
        self.filename = filename
        self.reason = reason
        super().__init__(reason, code)


class ImageFetchError(FashionAPIError):
    """Raised when a remote image URL answers with a non-success status."""

    status_code = 400
    code = 'INVALID_URL'

    def __init__(self, url: str, status: int | None = None):
        self.url = url
        self.status = status
        super().__init__('Could not fetch image from URL')
