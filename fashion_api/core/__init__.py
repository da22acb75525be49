"""
Core module with authentication and exceptions.

Dependency providers live in fashion_api.core.dependencies and are
imported from there directly (they depend on clients and services, which
themselves depend on this package).
"""

from fashion_api.core.exceptions import (
    AuthenticationError,
    ConflictError,
    FashionAPIError,
    ImageFetchError,
    InvalidImageError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from fashion_api.core.security import AdminUserDep, CurrentUser, CurrentUserDep, create_access_token


__all__ = [
    # Exceptions
    'AuthenticationError',
    'ConflictError',
    'FashionAPIError',
    'ImageFetchError',
    'InvalidImageError',
    'NotFoundError',
    'PermissionDeniedError',
    'ValidationError',
    # Auth
    'AdminUserDep',
    'CurrentUser',
    'CurrentUserDep',
    'create_access_token',
]
