"""
Bearer token authentication.

Tokens are HS256 JWTs issued by the identity service. The `sub` claim is
the user id and `roles` an optional list of role names.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Annotated

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from fashion_api.config import Settings, get_settings
from fashion_api.core.exceptions import AuthenticationError, PermissionDeniedError


logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    id: str
    roles: list[str] = field(default_factory=list)

    @property
    def is_admin(self) -> bool:
        return 'admin' in self.roles


def create_access_token(
    user_id: str,
    roles: list[str] | None = None,
    settings: Settings | None = None,
    expires_minutes: int | None = None,
) -> str:
    """
    Issue a signed access token.

    Used by tests and internal tooling; end users obtain tokens from the
    identity service.
    """
    settings = settings or get_settings()
    now = datetime.now(UTC)
    payload = {
        'sub': user_id,
        'roles': roles or [],
        'iat': now,
        'exp': now + timedelta(minutes=expires_minutes or settings.jwt_expires_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings | None = None) -> CurrentUser:
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError('Token has expired', code='TOKEN_EXPIRED') from e
    except jwt.InvalidTokenError as e:
        logger.debug(f'Rejected bearer token: {e}')
        raise AuthenticationError('Invalid authentication token', code='TOKEN_INVALID') from e

    user_id = payload.get('sub')
    if not user_id:
        raise AuthenticationError('Invalid authentication token', code='TOKEN_INVALID')

    roles = payload.get('roles') or []
    if not isinstance(roles, list):
        roles = [str(roles)]
    return CurrentUser(id=str(user_id), roles=[str(r) for r in roles])


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CurrentUser:
    """Dependency resolving the authenticated user (401 when absent or invalid)."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    return decode_access_token(credentials.credentials, settings)


def get_admin_user(user: Annotated[CurrentUser, Depends(get_current_user)]) -> CurrentUser:
    """Dependency requiring the admin role (403 otherwise)."""
    if not user.is_admin:
        raise PermissionDeniedError('Admin access required')
    return user


CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]
AdminUserDep = Annotated[CurrentUser, Depends(get_admin_user)]
