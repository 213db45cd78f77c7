"""
FastAPI dependencies for authentication and authorization.

Requests are authenticated from the bearer token alone; the principal it
yields is the only source of the caller's hospital for tenant scoping.
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..core.cache import ReferenceCache
from ..core.security import PasswordHasher
from ..users.models import UserType
from .exceptions import ForbiddenException, UnauthorizedException
from .service import AuthService

# Errors are raised as UnauthorizedException so they share the JSON envelope
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, as bound to the request."""
    user_id: int
    hospital_id: int
    role: UserType

    @property
    def is_authorized(self) -> bool:
        return self.role == UserType.AUTHORIZED


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.auth_service.hasher


def get_cache(request: Request) -> ReferenceCache:
    return request.app.state.cache


def get_current_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> Principal:
    """
    Authenticate the request from its Authorization header.

    Returns:
        Principal: The caller; also bound to request.state.principal

    Raises:
        UnauthorizedException: If the header is missing or not a bearer token
        TokenExpiredException: If the token has expired
        InvalidTokenException: If the token fails verification
    """
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise UnauthorizedException("Authorization header with a bearer token is required")

    claims = auth_service.validate(credentials.credentials)
    principal = Principal(user_id=claims.user_id, hospital_id=claims.hospital_id, role=claims.role)
    request.state.principal = principal
    return principal


def require_authorized(principal: Principal = Depends(get_current_principal)) -> Principal:
    """
    Allow only authorized (privileged) users through.

    Raises:
        ForbiddenException: If the caller is an employee
    """
    if not principal.is_authorized:
        raise ForbiddenException()
    return principal
