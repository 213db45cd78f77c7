"""
Authentication-specific exceptions.
"""
from fastapi import status

from ..exceptions import AppException


class InvalidCredentialsException(AppException):
    """Exception raised when credentials are invalid."""
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "INVALID_CREDENTIALS"

    def __init__(self):
        super().__init__("Invalid credentials")


class UnauthorizedException(AppException):
    """Exception raised when a request carries no usable bearer token."""
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(detail)


class TokenExpiredException(UnauthorizedException):
    """Exception raised when token has expired."""
    code = "EXPIRED_TOKEN"

    def __init__(self):
        super().__init__("Token has expired")


class InvalidTokenException(UnauthorizedException):
    """Exception raised when token is invalid."""
    code = "INVALID_TOKEN"

    def __init__(self):
        super().__init__("Invalid token")


class ForbiddenException(AppException):
    """Exception raised when user doesn't have the required role."""
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"

    def __init__(self, detail: str = "Access denied: authorized users only"):
        super().__init__(detail)


class InvalidResetCodeException(AppException):
    """
    Exception raised when a reset code cannot be consumed.

    Unknown, already used, superseded and expired codes all map here.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_RESET_CODE"

    def __init__(self):
        super().__init__("Invalid or expired reset code")
