"""
Authentication Schemas - Login and password reset payloads.
"""
from pydantic import BaseModel, Field

from ..users.models import UserType
from ..users.schemas import UserResponse


class LoginRequest(BaseModel):
    """
    Login Schema - Used for authentication

    Fields:
    - identifier: The user's email address or phone number
    - password: The user's plain text password
    """
    identifier: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    token: str
    user_type: UserType
    user: UserResponse


class PasswordResetRequest(BaseModel):
    """
    Password Reset Request Schema

    Fields:
    - phone: Phone number of the account to reset
    """
    phone: str = Field(..., min_length=1)


class PasswordResetResponse(BaseModel):
    """
    The issued reset code; delivered synchronously since no SMS gateway is configured.
    """
    code: str


class PasswordResetConfirm(BaseModel):
    """
    Password Reset Confirmation Schema

    Fields:
    - phone: Phone number the code was issued for
    - code: Six digit reset code
    - new_password / confirm_password: Must match
    """
    phone: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)
    confirm_password: str = Field(..., min_length=6)
