"""
Authentication routes: login and password reset.
"""
import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ..core.security import PasswordHasher
from ..database import get_db
from ..users.schemas import UserResponse
from .dependencies import get_auth_service, get_hasher
from .password_reset import confirm_password_reset, request_password_reset
from .schemas import (
    LoginRequest,
    LoginResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    PasswordResetResponse,
)
from .service import AuthService

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])


@router.post("/login", response_model=LoginResponse, summary="Log in with email or phone")
def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Authenticate with an email address or phone number and a password.

    Returns a bearer token carrying the user's id, hospital and user type.
    """
    user, token = auth_service.login(db, credentials.identifier, credentials.password)
    return LoginResponse(token=token, user_type=user.user_type, user=UserResponse.model_validate(user))


@router.post("/password-reset/request", response_model=PasswordResetResponse, summary="Request a reset code")
def request_reset(payload: PasswordResetRequest, db: Session = Depends(get_db)):
    """
    Issue a six digit reset code for the account with this phone number.

    The code is valid for 15 minutes and replaces any earlier unused code.
    """
    code = request_password_reset(db, payload.phone)
    return PasswordResetResponse(code=code)


@router.post(
    "/password-reset/confirm",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Set a new password with a reset code",
)
def confirm_reset(
    payload: PasswordResetConfirm,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_hasher),
):
    confirm_password_reset(
        db,
        hasher,
        phone=payload.phone,
        code=payload.code,
        new_password=payload.new_password,
        confirm_password=payload.confirm_password,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
