"""
Password reset with one-time phone codes.

A ticket moves from issued to exactly one of consumed, expired or superseded:
- request_password_reset deletes the phone's unused tickets and issues a new one
- confirm_password_reset consumes a live ticket and replaces the password in
  the same transaction
- expiry is checked against the wall clock when a code is presented
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ..core.security import PasswordHasher, generate_reset_code
from ..database import transaction, utcnow
from ..exceptions import UserNotFoundException, ValidationException
from ..users.models import User
from .exceptions import InvalidResetCodeException
from .models import PasswordReset

# Set up logging
logger = logging.getLogger(__name__)

RESET_CODE_TTL = timedelta(minutes=15)


def request_password_reset(db: Session, phone: str, now: Optional[datetime] = None) -> str:
    """
    Issue a reset code for the account owning a phone number.

    Any earlier unused code for the same phone stops working.

    Args:
        db: Database session
        phone: Phone number of the account
        now: Issue time (defaults to the current time)

    Returns:
        str: The six digit code, for out-of-band delivery

    Raises:
        UserNotFoundException: If no user has this phone number
        InternalException: If no secure code can be generated
    """
    now = now or utcnow()
    code = generate_reset_code()

    with transaction(db, "request password reset"):
        user = db.query(User).filter(User.phone == phone).first()
        if not user:
            logger.warning("Password reset requested for an unknown phone number")
            raise UserNotFoundException()

        superseded = (
            db.query(PasswordReset)
            .filter(PasswordReset.phone == phone, PasswordReset.used.is_(False))
            .delete(synchronize_session="fetch")
        )
        db.add(PasswordReset(phone=phone, code=code, expires_at=now + RESET_CODE_TTL, used=False))

    logger.info(f"Password reset code issued for user {user.id} ({superseded} earlier code(s) superseded)")
    return code


def _consume_ticket(db: Session, ticket_id: int) -> None:
    """
    Flip a ticket to used, only if it is still unused.

    Raises:
        InvalidResetCodeException: If a concurrent confirmation consumed it first
    """
    updated = (
        db.query(PasswordReset)
        .filter(PasswordReset.id == ticket_id, PasswordReset.used.is_(False))
        .update({PasswordReset.used: True}, synchronize_session="fetch")
    )
    if updated != 1:
        raise InvalidResetCodeException()


def confirm_password_reset(
    db: Session,
    hasher: PasswordHasher,
    phone: str,
    code: str,
    new_password: str,
    confirm_password: str,
    now: Optional[datetime] = None,
) -> None:
    """
    Replace a user's password using a reset code.

    The password change and the ticket consumption commit together or not at all.

    Args:
        db: Database session
        hasher: Password hasher
        phone: Phone number the code was issued for
        code: The reset code
        new_password / confirm_password: The new password, twice
        now: Check time (defaults to the current time)

    Raises:
        ValidationException: If the passwords differ
        InvalidResetCodeException: If the code is unknown, used, superseded or expired
    """
    if new_password != confirm_password:
        raise ValidationException("confirm_password", "passwords do not match")

    now = now or utcnow()
    password_hash = hasher.hash(new_password)

    with transaction(db, "confirm password reset"):
        ticket = (
            db.query(PasswordReset)
            .filter(
                PasswordReset.phone == phone,
                PasswordReset.code == code,
                PasswordReset.used.is_(False),
                PasswordReset.expires_at > now,
            )
            .with_for_update()
            .first()
        )
        if not ticket:
            logger.warning("Password reset rejected: invalid or expired code")
            raise InvalidResetCodeException()

        user = db.query(User).filter(User.phone == phone).with_for_update().first()
        if not user:
            logger.warning(f"Password reset rejected: ticket {ticket.id} has no matching user")
            raise InvalidResetCodeException()

        user.password_hash = password_hash
        db.flush()
        _consume_ticket(db, ticket.id)

    logger.info(f"Password reset completed for user {user.id}")
