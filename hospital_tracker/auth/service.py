"""
Auth Service - Login and token validation.
"""
import logging
from typing import Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..core.security import PasswordHasher, TokenClaims, TokenCodec
from ..users.models import User
from .exceptions import InvalidCredentialsException

# Set up logging
logger = logging.getLogger(__name__)


class AuthService:
    """
    Orchestrates credential lookup, password verification and token issuance.

    The hasher and codec are exposed so the other services hash passwords and
    mint tokens with the same configuration.
    """

    def __init__(self, token_codec: TokenCodec, hasher: PasswordHasher):
        self.token_codec = token_codec
        self.hasher = hasher

    def login(self, db: Session, identifier: str, password: str) -> Tuple[User, str]:
        """
        Authenticate a user by email or phone and issue an access token.

        Args:
            db: Database session
            identifier: Email address or phone number
            password: Plain text password

        Returns:
            Tuple of the authenticated user and the signed token

        Raises:
            InvalidCredentialsException: If the identifier is unknown or the password is wrong
        """
        user = (
            db.query(User)
            .filter(or_(User.email == identifier, User.phone == identifier))
            .order_by(User.id)
            .first()
        )

        if user is None:
            # Keep response time independent of whether the identifier exists
            self.hasher.dummy_verify()
            logger.warning(f"Login failed: unknown identifier {identifier}")
            raise InvalidCredentialsException()

        if not self.hasher.verify(password, user.password_hash):
            logger.warning(f"Login failed: wrong password for {identifier}")
            raise InvalidCredentialsException()

        token = self.token_codec.issue(user.id, user.hospital_id, user.user_type)
        logger.info(
            f"Login successful: user {user.id} hospital {user.hospital_id} role {user.user_type.value}"
        )
        return user, token

    def validate(self, token: str) -> TokenClaims:
        """
        Verify a bearer token.

        Raises:
            TokenExpiredException: If the token has expired
            InvalidTokenException: If the token is malformed or tampered with
        """
        return self.token_codec.parse(token)
