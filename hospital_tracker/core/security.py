"""
Core security utilities for authentication and password handling.

PasswordHasher wraps passlib's bcrypt context and TokenCodec wraps python-jose.
Both are built once from Settings at startup and shared by the services.
"""
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from ..auth.exceptions import InvalidTokenException, TokenExpiredException
from ..exceptions import InternalException, ValidationException
from ..users.models import UserType

# Set up logging
logger = logging.getLogger(__name__)

RESET_CODE_DIGITS = 6

# bcrypt ignores everything past the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """
    One-way adaptive password hashing using bcrypt.

    Two hashes of the same password differ because bcrypt salts every hash.
    """

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            str: Hashed password

        Raises:
            ValidationException: If the password is longer than bcrypt can use
            InternalException: If the hashing primitive fails
        """
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationException("password", f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        try:
            return self._context.hash(password)
        except Exception as e:
            logger.error(f"Password hashing failed: {type(e).__name__}")
            raise InternalException("failed to hash password", e) from e

    def verify(self, password: str, hashed_password: str) -> bool:
        """
        Verify a password against a hash.

        Args:
            password: Plain text password
            hashed_password: Hashed password to compare against

        Returns:
            bool: True if password matches hash, False on mismatch

        Raises:
            InternalException: If the stored hash is malformed
        """
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            return False
        try:
            return self._context.verify(password, hashed_password)
        except (ValueError, TypeError) as e:
            raise InternalException("stored password hash is malformed", e) from e

    def dummy_verify(self) -> None:
        """Spend the time of one verification, used when no user matched."""
        self._context.dummy_verify()


@dataclass(frozen=True)
class TokenClaims:
    """Claims carried by an access token; rebuilt from the token on every request."""
    user_id: int
    hospital_id: int
    role: UserType
    issued_at: datetime
    expires_at: datetime


class TokenCodec:
    """
    Signs and verifies HMAC JWT access tokens.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", default_ttl: timedelta = timedelta(hours=24)):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        if default_ttl <= timedelta(0):
            raise ValueError("token lifetime must be positive")
        self._secret = secret
        self._algorithm = algorithm
        self.default_ttl = default_ttl

    def issue(
        self,
        user_id: int,
        hospital_id: int,
        role: UserType,
        ttl: Optional[timedelta] = None,
        now: Optional[datetime] = None,
    ) -> str:
        """
        Create a signed access token.

        Args:
            user_id: Subject user id
            hospital_id: Tenant the subject belongs to
            role: Subject's user type
            ttl: Token lifetime (defaults to the configured lifetime)
            now: Issue time (defaults to the current time)

        Returns:
            str: Encoded JWT token
        """
        ttl = ttl if ttl is not None else self.default_ttl
        if ttl <= timedelta(0):
            raise ValueError("token lifetime must be positive")

        # JWT timestamps have second resolution
        issued_at = (now or datetime.now(timezone.utc)).replace(microsecond=0)
        to_encode: Dict[str, Any] = {
            "user_id": user_id,
            "hospital_id": hospital_id,
            "user_type": UserType(role).value,
            "iat": issued_at,
            "exp": issued_at + ttl,
        }
        return jwt.encode(to_encode, self._secret, algorithm=self._algorithm)

    def parse(self, token: str) -> TokenClaims:
        """
        Verify and decode a JWT token.

        Args:
            token: JWT token string

        Returns:
            TokenClaims: Decoded claims

        Raises:
            TokenExpiredException: If the expiry has elapsed
            InvalidTokenException: On any signature, structure or decoding failure
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError:
            raise TokenExpiredException()
        except JWTError:
            raise InvalidTokenException()

        try:
            return TokenClaims(
                user_id=int(payload["user_id"]),
                hospital_id=int(payload["hospital_id"]),
                role=UserType(payload["user_type"]),
                issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError):
            raise InvalidTokenException()


def generate_reset_code() -> str:
    """
    Generate a six digit password reset code from the OS random source.

    Returns:
        str: Code with leading zeros, e.g. "004217"

    Raises:
        InternalException: If the random source is unavailable
    """
    try:
        number = secrets.randbelow(10 ** RESET_CODE_DIGITS)
    except (OSError, NotImplementedError) as e:
        logger.critical("Secure random source unavailable, cannot issue reset code")
        raise InternalException("secure random source unavailable", e) from e
    return f"{number:0{RESET_CODE_DIGITS}d}"
