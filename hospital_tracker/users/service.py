"""
User Service - Business logic for hospital user accounts.

Every function takes the caller's hospital id and never touches users of
another hospital; a foreign id behaves like a missing one.
"""
import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.security import PasswordHasher
from ..core.uniqueness import UniqueFields, conflict_from_integrity_error, ensure_all_unique
from ..database import transaction
from ..exceptions import BusinessRuleException, ConflictException, UserNotFoundException
from .models import User
from .schemas import UserCreate, UserUpdate

# Set up logging
logger = logging.getLogger(__name__)

UNIQUE_FIELDS = ("national_id", "email", "phone")


def list_users(db: Session, hospital_id: int) -> List[User]:
    return db.query(User).filter(User.hospital_id == hospital_id).order_by(User.id).all()


def get_user(db: Session, user_id: int, hospital_id: int) -> User:
    """
    Get a user of the caller's hospital by ID.

    Raises:
        UserNotFoundException: If the user does not exist in this hospital
    """
    user = db.query(User).filter(User.id == user_id, User.hospital_id == hospital_id).first()
    if not user:
        raise UserNotFoundException(user_id)
    return user


def create_user(
    db: Session,
    hasher: PasswordHasher,
    payload: UserCreate,
    hospital_id: int,
    created_by_id: int,
) -> User:
    """
    Create a user in the caller's hospital.

    Args:
        db: Database session
        hasher: Password hasher
        payload: New user data
        hospital_id: Caller's hospital
        created_by_id: Caller's user id

    Returns:
        User: The created user

    Raises:
        DuplicateNationalIDException / DuplicateEmailException / DuplicatePhoneException:
            If a unique value is already used by any user
    """
    unique = UniqueFields(User, {field: getattr(payload, field) for field in UNIQUE_FIELDS})
    password_hash = hasher.hash(payload.password)

    try:
        with transaction(db, "create user"):
            ensure_all_unique(db, unique.model, unique.values)
            user = User(
                first_name=payload.first_name,
                last_name=payload.last_name,
                national_id=payload.national_id,
                email=payload.email,
                phone=payload.phone,
                password_hash=password_hash,
                user_type=payload.user_type,
                hospital_id=hospital_id,
                created_by_id=created_by_id,
            )
            db.add(user)
    except IntegrityError as e:
        conflict = conflict_from_integrity_error(db, e, unique)
        raise conflict or ConflictException("record", None, "user", "User already exists") from e

    db.refresh(user)
    logger.info(f"User {user.id} ({user.user_type.value}) created in hospital {hospital_id} by user {created_by_id}")
    return user


def update_user(db: Session, user_id: int, payload: UserUpdate, hospital_id: int) -> User:
    """
    Apply a partial update to a user of the caller's hospital.

    Only supplied fields change. Re-submitting a record's own national ID,
    email or phone is not a conflict.

    Raises:
        UserNotFoundException: If the user does not exist in this hospital
        DuplicateNationalIDException / DuplicateEmailException / DuplicatePhoneException:
            If a new value belongs to another user
    """
    changes = {field: value for field, value in payload.model_dump(exclude_unset=True).items() if value is not None}
    unique = UniqueFields(
        User,
        {field: changes[field] for field in UNIQUE_FIELDS if field in changes},
        exclude_id=user_id,
    )

    try:
        with transaction(db, "update user"):
            user = get_user(db, user_id, hospital_id)
            ensure_all_unique(db, unique.model, unique.values, exclude_id=user_id)
            for field, value in changes.items():
                setattr(user, field, value)
    except IntegrityError as e:
        conflict = conflict_from_integrity_error(db, e, unique)
        raise conflict or ConflictException("record", None, "user", "User already exists") from e

    db.refresh(user)
    logger.info(f"User {user_id} updated in hospital {hospital_id}: {sorted(changes)}")
    return user


def delete_user(db: Session, user_id: int, hospital_id: int, actor_id: int) -> None:
    """
    Delete a user of the caller's hospital.

    Raises:
        BusinessRuleException: If the caller tries to delete their own account
        UserNotFoundException: If the user does not exist in this hospital
    """
    if user_id == actor_id:
        raise BusinessRuleException("users cannot delete their own account", {"user_id": user_id})

    with transaction(db, "delete user"):
        user = get_user(db, user_id, hospital_id)
        db.delete(user)

    logger.info(f"User {user_id} deleted from hospital {hospital_id} by user {actor_id}")
