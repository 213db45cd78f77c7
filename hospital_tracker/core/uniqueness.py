"""
Uniqueness checks for user, staff, hospital and clinic fields.

The checks run inside the caller's open transaction as a fast path with a
precise error. The unique constraints on the tables remain the final arbiter:
when a concurrent writer wins the race, the resulting IntegrityError is mapped
back to the same error kind by conflict_from_integrity_error.
"""
import logging
from typing import Any, Mapping, NamedTuple, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..exceptions import (
    ConflictException,
    DuplicateEmailException,
    DuplicateNationalIDException,
    DuplicatePhoneException,
    DuplicateTaxIDException,
)

# Set up logging
logger = logging.getLogger(__name__)

_DUPLICATE_ERRORS = {
    "email": DuplicateEmailException,
    "phone": DuplicatePhoneException,
    "national_id": DuplicateNationalIDException,
    "tax_id": DuplicateTaxIDException,
}


def conflict_for(field: str, value: Any, resource: str) -> ConflictException:
    """
    Build the conflict error for a field.

    Known identity fields get their dedicated Duplicate* error, anything else
    the generic ConflictException.
    """
    error_class = _DUPLICATE_ERRORS.get(field)
    if error_class is not None:
        return error_class(value, resource=resource)
    return ConflictException(field, value, resource)


def ensure_unique(
    db: Session,
    model,
    field: str,
    value: Any,
    exclude_id: Optional[int] = None,
    scope: Optional[Mapping[str, Any]] = None,
) -> None:
    """
    Fail if another record of the model already holds this value.

    Args:
        db: Database session
        model: SQLAlchemy model class
        field: Column name to check
        value: Candidate value
        exclude_id: Id of the record being updated, ignored by the check
        scope: Extra column filters limiting the uniqueness scope (e.g. hospital_id)

    Raises:
        ConflictException: (or a Duplicate* subclass) if the value is taken
    """
    query = db.query(model.id).filter(getattr(model, field) == value)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    for column, scoped_value in (scope or {}).items():
        query = query.filter(getattr(model, column) == scoped_value)

    if db.query(query.exists()).scalar():
        resource = model.__tablename__.rstrip("s")
        logger.info(f"Uniqueness check failed: {resource}.{field} already taken")
        raise conflict_for(field, value, resource)


def ensure_all_unique(
    db: Session,
    model,
    values: Mapping[str, Any],
    exclude_id: Optional[int] = None,
    scope: Optional[Mapping[str, Any]] = None,
) -> None:
    """
    Run ensure_unique for every (field, value) pair, in order, skipping None values.
    """
    for field, value in values.items():
        if value is not None:
            ensure_unique(db, model, field, value, exclude_id=exclude_id, scope=scope)


class UniqueFields(NamedTuple):
    """The unique values one write touches on one model."""
    model: Any
    values: Mapping[str, Any]
    exclude_id: Optional[int] = None
    scope: Optional[Mapping[str, Any]] = None


def conflict_from_integrity_error(
    db: Session,
    error: IntegrityError,
    *checks: UniqueFields,
) -> Optional[ConflictException]:
    """
    Translate a unique constraint violation into the matching conflict error.

    The transaction has already been rolled back, so re-running the checks sees
    the competing committed row and names the offending field.

    Returns:
        ConflictException: The error to raise, or None if no checked field is taken
    """
    logger.warning(f"Unique constraint violated: {error.orig}")
    try:
        for check in checks:
            ensure_all_unique(db, check.model, check.values, exclude_id=check.exclude_id, scope=check.scope)
    except ConflictException as conflict:
        return conflict
    finally:
        db.rollback()
    return None
