"""
Hospital Service - Registration and location lookups.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.business_rules import ensure_district_in_province
from ..core.cache import PROVINCES_KEY, ReferenceCache, districts_key
from ..core.security import PasswordHasher
from ..core.uniqueness import UniqueFields, conflict_from_integrity_error, ensure_all_unique
from ..database import transaction
from ..exceptions import ConflictException
from ..users.models import User, UserType
from .models import District, Hospital, Province
from .schemas import DistrictResponse, HospitalRegistration, ProvinceResponse

# Set up logging
logger = logging.getLogger(__name__)


def register_hospital(
    db: Session,
    hasher: PasswordHasher,
    payload: HospitalRegistration,
) -> Tuple[Hospital, User]:
    """
    Create a hospital and its authorized bootstrap user in one transaction.

    Checks run in order: hospital tax ID, email and phone; user national ID,
    email and phone; then the district against the province.

    Args:
        db: Database session
        hasher: Password hasher for the bootstrap user
        payload: Registration data

    Returns:
        Tuple of the new hospital and its first user

    Raises:
        DuplicateTaxIDException / DuplicateEmailException / DuplicatePhoneException /
        DuplicateNationalIDException: If a unique value is taken
        ValidationException: If the district is not in the province
    """
    hospital_fields = UniqueFields(
        Hospital, {"tax_id": payload.tax_id, "email": payload.email, "phone": payload.phone}
    )
    user_fields = UniqueFields(
        User, {"national_id": payload.national_id, "email": payload.user_email, "phone": payload.user_phone}
    )
    password_hash = hasher.hash(payload.password)

    try:
        with transaction(db, "register hospital"):
            ensure_all_unique(db, hospital_fields.model, hospital_fields.values)
            ensure_all_unique(db, user_fields.model, user_fields.values)
            ensure_district_in_province(db, payload.province_id, payload.district_id)

            hospital = Hospital(
                name=payload.hospital_name,
                tax_id=payload.tax_id,
                email=payload.email,
                phone=payload.phone,
                province_id=payload.province_id,
                district_id=payload.district_id,
                address=payload.address,
            )
            db.add(hospital)
            db.flush()

            user = User(
                first_name=payload.first_name,
                last_name=payload.last_name,
                national_id=payload.national_id,
                email=payload.user_email,
                phone=payload.user_phone,
                password_hash=password_hash,
                user_type=UserType.AUTHORIZED,
                hospital_id=hospital.id,
            )
            db.add(user)
    except IntegrityError as e:
        conflict = conflict_from_integrity_error(db, e, hospital_fields, user_fields)
        raise conflict or ConflictException("record", None, "hospital", "Hospital already exists") from e

    db.refresh(hospital)
    db.refresh(user)
    logger.info(f"Hospital {hospital.id} registered with bootstrap user {user.id}")
    return hospital, user


def list_provinces(db: Session, cache: ReferenceCache) -> List[Dict[str, Any]]:
    """Provinces ordered by name, read through the cache."""
    def load():
        provinces = db.query(Province).order_by(Province.name).all()
        return [ProvinceResponse.model_validate(p).model_dump() for p in provinces]

    return cache.get_or_load(PROVINCES_KEY, load)


def list_districts(db: Session, cache: ReferenceCache, province_id: Optional[int] = None) -> List[Dict[str, Any]]:
    """
    Districts ordered by name, optionally limited to one province.

    An unknown province simply yields an empty list.
    """
    def load():
        query = db.query(District)
        if province_id is not None:
            query = query.filter(District.province_id == province_id)
        return [DistrictResponse.model_validate(d).model_dump() for d in query.order_by(District.name).all()]

    return cache.get_or_load(districts_key(province_id), load)
