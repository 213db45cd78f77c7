"""
Staff Service - Business logic for hospital personnel.

Writes check, in order: national ID and phone uniqueness, the title against
its profession group, the clinic against the caller's hospital, and the
one-chief-physician-per-hospital rule.
"""
import logging
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from ..core.business_rules import (
    ensure_clinic_in_hospital,
    ensure_single_chief_physician,
    ensure_title_in_profession_group,
)
from ..core.cache import PROFESSION_GROUPS_KEY, ReferenceCache
from ..core.pagination import PageParams, PageResponse, paginate
from ..core.uniqueness import UniqueFields, conflict_from_integrity_error, ensure_all_unique
from ..database import transaction
from ..exceptions import AppException, BusinessRuleException, ConflictException, StaffNotFoundException
from .models import ProfessionGroup, Staff
from .schemas import ProfessionGroupResponse, StaffCreate, StaffFilters, StaffResponse, StaffUpdate

# Set up logging
logger = logging.getLogger(__name__)

UNIQUE_FIELDS = ("national_id", "phone")


def _contains(value: str) -> str:
    """LIKE pattern matching value literally anywhere in the column."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _staff_query(db: Session):
    return db.query(Staff).options(joinedload(Staff.title), joinedload(Staff.profession_group))


def _integrity_error(
    db: Session,
    error: IntegrityError,
    unique: UniqueFields,
    hospital_id: int,
    wants_chief: bool,
) -> AppException:
    """
    Name the rule a concurrent writer broke first.

    With national ID and phone free again, the only other unique constraint a
    staff write can hit is the per-hospital chief physician one.
    """
    conflict = conflict_from_integrity_error(db, error, unique)
    if conflict is not None:
        return conflict
    if wants_chief:
        return BusinessRuleException("hospital can only have one chief physician", {"hospital_id": hospital_id})
    return ConflictException("record", None, "staff", "Staff member already exists")


def get_staff(db: Session, staff_id: int, hospital_id: int) -> Staff:
    """
    Get a staff member of the caller's hospital by ID.

    Raises:
        StaffNotFoundException: If the staff member does not exist in this hospital
    """
    staff = _staff_query(db).filter(Staff.id == staff_id, Staff.hospital_id == hospital_id).first()
    if not staff:
        raise StaffNotFoundException(staff_id)
    return staff


def list_staff(db: Session, hospital_id: int, filters: StaffFilters, page_params: PageParams) -> PageResponse:
    """
    Get a paginated, filtered list of the caller's hospital staff, ordered by id.

    Args:
        db: Database session
        hospital_id: Caller's hospital
        filters: Search parameters
        page_params: Pagination parameters

    Returns:
        PageResponse: {data, total_count, page, limit, total_pages}
    """
    query = _staff_query(db).filter(Staff.hospital_id == hospital_id)

    if filters.first_name:
        query = query.filter(Staff.first_name.ilike(_contains(filters.first_name), escape="\\"))
    if filters.last_name:
        query = query.filter(Staff.last_name.ilike(_contains(filters.last_name), escape="\\"))
    if filters.national_id:
        query = query.filter(Staff.national_id.ilike(_contains(filters.national_id), escape="\\"))
    if filters.profession_group_id is not None:
        query = query.filter(Staff.profession_group_id == filters.profession_group_id)
    if filters.title_id is not None:
        query = query.filter(Staff.title_id == filters.title_id)
    if filters.clinic_id is not None:
        query = query.filter(Staff.clinic_id == filters.clinic_id)

    return paginate(query.order_by(Staff.id), page_params, StaffResponse)


def create_staff(db: Session, payload: StaffCreate, hospital_id: int) -> Staff:
    """
    Add a staff member to the caller's hospital.

    Raises:
        DuplicateNationalIDException / DuplicatePhoneException: If a unique value is taken
        BusinessRuleException: If the title is not in the profession group, or
            the hospital already has a chief physician
        ClinicNotFoundException: If the clinic is not in this hospital
    """
    unique = UniqueFields(Staff, {field: getattr(payload, field) for field in UNIQUE_FIELDS})
    wants_chief = False

    try:
        with transaction(db, "create staff"):
            ensure_all_unique(db, unique.model, unique.values)
            title = ensure_title_in_profession_group(db, payload.title_id, payload.profession_group_id)
            if payload.clinic_id is not None:
                ensure_clinic_in_hospital(db, payload.clinic_id, hospital_id)
            wants_chief = title.is_chief_physician
            if wants_chief:
                ensure_single_chief_physician(db, hospital_id)

            staff = Staff(
                first_name=payload.first_name,
                last_name=payload.last_name,
                national_id=payload.national_id,
                phone=payload.phone,
                profession_group_id=payload.profession_group_id,
                title_id=payload.title_id,
                hospital_id=hospital_id,
                clinic_id=payload.clinic_id,
                working_days=[day.value for day in payload.working_days],
                chief_physician=True if wants_chief else None,
            )
            db.add(staff)
    except IntegrityError as e:
        raise _integrity_error(db, e, unique, hospital_id, wants_chief) from e

    logger.info(f"Staff {staff.id} created in hospital {hospital_id}{' as chief physician' if wants_chief else ''}")
    db.refresh(staff)
    return staff


def update_staff(db: Session, staff_id: int, payload: StaffUpdate, hospital_id: int) -> Staff:
    """
    Apply a partial update to a staff member of the caller's hospital.

    When either the title or the profession group is supplied, the resulting
    pair is validated again and the chief physician rule re-checked without
    counting this staff member.

    Raises:
        StaffNotFoundException: If the staff member does not exist in this hospital
        DuplicateNationalIDException / DuplicatePhoneException: If a new value belongs to someone else
        BusinessRuleException: If the title/group pair is invalid or a second chief physician would result
        ClinicNotFoundException: If the new clinic is not in this hospital
    """
    supplied = payload.model_dump(exclude_unset=True, mode="json")
    changes: Dict[str, Any] = {field: value for field, value in supplied.items() if value is not None}
    if "clinic_id" in supplied:
        changes["clinic_id"] = supplied["clinic_id"]

    unique = UniqueFields(
        Staff,
        {field: changes[field] for field in UNIQUE_FIELDS if field in changes},
        exclude_id=staff_id,
    )
    wants_chief = False

    try:
        with transaction(db, "update staff"):
            staff = get_staff(db, staff_id, hospital_id)
            ensure_all_unique(db, unique.model, unique.values, exclude_id=staff_id)

            if "title_id" in changes or "profession_group_id" in changes:
                title = ensure_title_in_profession_group(
                    db,
                    changes.get("title_id", staff.title_id),
                    changes.get("profession_group_id", staff.profession_group_id),
                )
                wants_chief = title.is_chief_physician
                if wants_chief:
                    ensure_single_chief_physician(db, hospital_id, exclude_staff_id=staff_id)
                staff.chief_physician = True if wants_chief else None

            if changes.get("clinic_id") is not None:
                ensure_clinic_in_hospital(db, changes["clinic_id"], hospital_id)

            for field, value in changes.items():
                setattr(staff, field, value)
    except IntegrityError as e:
        raise _integrity_error(db, e, unique, hospital_id, wants_chief) from e

    logger.info(f"Staff {staff_id} updated in hospital {hospital_id}: {sorted(changes)}")
    db.refresh(staff)
    return staff


def delete_staff(db: Session, staff_id: int, hospital_id: int) -> None:
    """
    Raises:
        StaffNotFoundException: If the staff member does not exist in this hospital
    """
    with transaction(db, "delete staff"):
        staff = get_staff(db, staff_id, hospital_id)
        db.delete(staff)

    logger.info(f"Staff {staff_id} deleted from hospital {hospital_id}")


def list_profession_groups(db: Session, cache: ReferenceCache) -> List[Dict[str, Any]]:
    """Profession groups with their titles, read through the cache."""
    def load():
        groups = db.query(ProfessionGroup).options(selectinload(ProfessionGroup.titles)).order_by(ProfessionGroup.id).all()
        return [ProfessionGroupResponse.model_validate(group).model_dump() for group in groups]

    return cache.get_or_load(PROFESSION_GROUPS_KEY, load)
