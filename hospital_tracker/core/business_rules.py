"""
Domain rules checked before staff, clinic and hospital writes.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ..clinics.models import Clinic
from ..exceptions import BusinessRuleException, ClinicNotFoundException, ValidationException
from ..hospitals.models import District
from ..staff.models import (
    ADMINISTRATIVE_GROUP_NAME,
    CHIEF_PHYSICIAN_TITLE_NAME,
    ProfessionGroup,
    Staff,
    Title,
)

# Set up logging
logger = logging.getLogger(__name__)


def ensure_title_in_profession_group(db: Session, title_id: int, profession_group_id: int) -> Title:
    """
    Check that a title belongs to the claimed profession group.

    Returns:
        Title: The title, with its profession group loaded

    Raises:
        BusinessRuleException: If no such title exists in that group
    """
    title = (
        db.query(Title)
        .options(joinedload(Title.profession_group))
        .filter(Title.id == title_id, Title.profession_group_id == profession_group_id)
        .first()
    )
    if not title:
        raise BusinessRuleException(
            "title does not belong to the specified profession group",
            {"title_id": title_id, "profession_group_id": profession_group_id},
        )
    return title


def ensure_clinic_in_hospital(db: Session, clinic_id: int, hospital_id: int) -> Clinic:
    """
    Check that a clinic exists inside the given hospital.

    Raises:
        ClinicNotFoundException: If the clinic is missing or belongs to another hospital
    """
    clinic = db.query(Clinic).filter(Clinic.id == clinic_id, Clinic.hospital_id == hospital_id).first()
    if not clinic:
        raise ClinicNotFoundException(clinic_id)
    return clinic


def count_chief_physicians(db: Session, hospital_id: int, exclude_staff_id: Optional[int] = None) -> int:
    """Count staff in the hospital holding the administrative staff / chief physician combination."""
    query = (
        db.query(Staff)
        .join(Title, Staff.title_id == Title.id)
        .join(ProfessionGroup, Staff.profession_group_id == ProfessionGroup.id)
        .filter(
            Staff.hospital_id == hospital_id,
            Title.name == CHIEF_PHYSICIAN_TITLE_NAME,
            ProfessionGroup.name == ADMINISTRATIVE_GROUP_NAME,
        )
    )
    if exclude_staff_id is not None:
        query = query.filter(Staff.id != exclude_staff_id)
    return query.count()


def ensure_single_chief_physician(db: Session, hospital_id: int, exclude_staff_id: Optional[int] = None) -> None:
    """
    Check that nobody else in the hospital is chief physician.

    The unique (hospital_id, chief_physician) constraint on the staff table
    closes the window between this check and the write.

    Raises:
        BusinessRuleException: If another staff member already holds the role
    """
    if count_chief_physicians(db, hospital_id, exclude_staff_id) > 0:
        logger.info(f"Chief physician already assigned in hospital {hospital_id}")
        raise BusinessRuleException(
            "hospital can only have one chief physician",
            {"hospital_id": hospital_id},
        )


def ensure_clinic_has_no_staff(db: Session, clinic_id: int) -> None:
    """
    Raises:
        BusinessRuleException: If any staff member is assigned to the clinic
    """
    staff_count = db.query(Staff).filter(Staff.clinic_id == clinic_id).count()
    if staff_count > 0:
        raise BusinessRuleException(
            "cannot delete clinic with assigned staff",
            {"clinic_id": clinic_id, "staff_count": staff_count},
        )


def ensure_district_in_province(db: Session, province_id: int, district_id: int) -> District:
    """
    Raises:
        ValidationException: If the district does not exist in the province
    """
    district = db.query(District).filter(District.id == district_id, District.province_id == province_id).first()
    if not district:
        raise ValidationException("province_district", "invalid province or district")
    return district
