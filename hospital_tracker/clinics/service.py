"""
Clinic Service - Business logic for hospital clinics.
"""
import logging
from collections import defaultdict
from typing import List

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from ..core.business_rules import ensure_clinic_has_no_staff, ensure_clinic_in_hospital
from ..core.uniqueness import UniqueFields, conflict_from_integrity_error, ensure_all_unique
from ..database import transaction
from ..exceptions import ConflictException, NotFoundException
from ..staff.models import ProfessionGroup, Staff
from .models import Clinic, ClinicType
from .schemas import ClinicCreate, ClinicSummary, ClinicTypeResponse, StaffProfessionSummary

# Set up logging
logger = logging.getLogger(__name__)


def list_clinic_types(db: Session) -> List[ClinicType]:
    return db.query(ClinicType).order_by(ClinicType.name).all()


def create_clinic(db: Session, payload: ClinicCreate, hospital_id: int) -> Clinic:
    """
    Open a clinic of the given type in the caller's hospital.

    Raises:
        NotFoundException: If the clinic type does not exist
        ConflictException: If the hospital already has a clinic of this type
    """
    unique = UniqueFields(Clinic, {"clinic_type_id": payload.clinic_type_id}, scope={"hospital_id": hospital_id})

    try:
        with transaction(db, "create clinic"):
            clinic_type = db.query(ClinicType).filter(ClinicType.id == payload.clinic_type_id).first()
            if not clinic_type:
                raise NotFoundException("Clinic type", payload.clinic_type_id)
            ensure_all_unique(db, unique.model, unique.values, scope=unique.scope)

            clinic = Clinic(hospital_id=hospital_id, clinic_type_id=clinic_type.id)
            db.add(clinic)
    except IntegrityError as e:
        conflict = conflict_from_integrity_error(db, e, unique)
        raise conflict or ConflictException("record", None, "clinic", "Clinic already exists") from e

    logger.info(f"Clinic {clinic.id} ({clinic_type.name}) created in hospital {hospital_id}")
    db.refresh(clinic)
    return clinic


def list_clinic_summaries(db: Session, hospital_id: int) -> List[ClinicSummary]:
    """
    Summarize the caller's clinics with staff counts, overall and per profession group.
    """
    clinics = (
        db.query(Clinic)
        .options(joinedload(Clinic.clinic_type))
        .filter(Clinic.hospital_id == hospital_id)
        .order_by(Clinic.id)
        .all()
    )

    counts = (
        db.query(Staff.clinic_id, ProfessionGroup.name, func.count(Staff.id))
        .join(ProfessionGroup, Staff.profession_group_id == ProfessionGroup.id)
        .filter(Staff.hospital_id == hospital_id, Staff.clinic_id.isnot(None))
        .group_by(Staff.clinic_id, ProfessionGroup.id, ProfessionGroup.name)
        .order_by(Staff.clinic_id, ProfessionGroup.id)
        .all()
    )
    by_clinic = defaultdict(list)
    for clinic_id, group_name, count in counts:
        by_clinic[clinic_id].append(StaffProfessionSummary(profession_group=group_name, count=count))

    return [
        ClinicSummary(
            id=clinic.id,
            clinic_type=ClinicTypeResponse.model_validate(clinic.clinic_type),
            total_staff=sum(item.count for item in by_clinic[clinic.id]),
            staff_by_profession=by_clinic[clinic.id],
        )
        for clinic in clinics
    ]


def delete_clinic(db: Session, clinic_id: int, hospital_id: int) -> None:
    """
    Close a clinic of the caller's hospital.

    Raises:
        ClinicNotFoundException: If the clinic does not exist in this hospital
        BusinessRuleException: If staff are still assigned to it
    """
    with transaction(db, "delete clinic"):
        clinic = ensure_clinic_in_hospital(db, clinic_id, hospital_id)
        ensure_clinic_has_no_staff(db, clinic_id)
        db.delete(clinic)

    logger.info(f"Clinic {clinic_id} deleted from hospital {hospital_id}")
