"""
Clinic Router - API endpoints for clinics and clinic types.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth.dependencies import Principal, get_current_principal, require_authorized
from ..database import get_db
from .schemas import (
    ClinicCreate,
    ClinicEnvelope,
    ClinicListResponse,
    ClinicResponse,
    ClinicTypeListResponse,
    ClinicTypeResponse,
)
from .service import create_clinic, delete_clinic, list_clinic_summaries, list_clinic_types

router = APIRouter(tags=["Clinics"])


@router.get("/clinic-types", response_model=ClinicTypeListResponse)
def get_clinic_types(db: Session = Depends(get_db)):
    clinic_types = list_clinic_types(db)
    return ClinicTypeListResponse(clinic_types=[ClinicTypeResponse.model_validate(t) for t in clinic_types])


@router.get("/clinics", response_model=ClinicListResponse)
def get_clinics(db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)):
    """
    List the caller's clinics with staff counts per profession group.
    """
    return ClinicListResponse(clinics=list_clinic_summaries(db, principal.hospital_id))


@router.post("/clinics", response_model=ClinicEnvelope, status_code=status.HTTP_201_CREATED)
def create_clinic_route(
    payload: ClinicCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_authorized),
):
    clinic = create_clinic(db, payload, principal.hospital_id)
    return ClinicEnvelope(clinic=ClinicResponse.model_validate(clinic), message="Clinic created successfully")


@router.delete("/clinics/{clinic_id}")
def delete_clinic_route(
    clinic_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_authorized),
):
    """
    Delete a clinic. Fails while staff are assigned to it.
    """
    delete_clinic(db, clinic_id, principal.hospital_id)
    return {"message": "Clinic deleted successfully"}
