"""
Staff Router - API endpoints for hospital personnel and profession groups.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..auth.dependencies import Principal, get_cache, get_current_principal, require_authorized
from ..core.cache import ReferenceCache
from ..core.pagination import PageParams
from ..database import get_db
from .schemas import (
    ProfessionGroupListResponse,
    StaffCreate,
    StaffEnvelope,
    StaffFilters,
    StaffPage,
    StaffResponse,
    StaffUpdate,
)
from .service import create_staff, delete_staff, get_staff, list_profession_groups, list_staff, update_staff

router = APIRouter(tags=["Staff"])


@router.get("/profession-groups", response_model=ProfessionGroupListResponse)
def get_profession_groups(db: Session = Depends(get_db), cache: ReferenceCache = Depends(get_cache)):
    """
    List profession groups with their titles.
    """
    return {"profession_groups": list_profession_groups(db, cache)}


@router.get("/staff", response_model=StaffPage)
def get_staff_list(
    first_name: Optional[str] = Query(None, description="Search by first name"),
    last_name: Optional[str] = Query(None, description="Search by last name"),
    national_id: Optional[str] = Query(None, description="Search by national ID"),
    profession_group_id: Optional[int] = Query(None, description="Filter by profession group"),
    title_id: Optional[int] = Query(None, description="Filter by title"),
    clinic_id: Optional[int] = Query(None, description="Filter by clinic"),
    page_params: PageParams = Depends(),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    Get a paginated list of the caller's hospital staff with optional filtering.
    """
    filters = StaffFilters(
        first_name=first_name,
        last_name=last_name,
        national_id=national_id,
        profession_group_id=profession_group_id,
        title_id=title_id,
        clinic_id=clinic_id,
    )
    return list_staff(db, principal.hospital_id, filters, page_params)


@router.get("/staff/{staff_id}", response_model=StaffEnvelope)
def get_staff_by_id(
    staff_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return StaffEnvelope(staff=StaffResponse.model_validate(get_staff(db, staff_id, principal.hospital_id)))


@router.post("/staff", response_model=StaffEnvelope, status_code=status.HTTP_201_CREATED)
def create_staff_route(
    payload: StaffCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_authorized),
):
    staff = create_staff(db, payload, principal.hospital_id)
    return StaffEnvelope(staff=StaffResponse.model_validate(staff), message="Staff created successfully")


@router.put("/staff/{staff_id}", response_model=StaffEnvelope)
def update_staff_route(
    staff_id: int,
    payload: StaffUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_authorized),
):
    staff = update_staff(db, staff_id, payload, principal.hospital_id)
    return StaffEnvelope(staff=StaffResponse.model_validate(staff), message="Staff updated successfully")


@router.delete("/staff/{staff_id}")
def delete_staff_route(
    staff_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_authorized),
):
    delete_staff(db, staff_id, principal.hospital_id)
    return {"message": "Staff deleted successfully"}
