"""
Hospital Router - Registration and location reference data.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..auth.dependencies import get_cache, get_hasher
from ..core.cache import ReferenceCache
from ..core.security import PasswordHasher
from ..database import get_db
from ..users.schemas import UserResponse
from .schemas import (
    DistrictListResponse,
    HospitalRegistration,
    HospitalResponse,
    ProvinceListResponse,
    RegistrationResponse,
)
from .service import list_districts, list_provinces, register_hospital

router = APIRouter(tags=["Hospitals"])


@router.post(
    "/register",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a hospital and its first user",
)
def register(
    payload: HospitalRegistration,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_hasher),
):
    """
    Register a new hospital.

    The registering person becomes the hospital's first user, with the
    authorized user type.
    """
    hospital, user = register_hospital(db, hasher, payload)
    return RegistrationResponse(
        hospital=HospitalResponse.model_validate(hospital),
        user=UserResponse.model_validate(user),
        message="Hospital registered successfully",
    )


@router.get("/provinces", response_model=ProvinceListResponse)
def get_provinces(db: Session = Depends(get_db), cache: ReferenceCache = Depends(get_cache)):
    return {"provinces": list_provinces(db, cache)}


@router.get("/districts", response_model=DistrictListResponse)
def get_districts(
    province_id: Optional[int] = Query(None, ge=1, description="Limit to one province"),
    db: Session = Depends(get_db),
    cache: ReferenceCache = Depends(get_cache),
):
    return {"districts": list_districts(db, cache, province_id)}
