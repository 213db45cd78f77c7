"""
Hospital Schemas - Registration payload and location reference data.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ..users.schemas import UserResponse


class HospitalRegistration(BaseModel):
    """
    Hospital Registration Schema - A new hospital together with its first user

    Hospital fields:
    - hospital_name, tax_id, email, phone, province_id, district_id, address

    Bootstrap user fields:
    - first_name, last_name, national_id, user_email, user_phone, password
    """
    hospital_name: str = Field(..., min_length=1)
    tax_id: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)
    province_id: int = Field(..., gt=0)
    district_id: int = Field(..., gt=0)
    address: str = Field(..., min_length=1)

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    national_id: str = Field(..., min_length=1)
    user_email: EmailStr
    user_phone: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)


class HospitalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    tax_id: str
    email: str
    phone: str
    province_id: int
    district_id: int
    address: str
    created_at: Optional[datetime] = None


class RegistrationResponse(BaseModel):
    hospital: HospitalResponse
    user: UserResponse
    message: str


class ProvinceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class DistrictResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    province_id: int


class ProvinceListResponse(BaseModel):
    provinces: List[ProvinceResponse]


class DistrictListResponse(BaseModel):
    districts: List[DistrictResponse]
