"""
Clinic Schemas - Pydantic models for clinics and clinic types.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ClinicCreate(BaseModel):
    clinic_type_id: int = Field(..., gt=0)


class ClinicTypeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class ClinicResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    hospital_id: int
    clinic_type_id: int
    clinic_type: Optional[ClinicTypeResponse] = None
    created_at: Optional[datetime] = None


class ClinicEnvelope(BaseModel):
    clinic: ClinicResponse
    message: Optional[str] = None


class StaffProfessionSummary(BaseModel):
    profession_group: str
    count: int


class ClinicSummary(BaseModel):
    """
    Clinic Summary Schema

    Fields:
    - id: Clinic id
    - clinic_type: The clinic's type
    - total_staff: Staff assigned to the clinic
    - staff_by_profession: Assigned staff counted per profession group
    """
    id: int
    clinic_type: ClinicTypeResponse
    total_staff: int
    staff_by_profession: List[StaffProfessionSummary] = []


class ClinicListResponse(BaseModel):
    clinics: List[ClinicSummary]


class ClinicTypeListResponse(BaseModel):
    clinic_types: List[ClinicTypeResponse]
