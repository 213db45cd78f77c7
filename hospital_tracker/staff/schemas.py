"""
Staff Schemas - Pydantic models for staff records and profession reference data.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.pagination import PageResponse
from .models import WorkingDay


class StaffBase(BaseModel):
    """
    Base Staff Schema

    Fields:
    - first_name / last_name: Staff member's name
    - national_id / phone: Unique across all staff
    - profession_group_id / title_id: The title must belong to the group
    - clinic_id: Optional clinic of the caller's hospital
    - working_days: Weekday names
    """
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    national_id: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    profession_group_id: int = Field(..., gt=0)
    title_id: int = Field(..., gt=0)
    clinic_id: Optional[int] = Field(None, gt=0)
    working_days: List[WorkingDay] = Field(default_factory=list)


class StaffCreate(StaffBase):
    pass


class StaffUpdate(BaseModel):
    """
    Staff Update Schema - Partial update; omitted fields keep their value.

    An explicit null clinic_id removes the staff member from their clinic.
    """
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    national_id: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, min_length=1)
    profession_group_id: Optional[int] = Field(None, gt=0)
    title_id: Optional[int] = Field(None, gt=0)
    clinic_id: Optional[int] = Field(None, gt=0)
    working_days: Optional[List[WorkingDay]] = None


class StaffFilters(BaseModel):
    """
    Staff Search Parameters - Name and national ID match case-insensitively as substrings
    """
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    national_id: Optional[str] = None
    profession_group_id: Optional[int] = None
    title_id: Optional[int] = None
    clinic_id: Optional[int] = None


class TitleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    profession_group_id: int


class ProfessionGroupSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class ProfessionGroupResponse(ProfessionGroupSummary):
    titles: List[TitleResponse] = []


class ProfessionGroupListResponse(BaseModel):
    profession_groups: List[ProfessionGroupResponse]


class StaffResponse(BaseModel):
    """
    Staff Response Schema
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    national_id: str
    phone: str
    hospital_id: int
    profession_group_id: int
    title_id: int
    clinic_id: Optional[int] = None
    working_days: List[WorkingDay] = []
    chief_physician: bool = False
    profession_group: Optional[ProfessionGroupSummary] = None
    title: Optional[TitleResponse] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("chief_physician", mode="before")
    @classmethod
    def null_means_false(cls, value):
        return bool(value)

    @field_validator("working_days", mode="before")
    @classmethod
    def missing_days_are_empty(cls, value):
        return value or []


class StaffEnvelope(BaseModel):
    staff: StaffResponse
    message: Optional[str] = None


StaffPage = PageResponse[StaffResponse]
