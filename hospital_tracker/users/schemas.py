"""
User Schemas - Pydantic models for user data validation and serialization.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .models import UserType


class UserBase(BaseModel):
    """
    Base User Schema - Contains fields common to all user-related schemas

    Fields:
    - first_name / last_name: User's name
    - national_id: National identity number
    - email: User's email address
    - phone: User's phone number
    """
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    national_id: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)


class UserCreate(UserBase):
    """
    User Creation Schema - Used by authorized users to add accounts to their hospital

    Extends UserBase with:
    - password: Plain text password (hashed before storage)
    - user_type: authorized or employee
    """
    password: str = Field(..., min_length=6)
    user_type: UserType


class UserUpdate(BaseModel):
    """
    User Update Schema - Partial update; omitted fields keep their value
    """
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    national_id: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1)
    user_type: Optional[UserType] = None


class UserResponse(BaseModel):
    """
    User Response Schema - Returned to clients; never carries the password hash
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    national_id: str
    email: str
    phone: str
    user_type: UserType
    hospital_id: int
    created_by_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserEnvelope(BaseModel):
    user: UserResponse
    message: Optional[str] = None


class UserListResponse(BaseModel):
    users: List[UserResponse]
