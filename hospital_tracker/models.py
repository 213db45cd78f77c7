"""
Import all models here so relationships resolve and create_all sees every table.
"""
from .auth.models import PasswordReset
from .clinics.models import Clinic, ClinicType
from .database import Base
from .hospitals.models import District, Hospital, Province
from .staff.models import ProfessionGroup, Staff, Title, WorkingDay
from .users.models import User, UserType

__all__ = [
    "Base",
    "Clinic",
    "ClinicType",
    "District",
    "Hospital",
    "PasswordReset",
    "ProfessionGroup",
    "Province",
    "Staff",
    "Title",
    "User",
    "UserType",
    "WorkingDay",
]
