"""
Staff Model - Hospital personnel records and their profession reference data.

Staff members are not login accounts. Each one holds a title that belongs to a
profession group and may be assigned to one of their hospital's clinics.
"""
import enum

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base

# The chief physician role: this title inside this profession group
ADMINISTRATIVE_GROUP_NAME = "İdari Personel"
CHIEF_PHYSICIAN_TITLE_NAME = "Başhekim"


class WorkingDay(str, enum.Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


class ProfessionGroup(Base):
    __tablename__ = "profession_groups"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)

    titles = relationship("Title", back_populates="profession_group", order_by="Title.id")


class Title(Base):
    __tablename__ = "titles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    profession_group_id = Column(Integer, ForeignKey("profession_groups.id"), nullable=False, index=True)

    profession_group = relationship("ProfessionGroup", back_populates="titles")

    @property
    def is_chief_physician(self) -> bool:
        return (
            self.name == CHIEF_PHYSICIAN_TITLE_NAME
            and self.profession_group is not None
            and self.profession_group.name == ADMINISTRATIVE_GROUP_NAME
        )


class Staff(Base):
    """
    Staff Model - Stores hospital personnel

    Fields:
    - id: Primary key
    - first_name / last_name: Staff member's name
    - national_id / phone: Each unique across all staff
    - profession_group_id / title_id: The title must belong to the profession group
    - hospital_id: Tenant the staff member belongs to
    - clinic_id: Optional clinic of the same hospital
    - working_days: JSON list of weekday names
    - chief_physician: True for the hospital's chief physician, NULL otherwise.
      Unique per hospital; NULLs never collide, so at most one row per
      hospital can hold True.
    """
    __tablename__ = "staff"
    __table_args__ = (
        UniqueConstraint("hospital_id", "chief_physician", name="uq_staff_hospital_chief_physician"),
    )

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    national_id = Column(String, unique=True, nullable=False)
    phone = Column(String, unique=True, nullable=False)
    profession_group_id = Column(Integer, ForeignKey("profession_groups.id"), nullable=False)
    title_id = Column(Integer, ForeignKey("titles.id"), nullable=False)
    hospital_id = Column(Integer, ForeignKey("hospitals.id", ondelete="CASCADE"), nullable=False, index=True)
    clinic_id = Column(Integer, ForeignKey("clinics.id"), nullable=True, index=True)
    working_days = Column(JSON, nullable=False, default=list)
    chief_physician = Column(Boolean, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    profession_group = relationship("ProfessionGroup")
    title = relationship("Title")
    clinic = relationship("Clinic", back_populates="staff")

    def __repr__(self):
        return f"<Staff(id={self.id}, hospital_id={self.hospital_id}, title_id={self.title_id})>"
