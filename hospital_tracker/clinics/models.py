"""
Clinic models. A hospital has at most one clinic of each clinic type.
"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base


class ClinicType(Base):
    __tablename__ = "clinic_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)


class Clinic(Base):
    __tablename__ = "clinics"
    __table_args__ = (
        UniqueConstraint("hospital_id", "clinic_type_id", name="uq_clinics_hospital_clinic_type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    hospital_id = Column(Integer, ForeignKey("hospitals.id", ondelete="CASCADE"), nullable=False, index=True)
    clinic_type_id = Column(Integer, ForeignKey("clinic_types.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    hospital = relationship("Hospital", back_populates="clinics")
    clinic_type = relationship("ClinicType")
    staff = relationship("Staff", back_populates="clinic")

    def __repr__(self):
        return f"<Clinic(id={self.id}, hospital_id={self.hospital_id}, clinic_type_id={self.clinic_type_id})>"
