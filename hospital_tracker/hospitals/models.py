"""
Hospital and location models.

Provinces and districts are static reference data; a hospital is the tenant
every user, staff member and clinic belongs to.
"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base


class Province(Base):
    __tablename__ = "provinces"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)

    districts = relationship("District", back_populates="province")


class District(Base):
    __tablename__ = "districts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    province_id = Column(Integer, ForeignKey("provinces.id"), nullable=False, index=True)

    province = relationship("Province", back_populates="districts")


class Hospital(Base):
    """
    Hospital Model - The tenant boundary

    Fields:
    - id: Primary key
    - name: Hospital name
    - tax_id / email / phone: Each unique across all hospitals
    - province_id / district_id: Location; the district must belong to the province
    - address: Street address
    """
    __tablename__ = "hospitals"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    tax_id = Column(String, unique=True, nullable=False)
    email = Column(String, unique=True, nullable=False)
    phone = Column(String, unique=True, nullable=False)
    province_id = Column(Integer, ForeignKey("provinces.id"), nullable=False)
    district_id = Column(Integer, ForeignKey("districts.id"), nullable=False)
    address = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    province = relationship("Province")
    district = relationship("District")
    users = relationship("User", back_populates="hospital")
    clinics = relationship("Clinic", back_populates="hospital")

    def __repr__(self):
        return f"<Hospital(id={self.id}, name='{self.name}')>"
