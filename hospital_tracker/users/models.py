"""
User Model - Hospital accounts that can log in.

Every user belongs to exactly one hospital. The first user of a hospital is
created together with it and holds the authorized (privileged) user type.
"""
import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base


class UserType(str, enum.Enum):
    """
    Enumeration for user types.

    Types:
    - AUTHORIZED: Hospital managers; may create, update and delete users, staff and clinics
    - EMPLOYEE: Regular accounts with read access to their hospital
    """
    AUTHORIZED = "authorized"
    EMPLOYEE = "employee"


class User(Base):
    """
    User Model - Stores all user information in the system

    Fields:
    - id: Primary key for user identification
    - first_name / last_name: User's name
    - national_id: National identity number, unique across all users
    - email: Unique email address, usable as login identifier
    - phone: Unique phone number, usable as login identifier and for password reset
    - password_hash: bcrypt hash (never store raw passwords)
    - user_type: authorized or employee
    - hospital_id: Tenant the user belongs to
    - created_by_id: User who created this account (null for bootstrap users)
    - created_at / updated_at: Timestamps
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    national_id = Column(String, unique=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    phone = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    user_type = Column(
        Enum(UserType, name="user_type", values_callable=lambda members: [m.value for m in members]),
        nullable=False,
        default=UserType.EMPLOYEE,
    )
    hospital_id = Column(Integer, ForeignKey("hospitals.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    hospital = relationship("Hospital", back_populates="users")
    created_by = relationship("User", remote_side=[id])

    def __repr__(self):
        return f"<User(id={self.id}, hospital_id={self.hospital_id}, user_type='{self.user_type}')>"
