"""
Tests for uniqueness checks and the translation of constraint violations.
"""
import pytest
from sqlalchemy.exc import IntegrityError

from hospital_tracker.clinics.models import Clinic
from hospital_tracker.core.uniqueness import (
    UniqueFields,
    conflict_for,
    conflict_from_integrity_error,
    ensure_all_unique,
    ensure_unique,
)
from hospital_tracker.exceptions import (
    ConflictException,
    DuplicateEmailException,
    DuplicateNationalIDException,
    DuplicatePhoneException,
    DuplicateTaxIDException,
)
from hospital_tracker.hospitals.models import Hospital
from hospital_tracker.users.models import User, UserType


def test_conflict_for_maps_identity_fields():
    assert isinstance(conflict_for("email", "a@b.c", "user"), DuplicateEmailException)
    assert isinstance(conflict_for("phone", "1", "staff"), DuplicatePhoneException)
    assert isinstance(conflict_for("national_id", "1", "user"), DuplicateNationalIDException)
    assert isinstance(conflict_for("tax_id", "1", "hospital"), DuplicateTaxIDException)

    generic = conflict_for("clinic_type_id", 4, "clinic")
    assert type(generic) is ConflictException
    assert generic.context == {"field": "clinic_type_id", "value": 4, "resource": "clinic"}


def test_taken_value_conflicts(db, hospital_a):
    with pytest.raises(DuplicateEmailException) as exc_info:
        ensure_unique(db, User, "email", hospital_a.manager.email)

    assert exc_info.value.context["resource"] == "user"
    assert exc_info.value.status_code == 409


def test_own_value_does_not_conflict_when_excluded(db, hospital_a):
    manager = hospital_a.manager
    ensure_all_unique(
        db,
        User,
        {"national_id": manager.national_id, "email": manager.email, "phone": manager.phone},
        exclude_id=manager.id,
    )


def test_free_value_and_none_are_accepted(db, hospital_a):
    ensure_all_unique(db, User, {"email": "free@example.com", "phone": None})


def test_checks_run_in_order(db, hospital_a):
    hospital = hospital_a.hospital
    with pytest.raises(DuplicateTaxIDException):
        ensure_all_unique(db, Hospital, {"tax_id": hospital.tax_id, "email": hospital.email})


def test_scope_limits_the_check(db, hospital_a, hospital_b, reference_data):
    db.add(Clinic(hospital_id=hospital_a.hospital.id, clinic_type_id=reference_data.cardiology.id))
    db.commit()

    scope_b = {"hospital_id": hospital_b.hospital.id}
    ensure_unique(db, Clinic, "clinic_type_id", reference_data.cardiology.id, scope=scope_b)

    scope_a = {"hospital_id": hospital_a.hospital.id}
    with pytest.raises(ConflictException) as exc_info:
        ensure_unique(db, Clinic, "clinic_type_id", reference_data.cardiology.id, scope=scope_a)
    assert exc_info.value.field == "clinic_type_id"


def test_integrity_error_is_translated_to_the_same_conflict(db, hospital_a):
    manager = hospital_a.manager
    db.add(
        User(
            first_name="Racing",
            last_name="Writer",
            national_id="99999999999",
            email=manager.email,
            phone="+905009999999",
            password_hash="x",
            user_type=UserType.EMPLOYEE,
            hospital_id=manager.hospital_id,
        )
    )
    with pytest.raises(IntegrityError) as exc_info:
        db.flush()
    db.rollback()

    conflict = conflict_from_integrity_error(
        db,
        exc_info.value,
        UniqueFields(User, {"national_id": "99999999999", "email": manager.email, "phone": "+905009999999"}),
    )

    assert isinstance(conflict, DuplicateEmailException)


def test_integrity_error_without_matching_field_returns_none(db, hospital_a):
    error = IntegrityError("INSERT", {}, Exception("constraint failed"))
    assert conflict_from_integrity_error(db, error, UniqueFields(User, {"email": "free@example.com"})) is None
