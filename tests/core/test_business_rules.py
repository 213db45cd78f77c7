"""
Tests for the domain rules shared by the staff, clinic and hospital services.
"""
import pytest

from hospital_tracker.clinics.models import Clinic
from hospital_tracker.core.business_rules import (
    count_chief_physicians,
    ensure_clinic_has_no_staff,
    ensure_clinic_in_hospital,
    ensure_district_in_province,
    ensure_single_chief_physician,
    ensure_title_in_profession_group,
)
from hospital_tracker.exceptions import BusinessRuleException, ClinicNotFoundException, ValidationException
from hospital_tracker.staff.models import Staff


def add_staff(db, hospital, title, n, clinic=None):
    staff = Staff(
        first_name="Zeynep",
        last_name="Kaya",
        national_id=f"300{n:08d}",
        phone=f"+90533{n:07d}",
        profession_group_id=title.profession_group_id,
        title_id=title.id,
        hospital_id=hospital.id,
        clinic_id=clinic.id if clinic else None,
        working_days=["monday"],
        chief_physician=True if title.is_chief_physician else None,
    )
    db.add(staff)
    db.commit()
    return staff


def test_title_in_its_group_is_accepted(db, reference_data):
    title = ensure_title_in_profession_group(db, reference_data.chief.id, reference_data.admin_group.id)
    assert title.id == reference_data.chief.id
    assert title.is_chief_physician


def test_title_outside_claimed_group_is_rejected(db, reference_data):
    with pytest.raises(BusinessRuleException) as exc_info:
        ensure_title_in_profession_group(db, reference_data.nurse.id, reference_data.doctor_group.id)
    assert exc_info.value.code == "BUSINESS_RULE_VIOLATION"


def test_unknown_title_is_rejected(db, reference_data):
    with pytest.raises(BusinessRuleException):
        ensure_title_in_profession_group(db, 9999, reference_data.doctor_group.id)


def test_only_the_admin_chief_title_is_chief_physician(reference_data):
    assert reference_data.chief.is_chief_physician
    assert not reference_data.manager.is_chief_physician
    assert not reference_data.specialist.is_chief_physician


def test_clinic_must_belong_to_hospital(db, hospital_a, hospital_b, reference_data):
    clinic = Clinic(hospital_id=hospital_a.hospital.id, clinic_type_id=reference_data.cardiology.id)
    db.add(clinic)
    db.commit()

    assert ensure_clinic_in_hospital(db, clinic.id, hospital_a.hospital.id).id == clinic.id
    with pytest.raises(ClinicNotFoundException):
        ensure_clinic_in_hospital(db, clinic.id, hospital_b.hospital.id)


def test_chief_physician_is_counted_per_hospital(db, hospital_a, hospital_b, reference_data):
    chief = add_staff(db, hospital_a.hospital, reference_data.chief, 1)
    add_staff(db, hospital_a.hospital, reference_data.manager, 2)

    assert count_chief_physicians(db, hospital_a.hospital.id) == 1
    assert count_chief_physicians(db, hospital_a.hospital.id, exclude_staff_id=chief.id) == 0
    assert count_chief_physicians(db, hospital_b.hospital.id) == 0

    with pytest.raises(BusinessRuleException):
        ensure_single_chief_physician(db, hospital_a.hospital.id)
    ensure_single_chief_physician(db, hospital_a.hospital.id, exclude_staff_id=chief.id)
    ensure_single_chief_physician(db, hospital_b.hospital.id)


def test_clinic_with_staff_cannot_be_emptied(db, hospital_a, reference_data):
    clinic = Clinic(hospital_id=hospital_a.hospital.id, clinic_type_id=reference_data.neurology.id)
    db.add(clinic)
    db.commit()
    ensure_clinic_has_no_staff(db, clinic.id)

    add_staff(db, hospital_a.hospital, reference_data.nurse, 3, clinic=clinic)
    with pytest.raises(BusinessRuleException) as exc_info:
        ensure_clinic_has_no_staff(db, clinic.id)
    assert exc_info.value.context["staff_count"] == 1


def test_district_must_belong_to_province(db, reference_data):
    ensure_district_in_province(db, reference_data.istanbul.id, reference_data.kadikoy.id)

    with pytest.raises(ValidationException) as exc_info:
        ensure_district_in_province(db, reference_data.ankara.id, reference_data.kadikoy.id)
    assert exc_info.value.context["field"] == "province_district"
