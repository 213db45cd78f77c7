"""
Tests for hospital registration and the location reference endpoints.
"""
import pytest

from hospital_tracker.exceptions import DatabaseException, DuplicateTaxIDException
from hospital_tracker.hospitals import service as hospital_service
from hospital_tracker.hospitals.models import Hospital
from hospital_tracker.hospitals.schemas import HospitalRegistration
from hospital_tracker.hospitals.service import register_hospital
from hospital_tracker.users.models import User


def test_register_creates_hospital_and_authorized_user(client, registration_data):
    response = client.post("/api/register", json=registration_data(1))

    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "Hospital registered successfully"
    assert data["hospital"]["name"] == "Hospital 1"
    assert data["hospital"]["tax_id"] == "TAX000001"
    assert data["user"]["user_type"] == "authorized"
    assert data["user"]["email"] == "manager1@example.com"
    assert data["user"]["hospital_id"] == data["hospital"]["id"]
    assert data["user"]["created_by_id"] is None
    assert "password" not in data["user"]
    assert "password_hash" not in data["user"]


def test_registered_user_can_log_in(client, registration_data):
    client.post("/api/register", json=registration_data(1))

    response = client.post("/api/login", json={"identifier": "+905550000001", "password": "secret123"})

    assert response.status_code == 200
    assert response.json()["user_type"] == "authorized"


def test_duplicate_tax_id_is_reported_first(client, registration_data):
    client.post("/api/register", json=registration_data(1))

    response = client.post(
        "/api/register",
        json=registration_data(2, tax_id="TAX000001", email="hospital1@example.com"),
    )

    assert response.status_code == 409
    data = response.json()
    assert data["code"] == "DUPLICATE_TAX_ID"
    assert data["context"]["field"] == "tax_id"


@pytest.mark.parametrize(
    "overrides, code",
    [
        ({"email": "hospital1@example.com"}, "DUPLICATE_EMAIL"),
        ({"phone": "+902120000001"}, "DUPLICATE_PHONE"),
        ({"national_id": "10000000001"}, "DUPLICATE_NATIONAL_ID"),
        ({"user_email": "manager1@example.com"}, "DUPLICATE_EMAIL"),
        ({"user_phone": "+905550000001"}, "DUPLICATE_PHONE"),
    ],
)
def test_duplicate_values_are_conflicts(client, registration_data, overrides, code):
    client.post("/api/register", json=registration_data(1))

    response = client.post("/api/register", json=registration_data(2, **overrides))

    assert response.status_code == 409
    assert response.json()["code"] == code


def test_district_outside_province_is_rejected(client, db, registration_data, reference_data):
    response = client.post(
        "/api/register",
        json=registration_data(1, province_id=reference_data.ankara.id, district_id=reference_data.kadikoy.id),
    )

    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert data["context"]["field"] == "province_district"
    assert db.query(Hospital).count() == 0


@pytest.mark.parametrize("field", ["hospital_name", "tax_id", "user_email", "password"])
def test_missing_fields_are_validation_errors(client, registration_data, field):
    data = registration_data(1)
    del data[field]

    response = client.post("/api/register", json=data)

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_failed_user_insert_leaves_no_hospital(db, hasher, registration_data, monkeypatch):
    add = db.add

    def add_failing_for_users(instance, *args, **kwargs):
        if isinstance(instance, User):
            raise DatabaseException("create bootstrap user")
        return add(instance, *args, **kwargs)

    monkeypatch.setattr(db, "add", add_failing_for_users)

    with pytest.raises(DatabaseException):
        register_hospital(db, hasher, HospitalRegistration(**registration_data(1)))

    assert db.query(Hospital).count() == 0
    assert db.query(User).count() == 0


def test_storage_constraint_is_translated_to_the_field_conflict(db, hasher, registration_data, hospital_a, monkeypatch):
    monkeypatch.setattr(hospital_service, "ensure_all_unique", lambda *args, **kwargs: None)

    with pytest.raises(DuplicateTaxIDException):
        register_hospital(db, hasher, HospitalRegistration(**registration_data(2, tax_id="TAX000001")))

    assert db.query(Hospital).count() == 1


def test_provinces_are_listed_by_name(client, reference_data):
    response = client.get("/api/provinces")

    assert response.status_code == 200
    assert [p["name"] for p in response.json()["provinces"]] == ["Ankara", "İstanbul"]


def test_districts_can_be_filtered_by_province(client, reference_data):
    everything = client.get("/api/districts")
    istanbul = client.get("/api/districts", params={"province_id": reference_data.istanbul.id})
    unknown = client.get("/api/districts", params={"province_id": 999})

    assert len(everything.json()["districts"]) == 3
    names = {d["name"] for d in istanbul.json()["districts"]}
    assert names == {"Kadıköy", "Beşiktaş"}
    assert all(d["province_id"] == reference_data.istanbul.id for d in istanbul.json()["districts"])
    assert unknown.json()["districts"] == []


def test_password_longer_than_72_bytes_is_rejected(client, db, registration_data):
    response = client.post("/api/register", json=registration_data(1, password="p" * 73))

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert response.json()["context"]["field"] == "password"
    assert db.query(Hospital).count() == 0
