"""
Tests for hospital user management.
"""
import pytest

from hospital_tracker.users.models import User


def new_user(n, **overrides):
    data = {
        "first_name": "Burak",
        "last_name": "Çelik",
        "national_id": f"400{n:08d}",
        "email": f"staffer{n}@example.com",
        "phone": f"+90542{n:07d}",
        "password": "secret123",
        "user_type": "employee",
    }
    data.update(overrides)
    return data


@pytest.fixture
def manager_headers(hospital_a, headers_for):
    return headers_for(hospital_a.manager)


def test_create_user_records_creator(client, hospital_a, manager_headers):
    response = client.post("/api/users", headers=manager_headers, json=new_user(1))

    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "User created successfully"
    assert data["user"]["user_type"] == "employee"
    assert data["user"]["hospital_id"] == hospital_a.hospital.id
    assert data["user"]["created_by_id"] == hospital_a.manager.id
    assert "password_hash" not in data["user"]


def test_created_user_can_log_in(client, manager_headers):
    client.post("/api/users", headers=manager_headers, json=new_user(1, user_type="authorized"))

    response = client.post("/api/login", json={"identifier": "staffer1@example.com", "password": "secret123"})

    assert response.status_code == 200
    assert response.json()["user_type"] == "authorized"


def test_duplicate_email_is_a_conflict(client, manager_headers):
    client.post("/api/users", headers=manager_headers, json=new_user(1))

    response = client.post("/api/users", headers=manager_headers, json=new_user(2, email="staffer1@example.com"))

    assert response.status_code == 409
    assert response.json()["code"] == "DUPLICATE_EMAIL"


def test_uniqueness_spans_hospitals(client, hospital_a, hospital_b, headers_for):
    response = client.post(
        "/api/users",
        headers=headers_for(hospital_b.manager),
        json=new_user(1, national_id=hospital_a.manager.national_id),
    )

    assert response.status_code == 409
    assert response.json()["code"] == "DUPLICATE_NATIONAL_ID"


def test_short_password_is_rejected(client, manager_headers):
    response = client.post("/api/users", headers=manager_headers, json=new_user(1, password="abc"))

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_unknown_user_type_is_rejected(client, manager_headers):
    response = client.post("/api/users", headers=manager_headers, json=new_user(1, user_type="admin"))

    assert response.status_code == 400


def test_list_is_scoped_to_the_callers_hospital(client, hospital_a, hospital_b, make_user, headers_for):
    make_user(hospital_a, 1)
    make_user(hospital_b, 2)

    response = client.get("/api/users", headers=headers_for(hospital_a.manager))

    assert response.status_code == 200
    users = response.json()["users"]
    assert {u["hospital_id"] for u in users} == {hospital_a.hospital.id}
    assert len(users) == 2


def test_employee_can_read_a_user(client, hospital_a, make_user, headers_for):
    employee = make_user(hospital_a, 1)

    response = client.get(f"/api/users/{hospital_a.manager.id}", headers=headers_for(employee))

    assert response.status_code == 200
    assert response.json()["user"]["id"] == hospital_a.manager.id


def test_update_changes_only_supplied_fields(client, hospital_a, make_user, manager_headers):
    user = make_user(hospital_a, 1)

    response = client.put(f"/api/users/{user.id}", headers=manager_headers, json={"first_name": "Kemal"})

    assert response.status_code == 200
    data = response.json()["user"]
    assert data["first_name"] == "Kemal"
    assert data["last_name"] == "Demir"
    assert data["email"] == user.email


def test_update_with_own_values_is_not_a_conflict(client, hospital_a, make_user, manager_headers):
    user = make_user(hospital_a, 1)

    response = client.put(
        f"/api/users/{user.id}",
        headers=manager_headers,
        json={"national_id": user.national_id, "email": user.email, "phone": user.phone},
    )

    assert response.status_code == 200


def test_update_to_another_users_phone_is_a_conflict(client, hospital_a, make_user, manager_headers):
    first = make_user(hospital_a, 1)
    second = make_user(hospital_a, 2)

    response = client.put(f"/api/users/{second.id}", headers=manager_headers, json={"phone": first.phone})

    assert response.status_code == 409
    assert response.json()["code"] == "DUPLICATE_PHONE"


def test_update_can_change_user_type(client, hospital_a, make_user, manager_headers):
    user = make_user(hospital_a, 1)

    response = client.put(f"/api/users/{user.id}", headers=manager_headers, json={"user_type": "authorized"})

    assert response.json()["user"]["user_type"] == "authorized"


@pytest.mark.parametrize("method", ["get", "put", "delete"])
def test_other_hospitals_users_are_not_found(client, hospital_a, hospital_b, make_user, manager_headers, method):
    foreign = make_user(hospital_b, 1)
    kwargs = {"headers": manager_headers}
    if method == "put":
        kwargs["json"] = {"first_name": "Kemal"}

    response = getattr(client, method)(f"/api/users/{foreign.id}", **kwargs)

    assert response.status_code == 404
    assert response.json()["code"] == "USER_NOT_FOUND"


def test_users_cannot_delete_themselves(client, db, hospital_a, manager_headers):
    response = client.delete(f"/api/users/{hospital_a.manager.id}", headers=manager_headers)

    assert response.status_code == 400
    assert response.json()["code"] == "BUSINESS_RULE_VIOLATION"
    assert db.query(User).filter(User.id == hospital_a.manager.id).count() == 1


def test_delete_removes_the_user(client, db, hospital_a, make_user, manager_headers):
    user = make_user(hospital_a, 1)

    response = client.delete(f"/api/users/{user.id}", headers=manager_headers)

    assert response.status_code == 200
    assert response.json() == {"message": "User deleted successfully"}
    assert client.get(f"/api/users/{user.id}", headers=manager_headers).status_code == 404
