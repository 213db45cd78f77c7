"""
Test configuration for the hospital tracker backend.
"""
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from hospital_tracker.clinics.models import ClinicType
from hospital_tracker.config import Settings
from hospital_tracker.database import Base, get_db
from hospital_tracker.hospitals.models import District, Province
from hospital_tracker.hospitals.schemas import HospitalRegistration
from hospital_tracker.hospitals.service import register_hospital
from hospital_tracker.main import create_app
from hospital_tracker.staff.models import ProfessionGroup, Title
from hospital_tracker.users.models import UserType
from hospital_tracker.users.schemas import UserCreate
from hospital_tracker.users.service import create_user

TEST_SECRET = "test-secret-key-for-hospital-tracker"
DEFAULT_PASSWORD = "secret123"


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        redis_url=None,
        log_level="DEBUG",
    )


@pytest.fixture
def app(settings):
    """
    Create the application on a fresh in-memory database for each test.
    """
    app = create_app(settings)
    Base.metadata.create_all(bind=app.state.engine)
    yield app
    Base.metadata.drop_all(bind=app.state.engine)


@pytest.fixture
def db(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(app, db):
    """
    Create a test client sharing the test database session.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides = {}


@pytest.fixture
def auth_service(app):
    return app.state.auth_service


@pytest.fixture
def hasher(auth_service):
    return auth_service.hasher


@pytest.fixture
def reference_data(db):
    """
    Seed provinces, districts, profession groups with titles and clinic types.
    """
    istanbul = Province(name="İstanbul")
    ankara = Province(name="Ankara")
    db.add_all([istanbul, ankara])
    db.flush()

    kadikoy = District(name="Kadıköy", province_id=istanbul.id)
    besiktas = District(name="Beşiktaş", province_id=istanbul.id)
    cankaya = District(name="Çankaya", province_id=ankara.id)

    admin_group = ProfessionGroup(name="İdari Personel")
    doctor_group = ProfessionGroup(name="Doktor")
    health_group = ProfessionGroup(name="Sağlık Personeli")
    db.add_all([kadikoy, besiktas, cankaya, admin_group, doctor_group, health_group])
    db.flush()

    chief = Title(name="Başhekim", profession_group_id=admin_group.id)
    manager = Title(name="Müdür", profession_group_id=admin_group.id)
    specialist = Title(name="Uzman", profession_group_id=doctor_group.id)
    assistant = Title(name="Asistan", profession_group_id=doctor_group.id)
    nurse = Title(name="Hemşire", profession_group_id=health_group.id)

    cardiology = ClinicType(name="Kardiyoloji")
    neurology = ClinicType(name="Nöroloji")
    db.add_all([chief, manager, specialist, assistant, nurse, cardiology, neurology])
    db.commit()

    return SimpleNamespace(
        istanbul=istanbul,
        ankara=ankara,
        kadikoy=kadikoy,
        besiktas=besiktas,
        cankaya=cankaya,
        admin_group=admin_group,
        doctor_group=doctor_group,
        health_group=health_group,
        chief=chief,
        manager=manager,
        specialist=specialist,
        assistant=assistant,
        nurse=nurse,
        cardiology=cardiology,
        neurology=neurology,
    )


@pytest.fixture
def registration_data(reference_data):
    """
    Build a registration payload; n keeps every unique value distinct.
    """
    def make(n=1, **overrides):
        data = {
            "hospital_name": f"Hospital {n}",
            "tax_id": f"TAX{n:06d}",
            "email": f"hospital{n}@example.com",
            "phone": f"+90212{n:07d}",
            "province_id": reference_data.istanbul.id,
            "district_id": reference_data.kadikoy.id,
            "address": f"{n} Bağdat Caddesi",
            "first_name": "Ayşe",
            "last_name": "Yılmaz",
            "national_id": f"100{n:08d}",
            "user_email": f"manager{n}@example.com",
            "user_phone": f"+90555{n:07d}",
            "password": DEFAULT_PASSWORD,
        }
        data.update(overrides)
        return data

    return make


@pytest.fixture
def hospital_a(db, hasher, registration_data):
    hospital, manager = register_hospital(db, hasher, HospitalRegistration(**registration_data(1)))
    return SimpleNamespace(hospital=hospital, manager=manager)


@pytest.fixture
def hospital_b(db, hasher, registration_data):
    hospital, manager = register_hospital(db, hasher, HospitalRegistration(**registration_data(2)))
    return SimpleNamespace(hospital=hospital, manager=manager)


@pytest.fixture
def make_user(db, hasher):
    """
    Create a user directly through the service.
    """
    def make(owner, n, user_type=UserType.EMPLOYEE, password=DEFAULT_PASSWORD, **overrides):
        data = {
            "first_name": "Mehmet",
            "last_name": "Demir",
            "national_id": f"200{n:08d}",
            "email": f"user{n}@example.com",
            "phone": f"+90532{n:07d}",
            "password": password,
            "user_type": user_type,
        }
        data.update(overrides)
        return create_user(db, hasher, UserCreate(**data), owner.hospital.id, owner.manager.id)

    return make


@pytest.fixture
def headers_for(auth_service):
    """
    Bearer headers for a user, signed with the application's codec.
    """
    def make(user):
        token = auth_service.token_codec.issue(user.id, user.hospital_id, user.user_type)
        return {"Authorization": f"Bearer {token}"}

    return make
