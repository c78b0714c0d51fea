import os
import uuid

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DB_LOG_SLOW_QUERIES", "false")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app import storage  # noqa: E402
from app.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models import Doctor, DoctorStatus, Role, User  # noqa: E402
from app.security_utils import create_access_token, hash_password  # noqa: E402

PASSWORD = "secret123"
PASSWORD_HASH = hash_password(PASSWORD)

# 2030-01-07 is a Monday
MONDAY = "2030-01-07"
TUESDAY = "2030-01-08"

MONDAY_MORNINGS = {
    "monday": {"start": "09:00", "end": "12:00", "available": True},
    "tuesday": {"start": "14:00", "end": "16:00", "available": True},
    "sunday": {"start": None, "end": None, "available": False},
}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory, tmp_path, monkeypatch):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(storage, "UPLOAD_DIR", str(tmp_path))
    monkeypatch.setattr(storage, "R2_ACCOUNT_ID", None)

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    def _make(name="Pat Patient", email=None, role=Role.PATIENT, phone="5551234567", is_doctor=False):
        user = User(
            name=name,
            email=email or f"{uuid.uuid4().hex[:10]}@example.com",
            phone=phone,
            password_hash=PASSWORD_HASH,
            role=role,
            is_doctor=is_doctor,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_doctor(db_session, make_user):
    def _make(
        name="Dr. Asha Rao",
        status=DoctorStatus.APPROVED,
        specialization="Cardiology",
        city="Pune",
        experience=10,
        fees=500.0,
        timings=None,
        rating=4.5,
    ):
        role = Role.DOCTOR if status == DoctorStatus.APPROVED else Role.PATIENT
        user = make_user(name=name, role=role, is_doctor=True)
        doctor = Doctor(
            user_id=user.id,
            full_name=name,
            email=user.email,
            phone=user.phone,
            city=city,
            specialization=specialization,
            experience=experience,
            fees=fees,
            timings=timings if timings is not None else MONDAY_MORNINGS,
            status=status,
            rating=rating,
        )
        db_session.add(doctor)
        db_session.commit()
        db_session.refresh(doctor)
        return doctor

    return _make


@pytest.fixture
def patient(make_user):
    return make_user(name="Pat Patient")


@pytest.fixture
def admin(make_user):
    return make_user(name="Ada Admin", role=Role.ADMIN)


@pytest.fixture
def doctor(make_doctor):
    return make_doctor()


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


def book(client, user, doctor, date=MONDAY, start="09:00", **extra):
    payload = {"doctorId": doctor.id, "date": date, "timeSlot": {"start": start}, **extra}
    return client.post("/api/appointments", json=payload, headers=auth_headers(user))
