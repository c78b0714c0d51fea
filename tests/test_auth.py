from datetime import timedelta

from conftest import PASSWORD, auth_headers

from app.models import Doctor, DoctorStatus, Notification, Role, User
from app.security_utils import create_access_token


def register(client, **overrides):
    payload = {
        "name": "Riya Sharma",
        "email": "Riya@Example.com",
        "password": "secret123",
        "phone": "(555) 123-4567",
        **overrides,
    }
    return client.post("/api/auth/register", json=payload)


def test_register_creates_patient_with_token(client):
    response = register(client)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["email"] == "riya@example.com"
    assert data["phone"] == "5551234567"
    assert data["role"] == "patient"
    assert data["isDoctor"] is False
    assert data["token"]
    assert "passwordHash" not in data


def test_register_duplicate_email_is_conflict(client):
    register(client)
    response = register(client, email="riya@example.com")

    assert response.status_code == 400
    assert response.json()["kind"] == "conflict"
    assert response.json()["message"] == "User already exists"


def test_register_rejects_bad_phone_and_short_password(client):
    response = register(client, phone="12345", password="123")

    assert response.status_code == 400
    body = response.json()
    assert body["kind"] == "validation_error"
    fields = {e["field"] for e in body["errors"]}
    assert {"phone", "password"} <= fields


def test_register_as_doctor_creates_pending_profile_and_notifies_admins(client, db_session, admin):
    response = register(client, isDoctor=True)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["role"] == "patient"
    assert data["isDoctor"] is True

    profile = db_session.query(Doctor).filter(Doctor.user_id == data["id"]).one()
    assert profile.status == DoctorStatus.PENDING

    notes = db_session.query(Notification).filter(Notification.user_id == admin.id).all()
    assert [n.message for n in notes] == ["New doctor application from Riya Sharma"]


def test_login_success_and_failure(client, make_user):
    user = make_user(email="login@example.com")

    ok = client.post("/api/auth/login", json={"email": "LOGIN@example.com", "password": PASSWORD})
    assert ok.status_code == 200
    assert ok.json()["data"]["id"] == user.id
    assert ok.json()["data"]["token"]

    bad = client.post("/api/auth/login", json={"email": "login@example.com", "password": "wrong-pass"})
    assert bad.status_code == 401
    assert bad.json()["message"] == "Invalid email or password"

    unknown = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": PASSWORD})
    assert unknown.status_code == 401


def test_login_reports_doctor_status(client, make_doctor):
    doctor = make_doctor(status=DoctorStatus.PENDING)
    email = doctor.email

    response = client.post("/api/auth/login", json={"email": email, "password": PASSWORD})

    assert response.json()["data"]["doctorStatus"] == "pending"


def test_missing_token_is_unauthenticated(client):
    response = client.get("/api/auth/profile")

    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "message": "Not authorized, no token",
        "kind": "unauthenticated",
    }


def test_invalid_and_expired_tokens(client, patient):
    bad = client.get("/api/auth/profile", headers={"Authorization": "Bearer not-a-jwt"})
    assert bad.status_code == 401
    assert bad.json()["message"] == "Not authorized"

    expired = create_access_token(patient.id, expires_delta=timedelta(seconds=-10))
    response = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401
    assert response.json()["message"] == "Token has expired. Please log in again."


def test_token_for_deleted_account_is_rejected(client, db_session, patient):
    headers = auth_headers(patient)
    db_session.delete(patient)
    db_session.commit()

    response = client.get("/api/auth/profile", headers=headers)

    assert response.status_code == 401
    assert response.json()["message"] == "User not found"


def test_role_is_reread_on_every_request(client, db_session, patient):
    headers = auth_headers(patient)
    assert client.get("/api/admin/users", headers=headers).status_code == 403

    patient.role = Role.ADMIN
    db_session.commit()

    assert client.get("/api/admin/users", headers=headers).status_code == 200


def test_patient_cannot_use_doctor_routes(client, patient):
    response = client.get("/api/doctors/appointments/list", headers=auth_headers(patient))

    assert response.status_code == 403
    assert response.json()["kind"] == "forbidden"


def test_profile_returns_account_and_doctor(client, doctor, db_session):
    user = db_session.get(User, doctor.user_id)
    response = client.get("/api/auth/profile", headers=auth_headers(user))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["id"] == user.id
    assert data["doctor"]["id"] == doctor.id
    assert data["doctor"]["address"]["city"] == "Pune"


def test_update_profile_returns_fresh_token(client, patient):
    response = client.put(
        "/api/auth/profile",
        json={"name": "Patricia", "phone": "555-987-6543", "password": "newsecret"},
        headers=auth_headers(patient),
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Patricia"
    assert data["phone"] == "5559876543"
    assert data["role"] == "patient"

    login = client.post("/api/auth/login", json={"email": patient.email, "password": "newsecret"})
    assert login.status_code == 200
