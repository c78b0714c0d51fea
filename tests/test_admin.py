from conftest import MONDAY, TUESDAY, auth_headers, book

from app.models import Appointment, DoctorStatus, Notification, PaymentStatus, Role, User


def test_admin_rejects_application_with_reason(client, db_session, make_doctor, admin):
    applicant = make_doctor(status=DoctorStatus.PENDING)

    response = client.put(
        f"/api/admin/doctors/{applicant.id}/status",
        json={"status": "rejected", "rejectionReason": "Incomplete documents"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "rejected"

    account = db_session.get(User, applicant.user_id)
    db_session.refresh(account)
    assert account.role == Role.PATIENT
    assert account.is_doctor is False

    note = db_session.query(Notification).filter(Notification.user_id == account.id).one()
    assert note.kind == "approval"
    assert note.message == "Your doctor application has been rejected. Reason: Incomplete documents"


def test_rejection_without_reason_uses_default(client, db_session, make_doctor, admin):
    applicant = make_doctor(status=DoctorStatus.PENDING)

    client.put(
        f"/api/admin/doctors/{applicant.id}/status",
        json={"status": "rejected"},
        headers=auth_headers(admin),
    )

    note = db_session.query(Notification).filter(Notification.user_id == applicant.user_id).one()
    assert note.message.endswith("Reason: Not specified by admin")


def test_admin_approval_grants_doctor_role(client, db_session, make_doctor, admin):
    applicant = make_doctor(status=DoctorStatus.PENDING)
    account = db_session.get(User, applicant.user_id)
    headers = auth_headers(account)
    assert client.get("/api/doctors/appointments/list", headers=headers).status_code == 403

    response = client.put(
        f"/api/admin/doctors/{applicant.id}/status",
        json={"status": "approved"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    db_session.refresh(account)
    assert account.role == Role.DOCTOR
    assert account.is_doctor is True
    assert client.get("/api/doctors/appointments/list", headers=headers).status_code == 200

    messages = [n.message for n in db_session.query(Notification).filter(Notification.user_id == account.id)]
    assert messages == ["Your doctor application has been approved!"]


def test_approval_requires_specialization(client, make_doctor, admin):
    applicant = make_doctor(status=DoctorStatus.PENDING, specialization=None)

    response = client.put(
        f"/api/admin/doctors/{applicant.id}/status",
        json={"status": "approved"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    assert response.json()["kind"] == "invalid_state"


def test_review_status_validation(client, doctor, admin):
    headers = auth_headers(admin)

    missing = client.put(f"/api/admin/doctors/{doctor.id}/status", json={}, headers=headers)
    assert missing.json()["message"] == "Status is required"

    wrong = client.put(f"/api/admin/doctors/{doctor.id}/status", json={"status": "pending"}, headers=headers)
    assert wrong.status_code == 400

    unknown = client.put("/api/admin/doctors/nope/status", json={"status": "approved"}, headers=headers)
    assert unknown.status_code == 404


def test_admin_routes_require_admin(client, patient, doctor):
    for path in ("/api/admin/users", "/api/admin/doctors", "/api/admin/appointments", "/api/admin/stats"):
        response = client.get(path, headers=auth_headers(patient))
        assert response.status_code == 403
        assert response.json()["message"] == "Not authorized as admin"


def test_list_doctors_filtered_by_status(client, make_doctor, admin):
    make_doctor(name="Dr. A")
    pending = make_doctor(name="Dr. B", status=DoctorStatus.PENDING)

    all_doctors = client.get("/api/admin/doctors", headers=auth_headers(admin)).json()
    assert all_doctors["count"] == 2

    only_pending = client.get("/api/admin/doctors", params={"status": "pending"}, headers=auth_headers(admin)).json()
    assert [d["id"] for d in only_pending["data"]] == [pending.id]


def test_list_users_and_appointments(client, doctor, patient, admin):
    book(client, patient, doctor)

    users = client.get("/api/admin/users", headers=auth_headers(admin)).json()
    assert users["count"] == 3
    assert all("passwordHash" not in u for u in users["data"])

    appointments = client.get("/api/admin/appointments", headers=auth_headers(admin)).json()
    assert appointments["count"] == 1


def test_dashboard_stats(client, db_session, make_doctor, make_user, admin):
    cardiologist = make_doctor(fees=500)
    make_doctor(name="Dr. Pending", status=DoctorStatus.PENDING)
    patient = make_user(name="Pat")
    first = book(client, patient, cardiologist, date=MONDAY).json()["data"]["id"]
    book(client, patient, cardiologist, date=TUESDAY, start="14:00")

    paid = db_session.get(Appointment, first)
    paid.payment_status = PaymentStatus.PAID
    db_session.commit()

    response = client.get("/api/admin/stats", headers=auth_headers(admin))

    assert response.status_code == 200
    stats = response.json()["data"]
    # Pat plus the pending applicant, who is still a patient
    assert stats["totalUsers"] == 2
    assert stats["totalDoctors"] == 1
    assert stats["pendingDoctors"] == 1
    assert stats["totalAppointments"] == 2
    assert stats["todayAppointments"] == 2
    assert stats["totalRevenue"] == 500


def test_admin_edits_profile_with_re_review(client, doctor, admin):
    response = client.put(
        f"/api/admin/doctors/{doctor.id}/profile",
        json={"specialization": "Oncology", "experience": 20},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["specialization"] == "Oncology"
    assert data["experience"] == 20
    assert data["status"] == "pending"
