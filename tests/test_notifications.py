from conftest import auth_headers, book

from app.domain.notifications.repository import NotificationRepository
from app.domain.notifications.service import NotificationService
from app.models import Appointment, Notification, Role, User


def test_list_notifications_newest_first_with_unread_count(client, db_session, doctor, patient):
    owner = db_session.get(User, doctor.user_id)
    first = book(client, patient, doctor, start="09:00").json()["data"]["id"]
    book(client, patient, doctor, start="09:30")
    client.put(f"/api/appointments/{first}/cancel", headers=auth_headers(patient))

    response = client.get("/api/auth/notifications", headers=auth_headers(owner))

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 3
    assert body["unreadCount"] == 3
    assert [n["kind"] for n in body["data"]] == ["cancellation", "appointment", "appointment"]
    assert body["data"][0]["message"] == "Appointment cancelled by Pat Patient"
    assert body["data"][0]["read"] is False


def test_mark_read_is_idempotent(client, db_session, doctor, patient):
    owner = db_session.get(User, doctor.user_id)
    book(client, patient, doctor)
    headers = auth_headers(owner)
    notification_id = client.get("/api/auth/notifications", headers=headers).json()["data"][0]["id"]

    for _ in range(2):
        response = client.put(f"/api/auth/notifications/{notification_id}", headers=headers)
        assert response.status_code == 200

    body = client.get("/api/auth/notifications", headers=headers).json()
    assert body["data"][0]["read"] is True
    assert body["unreadCount"] == 0


def test_mark_read_unknown_or_foreign_id_is_noop(client, db_session, doctor, patient):
    book(client, patient, doctor)
    foreign_id = db_session.query(Notification).filter(Notification.user_id == doctor.user_id).one().id

    assert client.put("/api/auth/notifications/unknown", headers=auth_headers(patient)).status_code == 200
    assert client.put(f"/api/auth/notifications/{foreign_id}", headers=auth_headers(patient)).status_code == 200

    db_session.expire_all()
    assert db_session.get(Notification, foreign_id).read is False


def test_mark_all_read(client, db_session, doctor, patient):
    owner = db_session.get(User, doctor.user_id)
    book(client, patient, doctor, start="09:00")
    book(client, patient, doctor, start="09:30")
    headers = auth_headers(owner)

    response = client.put("/api/auth/notifications/read-all", headers=headers)

    assert response.status_code == 200
    assert response.json()["message"] == "2 notification(s) marked as read"
    assert client.get("/api/auth/notifications", headers=headers).json()["unreadCount"] == 0


def test_notification_failure_never_fails_the_booking(client, db_session, doctor, patient, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("notification store down")

    monkeypatch.setattr(NotificationRepository, "add", staticmethod(boom))

    response = book(client, patient, doctor)

    assert response.status_code == 201
    appointment = db_session.get(Appointment, response.json()["data"]["id"])
    assert appointment is not None
    assert db_session.query(Notification).count() == 0


def test_notification_failure_never_fails_a_cancel(client, db_session, doctor, patient, monkeypatch):
    appointment_id = book(client, patient, doctor).json()["data"]["id"]

    def boom(*args, **kwargs):
        raise RuntimeError("notification store down")

    monkeypatch.setattr(NotificationRepository, "add", staticmethod(boom))

    response = client.put(f"/api/appointments/{appointment_id}/cancel", headers=auth_headers(patient))

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "cancelled"


def test_notify_skips_missing_recipient(db_session):
    service = NotificationService(db_session)

    assert service.notify(None, "appointment", "hello") is False
    assert service.notify("no-such-user", "appointment", "hello") is False
    assert db_session.query(Notification).count() == 0


def test_notify_admins_reaches_every_admin(db_session, make_user):
    admins = [make_user(name=f"Admin {i}", role=Role.ADMIN) for i in range(2)]
    make_user(name="Not Admin")

    assert NotificationService(db_session).notify_admins("approval", "New doctor application from X") == 2
    for admin in admins:
        assert db_session.query(Notification).filter(Notification.user_id == admin.id).count() == 1
