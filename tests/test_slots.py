from datetime import date

import pytest
from conftest import MONDAY, auth_headers, book

from app.domain.appointments.slots import generate_slots, slot_end

WEEK = {
    "monday": {"start": "09:00", "end": "12:00", "available": True},
    "tuesday": {"start": "09:00", "end": "10:15", "available": True},
    "wednesday": {"start": "09:00", "end": "12:00", "available": False},
    "thursday": {"start": None, "end": "12:00", "available": True},
}


def test_monday_morning_gives_six_half_hour_slots():
    assert generate_slots(WEEK, date(2030, 1, 7)) == [
        "09:00",
        "09:30",
        "10:00",
        "10:30",
        "11:00",
        "11:30",
    ]


def test_end_time_is_exclusive():
    assert generate_slots(WEEK, date(2030, 1, 8)) == ["09:00", "09:30", "10:00"]


@pytest.mark.parametrize(
    "day",
    [
        date(2030, 1, 9),  # unavailable
        date(2030, 1, 10),  # no start time
        date(2030, 1, 11),  # not in timings
    ],
)
def test_days_without_hours_have_no_slots(day):
    assert generate_slots(WEEK, day) == []


def test_no_timings_means_no_slots():
    assert generate_slots(None, date(2030, 1, 7)) == []
    assert generate_slots({}, date(2030, 1, 7)) == []


def test_slot_end_is_thirty_minutes_later():
    assert slot_end("09:00") == "09:30"
    assert slot_end("10:45") == "11:15"
    with pytest.raises(ValueError):
        slot_end("23:30")


def test_slots_endpoint_lists_free_and_booked(client, doctor, patient):
    book(client, patient, doctor, start="10:00")

    response = client.get(f"/api/doctors/{doctor.id}/slots", params={"date": MONDAY})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["weekday"] == "monday"
    assert data["available"] is True
    assert len(data["slots"]) == 6
    assert data["booked"] == ["10:00"]


def test_slots_endpoint_requires_a_date(client, doctor):
    response = client.get(f"/api/doctors/{doctor.id}/slots")

    assert response.status_code == 400
    assert response.json()["message"] == "Date is required"


def test_slots_endpoint_for_unknown_doctor(client, patient):
    response = client.get("/api/doctors/missing/slots", params={"date": MONDAY}, headers=auth_headers(patient))

    assert response.status_code == 404


def test_malformed_stored_hours_mean_no_slots():
    timings = {
        "monday": {"start": "9am", "end": "12:00", "available": True},
        "tuesday": {"start": "09:00", "end": "25:00", "available": True},
    }

    assert generate_slots(timings, date(2030, 1, 7)) == []
    assert generate_slots(timings, date(2030, 1, 8)) == []


def test_slots_endpoint_with_malformed_stored_hours(client, make_doctor):
    doctor = make_doctor(timings={"monday": {"start": "9am", "end": "12:00", "available": True}})

    response = client.get(f"/api/doctors/{doctor.id}/slots", params={"date": MONDAY})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["slots"] == []
    assert data["available"] is False
