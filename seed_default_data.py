"""
Seed a database with demo accounts, approved doctors and a few bookings.
Usage: python seed_default_data.py [--yes]

WARNING: wipes every user, doctor, appointment and notification first.
"""
import logging
import sys
from datetime import date, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from app import database
from app.domain.accounts.schemas import RegisterRequest
from app.domain.accounts.service import AccountService
from app.domain.appointments.schemas import AppointmentStatusUpdate, BookingRequest
from app.domain.appointments.service import AppointmentService
from app.domain.doctors.schemas import DoctorUpdate
from app.domain.doctors.service import DoctorService
from app.models import Appointment, Doctor, Notification, PaymentStatus, Role, User

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)

USER_PASSWORD = "password123"
ADMIN_PASSWORD = "Admin@123"

PATIENTS = [
    ("John Smith", "john.smith@example.com", "+1 (555) 123-4567"),
    ("Emma Watson", "emma.watson@example.com", "+1 (555) 234-5678"),
    ("Robert Johnson", "robert.johnson@example.com", "+1 (555) 345-6789"),
    ("Sophia Martinez", "sophia.martinez@example.com", "+1 (555) 456-7890"),
]

WEEKDAYS_9_TO_5 = {
    day: {"start": "09:00", "end": "17:00", "available": True}
    for day in ("monday", "tuesday", "wednesday", "thursday", "friday")
}

DOCTORS = [
    {
        "name": "Dr. Sarah Johnson",
        "email": "sarah.johnson@doctor.com",
        "phone": "+1 (555) 567-8901",
        "profile": {
            "specialization": "Cardiologist",
            "experience": 15,
            "fees": 150,
            "address": {
                "street": "123 Heart Center",
                "city": "New York",
                "state": "NY",
                "zipCode": "10001",
                "fullAddress": "123 Heart Center, New York, NY 10001",
            },
            "bio": "Board-certified cardiologist focused on preventive cardiology and heart disease management.",
            "qualifications": [
                {"degree": "MD - Cardiology", "institution": "Harvard Medical School", "year": 2008},
                {"degree": "MBBS", "institution": "Johns Hopkins University", "year": 2004},
            ],
            "timings": {**WEEKDAYS_9_TO_5, "saturday": {"start": "10:00", "end": "14:00", "available": True}},
        },
        "rating": 4.8,
        "total_reviews": 127,
    },
    {
        "name": "Dr. Michael Chen",
        "email": "michael.chen@doctor.com",
        "phone": "+1 (555) 678-9012",
        "profile": {
            "specialization": "Dermatologist",
            "experience": 12,
            "fees": 120,
            "address": {
                "street": "456 Skin Care Blvd",
                "city": "Los Angeles",
                "state": "CA",
                "zipCode": "90001",
                "fullAddress": "456 Skin Care Blvd, Los Angeles, CA 90001",
            },
            "bio": "Medical and cosmetic dermatologist: acne treatment, skin cancer screening and more.",
            "qualifications": [
                {"degree": "MD - Dermatology", "institution": "Stanford University", "year": 2011},
            ],
            "timings": {
                **{day: {"start": "10:00", "end": "18:00", "available": True} for day in WEEKDAYS_9_TO_5},
                "friday": {"start": "10:00", "end": "16:00", "available": True},
            },
        },
        "rating": 4.9,
        "total_reviews": 98,
    },
    {
        "name": "Dr. Emily Rodriguez",
        "email": "emily.rodriguez@doctor.com",
        "phone": "+1 (555) 789-0123",
        "profile": {
            "specialization": "Pediatrician",
            "experience": 10,
            "fees": 130,
            "address": {
                "street": "789 Children's Way",
                "city": "Chicago",
                "state": "IL",
                "zipCode": "60601",
                "fullAddress": "789 Children's Way, Chicago, IL 60601",
            },
            "bio": "Pediatrician caring for children from infancy through adolescence.",
            "qualifications": [
                {"degree": "MD - Pediatrics", "institution": "Northwestern University", "year": 2013},
            ],
            "timings": {
                **{day: {"start": "08:00", "end": "16:00", "available": True} for day in WEEKDAYS_9_TO_5},
                "friday": {"start": "08:00", "end": "14:00", "available": True},
            },
        },
        "rating": 4.7,
        "total_reviews": 156,
    },
]

# (doctor email, patient email, days from next Monday, start, reason, final status, paid)
BOOKINGS = [
    ("sarah.johnson@doctor.com", "john.smith@example.com", 0, "10:30", "Annual heart checkup", "approved", True),
    ("michael.chen@doctor.com", "emma.watson@example.com", 1, "14:00", "Skin rash consultation", None, False),
    ("emily.rodriguez@doctor.com", "sophia.martinez@example.com", 2, "09:30", "Child wellness check", "completed", True),
    ("sarah.johnson@doctor.com", "robert.johnson@example.com", 3, "11:00", "Chest pain follow-up", "cancelled", False),
]


def clear_data(db):
    logger.info("🧹 Clearing existing data...")
    for model in (Notification, Appointment, Doctor, User):
        deleted = db.query(model).delete()
        logger.info(f"   - Deleted {deleted} {model.__tablename__}")
    db.commit()


def seed(db):
    accounts = AccountService(db)
    doctors = DoctorService(db)
    appointments = AppointmentService(db)

    logger.info("\n📝 Step 1: Creating accounts...")
    admin, _ = accounts.register(
        RegisterRequest(name="Admin User", email="admin@docspot.com", password=ADMIN_PASSWORD, phone="5550000000")
    )
    admin.role = Role.ADMIN
    db.commit()

    users = {}
    for name, email, phone in PATIENTS:
        user, _ = accounts.register(RegisterRequest(name=name, email=email, password=USER_PASSWORD, phone=phone))
        users[email] = user
    logger.info(f"   ✅ {len(PATIENTS)} patients and 1 admin")

    logger.info("\n👨‍⚕️ Step 2: Creating and approving doctors...")
    profiles = {}
    for entry in DOCTORS:
        user, _ = accounts.register(
            RegisterRequest(
                name=entry["name"], email=entry["email"], password=USER_PASSWORD, phone=entry["phone"], is_doctor=True
            )
        )
        doctor = doctors.get_own_profile(user)
        doctor = doctors.update_profile(doctor, DoctorUpdate.model_validate(entry["profile"]))
        doctor.rating = entry["rating"]
        doctor.total_reviews = entry["total_reviews"]
        db.commit()
        doctor = doctors.review_application(doctor.id, "approved")
        profiles[entry["email"]] = doctor
        logger.info(f"   - {doctor.full_name} ({doctor.specialization})")

    logger.info("\n📅 Step 3: Creating appointments...")
    today = date.today()
    next_monday = today + timedelta(days=7 - today.weekday())
    for doctor_email, patient_email, offset, start, reason, final_status, paid in BOOKINGS:
        doctor = profiles[doctor_email]
        patient = users[patient_email]
        appointment = appointments.book_appointment(
            patient,
            BookingRequest(
                doctor_id=doctor.id,
                date=(next_monday + timedelta(days=offset)).isoformat(),
                time_slot={"start": start},
                reason=reason,
            ),
        )
        if final_status == "cancelled":
            appointment = appointments.cancel_appointment(patient, appointment.id)
        elif final_status == "completed":
            appointments.update_appointment_status(admin, appointment.id, AppointmentStatusUpdate(status="approved"))
            appointment = appointments.update_appointment_status(
                admin, appointment.id, AppointmentStatusUpdate(status="completed")
            )
        elif final_status:
            appointment = appointments.update_appointment_status(
                admin, appointment.id, AppointmentStatusUpdate(status=final_status)
            )
        if paid:
            appointment.payment_status = PaymentStatus.PAID
            db.commit()
        logger.info(f"   - {patient.name} with {doctor.full_name}: {appointment.status}")

    logger.info("\n🔐 Login credentials:")
    logger.info(f"   Admin:    admin@docspot.com / {ADMIN_PASSWORD}")
    logger.info(f"   Others:   <email above> / {USER_PASSWORD}")


def main():
    if "--yes" not in sys.argv:
        answer = input("This deletes all existing data. Continue? [y/N] ")
        if answer.strip().lower() != "y":
            logger.info("Aborted")
            sys.exit(1)

    database.init_engine()
    database.create_tables()
    db = database.SessionLocal()
    try:
        clear_data(db)
        seed(db)
        logger.info("\n✅ Database seeding completed successfully!")
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Seeding failed: {e}")
        raise
    finally:
        db.close()
        database.dispose_engine()


if __name__ == "__main__":
    main()
