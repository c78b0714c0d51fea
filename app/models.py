import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import relationship

from .database import Base


def generate_public_id():
    """Generate a unique opaque ID"""
    return str(uuid.uuid4())


def utcnow():
    """Naive UTC timestamp, matching the DateTime columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class Role:
    PATIENT = "patient"
    DOCTOR = "doctor"
    ADMIN = "admin"


class DoctorStatus:
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AppointmentStatus:
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    ACTIVE = (PENDING, APPROVED)
    TERMINAL = (REJECTED, COMPLETED, CANCELLED)


class PaymentStatus:
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class NotificationKind:
    APPOINTMENT = "appointment"
    APPROVAL = "approval"
    REMINDER = "reminder"
    CANCELLATION = "cancellation"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_public_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)  # stored lower-cased
    phone = Column(String(50), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), default=Role.PATIENT, nullable=False)  # patient, doctor, admin
    # Set once the account applies; role is what authorization checks
    is_doctor = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    doctor_profile = relationship("Doctor", back_populates="user", uselist=False)
    notifications = relationship(
        "Notification",
        back_populates="user",
        order_by="Notification.occurred_at.desc()",
        cascade="all, delete-orphan",
    )


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_public_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    kind = Column(String(20), nullable=False)  # appointment, approval, reminder, cancellation
    message = Column(Text, nullable=False)
    read = Column(Boolean, default=False, nullable=False)
    occurred_at = Column(DateTime, default=utcnow, nullable=False)
    appointment_id = Column(String(36), nullable=True)  # weak reference, no FK

    user = relationship("User", back_populates="notifications")


class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(String(36), primary_key=True, default=generate_public_id)
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)

    # Address
    street = Column(String(255), nullable=True)
    city = Column(String(255), nullable=True, index=True)
    state = Column(String(255), nullable=True)
    zip_code = Column(String(20), nullable=True)
    full_address = Column(String(500), nullable=True)

    # Filled in after registration, required before approval
    specialization = Column(String(255), nullable=True, index=True)
    experience = Column(Integer, nullable=True)  # years
    fees = Column(Float, nullable=True)

    # {"monday": {"start": "09:00", "end": "12:00", "available": true}, ...}
    timings = Column(JSON, default=dict, nullable=True)
    status = Column(String(20), default=DoctorStatus.PENDING, nullable=False, index=True)
    qualifications = Column(JSON, default=list, nullable=True)  # [{degree, institution, year}]
    profile_image = Column(String(500), default="default-doctor.png")
    bio = Column(String(500), nullable=True)
    rating = Column(Float, default=0, nullable=False)
    total_reviews = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="doctor_profile")
    appointments = relationship("Appointment", back_populates="doctor")

    @property
    def address(self) -> dict:
        return {
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zipCode": self.zip_code,
            "fullAddress": self.full_address,
        }

    @property
    def is_bookable(self) -> bool:
        return self.status == DoctorStatus.APPROVED and bool((self.specialization or "").strip())


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        # At most one active booking per doctor, day and start time
        Index(
            "uq_appointments_active_slot",
            "doctor_id",
            "day",
            "start_time",
            unique=True,
            sqlite_where=text("status IN ('pending', 'approved')"),
            postgresql_where=text("status IN ('pending', 'approved')"),
        ),
    )

    id = Column(String(36), primary_key=True, default=generate_public_id)
    doctor_id = Column(String(36), ForeignKey("doctors.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # Snapshots taken at booking time, never rewritten
    doctor_info = Column(JSON, nullable=False)  # {name, specialization, fees}
    user_info = Column(JSON, nullable=False)  # {name, email, phone}

    date = Column(DateTime, nullable=False)  # as requested
    day = Column(Date, nullable=False)  # day bucket used for conflict checks
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)

    documents = Column(JSON, default=list, nullable=False)  # [{filename, path, uploadedAt}]
    status = Column(String(20), default=AppointmentStatus.PENDING, nullable=False, index=True)
    payment_status = Column(String(20), default=PaymentStatus.PENDING, nullable=False)
    reason = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)  # doctor notes
    cancellation_reason = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    doctor = relationship("Doctor", back_populates="appointments")
    user = relationship("User")

    @property
    def time_slot(self) -> dict:
        return {"start": self.start_time, "end": self.end_time}
