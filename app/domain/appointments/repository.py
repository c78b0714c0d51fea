"""Appointment repository - Database operations for the booking ledger"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, AppointmentStatus, PaymentStatus


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_by_id(db: Session, appointment_id: str) -> Optional[Appointment]:
        return db.query(Appointment).filter(Appointment.id == appointment_id).first()

    @staticmethod
    def create(db: Session, **appointment_data) -> Appointment:
        """Insert a booking. The active-slot unique index may reject it on commit."""
        appointment = Appointment(**appointment_data)
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def save(db: Session, appointment: Appointment) -> Appointment:
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def find_active_conflict(
        db: Session,
        doctor_id: str,
        day: date,
        start_time: str,
        exclude_id: Optional[str] = None,
    ) -> Optional[Appointment]:
        """An active (pending or approved) booking holding the same doctor/day/start"""
        query = db.query(Appointment).filter(
            Appointment.doctor_id == doctor_id,
            Appointment.day == day,
            Appointment.start_time == start_time,
            Appointment.status.in_(AppointmentStatus.ACTIVE),
        )
        if exclude_id:
            query = query.filter(Appointment.id != exclude_id)
        return query.first()

    @staticmethod
    def booked_start_times(db: Session, doctor_id: str, day: date) -> list[str]:
        rows = (
            db.query(Appointment.start_time)
            .filter(
                Appointment.doctor_id == doctor_id,
                Appointment.day == day,
                Appointment.status.in_(AppointmentStatus.ACTIVE),
            )
            .all()
        )
        return sorted(row[0] for row in rows)

    @staticmethod
    def list_for_user(db: Session, user_id: str) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.user_id == user_id)
            .order_by(Appointment.date.desc(), Appointment.start_time.desc())
            .all()
        )

    @staticmethod
    def list_for_doctor(db: Session, doctor_id: str) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.doctor_id == doctor_id)
            .order_by(Appointment.date.desc(), Appointment.start_time.desc())
            .all()
        )

    @staticmethod
    def list_all(db: Session) -> list[Appointment]:
        return db.query(Appointment).order_by(Appointment.created_at.desc()).all()

    @staticmethod
    def count_all(db: Session) -> int:
        return db.query(Appointment).count()

    @staticmethod
    def count_from(db: Session, since: datetime) -> int:
        return db.query(Appointment).filter(Appointment.date >= since).count()

    @staticmethod
    def list_paid(db: Session) -> list[Appointment]:
        return db.query(Appointment).filter(Appointment.payment_status == PaymentStatus.PAID).all()
