"""
Appointment service - the booking workflow.

Lifecycle:
    pending  -> approved | rejected | cancelled
    approved -> completed | cancelled
    completed, rejected and cancelled are terminal.

Every mutation commits first and notifies second; notification failures are
handled inside NotificationService and never reach the caller.
"""

import logging
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...config import MAX_DOCUMENTS_PER_APPOINTMENT
from ...errors import Conflict, Forbidden, InvalidState, NotFound, ValidationError
from ...models import (
    Appointment,
    AppointmentStatus,
    Doctor,
    NotificationKind,
    PaymentStatus,
    Role,
    User,
)
from ...shared.payloads import decode_json_value
from ...shared.validators import parse_date, time_to_minutes, validate_time
from ...storage import DocumentUpload, delete_document, store_document, validate_document
from ..doctors.repository import DoctorRepository
from ..notifications.service import NotificationService
from .repository import AppointmentRepository
from .schemas import AppointmentStatusUpdate, BookingRequest, RescheduleRequest
from .slots import slot_end

logger = logging.getLogger(__name__)

SLOT_TAKEN = "This time slot is already booked"
DEFAULT_CANCEL_REASON = "Cancelled by user"

# Targets a doctor may set; "pending" is only ever set by booking/rescheduling
DOCTOR_STATUS_TARGETS = (
    AppointmentStatus.APPROVED,
    AppointmentStatus.REJECTED,
    AppointmentStatus.COMPLETED,
    AppointmentStatus.CANCELLED,
)


def resolve_time_slot(raw: Any) -> tuple[str, str]:
    """
    Decode a requested time slot into (start, end).

    Accepts {"start", "end"?}, the same object as a JSON string, or a bare
    "HH:MM" start. A missing end is start + 30 minutes.
    """
    if raw is None or raw == "":
        raise ValidationError("Time slot is required")

    value = decode_json_value(raw, "time slot")
    if isinstance(value, str):
        value = {"start": value}
    if not isinstance(value, dict):
        raise ValidationError("Invalid time slot format")

    start = value.get("start")
    if not start:
        raise ValidationError("Time slot start time is required")

    try:
        start = validate_time(str(start))
        end = value.get("end")
        end = validate_time(str(end)) if end else slot_end(start)
    except ValueError as e:
        raise ValidationError(str(e))

    if time_to_minutes(end) <= time_to_minutes(start):
        raise ValidationError("Time slot end must be after its start")
    return start, end


def resolve_date(raw: Any):
    try:
        return parse_date(raw)
    except ValueError as e:
        raise ValidationError(str(e))


class AppointmentService:
    """Service layer for appointment operations"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()
        self.doctors = DoctorRepository()
        self.notifications = NotificationService(db)

    def _get_appointment(self, appointment_id: str) -> Appointment:
        appointment = self.repo.get_by_id(self.db, appointment_id)
        if not appointment:
            raise NotFound("Appointment not found")
        return appointment

    def _commit_slot_change(self, appointment: Appointment) -> Appointment:
        """Commit a change that may collide with the active-slot unique index"""
        try:
            return self.repo.save(self.db, appointment)
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"⚠️ Slot race lost for appointment {appointment.id}")
            raise Conflict(SLOT_TAKEN)

    def book_appointment(
        self,
        patient: User,
        data: BookingRequest,
        documents: Optional[list[DocumentUpload]] = None,
    ) -> Appointment:
        """Create a pending booking for an approved doctor's free slot"""
        if not data.doctor_id:
            raise ValidationError("Doctor ID is required")
        requested = resolve_date(data.date)
        start, end = resolve_time_slot(data.time_slot)

        documents = documents or []
        if len(documents) > MAX_DOCUMENTS_PER_APPOINTMENT:
            raise ValidationError(f"A maximum of {MAX_DOCUMENTS_PER_APPOINTMENT} documents can be uploaded")
        for document in documents:
            validate_document(document)

        doctor: Optional[Doctor] = self.doctors.get_by_id(self.db, data.doctor_id)
        if not doctor or not doctor.is_bookable:
            raise NotFound("Doctor not found or not approved")

        day = requested.date()
        if self.repo.find_active_conflict(self.db, doctor.id, day, start):
            raise Conflict(SLOT_TAKEN)

        stored = [store_document(document) for document in documents]

        try:
            appointment = self.repo.create(
                self.db,
                doctor_id=doctor.id,
                user_id=patient.id,
                doctor_info={
                    "name": doctor.full_name,
                    "specialization": doctor.specialization,
                    "fees": doctor.fees,
                },
                user_info={"name": patient.name, "email": patient.email, "phone": patient.phone},
                date=requested,
                day=day,
                start_time=start,
                end_time=end,
                documents=stored,
                status=AppointmentStatus.PENDING,
                payment_status=PaymentStatus.PENDING,
                reason=data.reason,
            )
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"⚠️ Slot race lost booking doctor {doctor.id} on {day} at {start}")
            for reference in stored:
                delete_document(reference)
            raise Conflict(SLOT_TAKEN)

        logger.info(f"✅ Appointment {appointment.id} booked with doctor {doctor.id} on {day} at {start}")
        self.notifications.notify(
            doctor.user_id,
            NotificationKind.APPOINTMENT,
            f"New appointment request from {patient.name}",
            appointment.id,
        )
        return appointment

    def list_user_appointments(self, user: User) -> list[Appointment]:
        return self.repo.list_for_user(self.db, user.id)

    def cancel_appointment(self, user: User, appointment_id: str, reason: Optional[str] = None) -> Appointment:
        appointment = self._get_appointment(appointment_id)

        if appointment.user_id != user.id and user.role != Role.ADMIN:
            raise Forbidden("Not authorized to cancel this appointment")

        if appointment.status == AppointmentStatus.COMPLETED:
            raise InvalidState("Cannot cancel completed appointment")
        if appointment.status in AppointmentStatus.TERMINAL:
            raise InvalidState(f"Cannot cancel {appointment.status} appointment")

        appointment.status = AppointmentStatus.CANCELLED
        appointment.cancellation_reason = reason or DEFAULT_CANCEL_REASON
        appointment = self.repo.save(self.db, appointment)

        logger.info(f"🚫 Appointment {appointment.id} cancelled by user {user.id}")
        self.notifications.notify(
            appointment.doctor.user_id if appointment.doctor else None,
            NotificationKind.CANCELLATION,
            f"Appointment cancelled by {user.name}",
            appointment.id,
        )
        return appointment

    def reschedule_appointment(self, user: User, appointment_id: str, data: RescheduleRequest) -> Appointment:
        """Move a live booking to a new date/slot and send it back to pending"""
        requested = resolve_date(data.date)
        start, end = resolve_time_slot(data.time_slot)

        appointment = self._get_appointment(appointment_id)
        if appointment.user_id != user.id:
            raise Forbidden("Not authorized to reschedule this appointment")

        if appointment.status in AppointmentStatus.TERMINAL:
            raise InvalidState(f"Cannot reschedule {appointment.status} appointment")

        day = requested.date()
        if self.repo.find_active_conflict(self.db, appointment.doctor_id, day, start, exclude_id=appointment.id):
            raise Conflict(SLOT_TAKEN)

        appointment.date = requested
        appointment.day = day
        appointment.start_time = start
        appointment.end_time = end
        appointment.status = AppointmentStatus.PENDING
        appointment = self._commit_slot_change(appointment)

        logger.info(f"🔄 Appointment {appointment.id} rescheduled to {day} at {start}")
        self.notifications.notify(
            appointment.doctor.user_id if appointment.doctor else None,
            NotificationKind.APPOINTMENT,
            f"Appointment rescheduled by {user.name}",
            appointment.id,
        )
        return appointment

    def _resolve_doctor_for(self, user: User, doctor_id: Optional[str] = None) -> Doctor:
        """The caller's own profile, or any profile when an admin names one"""
        if user.role == Role.ADMIN and doctor_id:
            doctor = self.doctors.get_by_id(self.db, doctor_id)
            if not doctor:
                raise NotFound("Doctor not found")
            return doctor

        doctor = self.doctors.get_by_user_id(self.db, user.id)
        if not doctor:
            raise NotFound("Doctor profile not found")
        return doctor

    def list_doctor_appointments(self, user: User, doctor_id: Optional[str] = None) -> list[Appointment]:
        doctor = self._resolve_doctor_for(user, doctor_id)
        return self.repo.list_for_doctor(self.db, doctor.id)

    def update_appointment_status(
        self, user: User, appointment_id: str, data: AppointmentStatusUpdate
    ) -> Appointment:
        """Doctor (or admin) moves a non-terminal booking to a new status"""
        if not data.status:
            raise ValidationError("Status is required")
        if data.status not in DOCTOR_STATUS_TARGETS:
            raise ValidationError(f"Invalid status. Must be one of: {', '.join(DOCTOR_STATUS_TARGETS)}")

        doctor = None if user.role == Role.ADMIN else self._resolve_doctor_for(user)
        appointment = self._get_appointment(appointment_id)

        if doctor and appointment.doctor_id != doctor.id:
            raise Forbidden("Not authorized to update this appointment")

        if appointment.status in AppointmentStatus.TERMINAL:
            raise InvalidState(f"Appointment is already {appointment.status}")

        previous = appointment.status
        appointment.status = data.status
        if data.notes is not None:
            appointment.notes = data.notes
        appointment = self.repo.save(self.db, appointment)

        logger.info(f"✅ Appointment {appointment.id} {previous} -> {appointment.status} by user {user.id}")
        self.notifications.notify(
            appointment.user_id,
            NotificationKind.APPOINTMENT,
            f"Your appointment on {appointment.date:%m/%d/%Y} has been {appointment.status} by the doctor",
            appointment.id,
        )
        return appointment
