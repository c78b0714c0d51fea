"""Doctor service - Business logic for the provider directory and doctor review"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...errors import Conflict, InvalidState, NotFound, ValidationError
from ...models import Doctor, DoctorStatus, NotificationKind, Role, User
from ...shared.validators import parse_date
from ..appointments.repository import AppointmentRepository
from ..appointments.slots import generate_slots, weekday_name
from ..notifications.service import NotificationService
from .repository import DoctorRepository
from .schemas import DoctorApply, DoctorProfileFields, DoctorUpdate

logger = logging.getLogger(__name__)

ADDRESS_FIELDS = ("street", "city", "state", "zip_code", "full_address")


def profile_columns(data: DoctorProfileFields) -> dict:
    """Flatten a profile payload into Doctor column values (only fields sent)"""
    fields = data.model_dump(exclude_unset=True)
    columns = {}

    for key in ("full_name", "phone", "specialization", "experience", "fees", "bio"):
        if key in fields:
            columns[key] = fields[key]

    address = fields.get("address")
    if address:
        for key in ADDRESS_FIELDS:
            if key in address:
                columns[key] = address[key]

    if data.timings is not None:
        columns["timings"] = data.timings.model_dump(mode="json")
    if data.qualifications is not None:
        columns["qualifications"] = [q.model_dump(mode="json") for q in data.qualifications]

    return columns


class DoctorService:
    """Service layer for doctor profile operations"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = DoctorRepository()
        self.appointments = AppointmentRepository()
        self.notifications = NotificationService(db)

    def get_doctor(self, doctor_id: str) -> Doctor:
        """Any status; the directory page links here"""
        doctor = self.repo.get_by_id(self.db, doctor_id)
        if not doctor:
            raise NotFound("Doctor not found")
        return doctor

    def search_doctors(
        self,
        specialization: Optional[str] = None,
        city: Optional[str] = None,
        min_experience: Optional[int] = None,
        max_fees: Optional[float] = None,
    ) -> list[Doctor]:
        return self.repo.search(self.db, specialization, city, min_experience, max_fees)

    def get_available_slots(self, doctor_id: str, on_date: Optional[str]) -> dict:
        """Slots from the weekly timings for one date, plus the ones already taken"""
        doctor = self.get_doctor(doctor_id)
        try:
            requested = parse_date(on_date)
        except ValueError as e:
            raise ValidationError(str(e))

        slots = generate_slots(doctor.timings, requested)
        booked = self.appointments.booked_start_times(self.db, doctor.id, requested.date())
        return {
            "doctor_id": doctor.id,
            "date": requested.date(),
            "weekday": weekday_name(requested),
            "available": bool(slots) and doctor.is_bookable,
            "slots": slots,
            "booked": booked,
        }

    def get_own_profile(self, user: User) -> Doctor:
        doctor = self.repo.get_by_user_id(self.db, user.id)
        if not doctor:
            raise NotFound("Doctor profile not found")
        return doctor

    def apply(self, user: User, data: DoctorApply) -> Doctor:
        """Create a pending profile for the account and tell the admins"""
        if self.repo.get_by_user_id(self.db, user.id):
            raise Conflict("You have already applied")

        columns = profile_columns(data)
        columns.setdefault("full_name", user.name)
        columns.setdefault("phone", user.phone)

        try:
            doctor = self.repo.create(self.db, user.id, commit=False, email=user.email, **columns)
            user.is_doctor = True
            self.db.commit()
            self.db.refresh(doctor)
        except IntegrityError:
            self.db.rollback()
            raise Conflict("You have already applied")

        logger.info(f"✅ Doctor application {doctor.id} submitted by user {user.id}")
        self.notifications.notify_admins(
            NotificationKind.APPROVAL, f"New doctor application from {user.name}"
        )
        return doctor

    def update_profile(self, doctor: Doctor, data: DoctorUpdate) -> Doctor:
        """
        Apply a partial profile update.

        A new specialization on an approved profile sends it back for review;
        no other field touches the review status.
        """
        columns = profile_columns(data)

        new_specialization = columns.get("specialization")
        if (
            new_specialization
            and new_specialization != (doctor.specialization or "")
            and doctor.status == DoctorStatus.APPROVED
        ):
            columns["status"] = DoctorStatus.PENDING
            logger.info(
                f"🔄 Doctor {doctor.id} specialization changed to '{new_specialization}', back to pending review"
            )

        doctor = self.repo.update(self.db, doctor, **columns)
        logger.info(f"✅ Doctor profile {doctor.id} updated")
        return doctor

    def update_own_profile(self, user: User, data: DoctorUpdate) -> Doctor:
        return self.update_profile(self.get_own_profile(user), data)

    def list_doctors(self, status: Optional[str] = None) -> list[Doctor]:
        return self.repo.list_all(self.db, status)

    def review_application(
        self, doctor_id: str, status: Optional[str], rejection_reason: Optional[str] = None
    ) -> Doctor:
        """Approve or reject an application, moving the account's role with it"""
        if not status:
            raise ValidationError("Status is required")
        if status not in (DoctorStatus.APPROVED, DoctorStatus.REJECTED):
            raise ValidationError('Status must be either "approved" or "rejected"')

        doctor = self.get_doctor(doctor_id)

        if status == DoctorStatus.APPROVED:
            if not (doctor.specialization or "").strip():
                raise InvalidState("Doctor must have a specialization before approval")
            role, is_doctor = Role.DOCTOR, True
            message = "Your doctor application has been approved!"
        else:
            role, is_doctor = Role.PATIENT, False
            message = (
                "Your doctor application has been rejected. "
                f"Reason: {rejection_reason or 'Not specified by admin'}"
            )

        doctor.status = status
        self.repo.set_user_role(self.db, doctor.user_id, role, is_doctor)
        self.db.commit()
        self.db.refresh(doctor)

        logger.info(f"✅ Doctor {doctor.id} {status}, account {doctor.user_id} role set to {role}")

        self.notifications.notify(doctor.user_id, NotificationKind.APPROVAL, message)
        return doctor
