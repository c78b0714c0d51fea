"""Admin service - platform-wide reads and the dashboard numbers"""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from ...models import Appointment, DoctorStatus, Role, User, utcnow
from ..accounts.repository import AccountRepository
from ..appointments.repository import AppointmentRepository
from ..doctors.repository import DoctorRepository

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, db: Session):
        self.db = db
        self.accounts = AccountRepository()
        self.doctors = DoctorRepository()
        self.appointments = AppointmentRepository()

    def list_users(self) -> list[User]:
        return self.accounts.list_all(self.db)

    def list_appointments(self) -> list[Appointment]:
        return self.appointments.list_all(self.db)

    def dashboard_stats(self) -> dict:
        """
        Headline counts for the admin dashboard.

        Revenue is the sum of the fee snapshots of paid bookings, so later fee
        changes on a profile never rewrite past revenue.
        """
        today = utcnow().date()
        start_of_today = datetime(today.year, today.month, today.day)

        revenue = sum(
            float((a.doctor_info or {}).get("fees") or 0) for a in self.appointments.list_paid(self.db)
        )

        stats = {
            "total_users": self.accounts.count_by_role(self.db, Role.PATIENT),
            "total_doctors": self.doctors.count_by_status(self.db, DoctorStatus.APPROVED),
            "pending_doctors": self.doctors.count_by_status(self.db, DoctorStatus.PENDING),
            "total_appointments": self.appointments.count_all(self.db),
            "today_appointments": self.appointments.count_from(self.db, start_of_today),
            "total_revenue": revenue,
        }
        logger.debug(f"📊 Dashboard stats: {stats}")
        return stats
