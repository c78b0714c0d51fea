"""Account service - registration, login and self-service profile"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...errors import Conflict, Unauthenticated
from ...models import Doctor, NotificationKind, Role, User
from ...security_utils import create_access_token, hash_password, verify_password
from ..doctors.repository import DoctorRepository
from ..notifications.service import NotificationService
from .repository import AccountRepository
from .schemas import LoginRequest, ProfileUpdateRequest, RegisterRequest

logger = logging.getLogger(__name__)


class AccountService:
    """Service layer for account operations"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AccountRepository()
        self.doctors = DoctorRepository()
        self.notifications = NotificationService(db)

    def register(self, data: RegisterRequest) -> tuple[User, str]:
        """
        Create a patient account and return it with a token.

        Every account starts as a patient. With is_doctor, a minimal pending
        doctor profile is created in the same transaction and admins are told.
        """
        if self.repo.get_by_email(self.db, data.email):
            raise Conflict("User already exists")

        try:
            user = self.repo.add(
                self.db,
                name=data.name,
                email=data.email,
                phone=data.phone,
                password_hash=hash_password(data.password),
                role=Role.PATIENT,
                is_doctor=data.is_doctor,
            )
            if data.is_doctor:
                self.doctors.create(
                    self.db,
                    user.id,
                    commit=False,
                    full_name=data.name,
                    email=data.email,
                    phone=data.phone,
                )
            self.db.commit()
            self.db.refresh(user)
        except IntegrityError:
            self.db.rollback()
            raise Conflict("User already exists")

        logger.info(f"✅ Account registered: {user.email} (doctor applicant: {user.is_doctor})")

        if data.is_doctor:
            self.notifications.notify_admins(
                NotificationKind.APPROVAL, f"New doctor application from {user.name}"
            )

        return user, create_access_token(user.id)

    def login(self, data: LoginRequest) -> tuple[User, str, Optional[str]]:
        """Returns the account, a token and the doctor review status if it applied"""
        user = self.repo.get_by_email(self.db, data.email)
        if not user or not verify_password(data.password, user.password_hash):
            logger.warning(f"⚠️ Failed login attempt for {data.email}")
            raise Unauthenticated("Invalid email or password")

        doctor_status = None
        if user.is_doctor or user.role == Role.DOCTOR:
            doctor = self.doctors.get_by_user_id(self.db, user.id)
            doctor_status = doctor.status if doctor else None

        logger.info(f"🔐 User logged in: {user.email}")
        return user, create_access_token(user.id), doctor_status

    def get_profile(self, user: User) -> tuple[User, Optional[Doctor]]:
        return user, self.doctors.get_by_user_id(self.db, user.id)

    def update_profile(self, user: User, data: ProfileUpdateRequest) -> tuple[User, str]:
        """Name, phone and password only; email and role are not self-service"""
        updates = {"name": data.name, "phone": data.phone}
        if data.password:
            updates["password_hash"] = hash_password(data.password)

        user = self.repo.update(self.db, user, **updates)
        logger.info(f"✅ Profile updated for {user.email}")
        return user, create_access_token(user.id)
