"""Doctor repository - Database operations for doctor profiles"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Doctor, DoctorStatus, Role, User


class DoctorRepository:
    """Repository for doctor profile database operations"""

    @staticmethod
    def get_by_id(db: Session, doctor_id: str) -> Optional[Doctor]:
        return db.query(Doctor).filter(Doctor.id == doctor_id).first()

    @staticmethod
    def get_by_user_id(db: Session, user_id: str) -> Optional[Doctor]:
        return db.query(Doctor).filter(Doctor.user_id == user_id).first()

    @staticmethod
    def create(db: Session, user_id: str, commit: bool = True, **doctor_data) -> Doctor:
        """Create a doctor profile (pending review)"""
        doctor = Doctor(user_id=user_id, status=DoctorStatus.PENDING, **doctor_data)
        db.add(doctor)
        if commit:
            db.commit()
            db.refresh(doctor)
        return doctor

    @staticmethod
    def update(db: Session, doctor: Doctor, **updates) -> Doctor:
        """Update a doctor with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(doctor, key):
                setattr(doctor, key, value)

        db.commit()
        db.refresh(doctor)
        return doctor

    @staticmethod
    def set_user_role(db: Session, user_id: str, role: str, is_doctor: bool) -> Optional[User]:
        """Stage a role change on the owning account; committed by the caller. Admins keep their role."""
        user = db.query(User).filter(User.id == user_id).first()
        if user:
            if user.role != Role.ADMIN:
                user.role = role
            user.is_doctor = is_doctor
        return user

    @staticmethod
    def search(
        db: Session,
        specialization: Optional[str] = None,
        city: Optional[str] = None,
        min_experience: Optional[int] = None,
        max_fees: Optional[float] = None,
    ) -> list[Doctor]:
        """Approved doctors matching every given filter, best rated first"""
        query = db.query(Doctor).filter(Doctor.status == DoctorStatus.APPROVED)

        if specialization:
            query = query.filter(Doctor.specialization.ilike(f"%{specialization.strip()}%"))

        if city:
            query = query.filter(Doctor.city.ilike(f"%{city.strip()}%"))

        if min_experience is not None:
            query = query.filter(Doctor.experience >= min_experience)

        if max_fees is not None:
            query = query.filter(Doctor.fees <= max_fees)

        return query.order_by(Doctor.rating.desc(), Doctor.created_at.desc()).all()

    @staticmethod
    def list_all(db: Session, status: Optional[str] = None) -> list[Doctor]:
        """All doctors, newest first, optionally filtered by review status"""
        query = db.query(Doctor)
        if status:
            query = query.filter(Doctor.status == status)
        return query.order_by(Doctor.created_at.desc()).all()

    @staticmethod
    def count_by_status(db: Session, status: str) -> int:
        return db.query(Doctor).filter(Doctor.status == status).count()
