"""Account repository - Database operations for user accounts"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Role, User


class AccountRepository:
    """Repository for account database operations"""

    @staticmethod
    def get_by_id(db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        """Case-insensitive lookup"""
        return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()

    @staticmethod
    def add(db: Session, **user_data) -> User:
        """Stage a new account and flush so its id is assigned; committed by the caller"""
        user = User(**user_data)
        db.add(user)
        db.flush()
        return user

    @staticmethod
    def update(db: Session, user: User, **updates) -> User:
        for key, value in updates.items():
            if value is not None and hasattr(user, key):
                setattr(user, key, value)

        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def list_all(db: Session) -> list[User]:
        return db.query(User).order_by(User.created_at.desc()).all()

    @staticmethod
    def count_by_role(db: Session, role: str = Role.PATIENT) -> int:
        return db.query(User).filter(User.role == role).count()
