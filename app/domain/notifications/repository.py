"""Notification repository - Database operations for account notifications"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Notification, Role, User


class NotificationRepository:
    """Repository for notification database operations"""

    @staticmethod
    def add(
        db: Session,
        user_id: str,
        kind: str,
        message: str,
        appointment_id: Optional[str] = None,
    ) -> Notification:
        """Append a notification to an account's log"""
        notification = Notification(
            user_id=user_id,
            kind=kind,
            message=message,
            appointment_id=appointment_id,
        )
        db.add(notification)
        db.commit()
        db.refresh(notification)
        return notification

    @staticmethod
    def list_for_user(db: Session, user_id: str) -> list[Notification]:
        """Newest first"""
        return (
            db.query(Notification)
            .filter(Notification.user_id == user_id)
            .order_by(Notification.occurred_at.desc())
            .all()
        )

    @staticmethod
    def get_for_user(db: Session, user_id: str, notification_id: str) -> Optional[Notification]:
        return (
            db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .first()
        )

    @staticmethod
    def mark_read(db: Session, notification: Notification) -> Notification:
        notification.read = True
        db.commit()
        db.refresh(notification)
        return notification

    @staticmethod
    def mark_all_read(db: Session, user_id: str) -> int:
        updated = (
            db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.read.is_(False))
            .update({Notification.read: True}, synchronize_session=False)
        )
        db.commit()
        return updated

    @staticmethod
    def unread_count(db: Session, user_id: str) -> int:
        return (
            db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.read.is_(False))
            .count()
        )

    @staticmethod
    def get_user(db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_admin_ids(db: Session) -> list[str]:
        return [row.id for row in db.query(User.id).filter(User.role == Role.ADMIN).all()]
