"""
Notification Fan-out Service
Appends human-readable event records to account notification logs.

Fan-out is best-effort: callers commit their own change first, then notify.
A failure here is logged and swallowed so it can never fail or roll back
the operation that triggered it.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Service layer for notification fan-out and the read path"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository()

    def notify(
        self,
        user_id: Optional[str],
        kind: str,
        message: str,
        appointment_id: Optional[str] = None,
    ) -> bool:
        """Single best-effort attempt. Returns whether the notification was stored."""
        if not user_id:
            logger.debug(f"⚠️ No recipient for {kind} notification, skipping")
            return False

        try:
            if not self.repo.get_user(self.db, user_id):
                logger.warning(f"⚠️ {kind} notification dropped: user {user_id} not found")
                return False
            self.repo.add(self.db, user_id, kind, message, appointment_id)
            logger.info(f"🔔 {kind} notification sent to user {user_id}")
            return True
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to send {kind} notification to user {user_id}: {e}")
            return False

    def notify_admins(self, kind: str, message: str) -> int:
        """Notify every admin account. Returns how many were notified."""
        try:
            admin_ids = self.repo.get_admin_ids(self.db)
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to look up admins for {kind} notification: {e}")
            return 0
        return sum(1 for admin_id in admin_ids if self.notify(admin_id, kind, message))

    def list_notifications(self, user_id: str) -> list[Notification]:
        return self.repo.list_for_user(self.db, user_id)

    def unread_count(self, user_id: str) -> int:
        return self.repo.unread_count(self.db, user_id)

    def mark_read(self, user_id: str, notification_id: str) -> None:
        """Idempotent: unknown or already-read notifications are a no-op"""
        notification = self.repo.get_for_user(self.db, user_id, notification_id)
        if notification and not notification.read:
            self.repo.mark_read(self.db, notification)

    def mark_all_read(self, user_id: str) -> int:
        return self.repo.mark_all_read(self.db, user_id)
