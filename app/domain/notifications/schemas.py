"""Notification schemas"""

from datetime import datetime
from typing import Optional

from ...schemas import CamelModel


class NotificationResponse(CamelModel):
    id: str
    kind: str
    message: str
    read: bool
    occurred_at: datetime
    appointment_id: Optional[str] = None


class NotificationListResponse(CamelModel):
    success: bool = True
    count: int
    unread_count: int
    data: list[NotificationResponse]
