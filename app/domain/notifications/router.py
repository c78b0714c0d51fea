"""Notification router - the polling read path for account notifications"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...schemas import MessageResponse
from .schemas import NotificationListResponse, NotificationResponse
from .service import NotificationService

router = APIRouter(prefix="/api/auth/notifications", tags=["Notifications"])


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    """Dependency injection for NotificationService"""
    return NotificationService(db)


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    """Get the current account's notifications, newest first"""
    notifications = service.list_notifications(current_user.id)
    return NotificationListResponse(
        count=len(notifications),
        unread_count=service.unread_count(current_user.id),
        data=[NotificationResponse.model_validate(n) for n in notifications],
    )


@router.put("/read-all", response_model=MessageResponse)
async def mark_all_notifications_read(
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    updated = service.mark_all_read(current_user.id)
    return MessageResponse(message=f"{updated} notification(s) marked as read")


@router.put("/{notification_id}", response_model=MessageResponse)
async def mark_notification_read(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    """Mark one notification as read (no-op if already read or unknown)"""
    service.mark_read(current_user.id, notification_id)
    return MessageResponse(message="Notification marked as read")
