"""FastAPI routes for the Notifications domain.

Thin adapters that translate HTTP requests into domain commands.
"""

from fastapi import APIRouter
from notifications.api.schemas import (
    MarkAllReadResponse,
    MarkReadRequest,
    NotificationListResponse,
    NotificationResponse,
    StatusResponse,
)
from notifications.notification.notification import notifications_for
from notifications.notification.reading import MarkAllNotificationsRead, MarkNotificationRead
from protean.utils.globals import current_domain

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/{user_id}", response_model=NotificationListResponse)
async def list_notifications(user_id: str) -> NotificationListResponse:
    """A user's feed, newest first, with the unread badge count."""
    items = [
        NotificationResponse(
            notification_id=str(n.id),
            user_id=str(n.user_id),
            message=n.message,
            link=n.link,
            is_read=bool(n.is_read),
            created_at=n.created_at,
        )
        for n in notifications_for(user_id)
    ]
    return NotificationListResponse(
        notifications=items,
        unread_count=sum(1 for item in items if not item.is_read),
    )


@router.post("/{notification_id}/read", response_model=StatusResponse)
async def mark_read(notification_id: str, body: MarkReadRequest) -> StatusResponse:
    command = MarkNotificationRead(notification_id=notification_id, user_id=body.user_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@router.post("/{user_id}/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(user_id: str) -> MarkAllReadResponse:
    command = MarkAllNotificationsRead(user_id=user_id)
    marked = current_domain.process(command, asynchronous=False)
    return MarkAllReadResponse(marked=marked or 0)
