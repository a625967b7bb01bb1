"""Notification aggregate: one in-app message in a user's feed.

Notifications are created reactively from Storefront order events and are
only ever flipped from unread to read.
"""

from datetime import UTC, datetime

from notifications.domain import notifications
from notifications.notification.events import NotificationCreated, NotificationRead
from protean.fields import Boolean, DateTime, Identifier, String
from protean.utils.globals import current_domain


@notifications.aggregate
class Notification:
    user_id: Identifier(required=True)
    message: String(required=True, max_length=500)
    link: String(max_length=300)
    is_read: Boolean(default=False)
    created_at: DateTime()
    read_at: DateTime()

    @classmethod
    def create(cls, user_id, message, link=None):
        now = datetime.now(UTC)
        notification = cls(
            user_id=user_id,
            message=message,
            link=link,
            is_read=False,
            created_at=now,
        )
        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                user_id=str(user_id),
                message=message,
                link=link,
                created_at=now,
            )
        )
        return notification

    def mark_read(self):
        """Mark as read. Reading an already-read notification changes nothing."""
        if self.is_read:
            return

        now = datetime.now(UTC)
        self.is_read = True
        self.read_at = now
        self.raise_(
            NotificationRead(
                notification_id=str(self.id),
                user_id=str(self.user_id),
                read_at=now,
            )
        )


def notifications_for(user_id: str) -> list:
    """All notifications for ``user_id``, newest first."""
    repo = current_domain.repository_for(Notification)
    return repo._dao.query.filter(user_id=user_id).order_by("-created_at").all().items


def unread_for(user_id: str) -> list:
    return [notification for notification in notifications_for(user_id) if not notification.is_read]
