"""Domain events for the Notification aggregate."""

from notifications.domain import notifications
from protean.fields import DateTime, Identifier, String


@notifications.event(part_of="Notification")
class NotificationCreated:
    """A message was added to a user's feed."""

    __version__ = 1

    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)
    message: String(required=True)
    link: String()
    created_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationRead:
    __version__ = 1

    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)
    read_at: DateTime(required=True)
