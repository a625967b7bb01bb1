"""MarkNotificationRead / MarkAllNotificationsRead commands + handler."""

from notifications.domain import notifications
from notifications.notification.notification import Notification, unread_for
from protean.exceptions import ValidationError
from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle


@notifications.command(part_of="Notification")
class MarkNotificationRead:
    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)


@notifications.command(part_of="Notification")
class MarkAllNotificationsRead:
    """Sent when the shopper opens the notification bell."""

    user_id: Identifier(required=True)


@notifications.command_handler(part_of=Notification)
class NotificationReadingHandler:
    @handle(MarkNotificationRead)
    def mark_read(self, command: MarkNotificationRead):
        repo = current_domain.repository_for(Notification)
        notification = repo.get(command.notification_id)
        if str(notification.user_id) != str(command.user_id):
            raise ValidationError({"notification_id": ["Notification does not belong to this user"]})
        notification.mark_read()
        repo.add(notification)

    @handle(MarkAllNotificationsRead)
    def mark_all_read(self, command: MarkAllNotificationsRead):
        repo = current_domain.repository_for(Notification)
        unread = unread_for(command.user_id)
        for notification in unread:
            notification.mark_read()
            repo.add(notification)
        return len(unread)
