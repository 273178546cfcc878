"""
Notification service module.

Provides the notification sink used by the investment lifecycle.

Structure:
- core.py: Core notification service (notify, listing, mark as read)
- user_notifications.py: Lifecycle notification templates

Usage:
    from app.services.notification import NotificationService

    notification_service = NotificationService(session)
    await notification_service.notify(user_id, "custom", "Title", "Hello!")
    await notification_service.notify_account_blocked(user_id)
"""

from app.services.notification.core import NotificationService as CoreNotificationService
from app.services.notification.user_notifications import UserNotificationMixin


class NotificationService(
    CoreNotificationService,
    UserNotificationMixin,
):
    """
    Combined notification service.

    Inherits the core sink and all lifecycle templates.
    """


__all__ = ["NotificationService"]
