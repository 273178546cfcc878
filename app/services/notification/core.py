"""
Core notification service.

Writes in-app notifications to the notifications table. Rows are added
to the caller's transaction, so a notification exists exactly when the
state change that caused it was committed. Delivery to the user is the
dashboard's concern and is never awaited here.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import NOTIFICATION_HISTORY_LIMIT
from app.models.enums import NotificationPriority
from app.models.notification import Notification
from app.repositories.notification_repository import NotificationRepository


class NotificationService:
    """
    Core notification service.

    Fire-and-forget sink: notify(user_id, type, title, message, priority).
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize notification service."""
        self.session = session
        self.notification_repo = NotificationRepository(session)

    async def notify(
        self,
        user_id: int,
        type: str,
        title: str,
        message: str,
        priority: str = NotificationPriority.MEDIUM.value,
    ) -> Notification:
        """
        Queue a notification for the user.

        Args:
            user_id: Recipient user ID
            type: Notification type
            title: Short title
            message: Message body
            priority: low, medium or high

        Returns:
            Pending notification row
        """
        notification = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            priority=priority,
        )
        self.session.add(notification)

        logger.info(
            "Notification queued",
            extra={"user_id": user_id, "type": type, "priority": priority},
        )
        return notification

    async def get_recent(self, user_id: int) -> list[Notification]:
        """Get user's latest notifications, newest first."""
        return await self.notification_repo.get_recent(
            user_id, NOTIFICATION_HISTORY_LIMIT
        )

    async def mark_as_read(self, notification_id: int, user_id: int) -> bool:
        """
        Mark notification as read.

        Args:
            notification_id: Notification ID
            user_id: Owner user ID

        Returns:
            True if a notification was updated
        """
        updated = await self.notification_repo.mark_read(notification_id, user_id)
        await self.session.commit()
        return updated
