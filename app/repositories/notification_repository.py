"""
Notification repository.

Data access layer for Notification model.
"""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.notification import Notification
from app.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Notification repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize notification repository."""
        super().__init__(Notification, session)

    async def get_recent(self, user_id: int, limit: int) -> list[Notification]:
        """
        Get user's latest notifications, newest first.

        Args:
            user_id: User ID
            limit: Max number of rows

        Returns:
            List of notifications
        """
        stmt = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def mark_read(self, notification_id: int, user_id: int) -> bool:
        """
        Mark a user's notification as read.

        Args:
            notification_id: Notification ID
            user_id: Owner user ID

        Returns:
            True if a notification was updated
        """
        stmt = (
            update(Notification)
            .where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0
