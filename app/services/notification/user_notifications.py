"""
User-specific notification functionality.

Message templates for investment lifecycle events.
"""

from app.models.enums import NotificationPriority, NotificationType
from app.models.notification import Notification
from app.utils.money import format_major


class UserNotificationMixin:
    """
    Mixin for lifecycle notification methods.

    Relies on NotificationService.notify().
    """

    async def notify_account_blocked(self, user_id: int) -> Notification:
        """Notify user that a missed first payment blocked the account."""
        return await self.notify(
            user_id=user_id,
            type=NotificationType.ACCOUNT_BLOCKED.value,
            title="Account Blocked",
            message=(
                "Your account has been blocked due to missed initial "
                "payment deadline."
            ),
            priority=NotificationPriority.HIGH.value,
        )

    async def notify_payment_deadline_missed(
        self, user_id: int, investment_id: int
    ) -> Notification:
        """Notify user that the full-payment deadline passed."""
        return await self.notify(
            user_id=user_id,
            type=NotificationType.PAYMENT_DEADLINE_MISSED.value,
            title="Payment Deadline Missed",
            message=(
                f"Your 14-day payment deadline for investment #{investment_id} "
                "has been missed. Full payment is now required."
            ),
            priority=NotificationPriority.HIGH.value,
        )

    async def notify_investment_completed(
        self, user_id: int, amount_invested: int, duration_days: int
    ) -> Notification:
        """Notify user that an investment finished its payout cycle."""
        return await self.notify(
            user_id=user_id,
            type=NotificationType.INVESTMENT_COMPLETED.value,
            title="Investment Completed",
            message=(
                f"Your {format_major(amount_invested)} investment has completed "
                f"its {duration_days}-day cycle."
            ),
            priority=NotificationPriority.MEDIUM.value,
        )

    async def notify_investment_activated(
        self, user_id: int, investment_id: int
    ) -> Notification:
        """Notify user that payment is complete and returns start."""
        return await self.notify(
            user_id=user_id,
            type=NotificationType.INVESTMENT_ACTIVATED.value,
            title="Investment Active",
            message=(
                f"Investment #{investment_id} is fully paid. "
                "Daily returns are credited from the next daily run."
            ),
            priority=NotificationPriority.LOW.value,
        )
