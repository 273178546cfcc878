"""
Investment status manager module.

Owns the investment state table. Every status change goes through
here; callers hold the row lock and commit.
"""

from datetime import datetime

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import InvestmentStatus
from app.models.investment import Investment
from app.utils.exceptions import InvalidStateTransitionError


# Pending -> Pending is the deadline reset of a still-pending record
ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    InvestmentStatus.PENDING.value: frozenset({
        InvestmentStatus.ACTIVE.value,
        InvestmentStatus.CANCELLED.value,
        InvestmentStatus.PENDING.value,
    }),
    InvestmentStatus.ACTIVE.value: frozenset({
        InvestmentStatus.COMPLETED.value,
        InvestmentStatus.PENDING.value,
    }),
    InvestmentStatus.COMPLETED.value: frozenset(),
    InvestmentStatus.CANCELLED.value: frozenset(),
}


def can_transition(current: str, target: str) -> bool:
    """Check if the state table permits current -> target."""
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


class InvestmentStatusManager:
    """Manages investment status transitions."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize status manager."""
        self.session = session

    def _transition(self, investment: Investment, target: str) -> str:
        """
        Validate and apply a status change in memory.

        Args:
            investment: Locked investment
            target: New status

        Returns:
            Previous status

        Raises:
            InvalidStateTransitionError: If the table forbids the move
        """
        current = investment.status
        if not can_transition(current, target):
            raise InvalidStateTransitionError(investment.id, current, target)

        investment.status = target
        return current

    async def activate(self, investment: Investment, now: datetime) -> Investment:
        """
        Move a fully paid investment to active.

        start_date is only set the first time, so a payment replayed
        after activation never moves it.

        Args:
            investment: Locked, fully paid investment
            now: Activation time

        Returns:
            Updated investment
        """
        self._transition(investment, InvestmentStatus.ACTIVE.value)
        if investment.start_date is None:
            investment.start_date = now

        await self.session.flush()
        logger.info(
            "Investment activated",
            extra={
                "investment_id": investment.id,
                "user_id": investment.user_id,
                "start_date": investment.start_date.isoformat(),
            },
        )
        return investment

    async def complete(self, investment: Investment, now: datetime) -> Investment:
        """
        Close an investment at the end of its payout cycle.

        Args:
            investment: Locked active investment
            now: Completion time

        Returns:
            Updated investment
        """
        self._transition(investment, InvestmentStatus.COMPLETED.value)
        investment.end_date = now

        await self.session.flush()
        logger.info(
            "Investment completed",
            extra={"investment_id": investment.id, "user_id": investment.user_id},
        )
        return investment

    async def cancel(self, investment: Investment) -> Investment:
        """
        Cancel a pending investment.

        Args:
            investment: Locked pending investment

        Returns:
            Updated investment
        """
        self._transition(investment, InvestmentStatus.CANCELLED.value)

        await self.session.flush()
        logger.info(
            "Investment cancelled",
            extra={"investment_id": investment.id, "user_id": investment.user_id},
        )
        return investment

    async def reset_to_pending(self, investment: Investment) -> Investment:
        """
        Restart payment of an investment whose full deadline passed.

        Clears amount_paid and start_date. Money already paid is not
        refunded here.

        Args:
            investment: Locked investment

        Returns:
            Updated investment
        """
        previous = self._transition(investment, InvestmentStatus.PENDING.value)
        forfeited = investment.amount_paid
        investment.amount_paid = 0
        investment.start_date = None

        await self.session.flush()
        logger.warning(
            "Investment reset to pending",
            extra={
                "investment_id": investment.id,
                "user_id": investment.user_id,
                "previous_status": previous,
                "amount_paid_cleared": forfeited,
            },
        )
        return investment
