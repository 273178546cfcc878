"""
Investment repository.

Data access layer for Investment model.
"""

from datetime import datetime

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import InvestmentStatus, PaymentMode
from app.models.investment import Investment
from app.repositories.base import BaseRepository


class InvestmentRepository(BaseRepository[Investment]):
    """Investment repository with lifecycle queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize investment repository."""
        super().__init__(Investment, session)

    async def get_for_user(
        self, investment_id: int, user_id: int, for_update: bool = False
    ) -> Investment | None:
        """
        Get investment owned by user.

        Args:
            investment_id: Investment ID
            user_id: Owner user ID
            for_update: Lock the row until the transaction ends

        Returns:
            Investment or None if no matching (id, user_id) row
        """
        stmt = (
            select(Investment)
            .where(Investment.id == investment_id, Investment.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_user(self, user_id: int) -> list[Investment]:
        """
        Get user's investments, newest first.

        Args:
            user_id: User ID

        Returns:
            List of investments
        """
        stmt = (
            select(Investment)
            .where(Investment.user_id == user_id)
            .order_by(Investment.created_at.desc(), Investment.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_due_for_accrual(
        self, day_start: datetime, next_day_start: datetime
    ) -> list[int]:
        """
        Find active investments not yet processed today.

        Eligible when started on or before today and the last return
        was processed before today (or never).

        Args:
            day_start: Start of the current UTC day
            next_day_start: Start of the next UTC day

        Returns:
            Investment IDs in processing order
        """
        stmt = (
            select(Investment.id)
            .where(
                Investment.status == InvestmentStatus.ACTIVE.value,
                Investment.start_date.is_not(None),
                Investment.start_date < next_day_start,
                or_(
                    Investment.last_return_processed.is_(None),
                    Investment.last_return_processed < day_start,
                ),
            )
            .order_by(Investment.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_missed_initial_payments(self, now: datetime) -> list[int]:
        """
        Find pay-later investments with no payment past the initial deadline.

        Args:
            now: Current time

        Returns:
            Investment IDs
        """
        stmt = (
            select(Investment.id)
            .where(
                Investment.payment_mode == PaymentMode.PAY_LATER.value,
                Investment.status == InvestmentStatus.PENDING.value,
                Investment.amount_paid == 0,
                Investment.initial_payment_deadline < now,
            )
            .order_by(Investment.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_missed_full_payments(self, now: datetime) -> list[int]:
        """
        Find active pay-later investments still underpaid past the full deadline.

        Args:
            now: Current time

        Returns:
            Investment IDs
        """
        stmt = (
            select(Investment.id)
            .where(
                Investment.payment_mode == PaymentMode.PAY_LATER.value,
                Investment.status == InvestmentStatus.ACTIVE.value,
                Investment.amount_paid < Investment.amount_invested,
                Investment.full_payment_deadline < now,
            )
            .order_by(Investment.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_settled_for_user(self, user_id: int) -> int:
        """
        Count user's investments that ever became active.

        Args:
            user_id: User ID

        Returns:
            Number of active or completed investments
        """
        stmt = (
            select(func.count(Investment.id))
            .where(
                Investment.user_id == user_id,
                Investment.status.in_([
                    InvestmentStatus.ACTIVE.value,
                    InvestmentStatus.COMPLETED.value,
                ]),
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def get_total_active_invested(self, user_id: int) -> int:
        """
        Get total principal of user's active investments.

        Args:
            user_id: User ID

        Returns:
            Sum of amount_invested in minor units
        """
        stmt = (
            select(func.coalesce(func.sum(Investment.amount_invested), 0))
            .where(
                Investment.user_id == user_id,
                Investment.status == InvestmentStatus.ACTIVE.value,
            )
        )
        result = await self.session.execute(stmt)
        return int(result.scalar() or 0)
