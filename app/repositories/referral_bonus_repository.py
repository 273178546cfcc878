"""
Referral bonus repository.

Data access layer for ReferralBonus model.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.referral_bonus import ReferralBonus
from app.repositories.base import BaseRepository


class ReferralBonusRepository(BaseRepository[ReferralBonus]):
    """Referral bonus repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize referral bonus repository."""
        super().__init__(ReferralBonus, session)

    async def get_by_investment(self, investment_id: int) -> list[ReferralBonus]:
        """
        Get bonuses paid for an investment, by class.

        Args:
            investment_id: Investment ID

        Returns:
            List of bonuses ordered A, B, C
        """
        stmt = (
            select(ReferralBonus)
            .where(ReferralBonus.investment_id == investment_id)
            .order_by(ReferralBonus.bonus_class)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def has_bonuses_for_investment(self, investment_id: int) -> bool:
        """Check if commissions were already posted for an investment."""
        return await self.exists(investment_id=investment_id)

    async def get_totals_by_class(self, referrer_id: int) -> dict[str, dict[str, int]]:
        """
        Aggregate referrer's bonuses per class.

        Uses SQL aggregation to avoid loading all rows.

        Args:
            referrer_id: Referrer user ID

        Returns:
            Dict of class -> {"amount": total, "count": rows}
        """
        stmt = (
            select(
                ReferralBonus.bonus_class,
                func.sum(ReferralBonus.amount).label("total_amount"),
                func.count(ReferralBonus.id).label("count"),
            )
            .where(ReferralBonus.referrer_id == referrer_id)
            .group_by(ReferralBonus.bonus_class)
        )
        result = await self.session.execute(stmt)
        return {
            row.bonus_class: {
                "amount": int(row.total_amount or 0),
                "count": row.count,
            }
            for row in result.all()
        }
