"""
Referral statistics module.

Direct referral listing, per-class commission totals and the inputs
used by affiliate milestones.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.repositories.investment_repository import InvestmentRepository
from app.repositories.referral_bonus_repository import ReferralBonusRepository
from app.repositories.user_repository import UserRepository
from app.services.referral.config import REFERRAL_LEVELS


class ReferralStatisticsManager:
    """Manages referral statistics."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize statistics manager."""
        self.session = session
        self.bonus_repo = ReferralBonusRepository(session)
        self.user_repo = UserRepository(session)
        self.investment_repo = InvestmentRepository(session)

    async def get_earnings_by_class(self, user_id: int) -> dict:
        """
        Get referral earnings for user, grouped by class.

        Args:
            user_id: Referrer user ID

        Returns:
            Dict with classA/classB/classC entries of amount and count,
            plus total_earned
        """
        totals = await self.bonus_repo.get_totals_by_class(user_id)

        stats: dict = {}
        total_earned = 0
        for level in REFERRAL_LEVELS:
            entry = totals.get(level.bonus_class, {"amount": 0, "count": 0})
            stats[f"class{level.bonus_class}"] = entry
            total_earned += entry["amount"]

        stats["total_earned"] = total_earned
        return stats

    async def get_direct_referrals(self, user_id: int) -> list[dict]:
        """Get user's direct referrals with active invested totals, newest first."""
        return await self.user_repo.get_direct_referrals(user_id)

    async def get_milestone_stats(self, user_id: int) -> dict:
        """
        Get milestone progress inputs.

        Args:
            user_id: User ID

        Returns:
            Dict with active direct referrals and own active investment total
        """
        active_referrals = (
            await self.user_repo.count_direct_referrals_with_active_investment(user_id)
        )
        total_invested = await self.investment_repo.get_total_active_invested(user_id)

        return {
            "active_class_a_referrals": active_referrals,
            "total_active_invested": total_invested,
        }
