"""
User repository.

Data access layer for User model.
"""

from datetime import datetime

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import InvestmentStatus
from app.models.investment import Investment
from app.models.user import User
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """User repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user repository."""
        super().__init__(User, session)

    async def get_by_referral_code(
        self, referral_code: str
    ) -> User | None:
        """
        Get user by referral code.

        Args:
            referral_code: Referral code

        Returns:
            User or None
        """
        return await self.get_by(referral_code=referral_code)

    async def block_user(self, user_id: int, blocked_at: datetime) -> bool:
        """
        Block user account.

        Only flips an unblocked account, so concurrent callers cannot
        both observe a fresh block.

        Args:
            user_id: User ID
            blocked_at: Block timestamp

        Returns:
            True if this call blocked the user, False if already blocked
        """
        stmt = (
            update(User)
            .where(User.id == user_id, User.is_blocked.is_(False))
            .values(is_blocked=True, blocked_at=blocked_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def set_referrer(self, user_id: int, referrer_id: int) -> bool:
        """
        Link user to referrer if not linked yet.

        Args:
            user_id: Referred user ID
            referrer_id: Referrer user ID

        Returns:
            True if linked, False if user already had a referrer
        """
        stmt = (
            update(User)
            .where(User.id == user_id, User.referred_by.is_(None))
            .values(referred_by=referrer_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def count_direct_referrals_with_active_investment(
        self, referrer_id: int
    ) -> int:
        """
        Count active investments held by direct (class A) referrals.

        Args:
            referrer_id: Referrer user ID

        Returns:
            Number of active investments of direct referrals
        """
        stmt = (
            select(func.count(Investment.id))
            .join(User, User.id == Investment.user_id)
            .where(
                User.referred_by == referrer_id,
                Investment.status == InvestmentStatus.ACTIVE.value,
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def get_direct_referrals(self, referrer_id: int) -> list[dict]:
        """
        List direct (class A) referrals with their active investment totals.

        Referrals without investments are included with zero totals.

        Args:
            referrer_id: Referrer user ID

        Returns:
            List of dicts with id, email, created_at, total_invested and
            active_investments, newest referral first
        """
        is_active = Investment.status == InvestmentStatus.ACTIVE.value
        stmt = (
            select(
                User.id,
                User.email,
                User.created_at,
                func.coalesce(
                    func.sum(case((is_active, Investment.amount_invested), else_=0)), 0
                ).label("total_invested"),
                func.count(case((is_active, Investment.id))).label("active_investments"),
            )
            .outerjoin(Investment, Investment.user_id == User.id)
            .where(User.referred_by == referrer_id)
            .group_by(User.id, User.email, User.created_at)
            .order_by(User.created_at.desc(), User.id.desc())
        )
        result = await self.session.execute(stmt)
        return [
            {
                "id": row.id,
                "email": row.email,
                "created_at": row.created_at,
                "total_invested": int(row.total_invested or 0),
                "active_investments": row.active_investments,
            }
            for row in result.all()
        ]
