"""
Referral chain management module.

Walks the referred_by links upward from a user.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.services.referral.config import REFERRAL_DEPTH


class ReferralChainManager:
    """Manages referral chain operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize chain manager."""
        self.session = session
        self.user_repo = UserRepository(session)

    async def get_referral_chain(
        self, user_id: int, depth: int = REFERRAL_DEPTH
    ) -> list[User]:
        """
        Get the user's upline, nearest referrer first.

        Stops at the end of the chain, at the requested depth, or when a
        user would repeat (corrupted data must not loop forever).

        Args:
            user_id: User whose referrers are wanted
            depth: Max number of levels

        Returns:
            List of users from direct referrer to Nth level
        """
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            return []

        chain: list[User] = []
        seen = {user.id}
        next_id = user.referred_by

        while next_id is not None and len(chain) < depth:
            if next_id in seen:
                logger.warning(
                    "Referral loop detected",
                    extra={"user_id": user_id, "loop_at": next_id},
                )
                break

            referrer = await self.user_repo.get_by_id(next_id)
            if not referrer:
                break

            chain.append(referrer)
            seen.add(referrer.id)
            next_id = referrer.referred_by

        logger.debug(
            "Referral chain retrieved",
            extra={
                "user_id": user_id,
                "depth": depth,
                "chain_length": len(chain),
            },
        )

        return chain

    async def would_create_loop(self, new_user_id: int, referrer_id: int) -> bool:
        """
        Check whether linking new_user -> referrer closes a cycle.

        Args:
            new_user_id: User being linked
            referrer_id: Proposed referrer

        Returns:
            True if new_user already appears in the referrer's upline
        """
        if new_user_id == referrer_id:
            return True

        seen: set[int] = set()
        current = await self.user_repo.get_by_id(referrer_id)
        while current is not None and current.id not in seen:
            if current.referred_by == new_user_id:
                return True
            seen.add(current.id)
            if current.referred_by is None:
                break
            current = await self.user_repo.get_by_id(current.referred_by)

        return False
