"""
Referral registration.

Links a newly registered user to the owner of a referral code and pays
the one-time registration bonus in points.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.repositories.ledger_repository import LedgerRepository
from app.repositories.user_repository import UserRepository
from app.services.referral.chain_manager import ReferralChainManager
from app.services.referral.config import REGISTRATION_REFERRAL_POINTS
from app.utils.exceptions import InvalidReferralCodeError, UserNotFoundError


class ReferralRegistrationService:
    """Applies referral codes at registration time."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize registration service."""
        self.session = session
        self.user_repo = UserRepository(session)
        self.ledger_repo = LedgerRepository(session)
        self.chain_manager = ReferralChainManager(session)

    async def register_referral(self, new_user_id: int, referral_code: str) -> User:
        """
        Link user to referrer and credit the referrer's points.

        Args:
            new_user_id: Freshly registered user
            referral_code: Code entered at sign-up

        Returns:
            Referrer

        Raises:
            UserNotFoundError: If the new user does not exist
            InvalidReferralCodeError: Unknown code, own code, loop, or
                user already referred
        """
        try:
            new_user = await self.user_repo.get_by_id(new_user_id)
            if not new_user:
                raise UserNotFoundError(new_user_id)

            referrer = await self.user_repo.get_by_referral_code(referral_code.strip())
            if not referrer:
                raise InvalidReferralCodeError(f"Unknown referral code: {referral_code}")

            if referrer.id == new_user_id:
                raise InvalidReferralCodeError("Users cannot refer themselves")

            if await self.chain_manager.would_create_loop(new_user_id, referrer.id):
                raise InvalidReferralCodeError(
                    f"Referral code {referral_code} would create a referral loop"
                )

            if not await self.user_repo.set_referrer(new_user_id, referrer.id):
                raise InvalidReferralCodeError(
                    f"User {new_user_id} already has a referrer"
                )

            await self.ledger_repo.get_or_create(referrer.id)
            await self.ledger_repo.credit_points(
                referrer.id, REGISTRATION_REFERRAL_POINTS
            )

            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Referral registered",
            extra={
                "user_id": new_user_id,
                "referrer_id": referrer.id,
                "points": str(REGISTRATION_REFERRAL_POINTS),
            },
        )

        return referrer
