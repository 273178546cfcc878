"""
Investment creator module.

Opens a pending investment for a catalogue package.
"""

from datetime import datetime, timedelta

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.models.enums import InvestmentStatus, PaymentMode
from app.models.investment import Investment
from app.repositories.investment_repository import InvestmentRepository
from app.repositories.package_repository import PackageRepository
from app.repositories.user_repository import UserRepository
from app.utils.datetime_utils import utc_now
from app.utils.exceptions import (
    AccountBlockedError,
    PackageNotFoundError,
    UserNotFoundError,
)


class InvestmentCreator:
    """Handles investment creation with validation."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize investment creator."""
        self.session = session
        self.investment_repo = InvestmentRepository(session)
        self.package_repo = PackageRepository(session)
        self.user_repo = UserRepository(session)

    async def create(
        self,
        user_id: int,
        package_id: int,
        payment_mode: str,
        now: datetime | None = None,
    ) -> Investment:
        """
        Create a pending investment.

        PayNow investments carry no deadlines. PayLater investments get
        an initial deadline (first installment) and a full deadline.

        Args:
            user_id: Investor
            package_id: Catalogue package
            payment_mode: pay_now or pay_later
            now: Creation time (defaults to current UTC time)

        Returns:
            Created investment

        Raises:
            ValueError: Unknown payment mode
            UserNotFoundError: User does not exist
            AccountBlockedError: User is blocked
            PackageNotFoundError: Package missing or inactive
        """
        mode = PaymentMode(payment_mode)
        now = now or utc_now()

        try:
            user = await self.user_repo.get_by_id(user_id)
            if not user:
                raise UserNotFoundError(user_id)
            if user.is_blocked:
                raise AccountBlockedError(user_id)

            package = await self.package_repo.get_active(package_id)
            if not package:
                raise PackageNotFoundError(package_id)

            initial_deadline = None
            full_deadline = None
            if mode is PaymentMode.PAY_LATER:
                initial_deadline = now + timedelta(
                    hours=settings.initial_payment_window_hours
                )
                full_deadline = now + timedelta(
                    days=settings.full_payment_window_days
                )

            investment = await self.investment_repo.create(
                user_id=user_id,
                package_id=package.id,
                payment_mode=mode.value,
                amount_invested=package.principal_amount,
                amount_paid=0,
                status=InvestmentStatus.PENDING.value,
                initial_payment_deadline=initial_deadline,
                full_payment_deadline=full_deadline,
                created_at=now,
            )

            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Investment created",
            extra={
                "investment_id": investment.id,
                "user_id": user_id,
                "package_id": package_id,
                "payment_mode": mode.value,
                "amount_invested": investment.amount_invested,
            },
        )

        return investment
