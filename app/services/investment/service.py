"""
Investment service facade.

Single entry point for the request-side investment operations,
delegating to the lifecycle modules:
- InvestmentCreator: creation and deadlines
- InvestmentPaymentProcessor: payments and activation
"""

from datetime import datetime

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import DEFAULT_PACKAGES, INVESTMENT_DURATION_DAYS
from app.models.investment import Investment
from app.models.investment_package import InvestmentPackage
from app.repositories.investment_repository import InvestmentRepository
from app.repositories.package_repository import PackageRepository
from app.services.investment.lifecycle.creator import InvestmentCreator
from app.services.investment.lifecycle.payment import (
    InvestmentPaymentProcessor,
    PaymentResult,
)


class InvestmentService:
    """Investment service facade."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize investment service facade."""
        self.session = session
        self.investment_repo = InvestmentRepository(session)
        self.package_repo = PackageRepository(session)

        self.creator = InvestmentCreator(session)
        self.payment_processor = InvestmentPaymentProcessor(session)

    async def create_investment(
        self,
        user_id: int,
        package_id: int,
        payment_mode: str,
        now: datetime | None = None,
    ) -> Investment:
        """
        Create a pending investment.

        Delegates to InvestmentCreator.create().
        """
        return await self.creator.create(
            user_id=user_id,
            package_id=package_id,
            payment_mode=payment_mode,
            now=now,
        )

    async def apply_payment(
        self,
        user_id: int,
        investment_id: int,
        amount_minor: int,
        use_points: bool = False,
        now: datetime | None = None,
    ) -> PaymentResult:
        """
        Apply a payment to an investment.

        Delegates to InvestmentPaymentProcessor.apply_payment().
        """
        return await self.payment_processor.apply_payment(
            user_id=user_id,
            investment_id=investment_id,
            amount_minor=amount_minor,
            use_points=use_points,
            now=now,
        )

    async def get_packages(self) -> list[InvestmentPackage]:
        """Get offered packages, cheapest first."""
        return await self.package_repo.get_active_packages()

    async def get_user_investments(self, user_id: int) -> list[Investment]:
        """Get user's investments, newest first."""
        return await self.investment_repo.get_by_user(user_id)

    async def ensure_default_packages(self) -> int:
        """
        Seed the default package catalogue.

        Packages already present (matched by principal) are left alone,
        so running this on every start is safe.

        Returns:
            Number of packages created
        """
        created = 0
        try:
            for principal, daily_return in DEFAULT_PACKAGES:
                if await self.package_repo.get_by_principal(principal):
                    continue

                await self.package_repo.create(
                    principal_amount=principal,
                    daily_return_amount=daily_return,
                    duration_days=INVESTMENT_DURATION_DAYS,
                    active=True,
                )
                created += 1

            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if created:
            logger.info("Default packages seeded", extra={"created": created})

        return created
