"""
Payment deadline enforcer.

Two independent passes over pay-later investments:
- initial-payment miss: block first-time investors, cancel otherwise
- full-payment miss: reset the investment to pending
"""

from dataclasses import dataclass
from datetime import datetime

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import InvestmentStatus
from app.models.investment import Investment
from app.repositories.investment_repository import InvestmentRepository
from app.repositories.user_repository import UserRepository
from app.services.investment.lifecycle.status_manager import InvestmentStatusManager
from app.services.notification import NotificationService
from app.utils.datetime_utils import ensure_utc, utc_now


@dataclass
class DeadlineResult:
    """Counters for one enforcement run."""

    cancelled_count: int = 0
    blocked_count: int = 0
    reset_count: int = 0
    skipped_count: int = 0
    failed_count: int = 0


class DeadlineEnforcer:
    """Enforces pay-later deadlines."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize deadline enforcer."""
        self.session = session
        self.investment_repo = InvestmentRepository(session)
        self.user_repo = UserRepository(session)
        self.status_manager = InvestmentStatusManager(session)
        self.notification_service = NotificationService(session)

    async def run(self, now: datetime | None = None) -> DeadlineResult:
        """
        Run both deadline passes.

        Args:
            now: Run time (defaults to current UTC time)

        Returns:
            DeadlineResult with per-outcome counters
        """
        now = ensure_utc(now or utc_now())
        result = DeadlineResult()

        await self._enforce_initial_deadlines(now, result)
        await self._enforce_full_deadlines(now, result)

        logger.info(
            "Deadline enforcement finished",
            extra={
                "cancelled": result.cancelled_count,
                "blocked": result.blocked_count,
                "reset": result.reset_count,
                "skipped": result.skipped_count,
                "failed": result.failed_count,
            },
        )
        return result

    async def _enforce_initial_deadlines(
        self, now: datetime, result: DeadlineResult
    ) -> None:
        """Handle pay-later investments with no payment past the initial deadline."""
        for investment_id in await self.investment_repo.find_missed_initial_payments(now):
            try:
                outcome = await self._handle_initial_miss(investment_id, now)
                await self.session.commit()
            except Exception as e:
                await self.session.rollback()
                result.failed_count += 1
                logger.error(
                    f"Failed to enforce initial deadline for investment {investment_id}: {e}"
                )
                continue

            if outcome == "blocked":
                result.blocked_count += 1
            elif outcome == "cancelled":
                result.cancelled_count += 1
            else:
                result.skipped_count += 1

    async def _handle_initial_miss(self, investment_id: int, now: datetime) -> str | None:
        """
        Block or cancel one investment under its row lock.

        First-time investors are blocked and the investment stays
        pending. Users with an active or completed investment only lose
        this investment.

        Returns:
            "blocked", "cancelled" or None if nothing changed
        """
        investment = await self.investment_repo.get_for_update(investment_id)
        if not investment or not self._missed_initial(investment, now):
            return None

        user_id = investment.user_id
        settled = await self.investment_repo.count_settled_for_user(user_id)

        if settled > 0:
            await self.status_manager.cancel(investment)
            return "cancelled"

        if not await self.user_repo.block_user(user_id, now):
            # Blocked on an earlier run or by an admin
            return None

        await self.notification_service.notify_account_blocked(user_id)
        logger.warning(
            "User blocked for missed initial payment",
            extra={"user_id": user_id, "investment_id": investment.id},
        )
        return "blocked"

    async def _enforce_full_deadlines(
        self, now: datetime, result: DeadlineResult
    ) -> None:
        """Handle active pay-later investments still underpaid past the full deadline."""
        for investment_id in await self.investment_repo.find_missed_full_payments(now):
            try:
                reset = await self._handle_full_miss(investment_id, now)
                await self.session.commit()
            except Exception as e:
                await self.session.rollback()
                result.failed_count += 1
                logger.error(
                    f"Failed to enforce full deadline for investment {investment_id}: {e}"
                )
                continue

            if reset:
                result.reset_count += 1
            else:
                result.skipped_count += 1

    async def _handle_full_miss(self, investment_id: int, now: datetime) -> bool:
        """Reset one investment under its row lock and notify the owner."""
        investment = await self.investment_repo.get_for_update(investment_id)
        if not investment or not self._missed_full(investment, now):
            return False

        await self.status_manager.reset_to_pending(investment)
        await self.notification_service.notify_payment_deadline_missed(
            investment.user_id, investment.id
        )
        return True

    @staticmethod
    def _missed_initial(investment: Investment, now: datetime) -> bool:
        """Re-check the initial-miss condition on the locked row."""
        return (
            investment.is_pay_later
            and investment.status == InvestmentStatus.PENDING.value
            and investment.amount_paid == 0
            and investment.initial_payment_deadline is not None
            and investment.initial_payment_deadline < now
        )

    @staticmethod
    def _missed_full(investment: Investment, now: datetime) -> bool:
        """Re-check the full-miss condition on the locked row."""
        return (
            investment.is_pay_later
            and investment.status == InvestmentStatus.ACTIVE.value
            and not investment.is_fully_paid
            and investment.full_payment_deadline is not None
            and investment.full_payment_deadline < now
        )
