"""
Daily return accrual processor.

Credits each active investment's daily return at most once per UTC
calendar day and completes investments whose payout cycle has ended.
"""

from dataclasses import dataclass
from datetime import datetime

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.models.enums import InvestmentStatus, TransactionType
from app.models.investment import Investment
from app.repositories.investment_repository import InvestmentRepository
from app.repositories.ledger_repository import LedgerRepository
from app.repositories.package_repository import PackageRepository
from app.services.investment.lifecycle.status_manager import InvestmentStatusManager
from app.services.notification import NotificationService
from app.utils.datetime_utils import day_bounds, ensure_utc, utc_now, whole_days_between
from app.utils.exceptions import must_log
from app.utils.money import format_major


@dataclass
class AccrualResult:
    """Counters for one accrual run."""

    processed_count: int = 0
    credited_count: int = 0
    completed_count: int = 0
    skipped_count: int = 0
    failed_count: int = 0
    total_credited: int = 0


class DailyAccrualProcessor:
    """Processes daily returns for active investments."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize accrual processor."""
        self.session = session
        self.investment_repo = InvestmentRepository(session)
        self.package_repo = PackageRepository(session)
        self.ledger_repo = LedgerRepository(session)
        self.status_manager = InvestmentStatusManager(session)
        self.notification_service = NotificationService(session)

    async def run(self, now: datetime | None = None) -> AccrualResult:
        """
        Run one accrual pass.

        Each investment is locked, re-checked and committed on its own.
        A failure rolls back only that investment and the batch goes on;
        the next run picks it up again.

        Args:
            now: Run time (defaults to current UTC time)

        Returns:
            AccrualResult with per-outcome counters
        """
        result = AccrualResult()

        if settings.emergency_stop_accrual:
            logger.warning("Daily accrual skipped: emergency stop is enabled")
            return result

        now = ensure_utc(now or utc_now())
        day_start, next_day_start = day_bounds(now)

        investment_ids = await self.investment_repo.find_due_for_accrual(
            day_start, next_day_start
        )
        logger.info(
            "Daily accrual started",
            extra={"candidates": len(investment_ids), "day": day_start.date().isoformat()},
        )

        for investment_id in investment_ids:
            try:
                outcome = await self._process_investment(
                    investment_id, now, day_start, next_day_start
                )
                await self.session.commit()
            except Exception as e:
                await self.session.rollback()
                result.failed_count += 1
                if must_log(e):
                    logger.warning(
                        f"Database unavailable for investment {investment_id}, "
                        f"retrying next run: {e}"
                    )
                else:
                    logger.error(
                        f"Failed to process daily return for investment {investment_id}: {e}"
                    )
                continue

            if outcome is None:
                result.skipped_count += 1
                continue

            result.processed_count += 1
            if outcome > 0:
                result.credited_count += 1
                result.total_credited += outcome
            else:
                result.completed_count += 1

        logger.info(
            "Daily accrual finished",
            extra={
                "processed": result.processed_count,
                "credited": result.credited_count,
                "completed": result.completed_count,
                "skipped": result.skipped_count,
                "failed": result.failed_count,
                "total_credited": result.total_credited,
            },
        )

        return result

    async def _process_investment(
        self,
        investment_id: int,
        now: datetime,
        day_start: datetime,
        next_day_start: datetime,
    ) -> int | None:
        """
        Credit or complete one investment under its row lock.

        Args:
            investment_id: Investment ID
            now: Run time
            day_start: Start of today (UTC)
            next_day_start: Start of tomorrow (UTC)

        Returns:
            Credited amount, 0 if the investment was completed, or None
            if another worker already handled it today
        """
        investment = await self.investment_repo.get_for_update(investment_id)
        if not investment or not self._is_due(investment, day_start, next_day_start):
            return None

        package = await self.package_repo.get_by_id(investment.package_id)
        days_since_start = whole_days_between(investment.start_date, now)

        if days_since_start >= package.duration_days:
            await self.status_manager.complete(investment, now)
            await self.notification_service.notify_investment_completed(
                investment.user_id, investment.amount_invested, package.duration_days
            )
            return 0

        amount = package.daily_return_amount
        await self.ledger_repo.get_or_create(investment.user_id)
        await self.ledger_repo.credit_balance(investment.user_id, amount)
        await self.ledger_repo.append_transaction(
            user_id=investment.user_id,
            type=TransactionType.DAILY_RETURN.value,
            amount=amount,
            description=(
                f"Daily return {format_major(amount)} for investment "
                f"#{investment.id} (day {days_since_start + 1}/{package.duration_days})"
            ),
        )
        investment.last_return_processed = now
        await self.session.flush()

        logger.info(
            "Daily return credited",
            extra={
                "investment_id": investment.id,
                "user_id": investment.user_id,
                "amount": amount,
                "day": days_since_start + 1,
            },
        )
        return amount

    @staticmethod
    def _is_due(
        investment: Investment, day_start: datetime, next_day_start: datetime
    ) -> bool:
        """Re-check accrual eligibility on the locked row."""
        if investment.status != InvestmentStatus.ACTIVE.value:
            return False
        if investment.start_date is None or investment.start_date >= next_day_start:
            return False
        return (
            investment.last_return_processed is None
            or investment.last_return_processed < day_start
        )
