"""
Investment payment module.

Applies installments to an investment and activates it once the
principal is fully paid.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import FundingSource, InvestmentStatus, TransactionType
from app.models.investment import Investment
from app.repositories.investment_repository import InvestmentRepository
from app.repositories.ledger_repository import LedgerRepository
from app.repositories.user_repository import UserRepository
from app.services.investment.lifecycle.status_manager import InvestmentStatusManager
from app.services.notification import NotificationService
from app.services.referral.commission_engine import CommissionEngine
from app.utils.datetime_utils import utc_now
from app.utils.exceptions import (
    AccountBlockedError,
    InsufficientFundsError,
    InvalidPaymentAmountError,
    InvalidStateTransitionError,
    InvestmentNotFoundError,
)
from app.utils.money import format_major, points_for_amount


@dataclass
class PaymentResult:
    """Outcome of one applied payment."""

    investment: Investment
    amount: int
    activated: bool = False
    commissions_paid: int = 0


class InvestmentPaymentProcessor:
    """Applies payments under a row lock on the investment."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize payment processor."""
        self.session = session
        self.investment_repo = InvestmentRepository(session)
        self.ledger_repo = LedgerRepository(session)
        self.user_repo = UserRepository(session)
        self.status_manager = InvestmentStatusManager(session)
        self.commission_engine = CommissionEngine(session)
        self.notification_service = NotificationService(session)

    async def apply_payment(
        self,
        user_id: int,
        investment_id: int,
        amount_minor: int,
        use_points: bool = False,
        now: datetime | None = None,
    ) -> PaymentResult:
        """
        Apply a payment to a user's investment.

        Debit, amount_paid increment, ledger record, activation and
        referral commissions commit together or not at all.

        Args:
            user_id: Paying user
            investment_id: Investment being paid
            amount_minor: Amount in minor units
            use_points: Pay with points instead of cash balance
            now: Payment time (defaults to current UTC time)

        Returns:
            PaymentResult

        Raises:
            InvalidPaymentAmountError: Non-positive or above outstanding
            InvestmentNotFoundError: No investment with (id, user_id)
            AccountBlockedError: User is blocked
            InvalidStateTransitionError: Investment is completed or cancelled
            InsufficientFundsError: Wallet cannot cover the payment
        """
        now = now or utc_now()

        try:
            if amount_minor <= 0:
                raise InvalidPaymentAmountError(
                    f"Payment amount must be positive, got {amount_minor}"
                )

            investment = await self.investment_repo.get_for_user(
                investment_id, user_id, for_update=True
            )
            if not investment:
                raise InvestmentNotFoundError(investment_id, user_id)

            user = await self.user_repo.get_by_id(user_id)
            if user is None or user.is_blocked:
                raise AccountBlockedError(user_id)

            if investment.status in (
                InvestmentStatus.COMPLETED.value,
                InvestmentStatus.CANCELLED.value,
            ):
                raise InvalidStateTransitionError(
                    investment.id, investment.status, InvestmentStatus.ACTIVE.value
                )

            if amount_minor > investment.outstanding_amount:
                raise InvalidPaymentAmountError(
                    f"Payment {amount_minor} exceeds outstanding "
                    f"{investment.outstanding_amount} for investment {investment.id}"
                )

            funding_source = await self._debit_wallet(user_id, amount_minor, use_points)

            investment.amount_paid += amount_minor
            await self.session.flush()

            await self.ledger_repo.append_transaction(
                user_id=user_id,
                type=TransactionType.INVESTMENT.value,
                amount=-amount_minor,
                description=(
                    f"Payment of {format_major(amount_minor)} "
                    f"for investment #{investment.id}"
                ),
                funding_source=funding_source,
            )

            result = PaymentResult(investment=investment, amount=amount_minor)

            if (
                investment.is_fully_paid
                and investment.status == InvestmentStatus.PENDING.value
            ):
                await self.status_manager.activate(investment, now)
                commissions = await self.commission_engine.process_activation(investment)
                await self.notification_service.notify_investment_activated(
                    user_id, investment.id
                )
                result.activated = True
                result.commissions_paid = commissions.total_paid

            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Payment applied",
            extra={
                "investment_id": investment_id,
                "user_id": user_id,
                "amount": amount_minor,
                "funding_source": funding_source,
                "amount_paid": investment.amount_paid,
                "activated": result.activated,
            },
        )

        return result

    async def _debit_wallet(
        self, user_id: int, amount_minor: int, use_points: bool
    ) -> str:
        """
        Take the payment from points or balance.

        Args:
            user_id: Paying user
            amount_minor: Amount in minor units
            use_points: Debit points instead of balance

        Returns:
            Funding source used

        Raises:
            InsufficientFundsError: If the conditional debit matched no row
        """
        if use_points:
            points = points_for_amount(amount_minor)
            if await self.ledger_repo.debit_points(user_id, points):
                return FundingSource.POINTS.value

            wallet = await self.ledger_repo.get(user_id)
            available = wallet.points if wallet else Decimal("0")
            raise InsufficientFundsError(user_id, points, available, use_points=True)

        if await self.ledger_repo.debit_balance(user_id, amount_minor):
            return FundingSource.BALANCE.value

        wallet = await self.ledger_repo.get(user_id)
        available = wallet.balance if wallet else 0
        raise InsufficientFundsError(user_id, amount_minor, available)
