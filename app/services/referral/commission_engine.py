"""
Referral commission engine.

Posts multi-level referral bonuses when an investment activates.
Runs inside the caller's transaction: the activation and its
commissions commit together or not at all.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import TransactionType
from app.models.investment import Investment
from app.models.referral_bonus import ReferralBonus
from app.repositories.ledger_repository import LedgerRepository
from app.repositories.referral_bonus_repository import ReferralBonusRepository
from app.services.referral.chain_manager import ReferralChainManager
from app.services.referral.config import REFERRAL_DEPTH, REFERRAL_LEVELS
from app.utils.money import format_major, percentage_of


@dataclass
class ProcessResult:
    """Result of commission processing."""

    total_paid: int = 0
    bonuses: list[ReferralBonus] = field(default_factory=list)
    already_processed: bool = False

    @property
    def bonuses_count(self) -> int:
        """Number of bonus rows posted."""
        return len(self.bonuses)


class CommissionEngine:
    """
    Multi-level referral commission engine.

    Level 1 (class A) earns 7%, level 2 (class B) 2%, level 3 (class C) 1%
    of the invested principal. The chain stops at the first missing
    referrer.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize commission engine.

        Args:
            session: Async database session
        """
        self.session = session
        self.chain_manager = ReferralChainManager(session)
        self.ledger_repo = LedgerRepository(session)
        self.bonus_repo = ReferralBonusRepository(session)

    async def process_activation(self, investment: Investment) -> ProcessResult:
        """
        Pay referral commissions for a newly activated investment.

        Refuses to pay twice for the same investment, even if a reset
        investment is activated again later.

        Args:
            investment: Investment that just became active

        Returns:
            ProcessResult with the bonus rows posted
        """
        if await self.bonus_repo.has_bonuses_for_investment(investment.id):
            logger.warning(
                "Referral commissions already posted, skipping",
                extra={"investment_id": investment.id},
            )
            return ProcessResult(already_processed=True)

        chain = await self.chain_manager.get_referral_chain(
            investment.user_id, REFERRAL_DEPTH
        )

        if not chain:
            logger.debug(
                "No referrers found for user",
                extra={"user_id": investment.user_id, "investment_id": investment.id},
            )
            return ProcessResult()

        result = ProcessResult()

        for level, referrer in zip(REFERRAL_LEVELS, chain):
            amount = percentage_of(investment.amount_invested, level.rate)
            if amount <= 0:
                continue

            bonus = await self._post_bonus(
                investment=investment,
                referrer_id=referrer.id,
                bonus_class=level.bonus_class,
                rate=level.rate,
                amount=amount,
            )
            result.bonuses.append(bonus)
            result.total_paid += amount

        logger.info(
            "Referral commissions processed",
            extra={
                "investment_id": investment.id,
                "user_id": investment.user_id,
                "total_paid": result.total_paid,
                "bonuses_count": result.bonuses_count,
            },
        )

        return result

    async def _post_bonus(
        self,
        investment: Investment,
        referrer_id: int,
        bonus_class: str,
        rate: Decimal,
        amount: int,
    ) -> ReferralBonus:
        """
        Credit referrer and record the bonus and its ledger entry.

        Args:
            investment: Activated investment
            referrer_id: Referrer receiving the bonus
            bonus_class: A, B or C
            rate: Commission fraction
            amount: Bonus in minor units

        Returns:
            Created bonus row
        """
        await self.ledger_repo.get_or_create(referrer_id)
        await self.ledger_repo.credit_balance(referrer_id, amount)

        bonus = await self.bonus_repo.create(
            referrer_id=referrer_id,
            referred_id=investment.user_id,
            investment_id=investment.id,
            bonus_class=bonus_class,
            percentage=rate,
            amount=amount,
        )

        await self.ledger_repo.append_transaction(
            user_id=referrer_id,
            type=TransactionType.BONUS.value,
            amount=amount,
            description=(
                f"Class {bonus_class} referral bonus "
                f"({format_major(amount)}) for investment #{investment.id}"
            ),
        )

        logger.info(
            "Referral bonus posted",
            extra={
                "referrer_id": referrer_id,
                "referred_id": investment.user_id,
                "investment_id": investment.id,
                "class": bonus_class,
                "rate": str(rate),
                "amount": amount,
            },
        )

        return bonus
