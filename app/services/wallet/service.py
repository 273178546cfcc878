"""
Wallet service.

Wallet lookup, withdrawals, transaction history and the ledger
conservation check.
"""

from dataclasses import dataclass

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import TRANSACTION_HISTORY_LIMIT
from app.models.enums import TransactionType
from app.models.transaction import Transaction
from app.models.wallet import Wallet
from app.repositories.ledger_repository import LedgerRepository
from app.utils.exceptions import InsufficientFundsError, InvalidPaymentAmountError
from app.utils.money import format_major


@dataclass(frozen=True)
class ConservationReport:
    """Comparison of the ledger sum with the stored balance."""

    user_id: int
    ledger_total: int
    wallet_balance: int

    @property
    def balanced(self) -> bool:
        """Ledger and wallet agree."""
        return self.ledger_total == self.wallet_balance

    @property
    def discrepancy(self) -> int:
        """Wallet balance minus ledger total."""
        return self.wallet_balance - self.ledger_total


class WalletService:
    """User-facing wallet operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize wallet service."""
        self.session = session
        self.ledger_repo = LedgerRepository(session)

    async def get_wallet(self, user_id: int) -> Wallet:
        """Get user's wallet, creating an empty one on first access."""
        wallet = await self.ledger_repo.get(user_id)
        if wallet:
            return wallet

        try:
            wallet = await self.ledger_repo.create(user_id=user_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        return wallet

    async def withdraw(self, user_id: int, amount_minor: int, method: str) -> Transaction:
        """
        Withdraw cash balance.

        Payout itself happens outside the platform; this only moves the
        ledger.

        Args:
            user_id: User ID
            amount_minor: Amount in minor units
            method: Payout method label, e.g. "bank" or "usdt"

        Returns:
            Withdrawal transaction

        Raises:
            InvalidPaymentAmountError: Non-positive amount
            InsufficientFundsError: Balance does not cover the amount
        """
        if amount_minor <= 0:
            raise InvalidPaymentAmountError(
                f"Withdrawal amount must be positive, got {amount_minor}"
            )

        try:
            if not await self.ledger_repo.record_withdrawal(user_id, amount_minor):
                wallet = await self.ledger_repo.get(user_id)
                raise InsufficientFundsError(
                    user_id, amount_minor, wallet.balance if wallet else 0
                )

            transaction = await self.ledger_repo.append_transaction(
                user_id=user_id,
                type=TransactionType.WITHDRAWAL.value,
                amount=-amount_minor,
                description=f"Withdrawal via {method}",
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Withdrawal processed",
            extra={
                "user_id": user_id,
                "amount": format_major(amount_minor),
                "method": method,
                "transaction_id": transaction.id,
            },
        )
        return transaction

    async def get_transactions(self, user_id: int) -> list[Transaction]:
        """Get user's 50 most recent transactions, newest first."""
        return await self.ledger_repo.get_recent_transactions(
            user_id, TRANSACTION_HISTORY_LIMIT
        )

    async def check_conservation(self, user_id: int) -> ConservationReport:
        """
        Compare balance-funded ledger rows with the wallet balance.

        Withdrawals are negative rows, so total_withdrawn is already
        part of the ledger sum.

        Args:
            user_id: User ID

        Returns:
            ConservationReport
        """
        ledger_total = await self.ledger_repo.sum_balance_transactions(user_id)
        wallet = await self.ledger_repo.get(user_id)
        report = ConservationReport(
            user_id=user_id,
            ledger_total=ledger_total,
            wallet_balance=wallet.balance if wallet else 0,
        )

        if not report.balanced:
            logger.error(
                "Ledger does not match wallet balance",
                extra={
                    "user_id": user_id,
                    "ledger_total": report.ledger_total,
                    "wallet_balance": report.wallet_balance,
                    "discrepancy": report.discrepancy,
                },
            )

        return report
