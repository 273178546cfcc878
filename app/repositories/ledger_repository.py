"""
Ledger repository.

Persistent mutation of wallet balances, points and transaction records.
Every balance change is a single relative UPDATE (balance = balance + ?),
never a read-then-write, so concurrent requests cannot lose updates.
"""

from decimal import Decimal

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import FundingSource, TransactionStatus
from app.models.transaction import Transaction
from app.models.wallet import Wallet
from app.repositories.base import BaseRepository


class LedgerRepository(BaseRepository[Wallet]):
    """Wallet and transaction ledger store."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize ledger repository."""
        super().__init__(Wallet, session)

    async def get(self, user_id: int) -> Wallet | None:
        """
        Get user's wallet as currently stored.

        Args:
            user_id: User ID

        Returns:
            Wallet or None
        """
        stmt = (
            select(Wallet)
            .where(Wallet.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_create(self, user_id: int) -> Wallet:
        """Get user's wallet, creating an empty one if missing."""
        wallet = await self.get(user_id)
        if wallet:
            return wallet
        return await self.create(user_id=user_id)

    async def credit_balance(self, user_id: int, amount: int) -> bool:
        """
        Add to cash balance.

        Args:
            user_id: User ID
            amount: Minor units to add (> 0)

        Returns:
            True if a wallet was updated
        """
        stmt = (
            update(Wallet)
            .where(Wallet.user_id == user_id)
            .values(balance=Wallet.balance + amount)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def debit_balance(self, user_id: int, amount: int) -> bool:
        """
        Subtract from cash balance if it covers the amount.

        The guard and the subtraction are one statement, so two
        concurrent debits can never overdraw the wallet.

        Args:
            user_id: User ID
            amount: Minor units to subtract (> 0)

        Returns:
            True if debited, False if funds were insufficient
        """
        stmt = (
            update(Wallet)
            .where(Wallet.user_id == user_id, Wallet.balance >= amount)
            .values(balance=Wallet.balance - amount)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def record_withdrawal(self, user_id: int, amount: int) -> bool:
        """
        Debit balance and track the withdrawn total in one statement.

        Args:
            user_id: User ID
            amount: Minor units withdrawn (> 0)

        Returns:
            True if debited, False if funds were insufficient
        """
        stmt = (
            update(Wallet)
            .where(Wallet.user_id == user_id, Wallet.balance >= amount)
            .values(
                balance=Wallet.balance - amount,
                total_withdrawn=Wallet.total_withdrawn + amount,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def credit_points(self, user_id: int, points: Decimal) -> bool:
        """
        Add reward points.

        Args:
            user_id: User ID
            points: Points to add (fractional)

        Returns:
            True if a wallet was updated
        """
        stmt = (
            update(Wallet)
            .where(Wallet.user_id == user_id)
            .values(points=Wallet.points + points)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def debit_points(self, user_id: int, points: Decimal) -> bool:
        """
        Subtract reward points if the wallet holds enough.

        Args:
            user_id: User ID
            points: Points to subtract (fractional)

        Returns:
            True if debited, False if points were insufficient
        """
        stmt = (
            update(Wallet)
            .where(Wallet.user_id == user_id, Wallet.points >= points)
            .values(points=Wallet.points - points)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def append_transaction(
        self,
        user_id: int,
        type: str,
        amount: int,
        description: str | None = None,
        status: str = TransactionStatus.COMPLETED.value,
        funding_source: str = FundingSource.BALANCE.value,
    ) -> Transaction:
        """
        Append an immutable ledger record.

        Args:
            user_id: User ID
            type: Transaction type
            amount: Signed minor units (negative is a debit)
            description: Human-readable description
            status: Transaction status
            funding_source: Wallet bucket the amount refers to

        Returns:
            Created transaction
        """
        transaction = Transaction(
            user_id=user_id,
            type=type,
            amount=amount,
            description=description,
            status=status,
            funding_source=funding_source,
        )
        self.session.add(transaction)
        await self.session.flush()
        return transaction

    async def get_recent_transactions(
        self, user_id: int, limit: int
    ) -> list[Transaction]:
        """
        Get user's latest transactions, newest first.

        Args:
            user_id: User ID
            limit: Max number of rows

        Returns:
            List of transactions
        """
        stmt = (
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .order_by(Transaction.created_at.desc(), Transaction.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def sum_balance_transactions(self, user_id: int) -> int:
        """
        Sum completed cash-funded transaction amounts for user.

        Args:
            user_id: User ID

        Returns:
            Signed total in minor units
        """
        stmt = (
            select(func.coalesce(func.sum(Transaction.amount), 0))
            .where(
                Transaction.user_id == user_id,
                Transaction.funding_source == FundingSource.BALANCE.value,
                Transaction.status == TransactionStatus.COMPLETED.value,
            )
        )
        result = await self.session.execute(stmt)
        return int(result.scalar() or 0)
