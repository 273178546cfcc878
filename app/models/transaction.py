"""
Transaction model.

Append-only ledger record. Rows are never updated after insert.
"""

from datetime import UTC, datetime

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.enums import FundingSource, TransactionStatus
from app.models.types import MoneyType, UTCDateTime


class Transaction(Base):
    """Ledger transaction. Negative amount is a debit."""

    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint(
            "type IN ('bonus', 'cashback', 'withdrawal', 'investment', "
            "'milestone', 'daily_return')",
            name='check_transaction_type'
        ),
        CheckConstraint(
            "status IN ('pending', 'completed', 'failed')",
            name='check_transaction_status'
        ),
        CheckConstraint(
            "funding_source IN ('balance', 'points')",
            name='check_transaction_funding_source'
        ),
        Index('idx_transaction_user_created', 'user_id', 'created_at'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    amount: Mapped[int] = mapped_column(MoneyType, nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TransactionStatus.COMPLETED.value
    )
    funding_source: Mapped[str] = mapped_column(
        String(20), nullable=False, default=FundingSource.BALANCE.value
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=lambda: datetime.now(UTC), nullable=False
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Transaction(id={self.id}, user_id={self.user_id}, "
            f"type={self.type}, amount={self.amount})>"
        )
