"""
Wallet model.

One wallet per user: withdrawable cash balance and reward points.
Balances are only ever changed through relative UPDATE statements.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.models.types import MoneyType, PointsType, UTCDateTime

if TYPE_CHECKING:
    from app.models.user import User


class Wallet(Base):
    """Wallet model - user balances."""

    __tablename__ = "wallets"
    __table_args__ = (
        CheckConstraint(
            'balance >= 0', name='check_wallet_balance_non_negative'
        ),
        CheckConstraint(
            'points >= 0', name='check_wallet_points_non_negative'
        ),
        CheckConstraint(
            'total_withdrawn >= 0',
            name='check_wallet_total_withdrawn_non_negative'
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True
    )

    # Balances (minor units / fractional points)
    balance: Mapped[int] = mapped_column(
        MoneyType, default=0, nullable=False
    )
    points: Mapped[Decimal] = mapped_column(
        PointsType, default=Decimal("0"), nullable=False
    )
    total_withdrawn: Mapped[int] = mapped_column(
        MoneyType, default=0, nullable=False
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False
    )

    user: Mapped["User"] = relationship("User", back_populates="wallet")

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Wallet(user_id={self.user_id}, balance={self.balance}, "
            f"points={self.points})>"
        )
