"""
Referral bonus model.

One row per commission payout. Unique per (referrer, investment, class)
so that a repeated activation can never pay twice.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.types import MoneyType, RateType, UTCDateTime


class ReferralBonus(Base):
    """Referral commission paid on investment activation."""

    __tablename__ = "referral_bonuses"
    __table_args__ = (
        UniqueConstraint(
            'referrer_id', 'investment_id', 'class',
            name='uq_referral_bonus_referrer_investment_class'
        ),
        CheckConstraint(
            "\"class\" IN ('A', 'B', 'C')", name='check_referral_bonus_class'
        ),
        CheckConstraint(
            'amount >= 0', name='check_referral_bonus_amount_non_negative'
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    referrer_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    referred_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    investment_id: Mapped[int] = mapped_column(
        ForeignKey("user_investments.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # "class" is a Python keyword, the column keeps the original name
    bonus_class: Mapped[str] = mapped_column("class", String(1), nullable=False)
    percentage: Mapped[Decimal] = mapped_column(RateType, nullable=False)
    amount: Mapped[int] = mapped_column(MoneyType, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=lambda: datetime.now(UTC), nullable=False
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ReferralBonus(referrer_id={self.referrer_id}, "
            f"investment_id={self.investment_id}, class={self.bonus_class}, "
            f"amount={self.amount})>"
        )
