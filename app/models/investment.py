"""
Investment model.

A user's purchase of an investment package. Moves through
pending -> active -> completed, with cancel and reset side paths.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.models.enums import InvestmentStatus, PaymentMode
from app.models.types import MoneyType, UTCDateTime

if TYPE_CHECKING:
    from app.models.investment_package import InvestmentPackage
    from app.models.user import User


class Investment(Base):
    """Investment model - user investments in packages."""

    __tablename__ = "user_investments"
    __table_args__ = (
        CheckConstraint(
            "payment_mode IN ('pay_now', 'pay_later')",
            name='check_investment_payment_mode'
        ),
        CheckConstraint(
            "status IN ('pending', 'active', 'completed', 'cancelled')",
            name='check_investment_status'
        ),
        CheckConstraint(
            'amount_invested > 0', name='check_investment_amount_positive'
        ),
        CheckConstraint(
            'amount_paid >= 0', name='check_investment_paid_non_negative'
        ),
        CheckConstraint(
            'amount_paid <= amount_invested',
            name='check_investment_paid_not_exceeds_invested'
        ),
        CheckConstraint(
            "(payment_mode = 'pay_later') = "
            "(initial_payment_deadline IS NOT NULL AND full_payment_deadline IS NOT NULL)",
            name='check_investment_deadlines_iff_pay_later'
        ),
        Index('idx_investment_status_start', 'status', 'start_date'),
        Index('idx_investment_mode_status', 'payment_mode', 'status'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    package_id: Mapped[int] = mapped_column(
        ForeignKey("investment_packages.id"),
        nullable=False,
        index=True
    )

    payment_mode: Mapped[str] = mapped_column(
        String(20), nullable=False
    )  # pay_now, pay_later

    # Amounts (minor units). amount_invested is fixed at creation.
    amount_invested: Mapped[int] = mapped_column(MoneyType, nullable=False)
    amount_paid: Mapped[int] = mapped_column(
        MoneyType, default=0, nullable=False
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=InvestmentStatus.PENDING.value,
        index=True
    )

    # Lifecycle timestamps
    start_date: Mapped[datetime | None] = mapped_column(
        UTCDateTime, nullable=True
    )
    end_date: Mapped[datetime | None] = mapped_column(
        UTCDateTime, nullable=True
    )

    # Pay-later deadlines
    initial_payment_deadline: Mapped[datetime | None] = mapped_column(
        UTCDateTime, nullable=True, index=True
    )
    full_payment_deadline: Mapped[datetime | None] = mapped_column(
        UTCDateTime, nullable=True, index=True
    )

    # Gate for at-most-one daily return per calendar day
    last_return_processed: Mapped[datetime | None] = mapped_column(
        UTCDateTime, nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=lambda: datetime.now(UTC), nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="investments")
    package: Mapped["InvestmentPackage"] = relationship("InvestmentPackage")

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Investment(id={self.id}, user_id={self.user_id}, "
            f"package_id={self.package_id}, paid={self.amount_paid}/"
            f"{self.amount_invested}, status={self.status})>"
        )

    @property
    def outstanding_amount(self) -> int:
        """Amount still to be paid (minor units)."""
        return max(self.amount_invested - self.amount_paid, 0)

    @property
    def is_fully_paid(self) -> bool:
        """Check if the principal has been paid in full."""
        return self.amount_paid >= self.amount_invested

    @property
    def is_pay_later(self) -> bool:
        """Check if this investment uses deferred payment."""
        return self.payment_mode == PaymentMode.PAY_LATER.value
