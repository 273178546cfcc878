"""
Investment package model.

Immutable catalogue entry. Seeded once at initialization.
"""

from datetime import UTC, datetime

from sqlalchemy import Boolean, CheckConstraint, Integer
from sqlalchemy.orm import Mapped, mapped_column

from app.config.business_constants import INVESTMENT_DURATION_DAYS
from app.models.base import Base
from app.models.types import MoneyType, UTCDateTime


class InvestmentPackage(Base):
    """Investment package - fixed principal with a daily payout."""

    __tablename__ = "investment_packages"
    __table_args__ = (
        CheckConstraint(
            'principal_amount > 0', name='check_package_principal_positive'
        ),
        CheckConstraint(
            'daily_return_amount > 0',
            name='check_package_daily_return_positive'
        ),
        CheckConstraint(
            'duration_days > 0', name='check_package_duration_positive'
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    principal_amount: Mapped[int] = mapped_column(MoneyType, nullable=False)
    daily_return_amount: Mapped[int] = mapped_column(MoneyType, nullable=False)
    duration_days: Mapped[int] = mapped_column(
        Integer, default=INVESTMENT_DURATION_DAYS, nullable=False
    )
    active: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=lambda: datetime.now(UTC), nullable=False
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<InvestmentPackage(id={self.id}, principal={self.principal_amount}, "
            f"daily_return={self.daily_return_amount})>"
        )
