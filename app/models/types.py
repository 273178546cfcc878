"""
Standard type definitions for database models.

Provides consistent types for monetary, point and timestamp fields
across all models.
"""

from datetime import UTC, datetime

from sqlalchemy import DECIMAL, BigInteger, DateTime
from sqlalchemy.types import TypeDecorator

# Money is stored as integer minor units (cents)
# Suitable for: principal, daily return, balances, transaction amounts
MoneyType = BigInteger

# Points are fractional and never rounded in storage
# Precision: 18 digits total, 8 after decimal point
PointsType = DECIMAL(18, 8)

# Commission percentage stored as a fraction (0.07 == 7%)
# Precision: 5 digits total, 4 after decimal point
RateType = DECIMAL(5, 4)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC timestamp.

    PostgreSQL keeps the offset natively; SQLite drops it, so values
    read back without tzinfo are re-tagged as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)
