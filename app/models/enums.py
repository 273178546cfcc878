"""
Model enums.

String-valued enums stored in VARCHAR columns.
"""

from enum import StrEnum


class PaymentMode(StrEnum):
    """How the investor pays for a package."""

    PAY_NOW = "pay_now"
    PAY_LATER = "pay_later"


class InvestmentStatus(StrEnum):
    """Investment lifecycle status."""

    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TransactionType(StrEnum):
    """Ledger transaction type."""

    BONUS = "bonus"
    CASHBACK = "cashback"
    WITHDRAWAL = "withdrawal"
    INVESTMENT = "investment"
    MILESTONE = "milestone"
    DAILY_RETURN = "daily_return"


class TransactionStatus(StrEnum):
    """Ledger transaction status."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class FundingSource(StrEnum):
    """Which wallet bucket a transaction moved."""

    BALANCE = "balance"
    POINTS = "points"


class ReferralClass(StrEnum):
    """Referral commission class by chain depth."""

    A = "A"
    B = "B"
    C = "C"


class NotificationType(StrEnum):
    """Notification kinds emitted by the core."""

    ACCOUNT_BLOCKED = "account_blocked"
    PAYMENT_DEADLINE_MISSED = "payment_deadline_missed"
    INVESTMENT_COMPLETED = "investment_completed"
    INVESTMENT_ACTIVATED = "investment_activated"
    REFERRAL_BONUS = "referral_bonus"


class NotificationPriority(StrEnum):
    """Notification priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
