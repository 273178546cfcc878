"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from app.models.base import Base
from app.models.enums import (
    FundingSource,
    InvestmentStatus,
    NotificationPriority,
    NotificationType,
    PaymentMode,
    ReferralClass,
    TransactionStatus,
    TransactionType,
)

# Core Models
from app.models.investment import Investment
from app.models.investment_package import InvestmentPackage
from app.models.notification import Notification
from app.models.referral_bonus import ReferralBonus
from app.models.transaction import Transaction
from app.models.user import User
from app.models.wallet import Wallet


__all__ = [
    "Base",
    # Enums
    "FundingSource",
    "InvestmentStatus",
    "NotificationPriority",
    "NotificationType",
    "PaymentMode",
    "ReferralClass",
    "TransactionStatus",
    "TransactionType",
    # Models
    "Investment",
    "InvestmentPackage",
    "Notification",
    "ReferralBonus",
    "Transaction",
    "User",
    "Wallet",
]
