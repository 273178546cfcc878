"""
Services.

Business logic layer.
"""

from app.services.notification import NotificationService
from app.services.referral import (
    CommissionEngine,
    ReferralChainManager,
    ReferralRegistrationService,
    ReferralStatisticsManager,
)
from app.services.investment import InvestmentService
from app.services.settlement import DailyAccrualProcessor, DeadlineEnforcer
from app.services.wallet import WalletService


__all__ = [
    "CommissionEngine",
    "DailyAccrualProcessor",
    "DeadlineEnforcer",
    "InvestmentService",
    "NotificationService",
    "ReferralChainManager",
    "ReferralRegistrationService",
    "ReferralStatisticsManager",
    "WalletService",
]
