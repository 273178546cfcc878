"""
Repositories.

Data access layer. Repositories hold no business rules.
"""

from app.repositories.base import BaseRepository
from app.repositories.investment_repository import InvestmentRepository
from app.repositories.ledger_repository import LedgerRepository
from app.repositories.notification_repository import NotificationRepository
from app.repositories.package_repository import PackageRepository
from app.repositories.referral_bonus_repository import ReferralBonusRepository
from app.repositories.user_repository import UserRepository


__all__ = [
    "BaseRepository",
    "InvestmentRepository",
    "LedgerRepository",
    "NotificationRepository",
    "PackageRepository",
    "ReferralBonusRepository",
    "UserRepository",
]
