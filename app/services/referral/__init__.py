"""
Referral services package.

Contains modular services for referral processing:
- config: Commission table (REFERRAL_DEPTH, REFERRAL_LEVELS)
- chain_manager: Walks the referral chain
- commission_engine: Posts commissions on investment activation
- registration: Applies referral codes and the registration bonus
- statistics: Per-class totals and milestone inputs
"""

from app.services.referral.chain_manager import ReferralChainManager
from app.services.referral.commission_engine import CommissionEngine, ProcessResult
from app.services.referral.config import REFERRAL_DEPTH, REFERRAL_LEVELS, ReferralLevel
from app.services.referral.registration import ReferralRegistrationService
from app.services.referral.statistics import ReferralStatisticsManager


__all__ = [
    # Configuration
    "REFERRAL_DEPTH",
    "REFERRAL_LEVELS",
    "ReferralLevel",
    # Managers
    "ReferralChainManager",
    "ReferralRegistrationService",
    "ReferralStatisticsManager",
    # Commission processing
    "CommissionEngine",
    "ProcessResult",
]
