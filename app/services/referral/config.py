"""
Referral system configuration.

Re-exports the commission table from business constants and derives
per-level settings used by the commission engine.
"""

from dataclasses import dataclass
from decimal import Decimal

from app.config.business_constants import (
    REFERRAL_CLASSES,
    REFERRAL_DEPTH,
    REFERRAL_RATES,
    REGISTRATION_REFERRAL_POINTS,
)


@dataclass(frozen=True)
class ReferralLevel:
    """Commission settings for one depth of the referral chain."""

    level: int
    bonus_class: str
    rate: Decimal


# 3-level program: 7% / 2% / 1% of the invested principal
REFERRAL_LEVELS = [
    ReferralLevel(level=level, bonus_class=REFERRAL_CLASSES[level], rate=REFERRAL_RATES[level])
    for level in range(1, REFERRAL_DEPTH + 1)
]


__all__ = [
    "REFERRAL_DEPTH",
    "REFERRAL_LEVELS",
    "REFERRAL_RATES",
    "REGISTRATION_REFERRAL_POINTS",
    "ReferralLevel",
]
