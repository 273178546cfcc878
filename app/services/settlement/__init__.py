"""
Settlement services.

Scheduled processing that advances investments over time:
- accrual_processor: daily returns and completion
- deadline_enforcer: pay-later deadline misses
"""

from app.services.settlement.accrual_processor import AccrualResult, DailyAccrualProcessor
from app.services.settlement.deadline_enforcer import DeadlineEnforcer, DeadlineResult


__all__ = [
    "AccrualResult",
    "DailyAccrualProcessor",
    "DeadlineEnforcer",
    "DeadlineResult",
]
