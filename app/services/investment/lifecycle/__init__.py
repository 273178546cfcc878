"""
Investment lifecycle management.

Handles investment creation, payment application, and status transitions.
"""

from app.services.investment.lifecycle.creator import InvestmentCreator
from app.services.investment.lifecycle.payment import (
    InvestmentPaymentProcessor,
    PaymentResult,
)
from app.services.investment.lifecycle.status_manager import (
    ALLOWED_TRANSITIONS,
    InvestmentStatusManager,
    can_transition,
)


__all__ = [
    "ALLOWED_TRANSITIONS",
    "InvestmentCreator",
    "InvestmentPaymentProcessor",
    "InvestmentStatusManager",
    "PaymentResult",
    "can_transition",
]
