"""
Investment Services Module.

Submodules:
- lifecycle: creation, payments and status transitions
- service: InvestmentService facade
"""

from .lifecycle import (
    InvestmentCreator,
    InvestmentPaymentProcessor,
    InvestmentStatusManager,
    PaymentResult,
)
from .service import InvestmentService


__all__ = [
    "InvestmentCreator",
    "InvestmentPaymentProcessor",
    "InvestmentService",
    "InvestmentStatusManager",
    "PaymentResult",
]
