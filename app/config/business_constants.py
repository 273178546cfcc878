"""
Business logic constants for the investment platform.

Central location for business rules used across services and jobs.
These are product rules, not deployment configuration, so they live
in code rather than in settings.
"""

from decimal import Decimal


# Investment term and yield
INVESTMENT_DURATION_DAYS = 30
DAILY_RETURN_RATE = Decimal("0.15")  # 15% of principal per day

# Currency: all stored amounts are integer minor units (cents)
MINOR_UNITS_PER_MAJOR = 100

# 1 point = 20 major currency units
MAJOR_UNITS_PER_POINT = 20

# Points credited to a referrer when someone registers with their code
REGISTRATION_REFERRAL_POINTS = Decimal("0.5")

# Multi-level referral commissions on investment activation
REFERRAL_DEPTH = 3
REFERRAL_CLASSES = {
    1: "A",  # direct referrer
    2: "B",  # referrer's referrer
    3: "C",  # third level
}
REFERRAL_RATES = {
    1: Decimal("0.07"),
    2: Decimal("0.02"),
    3: Decimal("0.01"),
}

# Seed catalogue: (principal, daily return) in minor units
DEFAULT_PACKAGES = [
    (10_000, 1_500),
    (25_000, 3_750),
    (50_000, 7_500),
    (100_000, 15_000),
    (250_000, 37_500),
    (500_000, 75_000),
]

# Listing limits
TRANSACTION_HISTORY_LIMIT = 50
NOTIFICATION_HISTORY_LIMIT = 20
