"""
Exception handling utilities.

Defines the platform's domain errors and categorized exception types
for proper error handling.
"""

from decimal import Decimal

from sqlalchemy.exc import OperationalError


class InvestmentPlatformError(Exception):
    """Base class for domain errors surfaced to callers."""


class PackageNotFoundError(InvestmentPlatformError):
    """Raised when a package is missing or no longer offered."""

    def __init__(self, package_id: int) -> None:
        self.package_id = package_id
        super().__init__(f"Investment package {package_id} not found")


class InvestmentNotFoundError(InvestmentPlatformError):
    """Raised when no investment matches (id, user_id)."""

    def __init__(self, investment_id: int, user_id: int | None = None) -> None:
        self.investment_id = investment_id
        self.user_id = user_id
        super().__init__(f"Investment {investment_id} not found")


class UserNotFoundError(InvestmentPlatformError):
    """Raised when a user does not exist."""

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


class InsufficientFundsError(InvestmentPlatformError):
    """Raised when the wallet cannot cover a debit."""

    def __init__(
        self,
        user_id: int,
        required: int | Decimal,
        available: int | Decimal,
        use_points: bool = False,
    ) -> None:
        self.user_id = user_id
        self.required = required
        self.available = available
        self.use_points = use_points
        unit = "points" if use_points else "balance"
        super().__init__(
            f"Insufficient {unit}: required {required}, available {available}"
        )


class AccountBlockedError(InvestmentPlatformError):
    """Raised when a blocked account attempts a financial operation."""

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__(f"Account {user_id} is blocked")


class InvalidPaymentAmountError(InvestmentPlatformError):
    """Raised for non-positive amounts or amounts above what is owed."""


class InvalidStateTransitionError(InvestmentPlatformError):
    """Raised when an investment cannot move to the requested status."""

    def __init__(self, investment_id: int, current: str, target: str) -> None:
        self.investment_id = investment_id
        self.current = current
        self.target = target
        super().__init__(
            f"Investment {investment_id} cannot move from {current} to {target}"
        )


class InvalidReferralCodeError(InvestmentPlatformError):
    """Raised for unknown codes, self-referral or referral loops."""


# Exception categories based on handling strategy

# Must log but can continue - the next scheduled run retries
MUST_LOG = (
    OperationalError,  # Database unavailable or connection dropped
)

# Must raise - validation and business rule violations
MUST_RAISE = (
    InvestmentPlatformError,
    ValueError,
    TypeError,
)


def must_log(exc: Exception) -> bool:
    """
    Check if exception must be logged and the batch continued.

    Args:
        exc: Exception to check

    Returns:
        True if exception is a transient infrastructure failure
    """
    return isinstance(exc, MUST_LOG)


def must_raise(exc: Exception) -> bool:
    """
    Check if exception must be raised to the caller.

    Args:
        exc: Exception to check

    Returns:
        True if exception is a validation or business rule failure
    """
    return isinstance(exc, MUST_RAISE)
