"""
Money and points arithmetic.

Amounts are integer minor units; points are fractional Decimals.
Rounding happens only where a currency amount must become an integer.
"""

from decimal import ROUND_HALF_UP, Decimal

from app.config.business_constants import MAJOR_UNITS_PER_POINT, MINOR_UNITS_PER_MAJOR


def minor_to_major(amount_minor: int) -> Decimal:
    """Convert minor units to major units, exactly."""
    return Decimal(amount_minor) / MINOR_UNITS_PER_MAJOR


def points_for_amount(amount_minor: int) -> Decimal:
    """
    Points needed to pay an amount.

    1 point = 20 major units, so 10000 minor units (100.00) costs 5 points.
    The result is never rounded.

    Args:
        amount_minor: Amount in minor units

    Returns:
        Fractional points
    """
    return minor_to_major(amount_minor) / MAJOR_UNITS_PER_POINT


def percentage_of(amount_minor: int, rate: Decimal) -> int:
    """
    Apply a rate to an amount and round half-up to whole minor units.

    Args:
        amount_minor: Base amount in minor units
        rate: Fraction, e.g. Decimal("0.07")

    Returns:
        Rounded amount in minor units
    """
    return int((Decimal(amount_minor) * rate).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_major(amount_minor: int) -> str:
    """Format minor units as a display string with two decimals."""
    return f"{minor_to_major(amount_minor):.2f}"
