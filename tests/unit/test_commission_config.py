"""
Unit tests for the referral commission table.

Tests cover:
- Level to class mapping
- Rates per class
- Amounts posted for each seed package
"""

from decimal import Decimal

import pytest

from app.config.business_constants import DEFAULT_PACKAGES, DAILY_RETURN_RATE
from app.services.referral.config import REFERRAL_DEPTH, REFERRAL_LEVELS
from app.utils.money import percentage_of


class TestReferralLevels:
    """Test the 3-level commission table."""

    def test_depth(self):
        """Three levels, one per class."""
        assert REFERRAL_DEPTH == 3
        assert [level.bonus_class for level in REFERRAL_LEVELS] == ["A", "B", "C"]

    def test_rates(self):
        """7% / 2% / 1%."""
        assert [level.rate for level in REFERRAL_LEVELS] == [
            Decimal("0.07"),
            Decimal("0.02"),
            Decimal("0.01"),
        ]

    @pytest.mark.parametrize(("principal", "daily_return"), DEFAULT_PACKAGES)
    def test_commission_amounts_per_package(self, principal, daily_return):
        """Commissions are exact whole minor units for every seed package."""
        amounts = [percentage_of(principal, level.rate) for level in REFERRAL_LEVELS]

        assert amounts == [principal * 7 // 100, principal * 2 // 100, principal // 100]

    @pytest.mark.parametrize(("principal", "daily_return"), DEFAULT_PACKAGES)
    def test_seed_daily_return_is_fifteen_percent(self, principal, daily_return):
        """Seed data pays 15% of principal per day."""
        assert percentage_of(principal, DAILY_RETURN_RATE) == daily_return
