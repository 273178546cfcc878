"""
Unit tests for the investment state table.

Tests cover:
- Allowed and forbidden transitions
- Activation keeps an existing start_date
- Reset clears payment progress
"""

from datetime import UTC, datetime, timedelta

import pytest

from app.models.enums import InvestmentStatus, PaymentMode
from app.models.investment import Investment
from app.services.investment.lifecycle.status_manager import (
    InvestmentStatusManager,
    can_transition,
)
from app.utils.exceptions import InvalidStateTransitionError

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


def make_investment(status: str, amount_paid: int = 10_000, start_date=None) -> Investment:
    """Build a detached investment."""
    return Investment(
        id=1,
        user_id=100,
        package_id=1,
        payment_mode=PaymentMode.PAY_NOW.value,
        amount_invested=10_000,
        amount_paid=amount_paid,
        status=status,
        start_date=start_date,
    )


@pytest.fixture
def status_manager(mock_session):
    """Status manager with mocked session."""
    return InvestmentStatusManager(mock_session)


class TestTransitionTable:
    """Test the allowed transition table."""

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            ("pending", "active"),
            ("pending", "cancelled"),
            ("pending", "pending"),
            ("active", "completed"),
            ("active", "pending"),
        ],
    )
    def test_allowed(self, current, target):
        """Transitions in the table are allowed."""
        assert can_transition(current, target)

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            ("pending", "completed"),
            ("active", "cancelled"),
            ("active", "active"),
            ("completed", "active"),
            ("completed", "pending"),
            ("cancelled", "pending"),
            ("cancelled", "active"),
        ],
    )
    def test_forbidden(self, current, target):
        """No transition skips a state or leaves a terminal state."""
        assert not can_transition(current, target)


class TestStatusManager:
    """Test status manager mutations."""

    @pytest.mark.asyncio
    async def test_activate_sets_start_date(self, status_manager):
        """First activation stamps start_date."""
        investment = make_investment(InvestmentStatus.PENDING.value)

        await status_manager.activate(investment, NOW)

        assert investment.status == InvestmentStatus.ACTIVE.value
        assert investment.start_date == NOW

    @pytest.mark.asyncio
    async def test_activate_keeps_existing_start_date(self, status_manager):
        """A start_date set earlier is never moved."""
        earlier = NOW - timedelta(days=2)
        investment = make_investment(InvestmentStatus.PENDING.value, start_date=earlier)

        await status_manager.activate(investment, NOW)

        assert investment.start_date == earlier

    @pytest.mark.asyncio
    async def test_complete_sets_end_date(self, status_manager):
        """Completion stamps end_date."""
        investment = make_investment(InvestmentStatus.ACTIVE.value, start_date=NOW)

        await status_manager.complete(investment, NOW + timedelta(days=30))

        assert investment.status == InvestmentStatus.COMPLETED.value
        assert investment.end_date == NOW + timedelta(days=30)

    @pytest.mark.asyncio
    async def test_complete_pending_is_rejected(self, status_manager):
        """Pending cannot jump to completed."""
        investment = make_investment(InvestmentStatus.PENDING.value)

        with pytest.raises(InvalidStateTransitionError) as exc_info:
            await status_manager.complete(investment, NOW)

        assert exc_info.value.current == "pending"
        assert exc_info.value.target == "completed"
        assert investment.status == InvestmentStatus.PENDING.value

    @pytest.mark.asyncio
    async def test_cancel_active_is_rejected(self, status_manager):
        """Only pending investments can be cancelled."""
        investment = make_investment(InvestmentStatus.ACTIVE.value, start_date=NOW)

        with pytest.raises(InvalidStateTransitionError):
            await status_manager.cancel(investment)

    @pytest.mark.asyncio
    async def test_reset_clears_progress(self, status_manager):
        """Reset returns to pending with nothing paid."""
        investment = make_investment(
            InvestmentStatus.ACTIVE.value, amount_paid=2_000, start_date=NOW
        )

        await status_manager.reset_to_pending(investment)

        assert investment.status == InvestmentStatus.PENDING.value
        assert investment.amount_paid == 0
        assert investment.start_date is None
