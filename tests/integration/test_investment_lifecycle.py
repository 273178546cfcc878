"""
Integration tests for investment creation and payments.

Runs the real repositories and services against SQLite.
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import select

from app.models import Investment, Notification
from app.models.enums import (
    FundingSource,
    InvestmentStatus,
    NotificationType,
    PaymentMode,
    TransactionType,
)
from app.repositories.ledger_repository import LedgerRepository
from app.services.investment import InvestmentService
from app.utils.exceptions import (
    AccountBlockedError,
    InsufficientFundsError,
    InvalidPaymentAmountError,
    InvalidStateTransitionError,
    InvestmentNotFoundError,
    PackageNotFoundError,
    UserNotFoundError,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


@pytest.fixture
def service(session):
    """Investment service facade."""
    return InvestmentService(session)


class TestPackages:
    """Package catalogue and seeding."""

    @pytest.mark.asyncio
    async def test_six_default_packages(self, packages):
        """Seed data holds six packages at 15% daily."""
        assert [(p.principal_amount, p.daily_return_amount) for p in packages] == [
            (10_000, 1_500),
            (25_000, 3_750),
            (50_000, 7_500),
            (100_000, 15_000),
            (250_000, 37_500),
            (500_000, 75_000),
        ]
        assert all(p.duration_days == 30 for p in packages)

    @pytest.mark.asyncio
    async def test_seeding_is_idempotent(self, service, packages):
        """A second seed creates nothing."""
        assert await service.ensure_default_packages() == 0
        assert len(await service.get_packages()) == 6


class TestCreateInvestment:
    """Investment creation."""

    @pytest.mark.asyncio
    async def test_pay_now_has_no_deadlines(self, service, make_user, package_10k):
        """PayNow investments start pending without deadlines."""
        user = await make_user()

        investment = await service.create_investment(
            user.id, package_10k.id, PaymentMode.PAY_NOW.value, now=NOW
        )

        assert investment.status == InvestmentStatus.PENDING.value
        assert investment.amount_invested == 10_000
        assert investment.amount_paid == 0
        assert investment.initial_payment_deadline is None
        assert investment.full_payment_deadline is None
        assert investment.start_date is None

    @pytest.mark.asyncio
    async def test_pay_later_deadlines(self, service, make_user, package_10k):
        """PayLater gets a 3 hour and a 14 day deadline."""
        user = await make_user()

        investment = await service.create_investment(
            user.id, package_10k.id, PaymentMode.PAY_LATER.value, now=NOW
        )

        assert investment.initial_payment_deadline == NOW + timedelta(hours=3)
        assert investment.full_payment_deadline == NOW + timedelta(days=14)

    @pytest.mark.asyncio
    async def test_unknown_package(self, service, make_user, packages):
        """Missing package is rejected."""
        user = await make_user()

        with pytest.raises(PackageNotFoundError):
            await service.create_investment(user.id, 999, PaymentMode.PAY_NOW.value)

    @pytest.mark.asyncio
    async def test_inactive_package(self, service, session, make_user, package_10k):
        """Packages no longer offered are rejected."""
        user = await make_user()
        package_10k.active = False
        await session.commit()

        with pytest.raises(PackageNotFoundError):
            await service.create_investment(
                user.id, package_10k.id, PaymentMode.PAY_NOW.value
            )

    @pytest.mark.asyncio
    async def test_blocked_user(self, service, make_user, package_10k):
        """Blocked users cannot invest."""
        user = await make_user(is_blocked=True)

        with pytest.raises(AccountBlockedError):
            await service.create_investment(
                user.id, package_10k.id, PaymentMode.PAY_NOW.value
            )

    @pytest.mark.asyncio
    async def test_unknown_user(self, service, package_10k):
        """Unknown users cannot invest."""
        with pytest.raises(UserNotFoundError):
            await service.create_investment(
                4242, package_10k.id, PaymentMode.PAY_NOW.value
            )

    @pytest.mark.asyncio
    async def test_listing_newest_first(self, service, make_user, package_10k, packages):
        """User investments are listed newest first."""
        user = await make_user()
        first = await service.create_investment(
            user.id, package_10k.id, PaymentMode.PAY_NOW.value, now=NOW
        )
        second = await service.create_investment(
            user.id, packages[1].id, PaymentMode.PAY_NOW.value, now=NOW + timedelta(minutes=5)
        )

        listed = await service.get_user_investments(user.id)

        assert [i.id for i in listed] == [second.id, first.id]


class TestApplyPayment:
    """Payment application and activation."""

    @pytest.mark.asyncio
    async def test_pay_now_full_payment(
        self, service, session, make_user, fund_wallet, package_10k
    ):
        """One full payment activates and debits exactly the principal."""
        user = await make_user()
        await fund_wallet(user.id, balance=10_000)
        investment = await service.create_investment(
            user.id, package_10k.id, PaymentMode.PAY_NOW.value, now=NOW
        )

        result = await service.apply_payment(user.id, investment.id, 10_000, now=NOW)

        assert result.activated is True
        assert result.investment.status == InvestmentStatus.ACTIVE.value
        assert result.investment.start_date == NOW
        assert result.investment.amount_paid == 10_000

        ledger = LedgerRepository(session)
        wallet = await ledger.get(user.id)
        assert wallet.balance == 0

        payments = [
            t for t in await ledger.get_recent_transactions(user.id, 50)
            if t.type == TransactionType.INVESTMENT.value
        ]
        assert len(payments) == 1
        assert payments[0].amount == -10_000
        assert payments[0].funding_source == FundingSource.BALANCE.value

    @pytest.mark.asyncio
    async def test_activation_notifies_user(
        self, service, session, make_user, fund_wallet, package_10k
    ):
        """Activation queues one activation notification."""
        user = await make_user()
        await fund_wallet(user.id, balance=10_000)
        investment = await service.create_investment(
            user.id, package_10k.id, PaymentMode.PAY_NOW.value, now=NOW
        )

        await service.apply_payment(user.id, investment.id, 10_000, now=NOW)

        result = await session.execute(
            select(Notification).where(
                Notification.user_id == user.id,
                Notification.type == NotificationType.INVESTMENT_ACTIVATED.value,
            )
        )
        assert len(result.scalars().all()) == 1

    @pytest.mark.asyncio
    async def test_insufficient_balance_changes_nothing(
        self, service, session, make_user, fund_wallet, package_10k
    ):
        """A rejected payment leaves wallet, investment and ledger untouched."""
        user = await make_user()
        user_id = user.id
        await fund_wallet(user_id, balance=5_000)
        investment = await service.create_investment(
            user_id, package_10k.id, PaymentMode.PAY_NOW.value, now=NOW
        )
        investment_id = investment.id

        with pytest.raises(InsufficientFundsError) as exc_info:
            await service.apply_payment(user_id, investment_id, 10_000, now=NOW)

        assert exc_info.value.available == 5_000

        ledger = LedgerRepository(session)
        assert (await ledger.get(user_id)).balance == 5_000
        refreshed = await session.get(Investment, investment_id, populate_existing=True)
        assert refreshed.amount_paid == 0
        assert refreshed.status == InvestmentStatus.PENDING.value
        assert all(
            t.type != TransactionType.INVESTMENT.value
            for t in await ledger.get_recent_transactions(user_id, 50)
        )

    @pytest.mark.asyncio
    async def test_pay_with_points(
        self, service, session, make_user, fund_wallet, package_10k
    ):
        """100.00 costs 5 points and the ledger row is points-funded."""
        user = await make_user()
        await fund_wallet(user.id, points=Decimal("5"))
        investment = await service.create_investment(
            user.id, package_10k.id, PaymentMode.PAY_NOW.value, now=NOW
        )

        result = await service.apply_payment(
            user.id, investment.id, 10_000, use_points=True, now=NOW
        )

        assert result.activated is True
        ledger = LedgerRepository(session)
        wallet = await ledger.get(user.id)
        assert wallet.points == Decimal("0")
        assert wallet.balance == 0

        transactions = await ledger.get_recent_transactions(user.id, 50)
        assert transactions[0].funding_source == FundingSource.POINTS.value
        assert transactions[0].amount == -10_000

    @pytest.mark.asyncio
    async def test_insufficient_points(self, service, make_user, fund_wallet, package_10k):
        """Points must cover amount / 20 major units."""
        user = await make_user()
        await fund_wallet(user.id, points=Decimal("4.5"))
        investment = await service.create_investment(
            user.id, package_10k.id, PaymentMode.PAY_NOW.value, now=NOW
        )

        with pytest.raises(InsufficientFundsError) as exc_info:
            await service.apply_payment(
                user.id, investment.id, 10_000, use_points=True, now=NOW
            )

        assert exc_info.value.use_points is True
        assert exc_info.value.required == Decimal("5")

    @pytest.mark.asyncio
    async def test_installments_activate_once(
        self, service, make_user, fund_wallet, package_10k
    ):
        """20% then 80% activates on the second payment only."""
        user = await make_user()
        await fund_wallet(user.id, balance=10_000)
        investment = await service.create_investment(
            user.id, package_10k.id, PaymentMode.PAY_LATER.value, now=NOW
        )

        first = await service.apply_payment(user.id, investment.id, 2_000, now=NOW)
        assert first.activated is False
        assert first.investment.status == InvestmentStatus.PENDING.value
        assert first.investment.start_date is None

        later = NOW + timedelta(days=3)
        second = await service.apply_payment(user.id, investment.id, 8_000, now=later)
        assert second.activated is True
        assert second.investment.start_date == later
        assert second.investment.amount_paid == 10_000

    @pytest.mark.asyncio
    async def test_overpayment_rejected(self, service, make_user, fund_wallet, package_10k):
        """Payments above the outstanding amount are rejected."""
        user = await make_user()
        await fund_wallet(user.id, balance=20_000)
        investment = await service.create_investment(
            user.id, package_10k.id, PaymentMode.PAY_LATER.value, now=NOW
        )
        await service.apply_payment(user.id, investment.id, 2_000, now=NOW)

        with pytest.raises(InvalidPaymentAmountError):
            await service.apply_payment(user.id, investment.id, 9_000, now=NOW)

    @pytest.mark.asyncio
    async def test_payment_after_activation_keeps_start_date(
        self, service, session, make_user, fund_wallet, package_10k
    ):
        """Replaying a payment on an active investment changes nothing."""
        user = await make_user()
        user_id = user.id
        await fund_wallet(user_id, balance=20_000)
        investment = await service.create_investment(
            user_id, package_10k.id, PaymentMode.PAY_NOW.value, now=NOW
        )
        investment_id = investment.id
        await service.apply_payment(user_id, investment_id, 10_000, now=NOW)

        with pytest.raises(InvalidPaymentAmountError):
            await service.apply_payment(
                user_id, investment_id, 10_000, now=NOW + timedelta(days=1)
            )

        refreshed = await session.get(Investment, investment_id, populate_existing=True)
        assert refreshed.start_date == NOW
        assert refreshed.amount_paid == 10_000
        assert (await LedgerRepository(session).get(user_id)).balance == 10_000

    @pytest.mark.asyncio
    async def test_non_positive_amount(self, service, make_user, package_10k):
        """Zero and negative amounts are rejected."""
        user = await make_user()
        investment = await service.create_investment(
            user.id, package_10k.id, PaymentMode.PAY_NOW.value, now=NOW
        )
        user_id, investment_id = user.id, investment.id

        for amount in (0, -100):
            with pytest.raises(InvalidPaymentAmountError):
                await service.apply_payment(user_id, investment_id, amount, now=NOW)

    @pytest.mark.asyncio
    async def test_other_users_investment(self, service, make_user, fund_wallet, package_10k):
        """Investments are matched on (id, user_id)."""
        owner = await make_user()
        stranger = await make_user()
        await fund_wallet(stranger.id, balance=10_000)
        investment = await service.create_investment(
            owner.id, package_10k.id, PaymentMode.PAY_NOW.value, now=NOW
        )

        with pytest.raises(InvestmentNotFoundError):
            await service.apply_payment(stranger.id, investment.id, 10_000, now=NOW)

    @pytest.mark.asyncio
    async def test_cancelled_investment(
        self, service, session, make_user, fund_wallet, package_10k
    ):
        """Cancelled investments take no payments."""
        user = await make_user()
        await fund_wallet(user.id, balance=10_000)
        investment = await service.create_investment(
            user.id, package_10k.id, PaymentMode.PAY_NOW.value, now=NOW
        )
        investment.status = InvestmentStatus.CANCELLED.value
        await session.commit()

        with pytest.raises(InvalidStateTransitionError):
            await service.apply_payment(user.id, investment.id, 10_000, now=NOW)

    @pytest.mark.asyncio
    async def test_blocked_user_cannot_pay(
        self, service, session, make_user, fund_wallet, package_10k
    ):
        """A user blocked after creating an investment cannot pay it."""
        user = await make_user()
        await fund_wallet(user.id, balance=10_000)
        investment = await service.create_investment(
            user.id, package_10k.id, PaymentMode.PAY_LATER.value, now=NOW
        )
        user.is_blocked = True
        await session.commit()

        with pytest.raises(AccountBlockedError):
            await service.apply_payment(user.id, investment.id, 2_000, now=NOW)
