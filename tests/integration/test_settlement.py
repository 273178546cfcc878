"""
Integration tests for the daily accrual processor and deadline enforcer.
"""

from datetime import UTC, datetime, timedelta

import pytest

from app.config.settings import settings
from app.models.enums import InvestmentStatus, NotificationType, PaymentMode, TransactionType
from app.models.investment import Investment
from app.repositories.investment_repository import InvestmentRepository
from app.repositories.ledger_repository import LedgerRepository
from app.repositories.notification_repository import NotificationRepository
from app.repositories.user_repository import UserRepository
from app.services.investment import InvestmentService
from app.services.settlement import DailyAccrualProcessor, DeadlineEnforcer

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


@pytest.fixture
def active_investment(session, fund_wallet, package_10k):
    """Factory: an investment activated `days_ago` days before NOW."""

    async def _active_investment(user_id: int, days_ago: int, package=None) -> int:
        package = package or package_10k
        started = NOW - timedelta(days=days_ago)
        service = InvestmentService(session)
        await fund_wallet(user_id, balance=package.principal_amount)
        investment = await service.create_investment(
            user_id, package.id, PaymentMode.PAY_NOW.value, now=started
        )
        await service.apply_payment(
            user_id, investment.id, package.principal_amount, now=started
        )
        return investment.id

    return _active_investment


async def _transactions_of_type(session, user_id: int, type: TransactionType):
    transactions = await LedgerRepository(session).get_recent_transactions(user_id, 50)
    return [t for t in transactions if t.type == type.value]


async def _notification_types(session, user_id: int) -> list[str]:
    notifications = await NotificationRepository(session).get_recent(user_id, 20)
    return [n.type for n in notifications]


class TestDailyAccrual:
    """Daily return crediting and completion."""

    @pytest.mark.asyncio
    async def test_credits_daily_return(self, session, make_user, active_investment):
        """One day into the term the daily amount is credited."""
        user = await make_user()
        investment_id = await active_investment(user.id, days_ago=1)

        result = await DailyAccrualProcessor(session).run(NOW)

        assert result.credited_count == 1
        assert result.total_credited == 1_500
        assert (await LedgerRepository(session).get(user.id)).balance == 1_500
        returns = await _transactions_of_type(session, user.id, TransactionType.DAILY_RETURN)
        assert [t.amount for t in returns] == [1_500]

        investment = await InvestmentRepository(session).get_by_id(investment_id)
        await session.refresh(investment)
        assert investment.last_return_processed == NOW

    @pytest.mark.asyncio
    async def test_same_day_rerun_is_noop(self, session, make_user, active_investment):
        """A second run on the same UTC day credits nothing."""
        user = await make_user()
        await active_investment(user.id, days_ago=1)
        processor = DailyAccrualProcessor(session)

        await processor.run(NOW)
        second = await processor.run(NOW + timedelta(hours=6))

        assert second.processed_count == 0
        assert (await LedgerRepository(session).get(user.id)).balance == 1_500

    @pytest.mark.asyncio
    async def test_next_day_credits_again(self, session, make_user, active_investment):
        """Each UTC day gets its own credit."""
        user = await make_user()
        await active_investment(user.id, days_ago=1)
        processor = DailyAccrualProcessor(session)

        await processor.run(NOW)
        await processor.run(NOW + timedelta(days=1))

        assert (await LedgerRepository(session).get(user.id)).balance == 3_000

    @pytest.mark.asyncio
    async def test_day_before_term_end_is_credited(
        self, session, make_user, active_investment
    ):
        """Day 30 of 30 still pays."""
        user = await make_user()
        investment_id = await active_investment(user.id, days_ago=29)

        result = await DailyAccrualProcessor(session).run(NOW)

        assert result.credited_count == 1
        investment = await InvestmentRepository(session).get_by_id(investment_id)
        await session.refresh(investment)
        assert investment.status == InvestmentStatus.ACTIVE.value

    @pytest.mark.parametrize("days_ago", [30, 31])
    @pytest.mark.asyncio
    async def test_completes_after_term(
        self, session, make_user, active_investment, days_ago
    ):
        """After the term the investment completes without a credit."""
        user = await make_user()
        investment_id = await active_investment(user.id, days_ago=days_ago)

        result = await DailyAccrualProcessor(session).run(NOW)

        assert result.completed_count == 1
        assert result.credited_count == 0
        investment = await InvestmentRepository(session).get_by_id(investment_id)
        await session.refresh(investment)
        assert investment.status == InvestmentStatus.COMPLETED.value
        assert investment.end_date == NOW
        assert await _transactions_of_type(session, user.id, TransactionType.DAILY_RETURN) == []
        assert NotificationType.INVESTMENT_COMPLETED.value in await _notification_types(
            session, user.id
        )

    @pytest.mark.asyncio
    async def test_pending_is_not_credited(self, session, make_user, package_10k):
        """Unpaid investments earn nothing."""
        user = await make_user()
        await InvestmentService(session).create_investment(
            user.id, package_10k.id, PaymentMode.PAY_LATER.value, now=NOW - timedelta(days=1)
        )

        result = await DailyAccrualProcessor(session).run(NOW)

        assert result.processed_count == 0
        assert (await LedgerRepository(session).get(user.id)).balance == 0

    @pytest.mark.asyncio
    async def test_emergency_stop(self, session, make_user, active_investment, monkeypatch):
        """The emergency switch skips the whole run."""
        user = await make_user()
        await active_investment(user.id, days_ago=1)
        monkeypatch.setattr(settings, "emergency_stop_accrual", True)

        result = await DailyAccrualProcessor(session).run(NOW)

        assert result.processed_count == 0
        assert (await LedgerRepository(session).get(user.id)).balance == 0

    @pytest.mark.asyncio
    async def test_failure_is_isolated(
        self, session, make_user, active_investment, packages, monkeypatch
    ):
        """One failing investment does not stop the rest of the batch."""
        failing_user = await make_user()
        healthy_user = await make_user()
        failing_user_id, healthy_user_id = failing_user.id, healthy_user.id
        failing_package_id = packages[1].id
        await active_investment(failing_user_id, days_ago=1, package=packages[1])
        await active_investment(healthy_user_id, days_ago=1)

        processor = DailyAccrualProcessor(session)
        original_get = processor.package_repo.get_by_id

        async def flaky_get(package_id):
            if package_id == failing_package_id:
                raise RuntimeError("package lookup failed")
            return await original_get(package_id)

        monkeypatch.setattr(processor.package_repo, "get_by_id", flaky_get)

        result = await processor.run(NOW)

        assert result.failed_count == 1
        assert result.credited_count == 1
        ledger = LedgerRepository(session)
        assert (await ledger.get(healthy_user_id)).balance == 1_500
        assert (await ledger.get(failing_user_id)).balance == 0

    @pytest.mark.asyncio
    async def test_error_message_with_braces_is_isolated(
        self, session, make_user, active_investment, packages, monkeypatch
    ):
        """Errors whose text contains braces are logged and the batch goes on."""
        failing_user = await make_user()
        healthy_user = await make_user()
        failing_user_id, healthy_user_id = failing_user.id, healthy_user.id
        failing_package_id = packages[1].id
        await active_investment(failing_user_id, days_ago=1, package=packages[1])
        await active_investment(healthy_user_id, days_ago=1)

        processor = DailyAccrualProcessor(session)
        original_get = processor.package_repo.get_by_id

        async def broken_get(package_id):
            if package_id == failing_package_id:
                raise ValueError("unexpected record shape {'duration_days': None}")
            return await original_get(package_id)

        monkeypatch.setattr(processor.package_repo, "get_by_id", broken_get)

        result = await processor.run(NOW)

        assert result.failed_count == 1
        assert result.credited_count == 1
        assert (await LedgerRepository(session).get(healthy_user_id)).balance == 1_500


class TestDeadlineEnforcer:
    """Pay-later deadline enforcement."""

    @pytest.mark.asyncio
    async def test_first_time_investor_is_blocked(self, session, make_user, package_10k):
        """Missing the initial payment with no history blocks the account."""
        user = await make_user()
        user_id = user.id
        investment = await InvestmentService(session).create_investment(
            user_id, package_10k.id, PaymentMode.PAY_LATER.value, now=NOW
        )
        investment_id = investment.id

        result = await DeadlineEnforcer(session).run(NOW + timedelta(hours=4))

        assert result.blocked_count == 1
        blocked = await UserRepository(session).get_by_id(user_id)
        await session.refresh(blocked)
        assert blocked.is_blocked is True
        assert blocked.blocked_at is not None

        investment = await InvestmentRepository(session).get_by_id(investment_id)
        await session.refresh(investment)
        assert investment.status == InvestmentStatus.PENDING.value
        assert await _notification_types(session, user_id) == [
            NotificationType.ACCOUNT_BLOCKED.value
        ]

    @pytest.mark.asyncio
    async def test_rerun_does_not_block_twice(self, session, make_user, package_10k):
        """An already blocked user is skipped and not notified again."""
        user = await make_user()
        user_id = user.id
        await InvestmentService(session).create_investment(
            user_id, package_10k.id, PaymentMode.PAY_LATER.value, now=NOW
        )
        enforcer = DeadlineEnforcer(session)

        await enforcer.run(NOW + timedelta(hours=4))
        second = await enforcer.run(NOW + timedelta(hours=5))

        assert second.blocked_count == 0
        assert second.skipped_count == 1
        assert len(await _notification_types(session, user_id)) == 1

    @pytest.mark.asyncio
    async def test_existing_investor_loses_investment(
        self, session, make_user, fund_wallet, package_10k
    ):
        """Users with a settled investment get the missed one cancelled."""
        user = await make_user()
        user_id = user.id
        service = InvestmentService(session)
        await fund_wallet(user_id, balance=package_10k.principal_amount)
        paid = await service.create_investment(
            user_id, package_10k.id, PaymentMode.PAY_NOW.value, now=NOW
        )
        await service.apply_payment(user_id, paid.id, package_10k.principal_amount, now=NOW)
        missed = await service.create_investment(
            user_id, package_10k.id, PaymentMode.PAY_LATER.value, now=NOW
        )
        missed_id = missed.id

        result = await DeadlineEnforcer(session).run(NOW + timedelta(hours=4))

        assert result.cancelled_count == 1
        assert result.blocked_count == 0
        investment = await InvestmentRepository(session).get_by_id(missed_id)
        await session.refresh(investment)
        assert investment.status == InvestmentStatus.CANCELLED.value
        owner = await UserRepository(session).get_by_id(user_id)
        await session.refresh(owner)
        assert owner.is_blocked is False

    @pytest.mark.asyncio
    async def test_before_deadline_nothing_happens(self, session, make_user, package_10k):
        """Inside the initial window nothing is enforced."""
        user = await make_user()
        await InvestmentService(session).create_investment(
            user.id, package_10k.id, PaymentMode.PAY_LATER.value, now=NOW
        )

        result = await DeadlineEnforcer(session).run(NOW + timedelta(hours=2))

        assert result.blocked_count == 0
        assert result.cancelled_count == 0
        assert result.skipped_count == 0

    @pytest.mark.asyncio
    async def test_partial_payment_clears_initial_deadline(
        self, session, make_user, fund_wallet, package_10k
    ):
        """Any payment inside the window avoids the block."""
        user = await make_user()
        user_id = user.id
        service = InvestmentService(session)
        await fund_wallet(user_id, balance=1_000)
        investment = await service.create_investment(
            user_id, package_10k.id, PaymentMode.PAY_LATER.value, now=NOW
        )
        await service.apply_payment(user_id, investment.id, 1_000, now=NOW)

        result = await DeadlineEnforcer(session).run(NOW + timedelta(hours=4))

        assert result.blocked_count == 0
        owner = await UserRepository(session).get_by_id(user_id)
        await session.refresh(owner)
        assert owner.is_blocked is False

    @pytest.mark.asyncio
    async def test_full_payment_miss_resets(self, session, make_user, package_10k):
        """An active but underpaid investment past the full deadline is reset."""
        user = await make_user()
        user_id = user.id
        investment = Investment(
            user_id=user_id,
            package_id=package_10k.id,
            amount_invested=package_10k.principal_amount,
            amount_paid=4_000,
            payment_mode=PaymentMode.PAY_LATER.value,
            status=InvestmentStatus.ACTIVE.value,
            start_date=NOW - timedelta(days=8),
            initial_payment_deadline=NOW - timedelta(days=8) + timedelta(hours=3),
            full_payment_deadline=NOW - timedelta(days=1),
            created_at=NOW - timedelta(days=8),
        )
        session.add(investment)
        await session.commit()
        investment_id = investment.id

        result = await DeadlineEnforcer(session).run(NOW)

        assert result.reset_count == 1
        reset = await InvestmentRepository(session).get_by_id(investment_id)
        await session.refresh(reset)
        assert reset.status == InvestmentStatus.PENDING.value
        assert reset.amount_paid == 0
        assert reset.start_date is None
        assert await _notification_types(session, user_id) == [
            NotificationType.PAYMENT_DEADLINE_MISSED.value
        ]

    @pytest.mark.asyncio
    async def test_error_message_with_braces_is_isolated(
        self, session, make_user, package_10k, monkeypatch
    ):
        """A failing investment with a brace-laden error does not stop the pass."""
        failing_user = await make_user()
        healthy_user = await make_user()
        failing_user_id, healthy_user_id = failing_user.id, healthy_user.id
        service = InvestmentService(session)
        for user_id in (failing_user_id, healthy_user_id):
            await service.create_investment(
                user_id, package_10k.id, PaymentMode.PAY_LATER.value, now=NOW
            )

        enforcer = DeadlineEnforcer(session)
        original_count = enforcer.investment_repo.count_settled_for_user

        async def broken_count(user_id):
            if user_id == failing_user_id:
                raise ValueError("unexpected record shape {'status': None}")
            return await original_count(user_id)

        monkeypatch.setattr(enforcer.investment_repo, "count_settled_for_user", broken_count)

        result = await enforcer.run(NOW + timedelta(hours=4))

        assert result.failed_count == 1
        assert result.blocked_count == 1
        healthy = await UserRepository(session).get_by_id(healthy_user_id)
        await session.refresh(healthy)
        assert healthy.is_blocked is True
