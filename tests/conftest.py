"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Minimal environment for Settings; must be set before app imports
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_FILE", "logs/test-settlement.log")
os.environ.setdefault("REDIS_HOST", "localhost")

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.models import Base, InvestmentPackage, TransactionType, User, Wallet
from app.repositories.ledger_repository import LedgerRepository
from app.services.investment import InvestmentService


# Fixed clock for scenario tests: noon UTC
NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


@pytest.fixture
def mock_session():
    """Mock AsyncSession for tests without a database."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
async def engine():
    """
    In-memory SQLite engine with the full schema.

    StaticPool keeps a single connection so every session sees the
    same in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def session(session_maker):
    """Database session for one test."""
    async with session_maker() as session:
        yield session


@pytest.fixture
async def packages(session) -> list[InvestmentPackage]:
    """Seeded default package catalogue, cheapest first."""
    service = InvestmentService(session)
    await service.ensure_default_packages()
    return await service.get_packages()


@pytest.fixture
def package_10k(packages) -> InvestmentPackage:
    """The 100.00 package (10000 minor units, 1500 daily)."""
    return packages[0]


@pytest.fixture
def make_user(session):
    """
    Factory creating a user with an empty wallet.

    Usage:
        user = await make_user(referred_by=referrer.id)
    """
    counter = {"n": 0}

    async def _make_user(
        referred_by: int | None = None,
        is_blocked: bool = False,
    ) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            email=f"investor{n}@example.com",
            referral_code=f"REF{n:04d}",
            referred_by=referred_by,
            is_blocked=is_blocked,
        )
        session.add(user)
        await session.flush()
        session.add(Wallet(user_id=user.id, balance=0, points=Decimal("0")))
        await session.commit()
        return user

    return _make_user


@pytest.fixture
def fund_wallet(session):
    """
    Factory crediting cash or points the way a top-up would.

    Cash top-ups are recorded as cashback so the ledger stays balanced.
    """

    async def _fund_wallet(
        user_id: int, balance: int = 0, points: Decimal = Decimal("0")
    ) -> Wallet:
        ledger = LedgerRepository(session)
        if balance:
            await ledger.credit_balance(user_id, balance)
            await ledger.append_transaction(
                user_id=user_id,
                type=TransactionType.CASHBACK.value,
                amount=balance,
                description="Test top-up",
            )
        if points:
            await ledger.credit_points(user_id, points)
        await session.commit()
        return await ledger.get(user_id)

    return _fund_wallet
