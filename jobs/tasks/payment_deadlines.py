"""
Payment deadlines task.

Blocks, cancels or resets pay-later investments past their deadlines.
Runs hourly.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import asdict

import dramatiq
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.settlement import DeadlineEnforcer, DeadlineResult
from jobs.async_runner import create_local_session, run_async
from jobs.broker import broker  # noqa: F401  registers the broker

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


@dramatiq.actor(max_retries=0, time_limit=10 * 60 * 1000)
def check_payment_deadlines() -> None:
    """Run both deadline passes."""
    logger.info("Starting payment deadline check")

    try:
        result = run_async(run_payment_deadlines())
    except Exception as e:
        logger.exception(f"Payment deadline check failed: {e}")
        return

    logger.info("Payment deadline check complete", extra=asdict(result))


async def run_payment_deadlines(
    session_factory: SessionFactory = create_local_session,
) -> DeadlineResult:
    """
    Async implementation of the deadline check.

    Args:
        session_factory: Async context manager yielding a session

    Returns:
        DeadlineResult of the run
    """
    async with session_factory() as session:
        return await DeadlineEnforcer(session).run()
