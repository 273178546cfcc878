"""
Daily returns task.

Credits daily returns and completes finished investments. Runs once
per day.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import asdict

import dramatiq
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.settlement import AccrualResult, DailyAccrualProcessor
from jobs.async_runner import create_local_session, run_async
from jobs.broker import broker  # noqa: F401  registers the broker

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


@dramatiq.actor(max_retries=0, time_limit=30 * 60 * 1000)
def process_daily_returns() -> None:
    """
    Run the daily accrual pass.

    No retries: a rerun the same day is harmless, but the next
    scheduled run already picks up whatever failed.
    """
    logger.info("Starting daily returns processing")

    try:
        result = run_async(run_daily_returns())
    except Exception as e:
        logger.exception(f"Daily returns processing failed: {e}")
        return

    logger.info("Daily returns processing complete", extra=asdict(result))


async def run_daily_returns(
    session_factory: SessionFactory = create_local_session,
) -> AccrualResult:
    """
    Async implementation of daily returns processing.

    Args:
        session_factory: Async context manager yielding a session

    Returns:
        AccrualResult of the run
    """
    async with session_factory() as session:
        return await DailyAccrualProcessor(session).run()
