"""
Settlement scheduler.

Enqueues the daily returns actor once a day and the payment deadline
actor every hour. Workers consume the queue separately:

    python -m jobs.scheduler
    dramatiq jobs.tasks

coalesce and max_instances only stop duplicate enqueues. Overlapping
worker runs are serialized per investment by the processors' row locks.
"""

import asyncio
import signal

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from loguru import logger

from app.config.logging import setup_logging
from app.config.settings import settings
from jobs.health import start_health_server, stop_health_server
from jobs.tasks import check_payment_deadlines, process_daily_returns


def create_scheduler() -> AsyncIOScheduler:
    """
    Build the scheduler with both settlement jobs registered.

    Returns:
        Scheduler, not yet started
    """
    scheduler = AsyncIOScheduler(
        timezone="UTC",
        job_defaults={
            "coalesce": True,
            "max_instances": 1,
            "misfire_grace_time": 300,
        },
    )

    scheduler.add_job(
        process_daily_returns.send,
        CronTrigger(
            hour=settings.daily_accrual_hour,
            minute=settings.daily_accrual_minute,
            timezone="UTC",
        ),
        id="process_daily_returns",
        name="Daily return accrual",
        replace_existing=True,
    )

    scheduler.add_job(
        check_payment_deadlines.send,
        CronTrigger(minute=settings.deadline_check_minute, timezone="UTC"),
        id="check_payment_deadlines",
        name="Payment deadline enforcement",
        replace_existing=True,
    )

    return scheduler


async def main() -> None:
    """Run the scheduler and health server until SIGINT or SIGTERM."""
    setup_logging("settlement-scheduler")

    scheduler = create_scheduler()
    scheduler.start()
    for job in scheduler.get_jobs():
        logger.info(f"Scheduled job: {job.name} - next run: {job.next_run_time}")

    runner = await start_health_server(scheduler, port=settings.health_check_port)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    try:
        await stop_event.wait()
    finally:
        logger.info("Shutting down settlement scheduler")
        scheduler.shutdown(wait=False)
        await stop_health_server(runner)


if __name__ == "__main__":
    asyncio.run(main())
