"""
Health check server for the settlement scheduler.

Exposes /health, /readiness and /liveness over HTTP.
"""

import asyncio

from aiohttp import web
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from loguru import logger
from sqlalchemy import text

from app.config.database import async_engine
from app.config.settings import settings

SCHEDULER_KEY = web.AppKey("scheduler", AsyncIOScheduler)


def _job_info(scheduler: AsyncIOScheduler) -> list[dict]:
    return [
        {
            "id": job.id,
            "name": job.name,
            "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None,
        }
        for job in scheduler.get_jobs()
    ]


async def health_handler(request: web.Request) -> web.Response:
    """
    Report scheduler state and registered jobs.

    Returns:
        JSON response with scheduler status
    """
    scheduler = request.app[SCHEDULER_KEY]
    jobs = _job_info(scheduler)

    return web.json_response(
        {
            "status": "healthy" if scheduler.running else "stopped",
            "scheduler_running": scheduler.running,
            "emergency_stop_accrual": settings.emergency_stop_accrual,
            "jobs_count": len(jobs),
            "jobs": jobs,
        },
        status=200 if scheduler.running else 503,
    )


async def readiness_handler(request: web.Request) -> web.Response:
    """
    Ready when the scheduler runs and the database answers.

    Returns:
        JSON response with ready flag
    """
    scheduler = request.app[SCHEDULER_KEY]
    if not scheduler.running:
        return web.json_response(
            {"status": "not_ready", "ready": False, "reason": "scheduler stopped"},
            status=503,
        )

    try:
        async with async_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Readiness check failed: {e}")
        return web.json_response(
            {"status": "not_ready", "ready": False, "reason": "database unavailable"},
            status=503,
        )

    return web.json_response({"status": "ready", "ready": True})


async def liveness_handler(request: web.Request) -> web.Response:
    """Report that the process is alive."""
    return web.json_response({"status": "alive", "alive": True})


def create_health_app(scheduler: AsyncIOScheduler) -> web.Application:
    """
    Build the health check application.

    Args:
        scheduler: Scheduler to report on

    Returns:
        aiohttp application
    """
    app = web.Application()
    app[SCHEDULER_KEY] = scheduler
    app.router.add_get("/health", health_handler)
    app.router.add_get("/readiness", readiness_handler)
    app.router.add_get("/liveness", liveness_handler)
    return app


async def start_health_server(
    scheduler: AsyncIOScheduler,
    host: str = "0.0.0.0",
    port: int = 8081,
) -> web.AppRunner:
    """
    Start health check server.

    Args:
        scheduler: Scheduler to report on
        host: Host to bind to
        port: Port to bind to

    Returns:
        AppRunner for cleanup
    """
    runner = web.AppRunner(create_health_app(scheduler))
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()

    logger.info(f"Health check server started on {host}:{port}")
    return runner


async def stop_health_server(runner: web.AppRunner, timeout: int = 5) -> None:
    """
    Stop health check server.

    Args:
        runner: AppRunner to cleanup
        timeout: Maximum time to wait for cleanup in seconds
    """
    try:
        await asyncio.wait_for(runner.cleanup(), timeout=timeout)
        logger.info("Health check server stopped")
    except TimeoutError:
        logger.warning(f"Health check server cleanup timed out after {timeout}s")
