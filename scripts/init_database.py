#!/usr/bin/env python3
"""Initialize database tables and seed the package catalogue."""

import asyncio
import sys

from loguru import logger

from app.config.database import async_engine, async_session_maker
from app.models import Base
from app.services.investment import InvestmentService

# Configure logger for script
logger.remove()
logger.add(sys.stderr, level="INFO")


async def init_database() -> None:
    """Create all tables and the default investment packages."""
    logger.info("Connecting to database...")

    async with async_engine.begin() as conn:
        logger.info("Creating tables (checkfirst=True)...")
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)

    async with async_session_maker() as session:
        created = await InvestmentService(session).ensure_default_packages()
        logger.info(f"Seeded {created} investment packages")

    await async_engine.dispose()
    logger.success("Database initialized successfully!")


if __name__ == "__main__":
    asyncio.run(init_database())
