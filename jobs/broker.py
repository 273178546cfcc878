"""
Dramatiq broker configuration.

Redis-backed queue for the settlement actors.
"""

import dramatiq
from dramatiq.brokers.redis import RedisBroker
from dramatiq.middleware import CurrentMessage, ShutdownNotifications
from loguru import logger

from app.config.settings import settings

redis_broker = RedisBroker(
    host=settings.redis_host,
    port=settings.redis_port,
    password=settings.redis_password or None,
    db=settings.redis_db,
)

# Workers finish the current investment before exiting
redis_broker.add_middleware(ShutdownNotifications())
redis_broker.add_middleware(CurrentMessage())

dramatiq.set_broker(redis_broker)

broker = redis_broker

logger.info(
    "Dramatiq broker initialized",
    extra={
        "redis": f"{settings.redis_host}:{settings.redis_port}/{settings.redis_db}",
    },
)
