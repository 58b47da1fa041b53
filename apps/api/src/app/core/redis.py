"""
Redis Configuration

Optional async Redis client. The API runs without it; the rate limiter then
falls back to an in-process window.
"""

import logging

from redis.asyncio import Redis, from_url

from app.core.config import settings

logger = logging.getLogger(__name__)

redis_client: Redis | None = None


async def init_redis() -> Redis:
    """Connect to Redis on startup and check the connection."""
    global redis_client
    client = from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
    )
    await client.ping()
    redis_client = client
    logger.info("Redis connected")
    return client


def is_redis_available() -> bool:
    """Check if the Redis client has been initialized."""
    return redis_client is not None


async def close_redis() -> None:
    """Close the Redis connection on shutdown."""
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None
