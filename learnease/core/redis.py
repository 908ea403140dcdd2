# ruff: noqa: PLW0603
"""Redis client for the course definition cache.

The cache is optional. ``init_redis`` raises when the server cannot be
reached and leaves no client behind, so ``get_redis`` returning ``None``
means "read courses from Cassandra only".
"""

import redis.asyncio as redis
from redis.exceptions import RedisError

from learnease.config import get_settings
from learnease.core.logging import get_logger


logger = get_logger(__name__)

COURSE_KEY_PREFIX = "course:"

_client: redis.Redis | None = None


def _build_client() -> redis.Redis:
    settings = get_settings()
    return redis.from_url(
        settings.redis_url,
        max_connections=settings.redis_max_connections,
        socket_timeout=settings.redis_socket_timeout,
        socket_connect_timeout=settings.redis_socket_connect_timeout,
        retry_on_timeout=settings.redis_retry_on_timeout,
        health_check_interval=settings.redis_health_check_interval,
        decode_responses=True,
    )


async def init_redis() -> redis.Redis:
    """Connect the course cache.

    Raises:
        RedisError: If the server does not answer a PING
    """
    global _client

    client = _build_client()
    try:
        await client.ping()
    except RedisError as e:
        logger.warning("course_cache_unreachable", error=str(e))
        await client.aclose()
        raise

    _client = client
    logger.info("course_cache_connected", url=get_settings().redis_url)
    return client


async def shutdown_redis() -> None:
    global _client

    if _client is None:
        return
    await _client.aclose()
    _client = None
    logger.info("course_cache_disconnected")


def get_redis() -> redis.Redis | None:
    """Connected cache client, or None when running without cache."""
    return _client


async def redis_available() -> bool:
    """PING the cache; False when it is disabled or not answering."""
    if _client is None:
        return False
    try:
        return bool(await _client.ping())
    except RedisError as e:
        logger.warning("course_cache_ping_failed", error=str(e))
        return False


def course_cache_key(course_id: object) -> str:
    """Key holding the serialized definition of a course."""
    return f"{COURSE_KEY_PREFIX}{course_id}"
