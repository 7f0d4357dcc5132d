"""Process-wide Redis connection used for callback claims."""

import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from dorehami.config import get_settings

logger = logging.getLogger(__name__)

_client: redis.Redis | None = None


async def get_redis() -> redis.Redis:
    """Connection pool for the configured Redis, created on first use."""
    global _client
    if _client is None:
        settings = get_settings()
        _client = redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=settings.REDIS_CONNECT_TIMEOUT_SECONDS,
        )
    return _client


async def redis_reachable(client: redis.Redis) -> bool:
    try:
        return bool(await client.ping())
    except RedisError as exc:
        logger.warning(f"Redis ping failed: {exc}")
        return False


async def close_redis() -> None:
    global _client
    if _client is None:
        return
    client, _client = _client, None
    await client.aclose()
