"""Short-lived Redis claims on callback work.

A claim is a single ``SET NX EX`` on ``claim:<name>``. It never waits: a
worker that finds the key taken skips the work, since the holder is already
doing it. The unique checkout session id on bookings settles anything a
claim misses, for example after the key expires mid-flight.
"""

import logging
import secrets

import redis.asyncio as redis

from dorehami.config import get_settings

logger = logging.getLogger(__name__)

# Delete the key only while it still holds our token
_RELEASE_IF_OWNER = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""


class ClaimHeldError(Exception):
    """Another worker holds the claim."""

    def __init__(self, name: str):
        super().__init__(f"Claim already held: {name}")
        self.name = name


class RedisClaim:
    """
    One-shot claim usable as an async context manager.

        async with RedisClaim(redis_client, f"checkout:{session_id}"):
            ...

    Entering raises ``ClaimHeldError`` when the key is taken.
    """

    def __init__(self, redis_client: redis.Redis, name: str, ttl_seconds: int | None = None):
        self.redis = redis_client
        self.name = name
        self.key = f"claim:{name}"
        self.ttl_seconds = ttl_seconds or get_settings().WEBHOOK_CLAIM_TTL_SECONDS
        self._token: str | None = None
        self._release = redis_client.register_script(_RELEASE_IF_OWNER)

    @property
    def held(self) -> bool:
        return self._token is not None

    async def try_acquire(self) -> bool:
        token = secrets.token_hex(16)
        if await self.redis.set(self.key, token, nx=True, ex=self.ttl_seconds):
            self._token = token
            return True
        return False

    async def release(self) -> bool:
        """Drop the claim. False if it had already expired or was never taken."""
        if self._token is None:
            return False
        token, self._token = self._token, None
        released = bool(await self._release(keys=[self.key], args=[token]))
        if not released:
            logger.warning(f"Claim {self.key} expired before it was released")
        return released

    async def __aenter__(self) -> "RedisClaim":
        if not await self.try_acquire():
            raise ClaimHeldError(self.name)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.release()
