"""Per-user fixed window rate limiting used by the HTTP layer."""

from __future__ import annotations

import asyncio
import time
from abc import ABC, abstractmethod
from collections.abc import Callable

from loguru import logger
from redis.asyncio import Redis

from src.price_editor.core.errors import AuthenticationError, RateLimitExceededError
from src.price_editor.runtime.config.config_data import RateLimiterConfig
from src.price_editor.runtime.context import get_config


class FixedWindowRateLimiter(ABC):
    """Counts hits per key; the first hit opens a window of ``window_seconds``."""

    def __init__(self, requests: int, window_seconds: int, key_prefix: str = "") -> None:
        self.requests = requests
        self.window_seconds = window_seconds
        self.key_prefix = key_prefix

    def make_key(self, user_id: int) -> str:
        return f"{self.key_prefix}{user_id}"

    @abstractmethod
    async def hit(self, key: str) -> int:
        """Record one hit.

        Returns:
            0 when the hit is allowed, otherwise the seconds until the
            window closes
        """
        raise NotImplementedError

    async def close(self) -> None:
        return None


class LocalFixedWindowRateLimiter(FixedWindowRateLimiter):
    """In-process counters, used when Redis isn't available."""

    def __init__(
        self,
        requests: int,
        window_seconds: int,
        key_prefix: str = "",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(requests, window_seconds, key_prefix)
        self._windows: dict[str, tuple[float, int]] = {}
        self._lock = asyncio.Lock()
        self._clock = clock

    def _purge(self, now: float) -> None:
        expired = [
            key
            for key, (opened, _) in self._windows.items()
            if now - opened >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]

    async def hit(self, key: str) -> int:
        async with self._lock:
            now = self._clock()
            self._purge(now)
            opened, count = self._windows.get(key, (now, 0))
            if count >= self.requests:
                return max(1, int(self.window_seconds - (now - opened)))
            self._windows[key] = (opened, count + 1)
            return 0

    async def close(self) -> None:
        async with self._lock:
            self._windows.clear()


class RedisFixedWindowRateLimiter(FixedWindowRateLimiter):
    """Counters shared by every worker through Redis INCR and EXPIRE."""

    def __init__(
        self, client: Redis, requests: int, window_seconds: int, key_prefix: str = ""
    ) -> None:
        super().__init__(requests, window_seconds, key_prefix)
        self._client = client

    async def hit(self, key: str) -> int:
        count = await self._client.incr(key)
        if count == 1:
            await self._client.expire(key, self.window_seconds)
        if count <= self.requests:
            return 0

        ttl = await self._client.ttl(key)
        if ttl < 0:
            # Counter lost its expiry; reopen the window so it cannot stick forever.
            await self._client.expire(key, self.window_seconds)
            ttl = self.window_seconds
        return max(1, ttl)


async def clear_rate_limit_counters(client: Redis, key_prefix: str) -> int:
    """Delete every stored counter under ``key_prefix`` and return how many."""
    # An empty prefix would match the whole keyspace.
    if not key_prefix:
        return 0

    keys = [key async for key in client.scan_iter(match=f"{key_prefix}*")]
    if keys:
        await client.delete(*keys)
    logger.bind(key_prefix=key_prefix, deleted=len(keys)).info("rate_limit.cleared")
    return len(keys)


_rate_limiter: FixedWindowRateLimiter | None = None


def configure_rate_limiter(
    limiter: FixedWindowRateLimiter | None = None,
    redis_client: Redis | None = None,
    config: RateLimiterConfig | None = None,
) -> FixedWindowRateLimiter:
    """Choose the limiter backend: explicit, Redis when available, else local."""
    global _rate_limiter

    config = config or get_config().rate_limiter
    if limiter is not None:
        _rate_limiter = limiter
    elif redis_client is not None:
        logger.info("Using Redis-backed rate limiter")
        _rate_limiter = RedisFixedWindowRateLimiter(
            redis_client, config.requests, config.window_seconds, config.key_prefix
        )
    else:
        logger.info("Using local in-memory rate limiter")
        _rate_limiter = LocalFixedWindowRateLimiter(
            config.requests, config.window_seconds, config.key_prefix
        )
    return _rate_limiter


def get_rate_limiter() -> FixedWindowRateLimiter:
    if _rate_limiter is None:
        raise RuntimeError("Rate limiter not configured")
    return _rate_limiter


async def enforce_rate_limit(user_id: int | None) -> None:
    """Count one request for the user, raising once the window is exhausted."""
    if not get_config().rate_limiter.enabled:
        return
    if not user_id:
        raise AuthenticationError()

    limiter = get_rate_limiter()
    retry_after = await limiter.hit(limiter.make_key(user_id))
    if retry_after:
        logger.bind(user_id=user_id, retry_after=retry_after).warning(
            "rate_limit.exceeded"
        )
        raise RateLimitExceededError(retry_after)


async def close_rate_limiter() -> None:
    global _rate_limiter

    if _rate_limiter is not None:
        await _rate_limiter.close()
        _rate_limiter = None
        logger.info("Rate limiter closed")
