"""Fixed-window rate limiting.

A policy allows ``limit`` requests per ``window`` seconds for each
identifier. Counters live either in process memory or in Redis; both stores
return the current count and the epoch second at which the window resets.
"""

import asyncio
import math
import time
from dataclasses import dataclass
from typing import Optional, Protocol

from fastapi import Request

from ..core import ConfigService, get_config_service, logger
from ..redis import StubRedis, get_redis_client


@dataclass(frozen=True)
class RateLimitPolicy:
    id: str
    limit: int
    window: int


@dataclass(frozen=True)
class RateLimitResult:
    success: bool
    limit: int
    remaining: int
    reset: int

    def headers(self) -> dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset),
        }

    def retry_after(self, now: Optional[float] = None) -> int:
        now = time.time() if now is None else now
        return max(0, self.reset - math.floor(now))


QUOTES_POLICY = RateLimitPolicy(id="quotes-api", limit=30, window=60)


class RateLimitStore(Protocol):
    async def increment(self, key: str, window: int) -> tuple[int, float]: ...

    async def reset(self, key: str) -> None: ...


class InMemoryRateLimitStore:
    def __init__(self, clock=time.time):
        self._clock = clock
        self._entries: dict[str, tuple[int, float]] = {}
        self._lock = asyncio.Lock()

    async def increment(self, key: str, window: int) -> tuple[int, float]:
        async with self._lock:
            now = self._clock()
            self._purge(now)
            count, reset_at = self._entries.get(key, (0, now + window))
            count += 1
            self._entries[key] = (count, reset_at)
            return count, reset_at

    async def reset(self, key: str) -> None:
        async with self._lock:
            self._entries.pop(key, None)

    def _purge(self, now: float):
        expired = [k for k, (_, reset_at) in self._entries.items() if reset_at <= now]
        for k in expired:
            del self._entries[k]


class RedisRateLimitStore:
    def __init__(self, redis, clock=time.time):
        self.redis = redis
        self._clock = clock

    def _key(self, key: str) -> str:
        return f"ratelimit:{key}"

    async def increment(self, key: str, window: int) -> tuple[int, float]:
        name = self._key(key)
        count = await self.redis.incr(name)
        if count == 1:
            await self.redis.expire(name, window)
        ttl = await self.redis.ttl(name)
        if ttl < 0:
            # counter survived without an expiry
            await self.redis.expire(name, window)
            ttl = window
        return count, self._clock() + ttl

    async def reset(self, key: str) -> None:
        await self.redis.delete(self._key(key))


class RateLimiter:
    def __init__(self, store: RateLimitStore):
        self.store = store

    async def check(self, policy: RateLimitPolicy, identifier: str) -> RateLimitResult:
        count, reset_at = await self.store.increment(f"{policy.id}:{identifier}", policy.window)
        result = RateLimitResult(
            success=count <= policy.limit,
            limit=policy.limit,
            remaining=max(0, policy.limit - count),
            reset=math.ceil(reset_at),
        )
        if not result.success:
            logger.warning("Rate limit exceeded: policy=%s identifier=%s", policy.id, identifier)
        return result

    async def reset(self, policy: RateLimitPolicy, identifier: str) -> None:
        await self.store.reset(f"{policy.id}:{identifier}")


def get_identifier(request: Request, user_id: Optional[str] = None) -> str:
    if user_id:
        return f"user:{user_id}"

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return f"ip:{real_ip}"
    cf_ip = request.headers.get("cf-connecting-ip")
    if cf_ip:
        return f"ip:{cf_ip}"
    if request.client and request.client.host:
        return f"ip:{request.client.host}"
    return "ip:unknown"


_rate_limiter_instance: RateLimiter | None = None


async def get_rate_limiter() -> RateLimiter:
    global _rate_limiter_instance
    if _rate_limiter_instance is None:
        config_service: ConfigService = get_config_service()
        backend = config_service.get("RATE_LIMIT_BACKEND", "memory")
        if backend == "redis":
            redis = await get_redis_client()
            if isinstance(redis, StubRedis):
                raise ValueError("RATE_LIMIT_BACKEND=redis requires REDIS_ENABLED")
            store = RedisRateLimitStore(redis)
        elif backend == "memory":
            store = InMemoryRateLimitStore()
        else:
            raise ValueError(f"Unknown RATE_LIMIT_BACKEND: {backend}")
        _rate_limiter_instance = RateLimiter(store)
    return _rate_limiter_instance
