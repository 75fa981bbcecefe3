"""Tests for the fixed-window rate limiter and its stores."""

from __future__ import annotations

import pytest
from starlette.requests import Request

from alphatrader.services import (
    InMemoryRateLimitStore,
    QUOTES_POLICY,
    RateLimiter,
    RateLimitPolicy,
    RateLimitResult,
    RedisRateLimitStore,
    get_identifier,
)


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeRedis:
    """Just enough of redis.asyncio for counter keys."""

    def __init__(self):
        self.values: dict[str, int] = {}
        self.ttls: dict[str, int] = {}

    async def incr(self, name):
        self.values[name] = self.values.get(name, 0) + 1
        return self.values[name]

    async def expire(self, name, seconds):
        self.ttls[name] = seconds
        return True

    async def ttl(self, name):
        return self.ttls.get(name, -1)

    async def delete(self, *names):
        for name in names:
            self.values.pop(name, None)
            self.ttls.pop(name, None)


POLICY = RateLimitPolicy(id="test", limit=3, window=60)


def test_quotes_policy_is_thirty_per_minute():
    assert (QUOTES_POLICY.id, QUOTES_POLICY.limit, QUOTES_POLICY.window) == ("quotes-api", 30, 60)


# ---------------------------------------------------------------------------
# In-memory store
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_admits_up_to_limit_then_rejects():
    clock = FakeClock()
    limiter = RateLimiter(InMemoryRateLimitStore(clock=clock))

    results = [await limiter.check(POLICY, "user:1") for _ in range(4)]

    assert [r.success for r in results] == [True, True, True, False]
    assert [r.remaining for r in results] == [2, 1, 0, 0]
    assert all(r.reset == 1_060 for r in results)


@pytest.mark.asyncio
async def test_window_resets_after_expiry():
    clock = FakeClock()
    limiter = RateLimiter(InMemoryRateLimitStore(clock=clock))
    for _ in range(4):
        await limiter.check(POLICY, "user:1")

    clock.now += 60
    result = await limiter.check(POLICY, "user:1")
    assert result.success is True
    assert result.remaining == 2
    assert result.reset == 1_120


@pytest.mark.asyncio
async def test_identifiers_and_policies_are_counted_separately():
    limiter = RateLimiter(InMemoryRateLimitStore(clock=FakeClock()))
    other_policy = RateLimitPolicy(id="other", limit=3, window=60)
    for _ in range(3):
        await limiter.check(POLICY, "user:1")

    assert (await limiter.check(POLICY, "user:2")).remaining == 2
    assert (await limiter.check(other_policy, "user:1")).remaining == 2


@pytest.mark.asyncio
async def test_reset_clears_counter():
    limiter = RateLimiter(InMemoryRateLimitStore(clock=FakeClock()))
    for _ in range(3):
        await limiter.check(POLICY, "user:1")
    await limiter.reset(POLICY, "user:1")
    assert (await limiter.check(POLICY, "user:1")).remaining == 2


def test_result_headers_and_retry_after():
    result = RateLimitResult(success=False, limit=30, remaining=0, reset=1_060)
    assert result.headers() == {
        "X-RateLimit-Limit": "30",
        "X-RateLimit-Remaining": "0",
        "X-RateLimit-Reset": "1060",
    }
    assert result.retry_after(now=1_015.4) == 45
    assert result.retry_after(now=2_000) == 0


# ---------------------------------------------------------------------------
# Redis store
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_redis_store_sets_expiry_on_first_hit_only():
    redis = FakeRedis()
    store = RedisRateLimitStore(redis, clock=FakeClock())

    assert await store.increment("test:user:1", 60) == (1, 1_060)
    redis.ttls["ratelimit:test:user:1"] = 30
    assert await store.increment("test:user:1", 60) == (2, 1_030)


@pytest.mark.asyncio
async def test_redis_store_repairs_missing_expiry():
    redis = FakeRedis()
    redis.values["ratelimit:k"] = 5
    store = RedisRateLimitStore(redis, clock=FakeClock())

    count, reset_at = await store.increment("k", 60)
    assert count == 6
    assert reset_at == 1_060
    assert redis.ttls["ratelimit:k"] == 60


@pytest.mark.asyncio
async def test_limiter_over_redis_store():
    limiter = RateLimiter(RedisRateLimitStore(FakeRedis(), clock=FakeClock()))
    results = [await limiter.check(POLICY, "ip:1.2.3.4") for _ in range(4)]
    assert [r.success for r in results] == [True, True, True, False]


# ---------------------------------------------------------------------------
# Identifier resolution
# ---------------------------------------------------------------------------


def _request(headers: dict[str, str] | None = None, client=("9.9.9.9", 5000)) -> Request:
    raw = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    return Request({"type": "http", "method": "POST", "path": "/", "headers": raw, "client": client})


def test_identifier_prefers_user():
    assert get_identifier(_request({"X-Forwarded-For": "1.1.1.1"}), "42") == "user:42"


def test_identifier_uses_first_forwarded_hop():
    assert get_identifier(_request({"X-Forwarded-For": " 1.1.1.1 , 2.2.2.2"})) == "ip:1.1.1.1"


def test_identifier_header_precedence():
    assert get_identifier(_request({"X-Real-IP": "3.3.3.3", "CF-Connecting-IP": "4.4.4.4"})) == "ip:3.3.3.3"
    assert get_identifier(_request({"CF-Connecting-IP": "4.4.4.4"})) == "ip:4.4.4.4"


def test_identifier_falls_back_to_peer_then_unknown():
    assert get_identifier(_request()) == "ip:9.9.9.9"
    assert get_identifier(_request(client=None)) == "ip:unknown"
