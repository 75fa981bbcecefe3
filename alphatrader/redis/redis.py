from redis.asyncio import Redis
from redis.exceptions import RedisError

from ..core import get_config_service, ConfigService, logger
from .stub_redis import StubRedis


class TTLRedis(Redis):
    def __init__(self, *args, default_ttl=3600, **kwargs):
        super().__init__(*args, **kwargs)
        self.default_ttl = default_ttl

    async def set(self, name, value, ex=None, *args, **kwargs):
        if ex is None:
            ex = self.default_ttl
        return await super().set(name, value, ex=ex, *args, **kwargs)


_redis_instance: TTLRedis | StubRedis | None = None


async def get_redis_client() -> TTLRedis | StubRedis:
    """Shared client; a stub that caches nothing when REDIS_ENABLED is off."""
    global _redis_instance
    if _redis_instance is not None:
        return _redis_instance

    config_service: ConfigService = get_config_service()
    if not config_service.get_bool("REDIS_ENABLED", False):
        _redis_instance = StubRedis()
        return _redis_instance

    redis = TTLRedis(
        host=config_service.get("REDIS_HOST", "localhost"),
        port=config_service.get_int("REDIS_PORT", 6379),
        decode_responses=True,
        default_ttl=config_service.get_int("REDIS_CACHE_EXPIRE_SECONDS", 3600),
    )

    try:
        await redis.ping()
    except RedisError as e:
        await redis.aclose()
        raise RuntimeError("Failed to connect to Redis") from e

    logger.info("Connected to Redis at %s", config_service.get("REDIS_HOST", "localhost"))
    _redis_instance = redis
    return _redis_instance


async def close_redis_client():
    global _redis_instance
    if _redis_instance is not None:
        await _redis_instance.aclose()
        _redis_instance = None
