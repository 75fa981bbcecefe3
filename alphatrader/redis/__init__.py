from .redis import TTLRedis, get_redis_client, close_redis_client
from .stub_redis import StubRedis
