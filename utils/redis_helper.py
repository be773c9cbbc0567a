import redis

from utils.config import REDIS_HOST, REDIS_PORT


class RedisInstance:
    _instance = None
    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = redis.StrictRedis(
                host=REDIS_HOST,
                port=REDIS_PORT,
                decode_responses=True
            )
        return cls._instance


class RedisHelper:
    def __init__(self):
        self.redis = RedisInstance()

    @staticmethod
    def is_configured() -> bool:
        return bool(REDIS_HOST)

    def get(self, key):
        """Retrieve a value from Redis."""
        return self.redis.get(key)

    def delete(self, key):
        """Delete a key."""
        return self.redis.delete(key)

    def set_with_ttl(self, key, value, ttl_seconds):
        """Set a key with expiration (TTL)."""
        return self.redis.setex(key, ttl_seconds, value)
