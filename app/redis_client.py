from typing import Optional

import redis

from app.config import settings

# Shared by the login rate limiter and the revision counters
_client: Optional[redis.Redis] = None


def get_redis_client() -> redis.Redis:
    """Lazily connect to ``settings.redis_url``; responses are decoded to str."""
    global _client
    if _client is None:
        _client = redis.Redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=settings.redis_timeout_seconds,
            socket_timeout=settings.redis_timeout_seconds,
        )
    return _client


def close_redis():
    global _client
    if _client is not None:
        _client.close()
        _client = None
