from app.config import settings
from app.redis_client import get_redis_client


class LoginRateLimiter:
    """Counts failed logins per email in Redis within a sliding window"""

    def __init__(self, max_attempts: int = None, window_minutes: int = None):
        self.max_attempts = max_attempts or settings.rate_limit_failed_logins
        self.window_minutes = window_minutes or settings.rate_limit_window_minutes

    @property
    def redis(self):
        return get_redis_client()

    def _key(self, identifier: str) -> str:
        return f"rate_limit:login:{identifier.lower()}"

    def is_blocked(self, identifier: str) -> bool:
        attempts = self.redis.get(self._key(identifier))
        return attempts is not None and int(attempts) >= self.max_attempts

    def record_failed_attempt(self, identifier: str) -> int:
        """Record a failed login attempt and return the current count"""
        key = self._key(identifier)
        pipe = self.redis.pipeline()
        pipe.incr(key)
        pipe.expire(key, self.window_minutes * 60)
        return pipe.execute()[0]

    def reset(self, identifier: str):
        self.redis.delete(self._key(identifier))


rate_limiter = LoginRateLimiter()
