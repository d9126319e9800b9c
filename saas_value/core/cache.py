from cachetools import TTLCache
from .config import settings

# Counters live a little longer than the one-minute window they track.
COUNTER_TTL_SECONDS = 120

_local_counters = TTLCache(maxsize=4096, ttl=COUNTER_TTL_SECONDS)

try:
    import redis  # Optional dependency
except ImportError:
    redis = None

class CounterStore:
    """
    Windowed hit counters over Redis or in-memory, so swapping is one flag away.
    Only the rate limiter uses this; model results are never cached.
    """
    def __init__(self):
        self.backend = None
        if settings.USE_REDIS and redis is not None:
            self.backend = redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)

    def incr(self, key: str) -> int:
        """Increment `key` and return the new count."""
        if self.backend:
            pipe = self.backend.pipeline()
            pipe.incr(key)
            pipe.expire(key, COUNTER_TTL_SECONDS)
            count, _ = pipe.execute()
            return int(count)
        count = _local_counters.get(key, 0) + 1
        _local_counters[key] = count
        return count

    def reset(self) -> None:
        if self.backend:
            return
        _local_counters.clear()

counters = CounterStore()
