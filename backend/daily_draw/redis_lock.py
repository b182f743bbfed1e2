# daily_draw/redis_lock.py
import logging
import uuid

import redis
from django.conf import settings

logger = logging.getLogger(__name__)

# Delete the key only while it still holds our token
_RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""


def get_redis():
    return redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)


class RedisDrawLock:
    """
    Keeps two schedulers from drawing the same day at once.

    The database already refuses a second payout for a closed day; the lock
    only saves the loser from doing the work. The TTL covers a scheduler
    that dies while holding it.
    """

    def __init__(self, name: str, ttl_seconds: int, client=None):
        self.key = f"lock:{name}"
        self.ttl_ms = int(ttl_seconds * 1000)
        self.token = uuid.uuid4().hex
        self.r = client or get_redis()

    def acquire(self) -> bool:
        acquired = bool(self.r.set(self.key, self.token, nx=True, px=self.ttl_ms))
        if not acquired:
            logger.info(f"{self.key} is held by another scheduler")
        return acquired

    def release(self) -> bool:
        released = bool(self.r.eval(_RELEASE_SCRIPT, 1, self.key, self.token))
        if not released:
            logger.warning(f"{self.key} expired before release")
        return released
