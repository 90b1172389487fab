# ecwid_reco/utils/locks.py
from __future__ import annotations
from typing import Optional
from redis.asyncio import Redis
import uuid

# compare-and-delete in one round trip: a lock that expired and was re-taken
# by another worker between GET and DEL must survive
RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""


class RedisLock:
    """
    Simple, single-instance lock using SET NX EX.
    Keeps two generate-all runs for the same store from overlapping.
    """
    def __init__(self, redis: Redis, key: str, ttl: int = 900):
        self.redis = redis
        self.key = f"lock:{key}"
        self.ttl = ttl
        self._token: Optional[str] = None
        self._release = redis.register_script(RELEASE_SCRIPT)

    async def acquire(self) -> bool:
        token = uuid.uuid4().hex
        if await self.redis.set(self.key, token, nx=True, ex=self.ttl):
            self._token = token
            return True
        return False

    async def release(self) -> bool:
        """True if our lock was deleted, False if it had expired or belongs to someone else."""
        if self._token is None:
            return False
        token, self._token = self._token, None
        return bool(await self._release(keys=[self.key], args=[token]))

    @property
    def held(self) -> bool:
        return self._token is not None
