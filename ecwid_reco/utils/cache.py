# ecwid_reco/utils/cache.py
import json
import logging
from typing import Any, Optional

from redis.asyncio import Redis

logger = logging.getLogger(__name__)

SCAN_BATCH = 500


async def cache_get(redis: Redis, key: str) -> Optional[Any]:
    """Decoded JSON payload, or None. A payload that no longer decodes is dropped."""
    raw = await redis.get(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("cache corrupt payload dropped key=%s err=%s", key, e)
        await redis.delete(key)
        return None


async def cache_set(redis: Redis, key: str, value: Any, ex: Optional[int] = None) -> None:
    # datetimes and ObjectIds end up as their str() form
    await redis.set(key, json.dumps(value, default=str), ex=ex)


async def cache_delete(redis: Redis, *keys: str) -> int:
    return await redis.delete(*keys) if keys else 0


async def cache_delete_prefix(redis: Redis, prefix: str) -> int:
    """Delete every key under `prefix`, SCAN_BATCH keys per DEL."""
    deleted, batch = 0, []
    async for key in redis.scan_iter(match=f"{prefix}*", count=SCAN_BATCH):
        batch.append(key)
        if len(batch) >= SCAN_BATCH:
            deleted += await redis.delete(*batch)
            batch = []
    if batch:
        deleted += await redis.delete(*batch)
    return deleted
