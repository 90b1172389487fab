# ecwid_reco/db/redis.py
import logging
import redis.asyncio as redis
from ecwid_reco.core.config import get_settings

logger = logging.getLogger(__name__)
redis_client: redis.Redis | None = None


async def connect():
    """
    Connect Redis when REDIS_URL is set.
    Missing or unreachable Redis only disables caching and locks; the app keeps running.
    """
    global redis_client
    settings = get_settings()
    if not settings.REDIS_URL:
        logger.warning("no REDIS_URL configured, skipping redis connection")
        redis_client = None
        return

    try:
        logger.info("connecting to redis url=%s", settings.REDIS_URL)
        redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True)
        await redis_client.ping()
        logger.info("redis connection ok")
    except Exception as e:
        logger.warning("failed to connect to redis err=%s", e)
        redis_client = None


async def disconnect():
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None
        logger.info("redis disconnected")


def get_redis() -> redis.Redis | None:
    """Redis client, or None when not configured / unavailable. Callers must handle None."""
    return redis_client
