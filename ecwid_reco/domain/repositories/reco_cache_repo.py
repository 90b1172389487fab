import logging
from typing import Any, Optional
from ecwid_reco.utils.cache import cache_delete, cache_delete_prefix, cache_get, cache_set

logger = logging.getLogger(__name__)

KIND_PRODUCT = "product"
KIND_CATEGORY = "category"


class RecoCacheRepo:
    """
    Read-through cache for resolved recommendation payloads (what the storefront widget fetches).
    Redis is optional: with redis=None every call is a no-op miss.
    Cache errors are logged and never fail the request.
    """
    def __init__(self, redis, ttl: int, prefix: str = "reco"):
        self.cache = redis
        self.ttl = ttl
        self.prefix = prefix

    def key(self, store_id: str, kind: str, item_id: str) -> str:
        return f"{self.prefix}:{store_id}:{kind}:{item_id}"

    async def get(self, store_id: str, kind: str, item_id: str) -> Optional[Any]:
        if self.cache is None:
            return None
        key = self.key(store_id, kind, item_id)
        try:
            return await cache_get(self.cache, key)
        except Exception as e:
            logger.warning("reco cache get error key=%s err=%s", key, e)
            return None

    async def set(self, store_id: str, kind: str, item_id: str, payload: Any) -> None:
        if self.cache is None:
            return
        key = self.key(store_id, kind, item_id)
        try:
            await cache_set(self.cache, key, payload, ex=self.ttl)
        except Exception as e:
            logger.warning("reco cache set error key=%s err=%s", key, e)

    async def invalidate(self, store_id: str, kind: str, item_id: str) -> None:
        if self.cache is None:
            return
        key = self.key(store_id, kind, item_id)
        try:
            await cache_delete(self.cache, key)
        except Exception as e:
            logger.warning("reco cache delete error key=%s err=%s", key, e)

    async def invalidate_store(self, store_id: str, kind: Optional[str] = None) -> None:
        """Drop every cached payload of a store (optionally one kind), after a batch run."""
        if self.cache is None:
            return
        prefix = f"{self.prefix}:{store_id}:" + (f"{kind}:" if kind else "")
        try:
            n = await cache_delete_prefix(self.cache, prefix)
            logger.info("reco cache invalidated prefix=%s keys=%s", prefix, n)
        except Exception as e:
            logger.warning("reco cache invalidate error prefix=%s err=%s", prefix, e)
