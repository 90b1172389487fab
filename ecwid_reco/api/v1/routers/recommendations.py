# ecwid_reco/api/v1/routers/recommendations.py
import logging
import time

from fastapi import APIRouter, Depends, HTTPException
from ecwid_reco.api.deps import (
    order_repo_dep,
    product_repo_dep,
    reco_cache_dep,
    redis_dep,
    require_store,
)
from ecwid_reco.api.v1.schemas.reco import BatchOut, GenerateOut, ProductRecommendationsOut
from ecwid_reco.core.config import get_settings
from ecwid_reco.domain.repositories.reco_cache_repo import KIND_PRODUCT
from ecwid_reco.domain.services.recommendation_svc import compute_recommendations, generate_all_recommendations
from ecwid_reco.domain.services.storefront_svc import get_product_recommendations_svc
from ecwid_reco.utils.locks import RedisLock

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recommendations", tags=["recommendations"], dependencies=[Depends(require_store)])


@router.post("/{store_id}/generate-all", response_model=BatchOut)
async def generate_all(
    store_id: str,
    products = Depends(product_repo_dep),
    orders = Depends(order_repo_dep),
    cache = Depends(reco_cache_dep),
    redis = Depends(redis_dep),
):
    lock = RedisLock(redis, f"generate-all:{store_id}", ttl=get_settings().generate_lock_ttl) if redis else None
    if lock and not await lock.acquire():
        raise HTTPException(status_code=409, detail="Recommendation generation already running for this store.")

    t0 = time.perf_counter()
    try:
        summary = await generate_all_recommendations(products, orders, store_id)
    finally:
        if lock:
            await lock.release()
    await cache.invalidate_store(store_id, KIND_PRODUCT)

    logger.info("Response: generate_all store_id=%s summary=%s in %.4fs", store_id, summary.model_dump(), time.perf_counter() - t0)
    return BatchOut(summary=summary)


@router.get("/{store_id}/{product_id}", response_model=ProductRecommendationsOut)
async def get_recommendations(
    store_id: str,
    product_id: str,
    products = Depends(product_repo_dep),
    cache = Depends(reco_cache_dep),
):
    result = await get_product_recommendations_svc(products, cache, store_id, product_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return ProductRecommendationsOut(**result)


@router.post("/{store_id}/{product_id}/generate", response_model=GenerateOut)
async def generate_for_product(
    store_id: str,
    product_id: str,
    products = Depends(product_repo_dep),
    orders = Depends(order_repo_dep),
    cache = Depends(reco_cache_dep),
):
    result = await compute_recommendations(products, orders, store_id, product_id)
    await cache.invalidate(store_id, KIND_PRODUCT, product_id)
    return GenerateOut(recommendations=result)
