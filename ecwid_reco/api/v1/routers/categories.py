# ecwid_reco/api/v1/routers/categories.py
from fastapi import APIRouter, Depends
from ecwid_reco.api.deps import (
    category_repo_dep,
    order_repo_dep,
    product_repo_dep,
    reco_cache_dep,
    require_store,
)
from ecwid_reco.api.v1.schemas.reco import CategoryBatchOut, CategoryGenerateOut, CategoryRecommendationsOut
from ecwid_reco.domain.repositories.reco_cache_repo import KIND_CATEGORY
from ecwid_reco.domain.services.category_svc import (
    compute_category_recommendations,
    generate_all_category_recommendations,
)
from ecwid_reco.domain.services.storefront_svc import get_category_recommendations_svc

router = APIRouter(prefix="/categories", tags=["categories"], dependencies=[Depends(require_store)])


@router.post("/{store_id}/generate-all", response_model=CategoryBatchOut)
async def generate_all_categories(
    store_id: str,
    products = Depends(product_repo_dep),
    orders = Depends(order_repo_dep),
    categories = Depends(category_repo_dep),
    cache = Depends(reco_cache_dep),
):
    summary = await generate_all_category_recommendations(products, orders, categories, store_id)
    await cache.invalidate_store(store_id, KIND_CATEGORY)
    return CategoryBatchOut(summary=summary)


@router.get("/{store_id}/{category_id}/recommendations", response_model=CategoryRecommendationsOut)
async def get_category_recommendations(
    store_id: str,
    category_id: str,
    products = Depends(product_repo_dep),
    categories = Depends(category_repo_dep),
    cache = Depends(reco_cache_dep),
):
    result = await get_category_recommendations_svc(products, categories, cache, store_id, category_id)
    return CategoryRecommendationsOut(**result)


@router.post("/{store_id}/{category_id}/generate", response_model=CategoryGenerateOut)
async def generate_for_category(
    store_id: str,
    category_id: str,
    products = Depends(product_repo_dep),
    orders = Depends(order_repo_dep),
    categories = Depends(category_repo_dep),
    cache = Depends(reco_cache_dep),
):
    recommended = await compute_category_recommendations(products, orders, categories, store_id, category_id)
    await cache.invalidate(store_id, KIND_CATEGORY, category_id)
    return CategoryGenerateOut(category_id=category_id, recommended_products=recommended)
