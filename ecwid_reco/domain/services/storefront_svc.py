# ecwid_reco/domain/services/storefront_svc.py
import time
import logging
from typing import Any, Dict, List, Optional

from ecwid_reco.domain.models.catalog import Product
from ecwid_reco.domain.repositories.reco_cache_repo import KIND_CATEGORY, KIND_PRODUCT

logger = logging.getLogger(__name__)


def _product_card(p: Product) -> Dict[str, Any]:
    # what the storefront widget needs to render a tile
    return {
        "product_id": p.product_id,
        "name": p.name,
        "sku": p.sku,
        "price": p.price,
        "image_url": p.image_url,
    }


async def _resolve(product_repo, store_id: str, ids: List[str]) -> List[Dict[str, Any]]:
    products = await product_repo.get_many_by_product_ids(store_id, ids)
    return [_product_card(p) for p in products]


async def get_product_recommendations_svc(product_repo, cache, store_id: str, product_id: str) -> Optional[Dict[str, Any]]:
    """
    Stored cross-sells / upsells of a product resolved to product cards, stored order kept.
    None when the product is not in the store's cache.
    """
    t0 = time.perf_counter()
    cached = await cache.get(store_id, KIND_PRODUCT, product_id)
    if cached is not None:
        logger.info("storefront cache_hit store_id=%s product_id=%s", store_id, product_id)
        return cached

    product = await product_repo.get_product(store_id, product_id)
    if product is None:
        logger.info("storefront product not found store_id=%s product_id=%s", store_id, product_id)
        return None

    result = {
        "source_product_id": product_id,
        "cross_sells": await _resolve(product_repo, store_id, product.cross_sells),
        "upsells": await _resolve(product_repo, store_id, product.upsells),
    }
    await cache.set(store_id, KIND_PRODUCT, product_id, result)
    logger.info(
        "storefront product done store_id=%s product_id=%s cross_sells=%s upsells=%s total_time=%.3fs",
        store_id, product_id, len(result["cross_sells"]), len(result["upsells"]), time.perf_counter() - t0,
    )
    return result


async def get_category_recommendations_svc(product_repo, category_repo, cache, store_id: str, category_id: str) -> Dict[str, Any]:
    """Stored recommended products of a category resolved to product cards; empty if never computed."""
    cached = await cache.get(store_id, KIND_CATEGORY, category_id)
    if cached is not None:
        logger.info("storefront cache_hit store_id=%s category_id=%s", store_id, category_id)
        return cached

    category = await category_repo.get_category(store_id, category_id)
    ids = category.recommended_products if category else []
    result = {
        "category_id": category_id,
        "products": await _resolve(product_repo, store_id, ids),
    }
    await cache.set(store_id, KIND_CATEGORY, category_id, result)
    logger.info("storefront category done store_id=%s category_id=%s items=%s", store_id, category_id, len(result["products"]))
    return result
