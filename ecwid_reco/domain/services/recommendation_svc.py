# ecwid_reco/domain/services/recommendation_svc.py
"""
Per-product related products, filled tier by tier until MAX_RECOMMENDATIONS.

Cross-sell:
  1. products bought together with the source (order co-occurrence)
  2. price-tier upsells not already chosen
  3. most expensive in the same category
  4. most expensive in the store

Upsell (computed on its own, cross-sell picks are not excluded):
  1. price-tier upsells (>= 20% dearer, same category, cheapest first)
  2. most expensive in the same category
  3. most expensive in the store
"""
import time
import logging
from typing import List, Optional

from ecwid_reco.domain.models.catalog import (
    BatchProgress,
    BatchSummary,
    CatalogSnapshot,
    Product,
    ProductRecommendations,
    ProgressCallback,
    completion_rate,
)
from ecwid_reco.domain.services.constants import (
    MAX_RECOMMENDATIONS,
    PROGRESS_EVERY,
    STRATEGY_CATEGORY,
    STRATEGY_CROSS_SELL,
    STRATEGY_CROSS_SELL_CATEGORY,
    STRATEGY_CROSS_SELL_FALLBACK,
    STRATEGY_CROSS_SELL_GLOBAL,
    STRATEGY_GLOBAL,
    STRATEGY_UPSELL,
)
from ecwid_reco.domain.services.filters import (
    count_co_occurrences,
    fill_to_capacity,
    find_most_expensive,
    find_upsell_products,
    in_stock,
    rank_by_frequency,
)

logger = logging.getLogger(__name__)


async def load_catalog(product_repo, order_repo, store_id: str) -> CatalogSnapshot:
    t0 = time.perf_counter()
    products = await product_repo.list_products(store_id)
    orders = await order_repo.list_orders(store_id)
    logger.info(
        "catalog loaded store_id=%s products=%s orders=%s db_time=%.3fs",
        store_id, len(products), len(orders), time.perf_counter() - t0,
    )
    return CatalogSnapshot(store_id=store_id, products=products, orders=orders)


def find_cross_sell_products(source: Product, snapshot: CatalogSnapshot) -> List[str]:
    """
    Products most often ordered together with the source. Only products still in
    the catalog and in stock are kept.
    """
    counts = count_co_occurrences(snapshot.orders, source.product_id)
    if not counts:
        return []
    available = {p.product_id for p in snapshot.products if in_stock(p)}
    available.discard(source.product_id)
    return rank_by_frequency(counts, allowed=available)[:MAX_RECOMMENDATIONS]


def build_recommendations(source: Product, snapshot: CatalogSnapshot) -> ProductRecommendations:
    """Pure part of the engine: both lists for one source product over a catalog snapshot."""
    products = snapshot.products
    categories = source.category_set
    strategies: List[str] = []

    def _add(chosen: List[str], candidates: List[str], label: str) -> None:
        added = fill_to_capacity(chosen, candidates)
        if added:
            strategies.append(f"{label}({added})")

    # --- cross-sell ---
    cross: List[str] = []
    _add(cross, find_cross_sell_products(source, snapshot), STRATEGY_CROSS_SELL)
    if len(cross) < MAX_RECOMMENDATIONS:
        _add(cross, find_upsell_products(source, products, exclude=cross), STRATEGY_CROSS_SELL_FALLBACK)
    if len(cross) < MAX_RECOMMENDATIONS:
        _add(
            cross,
            find_most_expensive(products, categories=categories, exclude=[source.product_id, *cross]),
            STRATEGY_CROSS_SELL_CATEGORY,
        )
    if len(cross) < MAX_RECOMMENDATIONS:
        _add(cross, find_most_expensive(products, exclude=[source.product_id, *cross]), STRATEGY_CROSS_SELL_GLOBAL)

    # --- upsell ---
    up: List[str] = []
    _add(up, find_upsell_products(source, products), STRATEGY_UPSELL)
    if len(up) < MAX_RECOMMENDATIONS:
        _add(
            up,
            find_most_expensive(products, categories=categories, exclude=[source.product_id, *up]),
            STRATEGY_CATEGORY,
        )
    if len(up) < MAX_RECOMMENDATIONS:
        _add(up, find_most_expensive(products, exclude=[source.product_id, *up]), STRATEGY_GLOBAL)

    return ProductRecommendations(
        source_product_id=source.product_id,
        cross_sell=cross,
        upsell=up,
        strategies=strategies,
    )


async def compute_recommendations(
    product_repo,
    order_repo,
    store_id: str,
    product_id: str,
    *,
    snapshot: Optional[CatalogSnapshot] = None,
) -> ProductRecommendations:
    """
    Compute cross-sell and upsell lists for one product and write them back onto it.

    A missing source product is not an error: empty lists, nothing written.
    Storage errors propagate; the batch orchestrator counts them.
    """
    t0 = time.perf_counter()
    if snapshot is None:
        snapshot = await load_catalog(product_repo, order_repo, store_id)

    source = snapshot.get(product_id)
    if source is None:
        logger.warning("recommendations source product not found store_id=%s product_id=%s", store_id, product_id)
        return ProductRecommendations(source_product_id=product_id)

    result = build_recommendations(source, snapshot)
    await product_repo.save_recommendations(store_id, product_id, result.cross_sell, result.upsell)

    logger.debug(
        "recommendations done store_id=%s product_id=%s cross_sell=%s upsell=%s strategies=%s time=%.3fs",
        store_id, product_id, result.cross_sell, result.upsell, ",".join(result.strategies) or "none",
        time.perf_counter() - t0,
    )
    return result


async def generate_all_recommendations(
    product_repo,
    order_repo,
    store_id: str,
    *,
    on_progress: Optional[ProgressCallback] = None,
) -> BatchSummary:
    """
    Recompute recommendations for every product of a store, one product at a time.

    A failing product is logged and counted in `errors`; the run continues.
    Failing to read the catalog itself propagates to the caller.
    """
    t0 = time.perf_counter()
    logger.info("recommendations batch start store_id=%s", store_id)

    snapshot = await load_catalog(product_repo, order_repo, store_id)
    product_ids = [p.product_id for p in snapshot.products]
    total = len(product_ids)

    processed = successful = errors = 0
    for pid in product_ids:
        processed += 1
        try:
            result = await compute_recommendations(product_repo, order_repo, store_id, pid, snapshot=snapshot)
            if result.combined:
                successful += 1
        except Exception:
            errors += 1
            logger.exception("recommendations product failed store_id=%s product_id=%s", store_id, pid)

        if processed % PROGRESS_EVERY == 0:
            logger.info("recommendations progress store_id=%s processed=%s/%s", store_id, processed, total)
            if on_progress:
                on_progress(BatchProgress(store_id=store_id, processed=processed, total=total))

    summary = BatchSummary(
        store_id=store_id,
        total_products=total,
        processed=processed,
        successful=successful,
        errors=errors,
        completion_rate=completion_rate(successful, total),
    )
    logger.info(
        "recommendations batch done store_id=%s summary=%s total_time=%.3fs",
        store_id, summary.model_dump(), time.perf_counter() - t0,
    )
    return summary
