# ecwid_reco/domain/services/category_svc.py
import time
import logging
from typing import List, Optional

from ecwid_reco.domain.models.catalog import (
    BatchProgress,
    CatalogSnapshot,
    CategoryBatchSummary,
    Product,
    ProgressCallback,
    completion_rate,
)
from ecwid_reco.domain.services.constants import DEFAULT_CATEGORY, MAX_RECOMMENDATIONS, PROGRESS_EVERY
from ecwid_reco.domain.services.filters import (
    count_appearances,
    fill_to_capacity,
    find_most_expensive,
    in_stock,
    is_priced,
    rank_by_frequency,
    shares_category,
)
from ecwid_reco.domain.services.recommendation_svc import load_catalog

logger = logging.getLogger(__name__)


def _category_filter(category_id: str) -> Optional[frozenset]:
    return None if category_id == DEFAULT_CATEGORY else frozenset([category_id])


def _category_members(products: List[Product], category_id: str) -> set:
    """Ids that may be recommended for the category: in it (any, for "default"), in stock, priced."""
    categories = _category_filter(category_id)
    return {
        p.product_id for p in products
        if in_stock(p) and is_priced(p) and (categories is None or shares_category(p, categories))
    }


def get_most_expensive_products(snapshot: CatalogSnapshot, category_id: str) -> List[str]:
    return find_most_expensive(snapshot.products, categories=_category_filter(category_id))


def build_category_recommendations(snapshot: CatalogSnapshot, category_id: str) -> List[str]:
    """
    Best sellers of the category by number of orders; topped up with its most
    expensive products when fewer than MAX_RECOMMENDATIONS have sold.
    """
    if not snapshot.orders:
        return get_most_expensive_products(snapshot, category_id)

    counts = count_appearances(snapshot.orders)
    ranked = rank_by_frequency(counts, allowed=_category_members(snapshot.products, category_id))
    if len(ranked) >= MAX_RECOMMENDATIONS:
        return ranked[:MAX_RECOMMENDATIONS]

    combined = list(ranked)
    fill_to_capacity(combined, get_most_expensive_products(snapshot, category_id))
    return combined


async def compute_category_recommendations(
    product_repo,
    order_repo,
    category_repo,
    store_id: str,
    category_id: str,
    *,
    snapshot: Optional[CatalogSnapshot] = None,
) -> List[str]:
    """Compute and upsert the recommended products of one category ("default" = whole store)."""
    t0 = time.perf_counter()
    category_id = str(category_id)
    if snapshot is None:
        snapshot = await load_catalog(product_repo, order_repo, store_id)

    recommended = build_category_recommendations(snapshot, category_id)
    await category_repo.upsert_category_recommendations(store_id, category_id, recommended)

    logger.debug(
        "category recommendations done store_id=%s category_id=%s items=%s time=%.3fs",
        store_id, category_id, recommended, time.perf_counter() - t0,
    )
    return recommended


def discover_categories(snapshot: CatalogSnapshot) -> List[str]:
    """"default" first, then every category id carried by a product, in first-seen order."""
    seen = {DEFAULT_CATEGORY: None}
    for p in snapshot.products:
        for cid in p.category_ids:
            seen.setdefault(cid, None)
    return list(seen)


async def generate_all_category_recommendations(
    product_repo,
    order_repo,
    category_repo,
    store_id: str,
    *,
    on_progress: Optional[ProgressCallback] = None,
) -> CategoryBatchSummary:
    """
    Recompute every category of a store. A failing category is counted in
    `errors`; failing to read the catalog propagates.
    """
    t0 = time.perf_counter()
    logger.info("category batch start store_id=%s", store_id)

    snapshot = await load_catalog(product_repo, order_repo, store_id)
    categories = discover_categories(snapshot)
    total = len(categories)

    processed = successful = errors = 0
    for category_id in categories:
        try:
            await compute_category_recommendations(
                product_repo, order_repo, category_repo, store_id, category_id, snapshot=snapshot
            )
            successful += 1
        except Exception:
            errors += 1
            logger.exception("category recommendations failed store_id=%s category_id=%s", store_id, category_id)
        processed += 1

        if processed % PROGRESS_EVERY == 0:
            logger.info("category progress store_id=%s processed=%s/%s", store_id, processed, total)
            if on_progress:
                on_progress(BatchProgress(store_id=store_id, processed=processed, total=total))

    summary = CategoryBatchSummary(
        store_id=store_id,
        total_categories=total,
        processed=processed,
        successful=successful,
        errors=errors,
        completion_rate=completion_rate(successful, processed),
    )
    logger.info(
        "category batch done store_id=%s summary=%s total_time=%.3fs",
        store_id, summary.model_dump(), time.perf_counter() - t0,
    )
    return summary
