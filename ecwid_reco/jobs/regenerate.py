"""Recompute related products for one store or every installed store.

Scheduled counterpart of the generate-all endpoints, run after a catalog sync:

    python -m ecwid_reco.jobs.regenerate --store-id 1234567
    python -m ecwid_reco.jobs.regenerate --all-stores --skip-categories
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Dict, List, Optional

from ecwid_reco.core.config import get_settings
from ecwid_reco.core.logging import configure_logging
from ecwid_reco.db import mongo, redis as r
from ecwid_reco.domain.models.catalog import BatchProgress
from ecwid_reco.domain.repositories.category_repo import CategoryRepo
from ecwid_reco.domain.repositories.order_repo import OrderRepo
from ecwid_reco.domain.repositories.product_repo import ProductRepo
from ecwid_reco.domain.repositories.reco_cache_repo import KIND_CATEGORY, KIND_PRODUCT, RecoCacheRepo
from ecwid_reco.domain.repositories.store_repo import StoreRepo
from ecwid_reco.domain.services.category_svc import generate_all_category_recommendations
from ecwid_reco.domain.services.recommendation_svc import generate_all_recommendations

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Regenerate cross-sell, upsell and category recommendations")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--store-id", action="append", dest="store_ids", help="Store to process (repeatable)")
    target.add_argument("--all-stores", action="store_true", help="Every store with an access token")
    parser.add_argument("--skip-products", action="store_true", help="Do not regenerate per-product lists")
    parser.add_argument("--skip-categories", action="store_true", help="Do not regenerate category lists")
    return parser


def _log_progress(event: BatchProgress) -> None:
    logger.info("job progress store_id=%s %s/%s", event.store_id, event.processed, event.total)


async def run_store(
    products,
    orders,
    categories,
    store_id: str,
    *,
    cache: Optional[RecoCacheRepo] = None,
    skip_products: bool = False,
    skip_categories: bool = False,
) -> Dict:
    """
    Run both batches for one store. A batch that fails as a whole is reported, not raised.
    After a batch completes, the store's cached storefront payloads of that kind are dropped.
    """
    report: Dict = {"store_id": store_id}
    if not skip_products:
        try:
            summary = await generate_all_recommendations(products, orders, store_id, on_progress=_log_progress)
            report["products"] = summary.model_dump()
            if cache is not None:
                await cache.invalidate_store(store_id, KIND_PRODUCT)
        except Exception as e:
            logger.exception("job product batch failed store_id=%s", store_id)
            report["products"] = {"error": str(e)}
    if not skip_categories:
        try:
            summary = await generate_all_category_recommendations(products, orders, categories, store_id, on_progress=_log_progress)
            report["categories"] = summary.model_dump()
            if cache is not None:
                await cache.invalidate_store(store_id, KIND_CATEGORY)
        except Exception as e:
            logger.exception("job category batch failed store_id=%s", store_id)
            report["categories"] = {"error": str(e)}
    return report


async def run(args: argparse.Namespace) -> List[Dict]:
    await mongo.connect()
    await r.connect()
    try:
        db = mongo.get_db()
        cache = RecoCacheRepo(r.get_redis(), ttl=get_settings().recommendations_cache_ttl)
        products, orders, categories = ProductRepo(db), OrderRepo(db), CategoryRepo(db)
        store_ids: Optional[List[str]] = args.store_ids
        if args.all_stores:
            store_ids = await StoreRepo(db).list_authenticated_store_ids()
        logger.info("job start stores=%s", store_ids)

        reports = []
        for store_id in store_ids or []:
            reports.append(
                await run_store(
                    products, orders, categories, store_id,
                    cache=cache,
                    skip_products=args.skip_products, skip_categories=args.skip_categories,
                )
            )
        return reports
    finally:
        await r.disconnect()
        await mongo.disconnect()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(level=logging.DEBUG if settings.DEBUG else logging.INFO, stream=sys.stderr)

    reports = asyncio.run(run(args))
    print(json.dumps(reports, indent=2))

    failed = any("error" in r.get(k, {}) for r in reports for k in ("products", "categories"))
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
