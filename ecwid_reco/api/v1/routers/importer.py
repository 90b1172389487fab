from fastapi import APIRouter, Body, Depends, HTTPException
from typing import Any, Dict, List, Tuple
import logging
from pydantic import BaseModel, ValidationError
from pymongo.errors import ServerSelectionTimeoutError, AutoReconnect, ConnectionFailure

from ecwid_reco.api.deps import order_repo_dep, product_repo_dep, reco_cache_dep, require_store
from ecwid_reco.api.v1.schemas.reco import ImportResult
from ecwid_reco.domain.models.catalog import Order, Product

# Sync jobs push a store's whole catalog/order history here; the previous rows are replaced.
router = APIRouter(prefix="/import", tags=["import"], dependencies=[Depends(require_store)])

MAX_IMPORT_DOCS = 50_000  # per request

logger = logging.getLogger(__name__)


def _validate_docs(store_id: str, docs: List[Dict[str, Any]], model: type[BaseModel]) -> Tuple[list, int]:
    """Stamp store_id on every doc and validate it; invalid docs are skipped and counted."""
    if len(docs) > MAX_IMPORT_DOCS:
        raise HTTPException(status_code=413, detail=f"Too many documents (> {MAX_IMPORT_DOCS}).")
    valid, rejected = [], 0
    for i, doc in enumerate(docs):
        try:
            valid.append(model.model_validate({**doc, "store_id": store_id}))
        except ValidationError as e:
            rejected += 1
            logger.warning("[import] rejected doc index=%s err=%s", i, e.errors()[:3])
    return valid, rejected


async def _replace(repo, store_id: str, items: list) -> int:
    try:
        return await repo.replace_all(store_id, items)
    except (ServerSelectionTimeoutError, AutoReconnect, ConnectionFailure) as e:
        logger.error("[import] replace failed store_id=%s err=%s", store_id, e)
        raise HTTPException(status_code=503, detail="MongoDB unavailable (connection/TLS).")


@router.post("/{store_id}/products", response_model=ImportResult)
async def import_products(
    store_id: str,
    docs: List[Dict[str, Any]] = Body(..., description="JSON array of products (product_id, price, stock, category_ids, ...)."),
    products = Depends(product_repo_dep),
    cache = Depends(reco_cache_dep),
):
    items, rejected = _validate_docs(store_id, docs, Product)
    inserted = await _replace(products, store_id, items)
    await cache.invalidate_store(store_id)
    logger.info("[import] products store_id=%s inserted=%s rejected=%s", store_id, inserted, rejected)
    return ImportResult(store_id=store_id, collection="products", inserted=inserted, rejected=rejected)


@router.post("/{store_id}/orders", response_model=ImportResult)
async def import_orders(
    store_id: str,
    docs: List[Dict[str, Any]] = Body(..., description="JSON array of orders (order_id, product_ids)."),
    orders = Depends(order_repo_dep),
):
    items, rejected = _validate_docs(store_id, docs, Order)
    inserted = await _replace(orders, store_id, items)
    logger.info("[import] orders store_id=%s inserted=%s rejected=%s", store_id, inserted, rejected)
    return ImportResult(store_id=store_id, collection="orders", inserted=inserted, rejected=rejected)
