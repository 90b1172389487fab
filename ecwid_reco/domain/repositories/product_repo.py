# ecwid_reco/domain/repositories/product_repo.py

from __future__ import annotations
from typing import Iterable, Optional, List
from datetime import datetime, timezone
from motor.motor_asyncio import AsyncIOMotorDatabase
from ecwid_reco.domain.models.catalog import Product

class ProductRepo:
    """
    Product repository backed by the 'products' collection.
    Documents are scoped by store_id; (store_id, product_id) is unique.
    Derived fields cross_sells / upsells are written as arrays; legacy rows
    imported from the SQLite cache may still hold JSON text, which the model parses.
    """

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "products"):
        self.col = db[collection_name]

    async def list_products(self, store_id: str) -> List[Product]:
        # sorted so that price/frequency ties resolve the same way on every run
        cursor = self.col.find({"store_id": store_id}, {"_id": 0}).sort("product_id", 1)
        return [Product.model_validate(doc) async for doc in cursor]

    async def get_product(self, store_id: str, product_id: str) -> Optional[Product]:
        doc = await self.col.find_one({"store_id": store_id, "product_id": product_id}, {"_id": 0})
        return Product.model_validate(doc) if doc else None

    async def save_recommendations(
        self, store_id: str, product_id: str, cross_sell: List[str], upsell: List[str]
    ) -> None:
        """Overwrite the derived cross_sells / upsells of one product (single autocommit write)."""
        await self.col.update_one(
            {"store_id": store_id, "product_id": product_id},
            {
                "$set": {
                    "cross_sells": list(cross_sell),
                    "upsells": list(upsell),
                    "recommendations_updated_at": datetime.now(timezone.utc),
                }
            },
            upsert=False,  # never create a product from the engine
        )

    async def get_many_by_product_ids(self, store_id: str, ids: List[str]) -> List[Product]:
        """Resolve ids to products, keeping the order of `ids` and dropping unknown ones."""
        if not ids:
            return []
        cursor = self.col.find({"store_id": store_id, "product_id": {"$in": list(ids)}}, {"_id": 0})
        by_id = {}
        async for doc in cursor:
            p = Product.model_validate(doc)
            by_id[p.product_id] = p
        return [by_id[i] for i in ids if i in by_id]

    async def replace_all(self, store_id: str, products: Iterable[Product]) -> int:
        """Sync lifecycle: delete every cached product of the store, then insert the new set."""
        docs = [p.model_dump() for p in products if p.store_id == store_id]
        await self.col.delete_many({"store_id": store_id})
        if not docs:
            return 0
        res = await self.col.insert_many(docs, ordered=False)
        return len(res.inserted_ids)
