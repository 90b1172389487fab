from typing import Iterable, List
from motor.motor_asyncio import AsyncIOMotorDatabase
from ecwid_reco.domain.models.catalog import Order


class OrderRepo:
    """Cached orders of each store, only the ordered product ids matter here."""

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "orders"):
        self.col = db[collection_name]

    async def list_orders(self, store_id: str) -> List[Order]:
        cursor = self.col.find(
            {"store_id": store_id},
            {"_id": 0, "store_id": 1, "order_id": 1, "product_ids": 1},
        ).sort("order_id", 1)
        return [Order.model_validate(doc) async for doc in cursor]

    async def replace_all(self, store_id: str, orders: Iterable[Order]) -> int:
        docs = [o.model_dump() for o in orders if o.store_id == store_id]
        await self.col.delete_many({"store_id": store_id})
        if not docs:
            return 0
        res = await self.col.insert_many(docs, ordered=False)
        return len(res.inserted_ids)
