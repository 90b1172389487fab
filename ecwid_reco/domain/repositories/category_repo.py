from datetime import datetime, timezone
from typing import List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from ecwid_reco.domain.models.catalog import Category


class CategoryRepo:
    """
    Per-store category rows holding the derived recommended_products list.
    Rows are created on first write (upsert), including the "default" pseudo-category.
    """

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "categories"):
        self.col = db[collection_name]

    async def upsert_category_recommendations(self, store_id: str, category_id: str, product_ids: List[str]) -> None:
        await self.col.update_one(
            {"store_id": store_id, "category_id": category_id},
            {
                "$set": {
                    "recommended_products": list(product_ids),
                    "updated_at": datetime.now(timezone.utc),
                }
            },
            upsert=True,
        )

    async def get_category(self, store_id: str, category_id: str) -> Optional[Category]:
        doc = await self.col.find_one({"store_id": store_id, "category_id": category_id}, {"_id": 0})
        return Category.model_validate(doc) if doc else None
