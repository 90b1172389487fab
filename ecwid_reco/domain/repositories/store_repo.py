from datetime import datetime, timezone
from typing import List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from ecwid_reco.domain.models.store import RecommendationSettings, Store


class StoreRepo:
    """Installed stores; rows are written by the OAuth flow, read here for token presence and widget settings."""

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "stores"):
        self.col = db[collection_name]

    async def find_by_store_id(self, store_id: str) -> Optional[Store]:
        doc = await self.col.find_one({"store_id": store_id}, {"_id": 0})
        return Store.model_validate(doc) if doc else None

    async def list_authenticated_store_ids(self) -> List[str]:
        cursor = self.col.find(
            {"access_token": {"$nin": [None, ""]}},
            {"_id": 0, "store_id": 1},
        ).sort("store_id", 1)
        return [str(doc["store_id"]) async for doc in cursor]

    async def get_recommendation_settings(self, store_id: str) -> RecommendationSettings:
        """Widget placement of a store; everything off when it never saved any (or the row is unreadable)."""
        doc = await self.col.find_one({"store_id": store_id}, {"_id": 0, "store_id": 1, "recommendation_settings": 1})
        if not doc:
            return RecommendationSettings()
        # legacy JSON-text settings are parsed by the Store model
        store = Store.model_validate(doc)
        return store.recommendation_settings or RecommendationSettings()

    async def update_recommendation_settings(self, store_id: str, settings: RecommendationSettings) -> None:
        await self.col.update_one(
            {"store_id": store_id},
            {
                "$set": {
                    "recommendation_settings": settings.model_dump(),
                    "updated_at": datetime.now(timezone.utc),
                }
            },
        )
