# ecwid_reco/api/v1/routers/settings.py
import logging

from fastapi import APIRouter, Depends
from ecwid_reco.api.deps import require_store, store_repo_dep
from ecwid_reco.api.v1.schemas.reco import SettingsOut
from ecwid_reco.domain.models.store import RecommendationSettings, Store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recommendation-settings", tags=["settings"])


@router.get("/{store_id}", response_model=SettingsOut)
async def get_recommendation_settings(
    store: Store = Depends(require_store),
    stores = Depends(store_repo_dep),
):
    # Stores that never saved settings get everything switched off
    return SettingsOut(settings=await stores.get_recommendation_settings(store.store_id))


@router.post("/{store_id}", response_model=SettingsOut)
async def update_recommendation_settings(
    settings: RecommendationSettings,
    store: Store = Depends(require_store),
    stores = Depends(store_repo_dep),
):
    await stores.update_recommendation_settings(store.store_id, settings)
    logger.info("settings updated store_id=%s settings=%s", store.store_id, settings.model_dump())
    return SettingsOut(settings=settings)
