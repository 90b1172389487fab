import pytest

from ecwid_reco.domain.models.store import RecommendationSettings
from ecwid_reco.domain.repositories.store_repo import StoreRepo
from mocks import FakeCollection


@pytest.fixture
def stores() -> FakeCollection:
    return FakeCollection([
        {"store_id": "1", "access_token": "t"},
        {"store_id": "2", "access_token": "t", "recommendation_settings": '{"showCrossSells": true}'},
        {"store_id": "3", "access_token": "t", "recommendation_settings": "{broken"},
    ])


@pytest.fixture
def repo(stores) -> StoreRepo:
    return StoreRepo({"stores": stores})


@pytest.mark.asyncio
async def test_settings_default_when_never_saved(repo):
    assert await repo.get_recommendation_settings("1") == RecommendationSettings()
    assert await repo.get_recommendation_settings("unknown") == RecommendationSettings()


@pytest.mark.asyncio
async def test_settings_read_from_legacy_json_text(repo):
    settings = await repo.get_recommendation_settings("2")
    assert settings.show_cross_sells is True
    assert settings.show_upsells is False


@pytest.mark.asyncio
async def test_unreadable_settings_fall_back_to_defaults(repo):
    assert await repo.get_recommendation_settings("3") == RecommendationSettings()


@pytest.mark.asyncio
async def test_saved_settings_read_back(repo, stores):
    saved = RecommendationSettings(show_upsells=True, upsell_locations={"cart_page": True})
    await repo.update_recommendation_settings("1", saved)

    assert stores.docs[0]["recommendation_settings"]["show_upsells"] is True
    assert await repo.get_recommendation_settings("1") == saved
