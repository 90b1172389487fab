import pytest

from ecwid_reco.jobs.regenerate import build_parser, run_store
from ecwid_reco.domain.repositories.reco_cache_repo import RecoCacheRepo
from mocks import STORE, FakeCategoryRepo, FakeOrderRepo, FakeProductRepo, FakeRedis, order, product


@pytest.fixture
def repos():
    products = FakeProductRepo([product("A", 10, ["1"]), product("B", 15, ["1"]), product("C", 50, ["2"])])
    return products, FakeOrderRepo([order("o1", "A", "B")]), FakeCategoryRepo()


def test_parser_requires_a_target():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
    args = build_parser().parse_args(["--store-id", "1", "--store-id", "2", "--skip-categories"])
    assert args.store_ids == ["1", "2"]
    assert args.skip_categories and not args.skip_products


@pytest.mark.asyncio
async def test_run_store_reports_both_batches(repos):
    products, orders, categories = repos
    report = await run_store(products, orders, categories, STORE)

    assert report["store_id"] == STORE
    assert report["products"]["processed"] == 3
    assert report["categories"]["total_categories"] == 3
    assert set(categories.saved) == {"default", "1", "2"}


@pytest.mark.asyncio
async def test_run_store_skips(repos):
    products, orders, categories = repos
    report = await run_store(products, orders, categories, STORE, skip_products=True)
    assert "products" not in report
    assert products.save_calls == 0


@pytest.mark.asyncio
async def test_run_store_records_batch_failure():
    products = FakeProductRepo(fail_list=True)
    report = await run_store(products, FakeOrderRepo(), FakeCategoryRepo(), STORE)
    assert "error" in report["products"]
    assert "error" in report["categories"]


@pytest.mark.asyncio
async def test_run_store_drops_cached_storefront_reads(repos):
    products, orders, categories = repos
    redis = FakeRedis()
    redis.data.update({
        f"reco:{STORE}:product:A": "{}",
        f"reco:{STORE}:category:default": "{}",
        "reco:2002:product:A": "{}",
    })
    await run_store(products, orders, categories, STORE, cache=RecoCacheRepo(redis, ttl=60))
    assert list(redis.data) == ["reco:2002:product:A"]


@pytest.mark.asyncio
async def test_run_store_keeps_cache_when_batch_fails():
    redis = FakeRedis()
    redis.data[f"reco:{STORE}:product:A"] = "{}"
    await run_store(
        FakeProductRepo(fail_list=True), FakeOrderRepo(), FakeCategoryRepo(), STORE,
        cache=RecoCacheRepo(redis, ttl=60), skip_categories=True,
    )
    assert f"reco:{STORE}:product:A" in redis.data
