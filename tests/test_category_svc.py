"""
Tests for category recommendations (best sellers with a price fallback).
"""

import pytest

from ecwid_reco.domain.services.category_svc import (
    compute_category_recommendations,
    discover_categories,
    generate_all_category_recommendations,
)
from ecwid_reco.domain.services.recommendation_svc import load_catalog
from mocks import STORE, FakeCategoryRepo, FakeOrderRepo, FakeProductRepo, StorageError, order, product


@pytest.fixture
def categories() -> FakeCategoryRepo:
    return FakeCategoryRepo()


@pytest.mark.asyncio
async def test_default_without_orders_is_top_by_price(categories):
    products = FakeProductRepo([product("a", 5), product("b", 50), product("c", 20)])
    result = await compute_category_recommendations(products, FakeOrderRepo(), categories, STORE, "default")

    assert result == ["b", "c", "a"]
    assert categories.saved["default"] == ["b", "c", "a"]


@pytest.mark.asyncio
async def test_category_without_orders_only_uses_its_products(categories):
    products = FakeProductRepo([
        product("a", 5, ["1"]),
        product("b", 500, ["2"]),
        product("c", 20, ["1"]),
        product("d", 30, ["1"], stock=0),
        product("e", 40, ["1"]),
        product("f", 10, ["1"]),
    ])
    result = await compute_category_recommendations(products, FakeOrderRepo(), categories, STORE, "1")
    assert result == ["e", "c", "f"]


@pytest.mark.asyncio
async def test_frequency_ranking_when_enough_sellers(categories):
    products = FakeProductRepo([product(p, 10, ["1"]) for p in "abcd"] + [product("x", 99, ["1"])])
    orders = FakeOrderRepo([
        order("o1", "a", "b"),
        order("o2", "b", "c"),
        order("o3", "b", "c", "d"),
        order("o4", "c"),
    ])
    result = await compute_category_recommendations(products, orders, categories, STORE, "1")
    # b:3 c:3 (b seen first), then a:1 / d:1 -> a seen first
    assert result == ["b", "c", "a"]


@pytest.mark.asyncio
async def test_repeated_line_items_count_toward_frequency(categories):
    products = FakeProductRepo([product(p, 10, ["1"]) for p in "abc"])
    orders = FakeOrderRepo([order("o1", "a"), order("o2", "b", "b"), order("o3", "c")])
    result = await compute_category_recommendations(products, orders, categories, STORE, "1")
    assert result == ["b", "a", "c"]


@pytest.mark.asyncio
async def test_few_sellers_topped_up_by_price(categories):
    products = FakeProductRepo([
        product("seller", 5, ["1"]),
        product("pricey", 80, ["1"]),
        product("mid", 40, ["1"]),
        product("cheap", 1, ["1"]),
    ])
    orders = FakeOrderRepo([order("o1", "seller"), order("o2", "seller", "unknown")])
    result = await compute_category_recommendations(products, orders, categories, STORE, "1")
    assert result == ["seller", "pricey", "mid"]


@pytest.mark.asyncio
async def test_top_up_does_not_duplicate_sellers(categories):
    products = FakeProductRepo([product("p1", 80, ["1"]), product("p2", 40, ["1"])])
    orders = FakeOrderRepo([order("o1", "p1")])
    result = await compute_category_recommendations(products, orders, categories, STORE, "1")
    assert result == ["p1", "p2"]


@pytest.mark.asyncio
async def test_sellers_outside_category_or_unavailable_are_ignored(categories):
    products = FakeProductRepo([
        product("in", 10, ["1"]),
        product("other", 10, ["21"]),
        product("sold_out", 10, ["1"], stock=0),
        product("unpriced", None, ["1"]),
    ])
    orders = FakeOrderRepo([order(f"o{i}", "other", "sold_out", "unpriced") for i in range(5)] + [order("o9", "in")])
    result = await compute_category_recommendations(products, orders, categories, STORE, "1")
    assert result == ["in"]


@pytest.mark.asyncio
async def test_default_counts_every_product(categories):
    products = FakeProductRepo([product("a", 1, ["1"]), product("b", 2, ["2"]), product("c", 3, []), product("d", 4, ["3"])])
    orders = FakeOrderRepo([order("o1", "c", "a"), order("o2", "c", "b"), order("o3", "b")])
    result = await compute_category_recommendations(products, orders, categories, STORE, "default")
    assert result == ["c", "b", "a"]


@pytest.mark.asyncio
async def test_numeric_category_ids_are_normalized(categories):
    products = FakeProductRepo([product("a", 10, [7]), product("b", 20, ["7"])])
    result = await compute_category_recommendations(products, FakeOrderRepo(), categories, STORE, 7)
    assert result == ["b", "a"]
    assert "7" in categories.saved


@pytest.mark.asyncio
async def test_discover_categories_default_first():
    products = FakeProductRepo([
        product("a", 1, ["3", "1"]),
        product("b", 1, ["1", "2"]),
        product("c", 1, []),
    ])
    snapshot = await load_catalog(products, FakeOrderRepo(), STORE)
    assert discover_categories(snapshot) == ["default", "3", "1", "2"]


@pytest.mark.asyncio
async def test_generate_all_categories_summary(categories):
    products = FakeProductRepo([product("a", 10, ["1"]), product("b", 20, ["2"]), product("c", 30, ["1", "2"])])
    summary = await generate_all_category_recommendations(products, FakeOrderRepo(), categories, STORE)

    assert summary.total_categories == 3
    assert summary.processed == 3
    assert summary.successful == 3
    assert summary.errors == 0
    assert summary.completion_rate == "100.00%"
    assert categories.saved == {"default": ["c", "b", "a"], "1": ["c", "a"], "2": ["c", "b"]}


@pytest.mark.asyncio
async def test_generate_all_categories_counts_failures():
    categories = FakeCategoryRepo(fail_on=["2"])
    products = FakeProductRepo([product("a", 10, ["1"]), product("b", 20, ["2"])])
    summary = await generate_all_category_recommendations(products, FakeOrderRepo(), categories, STORE)

    assert summary.processed == 3
    assert summary.successful == 2
    assert summary.errors == 1
    assert summary.completion_rate == "66.67%"
    assert "1" in categories.saved and "default" in categories.saved


@pytest.mark.asyncio
async def test_generate_all_categories_discovery_failure_propagates(categories):
    with pytest.raises(StorageError):
        await generate_all_category_recommendations(FakeProductRepo(fail_list=True), FakeOrderRepo(), categories, STORE)


@pytest.mark.asyncio
async def test_generate_all_categories_is_idempotent(categories):
    products = FakeProductRepo([product(f"p{i}", i * 7 % 13 + 1, [str(i % 4)]) for i in range(12)])
    orders = FakeOrderRepo([order("o1", "p1", "p2"), order("o2", "p2", "p5"), order("o3", "p9")])
    await generate_all_category_recommendations(products, orders, categories, STORE)
    first = dict(categories.saved)
    await generate_all_category_recommendations(products, orders, categories, STORE)
    assert categories.saved == first
